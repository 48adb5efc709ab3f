"""Predicate combinators and comparisons.

Checks run in order and stop at the first one that settles the answer
synchronously. Checks that returned pending results before that point have
already started, so they are awaited before the answer is given.
"""

from __future__ import annotations

import operator
from collections.abc import Callable, Iterable, Sequence
from typing import Any

from shapefn.kernel.errors import InvalidConfigurationError, InvalidOperandError, require_callable
from shapefn.kernel.pending import MaybeAwaitable, all_pending, continue_with, is_pending
from shapefn.kernel.shapes import ITERATED_SHAPES, Shape, classify, describe, values_of

Predicate = Callable[[Any], Any]


def _decide(checks: Iterable[Any], stop_on: bool) -> MaybeAwaitable[bool]:
    """Fold truthiness with short-circuit on ``stop_on``.

    stop_on=True gives "any", stop_on=False gives "all".
    """
    pending: list[Any] = []
    for check in checks:
        if is_pending(check):
            pending.append(check)
        elif bool(check) is stop_on:
            if pending:
                return continue_with(all_pending(pending), lambda _: stop_on)
            return stop_on
    if pending:
        return continue_with(
            all_pending(pending),
            lambda resolved: stop_on if any(bool(r) is stop_on for r in resolved) else not stop_on,
        )
    return not stop_on


def _elements(value: Any, where: str) -> Iterable[Any]:
    shape = classify(value)
    if shape in ITERATED_SHAPES or shape is Shape.MAP or shape is Shape.OBJECT:
        return values_of(value)
    raise InvalidOperandError(f"{where}: cannot test {describe(value)}", value)


def any_(predicate: Predicate) -> Callable[[Any], MaybeAwaitable[bool]]:
    """True when predicate holds for some element (mappings: some value).

    Example:
        >>> any_(lambda n: n > 2)([1, 2, 3])
        True
    """
    require_callable(predicate, "any_(predicate)", "predicate")

    def testing_any(value: Any) -> MaybeAwaitable[bool]:
        elements = _elements(value, "any_(...)(value)")
        return _decide((predicate(item) for item in elements), True)

    return testing_any


def all_(predicate: Predicate) -> Callable[[Any], MaybeAwaitable[bool]]:
    """True when predicate holds for every element; True when empty."""
    require_callable(predicate, "all_(predicate)", "predicate")

    def testing_all(value: Any) -> MaybeAwaitable[bool]:
        elements = _elements(value, "all_(...)(value)")
        return _decide((predicate(item) for item in elements), False)

    return testing_all


def _require_predicates(predicates: Any, where: str) -> list[Predicate]:
    if not isinstance(predicates, (list, tuple)):
        raise InvalidConfigurationError(
            f"{where}: expected a list of predicates, got {describe(predicates)}", predicates
        )
    if not predicates:
        raise InvalidConfigurationError(f"{where}: expected at least one predicate", predicates)
    for index, predicate in enumerate(predicates):
        require_callable(predicate, where, f"predicates[{index}]")
    return list(predicates)


def and_(predicates: Sequence[Predicate]) -> Predicate:
    """True when every predicate holds for the input."""
    checks = _require_predicates(predicates, "and_(predicates)")

    def conjunction(value: Any) -> MaybeAwaitable[bool]:
        return _decide((check(value) for check in checks), False)

    return conjunction


def or_(predicates: Sequence[Predicate]) -> Predicate:
    """True when some predicate holds for the input."""
    checks = _require_predicates(predicates, "or_(predicates)")

    def disjunction(value: Any) -> MaybeAwaitable[bool]:
        return _decide((check(value) for check in checks), True)

    return disjunction


def not_(predicate: Predicate) -> Predicate:
    require_callable(predicate, "not_(predicate)", "predicate")

    def negating(value: Any) -> MaybeAwaitable[bool]:
        return continue_with(predicate(value), operator.not_)

    return negating


def _comparison(name: str, compare: Callable[[Any, Any], bool]) -> Callable[[Any, Any], Predicate]:
    def build(left: Any, right: Any) -> Predicate:
        """Each side is a function of the input or a constant."""

        def comparing(value: Any) -> MaybeAwaitable[bool]:
            lhs = left(value) if callable(left) else left
            rhs = right(value) if callable(right) else right
            return continue_with(all_pending([lhs, rhs]), lambda sides: compare(*sides))

        return comparing

    build.__name__ = build.__qualname__ = name
    return build


eq = _comparison("eq", operator.eq)
gt = _comparison("gt", operator.gt)
lt = _comparison("lt", operator.lt)
gte = _comparison("gte", operator.ge)
lte = _comparison("lte", operator.le)
