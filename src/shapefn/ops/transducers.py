"""Reducer-position forms of map, filter and flat_map.

When one of these operators is applied to a reducer instead of a container,
it returns a new reducer that transforms each item before delegating. The
wrapping is contravariant: in ``map(f)(filter(p)(r))`` items are mapped by
``f`` first and filtered by ``p`` second.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from shapefn.kernel.pending import MaybeAwaitable, all_pending, continue_with
from shapefn.ops.reduce import fold_inner

Reducer = Callable[[Any, Any], MaybeAwaitable[Any]]


def map_reducer(mapper: Callable[[Any], Any], reducer: Reducer) -> Reducer:
    """Reducer that feeds ``mapper(item)`` to reducer."""

    def mapping_reducer(accumulator: Any, item: Any) -> MaybeAwaitable[Any]:
        return continue_with(mapper(item), lambda mapped: reducer(accumulator, mapped))

    return mapping_reducer


def filter_reducer(predicate: Callable[[Any], Any], reducer: Reducer) -> Reducer:
    """Reducer that skips items failing predicate.

    A pending accumulator is resolved together with the predicate.
    """

    def _step(resolved: list[Any], item: Any) -> MaybeAwaitable[Any]:
        keep, accumulator = resolved
        return reducer(accumulator, item) if keep else accumulator

    def filtering_reducer(accumulator: Any, item: Any) -> MaybeAwaitable[Any]:
        return continue_with(
            all_pending([predicate(item), accumulator]),
            lambda resolved: _step(resolved, item),
        )

    return filtering_reducer


def flat_map_reducer(mapper: Callable[[Any], Any], reducer: Reducer) -> Reducer:
    """Reducer that folds every element of ``mapper(item)`` into the accumulator.

    Containers contribute their elements (values for mappings); anything
    else is folded in as a single element.
    """
    def flat_mapping_reducer(accumulator: Any, item: Any) -> MaybeAwaitable[Any]:
        return continue_with(mapper(item), lambda inner: fold_inner(reducer, accumulator, inner))

    return flat_mapping_reducer
