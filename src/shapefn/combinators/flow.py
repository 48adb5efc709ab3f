"""Flow combinators: pipe, fork, assign, tap, try_catch, switch_case.

Each combinator returns a plain value when every function it calls does,
and a pending result as soon as one of them returns one.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Any

from shapefn.kernel.errors import InvalidConfigurationError, InvalidOperandError, require_callable
from shapefn.kernel.pending import MaybeAwaitable, all_pending, catch_pending, continue_with, is_pending
from shapefn.kernel.shapes import describe

Fn = Callable[..., Any]


def _require_functions(fns: Any, where: str, minimum: int = 1) -> None:
    if not isinstance(fns, (list, tuple)):
        raise InvalidConfigurationError(f"{where}: expected a list of functions, got {describe(fns)}", fns)
    if len(fns) < minimum:
        raise InvalidConfigurationError(f"{where}: expected at least {minimum} function(s)", fns)
    for index, fn in enumerate(fns):
        require_callable(fn, where, f"fns[{index}]")


def pipe(fns: Sequence[Fn]) -> Fn:
    """Chain functions, feeding each result to the next.

    When the first argument is itself a function (a reducer), the chain
    runs right to left instead. That makes a pipe of transducers read in
    the order items flow: ``pipe([map(f), filter(p)])(reducer)`` maps
    first, then filters.

    Raises:
        InvalidConfigurationError: fns is not a non-empty list of functions.
    """
    _require_functions(fns, "pipe(fns)")
    fns = list(fns)

    def piping(*args: Any, **kwargs: Any) -> Any:
        chain = fns[::-1] if args and callable(args[0]) else fns
        output = chain[0](*args, **kwargs)
        for fn in chain[1:]:
            output = continue_with(output, fn)
        return output

    return piping


def fork(fns: Sequence[Fn] | Mapping[str, Fn]) -> Fn:
    """Call several functions on the same input, concurrently.

    A list of functions gives a list of results, a dict gives a dict with
    the same keys.
    """
    if isinstance(fns, Mapping):
        if not fns:
            raise InvalidConfigurationError("fork(fns): expected at least one function", fns)
        for key, fn in fns.items():
            require_callable(fn, "fork(fns)", f"fns[{key!r}]")
        functions = dict(fns)

        def forking_mapping(value: Any) -> MaybeAwaitable[dict[str, Any]]:
            keys = list(functions)
            return continue_with(
                all_pending([functions[key](value) for key in keys]),
                lambda results: dict(zip(keys, results)),
            )

        return forking_mapping

    _require_functions(fns, "fork(fns)")
    sequence = list(fns)

    def forking(value: Any) -> MaybeAwaitable[list[Any]]:
        return all_pending([fn(value) for fn in sequence])

    return forking


def fork_series(fns: Sequence[Fn]) -> Fn:
    """fork for lists, one function at a time."""
    _require_functions(fns, "fork.series(fns)")
    sequence = list(fns)

    def forking_in_series(value: Any) -> MaybeAwaitable[list[Any]]:
        results: list[Any] = []
        for index, fn in enumerate(sequence):
            result = fn(value)
            if is_pending(result):
                return _fork_series_async(sequence[index + 1 :], value, results, result)
            results.append(result)
        return results

    return forking_in_series


async def _fork_series_async(rest: list[Fn], value: Any, results: list[Any], pending: Any) -> list[Any]:
    results.append(await pending)
    for fn in rest:
        result = fn(value)
        if is_pending(result):
            result = await result
        results.append(result)
    return results


def assign(fns: Mapping[str, Fn]) -> Fn:
    """Merge fork(fns)(mapping) into a copy of mapping."""
    if not isinstance(fns, Mapping):
        raise InvalidConfigurationError(f"assign(fns): expected a dict of functions, got {describe(fns)}", fns)
    forking = fork(fns)

    def assigning(value: Any) -> MaybeAwaitable[dict[str, Any]]:
        if not isinstance(value, Mapping):
            raise InvalidOperandError(f"assign(...)(value): expected a mapping, got {describe(value)}", value)
        return continue_with(forking(value), lambda results: {**value, **results})

    return assigning


def tap(fn: Fn) -> Fn:
    """Call fn for its side effect and pass the input through."""
    require_callable(fn, "tap(fn)", "fn")

    def tapping(value: Any) -> Any:
        return continue_with(fn(value), lambda _: value)

    return tapping


def try_catch(fn: Fn, on_error: Callable[[Exception, Any], Any]) -> Fn:
    """Call fn; on a raised or rejected failure return on_error(exc, input)."""
    require_callable(fn, "try_catch(fn, on_error)", "fn")
    require_callable(on_error, "try_catch(fn, on_error)", "on_error")

    def trying(value: Any) -> Any:
        try:
            result = fn(value)
        except Exception as exc:
            return on_error(exc, value)
        return catch_pending(result, lambda exc: on_error(exc, value))

    return trying


def switch_case(fns: Sequence[Fn]) -> Fn:
    """Conditional chain: [predicate, branch, predicate, branch, ..., default].

    Predicates run in order until one is truthy; its branch gets the input.
    The default runs when none match.
    """
    _require_functions(fns, "switch_case(fns)", minimum=3)
    if len(fns) % 2 == 0:
        raise InvalidConfigurationError("switch_case(fns): expected an odd number of functions", fns)
    sequence = list(fns)

    def switching(value: Any) -> Any:
        return _switch_from(sequence, value, 0)

    return switching


def _switch_from(fns: list[Fn], value: Any, start: int) -> Any:
    index = start
    while index < len(fns) - 1:
        matched = fns[index](value)
        if is_pending(matched):
            return continue_with(
                matched,
                lambda ok, index=index: fns[index + 1](value) if ok else _switch_from(fns, value, index + 2),
            )
        if matched:
            return fns[index + 1](value)
        index += 2
    return fns[-1](value)


fork.series = fork_series  # type: ignore[attr-defined]
