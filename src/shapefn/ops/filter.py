"""filter - keep the elements of a container that pass a predicate.

Ordered shapes evaluate every predicate first and then select by position,
so all predicate calls run concurrently and the output keeps input order.
Sets, mappings and records are committed only after every predicate has
resolved, so a failing predicate never leaves a partly built output.
"""

from __future__ import annotations

import functools
from array import array
from collections.abc import AsyncIterable, AsyncIterator, Callable, Iterable, Iterator, Mapping
from types import SimpleNamespace
from typing import Any

from shapefn.kernel.errors import InvalidOperandError, SyncIterationError, require_callable
from shapefn.kernel.pending import MaybeAwaitable, all_pending, continue_with, discard, is_pending
from shapefn.kernel.shapes import (
    Shape,
    classify,
    describe,
    is_async_generator_function,
    is_generator_function,
    rebuild_binary,
    rebuild_mapping,
    rebuild_sequence,
    rebuild_set,
)
from shapefn.ops.transducers import filter_reducer

Predicate = Callable[[Any], Any]


def _checks(predicate: Predicate, items: Iterable[Any]) -> MaybeAwaitable[list[Any]]:
    return all_pending([predicate(item) for item in items])


def _select(items: Iterable[Any], checks: list[Any]) -> list[Any]:
    return [item for item, keep in zip(items, checks) if keep]


def filter_array(predicate: Predicate, items: list[Any] | tuple[Any, ...]) -> MaybeAwaitable[list[Any] | tuple[Any, ...]]:
    return continue_with(
        _checks(predicate, items),
        lambda checks: rebuild_sequence(items, _select(items, checks)),
    )


def filter_string(predicate: Predicate, text: str) -> MaybeAwaitable[str]:
    return continue_with(
        _checks(predicate, text),
        lambda checks: "".join(_select(text, checks)),
    )


def filter_set(predicate: Predicate, items: set[Any] | frozenset[Any]) -> MaybeAwaitable[set[Any] | frozenset[Any]]:
    ordered = list(items)
    return continue_with(
        _checks(predicate, ordered),
        lambda checks: rebuild_set(items, _select(ordered, checks)),
    )


def filter_mapping(predicate: Predicate, mapping: Mapping[Any, Any]) -> MaybeAwaitable[dict[Any, Any]]:
    """Keys whose value passes predicate are kept, in their original order."""
    entries = list(mapping.items())
    return continue_with(
        _checks(predicate, (item for _, item in entries)),
        lambda checks: rebuild_mapping(mapping, _select(entries, checks)),
    )


def filter_binary(predicate: Predicate, data: bytes | bytearray | array) -> MaybeAwaitable[bytes | bytearray | array]:
    return continue_with(
        _checks(predicate, data),
        lambda checks: rebuild_binary(data, _select(data, checks)),
    )


def filter_object(predicate: Predicate, record: SimpleNamespace) -> MaybeAwaitable[SimpleNamespace]:
    return continue_with(
        filter_mapping(predicate, vars(record)),
        lambda attributes: SimpleNamespace(**attributes),
    )


def filter_iterable(predicate: Predicate, items: Iterable[Any]) -> Iterator[Any]:
    """Lazily filter items.

    Raises:
        SyncIterationError: at the pull where predicate returns a pending
            result, which a synchronous sequence cannot wait for.
    """
    for item in items:
        keep = predicate(item)
        if is_pending(keep):
            discard(keep)
            raise SyncIterationError(
                "filter(predicate)(iterable): predicate returned a pending result "
                "while filtering a synchronous iterable",
                item,
            )
        if keep:
            yield item


async def filter_async_iterable(predicate: Predicate, items: AsyncIterable[Any]) -> AsyncIterator[Any]:
    async for item in items:
        keep = predicate(item)
        if is_pending(keep):
            keep = await keep
        if keep:
            yield item


def filter_function(predicate: Predicate, fn: Callable[..., Any]) -> Callable[..., Any]:
    """Generator functions filter what they yield; any other function is a reducer."""
    if is_async_generator_function(fn):

        @functools.wraps(fn)
        def filtered_async_generator_function(*args: Any, **kwargs: Any) -> AsyncIterator[Any]:
            return filter_async_iterable(predicate, fn(*args, **kwargs))

        return filtered_async_generator_function

    if is_generator_function(fn):

        @functools.wraps(fn)
        def filtered_generator_function(*args: Any, **kwargs: Any) -> Iterator[Any]:
            return filter_iterable(predicate, fn(*args, **kwargs))

        return filtered_generator_function

    return filter_reducer(predicate, fn)


_BY_SHAPE: dict[Shape, Callable[[Predicate, Any], Any]] = {
    Shape.ASYNC_ITERABLE: filter_async_iterable,
    Shape.ARRAY: filter_array,
    Shape.STRING: filter_string,
    Shape.SET: filter_set,
    Shape.MAP: filter_mapping,
    Shape.BINARY: filter_binary,
    Shape.ITERABLE: filter_iterable,
    Shape.OBJECT: filter_object,
    Shape.FUNCTION: filter_function,
}


def filter(predicate: Predicate) -> Callable[[Any], Any]:
    """Keep the elements for which predicate is truthy.

    Args:
        predicate: Function of one element, synchronous or returning a
            pending result. Mappings and records are filtered by value.

    Returns:
        A function of the container producing the same shape, a pending
        result of it, a lazy generator, a filtered generator function, or a
        filtering reducer when given a reducer.

    Raises:
        InvalidConfigurationError: predicate is not callable.

    Example:
        >>> filter(lambda n: n % 2 == 1)({"a": 1, "b": 2, "c": 3})
        {'a': 1, 'c': 3}
    """
    require_callable(predicate, "filter(predicate)", "predicate")

    def filtering(value: Any) -> Any:
        handler = _BY_SHAPE.get(classify(value))  # type: ignore[arg-type]
        if handler is None:
            raise InvalidOperandError(f"filter(...)(value): cannot filter {describe(value)}", value)
        return handler(predicate, value)

    return filtering


def filter_with_index(predicate: Callable[[Any, int, Any], Any]) -> Callable[[Any], Any]:
    """filter for arrays and strings where predicate receives (item, index, container)."""
    require_callable(predicate, "filter.with_index(predicate)", "predicate")

    def filtering_with_index(value: Any) -> Any:
        shape = classify(value)
        if shape is not Shape.ARRAY and shape is not Shape.STRING:
            raise InvalidOperandError(
                f"filter.with_index(...)(value): expected a list, tuple or str, got {describe(value)}",
                value,
            )
        checks = all_pending([predicate(item, index, value) for index, item in enumerate(value)])
        if shape is Shape.STRING:
            return continue_with(checks, lambda resolved: "".join(_select(value, resolved)))
        return continue_with(checks, lambda resolved: rebuild_sequence(value, _select(value, resolved)))

    return filtering_with_index


filter.with_index = filter_with_index  # type: ignore[attr-defined]
