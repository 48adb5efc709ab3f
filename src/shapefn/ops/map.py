"""map - apply a mapper across any supported container.

Mapper applications run in container order. When some of them return
pending results those are awaited concurrently and the whole result becomes
pending; otherwise the mapped container is returned synchronously.
"""

from __future__ import annotations

import functools
from array import array
from collections.abc import AsyncIterable, AsyncIterator, Callable, Iterable, Iterator, Mapping
from types import SimpleNamespace
from typing import Any

from shapefn.kernel.errors import InvalidOperandError, require_callable
from shapefn.kernel.pending import MaybeAwaitable, all_pending, continue_with, is_pending
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
from shapefn.ops.pool import map_pool
from shapefn.ops.transducers import map_reducer

Mapper = Callable[[Any], Any]


def map_array(mapper: Mapper, items: list[Any] | tuple[Any, ...]) -> MaybeAwaitable[list[Any] | tuple[Any, ...]]:
    results = [mapper(item) for item in items]
    return continue_with(all_pending(results), lambda values: rebuild_sequence(items, values))


def map_string(mapper: Mapper, text: str) -> MaybeAwaitable[str]:
    results = [mapper(char) for char in text]
    return continue_with(all_pending(results), _join)


def _join(values: list[Any]) -> str:
    return "".join(str(value) for value in values)


def map_set(mapper: Mapper, items: set[Any] | frozenset[Any]) -> MaybeAwaitable[set[Any] | frozenset[Any]]:
    """Equal results collapse into one element of the output set."""
    results = [mapper(item) for item in items]
    return continue_with(all_pending(results), lambda values: rebuild_set(items, values))


def map_mapping(mapper: Mapper, mapping: Mapping[Any, Any]) -> MaybeAwaitable[dict[Any, Any]]:
    keys = list(mapping.keys())
    results = [mapper(mapping[key]) for key in keys]
    return continue_with(
        all_pending(results),
        lambda values: rebuild_mapping(mapping, zip(keys, values)),
    )


def map_binary(mapper: Mapper, data: bytes | bytearray | array) -> MaybeAwaitable[bytes | bytearray | array]:
    results = [mapper(item) for item in data]
    return continue_with(all_pending(results), lambda values: rebuild_binary(data, values))


def map_object(mapper: Mapper, record: SimpleNamespace) -> MaybeAwaitable[SimpleNamespace]:
    return continue_with(
        map_mapping(mapper, vars(record)),
        lambda attributes: SimpleNamespace(**attributes),
    )


def map_iterable(mapper: Mapper, items: Iterable[Any]) -> Iterator[Any]:
    """Lazily map items. Pending results are yielded as they are, not awaited."""
    for item in items:
        yield mapper(item)


async def map_async_iterable(mapper: Mapper, items: AsyncIterable[Any]) -> AsyncIterator[Any]:
    async for item in items:
        result = mapper(item)
        if is_pending(result):
            result = await result
        yield result


def map_function(mapper: Mapper, fn: Callable[..., Any]) -> Callable[..., Any]:
    """Generator functions map what they yield; any other function is a reducer."""
    if is_async_generator_function(fn):

        @functools.wraps(fn)
        def mapped_async_generator_function(*args: Any, **kwargs: Any) -> AsyncIterator[Any]:
            return map_async_iterable(mapper, fn(*args, **kwargs))

        return mapped_async_generator_function

    if is_generator_function(fn):

        @functools.wraps(fn)
        def mapped_generator_function(*args: Any, **kwargs: Any) -> Iterator[Any]:
            return map_iterable(mapper, fn(*args, **kwargs))

        return mapped_generator_function

    return map_reducer(mapper, fn)


_BY_SHAPE: dict[Shape, Callable[[Mapper, Any], Any]] = {
    Shape.ASYNC_ITERABLE: map_async_iterable,
    Shape.ARRAY: map_array,
    Shape.STRING: map_string,
    Shape.SET: map_set,
    Shape.MAP: map_mapping,
    Shape.BINARY: map_binary,
    Shape.ITERABLE: map_iterable,
    Shape.OBJECT: map_object,
    Shape.FUNCTION: map_function,
}


def map(mapper: Mapper) -> Callable[[Any], Any]:
    """Apply mapper to every element of a container, keeping its shape.

    Args:
        mapper: Function of one element, synchronous or returning a pending
            result.

    Returns:
        A function of the container. Arrays, strings, sets, mappings, binary
        sequences and SimpleNamespace records come back as the same shape
        (or a pending result of it); iterables and async iterables come
        back as lazy generators; generator functions come back as mapped
        generator functions; any other function is treated as a reducer and
        a mapping reducer is returned.

    Raises:
        InvalidConfigurationError: mapper is not callable.

    Example:
        >>> map(lambda n: n * 2)([1, 2, 3])
        [2, 4, 6]
    """
    require_callable(mapper, "map(mapper)", "mapper")

    def mapping(value: Any) -> Any:
        handler = _BY_SHAPE.get(classify(value))  # type: ignore[arg-type]
        if handler is None:
            raise InvalidOperandError(f"map(...)(value): cannot map {describe(value)}", value)
        return handler(mapper, value)

    return mapping


def map_series(mapper: Mapper) -> Callable[[Any], Any]:
    """Like map for arrays, but each application finishes before the next starts."""
    require_callable(mapper, "map.series(mapper)", "mapper")

    def mapping_in_series(value: Any) -> Any:
        if classify(value) is not Shape.ARRAY:
            raise InvalidOperandError(
                f"map.series(...)(value): expected a list or tuple, got {describe(value)}", value
            )
        return _map_array_series(mapper, value)

    return mapping_in_series


def _map_array_series(mapper: Mapper, items: list[Any] | tuple[Any, ...]) -> Any:
    results: list[Any] = []
    iterator = iter(items)
    for item in iterator:
        result = mapper(item)
        if is_pending(result):
            return _map_array_series_async(mapper, items, results, result, iterator)
        results.append(result)
    return rebuild_sequence(items, results)


async def _map_array_series_async(
    mapper: Mapper,
    items: list[Any] | tuple[Any, ...],
    results: list[Any],
    pending: Any,
    iterator: Iterator[Any],
) -> list[Any] | tuple[Any, ...]:
    results.append(await pending)
    for item in iterator:
        result = mapper(item)
        if is_pending(result):
            result = await result
        results.append(result)
    return rebuild_sequence(items, results)


def map_with_index(mapper: Callable[[Any, int, Any], Any]) -> Callable[[Any], Any]:
    """map for arrays and strings where mapper receives (item, index, container)."""
    require_callable(mapper, "map.with_index(mapper)", "mapper")

    def mapping_with_index(value: Any) -> Any:
        shape = classify(value)
        if shape is Shape.ARRAY:
            results = [mapper(item, index, value) for index, item in enumerate(value)]
            return continue_with(all_pending(results), lambda values: rebuild_sequence(value, values))
        if shape is Shape.STRING:
            results = [mapper(char, index, value) for index, char in enumerate(value)]
            return continue_with(all_pending(results), _join)
        raise InvalidOperandError(
            f"map.with_index(...)(value): expected a list, tuple or str, got {describe(value)}", value
        )

    return mapping_with_index


map.series = map_series  # type: ignore[attr-defined]
map.with_index = map_with_index  # type: ignore[attr-defined]
map.pool = map_pool  # type: ignore[attr-defined]
