"""flat_map - map, then splice each result's elements into the output."""

from __future__ import annotations

from collections.abc import AsyncIterable, AsyncIterator, Callable, Iterable, Iterator
from itertools import chain
from typing import Any

from shapefn.kernel.errors import InvalidOperandError, SyncIterationError, require_callable
from shapefn.kernel.pending import MaybeAwaitable, all_pending, continue_with, discard, is_pending
from shapefn.kernel.shapes import (
    ITERATED_SHAPES,
    Shape,
    classify,
    describe,
    is_reducer,
    rebuild_sequence,
    rebuild_set,
    values_of,
)
from shapefn.ops.transducers import flat_map_reducer

Mapper = Callable[[Any], Any]


def elements_of(inner: Any) -> MaybeAwaitable[list[Any]]:
    """Elements one mapped result contributes.

    Containers give their elements (mappings and records their values),
    async iterables are drained, anything else stands for itself.
    """
    shape = classify(inner)
    if shape is Shape.ASYNC_ITERABLE:
        return _drain(inner)
    if shape in ITERATED_SHAPES or shape is Shape.MAP or shape is Shape.OBJECT:
        return list(values_of(inner))
    return [inner]


async def _drain(items: AsyncIterable[Any]) -> list[Any]:
    return [item async for item in items]


def _flatten(results: list[Any]) -> MaybeAwaitable[list[Any]]:
    return continue_with(
        all_pending([elements_of(inner) for inner in results]),
        lambda parts: list(chain.from_iterable(parts)),
    )


def flat_map_array(mapper: Mapper, items: list[Any] | tuple[Any, ...]) -> MaybeAwaitable[list[Any] | tuple[Any, ...]]:
    return continue_with(
        continue_with(all_pending([mapper(item) for item in items]), _flatten),
        lambda flattened: rebuild_sequence(items, flattened),
    )


def flat_map_set(mapper: Mapper, items: set[Any] | frozenset[Any]) -> MaybeAwaitable[set[Any] | frozenset[Any]]:
    return continue_with(
        continue_with(all_pending([mapper(item) for item in items]), _flatten),
        lambda flattened: rebuild_set(items, flattened),
    )


def flat_map_iterable(mapper: Mapper, items: Iterable[Any]) -> Iterator[Any]:
    for item in items:
        inner = mapper(item)
        if is_pending(inner):
            discard(inner)
            raise SyncIterationError(
                "flat_map(mapper)(iterable): mapper returned a pending result "
                "while flattening a synchronous iterable",
                item,
            )
        if classify(inner) is Shape.ASYNC_ITERABLE:
            raise SyncIterationError(
                "flat_map(mapper)(iterable): cannot flatten an async iterable "
                "into a synchronous iterable",
                item,
            )
        yield from elements_of(inner)  # type: ignore[misc]


async def flat_map_async_iterable(mapper: Mapper, items: AsyncIterable[Any]) -> AsyncIterator[Any]:
    async for item in items:
        inner = mapper(item)
        if is_pending(inner):
            inner = await inner
        if classify(inner) is Shape.ASYNC_ITERABLE:
            async for element in inner:
                yield element
        else:
            for element in elements_of(inner):  # type: ignore[union-attr]
                yield element


_BY_SHAPE: dict[Shape, Callable[[Mapper, Any], Any]] = {
    Shape.ASYNC_ITERABLE: flat_map_async_iterable,
    Shape.ARRAY: flat_map_array,
    Shape.SET: flat_map_set,
    Shape.ITERABLE: flat_map_iterable,
    Shape.FUNCTION: flat_map_reducer,
}


def flat_map(mapper: Mapper) -> Callable[[Any], Any]:
    """Map each element, then flatten one level.

    Accepts lists, tuples, sets, iterables (lazy), async iterables (lazy)
    and reducers, for which a reducer folding every inner element is
    returned. Generator functions are not reducers and are rejected.

    Example:
        >>> flat_map(lambda n: [n, n * 10])([1, 2])
        [1, 10, 2, 20]
    """
    require_callable(mapper, "flat_map(mapper)", "mapper")

    def flat_mapping(value: Any) -> Any:
        shape = classify(value)
        handler = _BY_SHAPE.get(shape)  # type: ignore[arg-type]
        if handler is None or (shape is Shape.FUNCTION and not is_reducer(value)):
            raise InvalidOperandError(f"flat_map(...)(value): cannot flat_map {describe(value)}", value)
        return handler(mapper, value)

    return flat_mapping
