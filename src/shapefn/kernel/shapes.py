"""Runtime shape classification.

Every operator selects its implementation through classify(), which tests
the predicates below in a fixed precedence order. The order matters: lists
and strings are iterable too, and must not fall through to the lazy
iterable handlers.
"""

from __future__ import annotations

import inspect
from array import array
from collections.abc import AsyncIterable, Callable, Iterable, Mapping
from enum import Enum
from types import SimpleNamespace
from typing import Any


class Shape(Enum):
    """Container shapes, in dispatch precedence order."""

    ASYNC_ITERABLE = "async_iterable"
    ARRAY = "array"
    STRING = "string"
    SET = "set"
    MAP = "map"
    BINARY = "binary"
    ITERABLE = "iterable"
    OBJECT = "object"
    FUNCTION = "function"


# Shapes whose elements come from plain iteration of the container.
ITERATED_SHAPES = frozenset(
    {Shape.ARRAY, Shape.STRING, Shape.SET, Shape.BINARY, Shape.ITERABLE}
)


def is_async_iterable(value: Any) -> bool:
    return isinstance(value, AsyncIterable)


def is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def is_string(value: Any) -> bool:
    return isinstance(value, str)


def is_set(value: Any) -> bool:
    return isinstance(value, (set, frozenset))


def is_map(value: Any) -> bool:
    return isinstance(value, Mapping)


def is_binary(value: Any) -> bool:
    return isinstance(value, (bytes, bytearray, array))


def is_iterable(value: Any) -> bool:
    return isinstance(value, Iterable)


def is_object(value: Any) -> bool:
    return isinstance(value, SimpleNamespace)


def is_function(value: Any) -> bool:
    return callable(value)


def is_generator_function(value: Any) -> bool:
    return inspect.isgeneratorfunction(value)


def is_async_generator_function(value: Any) -> bool:
    return inspect.isasyncgenfunction(value)


def is_reducer(value: Any) -> bool:
    """A callable that is not a generator function of either kind."""
    return (
        callable(value)
        and not inspect.isgeneratorfunction(value)
        and not inspect.isasyncgenfunction(value)
    )


_PRECEDENCE: tuple[tuple[Shape, Callable[[Any], bool]], ...] = (
    (Shape.ASYNC_ITERABLE, is_async_iterable),
    (Shape.ARRAY, is_array),
    (Shape.STRING, is_string),
    (Shape.SET, is_set),
    (Shape.MAP, is_map),
    (Shape.BINARY, is_binary),
    (Shape.ITERABLE, is_iterable),
    (Shape.OBJECT, is_object),
    (Shape.FUNCTION, is_function),
)


def classify(value: Any) -> Shape | None:
    """Return the first shape value satisfies, or None."""
    for shape, predicate in _PRECEDENCE:
        if predicate(value):
            return shape
    return None


def values_of(value: Any) -> Iterable[Any]:
    """Elements a fold or flatten sees: values for MAP and OBJECT, items otherwise."""
    if isinstance(value, Mapping):
        return value.values()
    if isinstance(value, SimpleNamespace):
        return vars(value).values()
    return value


def rebuild_sequence(original: list[Any] | tuple[Any, ...], items: list[Any]) -> list[Any] | tuple[Any, ...]:
    """Build a list or tuple of the same type as original."""
    if isinstance(original, list):
        return items
    if hasattr(original, "_fields"):
        return type(original)._make(items)  # type: ignore[attr-defined]
    return tuple(items)


def rebuild_set(original: set[Any] | frozenset[Any], items: Iterable[Any]) -> set[Any] | frozenset[Any]:
    if isinstance(original, frozenset):
        return frozenset(items)
    return set(items)


def rebuild_mapping(original: Mapping[Any, Any], pairs: Iterable[tuple[Any, Any]]) -> dict[Any, Any]:
    """Build a dict of the same type as original, or a plain dict for other mappings.

    Copying then clearing keeps subclass state such as a defaultdict factory.
    """
    if type(original) is dict or not isinstance(original, dict):
        result: dict[Any, Any] = {}
    else:
        result = original.copy()
        result.clear()
    for key, item in pairs:
        result[key] = item
    return result


def rebuild_binary(original: bytes | bytearray | array, items: Iterable[Any]) -> bytes | bytearray | array:
    if isinstance(original, array):
        return array(original.typecode, items)
    return type(original)(items)


def describe(value: Any) -> str:
    """Short type description for error messages."""
    return type(value).__name__
