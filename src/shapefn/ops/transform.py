"""transform - fold a container through a transducer into a new collection.

The shape of the result follows the initial value, not the input: the
initial value picks the step reducer, the transducer wraps it, and reduce
drives it over the input.
"""

from __future__ import annotations

from array import array
from collections.abc import Callable, Mapping
from types import SimpleNamespace
from typing import Any

from shapefn.kernel.errors import InvalidConfigurationError, InvalidOperandError, require_callable
from shapefn.kernel.pending import MaybeAwaitable, continue_with
from shapefn.kernel.shapes import describe
from shapefn.ops.reduce import CancellableReduction, Reducer, reduce_container

Transducer = Callable[[Reducer], Reducer]


def _append(accumulator: list[Any], item: Any) -> list[Any]:
    accumulator.append(item)
    return accumulator


def _concat(accumulator: str, item: Any) -> str:
    return f"{accumulator}{item}"


def _add(accumulator: set[Any], item: Any) -> set[Any]:
    accumulator.add(item)
    return accumulator


def _assign(accumulator: dict[Any, Any], item: Any) -> dict[Any, Any]:
    if isinstance(item, Mapping):
        accumulator.update(item)
    else:
        key, entry = item
        accumulator[key] = entry
    return accumulator


def _extend_bytes(accumulator: bytearray, item: Any) -> bytearray:
    if isinstance(item, int):
        accumulator.append(item)
    elif isinstance(item, str):
        accumulator.extend(item.encode("utf-8"))
    else:
        accumulator.extend(item)
    return accumulator


def _extend_array(accumulator: array, item: Any) -> array:
    if isinstance(item, (int, float)):
        accumulator.append(item)
    else:
        accumulator.extend(item)
    return accumulator


def _write(accumulator: Any, item: Any) -> Any:
    accumulator.write(item)
    return accumulator


def _ignore(accumulator: None, item: Any) -> None:
    return None


def _target(seed: Any) -> tuple[Any, Reducer, Callable[[Any], Any] | None]:
    """Working copy of seed, the step reducer, and an optional finisher."""
    if seed is None:
        return None, _ignore, None
    if isinstance(seed, list):
        return list(seed), _append, None
    if isinstance(seed, tuple):
        return list(seed), _append, tuple
    if isinstance(seed, str):
        return seed, _concat, None
    if isinstance(seed, frozenset):
        return set(seed), _add, frozenset
    if isinstance(seed, set):
        return set(seed), _add, None
    if isinstance(seed, Mapping):
        working = seed.copy() if isinstance(seed, dict) else dict(seed)
        return working, _assign, None
    if isinstance(seed, (bytes, bytearray)):
        return bytearray(seed), _extend_bytes, type(seed) if isinstance(seed, bytes) else None
    if isinstance(seed, array):
        return array(seed.typecode, seed), _extend_array, None
    if callable(getattr(seed, "write", None)):
        return seed, _write, None
    if isinstance(seed, SimpleNamespace):
        return dict(vars(seed)), _assign, lambda attributes: SimpleNamespace(**attributes)
    raise InvalidOperandError(
        f"transform(transducer, init): cannot collect into {describe(seed)}", seed
    )


def _run(transducer: Transducer, seed: Any, container: Any) -> MaybeAwaitable[Any]:
    working, step, finish = _target(seed)
    reducer = transducer(step)
    if not callable(reducer):
        raise InvalidConfigurationError(
            f"transform(transducer, init): transducer returned {describe(reducer)}, not a reducer",
            reducer,
        )
    result = reduce_container(reducer, working, container)
    if finish is None:
        return result
    if isinstance(result, CancellableReduction):
        return result.then(finish)
    return continue_with(result, finish)


def transform(transducer: Transducer, init: Any) -> Callable[[Any], Any]:
    """Collect a container into a copy of init through a transducer.

    Args:
        transducer: Function taking a reducer and returning a reducer, e.g.
            ``map(f)`` or ``pipe([map(f), filter(p)])``.
        init: Initial collection, or a function of the input computing it
            (possibly pending). Lists, tuples, strings, sets, mappings,
            bytes, arrays, writable objects, SimpleNamespace records and
            None are supported. It is copied, never mutated, except for
            writable objects which are written to.

    Returns:
        A function of the container producing a value of init's shape, or a
        pending result of it. Over an asynchronous iterable with a ready
        init the pending result is a CancellableReduction.

    Example:
        >>> transform(map(lambda n: n * n), [])([1, 2, 3])
        [1, 4, 9]
    """
    require_callable(transducer, "transform(transducer, init)", "transducer")

    def transforming(container: Any) -> Any:
        seed = init(container) if callable(init) else init
        return continue_with(seed, lambda resolved: _run(transducer, resolved, container))

    return transforming
