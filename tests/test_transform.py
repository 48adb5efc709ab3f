"""transform: folding through transducers into collections of the seed's shape."""

from __future__ import annotations

import asyncio
import io
from array import array
from types import SimpleNamespace

import pytest

from shapefn import (
    CancellableReduction,
    InvalidConfigurationError,
    InvalidOperandError,
    ReductionCancelled,
    filter,
    map,
    pipe,
    transform,
)

from fakes import StallingSource, async_items, later


def square(n):
    return n * n


def is_odd(n):
    return n % 2 == 1


def test_transform_into_list_does_not_mutate_seed() -> None:
    seed = [0]
    squares = transform(map(square), seed)
    assert squares([1, 2]) == [0, 1, 4]
    assert squares([3]) == [0, 9]
    assert seed == [0]


def test_transform_targets() -> None:
    assert transform(map(square), ())([1, 2]) == (1, 4)
    assert transform(map(square), "")([1, 2, 3]) == "149"
    assert transform(map(square), set())([1, -1]) == {1}
    assert transform(map(lambda n: (str(n), n)), {})([1, 2]) == {"1": 1, "2": 2}
    assert transform(map(lambda n: {n: square(n)}), {})([3]) == {3: 9}
    assert transform(map(lambda n: n + 1), b"")([96, 97]) == b"ab"
    assert transform(map(str.upper), bytearray())("hi") == bytearray(b"HI")
    doubles = transform(map(lambda n: n * 2.0), array("d"))([1, 2])
    assert doubles.typecode == "d" and list(doubles) == [2.0, 4.0]
    assert transform(map(lambda key: (key, True)), SimpleNamespace())(["on"]) == SimpleNamespace(on=True)
    assert transform(map(square), None)([1, 2]) is None


def test_transform_into_writable() -> None:
    buffer = io.StringIO()
    result = transform(map(lambda word: word + " "), buffer)(["a", "b"])
    assert result is buffer
    assert buffer.getvalue() == "a b "


def test_transform_composed_transducer_order() -> None:
    map_then_filter = transform(pipe([map(lambda n: n + 1), filter(is_odd)]), [])
    filter_then_map = transform(pipe([filter(is_odd), map(lambda n: n + 1)]), [])
    assert map_then_filter([1, 2, 3, 4]) == [3, 5]
    assert filter_then_map([1, 2, 3, 4]) == [2, 4]


def test_transform_with_async_steps_and_initializer() -> None:
    async def run():
        return await transform(map(lambda n: later(n * 10)), lambda items: later([len(items)]))([1, 2])

    assert asyncio.run(run()) == [2, 10, 20]


@pytest.mark.asyncio
async def test_transform_async_iterable() -> None:
    assert await transform(filter(is_odd), [])(async_items([1, 2, 3])) == [1, 3]


def test_transform_errors() -> None:
    with pytest.raises(InvalidConfigurationError):
        transform("nope", [])
    with pytest.raises(InvalidConfigurationError):
        transform(lambda reducer: 5, [])([1])
    with pytest.raises(InvalidOperandError):
        transform(map(square), 3.5)([1])


@pytest.mark.asyncio
async def test_transform_over_async_iterable_can_be_cancelled() -> None:
    source = StallingSource([1, 2])
    collecting = transform(map(square), ())(source)
    assert isinstance(collecting, CancellableReduction)
    asyncio.get_running_loop().call_later(0.01, collecting.cancel)

    with pytest.raises(ReductionCancelled):
        await collecting
    await asyncio.sleep(0.01)
    assert source.closed == [True]


@pytest.mark.asyncio
async def test_transform_finished_shape_over_async_iterable() -> None:
    assert await transform(map(square), ())(async_items([1, 2])) == (1, 4)
    assert await transform(map(square), frozenset())(async_items([2, -2])) == frozenset({4})
