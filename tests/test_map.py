"""map and its series / with_index variants across container shapes."""

from __future__ import annotations

import asyncio
from array import array
from collections import OrderedDict
from types import SimpleNamespace

import pytest

from shapefn import InvalidConfigurationError, InvalidOperandError, is_pending, map
from shapefn.kernel.errors import ShapefnError

from fakes import async_items, collect, fails, later


def double(n):
    return n * 2


def test_map_array_is_synchronous() -> None:
    result = map(double)([1, 2, 3])
    assert not is_pending(result)
    assert result == [2, 4, 6]
    assert map(double)((1, 2)) == (2, 4)


def test_map_shapes_are_preserved() -> None:
    assert map(str.upper)("abc") == "ABC"
    assert map(double)({1, 2}) == {2, 4}
    assert map(double)(frozenset({1})) == frozenset({2})
    assert map(double)({"a": 1, "b": 2}) == {"a": 2, "b": 4}
    assert map(double)(bytes([1, 2])) == bytes([2, 4])
    numbers = map(double)(array("i", [1, 2]))
    assert numbers.typecode == "i" and list(numbers) == [2, 4]
    record = map(double)(SimpleNamespace(x=1, y=2))
    assert record == SimpleNamespace(x=2, y=4)


def test_map_string_iterates_code_points() -> None:
    assert map(lambda ch: f"<{ch}>")("é🙂") == "<é><🙂>"


def test_map_set_deduplicates_equal_results() -> None:
    assert map(lambda n: n % 2)({1, 2, 3}) == {0, 1}


def test_map_ordered_dict_keeps_type_and_order() -> None:
    result = map(double)(OrderedDict([("b", 1), ("a", 2)]))
    assert isinstance(result, OrderedDict)
    assert list(result.items()) == [("b", 2), ("a", 4)]


def test_map_async_mapper_concurrent_and_ordered() -> None:
    finished = []

    async def slow_first(n):
        await asyncio.sleep(0.03 if n == 1 else 0.0)
        finished.append(n)
        return n * 10

    async def run():
        result = map(slow_first)([1, 2, 3])
        assert is_pending(result)
        return await result

    assert asyncio.run(run()) == [10, 20, 30]
    assert finished[-1] == 1


def test_map_one_pending_element_makes_result_pending() -> None:
    def mostly_sync(n):
        return later(n) if n == 2 else n

    async def run():
        result = map(mostly_sync)({"a": 1, "b": 2})
        assert is_pending(result)
        return await result

    assert asyncio.run(run()) == {"a": 1, "b": 2}


def test_map_dict_output_follows_input_order_not_completion() -> None:
    async def run():
        return await map(lambda n: later(n, 0.03 - n * 0.01))({"a": 1, "b": 2, "c": 3})

    result = asyncio.run(run())
    assert list(result) == ["a", "b", "c"]


def test_map_iterable_is_lazy() -> None:
    pulled = []

    def numbers():
        for n in range(3):
            pulled.append(n)
            yield n

    mapped = map(double)(numbers())
    assert pulled == []
    assert next(mapped) == 0
    assert pulled == [0]
    assert list(mapped) == [2, 4]


def test_map_async_iterable_awaits_each_result() -> None:
    async def run():
        return await collect(map(lambda n: later(n + 1))(async_items([1, 2])))

    assert asyncio.run(run()) == [2, 3]


def test_map_generator_function() -> None:
    def numbers(n):
        yield from range(n)

    mapped = map(double)(numbers)
    assert mapped.__name__ == "numbers"
    assert list(mapped(3)) == [0, 2, 4]


@pytest.mark.asyncio
async def test_map_async_generator_function() -> None:
    async def letters():
        yield "a"
        yield "b"

    mapped = map(str.upper)(letters)
    assert await collect(mapped()) == ["A", "B"]


def test_map_reducer_position_returns_reducer() -> None:
    def append(acc, item):
        return acc + [item]

    step = map(double)(append)
    assert step([], 3) == [6]


def test_map_failure_propagates_untouched() -> None:
    async def run():
        await map(lambda n: fails(LookupError("nope")) if n == 2 else later(n))([1, 2, 3])

    with pytest.raises(LookupError, match="nope"):
        asyncio.run(run())


def test_map_configuration_errors() -> None:
    with pytest.raises(InvalidConfigurationError):
        map(42)
    with pytest.raises(TypeError):
        map("not callable")


def test_map_invalid_operand() -> None:
    with pytest.raises(InvalidOperandError) as excinfo:
        map(double)(7)
    assert excinfo.value.value == 7
    assert isinstance(excinfo.value, ShapefnError)


def test_map_series_runs_one_at_a_time() -> None:
    active = []
    peak = []

    async def track(n):
        active.append(n)
        peak.append(len(active))
        await asyncio.sleep(0.005)
        active.remove(n)
        return n + 1

    async def run():
        return await map.series(track)([1, 2, 3])

    assert asyncio.run(run()) == [2, 3, 4]
    assert max(peak) == 1


def test_map_series_synchronous_until_first_pending() -> None:
    assert map.series(double)((1, 2)) == (2, 4)
    with pytest.raises(InvalidOperandError):
        map.series(double)({1, 2})


def test_map_with_index() -> None:
    assert map.with_index(lambda item, index, items: (item, index, len(items)))(["a", "b"]) == [
        ("a", 0, 2),
        ("b", 1, 2),
    ]
    assert map.with_index(lambda ch, index, text: ch * (index + 1))("ab") == "abb"
    with pytest.raises(InvalidOperandError):
        map.with_index(lambda item, index, items: item)({"a": 1})
