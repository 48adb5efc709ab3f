"""filter across container shapes, including its lazy and reducer forms."""

from __future__ import annotations

import asyncio
from array import array
from types import SimpleNamespace

import pytest

from shapefn import SyncIterationError, filter, is_pending

from fakes import async_items, collect, fails, later


def is_odd(n):
    return n % 2 == 1


def test_filter_keeps_shape() -> None:
    assert filter(is_odd)([1, 2, 3]) == [1, 3]
    assert filter(is_odd)((1, 2, 3)) == (1, 3)
    assert filter(str.isupper)("aBcD") == "BD"
    assert filter(is_odd)({1, 2, 3}) == {1, 3}
    assert filter(is_odd)({"a": 1, "b": 2, "c": 3}) == {"a": 1, "c": 3}
    assert filter(is_odd)(bytes([1, 2, 3])) == bytes([1, 3])
    assert list(filter(is_odd)(array("b", [1, 2]))) == [1]
    assert filter(is_odd)(SimpleNamespace(a=1, b=2)) == SimpleNamespace(a=1)


def test_filter_always_true_is_identity() -> None:
    data = {"x": 1, "y": 2}
    assert filter(lambda _: True)(data) == data
    assert filter(lambda _: True)([3, 1, 2]) == [3, 1, 2]


def test_filter_async_predicate_keeps_order() -> None:
    async def run():
        result = filter(lambda n: later(is_odd(n), 0.01 * (5 - n)))([1, 2, 3, 4, 5])
        assert is_pending(result)
        return await result

    assert asyncio.run(run()) == [1, 3, 5]


def test_filter_mapping_is_all_or_nothing() -> None:
    async def check(n):
        if n == 3:
            raise RuntimeError("bad predicate")
        return await later(True)

    async def run():
        await filter(check)({"a": 1, "b": 2, "c": 3})

    with pytest.raises(RuntimeError, match="bad predicate"):
        asyncio.run(run())


def test_filter_iterable_is_lazy() -> None:
    seen = []

    def numbers():
        for n in range(5):
            seen.append(n)
            yield n

    odds = filter(is_odd)(numbers())
    assert seen == []
    assert next(odds) == 1
    assert seen == [0, 1]


def test_filter_iterable_rejects_pending_predicate_at_pull() -> None:
    odds = filter(lambda n: later(is_odd(n)))(iter([1, 2]))
    with pytest.raises(SyncIterationError) as excinfo:
        next(odds)
    assert excinfo.value.item == 1


def test_filter_async_iterable() -> None:
    async def run():
        return await collect(filter(lambda n: later(n > 1))(async_items([0, 1, 2, 3])))

    assert asyncio.run(run()) == [2, 3]


def test_filter_generator_function() -> None:
    def numbers(n):
        yield from range(n)

    assert list(filter(is_odd)(numbers)(6)) == [1, 3, 5]


def test_filter_reducer_form_skips_rejected_items() -> None:
    def add(total, n):
        return total + n

    step = filter(is_odd)(add)
    assert step(10, 2) == 10
    assert step(10, 3) == 13


def test_filter_rejection_propagates() -> None:
    async def run():
        await filter(lambda n: fails(ValueError("x")))([1])

    with pytest.raises(ValueError):
        asyncio.run(run())


def test_filter_with_index() -> None:
    assert filter.with_index(lambda item, index, items: index % 2 == 0)(["a", "b", "c"]) == ["a", "c"]
    assert filter.with_index(lambda ch, index, text: index > 0)("xyz") == "yz"
