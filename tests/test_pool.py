"""map.pool: bounded concurrency with positional output."""

from __future__ import annotations

import asyncio

import pytest

from shapefn import InvalidConcurrencyLimitError, InvalidOperandError, Trace, is_pending, map, map_pool

from fakes import ConcurrencyProbe, fails, later


def test_pool_never_exceeds_limit() -> None:
    probe = ConcurrencyProbe()

    async def run():
        return await map.pool(2, probe)(list(range(6)))

    assert asyncio.run(run()) == [0, 10, 20, 30, 40, 50]
    assert probe.peak == 2


def test_pool_output_is_positional() -> None:
    probe = ConcurrencyProbe(delays={1: 0.05, 2: 0.0, 3: 0.01})

    async def run():
        return await map_pool(3, probe)([1, 2, 3])

    assert asyncio.run(run()) == [10, 20, 30]
    assert probe.finished == [2, 3, 1]


def test_pool_admits_on_first_completion() -> None:
    # Slot held by 1 is slow; 3 must start as soon as 2 finishes.
    probe = ConcurrencyProbe(delays={1: 0.1, 2: 0.01, 3: 0.01})

    async def run():
        return await map.pool(2, probe)([1, 2, 3])

    assert asyncio.run(run()) == [10, 20, 30]
    assert probe.finished == [2, 3, 1]


def test_pool_shapes() -> None:
    async def run():
        doubled = map.pool(2, lambda n: later(n * 2))
        return await doubled((1, 2)), await doubled({1, 2}), await doubled({"a": 1, "b": 2})

    as_tuple, as_set, as_dict = asyncio.run(run())
    assert as_tuple == (2, 4)
    assert as_set == {2, 4}
    assert as_dict == {"a": 2, "b": 4}


def test_pool_always_returns_pending() -> None:
    async def run():
        result = map.pool(1, lambda n: n + 1)([1, 2])
        assert is_pending(result)
        return await result

    assert asyncio.run(run()) == [2, 3]


def test_pool_failure_propagates() -> None:
    async def mapper(n):
        if n == 2:
            return await fails(RuntimeError("pool item failed"))
        return await later(n, 0.05)

    async def run():
        await map.pool(2, mapper)([1, 2, 3, 4])

    with pytest.raises(RuntimeError, match="pool item failed"):
        asyncio.run(run())


@pytest.mark.parametrize("limit", [0, -1, 1.5, "2", None, True])
def test_pool_rejects_invalid_limits(limit) -> None:
    with pytest.raises(InvalidConcurrencyLimitError) as excinfo:
        map.pool(limit, lambda n: n)
    assert excinfo.value.limit == limit


def test_pool_invalid_operand() -> None:
    with pytest.raises(InvalidOperandError):
        map.pool(1, lambda n: n)("abc")


def test_pool_trace_records_submissions() -> None:
    trace = Trace()

    async def run():
        return await map.pool(1, lambda n: later(n, 0.001), trace=trace)([1, 2, 3])

    assert asyncio.run(run()) == [1, 2, 3]
    submits = trace.get_events("pool_submit")
    settles = trace.get_events("pool_settle")
    assert [event.info["index"] for event in submits] == [0, 1, 2]
    assert len(settles) == 3
    assert len(trace.get_events("pool_wait")) == 2
    for submit in submits:
        (settle,) = trace.children(submit.id)
        assert settle.action == "pool_settle"
        assert settle.duration_ms >= 0
