"""Predicate combinators and comparisons."""

from __future__ import annotations

import asyncio

import pytest

from shapefn import (
    InvalidConfigurationError,
    InvalidOperandError,
    all_,
    and_,
    any_,
    eq,
    gt,
    gte,
    is_pending,
    lt,
    lte,
    not_,
    or_,
)

from fakes import later


def is_even(n):
    return n % 2 == 0


def test_any_and_all_over_shapes() -> None:
    assert any_(is_even)([1, 3, 4]) is True
    assert any_(is_even)((1, 3)) is False
    assert all_(is_even)({2, 4}) is True
    assert all_(is_even)({"a": 2, "b": 3}) is False
    assert any_(str.isdigit)("ab1") is True
    assert all_(is_even)([]) is True
    assert any_(is_even)([]) is False


def test_any_short_circuits() -> None:
    calls = []

    def track(n):
        calls.append(n)
        return n > 1

    assert any_(track)([1, 2, 3]) is True
    assert calls == [1, 2]


def test_any_waits_for_started_checks_before_answering() -> None:
    async def run():
        result = any_(lambda n: later(False) if n == 1 else n == 2)([1, 2, 3])
        assert is_pending(result)
        return await result

    assert asyncio.run(run()) is True


def test_all_with_async_checks() -> None:
    async def run():
        return await all_(lambda n: later(n > 0))([1, 2]), await all_(lambda n: later(n > 1))([1, 2])

    assert asyncio.run(run()) == (True, False)


def test_any_invalid_operand() -> None:
    with pytest.raises(InvalidOperandError):
        any_(is_even)(5)


def test_and_or_not() -> None:
    positive_even = and_([lambda n: n > 0, is_even])
    assert positive_even(4) is True
    assert positive_even(-2) is False
    assert or_([lambda n: n > 10, is_even])(3) is False
    assert not_(is_even)(3) is True

    async def run():
        return await or_([lambda n: later(n > 10), is_even])(12), await not_(lambda n: later(n))(0)

    assert asyncio.run(run()) == (True, True)


def test_and_or_configuration() -> None:
    with pytest.raises(InvalidConfigurationError):
        and_([])
    with pytest.raises(InvalidConfigurationError):
        or_([is_even, "x"])
    with pytest.raises(InvalidConfigurationError):
        not_(None)


def test_comparisons_with_functions_and_constants() -> None:
    price = lambda item: item["price"]  # noqa: E731
    assert eq(price, 3)({"price": 3}) is True
    assert gt(price, 3)({"price": 3}) is False
    assert gte(price, 3)({"price": 3}) is True
    assert lt(1, price)({"price": 3}) is True
    assert lte(price, lambda item: item["limit"])({"price": 5, "limit": 4}) is False


def test_comparisons_with_pending_sides() -> None:
    async def run():
        return await eq(lambda n: later(n), lambda n: later(n * 1))(4)

    assert asyncio.run(run()) is True
