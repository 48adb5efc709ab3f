"""Helpers for values that may or may not be pending.

A pending result is any awaitable. Every helper here stays synchronous when
handed plain values and only builds a coroutine once something is actually
pending, so fully synchronous pipelines never touch the event loop.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable, Iterable
from typing import Any, TypeAlias, TypeVar

T = TypeVar("T")
R = TypeVar("R")

MaybeAwaitable: TypeAlias = T | Awaitable[T]


def is_pending(value: Any) -> bool:
    """Return True if value is awaitable."""
    return inspect.isawaitable(value)


def continue_with(value: MaybeAwaitable[T], continuation: Callable[[T], MaybeAwaitable[R]]) -> MaybeAwaitable[R]:
    """Apply continuation to value now, or once value resolves.

    Args:
        value: A plain value or a pending result.
        continuation: Function of the resolved value. It may itself return
            a pending result, which is awaited in the asynchronous case.

    Returns:
        continuation(value) when value is ready, otherwise a coroutine that
        resolves to it. Failures of value propagate untouched.
    """
    if is_pending(value):
        return _continue_async(value, continuation)  # type: ignore[arg-type]
    return continuation(value)  # type: ignore[arg-type]


async def _continue_async(pending: Awaitable[T], continuation: Callable[[T], MaybeAwaitable[R]]) -> R:
    result = continuation(await pending)
    if is_pending(result):
        result = await result  # type: ignore[misc]
    return result  # type: ignore[return-value]


def all_pending(values: Iterable[MaybeAwaitable[T]]) -> MaybeAwaitable[list[T]]:
    """Resolve a sequence of possibly pending values, keeping positions.

    Pending entries are awaited concurrently. If nothing is pending the
    values come back as a list straight away.
    """
    values = list(values)
    for value in values:
        if is_pending(value):
            return _gather_in_place(values)
    return values  # type: ignore[return-value]


async def _gather_in_place(values: list[Any]) -> list[Any]:
    positions = [index for index, value in enumerate(values) if is_pending(value)]
    resolved = await asyncio.gather(*(values[index] for index in positions))
    for index, result in zip(positions, resolved):
        values[index] = result
    return values


def catch_pending(value: MaybeAwaitable[T], handler: Callable[[Exception], MaybeAwaitable[R]]) -> MaybeAwaitable[T | R]:
    """Route a rejection of a pending value to handler.

    Plain values are returned as they are; synchronous exceptions are the
    caller's business.
    """
    if is_pending(value):
        return _catch_async(value, handler)  # type: ignore[arg-type]
    return value


async def _catch_async(pending: Awaitable[T], handler: Callable[[Exception], MaybeAwaitable[R]]) -> T | R:
    try:
        return await pending
    except Exception as exc:
        result = handler(exc)
        if is_pending(result):
            result = await result  # type: ignore[misc]
        return result  # type: ignore[return-value]


def discard(value: Any) -> None:
    """Close an abandoned coroutine so it does not warn about never being awaited."""
    if inspect.iscoroutine(value):
        value.close()
