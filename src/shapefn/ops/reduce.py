"""reduce - strictly sequential left folds over any supported container."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterable, Awaitable, Callable, Coroutine, Generator, Iterable, Iterator
from typing import Any, Generic, TypeVar

from shapefn.kernel.errors import (
    EmptyReductionError,
    InvalidOperandError,
    ReductionCancelled,
    require_callable,
)
from shapefn.kernel.pending import MaybeAwaitable, continue_with, discard, is_pending
from shapefn.kernel.shapes import ITERATED_SHAPES, Shape, classify, describe, values_of

logger = logging.getLogger(__name__)

T = TypeVar("T")

Reducer = Callable[[Any, Any], MaybeAwaitable[Any]]


class _Missing:
    def __repr__(self) -> str:
        return "<no initial value>"


MISSING: Any = _Missing()

_EMPTY_MESSAGE = "reduce(...)(container): cannot reduce an empty container without an initial value"


class CancellableReduction(Generic[T]):
    """Awaitable result of reducing an asynchronous iterable.

    The first await starts the fold as a task; later awaits share it and
    see the same result or error, like an asyncio.Future. cancel() makes
    every await raise ReductionCancelled right away. The fold itself is
    cancelled at once while it waits on its source, and stops at its next
    checkpoint while a reducer result is outstanding, so a reducer call is
    never interrupted.

    Example:
        reduction = reduce(add, 0)(ticks())
        asyncio.get_running_loop().call_later(1.0, reduction.cancel)
        total = await reduction
    """

    def __init__(self, fold: Callable[[CancellableReduction[T]], Coroutine[Any, Any, T]]) -> None:
        self._fold = fold
        self._cancelled = False
        self._stepping = False
        self._signal: asyncio.Future[None] | None = None
        self._task: asyncio.Future[T] | None = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        """Abandon the reduction. No effect once it has finished."""
        if self._cancelled or (self._task is not None and self._task.done()):
            return
        self._cancelled = True
        logger.debug("reduction cancelled")
        if self._signal is not None and not self._signal.done():
            self._signal.set_result(None)
        if self._task is not None and not self._stepping:
            self._task.cancel()

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise ReductionCancelled("reduction was cancelled")

    async def await_step(self, pending: Awaitable[Any]) -> Any:
        """Await a reducer result; cancel() waits for it instead of interrupting it."""
        self._stepping = True
        try:
            result = await pending
        finally:
            self._stepping = False
        self.raise_if_cancelled()
        return result

    def then(self, finish: Callable[[T], Any]) -> CancellableReduction[Any]:
        """A cancellable reduction whose result is finish(result)."""
        fold = self._fold

        async def finished(reduction: CancellableReduction[Any]) -> Any:
            return finish(await fold(reduction))

        return CancellableReduction(finished)

    def __await__(self) -> Generator[Any, None, T]:
        return self._race().__await__()

    def _start(self) -> asyncio.Future[T]:
        if self._task is None:
            self._signal = asyncio.get_running_loop().create_future()
            self._task = asyncio.ensure_future(self._fold(self))
            self._task.add_done_callback(_consume_outcome)
        return self._task

    async def _race(self) -> T:
        if self._cancelled and self._task is None:
            raise ReductionCancelled("reduction was cancelled")
        fold = self._start()
        if not fold.done():
            try:
                await asyncio.wait({fold, self._signal}, return_when=asyncio.FIRST_COMPLETED)
            except asyncio.CancelledError:
                self.cancel()
                raise
        if fold.done() and not fold.cancelled():
            return fold.result()
        raise ReductionCancelled("reduction was cancelled")


def _consume_outcome(task: asyncio.Future[Any]) -> None:
    if not task.cancelled():
        task.exception()


def reduce(reducer: Reducer, init: Any = MISSING) -> Callable[[Any], Any]:
    """Fold a container into one value.

    Args:
        reducer: ``(accumulator, item) -> accumulator``, possibly pending.
        init: Initial accumulator, or a function of the container that
            computes it (possibly pending). When omitted the first element
            seeds the accumulator.

    Returns:
        A function of the container returning the accumulated value, a
        pending result of it, or a CancellableReduction for asynchronous
        iterables.

    Raises:
        InvalidConfigurationError: reducer is not callable.
    """
    require_callable(reducer, "reduce(reducer, init)", "reducer")

    def reducing(container: Any) -> Any:
        initial = init(container) if callable(init) else init
        return reduce_container(reducer, initial, container)

    return reducing


def reduce_container(reducer: Reducer, initial: Any, container: Any) -> Any:
    """Fold container with an already chosen initial value (MISSING for none)."""
    shape = classify(container)
    if shape is Shape.ASYNC_ITERABLE:
        return CancellableReduction(
            lambda reduction: _reduce_async_iterable(reducer, initial, container, reduction)
        )
    if shape in ITERATED_SHAPES or shape is Shape.MAP or shape is Shape.OBJECT:
        items = values_of(container)
        return continue_with(initial, lambda resolved: reduce_iterable(reducer, resolved, items))
    discard(initial)
    raise InvalidOperandError(
        f"reduce(...)(container): cannot reduce {describe(container)}", container
    )


def reduce_iterable(reducer: Reducer, initial: Any, items: Iterable[Any]) -> MaybeAwaitable[Any]:
    """Fold synchronously until a reducer call returns a pending result."""
    iterator = iter(items)
    if initial is MISSING:
        try:
            accumulator = next(iterator)
        except StopIteration:
            raise EmptyReductionError(_EMPTY_MESSAGE) from None
    else:
        accumulator = initial

    for item in iterator:
        accumulator = reducer(accumulator, item)
        if is_pending(accumulator):
            return _reduce_iterator_async(reducer, accumulator, iterator)
    return accumulator


async def _reduce_iterator_async(reducer: Reducer, pending: Any, iterator: Iterator[Any]) -> Any:
    accumulator = await pending
    for item in iterator:
        accumulator = reducer(accumulator, item)
        if is_pending(accumulator):
            accumulator = await accumulator
    return accumulator


async def _reduce_async_iterable(
    reducer: Reducer,
    initial: Any,
    aiterable: AsyncIterable[Any],
    reduction: CancellableReduction[Any] | None = None,
) -> Any:
    if is_pending(initial):
        initial = await initial
    iterator = aiter(aiterable)
    try:
        if initial is MISSING:
            try:
                accumulator = await anext(iterator)
            except StopAsyncIteration:
                raise EmptyReductionError(_EMPTY_MESSAGE) from None
        else:
            accumulator = initial

        async for item in iterator:
            if reduction is not None:
                reduction.raise_if_cancelled()
            accumulator = reducer(accumulator, item)
            if is_pending(accumulator):
                if reduction is None:
                    accumulator = await accumulator
                else:
                    accumulator = await reduction.await_step(accumulator)
        return accumulator
    finally:
        aclose = getattr(iterator, "aclose", None)
        if aclose is not None:
            await aclose()



def fold_inner(reducer: Reducer, accumulator: Any, inner: Any) -> MaybeAwaitable[Any]:
    """Fold every element of inner into accumulator; a non-container is one element."""
    shape = classify(inner)
    if shape is Shape.ASYNC_ITERABLE:
        return _reduce_async_iterable(reducer, accumulator, inner)
    if shape in ITERATED_SHAPES or shape is Shape.MAP or shape is Shape.OBJECT:
        return reduce_iterable(reducer, accumulator, values_of(inner))
    return reducer(accumulator, inner)
