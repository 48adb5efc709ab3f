"""Concurrency-bounded mapping.

map_pool keeps at most ``limit`` mapper results outstanding. Once the limit
is reached, the next element is admitted as soon as any outstanding result
settles, whichever finishes first. Output positions follow input positions,
not completion order.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable, Iterable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictInt, ValidationError

from shapefn.kernel.errors import InvalidConcurrencyLimitError, InvalidOperandError, require_callable
from shapefn.kernel.pending import is_pending
from shapefn.kernel.shapes import Shape, classify, describe, rebuild_mapping, rebuild_sequence, rebuild_set
from shapefn.kernel.trace import Trace

logger = logging.getLogger(__name__)

Mapper = Callable[[Any], Any]


class PoolLimit(BaseModel):
    """Validated concurrency limit."""

    model_config = ConfigDict(frozen=True)

    limit: StrictInt = Field(ge=1)


def _validate_limit(limit: Any) -> int:
    try:
        return PoolLimit(limit=limit).limit
    except ValidationError as exc:
        raise InvalidConcurrencyLimitError(
            f"map.pool(limit, mapper): limit must be an int of at least 1, got {limit!r}", limit
        ) from exc


def map_pool(limit: int, mapper: Mapper, *, trace: Trace | None = None) -> Callable[[Any], Any]:
    """Map with at most ``limit`` pending mapper results at a time.

    Args:
        limit: Maximum number of outstanding mapper results, at least 1.
        mapper: Function of one element, usually asynchronous.
        trace: Optional trace receiving pool_submit, pool_wait and
            pool_settle events.

    Returns:
        A function of a list, tuple, set or mapping (values are mapped, keys
        kept) that always returns a pending result of the same shape.

    Raises:
        InvalidConcurrencyLimitError: limit is not an int >= 1.
        InvalidConfigurationError: mapper is not callable.
    """
    limit = _validate_limit(limit)
    require_callable(mapper, "map.pool(limit, mapper)", "mapper")

    def pool_mapping(value: Any) -> Any:
        shape = classify(value)
        if shape is Shape.ARRAY:
            return _run_pool(limit, mapper, value, lambda results: rebuild_sequence(value, results), trace)
        if shape is Shape.SET:
            return _run_pool(limit, mapper, value, lambda results: rebuild_set(value, results), trace)
        if shape is Shape.MAP:
            keys = list(value.keys())
            return _run_pool(
                limit,
                mapper,
                (value[key] for key in keys),
                lambda results: rebuild_mapping(value, zip(keys, results)),
                trace,
            )
        raise InvalidOperandError(
            f"map.pool(...)(value): expected a list, tuple, set or mapping, got {describe(value)}",
            value,
        )

    return pool_mapping


async def _run_pool(
    limit: int,
    mapper: Mapper,
    items: Iterable[Any],
    construct: Callable[[list[Any]], Any],
    trace: Trace | None,
) -> Any:
    results: list[Any] = []
    in_flight: set[asyncio.Future[Any]] = set()
    try:
        for index, item in enumerate(items):
            while len(in_flight) >= limit:
                if trace is not None:
                    trace.record("pool_wait", info={"in_flight": len(in_flight)})
                logger.debug("pool full (%d in flight), waiting for a slot", len(in_flight))
                done, _ = await asyncio.wait(in_flight, return_when=asyncio.FIRST_COMPLETED)
                for task in done:
                    if not task.cancelled() and task.exception() is not None:
                        raise task.exception()  # type: ignore[misc]

            result = mapper(item)
            if not is_pending(result):
                results.append(result)
                continue

            task = asyncio.ensure_future(result)
            in_flight.add(task)
            task.add_done_callback(in_flight.discard)
            if trace is not None:
                _trace_submission(trace, task, index, len(in_flight))
            results.append(task)

        submitted = [item for item in results if isinstance(item, asyncio.Future)]
        if submitted:
            await asyncio.gather(*submitted)
    except BaseException:
        if in_flight:
            logger.debug("pool failed, cancelling %d outstanding results", len(in_flight))
            for task in in_flight:
                task.cancel()
        raise

    return construct([item.result() if isinstance(item, asyncio.Future) else item for item in results])


def _trace_submission(trace: Trace, task: asyncio.Future[Any], index: int, in_flight: int) -> None:
    submit_id = trace.record("pool_submit", info={"index": index, "in_flight": in_flight})
    started = time.perf_counter()

    def settle(_: asyncio.Future[Any]) -> None:
        trace.record(
            "pool_settle",
            info={"index": index},
            parent_id=submit_id,
            duration_ms=(time.perf_counter() - started) * 1000,
        )

    task.add_done_callback(settle)
