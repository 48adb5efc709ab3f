"""Runtime trace for operator execution.

Trace is opt-in observability: operators that accept a trace record what
they schedule and when it settles. It never changes results.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any


@dataclass(frozen=True)
class Evidence:
    """One recorded event.

    Attributes:
        action: What happened (e.g. "pool_submit", "pool_settle").
        id: Sequential event id, unique within its trace.
        parent_id: Id of the event this one completes, if any.
        timestamp: UTC time of recording.
        info: Event details.
        duration_ms: Elapsed time for events that close an interval.
    """

    action: str
    id: int = 0
    parent_id: int | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    info: dict[str, Any] = field(default_factory=dict)
    duration_ms: float | None = None


class Trace:
    """Append-only event log.

    Single-threaded cooperative use only; record() is O(1) and a disabled
    trace costs one flag check per call.
    """

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled
        self._events: list[Evidence] = []
        self._next_id: int = 0

    def record(
        self,
        action: str,
        info: dict[str, Any] | None = None,
        parent_id: int | None = None,
        duration_ms: float | None = None,
    ) -> int | None:
        """Record an event.

        Returns:
            The new event id, or None if tracing is disabled.
        """
        if not self.enabled:
            return None

        event_id = self._next_id
        self._next_id += 1
        self._events.append(
            Evidence(
                action=action,
                id=event_id,
                parent_id=parent_id,
                timestamp=datetime.now(UTC),
                info=info or {},
                duration_ms=duration_ms,
            )
        )
        return event_id

    def get_events(self, action: str | None = None) -> list[Evidence]:
        """Recorded events, optionally only those with the given action."""
        if action is None:
            return list(self._events)
        return [event for event in self._events if event.action == action]

    def children(self, event_id: int) -> list[Evidence]:
        return [event for event in self._events if event.parent_id == event_id]

    def __len__(self) -> int:
        return len(self._events)

    def clear(self) -> None:
        self._events.clear()
        self._next_id = 0
