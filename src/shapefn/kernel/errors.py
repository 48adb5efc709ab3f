"""Error types raised by shapefn operators."""

from __future__ import annotations

from typing import Any


class ShapefnError(Exception):
    """Base class for every error raised by the library itself.

    Errors raised by user-supplied mappers, predicates and reducers are
    never wrapped; they reach the caller unchanged.
    """


class InvalidConfigurationError(ShapefnError, TypeError):
    """An operator was configured with something other than a function."""

    def __init__(self, message: str, value: Any = None) -> None:
        self.value = value
        super().__init__(message)


class InvalidOperandError(ShapefnError, TypeError):
    """A configured operator was applied to a value of no supported shape."""

    def __init__(self, message: str, value: Any = None) -> None:
        self.value = value
        super().__init__(message)

    def __repr__(self) -> str:
        return f"InvalidOperandError({super().__str__()!r}, value={self.value!r})"


class InvalidConcurrencyLimitError(ShapefnError, ValueError):
    """A pool operator was configured with a limit that is not an int >= 1."""

    def __init__(self, message: str, limit: Any = None) -> None:
        self.limit = limit
        super().__init__(message)


class EmptyReductionError(ShapefnError, TypeError):
    """An empty container was reduced without an initial value."""


class SyncIterationError(ShapefnError, TypeError):
    """A pending result appeared while pulling from a synchronous lazy sequence.

    Raised at the pull that discovers it, never when the operator is built.
    """

    def __init__(self, message: str, item: Any = None) -> None:
        self.item = item
        super().__init__(message)


class ReductionCancelled(ShapefnError):
    """Raised by an asynchronous reduction whose cancel() was called."""


def require_callable(value: Any, where: str, name: str) -> None:
    """Raise InvalidConfigurationError unless value is callable.

    Args:
        value: The configuration argument to check.
        where: Operator signature for the message, e.g. "map(mapper)".
        name: Argument name within that signature.
    """
    if not callable(value):
        raise InvalidConfigurationError(
            f"{where}: {name} is not callable (got {type(value).__name__})", value
        )
