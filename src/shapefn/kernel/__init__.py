"""Kernel layer - shapes, pending results, errors and tracing."""

from shapefn.kernel.errors import (
    EmptyReductionError,
    InvalidConcurrencyLimitError,
    InvalidConfigurationError,
    InvalidOperandError,
    ReductionCancelled,
    ShapefnError,
    SyncIterationError,
)
from shapefn.kernel.pending import (
    MaybeAwaitable,
    all_pending,
    catch_pending,
    continue_with,
    is_pending,
)
from shapefn.kernel.shapes import Shape, classify
from shapefn.kernel.trace import Evidence, Trace

__all__ = [
    "Shape",
    "classify",
    # Pending results
    "MaybeAwaitable",
    "is_pending",
    "continue_with",
    "all_pending",
    "catch_pending",
    # Errors
    "ShapefnError",
    "InvalidConfigurationError",
    "InvalidOperandError",
    "InvalidConcurrencyLimitError",
    "EmptyReductionError",
    "SyncIterationError",
    "ReductionCancelled",
    # Tracing
    "Trace",
    "Evidence",
]
