import logging

from .combinators import (
    all_,
    and_,
    any_,
    assign,
    eq,
    fork,
    fork_series,
    get,
    gt,
    gte,
    lt,
    lte,
    not_,
    omit,
    or_,
    pick,
    pipe,
    switch_case,
    tap,
    try_catch,
)
from .config import Settings, get_settings
from .kernel import (
    EmptyReductionError,
    Evidence,
    InvalidConcurrencyLimitError,
    InvalidConfigurationError,
    InvalidOperandError,
    ReductionCancelled,
    Shape,
    ShapefnError,
    SyncIterationError,
    Trace,
    classify,
    is_pending,
)
from .log import setup_logger
from .ops import (
    CancellableReduction,
    filter,
    filter_with_index,
    flat_map,
    map,
    map_pool,
    map_series,
    map_with_index,
    reduce,
    transform,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Container operators
    "map",
    "map_series",
    "map_with_index",
    "map_pool",
    "filter",
    "filter_with_index",
    "flat_map",
    "reduce",
    "CancellableReduction",
    "transform",
    # Composition
    "pipe",
    "fork",
    "fork_series",
    "assign",
    "tap",
    "try_catch",
    "switch_case",
    "any_",
    "all_",
    "and_",
    "or_",
    "not_",
    "eq",
    "gt",
    "lt",
    "gte",
    "lte",
    "get",
    "pick",
    "omit",
    # Shapes and pending results
    "Shape",
    "classify",
    "is_pending",
    # Errors
    "ShapefnError",
    "InvalidConfigurationError",
    "InvalidOperandError",
    "InvalidConcurrencyLimitError",
    "EmptyReductionError",
    "SyncIterationError",
    "ReductionCancelled",
    # Tracing and configuration
    "Trace",
    "Evidence",
    "Settings",
    "get_settings",
    "setup_logger",
]
