from shapefn.combinators.access import get, omit, pick
from shapefn.combinators.flow import assign, fork, fork_series, pipe, switch_case, tap, try_catch
from shapefn.combinators.logic import all_, and_, any_, eq, gt, gte, lt, lte, not_, or_

__all__ = [
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
]
