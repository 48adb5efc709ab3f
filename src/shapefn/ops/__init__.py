"""Container operators - map, filter, reduce, transform, flat_map and their variants."""

from shapefn.ops.filter import filter, filter_with_index
from shapefn.ops.flat_map import flat_map
from shapefn.ops.map import map, map_series, map_with_index
from shapefn.ops.pool import map_pool
from shapefn.ops.reduce import CancellableReduction, reduce
from shapefn.ops.transducers import filter_reducer, flat_map_reducer, map_reducer
from shapefn.ops.transform import transform

__all__ = [
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
    # Reducer forms
    "map_reducer",
    "filter_reducer",
    "flat_map_reducer",
]
