# src/colvis/distance.py
"""
Distance strategies shared by the clustering visitors.

A distance is any callable `f(x, y) -> non-negative real`. Visitors call it on
broadcast numpy arrays (e.g. a column against a vector of centers), so the
built-in strategies are written with elementwise numpy operations. Wrap a
scalar-only function with `vectorize` before handing it to a visitor.
"""
import numpy as np
from collections.abc import Callable

from colvis.exceptions import VisitorConfigError

DistanceFunc = Callable[[object, object], object]


def squared_euclidean(x, y):
    """Default distance: (x - y)^2."""
    d = np.subtract(x, y)
    return d * d

def absolute(x, y):
    return np.abs(np.subtract(x, y))

def euclidean(x, y):
    return np.sqrt(squared_euclidean(x, y))

def vectorize(func: Callable[[float, float], float]) -> DistanceFunc:
    """Lift a scalar distance function so it accepts broadcast arrays."""
    return np.vectorize(func, otypes=[float])


_DISTANCES: dict[str, DistanceFunc] = {
    "squared_euclidean": squared_euclidean,
    "absolute": absolute,
    "euclidean": euclidean,
}

def get_distance(name: str | DistanceFunc) -> DistanceFunc:
    """Resolve a distance by name (as used in YAML configs); callables pass through."""
    if callable(name):
        return name
    try:
        return _DISTANCES[name]
    except KeyError:
        raise VisitorConfigError(
            f"Unknown distance '{name}'. Use one of {sorted(_DISTANCES)}."
        ) from None

def pairwise(distance: DistanceFunc, a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Distance table of shape (len(a), len(b))."""
    out = np.asarray(distance(a[:, None], b[None, :]), dtype="float64")
    return np.broadcast_to(out, (len(a), len(b)))
