"""Small numeric helpers shared by the learners and the recommenders."""

from __future__ import annotations

from functools import reduce
from typing import Callable, Sequence

import numpy as np

from .errors import PreconditionError


MatrixLike = Sequence[Sequence[float]] | np.ndarray
VectorLike = Sequence[float] | np.ndarray


def is_rectangular(matrix: MatrixLike) -> bool:
    """True iff every row has the same length as the first one."""
    rows = list(matrix)
    if not rows:
        return True
    n_cols = len(rows[0])
    return all(len(row) == n_cols for row in rows)


def _require_rectangular(matrix: MatrixLike, name: str) -> np.ndarray:
    if not is_rectangular(matrix):
        raise PreconditionError(f"{name} must be rectangular, but rows have lengths {[len(r) for r in matrix]}")
    return np.asarray(matrix, dtype=np.float64)


def vector_distance(v1: VectorLike, v2: VectorLike) -> float:
    """Euclidean distance between two equal-length vectors."""
    if len(v1) != len(v2):
        raise PreconditionError(f"vectors must have equal length, got {len(v1)} and {len(v2)}")
    a = np.asarray(v1, dtype=np.float64)
    b = np.asarray(v2, dtype=np.float64)
    return float(np.linalg.norm(a - b))


def vector_mean(vectors: MatrixLike) -> np.ndarray:
    """Element-wise mean over a non-empty collection of equal-length vectors."""
    if len(vectors) == 0:
        raise PreconditionError("cannot average an empty collection of vectors")
    arr = _require_rectangular(vectors, "vectors")
    return arr.mean(axis=0)


def matrix_vector_product(matrix: MatrixLike, vector: VectorLike) -> np.ndarray:
    m = _require_rectangular(matrix, "matrix")
    v = np.asarray(vector, dtype=np.float64)
    if m.ndim != 2 or m.shape[1] != v.shape[0]:
        raise PreconditionError(f"matrix of shape {m.shape} cannot multiply a vector of length {v.shape[0]}")
    return m @ v


def matrix_equals(m1: MatrixLike, m2: MatrixLike) -> bool:
    """Exact element-wise equality; dimensions must match too.

    No tolerance is applied: K-Means uses this as its termination signal.
    """
    if len(m1) != len(m2):
        return False
    if not (is_rectangular(m1) and is_rectangular(m2)):
        return False
    a = np.asarray(m1, dtype=np.float64)
    b = np.asarray(m2, dtype=np.float64)
    return a.shape == b.shape and bool(np.array_equal(a, b))


def extremum_of(matrix: MatrixLike, prefer: Callable[[float, float], bool]) -> float:
    """Reduce a 2-D matrix to one scalar; `prefer(a, b)` is true when `a` wins.

    `extremum_of(m, operator.lt)` is the minimum, `operator.gt` the maximum.
    """
    rows = [list(row) for row in matrix]
    if not rows or not all(rows):
        raise PreconditionError("cannot reduce an empty matrix")

    def pick(a: float, b: float) -> float:
        return a if prefer(a, b) else b

    return float(reduce(pick, (reduce(pick, row) for row in rows)))
