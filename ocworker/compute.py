"""Numeric kernels for the worker: integer add, vector add and matrix products.

Arithmetic follows 32-bit device semantics: unsigned 32-bit integers wrap
around and floating-point work is done in single precision.
"""

from __future__ import annotations

import threading
from typing import Sequence

import numpy as np

_U32_LIMIT = 1 << 32

Matrix = list[list[float]]


def _check_u32(name: str, value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int")
    if not 0 <= value < _U32_LIMIT:
        raise ValueError(f"{name} is out of range for an unsigned 32-bit integer")
    return value


def _vector(values: Sequence[float]) -> np.ndarray:
    return np.asarray(list(values), dtype=np.float32).reshape(-1)


def _matrix(rows: Sequence[Sequence[float]], name: str) -> np.ndarray:
    rows = [list(row) for row in rows]
    width = len(rows[0]) if rows else 0
    if any(len(row) != width for row in rows):
        raise ValueError(f"Matrix {name} has rows of different lengths.")
    return np.asarray(rows, dtype=np.float32).reshape(len(rows), width)


class ComputeManager:
    """Runs the worker's numeric kernels in single precision."""

    @property
    def kernels(self) -> tuple[str, ...]:
        """Names of the kernels this manager provides."""
        return ("add_u32", "add", "matrix_multiply", "vector_matrix_multiply")

    def add_u32(self, a: int, b: int) -> int:
        """Add two unsigned 32-bit integers with wrap-around."""
        return (_check_u32("a", a) + _check_u32("b", b)) % _U32_LIMIT

    def add(self, input_a: Sequence[float], input_b: Sequence[float]) -> list[float]:
        """Element-wise sum of two equally long vectors."""
        vec_a = _vector(input_a)
        vec_b = _vector(input_b)
        if vec_a.shape != vec_b.shape:
            raise ValueError("Input length mismatch")
        return (vec_a + vec_b).tolist()

    def matrix_multiply(
        self, a: Sequence[Sequence[float]], b: Sequence[Sequence[float]]
    ) -> Matrix:
        """Product of an m x k matrix and a k x n matrix, as m rows of n values."""
        mat_a = _matrix(a, "A")
        mat_b = _matrix(b, "B")
        if mat_a.shape[1] != mat_b.shape[0]:
            raise ValueError("Matrix A's width must equal Matrix B's height.")
        return (mat_a @ mat_b).astype(np.float32).tolist()

    def vec_matrix_multiply(
        self, a: Sequence[float], b: Sequence[Sequence[float]]
    ) -> list[float]:
        """Product of a row vector of length k and a k x n matrix."""
        vec = _vector(a)
        mat = _matrix(b, "B")
        if vec.shape[0] != mat.shape[0]:
            raise ValueError("Vector A's width must equal Matrix B's height.")
        return (vec @ mat).astype(np.float32).tolist()


_MANAGER: ComputeManager | None = None
_LOCK = threading.Lock()


def init_compute() -> ComputeManager:
    """Create the shared manager once and return it."""
    global _MANAGER
    with _LOCK:
        if _MANAGER is None:
            _MANAGER = ComputeManager()
        return _MANAGER


def get_compute() -> ComputeManager:
    """Return the shared manager; raise if it was never initialised."""
    if _MANAGER is None:
        raise RuntimeError("ComputeManager not initialized")
    return _MANAGER


def matrix_multiply(a: Sequence[Sequence[float]], b: Sequence[Sequence[float]]) -> Matrix:
    """Matrix product on the shared manager."""
    return get_compute().matrix_multiply(a, b)


def vec_matrix_multiply(a: Sequence[float], b: Sequence[Sequence[float]]) -> list[float]:
    """Vector-matrix product on the shared manager."""
    return get_compute().vec_matrix_multiply(a, b)