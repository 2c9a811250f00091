"""
Packed triangular storage.

Triangular and symmetric matrices are stored as a flat float64 vector of
their non-redundant entries. The offset arithmetic lives here and only
here; callers index with (row, col).

Layouts:
    PackedUpperTriangular: strictly upper triangle (row < col), row-major.
        For n = 4 the order is (0,1) (0,2) (0,3) (1,2) (1,3) (2,3).
    Packed symmetric: lower triangle including the diagonal, row-major,
        entry (i, j) with i >= j at i*(i+1)/2 + j.
"""

from __future__ import annotations

from typing import Any

import numpy as np
from numpy.typing import NDArray


class PackedUpperTriangular:
    """
    Strictly upper triangular n x n matrix in packed row-major storage.

    The implicit diagonal is not stored; the updating regression treats
    it as a unit diagonal.
    """

    __slots__ = ('_n', '_data')

    def __init__(self, n: int, fill: float = 0.0):
        if n < 0:
            raise ValueError(f"n: must be non-negative, got {n}")
        self._n = n
        self._data = np.full(n * (n - 1) // 2, fill, dtype=np.float64)

    @property
    def n(self) -> int:
        return self._n

    @property
    def data(self) -> NDArray[np.floating[Any]]:
        """The flat storage vector (a view, not a copy)."""
        return self._data

    def __len__(self) -> int:
        return self._data.shape[0]

    def row_start(self, row: int) -> int:
        """Offset of entry (row, row + 1)."""
        return row * (2 * self._n - row - 1) // 2

    def index(self, row: int, col: int) -> int:
        if not 0 <= row < col < self._n:
            raise IndexError(f"({row}, {col}) is not strictly upper triangular for n={self._n}")
        return self.row_start(row) + col - row - 1

    def get(self, row: int, col: int) -> float:
        return float(self._data[self.index(row, col)])

    def set(self, row: int, col: int, value: float) -> None:
        self._data[self.index(row, col)] = value

    def row(self, row: int) -> NDArray[np.floating[Any]]:
        """Entries (row, row+1) .. (row, n-1) as a writable view."""
        start = self.row_start(row)
        return self._data[start:start + self._n - row - 1]

    def fill(self, value: float) -> None:
        self._data.fill(value)

    def copy(self) -> PackedUpperTriangular:
        out = PackedUpperTriangular(self._n)
        out._data[:] = self._data
        return out

    def to_dense(self, diagonal: float = 1.0) -> NDArray[np.floating[Any]]:
        """Expand to a dense n x n upper triangular matrix."""
        dense = np.zeros((self._n, self._n), dtype=np.float64)
        rows, cols = np.triu_indices(self._n, k=1)
        dense[rows, cols] = self._data
        np.fill_diagonal(dense, diagonal)
        return dense

    def __repr__(self) -> str:
        return f"PackedUpperTriangular(n={self._n})"


def symmetric_index(i: int, j: int) -> int:
    """Offset of entry (i, j) in packed symmetric storage."""
    if i < j:
        i, j = j, i
    return i * (i + 1) // 2 + j


def packed_symmetric_size(n: int) -> int:
    return n * (n + 1) // 2


def unpack_symmetric(packed: NDArray[np.floating[Any]], n: int) -> NDArray[np.floating[Any]]:
    """Expand packed symmetric storage to a dense n x n matrix."""
    if packed.shape[0] != packed_symmetric_size(n):
        raise ValueError(
            f"packed: expected {packed_symmetric_size(n)} entries for n={n}, got {packed.shape[0]}"
        )
    dense = np.empty((n, n), dtype=np.float64)
    rows, cols = np.tril_indices(n)
    dense[rows, cols] = packed
    dense[cols, rows] = packed
    return dense
