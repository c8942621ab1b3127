"""Append-only sparse triplet (COO) buffer.

Assembly writes (row, col, value) entries in any order; entries sharing the
same coordinates are summed when the buffer is consolidated into a SciPy
matrix. Storage grows geometrically so the hot assembly loop never re-sorts.
"""

import numpy as np
from scipy.sparse import coo_matrix, csr_matrix

_MIN_CAPACITY = 16


class Triplet:
    """Sparse matrix under assembly, stored as triplets.

    Parameters
    ----------
    m, n : int
        Matrix shape.
    capacity : int, optional
        Initial number of entries to reserve.
    """

    def __init__(self, m, n, capacity=0):
        if m < 0 or n < 0:
            raise ValueError(f"invalid triplet shape ({m}, {n})")
        self.shape = (int(m), int(n))
        cap = max(int(capacity), _MIN_CAPACITY)
        self._row = np.zeros(cap, dtype=np.int64)
        self._col = np.zeros(cap, dtype=np.int64)
        self._val = np.zeros(cap, dtype=np.float64)
        self._pos = 0

    def __len__(self):
        return self._pos

    @property
    def nnz(self):
        """Number of stored triplets (before duplicates are merged)."""
        return self._pos

    @property
    def rows(self):
        return self._row[: self._pos]

    @property
    def cols(self):
        return self._col[: self._pos]

    @property
    def values(self):
        return self._val[: self._pos]

    def _reserve(self, extra):
        needed = self._pos + extra
        cap = self._row.shape[0]
        if needed <= cap:
            return
        while cap < needed:
            cap *= 2
        self._row = np.resize(self._row, cap)
        self._col = np.resize(self._col, cap)
        self._val = np.resize(self._val, cap)

    def _check(self, rows, cols):
        m, n = self.shape
        if rows.size and (rows.min() < 0 or rows.max() >= m):
            raise IndexError(f"row index out of range for triplet of shape {self.shape}")
        if cols.size and (cols.min() < 0 or cols.max() >= n):
            raise IndexError(f"column index out of range for triplet of shape {self.shape}")

    def put(self, i, j, x):
        """Append a single entry A[i, j] += x."""
        m, n = self.shape
        if not (0 <= i < m and 0 <= j < n):
            raise IndexError(f"entry ({i}, {j}) out of range for triplet of shape {self.shape}")
        self._reserve(1)
        self._row[self._pos] = i
        self._col[self._pos] = j
        self._val[self._pos] = x
        self._pos += 1

    def put_many(self, rows, cols, values):
        """Append a batch of entries; all indices are checked before any is written."""
        rows = np.asarray(rows, dtype=np.int64).ravel()
        cols = np.asarray(cols, dtype=np.int64).ravel()
        values = np.asarray(values, dtype=np.float64).ravel()
        if not (rows.shape == cols.shape == values.shape):
            raise ValueError("rows, cols and values must have the same length")
        self._check(rows, cols)

        k = rows.shape[0]
        self._reserve(k)
        self._row[self._pos : self._pos + k] = rows
        self._col[self._pos : self._pos + k] = cols
        self._val[self._pos : self._pos + k] = values
        self._pos += k

    def clear(self):
        """Drop all entries, keeping the shape and the reserved storage."""
        self._pos = 0

    def to_matrix(self) -> csr_matrix:
        """Consolidate into CSR format, summing duplicate entries."""
        A = coo_matrix((self.values, (self.rows, self.cols)), shape=self.shape).tocsr()
        A.sum_duplicates()
        return A

    def to_dense(self) -> np.ndarray:
        """Consolidate into a dense array, summing duplicate entries."""
        dense = np.zeros(self.shape, dtype=np.float64)
        np.add.at(dense, (self.rows, self.cols), self.values)
        return dense

    def mat_vec_mul(self, x, alpha=1.0):
        """Return alpha * A @ x."""
        x = np.asarray(x, dtype=np.float64)
        if x.shape[0] != self.shape[1]:
            raise ValueError(f"vector of length {x.shape[0]} does not match {self.shape[1]} columns")
        return alpha * (self.to_matrix() @ x)

    def __repr__(self):
        return f"Triplet(shape={self.shape}, nnz={self.nnz})"
