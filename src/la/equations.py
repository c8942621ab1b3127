"""Partitioned linear system for problems with prescribed degrees of freedom.

The full index space 0..n-1 is split into known (K, prescribed) and unknown
(U, to be solved) DOFs:

    [ Auu  Auk ] [ xu ]   [ bu ]
    [ Aku  Akk ] [ xk ] = [ bk ]

Index maps
----------
FtoU[I], FtoK[I] : position of full index I inside U or K (-1 if absent)
UtoF[i], KtoF[i] : full index of the i-th unknown / known DOF (ascending)

Operators assemble with full indices through `put`/`put_many`; the
contribution is routed to the right block without the operator knowing
which DOFs are prescribed.
"""

import numpy as np
from scipy.sparse import coo_matrix, csr_matrix

from utils.errors import ConfigError
from utils.log import get_logger

from .triplet import Triplet

logger = get_logger(__name__)

NOT_IN_SET = -1


def _as_index_array(known):
    """Sorted unique int64 indices; masks and non-integral values are rejected."""
    raw = np.asarray([] if known is None else list(known))
    if raw.size == 0:
        return np.zeros(0, dtype=np.int64)
    if raw.dtype == np.bool_:
        raise ConfigError("known DOFs must be given as indices, not a boolean mask; use np.flatnonzero(mask)")
    if np.issubdtype(raw.dtype, np.floating):
        bad = raw[~np.isfinite(raw) | (raw != np.floor(raw))]
        if bad.size:
            raise ConfigError(f"known DOF indices must be integers, got {bad.tolist()[:5]}")
    elif not np.issubdtype(raw.dtype, np.integer):
        raise ConfigError(f"known DOF indices must be integers, got dtype {raw.dtype}")
    return np.unique(raw.astype(np.int64))


def eliminate_known(bu, auk, xk):
    """Effective load of the unknown block: bu - Auk @ xk.

    Parameters
    ----------
    bu : np.ndarray
        Assembled load of the unknown DOFs, shape (nu,). Not modified.
    auk : Triplet or scipy.sparse matrix
        The U x K coupling block.
    xk : np.ndarray
        Prescribed values, shape (nk,).

    Returns
    -------
    np.ndarray
        New array of shape (nu,).
    """
    bu = np.asarray(bu, dtype=np.float64)
    xk = np.asarray(xk, dtype=np.float64)
    A = auk.to_matrix() if isinstance(auk, Triplet) else auk
    if A.shape != (bu.shape[0], xk.shape[0]):
        raise ValueError(f"Auk has shape {A.shape}, expected ({bu.shape[0]}, {xk.shape[0]})")
    if xk.shape[0] == 0:
        return bu.copy()
    return bu - A @ xk


class Equations:
    """Linear system split into unknown and known DOFs.

    Parameters
    ----------
    n : int
        Total number of DOFs.
    known : iterable of int, optional
        Full indices of the prescribed DOFs. None or empty means all DOFs are
        unknown.

    Attributes
    ----------
    Auu, Auk, Aku, Akk : Triplet
        Matrix blocks in block-local coordinates.
    Bu, Bk : np.ndarray
        Assembled loads of the unknown / known DOFs.
    Xu, Xk : np.ndarray
        Solved unknowns / prescribed values.
    """

    def __init__(self, n, known=None):
        if int(n) != n or n < 1:
            raise ConfigError(f"number of equations must be a positive integer, got {n!r}")
        self.n = int(n)

        known_arr = _as_index_array(known)
        if known_arr.size and (known_arr[0] < 0 or known_arr[-1] >= self.n):
            bad = known_arr[(known_arr < 0) | (known_arr >= self.n)]
            raise ConfigError(f"known indices {bad.tolist()} outside [0, {self.n})")

        is_known = np.zeros(self.n, dtype=bool)
        is_known[known_arr] = True
        self._is_known = is_known

        # Single ascending pass: both compact sequences come out sorted
        self.KtoF = np.flatnonzero(is_known)
        self.UtoF = np.flatnonzero(~is_known)
        self.nk = int(self.KtoF.size)
        self.nu = int(self.UtoF.size)

        self.FtoK = np.full(self.n, NOT_IN_SET, dtype=np.int64)
        self.FtoU = np.full(self.n, NOT_IN_SET, dtype=np.int64)
        self.FtoK[self.KtoF] = np.arange(self.nk, dtype=np.int64)
        self.FtoU[self.UtoF] = np.arange(self.nu, dtype=np.int64)

        self.Auu = Triplet(self.nu, self.nu)
        self.Auk = Triplet(self.nu, self.nk)
        self.Aku = Triplet(self.nk, self.nu)
        self.Akk = Triplet(self.nk, self.nk)

        self.Bu = np.zeros(self.nu)
        self.Bk = np.zeros(self.nk)
        self.Xu = np.zeros(self.nu)
        self.Xk = np.zeros(self.nk)

        logger.debug("Equations: n=%d nu=%d nk=%d", self.n, self.nu, self.nk)

    def is_known(self, I):
        """True if full index I is a prescribed DOF."""
        return bool(self._is_known[I])

    def _check_indices(self, idx, what):
        if idx.size and (idx.min() < 0 or idx.max() >= self.n):
            bad = idx[(idx < 0) | (idx >= self.n)]
            raise IndexError(f"{what} index {bad.tolist()[:5]} outside [0, {self.n})")

    # ------------------------------------------------------------------
    # Assembly
    # ------------------------------------------------------------------
    def put(self, I, J, value):
        """Add `value` to A[I, J] (full indices), routed to the owning block."""
        if not (0 <= I < self.n):
            raise IndexError(f"row index {I} outside [0, {self.n})")
        if not (0 <= J < self.n):
            raise IndexError(f"column index {J} outside [0, {self.n})")

        row_known = self._is_known[I]
        col_known = self._is_known[J]
        if row_known:
            i = self.FtoK[I]
            if col_known:
                self.Akk.put(i, self.FtoK[J], value)
            else:
                self.Aku.put(i, self.FtoU[J], value)
        else:
            i = self.FtoU[I]
            if col_known:
                self.Auk.put(i, self.FtoK[J], value)
            else:
                self.Auu.put(i, self.FtoU[J], value)

    def put_many(self, rows, cols, values):
        """Vectorised `put`: every index is validated before anything is appended."""
        rows = np.asarray(rows, dtype=np.int64).ravel()
        cols = np.asarray(cols, dtype=np.int64).ravel()
        values = np.asarray(values, dtype=np.float64).ravel()
        if not (rows.shape == cols.shape == values.shape):
            raise ValueError("rows, cols and values must have the same length")
        self._check_indices(rows, "row")
        self._check_indices(cols, "column")

        row_known = self._is_known[rows]
        col_known = self._is_known[cols]

        for block, mask, rmap, cmap in (
            (self.Auu, ~row_known & ~col_known, self.FtoU, self.FtoU),
            (self.Auk, ~row_known & col_known, self.FtoU, self.FtoK),
            (self.Aku, row_known & ~col_known, self.FtoK, self.FtoU),
            (self.Akk, row_known & col_known, self.FtoK, self.FtoK),
        ):
            if np.any(mask):
                block.put_many(rmap[rows[mask]], cmap[cols[mask]], values[mask])

    def add_to_rhs(self, I, value):
        """Add a load contribution at full index I into Bu or Bk."""
        if not (0 <= I < self.n):
            raise IndexError(f"index {I} outside [0, {self.n})")
        if self._is_known[I]:
            self.Bk[self.FtoK[I]] += value
        else:
            self.Bu[self.FtoU[I]] += value

    def add_many_to_rhs(self, rows, values):
        """Vectorised `add_to_rhs`; repeated indices accumulate."""
        rows = np.asarray(rows, dtype=np.int64).ravel()
        values = np.asarray(values, dtype=np.float64).ravel()
        if rows.shape != values.shape:
            raise ValueError("rows and values must have the same length")
        self._check_indices(rows, "load")

        known = self._is_known[rows]
        np.add.at(self.Bu, self.FtoU[rows[~known]], values[~known])
        np.add.at(self.Bk, self.FtoK[rows[known]], values[known])

    def clear(self):
        """Reset blocks and vectors; the partition is kept."""
        for block in (self.Auu, self.Auk, self.Aku, self.Akk):
            block.clear()
        for vec in (self.Bu, self.Bk, self.Xu, self.Xk):
            vec.fill(0.0)

    # ------------------------------------------------------------------
    # Vectors
    # ------------------------------------------------------------------
    def split_vector(self, x):
        """Split a full vector into its (unknown, known) parts."""
        x = np.asarray(x)
        if x.shape[0] != self.n:
            raise ValueError(f"vector has length {x.shape[0]}, expected {self.n}")
        return x[self.UtoF].copy(), x[self.KtoF].copy()

    def join_vector(self, xu, xk, out=None):
        """Scatter unknown and known parts back into a full vector."""
        xu = np.asarray(xu)
        xk = np.asarray(xk)
        if xu.shape[0] != self.nu or xk.shape[0] != self.nk:
            raise ValueError(
                f"parts have lengths ({xu.shape[0]}, {xk.shape[0]}), expected ({self.nu}, {self.nk})"
            )
        if out is None:
            out = np.zeros(self.n, dtype=np.result_type(xu, xk, np.float64))
        out[self.UtoF] = xu
        out[self.KtoF] = xk
        return out

    def effective_rhs(self):
        """Load of the reduced system once the known values are eliminated."""
        return eliminate_known(self.Bu, self.Auk, self.Xk)

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------
    def full_matrix(self) -> csr_matrix:
        """Reassemble the n x n matrix in full indexing from the four blocks."""
        rows, cols, data = [], [], []
        for block, rmap, cmap in (
            (self.Auu, self.UtoF, self.UtoF),
            (self.Auk, self.UtoF, self.KtoF),
            (self.Aku, self.KtoF, self.UtoF),
            (self.Akk, self.KtoF, self.KtoF),
        ):
            rows.append(rmap[block.rows])
            cols.append(cmap[block.cols])
            data.append(block.values)
        A = coo_matrix(
            (np.concatenate(data), (np.concatenate(rows), np.concatenate(cols))),
            shape=(self.n, self.n),
        ).tocsr()
        A.sum_duplicates()
        return A

    def full_rhs(self):
        """Bu and Bk joined into a full vector."""
        return self.join_vector(self.Bu, self.Bk)

    def __repr__(self):
        return f"Equations(n={self.n}, nu={self.nu}, nk={self.nk})"
