"""Second-order central-difference stencils for -div(k grad u) (+ c u).

For each dimension d with weight w_d = k_d / h_d^2 a node receives

    diagonal       : sum_d 2 w_d  (+ c)
    both neighbours: -w_d                 (interior along d)
    inner neighbour: -2 w_d               (node on a face normal to d)

On a face the ghost node outside the domain is mirrored onto the inner
neighbour (zero normal flux), so a boundary row keeps the interior diagonal
and the matrix is not symmetric at boundary rows.
"""

import numpy as np
from numba import njit, prange

from utils.errors import ConfigError

from .base import StencilGenerator, numeric_param, register_stencil

COEFFICIENT_NAMES = ("kx", "ky", "kz")


@njit(cache=True)
def _node_stencil(I, npts, strides, w, shift, cols, vals):
    """Write the 1 + 2*ndim stencil slots of node I into cols/vals.

    Slot 0 is the diagonal; slots 1+2d / 2+2d hold the lower / upper
    neighbour along dimension d. Unused slots get weight 0.
    """
    ndim = npts.shape[0]
    diag = shift
    for d in range(ndim):
        i = (I // strides[d]) % npts[d]
        wd = w[d]
        diag += 2.0 * wd
        lo = 1 + 2 * d
        hi = 2 + 2 * d
        if i == 0:
            cols[lo] = I
            vals[lo] = 0.0
            cols[hi] = I + strides[d]
            vals[hi] = -2.0 * wd
        elif i == npts[d] - 1:
            cols[lo] = I - strides[d]
            vals[lo] = -2.0 * wd
            cols[hi] = I
            vals[hi] = 0.0
        else:
            cols[lo] = I - strides[d]
            vals[lo] = -wd
            cols[hi] = I + strides[d]
            vals[hi] = -wd
    cols[0] = I
    vals[0] = diag


@njit(parallel=True, cache=True)
def assemble_stencil_triplets(npts, strides, w, shift):
    """Triplets of the whole grid; every node owns a fixed block of slots."""
    ndim = npts.shape[0]
    n_nodes = 1
    for d in range(ndim):
        n_nodes *= npts[d]
    width = 1 + 2 * ndim

    row = np.empty(n_nodes * width, dtype=np.int64)
    col = np.empty(n_nodes * width, dtype=np.int64)
    data = np.empty(n_nodes * width, dtype=np.float64)

    for I in prange(n_nodes):
        base = I * width
        _node_stencil(I, npts, strides, w, shift, col[base : base + width], data[base : base + width])
        for s in range(width):
            row[base + s] = I

    return row, col, data


class _CentralDifferenceStencil(StencilGenerator):
    """Shared machinery of the diffusion-type stencils."""

    def __init__(self, params, ndim):
        super().__init__(params, ndim)
        self.k = np.array([numeric_param(self.params, name) for name in COEFFICIENT_NAMES[:ndim]])
        if np.any(self.k <= 0.0):
            raise ConfigError(f"diffusion coefficients must be positive, got {self.k.tolist()}")
        self.shift = 0.0

    @classmethod
    def required_params(cls, ndim):
        return list(COEFFICIENT_NAMES[:ndim])

    def _check_grid(self, grid):
        if grid.ndim != self.ndim:
            raise ConfigError(f"'{self.kind}' operator was built for {self.ndim}-D, grid is {grid.ndim}-D")

    def weights(self, grid):
        """w_d = k_d / h_d^2 for the grid spacing."""
        self._check_grid(grid)
        return self.k / np.asarray(grid.size, dtype=np.float64) ** 2

    def node_stencil(self, grid, node):
        w = self.weights(grid)
        if not 0 <= node < grid.N:
            raise IndexError(f"node {node} out of range [0, {grid.N})")
        width = 1 + 2 * self.ndim
        cols = np.empty(width, dtype=np.int64)
        vals = np.empty(width, dtype=np.float64)
        _node_stencil(
            np.int64(node),
            np.asarray(grid.npts, dtype=np.int64),
            np.asarray(grid.strides, dtype=np.int64),
            w,
            self.shift,
            cols,
            vals,
        )
        neighbours = [(int(J), float(v)) for J, v in zip(cols[1:], vals[1:]) if v != 0.0]
        return float(vals[0]), neighbours

    def triplets(self, grid):
        w = self.weights(grid)
        return assemble_stencil_triplets(
            np.ascontiguousarray(grid.npts, dtype=np.int64),
            np.ascontiguousarray(grid.strides, dtype=np.int64),
            np.ascontiguousarray(w),
            float(self.shift),
        )


@register_stencil("laplacian")
class LaplacianStencil(_CentralDifferenceStencil):
    """-div(k grad u) with coefficients kx[, ky[, kz]]."""


@register_stencil("helmholtz")
class HelmholtzStencil(_CentralDifferenceStencil):
    """-div(k grad u) + c u with coefficients kx[, ky[, kz]] and c >= 0."""

    def __init__(self, params, ndim):
        super().__init__(params, ndim)
        self.shift = numeric_param(self.params, "c")
        if self.shift < 0.0:
            raise ConfigError(f"parameter 'c' must be non-negative, got {self.shift}")

    @classmethod
    def required_params(cls, ndim):
        return list(COEFFICIENT_NAMES[:ndim]) + ["c"]

    @property
    def requires_essential_bcs(self):
        return self.shift == 0.0
