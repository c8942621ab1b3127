"""Uniform structured grid for finite-difference discretisations.

Nodes are numbered with x running fastest:

    I = i + j * nx + k * nx * ny

so for a 2-D grid with 4x4 nodes the bottom row is 0..3 and the top row is
12..15.

Boundary groups are addressed by integer tags, two per dimension:

    10 / 11 : x-min / x-max  (left / right)
    20 / 21 : y-min / y-max  (bottom / top)
    30 / 31 : z-min / z-max  (back / front)
"""

import numpy as np

from utils.errors import ConfigError
from utils.log import get_logger

logger = get_logger(__name__)

# Tag -> (dimension, side) with side 0 = min face, 1 = max face
BOUNDARY_TAGS = {
    10: (0, 0),
    11: (0, 1),
    20: (1, 0),
    21: (1, 1),
    30: (2, 0),
    31: (2, 1),
}

LEFT, RIGHT, BOTTOM, TOP, BACK, FRONT = 10, 11, 20, 21, 30, 31


class UniformGrid:
    """Structured grid with uniform spacing in 1, 2 or 3 dimensions.

    Parameters
    ----------
    xmin, xmax : sequence of float
        Lower and upper bounds per dimension.
    ndiv : sequence of int
        Number of divisions per dimension (nodes per dimension = ndiv + 1).

    Attributes
    ----------
    ndim : int
        Number of spatial dimensions.
    npts : np.ndarray
        Nodes per dimension, shape (ndim,).
    N : int
        Total number of nodes.
    size : np.ndarray
        Uniform step per dimension, shape (ndim,).
    coords : np.ndarray
        Node coordinates, shape (N, ndim).
    """

    def __init__(self, xmin, xmax, ndiv):
        xmin = np.atleast_1d(np.asarray(xmin, dtype=np.float64))
        xmax = np.atleast_1d(np.asarray(xmax, dtype=np.float64))
        try:
            ndiv_arr = np.atleast_1d(np.asarray(ndiv))
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"ndiv must be a sequence of integers, got {ndiv!r}") from exc

        if not (xmin.shape == xmax.shape == ndiv_arr.shape) or xmin.ndim != 1:
            raise ConfigError(
                f"xmin, xmax and ndiv must have the same length "
                f"(got {xmin.size}, {xmax.size}, {ndiv_arr.size})"
            )
        if not 1 <= xmin.size <= 3:
            raise ConfigError(f"only 1, 2 or 3 dimensions are supported, got {xmin.size}")
        if not np.issubdtype(ndiv_arr.dtype, np.integer):
            raise ConfigError(f"ndiv must contain integers, got {ndiv_arr.tolist()}")
        if np.any(ndiv_arr < 1):
            raise ConfigError(f"ndiv must be >= 1 in every dimension, got {ndiv_arr.tolist()}")
        if not (np.all(np.isfinite(xmin)) and np.all(np.isfinite(xmax))):
            raise ConfigError("grid bounds must be finite")
        if np.any(xmax <= xmin):
            raise ConfigError(f"xmax must exceed xmin in every dimension (xmin={xmin.tolist()}, xmax={xmax.tolist()})")

        self.ndim = int(xmin.size)
        self.xmin = xmin
        self.xmax = xmax
        self.ndiv = ndiv_arr.astype(np.int64)
        self.npts = self.ndiv + 1
        self.N = int(np.prod(self.npts))
        self.size = (xmax - xmin) / self.ndiv

        # Strides of the x-fastest numbering
        self.strides = np.ones(self.ndim, dtype=np.int64)
        for d in range(1, self.ndim):
            self.strides[d] = self.strides[d - 1] * self.npts[d - 1]

        # Multi-index per node, shape (ndim, N)
        self._index = np.indices(tuple(int(n) for n in self.npts[::-1])).reshape(self.ndim, -1)[::-1].astype(np.int64)

        self.axes = [np.linspace(xmin[d], xmax[d], int(self.npts[d])) for d in range(self.ndim)]
        self.coords = np.ascontiguousarray(
            np.column_stack([self.axes[d][self._index[d]] for d in range(self.ndim)])
        )

        logger.debug("UniformGrid: ndim=%d npts=%s N=%d h=%s", self.ndim, self.npts.tolist(), self.N, self.size.tolist())

    @property
    def h(self):
        """Alias for the per-dimension spacing."""
        return self.size

    def node(self, *index):
        """Full node index from per-dimension indices (i, j, k)."""
        if len(index) != self.ndim:
            raise ConfigError(f"expected {self.ndim} indices, got {len(index)}")
        for d, i in enumerate(index):
            if not 0 <= i < self.npts[d]:
                raise IndexError(f"index {i} out of range for dimension {d} with {self.npts[d]} nodes")
        return int(np.dot(index, self.strides))

    def multi_index(self, node):
        """Per-dimension indices (i, j, k) of a full node index."""
        if not 0 <= node < self.N:
            raise IndexError(f"node {node} out of range [0, {self.N})")
        return tuple(int(self._index[d, node]) for d in range(self.ndim))

    def boundary(self, tag):
        """Ascending node indices of the boundary group identified by `tag`."""
        if tag not in BOUNDARY_TAGS:
            raise ConfigError(f"unknown boundary tag {tag!r}. Known: {sorted(BOUNDARY_TAGS)}")
        dim, side = BOUNDARY_TAGS[tag]
        if dim >= self.ndim:
            raise ConfigError(f"boundary tag {tag} needs at least {dim + 1} dimensions; grid has {self.ndim}")
        target = 0 if side == 0 else self.npts[dim] - 1
        return np.flatnonzero(self._index[dim] == target)

    def tags(self):
        """Boundary tags valid for this grid, in ascending order."""
        return [tag for tag, (dim, _) in sorted(BOUNDARY_TAGS.items()) if dim < self.ndim]

    @property
    def edge(self):
        """Boundary groups of a 2-D grid ordered [bottom, right, top, left]."""
        if self.ndim != 2:
            raise ConfigError(f"edge is defined for 2-D grids only; grid has {self.ndim} dimensions")
        return [self.boundary(tag) for tag in (BOTTOM, RIGHT, TOP, LEFT)]

    def boundary_nodes(self):
        """Sorted union of every boundary group."""
        on_boundary = np.zeros(self.N, dtype=bool)
        for d in range(self.ndim):
            on_boundary |= (self._index[d] == 0) | (self._index[d] == self.npts[d] - 1)
        return np.flatnonzero(on_boundary)

    def reshape(self, field):
        """Reshape a full-index vector to an array shaped like the grid (z, y, x)."""
        field = np.asarray(field)
        if field.shape[0] != self.N:
            raise ConfigError(f"field has {field.shape[0]} entries, grid has {self.N} nodes")
        return field.reshape(tuple(self.npts[::-1]) + field.shape[1:])

    def __repr__(self):
        return f"UniformGrid(xmin={self.xmin.tolist()}, xmax={self.xmax.tolist()}, ndiv={self.ndiv.tolist()})"
