"""Finite-difference operator: stencil selection and assembly into Equations."""

import numpy as np

from utils.errors import ConfigError
from utils.log import get_logger

from .stencils import make_stencil

logger = get_logger(__name__)


def _as_param_dict(params):
    """Accept a mapping or a sequence of (name, value) pairs."""
    if params is None:
        return {}
    try:
        return dict(params)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"params must be a mapping of name -> number, got {params!r}") from exc


class FdmOperator:
    """Differential operator discretised by finite differences.

    Parameters
    ----------
    kind : str
        Registered operator kind, e.g. "laplacian".
    params : mapping
        Named numeric parameters, e.g. {"kx": 1, "ky": 1}.
    ndim : int, optional
        Spatial dimension the operator is validated for. Default is 2.
    """

    def __init__(self, kind, params, ndim=2):
        self.kind = kind
        self.params = _as_param_dict(params)
        self.ndim = ndim
        self.generator = make_stencil(kind, self.params, ndim)

    @property
    def requires_essential_bcs(self):
        return self.generator.requires_essential_bcs

    def stencil(self, grid, node):
        """Diagonal coefficient and nonzero (neighbour, weight) pairs of one node."""
        return self.generator.node_stencil(grid, node)

    def _check_sizes(self, grid, equations):
        if grid.N != equations.n:
            raise ConfigError(f"grid has {grid.N} nodes but equations have {equations.n} DOFs")

    def assemble(self, grid, equations):
        """Add the operator matrix of every grid node into `equations`."""
        self._check_sizes(grid, equations)
        row, col, data = self.generator.triplets(grid)

        nonzero = data != 0.0
        equations.put_many(row[nonzero], col[nonzero], data[nonzero])
        logger.debug(
            "assembled '%s' on %d nodes: %d triplets (Auu=%d Auk=%d Aku=%d Akk=%d)",
            self.kind,
            grid.N,
            int(nonzero.sum()),
            equations.Auu.nnz,
            equations.Auk.nnz,
            equations.Aku.nnz,
            equations.Akk.nnz,
        )

    def assemble_source(self, grid, equations, source):
        """Add a source term s(x) to the load vector.

        `source` is either a number or a function of one node's coordinates.
        """
        self._check_sizes(grid, equations)
        if callable(source):
            values = np.array([float(source(x)) for x in grid.coords], dtype=np.float64)
        else:
            try:
                values = np.full(grid.N, float(source))
            except (TypeError, ValueError) as exc:
                raise ConfigError(f"source must be a number or callable, got {source!r}") from exc
        if not np.all(np.isfinite(values)):
            raise ConfigError("source term produced non-finite values")
        equations.add_many_to_rhs(np.arange(grid.N), values)

    def __repr__(self):
        return f"FdmOperator(kind={self.kind!r}, params={self.params}, ndim={self.ndim})"
