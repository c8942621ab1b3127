"""Finite-difference solver for linear elliptic problems on uniform grids.

Pipeline
--------
1. build grid and operator (constructor)
2. set_bcs: partition DOFs from the boundary registry, assemble, fill Xk
3. solve: eliminate Xk from the load, solve Auu xu = bu - Auk xk,
   join xu/xk into U and optionally recompute F = A U
"""

from dataclasses import replace
from enum import Enum

import numpy as np

from datastructures import FdmFields, FdmInfo
from la import Equations
from la.linear_solvers import LINEAR_SOLVERS, solve_linear_system
from meshing import UniformGrid
from utils.errors import ConfigError, StateError
from utils.log import get_logger

from .operator import FdmOperator

logger = get_logger(__name__)


class SolverState(Enum):
    CONSTRUCTED = "constructed"
    BCS_SET = "bcs_set"
    SOLVED = "solved"


class FdmSolver:
    """Finite-difference solver with essential boundary conditions.

    Parameters
    ----------
    kind : str, optional
        Operator kind, e.g. "laplacian".
    params : mapping, optional
        Operator parameters, e.g. {"kx": 1, "ky": 1}.
    xmin, xmax : sequence of float, optional
        Domain bounds per dimension.
    ndiv : sequence of int, optional
        Divisions per dimension.
    config : FdmInfo, optional
        Full configuration. If not provided, the arguments above and
        kwargs are used to create one.
    **kwargs
        Further FdmInfo fields (linear_solver, field_key, cg_rtol, ...).

    Attributes
    ----------
    grid : UniformGrid
    operator : FdmOperator
    equations : Equations
        Built by set_bcs.
    U : np.ndarray
        Solution in full node order, set by solve.
    F : np.ndarray
        A @ U in full node order, set by solve(reactions=True).
    """

    Config = FdmInfo

    def __init__(self, kind=None, params=None, xmin=None, xmax=None, ndiv=None, config=None, **kwargs):
        if config is None:
            given = {
                name: value
                for name, value in (("kind", kind), ("params", params), ("xmin", xmin), ("xmax", xmax), ("ndiv", ndiv))
                if value is not None
            }
            try:
                config = self.Config(**given, **kwargs)
            except TypeError as exc:
                raise ConfigError(f"invalid solver configuration: {exc}") from exc

        if config.linear_solver not in LINEAR_SOLVERS:
            raise ConfigError(f"Unknown linear solver '{config.linear_solver}'. Known: {sorted(LINEAR_SOLVERS)}")

        self.config = config
        self.grid = UniformGrid(config.xmin, config.xmax, config.ndiv)
        self.operator = FdmOperator(config.kind, config.params, ndim=self.grid.ndim)

        self.equations = None
        self.ebcs = None
        self.source = None
        self.U = None
        self.F = None
        self.fields = None
        self.metadata = None
        self.state = SolverState.CONSTRUCTED

        logger.info(
            "FdmSolver: kind=%s grid=%s N=%d solver=%s",
            config.kind,
            "x".join(str(n) for n in self.grid.npts),
            self.grid.N,
            config.linear_solver,
        )

    def set_source(self, source):
        """Source term s(x) of -div(k grad u) = s; a number or a function of node coordinates."""
        if self.state is not SolverState.CONSTRUCTED:
            raise StateError("the source term must be set before the boundary conditions")
        self.source = source

    def set_bcs(self, ebcs):
        """Partition the DOFs, assemble the operator and write prescribed values.

        Parameters
        ----------
        ebcs : EssentialBcs
            Complete boundary registry; its nodes become the known DOFs.
        """
        if self.state is not SolverState.CONSTRUCTED:
            raise ConfigError("boundary conditions are already set; build a new solver for a new configuration")

        key = self.config.field_key
        foreign = [k for k in ebcs.keys() if k != key]
        if foreign:
            raise ConfigError(f"boundary conditions for unknown variables {foreign}; this solver handles {key!r}")

        known = ebcs.nodes(key)
        if known.size and known[-1] >= self.grid.N:
            raise ConfigError(f"boundary node {int(known[-1])} outside grid with {self.grid.N} nodes")
        if known.size >= self.grid.N:
            raise ConfigError("boundary conditions prescribe every node; nothing left to solve")
        if known.size == 0 and self.operator.requires_essential_bcs:
            raise ConfigError(
                f"operator '{self.operator.kind}' is singular without essential boundary conditions"
            )

        equations = Equations(self.grid.N, known)
        self.operator.assemble(self.grid, equations)
        if self.source is not None:
            self.operator.assemble_source(self.grid, equations, self.source)
        ebcs.apply(equations, key)

        self.equations = equations
        self.ebcs = ebcs
        self.state = SolverState.BCS_SET
        logger.info("boundary conditions set: %d unknown, %d known DOFs", equations.nu, equations.nk)

    def solve(self, reactions=False):
        """Solve for the unknown DOFs.

        Parameters
        ----------
        reactions : bool, optional
            Also reassemble the unpartitioned matrix and store F = A @ U.

        Stores results in solver attributes:
        - self.U : full solution
        - self.F : full right-hand side (only with reactions=True)
        - self.fields : FdmFields
        - self.metadata : FdmInfo with solve info
        """
        if self.state is SolverState.CONSTRUCTED:
            raise StateError("set_bcs must be called before solve")

        eq = self.equations
        bu_eff = eq.effective_rhs()
        Auu = eq.Auu.to_matrix()

        options = {}
        if self.config.linear_solver == "cg":
            options = {"rtol": self.config.cg_rtol, "maxiter": self.config.cg_maxiter}
        eq.Xu[:] = solve_linear_system(self.config.linear_solver, Auu, bu_eff, block="Auu", **options)

        residual = float(np.linalg.norm(Auu @ eq.Xu - bu_eff))
        self.U = eq.join_vector(eq.Xu, eq.Xk)
        logger.info("solved %d unknowns with %s (residual %.3e)", eq.nu, self.config.linear_solver, residual)

        self.F = None
        if reactions:
            self.F = self.compute_rhs(self.U)

        known_mask = np.zeros(self.grid.N, dtype=bool)
        known_mask[eq.KtoF] = True
        self.fields = FdmFields(u=self.U, coords=self.grid.coords, known=known_mask, f=self.F)
        self.metadata = replace(
            self.config,
            n_unknowns=eq.nu,
            n_knowns=eq.nk,
            solved=True,
            residual=residual,
        )
        self.state = SolverState.SOLVED

    def compute_rhs(self, u):
        """A @ u with A the unpartitioned operator matrix."""
        full = Equations(self.grid.N)
        self.operator.assemble(self.grid, full)
        return full.Auu.to_matrix() @ np.asarray(u, dtype=np.float64)

    def reaction_values(self):
        """F - B at the prescribed nodes, in KtoF order."""
        if self.F is None:
            raise StateError("reactions are only available after solve(reactions=True)")
        return self.F[self.equations.KtoF] - self.equations.Bk
