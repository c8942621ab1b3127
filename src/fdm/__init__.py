"""Finite-difference discretisation of elliptic operators.

Components
----------
FdmOperator  : stencil-based operator assembled into partitioned Equations
EssentialBcs : registry of prescribed (Dirichlet) values on grid boundaries
FdmSolver    : grid + operator + boundary conditions + linear solve
"""

from .ebcs import EssentialBc, EssentialBcs
from .fdm_solver import FdmSolver, SolverState
from .operator import FdmOperator
from .stencils import StencilGenerator, register_stencil, registered_stencils

__all__ = [
    # Operators
    "FdmOperator",
    "StencilGenerator",
    "register_stencil",
    "registered_stencils",
    # Boundary conditions
    "EssentialBc",
    "EssentialBcs",
    # Solver
    "FdmSolver",
    "SolverState",
]
