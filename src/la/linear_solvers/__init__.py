"""Linear solvers for the reduced system (SciPy backends)."""

from .scipy_solver import (
    LINEAR_SOLVERS,
    cg_solver,
    cholesky_solver,
    is_symmetric,
    scipy_solver,
    solve_linear_system,
)

__all__ = [
    "LINEAR_SOLVERS",
    "solve_linear_system",
    "scipy_solver",
    "cholesky_solver",
    "cg_solver",
    "is_symmetric",
]
