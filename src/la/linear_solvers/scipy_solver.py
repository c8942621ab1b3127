"""SciPy-based linear solvers for the reduced (unknown-block) system."""

import warnings

import numpy as np
from scipy.linalg import LinAlgError, cho_factor, cho_solve
from scipy.sparse import csr_matrix, issparse
from scipy.sparse.linalg import MatrixRankWarning, cg, spsolve

from utils.errors import ConfigError, SolveError
from utils.log import get_logger

logger = get_logger(__name__)

SYMMETRY_RTOL = 1e-12


def _as_csr(A):
    return A.tocsr() if issparse(A) else csr_matrix(np.asarray(A, dtype=np.float64))


def _check_square(A, b, block):
    n = A.shape[0]
    if A.shape[0] != A.shape[1]:
        raise SolveError(f"matrix is not square: shape {A.shape}", matrix_size=n, block=block)
    if b.shape[0] != n:
        raise SolveError(f"right-hand side has length {b.shape[0]}", matrix_size=n, block=block)


def is_symmetric(A, rtol=SYMMETRY_RTOL):
    """True if max|A - A^T| <= rtol * max|A|."""
    A = _as_csr(A)
    if A.nnz == 0:
        return True
    scale = abs(A).max()
    return abs(A - A.T).max() <= rtol * scale


def scipy_solver(A_csr: csr_matrix, b_np: np.ndarray, block="Auu"):
    """Solve A x = b using SciPy sparse direct solver (spsolve)."""
    A = _as_csr(A_csr)
    b = np.asarray(b_np, dtype=np.float64)
    _check_square(A, b, block)
    if A.shape[0] == 0:
        return np.zeros(0)

    with warnings.catch_warnings():
        warnings.simplefilter("error", MatrixRankWarning)
        try:
            x = spsolve(A, b)
        except MatrixRankWarning as exc:
            raise SolveError("matrix is exactly singular", matrix_size=A.shape[0], block=block) from exc

    x = np.atleast_1d(np.asarray(x, dtype=np.float64))
    if not np.all(np.isfinite(x)):
        raise SolveError("direct solve produced non-finite values", matrix_size=A.shape[0], block=block)
    return x


def cholesky_solver(A, b_np: np.ndarray, block="Auu"):
    """Solve a symmetric positive-definite system with a dense Cholesky factorisation.

    The matrix is densified; use `cg_solver` for large systems.
    """
    A_csr = _as_csr(A)
    b = np.asarray(b_np, dtype=np.float64)
    _check_square(A_csr, b, block)
    n = A_csr.shape[0]
    if n == 0:
        return np.zeros(0)

    if not is_symmetric(A_csr):
        asym = abs(A_csr - A_csr.T).max()
        raise SolveError(
            "matrix is not symmetric; Cholesky requires an SPD matrix",
            matrix_size=n,
            block=block,
            diagnostic_data={"max|A - A^T|": f"{asym:.3e}", "suggestion": "use linear_solver='spsolve'"},
        )

    try:
        factor = cho_factor(A_csr.toarray(), lower=True)
    except LinAlgError as exc:
        raise SolveError("matrix is not positive definite", matrix_size=n, block=block) from exc
    return cho_solve(factor, b)


def cg_solver(A, b_np: np.ndarray, rtol=1e-10, maxiter=None, x0=None, block="Auu"):
    """Solve a symmetric positive-definite system with conjugate gradients."""
    A_csr = _as_csr(A)
    b = np.asarray(b_np, dtype=np.float64)
    _check_square(A_csr, b, block)
    n = A_csr.shape[0]
    if n == 0:
        return np.zeros(0)

    if not is_symmetric(A_csr):
        raise SolveError("matrix is not symmetric; CG requires an SPD matrix", matrix_size=n, block=block)

    iterations = [0]

    def _count(_xk):
        iterations[0] += 1

    x, info = cg(A_csr, b, x0=x0, rtol=rtol, maxiter=maxiter, callback=_count)
    if info > 0:
        residual = np.linalg.norm(b - A_csr @ x)
        raise SolveError(
            "conjugate gradients did not converge",
            matrix_size=n,
            block=block,
            diagnostic_data={"iterations": info, "residual": f"{residual:.3e}", "rtol": f"{rtol:.1e}"},
        )
    if info < 0:
        raise SolveError("conjugate gradients reported illegal input or breakdown", matrix_size=n, block=block)

    logger.debug("cg converged in %d iterations (n=%d)", iterations[0], n)
    return x


LINEAR_SOLVERS = {
    "cholesky": cholesky_solver,
    "spsolve": scipy_solver,
    "cg": cg_solver,
}


def solve_linear_system(method, A, b, block="Auu", **options):
    """Dispatch to one of the registered solvers by name."""
    if method not in LINEAR_SOLVERS:
        raise ConfigError(f"Unknown linear solver '{method}'. Known: {sorted(LINEAR_SOLVERS)}")
    logger.debug("solving %s system of size %d with %s", block, A.shape[0], method)
    return LINEAR_SOLVERS[method](A, b, block=block, **options)
