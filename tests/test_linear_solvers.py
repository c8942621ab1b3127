"""Unit tests for the SciPy linear-solver adapters."""

import pytest

import numpy as np
from scipy.sparse import diags

from la.linear_solvers import cg_solver, cholesky_solver, is_symmetric, scipy_solver, solve_linear_system
from utils.errors import ConfigError, SolveError


def poisson_1d(n):
    """Tridiagonal (-1, 2, -1) SPD matrix."""
    return diags([-np.ones(n - 1), 2.0 * np.ones(n), -np.ones(n - 1)], [-1, 0, 1], format="csr")


class TestDirectSolvers:
    def test_cholesky_matches_dense_solve(self):
        A = poisson_1d(6)
        b = np.arange(6.0)
        np.testing.assert_allclose(cholesky_solver(A, b), np.linalg.solve(A.toarray(), b), atol=1e-12)

    def test_cholesky_rejects_non_symmetric(self):
        A = np.array([[4.0, -2.0], [-1.0, 4.0]])
        with pytest.raises(SolveError, match="not symmetric") as info:
            cholesky_solver(A, np.ones(2))
        assert info.value.matrix_size == 2
        assert info.value.block == "Auu"

    def test_cholesky_rejects_indefinite(self):
        A = np.array([[1.0, 2.0], [2.0, 1.0]])
        with pytest.raises(SolveError, match="positive definite"):
            cholesky_solver(A, np.ones(2), block="Akk")

    def test_spsolve_general_matrix(self):
        A = np.array([[4.0, -2.0], [-1.0, 4.0]])
        b = np.array([2.0, 3.0])
        np.testing.assert_allclose(scipy_solver(A, b), np.linalg.solve(A, b))

    def test_spsolve_singular(self):
        A = np.array([[1.0, 1.0], [1.0, 1.0]])
        with pytest.raises(SolveError):
            scipy_solver(A, np.ones(2))

    def test_size_mismatch(self):
        with pytest.raises(SolveError):
            scipy_solver(poisson_1d(3), np.ones(4))

    def test_empty_system(self):
        assert scipy_solver(np.zeros((0, 0)), np.zeros(0)).shape == (0,)


class TestConjugateGradients:
    def test_converges(self):
        A = poisson_1d(20)
        b = np.ones(20)
        x = cg_solver(A, b, rtol=1e-12)
        np.testing.assert_allclose(A @ x, b, atol=1e-9)

    def test_non_convergence(self):
        with pytest.raises(SolveError, match="did not converge") as info:
            cg_solver(poisson_1d(50), np.ones(50), rtol=1e-14, maxiter=2)
        assert "iterations" in info.value.diagnostic_data


class TestDispatch:
    def test_by_name(self):
        A = poisson_1d(4)
        b = np.ones(4)
        ref = np.linalg.solve(A.toarray(), b)
        for method in ("cholesky", "spsolve", "cg"):
            np.testing.assert_allclose(solve_linear_system(method, A, b), ref, atol=1e-8)

    def test_unknown_name(self):
        with pytest.raises(ConfigError):
            solve_linear_system("lu", poisson_1d(3), np.ones(3))

    def test_is_symmetric(self):
        assert is_symmetric(poisson_1d(5))
        assert not is_symmetric(np.array([[1.0, 2.0], [0.0, 1.0]]))
