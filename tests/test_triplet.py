"""Unit tests for the sparse triplet buffer."""

import pytest

import numpy as np
from scipy.sparse import csr_matrix

from la import Triplet


class TestTriplet:
    def test_duplicates_accumulate(self):
        T = Triplet(2, 3)
        T.put(0, 1, 2.0)
        T.put(0, 1, 3.0)
        T.put(1, 2, -1.0)
        assert T.nnz == 3
        expected = np.array([[0.0, 5.0, 0.0], [0.0, 0.0, -1.0]])
        np.testing.assert_array_equal(T.to_dense(), expected)

        A = T.to_matrix()
        assert isinstance(A, csr_matrix)
        assert A.shape == (2, 3)
        np.testing.assert_array_equal(A.toarray(), expected)

    def test_put_many_and_growth(self):
        T = Triplet(10, 10)
        rows = np.arange(100) % 10
        cols = np.arange(100) % 10
        T.put_many(rows, cols, np.ones(100))
        assert len(T) == 100
        np.testing.assert_array_equal(T.to_dense(), 10.0 * np.eye(10))

    def test_mat_vec_mul(self):
        T = Triplet(2, 2)
        T.put_many([0, 0, 1], [0, 1, 1], [2.0, 1.0, 3.0])
        np.testing.assert_allclose(T.mat_vec_mul([1.0, 2.0]), [4.0, 6.0])
        np.testing.assert_allclose(T.mat_vec_mul([1.0, 2.0], alpha=-1.0), [-4.0, -6.0])

    def test_out_of_range(self):
        T = Triplet(2, 2)
        with pytest.raises(IndexError):
            T.put(2, 0, 1.0)
        with pytest.raises(IndexError):
            T.put(0, -1, 1.0)

    def test_put_many_is_all_or_nothing(self):
        T = Triplet(3, 3)
        with pytest.raises(IndexError):
            T.put_many([0, 1, 3], [0, 1, 2], [1.0, 1.0, 1.0])
        assert T.nnz == 0

    def test_clear(self):
        T = Triplet(2, 2)
        T.put(1, 1, 4.0)
        T.clear()
        assert T.nnz == 0
        np.testing.assert_array_equal(T.to_dense(), np.zeros((2, 2)))

    def test_empty_block(self):
        T = Triplet(0, 4)
        assert T.to_matrix().shape == (0, 4)
        assert T.to_dense().shape == (0, 4)
