"""Unit tests for the uniform structured grid."""

import pytest

import numpy as np

from meshing import BACK, BOTTOM, FRONT, LEFT, RIGHT, TOP, UniformGrid
from utils.errors import ConfigError


class TestUniformGrid2D:
    """Node numbering, spacing and boundary groups in 2-D."""

    def test_sizes(self, grid_4x4):
        assert grid_4x4.ndim == 2
        assert grid_4x4.N == 16
        np.testing.assert_array_equal(grid_4x4.npts, [4, 4])
        np.testing.assert_allclose(grid_4x4.size, [1.0, 1.0])
        assert grid_4x4.coords.shape == (16, 2)

    def test_x_runs_fastest(self, grid_4x4):
        np.testing.assert_allclose(grid_4x4.coords[1], [1.0, 0.0])
        np.testing.assert_allclose(grid_4x4.coords[4], [0.0, 1.0])
        np.testing.assert_allclose(grid_4x4.coords[15], [3.0, 3.0])
        assert grid_4x4.node(2, 1) == 6
        assert grid_4x4.multi_index(9) == (1, 2)

    def test_boundary_groups(self, grid_4x4):
        np.testing.assert_array_equal(grid_4x4.boundary(BOTTOM), [0, 1, 2, 3])
        np.testing.assert_array_equal(grid_4x4.boundary(RIGHT), [3, 7, 11, 15])
        np.testing.assert_array_equal(grid_4x4.boundary(TOP), [12, 13, 14, 15])
        np.testing.assert_array_equal(grid_4x4.boundary(LEFT), [0, 4, 8, 12])

    def test_edge_order_is_bottom_right_top_left(self, grid_3x3):
        edges = grid_3x3.edge
        assert len(edges) == 4
        np.testing.assert_array_equal(edges[0], [0, 1, 2])
        np.testing.assert_array_equal(edges[1], [2, 5, 8])
        np.testing.assert_array_equal(edges[2], [6, 7, 8])
        np.testing.assert_array_equal(edges[3], [0, 3, 6])

    def test_boundary_nodes_union(self, grid_4x4):
        np.testing.assert_array_equal(
            grid_4x4.boundary_nodes(), [0, 1, 2, 3, 4, 7, 8, 11, 12, 13, 14, 15]
        )

    def test_non_unit_spacing(self):
        grid = UniformGrid([0.0, -1.0], [1.0, 1.0], [4, 2])
        np.testing.assert_allclose(grid.size, [0.25, 1.0])
        np.testing.assert_allclose(grid.axes[0], [0.0, 0.25, 0.5, 0.75, 1.0])
        np.testing.assert_allclose(grid.coords[-1], [1.0, 1.0])

    def test_reshape(self, grid_4x4):
        field = np.arange(16.0)
        shaped = grid_4x4.reshape(field)
        assert shaped.shape == (4, 4)
        # row index is y, column index is x
        assert shaped[1, 2] == 6.0


class TestUniformGridOtherDimensions:
    """1-D and 3-D grids."""

    def test_1d(self):
        grid = UniformGrid([0.0], [1.0], [4])
        assert grid.N == 5
        np.testing.assert_array_equal(grid.boundary(LEFT), [0])
        np.testing.assert_array_equal(grid.boundary(RIGHT), [4])
        assert grid.tags() == [LEFT, RIGHT]
        with pytest.raises(ConfigError):
            grid.boundary(BOTTOM)
        with pytest.raises(ConfigError):
            grid.edge

    def test_3d(self):
        grid = UniformGrid([0, 0, 0], [1, 1, 2], [1, 1, 2])
        assert grid.N == 12
        np.testing.assert_array_equal(grid.strides, [1, 2, 4])
        np.testing.assert_array_equal(grid.boundary(FRONT), [8, 9, 10, 11])
        np.testing.assert_array_equal(grid.boundary(BACK), [0, 1, 2, 3])
        assert grid.boundary_nodes().size == 12
        np.testing.assert_allclose(grid.coords[5], [1.0, 0.0, 1.0])


class TestUniformGridErrors:
    """Invalid construction arguments."""

    @pytest.mark.parametrize(
        "xmin, xmax, ndiv",
        [
            ([0, 0], [1, 1, 1], [2, 2]),
            ([0, 0], [1, 1], [0, 2]),
            ([0, 0], [0, 1], [2, 2]),
            ([0, 0, 0, 0], [1, 1, 1, 1], [1, 1, 1, 1]),
            ([0, 0], [1, 1], [2.5, 2]),
        ],
    )
    def test_invalid_grid(self, xmin, xmax, ndiv):
        with pytest.raises(ConfigError):
            UniformGrid(xmin, xmax, ndiv)

    def test_unknown_tag(self, grid_4x4):
        with pytest.raises(ConfigError):
            grid_4x4.boundary(99)

    def test_node_out_of_range(self, grid_4x4):
        with pytest.raises(IndexError):
            grid_4x4.node(4, 0)
        with pytest.raises(IndexError):
            grid_4x4.multi_index(16)
