"""
Pytest configuration and shared fixtures for the finite-difference test suite.
"""

import pytest

from fdm import EssentialBcs
from meshing import BOTTOM, LEFT, RIGHT, TOP, UniformGrid


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: end-to-end solver tests")


@pytest.fixture
def grid_3x3():
    """2x2 divisions over [0,2]x[0,2]: 9 nodes, unit spacing."""
    return UniformGrid([0, 0], [2, 2], [2, 2])


@pytest.fixture
def grid_4x4():
    """3x3 divisions over [0,3]x[0,3]: 16 nodes, unit spacing."""
    return UniformGrid([0, 0], [3, 3], [3, 3])


@pytest.fixture
def square_bcs(grid_4x4):
    """u = 1 on left/bottom, u = 2 on right/top, registered left, right, bottom, top."""
    ebcs = EssentialBcs()
    ebcs.set_in_grid(grid_4x4, LEFT, "u", 1.0)
    ebcs.set_in_grid(grid_4x4, RIGHT, "u", 2.0)
    ebcs.set_in_grid(grid_4x4, BOTTOM, "u", 1.0)
    ebcs.set_in_grid(grid_4x4, TOP, "u", 2.0)
    return ebcs
