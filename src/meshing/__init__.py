"""Structured grids consumed by the finite-difference operators."""

from .uniform_grid import BACK, BOTTOM, BOUNDARY_TAGS, FRONT, LEFT, RIGHT, TOP, UniformGrid

__all__ = [
    "UniformGrid",
    # Boundary tags
    "BOUNDARY_TAGS",
    "LEFT",
    "RIGHT",
    "BOTTOM",
    "TOP",
    "BACK",
    "FRONT",
]
