"""Linear-algebra layer: triplet assembly buffers and partitioned equations.

Components
----------
Triplet    : append-only sparse (row, col, value) buffer
Equations  : full / unknown / known DOF partition with its four matrix blocks
linear_solvers : SciPy direct and iterative solvers for the unknown block
"""

from .equations import NOT_IN_SET, Equations, eliminate_known
from .triplet import Triplet

__all__ = [
    "Triplet",
    "Equations",
    "eliminate_known",
    "NOT_IN_SET",
]
