"""Data structures for solver configuration and results.

This module defines the configuration and result data structures
for the finite-difference solver.
"""

from .config import FdmInfo
from .fields import FdmFields

__all__ = [
    # Configuration and metadata
    "FdmInfo",
    # Fields
    "FdmFields",
]
