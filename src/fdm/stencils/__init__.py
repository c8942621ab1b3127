"""Stencil strategies selected by operator kind.

Importing this package registers the built-in kinds:

- "laplacian" : -div(k grad u)
- "helmholtz" : -div(k grad u) + c u
"""

from .base import StencilGenerator, make_stencil, numeric_param, register_stencil, registered_stencils
from .laplacian import HelmholtzStencil, LaplacianStencil, assemble_stencil_triplets

__all__ = [
    "StencilGenerator",
    "register_stencil",
    "registered_stencils",
    "make_stencil",
    "numeric_param",
    "LaplacianStencil",
    "HelmholtzStencil",
    "assemble_stencil_triplets",
]
