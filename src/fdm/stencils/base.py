"""Stencil generator interface and the name -> strategy registry."""

import math
from abc import ABC, abstractmethod
from numbers import Real
from typing import Callable, Dict, List, Type

import numpy as np

from utils.errors import ConfigError

_STENCIL_REGISTRY: Dict[str, Type["StencilGenerator"]] = {}


def register_stencil(name: str) -> Callable[[Type["StencilGenerator"]], Type["StencilGenerator"]]:
    """Class decorator registering a stencil generator under an operator kind."""

    def decorator(cls):
        if name in _STENCIL_REGISTRY:
            raise KeyError(f"Stencil '{name}' already registered")
        cls.kind = name
        _STENCIL_REGISTRY[name] = cls
        return cls

    return decorator


def registered_stencils() -> List[str]:
    return sorted(_STENCIL_REGISTRY.keys())


def make_stencil(kind: str, params, ndim: int) -> "StencilGenerator":
    """Instantiate the generator registered for `kind`."""
    if kind not in _STENCIL_REGISTRY:
        raise ConfigError(f"Unknown operator kind '{kind}'. Registered: {registered_stencils()}")
    return _STENCIL_REGISTRY[kind](params, ndim)


def numeric_param(params, name: str) -> float:
    """Fetch a required parameter, rejecting missing, non-numeric or non-finite values."""
    if name not in params:
        raise ConfigError(f"missing parameter '{name}'")
    value = params[name]
    if isinstance(value, bool) or not isinstance(value, (Real, np.number)):
        raise ConfigError(f"parameter '{name}' must be a number, got {value!r}")
    value = float(value)
    if not math.isfinite(value):
        raise ConfigError(f"parameter '{name}' must be finite, got {value}")
    return value


class StencilGenerator(ABC):
    """Per-node finite-difference stencil for one operator kind.

    Subclasses validate their parameters in ``__init__`` and produce the
    full-index triplets of every node of a grid. A generator holds only its
    parameters, so one instance can assemble any number of systems.
    """

    kind = None

    def __init__(self, params, ndim: int):
        if ndim not in (1, 2, 3):
            raise ConfigError(f"only 1, 2 or 3 dimensions are supported, got {ndim}")
        self.ndim = ndim
        self.params = dict(params)

    @classmethod
    @abstractmethod
    def required_params(cls, ndim: int) -> List[str]:
        """Parameter names this kind needs in `ndim` dimensions."""

    @property
    def requires_essential_bcs(self) -> bool:
        """True if the operator is singular without at least one prescribed DOF."""
        return True

    @abstractmethod
    def node_stencil(self, grid, node):
        """Return (diag, [(J, weight), ...]) for one node."""

    @abstractmethod
    def triplets(self, grid):
        """Return (row, col, data) arrays for all nodes in full indexing."""
