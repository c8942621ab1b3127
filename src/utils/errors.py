"""Exception taxonomy for the finite-difference solver.

ConfigError      - invalid grid, operator, parameters or boundary setup
StateError       - operation called out of the Constructed -> BcsSet -> Solved order
SolveError       - the linear solver failed (non-convergence, matrix not SPD)

Out-of-range DOF indices during assembly raise the built-in ``IndexError``.
"""

from typing import Any, Dict, Optional


class FdmError(Exception):
    """Base class for all solver errors."""


class ConfigError(FdmError, ValueError):
    """Invalid configuration (grid, operator kind, parameters, boundary tags)."""


class BoundaryConflictError(ConfigError):
    """A node already holding an essential value was given a different one."""

    def __init__(self, node: int, key: str, old_value: float, new_value: float):
        self.node = node
        self.key = key
        self.old_value = old_value
        self.new_value = new_value
        super().__init__(
            f"node {node} ({key!r}) already prescribed to {old_value:g}, "
            f"cannot set it to {new_value:g}"
        )


class StateError(FdmError, RuntimeError):
    """Operation invoked in the wrong solver state."""


class SolveError(FdmError, RuntimeError):
    """The linear solver could not produce a solution.

    Parameters
    ----------
    message : str
        Short description of the failure.
    matrix_size : int, optional
        Number of rows of the system that was being solved.
    block : str, optional
        Which block of the partitioned system was handed to the solver.
    diagnostic_data : dict, optional
        Extra key/value pairs appended to the message.
    """

    def __init__(
        self,
        message: str,
        matrix_size: Optional[int] = None,
        block: Optional[str] = None,
        diagnostic_data: Optional[Dict[str, Any]] = None,
    ):
        self.matrix_size = matrix_size
        self.block = block
        self.diagnostic_data = diagnostic_data or {}

        full_message = message
        if block is not None or matrix_size is not None:
            full_message += f" [block={block or '?'}, size={matrix_size if matrix_size is not None else '?'}]"
        for key, value in self.diagnostic_data.items():
            full_message += f"\n  {key}: {value}"

        super().__init__(full_message)
