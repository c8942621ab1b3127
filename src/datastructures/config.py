"""Configuration and metadata data structures."""
from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional

import pandas as pd


@dataclass
class FdmInfo:
    """Finite-difference solver configuration and solve metadata.

    Parameters
    ----------
    kind : str, optional
        Operator kind ('laplacian', 'helmholtz'). Default is 'laplacian'.
    params : dict, optional
        Operator parameters. Default is {'kx': 1, 'ky': 1}.
    xmin : list of float, optional
        Lower domain bounds per dimension. Default is [0, 0].
    xmax : list of float, optional
        Upper domain bounds per dimension. Default is [1, 1].
    ndiv : list of int, optional
        Divisions per dimension. Default is [16, 16].
    field_key : str, optional
        Variable key of the solved field in the boundary conditions. Default is 'u'.
    linear_solver : str, optional
        Solver for the unknown block. Default is 'spsolve' (sparse LU, any
        non-singular matrix). 'cholesky' factors a dense copy of Auu and needs
        O(nu^2) memory, so it suits small SPD systems only; 'cg' is the sparse
        choice for large SPD systems.
    cg_rtol : float, optional
        Relative tolerance of the 'cg' solver. Default is 1e-10.
    cg_maxiter : int, optional
        Iteration cap of the 'cg' solver. Default is None (SciPy default).
    n_unknowns : int, optional
        Number of solved DOFs. Set after solving.
    n_knowns : int, optional
        Number of prescribed DOFs. Set after solving.
    solved : bool, optional
        Whether a solve completed. Default is False.
    residual : float, optional
        ||Auu xu - (bu - Auk xk)||_2 of the last solve.
    """
    # Operator
    kind: str = "laplacian"
    params: Dict[str, float] = field(default_factory=lambda: {"kx": 1.0, "ky": 1.0})

    # Grid
    xmin: List[float] = field(default_factory=lambda: [0.0, 0.0])
    xmax: List[float] = field(default_factory=lambda: [1.0, 1.0])
    ndiv: List[int] = field(default_factory=lambda: [16, 16])

    # Solver config
    field_key: str = "u"
    linear_solver: str = "spsolve"
    cg_rtol: float = 1e-10
    cg_maxiter: Optional[int] = None

    # Solve info
    n_unknowns: Optional[int] = None
    n_knowns: Optional[int] = None
    solved: bool = False
    residual: Optional[float] = None

    def to_dataframe(self) -> pd.DataFrame:
        """Convert config/metadata to single-row DataFrame.

        Operator parameters are expanded into ``param_<name>`` columns and
        per-dimension sequences are stored as tuples.

        Returns
        -------
        pd.DataFrame
            Single-row DataFrame with all configuration and metadata fields.
        """
        data = asdict(self)
        params = data.pop("params")
        for name in ("xmin", "xmax", "ndiv"):
            data[name] = tuple(data[name])
        for name, value in params.items():
            data[f"param_{name}"] = value
        return pd.DataFrame([data])
