"""Field data structures for solver results."""
from dataclasses import dataclass
from typing import Optional

import numpy as np
import pandas as pd

AXIS_NAMES = ("x", "y", "z")


@dataclass
class FdmFields:
    """Nodal solution fields in full node order.

    Parameters
    ----------
    u : np.ndarray
        Solution at every node, shape (N,).
    coords : np.ndarray
        Node coordinates, shape (N, ndim).
    known : np.ndarray
        Boolean mask of prescribed nodes, shape (N,).
    f : np.ndarray, optional
        Recovered right-hand side A @ u (reactions at prescribed nodes).
        None when reactions were not requested.
    """
    u: np.ndarray
    coords: np.ndarray
    known: np.ndarray
    f: Optional[np.ndarray] = None

    def to_dataframe(self) -> pd.DataFrame:
        """Convert fields to DataFrame for analysis and plotting.

        Returns
        -------
        pd.DataFrame
            One row per node with coordinate columns (x, y, z as present),
            u, known and, when available, f.
        """
        data = {AXIS_NAMES[d]: self.coords[:, d] for d in range(self.coords.shape[1])}
        data["u"] = self.u
        data["known"] = self.known
        if self.f is not None:
            data["f"] = self.f
        return pd.DataFrame(data)
