"""Essential (Dirichlet) boundary conditions.

The registry maps (node, key) to a prescribed value. Values are resolved when
registered: either the literal value or fvalue(node_coordinates) for
spatially varying data. The set of registered nodes becomes the known (K)
partition of the Equations, so the registry must be complete before the
system is built.
"""

from dataclasses import asdict, dataclass
from typing import Callable, Optional

import numpy as np
import pandas as pd

from utils.errors import BoundaryConflictError, ConfigError
from utils.log import get_logger

logger = get_logger(__name__)


@dataclass
class EssentialBc:
    """One prescribed DOF.

    Parameters
    ----------
    node : int
        Full node index.
    key : str
        Variable name, e.g. "u".
    value : float
        Resolved prescribed value.
    tag : int, optional
        Boundary tag the entry came from (None for single-node entries).
    fvalue : callable, optional
        Function of the node coordinates that produced `value`.
    extra : dict, optional
        Free-form data attached by the caller (e.g. a label or a source id).
    """

    node: int
    key: str
    value: float
    tag: Optional[int] = None
    fvalue: Optional[Callable] = None
    extra: Optional[dict] = None


class EssentialBcs:
    """Registry of essential boundary conditions.

    Parameters
    ----------
    strict : bool, optional
        If True, giving an already prescribed node/key a different value raises
        BoundaryConflictError. Otherwise the last registration wins. Default is False.
    """

    def __init__(self, strict=False):
        self.strict = strict
        self._bcs = {}

    def __len__(self):
        return len(self._bcs)

    def __contains__(self, node_key):
        return node_key in self._bcs

    def __iter__(self):
        return iter(self._bcs.values())

    def set(self, node, key, value, fvalue=None, coords=None, tag=None, extra=None):
        """Prescribe one node.

        When `fvalue` is given it is evaluated at `coords` and replaces `value`.
        `extra` is copied and stored with the entry.
        """
        node = int(node)
        if node < 0:
            raise ConfigError(f"node index must be non-negative, got {node}")
        if fvalue is not None:
            if coords is None:
                raise ConfigError(f"fvalue given for node {node} but no coordinates to evaluate it at")
            resolved = float(fvalue(np.asarray(coords, dtype=np.float64)))
        else:
            try:
                resolved = float(value)
            except (TypeError, ValueError) as exc:
                raise ConfigError(f"essential value for node {node} must be a number, got {value!r}") from exc
        if not np.isfinite(resolved):
            raise ConfigError(f"essential value for node {node} ({key!r}) is not finite: {resolved}")

        previous = self._bcs.get((node, key))
        if previous is not None and previous.value != resolved:
            if self.strict:
                raise BoundaryConflictError(node, key, previous.value, resolved)
            logger.debug("node %d (%s): %g overwritten by %g (tag %s)", node, key, previous.value, resolved, tag)

        if extra is not None:
            try:
                extra = dict(extra)
            except (TypeError, ValueError) as exc:
                raise ConfigError(f"extra data for node {node} must be a mapping, got {extra!r}") from exc

        self._bcs[(node, key)] = EssentialBc(
            node=node, key=key, value=resolved, tag=tag, fvalue=fvalue, extra=extra
        )

    def set_in_grid(self, grid, tag, key, value, fvalue=None, extra=None):
        """Prescribe every node of the boundary group `tag` of `grid`."""
        nodes = grid.boundary(tag)
        for node in nodes:
            self.set(node, key, value, fvalue=fvalue, coords=grid.coords[node], tag=tag, extra=extra)
        logger.debug("tag %s: %d nodes prescribed for %r", tag, len(nodes), key)

    def keys(self):
        """Variable keys with at least one entry, sorted."""
        return sorted({key for _, key in self._bcs})

    def nodes(self, key=None):
        """Sorted unique node indices prescribed (for `key`, or for any key)."""
        selected = [node for node, k in self._bcs if key is None or k == key]
        return np.unique(np.asarray(selected, dtype=np.int64))

    def value(self, node, key):
        """Prescribed value of one node."""
        try:
            return self._bcs[(int(node), key)].value
        except KeyError:
            raise ConfigError(f"node {node} has no essential condition for {key!r}") from None

    def apply(self, equations, key):
        """Write the values registered for `key` into equations.Xk."""
        for (node, k), bc in self._bcs.items():
            if k != key:
                continue
            if node >= equations.n or not equations.is_known(node):
                raise ConfigError(f"node {node} is prescribed but is not a known DOF of the equations")
            equations.Xk[equations.FtoK[node]] = bc.value

    def to_dataframe(self) -> pd.DataFrame:
        """One row per prescribed node, sorted by key then node."""
        rows = []
        for bc in self._bcs.values():
            row = asdict(bc)
            row["fvalue"] = bc.fvalue is not None
            rows.append(row)
        df = pd.DataFrame(rows, columns=["node", "key", "value", "tag", "fvalue", "extra"])
        return df.sort_values(["key", "node"], ignore_index=True)

    def __repr__(self):
        return f"EssentialBcs(n={len(self)}, keys={self.keys()}, strict={self.strict})"
