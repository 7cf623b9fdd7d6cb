"""Map a resolved circuit to 3D coordinates."""

from __future__ import annotations

import numpy as np

from grid_knots.config import CurveConfig
from grid_knots.curve.polyline import Polyline
from grid_knots.topology.models import Topology


def circuit_to_polyline(topology: Topology, lift_amount: float = 0.1) -> Polyline:
    """Return the raw polyline through every resolved circuit entry.

    Cells are unit sized and the grid is centred on the origin: cell (i, j)
    maps to ``x = j - n/2``, ``y = n/2 - i``.  Lifted crossing cells sit at
    ``z = lift_amount``; everything else lies in the z = 0 plane.  The
    closing entry of the circuit is kept, so the first and last points
    coincide.
    """
    n = topology.resolution
    index = np.asarray(topology.circuit, dtype=np.int64)
    i = index % n
    j = index // n

    points = np.empty((len(index), 3), dtype=np.float64)
    points[:, 0] = j - 0.5 * n
    points[:, 1] = 0.5 * n - i
    points[:, 2] = np.where(np.isin(index, list(topology.lifted)), lift_amount, 0.0)
    return Polyline(points)


def refine_curve(raw: Polyline, config: CurveConfig | None = None) -> Polyline:
    """Refine a raw (closed) polyline and drop its closing duplicate."""
    if config is None:
        config = CurveConfig()
    return raw.refine(config.minimum_segment_length).without_closing_vertex()


def build_curve(topology: Topology, config: CurveConfig | None = None) -> Polyline:
    """Raw polyline → refined polyline → closing duplicate removed."""
    if config is None:
        config = CurveConfig()
    raw = circuit_to_polyline(topology, lift_amount=config.lift_amount)
    return refine_curve(raw, config)
