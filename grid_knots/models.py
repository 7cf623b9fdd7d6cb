"""Central result structure tying a diagram to its curve and relaxation state."""

from __future__ import annotations
from dataclasses import dataclass

from grid_knots.config import KnotConfig
from grid_knots.curve.polyline import Polyline
from grid_knots.diagram.grid import GridDiagram
from grid_knots.relax.knot import Knot
from grid_knots.topology.models import Topology


@dataclass
class KnotPattern:
    diagram: GridDiagram        # snapshot taken when the knot was built
    topology: Topology
    raw_path: Polyline          # direct image of the resolved circuit (closed)
    knot: Knot                  # owns the refined, relaxing curve
    config: KnotConfig
