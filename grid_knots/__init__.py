"""grid_knots: Turn knot grid diagrams into relaxed 3D curves."""

from grid_knots.diagram.grid import GridDiagram
from grid_knots.pipeline import build_knot, knot_from_csv
from grid_knots.models import KnotPattern

__all__ = ["GridDiagram", "build_knot", "knot_from_csv", "KnotPattern"]
