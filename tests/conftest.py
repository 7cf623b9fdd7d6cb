"""
Shared test fixtures for grid_knots tests.

This module provides:
- Hand-checked grid diagrams (unknot, one-crossing kink, trefoil, a column
  edge crossing two rows, Hopf link)
- CSV file fixtures written to a temporary directory
"""

import pytest

from grid_knots.diagram.grid import GridDiagram


# =============================================================================
# Diagram matrices
# =============================================================================

def _grid(*rows):
    """Build a matrix from strings, using '.' for an empty cell."""
    return [[" " if c == "." else c for c in row] for row in rows]


# Smallest knot: a square, no crossings.
UNKNOT_2 = _grid(
    "xo",
    "ox",
)

# Unknot with a single kink; the only crossing is at cell (1, 2).
KINK_4 = _grid(
    "x.o.",
    ".x.o",
    ".ox.",
    "o..x",
)

# Trefoil: x on the diagonal, o shifted two columns to the right.
TREFOIL_5 = _grid(
    "x.o..",
    ".x.o.",
    "..x.o",
    "o..x.",
    ".o..x",
)

# Column 1 runs from row 0 down to row 3 and passes over rows 1 and 2.
TWIST_4 = _grid(
    ".xo.",
    "x..o",
    "o.x.",
    ".o.x",
)

# Valid grid, but two linked components.
HOPF_4 = _grid(
    ".x.o",
    "x.o.",
    ".o.x",
    "o.x.",
)


@pytest.fixture
def unknot():
    return GridDiagram.from_matrix(UNKNOT_2)


@pytest.fixture
def kink():
    return GridDiagram.from_matrix(KINK_4)


@pytest.fixture
def trefoil():
    return GridDiagram.from_matrix(TREFOIL_5)


@pytest.fixture
def twist():
    return GridDiagram.from_matrix(TWIST_4)


@pytest.fixture
def twist_flipped():
    """TWIST_4 with its rows reversed."""
    return GridDiagram.from_matrix(TWIST_4[::-1])


@pytest.fixture
def hopf():
    return GridDiagram.from_matrix(HOPF_4)


# =============================================================================
# CSV fixtures
# =============================================================================

def _write_csv(path, matrix):
    lines = [",".join("" if c == " " else c for c in row) for row in matrix]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def unknot_csv(tmp_path):
    return _write_csv(tmp_path / "unknot.csv", UNKNOT_2)


@pytest.fixture
def trefoil_csv(tmp_path):
    return _write_csv(tmp_path / "trefoil.csv", TREFOIL_5)


@pytest.fixture
def hopf_csv(tmp_path):
    return _write_csv(tmp_path / "hopf.csv", HOPF_4)
