"""Markers, Cromwell move values and diagram errors."""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum


class Marker(str, Enum):
    """Contents of a single grid cell."""
    EMPTY = " "
    OVER = "x"
    UNDER = "o"


class Direction(str, Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


class Axis(str, Enum):
    ROW = "row"
    COLUMN = "column"


class Cardinality(str, Enum):
    """Corner of the 2×2 stabilization block occupied by the original cell."""
    NW = "nw"
    NE = "ne"
    SW = "sw"
    SE = "se"


# ---------------------------------------------------------------------------
# Cromwell moves
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Translation:
    direction: Direction


@dataclass(frozen=True)
class Commutation:
    axis: Axis
    start_index: int


@dataclass(frozen=True)
class Stabilization:
    cardinality: Cardinality
    i: int
    j: int


CromwellMove = Translation | Commutation | Stabilization


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class DiagramError(ValueError):
    """Base class for recoverable grid diagram failures."""


class NotSquareError(DiagramError):
    """Row and column counts of the input grid differ."""


class InvalidMarkingError(DiagramError):
    """A row or column lacks exactly one over mark and one under mark."""


class NoAdjacentLineError(DiagramError):
    """Commutation requested at the last row or column."""


class InterleavedLinesError(DiagramError):
    """Commutation of two interleaved lines would change the knot type."""


class NotAnOverMarkError(DiagramError):
    """Stabilization requested at a cell that does not hold an over mark."""
