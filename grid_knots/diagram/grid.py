"""Grid diagrams and Cromwell moves.

A grid diagram is an n×n grid in which every row and every column holds
exactly one over mark (``x``) and one under mark (``o``).  Joining the marks
of each column (x → o) and each row (o → x) traces a closed curve whose
projection is a knot shadow; at every crossing the column passes over the row.

Cromwell moves transform the grid without changing the knot type:

  Translation:  cyclic shift of all rows or all columns by one.
  Commutation:  swap two adjacent, non-interleaved rows or columns.
  Stabilization:  replace an ``x`` by a 2×2 block, growing the grid by one.

Destabilization, the inverse of stabilization, is not provided.
"""

from __future__ import annotations
from typing import Sequence

import numpy as np

from grid_knots.diagram.models import (
    Axis,
    Cardinality,
    Commutation,
    CromwellMove,
    Direction,
    InterleavedLinesError,
    InvalidMarkingError,
    Marker,
    NoAdjacentLineError,
    NotAnOverMarkError,
    NotSquareError,
    Stabilization,
    Translation,
)

_VALID_CHARS = {m.value for m in Marker}

# (row offset, column offset) of the inserted row / column relative to (i, j)
_NEW_LINE_OFFSETS: dict[Cardinality, tuple[int, int]] = {
    Cardinality.NW: (1, 1),   # new row below, new column to the right
    Cardinality.NE: (1, 0),   # new row below, new column to the left
    Cardinality.SW: (0, 1),   # new row above, new column to the right
    Cardinality.SE: (0, 0),   # new row above, new column to the left
}


def _check_marking(cells: np.ndarray) -> None:
    n = cells.shape[0]
    for axis, name in ((1, "row"), (0, "column")):
        overs = (cells == Marker.OVER.value).sum(axis=axis)
        unders = (cells == Marker.UNDER.value).sum(axis=axis)
        for k in range(n):
            if overs[k] != 1 or unders[k] != 1:
                raise InvalidMarkingError(
                    f"{name} {k} has {int(overs[k])} over mark(s) and "
                    f"{int(unders[k])} under mark(s); expected exactly one of each"
                )


def _mark_interval(line: np.ndarray) -> tuple[int, int]:
    positions = np.flatnonzero(line != Marker.EMPTY.value)
    return int(positions.min()), int(positions.max())


def _interleaved(a: tuple[int, int], b: tuple[int, int]) -> bool:
    """True when exactly one endpoint of each interval lies strictly inside the other.

    Nested intervals (equal ones included) and intervals that precede one
    another, even when they touch, are not interleaved.
    """
    (a0, a1), (b0, b1) = a, b
    return a0 < b0 < a1 < b1 or b0 < a0 < b1 < a1


class GridDiagram:
    """An n×n grid diagram, mutated in place by Cromwell moves."""

    def __init__(self, cells: np.ndarray):
        # Use from_matrix() to build a validated diagram.
        self._cells = cells

    @classmethod
    def from_matrix(cls, cells: Sequence[Sequence[str]]) -> "GridDiagram":
        """Build a diagram from a square matrix of ``' '``, ``'x'`` and ``'o'``.

        Raises
        ------
        NotSquareError
            If the matrix is ragged or its row and column counts differ.
        InvalidMarkingError
            If the grid is empty, holds an unknown character, or any row or
            column does not contain exactly one ``x`` and one ``o``.
        """
        rows = [list(r) for r in cells]
        n = len(rows)
        if n == 0:
            raise InvalidMarkingError("grid is empty")
        for k, row in enumerate(rows):
            if len(row) != n:
                raise NotSquareError(
                    f"row {k} has {len(row)} cells but the grid has {n} rows"
                )
            for c in row:
                if c not in _VALID_CHARS:
                    raise InvalidMarkingError(f"unknown cell marker {c!r} in row {k}")

        arr = np.array(rows, dtype="<U1").reshape(n, n)
        _check_marking(arr)
        return cls(arr)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def resolution(self) -> int:
        return int(self._cells.shape[0])

    @property
    def cells(self) -> list[list[str]]:
        return self._cells.tolist()

    def cell(self, i: int, j: int) -> Marker:
        return Marker(str(self._cells[i, j]))

    def _check_index(self, k: int, name: str) -> None:
        if not 0 <= k < self.resolution:
            raise IndexError(f"{name} {k} out of range for a {self.resolution}×"
                             f"{self.resolution} grid")

    def get_row(self, i: int) -> list[str]:
        """Return a copy of row ``i``."""
        self._check_index(i, "row")
        return self._cells[i].tolist()

    def get_column(self, j: int) -> list[str]:
        """Return a copy of column ``j``."""
        self._check_index(j, "column")
        return self._cells[:, j].tolist()

    def find_in_row(self, i: int, marker: Marker) -> int:
        return int(np.flatnonzero(self._cells[i] == marker.value)[0])

    def find_in_column(self, j: int, marker: Marker) -> int:
        return int(np.flatnonzero(self._cells[:, j] == marker.value)[0])

    def absolute_index(self, i: int, j: int) -> int:
        return i + j * self.resolution

    def grid_indices(self, index: int) -> tuple[int, int]:
        return index % self.resolution, index // self.resolution

    def copy(self) -> "GridDiagram":
        return GridDiagram(self._cells.copy())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GridDiagram):
            return NotImplemented
        return np.array_equal(self._cells, other._cells)

    def __repr__(self) -> str:
        return f"GridDiagram(resolution={self.resolution})"

    def __str__(self) -> str:
        return "\n".join("|" + "".join(row) + "|" for row in self.cells)

    # ------------------------------------------------------------------
    # Cromwell moves
    # ------------------------------------------------------------------

    def apply_move(self, move: CromwellMove) -> "GridDiagram":
        """Apply a Cromwell move in place and return ``self``.

        On failure a :class:`DiagramError` is raised and the grid is unchanged.
        """
        if isinstance(move, Translation):
            return self._translate(move.direction)
        if isinstance(move, Commutation):
            return self._commute(move.axis, move.start_index)
        if isinstance(move, Stabilization):
            return self._stabilize(move.cardinality, move.i, move.j)
        raise TypeError(f"Unknown Cromwell move: {move!r}")

    def translate(self, direction: Direction | str) -> "GridDiagram":
        return self.apply_move(Translation(Direction(direction)))

    def commute(self, axis: Axis | str, start_index: int) -> "GridDiagram":
        return self.apply_move(Commutation(Axis(axis), start_index))

    def stabilize(self, cardinality: Cardinality | str, i: int, j: int) -> "GridDiagram":
        return self.apply_move(Stabilization(Cardinality(cardinality), i, j))

    def _translate(self, direction: Direction) -> "GridDiagram":
        shift, axis = {
            Direction.UP: (-1, 0),
            Direction.DOWN: (1, 0),
            Direction.LEFT: (-1, 1),
            Direction.RIGHT: (1, 1),
        }[direction]
        self._cells = np.roll(self._cells, shift, axis=axis)
        return self

    def _commute(self, axis: Axis, start_index: int) -> "GridDiagram":
        n = self.resolution
        name = axis.value
        self._check_index(start_index, name)
        if start_index == n - 1:
            raise NoAdjacentLineError(
                f"{name} {start_index} is the last {name}; there is no adjacent "
                f"{name} to commute with"
            )

        a, b = start_index, start_index + 1
        if axis is Axis.ROW:
            line_a, line_b = self._cells[a], self._cells[b]
        else:
            line_a, line_b = self._cells[:, a], self._cells[:, b]

        if _interleaved(_mark_interval(line_a), _mark_interval(line_b)):
            raise InterleavedLinesError(
                f"{name}s {a} and {b} are interleaved; commuting them would "
                "change the knot type"
            )

        cells = self._cells.copy()
        if axis is Axis.ROW:
            cells[[a, b]] = cells[[b, a]]
        else:
            cells[:, [a, b]] = cells[:, [b, a]]
        self._cells = cells
        return self

    def _stabilize(self, cardinality: Cardinality, i: int, j: int) -> "GridDiagram":
        self._check_index(i, "row")
        self._check_index(j, "column")
        if self._cells[i, j] != Marker.OVER.value:
            raise NotAnOverMarkError(
                f"cell ({i}, {j}) holds {str(self._cells[i, j])!r}, not an over mark"
            )

        dr, dc = _NEW_LINE_OFFSETS[cardinality]
        new_row, new_col = i + dr, j + dc
        # Position of the original cell once the new lines are in place
        old_row = i if dr else i + 1
        old_col = j if dc else j + 1

        cells = np.insert(self._cells, new_row, Marker.EMPTY.value, axis=0)
        cells = np.insert(cells, new_col, Marker.EMPTY.value, axis=1)

        cells[old_row, old_col] = Marker.EMPTY.value
        cells[old_row, new_col] = Marker.OVER.value
        cells[new_row, old_col] = Marker.OVER.value
        cells[new_row, new_col] = Marker.UNDER.value

        self._cells = cells
        return self
