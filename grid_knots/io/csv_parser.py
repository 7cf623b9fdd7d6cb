"""Stdlib-only CSV reader and writer for grid diagrams.

One grid row per CSV row, one cell per field.  A field holds ``x`` (over
mark), ``o`` (under mark) or nothing; case and surrounding whitespace are
ignored.  Blank lines are skipped.
"""

from __future__ import annotations
import csv
from pathlib import Path

from grid_knots.diagram.grid import GridDiagram
from grid_knots.diagram.models import Marker

_ALIASES = {
    "": Marker.EMPTY.value,
    "x": Marker.OVER.value,
    "o": Marker.UNDER.value,
}


def parse_diagram_rows(path: str | Path) -> list[list[str]]:
    """Return the normalised cell matrix stored in a CSV file.

    The matrix is not checked for squareness or marking; see
    :meth:`GridDiagram.from_matrix`.
    """
    path = Path(path)
    rows: list[list[str]] = []
    with path.open("r", newline="", encoding="utf-8") as fh:
        for line_no, record in enumerate(csv.reader(fh), start=1):
            if not record or (len(record) == 1 and not record[0].strip()):
                continue
            row = []
            for field_no, raw in enumerate(record, start=1):
                key = raw.strip().lower()
                if key not in _ALIASES:
                    raise ValueError(
                        f"{path}:{line_no}: field {field_no} holds {raw!r}; "
                        "expected 'x', 'o' or an empty cell"
                    )
                row.append(_ALIASES[key])
            rows.append(row)

    if not rows:
        raise ValueError(f"No grid rows found in {path}")
    return rows


def parse_diagram_csv(path: str | Path) -> GridDiagram:
    """Load and validate a grid diagram from a CSV file."""
    return GridDiagram.from_matrix(parse_diagram_rows(path))


def write_diagram_csv(
    diagram: GridDiagram,
    output_path: str | Path,
    verbose: bool = False,
) -> Path:
    """Write *diagram* as CSV, one grid row per line."""
    output_path = Path(output_path)
    with output_path.open("w", newline="", encoding="utf-8") as fh:
        writer = csv.writer(fh)
        for row in diagram.cells:
            writer.writerow(["" if c == Marker.EMPTY.value else c for c in row])
    if verbose:
        print(f"  Diagram CSV written → {output_path}")
    return output_path
