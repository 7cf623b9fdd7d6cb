"""Circuit tracing and crossing resolution for grid diagrams.

The walk starts at the ``x`` of column 0 and alternates:

  column edge  x → o   (scan the current column for its ``o``)
  row edge     o → x   (scan the current row for its ``x``)

until it returns to its starting cell.  Row edges always pass under column
edges, so every transverse intersection becomes an extra vertex on the
column edge, and that vertex is lifted out of the plane.
"""

from __future__ import annotations

from grid_knots.diagram.grid import GridDiagram
from grid_knots.diagram.models import Marker
from grid_knots.topology.models import Crossing, Topology, TopologyError


# ---------------------------------------------------------------------------
# Base circuit
# ---------------------------------------------------------------------------

def build_base_circuit(diagram: GridDiagram) -> list[int]:
    """Return the closed circuit of absolute indices, before crossings.

    The result has ``2n + 1`` entries and its first and last entries are
    equal.  Even positions hold ``x`` cells, odd positions ``o`` cells.

    Raises
    ------
    TopologyError
        If the walk closes early, i.e. the diagram describes a link with
        more than one component.
    """
    n = diagram.resolution
    start_row = diagram.find_in_column(0, Marker.OVER)
    under_row = diagram.find_in_column(0, Marker.UNDER)

    start = diagram.absolute_index(start_row, 0)
    circuit = [start, diagram.absolute_index(under_row, 0)]
    seen = set(circuit)

    # The last cell reached sits on row `line` (after a column edge) or on
    # column `line` (after a row edge).
    line = under_row
    horizontal = True

    for _ in range(2 * n + 1):
        if horizontal:
            col = diagram.find_in_row(line, Marker.OVER)
            index = diagram.absolute_index(line, col)
            line = col
        else:
            row = diagram.find_in_column(line, Marker.UNDER)
            index = diagram.absolute_index(row, line)
            line = row

        if index in seen:
            circuit.append(start)
            break
        circuit.append(index)
        seen.add(index)
        horizontal = not horizontal

    if len(circuit) != 2 * n + 1 or circuit[-1] != circuit[0]:
        raise TopologyError(
            f"Circuit has {len(circuit)} entries, expected {2 * n + 1} for a "
            f"{n}×{n} grid; the diagram describes a multi-component link"
        )
    return circuit


def column_edges(circuit: list[int]) -> list[tuple[int, int]]:
    """Consecutive (x, o) pairs of a base circuit, in traversal order."""
    body = circuit[:-1]
    return [(body[k], body[k + 1]) for k in range(0, len(body), 2)]


def row_edges(circuit: list[int]) -> list[tuple[int, int]]:
    """Consecutive (o, x) pairs of a base circuit, in traversal order."""
    body = circuit[1:]
    return [(body[k], body[k + 1]) for k in range(0, len(body), 2)]


# ---------------------------------------------------------------------------
# Crossings
# ---------------------------------------------------------------------------

def find_crossings(
    diagram: GridDiagram,
    circuit: list[int],
) -> list[list[Crossing]]:
    """Return, for every column edge, the crossings it passes over.

    Each inner list is ordered along the column edge's own traversal
    direction (from its ``x`` towards its ``o``).  Crossing ids are assigned
    in that order, column edge by column edge.
    """
    rows: list[tuple[int, int, int, tuple[int, int]]] = []   # (i, j_lo, j_hi, edge)
    for edge in row_edges(circuit):
        (ri, rj0), (_, rj1) = diagram.grid_indices(edge[0]), diagram.grid_indices(edge[1])
        rows.append((ri, min(rj0, rj1), max(rj0, rj1), edge))

    result: list[list[Crossing]] = []
    crossing_id = 0

    for edge in column_edges(circuit):
        (ci0, cj), (ci1, _) = diagram.grid_indices(edge[0]), diagram.grid_indices(edge[1])
        # The edge runs "downwards" when its x sits above its o.
        downwards = ci0 < ci1
        lo, hi = min(ci0, ci1), max(ci0, ci1)

        hits = [
            (ri, row_edge)
            for ri, rj_lo, rj_hi, row_edge in rows
            if rj_lo < cj < rj_hi and lo < ri < hi
        ]
        hits.sort(key=lambda h: h[0], reverse=not downwards)

        on_edge: list[Crossing] = []
        for ri, row_edge in hits:
            on_edge.append(Crossing(
                crossing_id=crossing_id,
                absolute_index=diagram.absolute_index(ri, cj),
                row=ri,
                column=cj,
                over_edge=edge,
                under_edge=row_edge,
            ))
            crossing_id += 1
        result.append(on_edge)

    return result


def extract_topology(diagram: GridDiagram) -> Topology:
    """Trace *diagram* and splice its crossings into the circuit.

    Crossing vertices for a column edge are inserted right after the edge's
    first endpoint along the circuit.  Entries of the base circuit keep
    their relative order; nothing is removed.
    """
    base = build_base_circuit(diagram)
    body = base[:-1]
    if len(set(body)) != len(body):
        raise TopologyError(f"Base circuit visits a cell twice: {base}")

    per_edge = find_crossings(diagram, base)

    # Column edge k spans base positions 2k and 2k+1; its first endpoint
    # along the circuit is always at position 2k.
    circuit: list[int] = []
    for pos, index in enumerate(base):
        circuit.append(index)
        if pos % 2 == 0 and pos // 2 < len(per_edge):
            circuit.extend(c.absolute_index for c in per_edge[pos // 2])

    crossings = [c for on_edge in per_edge for c in on_edge]
    lifted = {c.absolute_index for c in crossings}
    if len(lifted) != len(crossings) or len(circuit) != len(base) + len(crossings):
        raise TopologyError("Crossing insertion produced duplicate vertices")

    return Topology(
        resolution=diagram.resolution,
        base_circuit=base,
        circuit=circuit,
        lifted=lifted,
        crossings=crossings,
    )
