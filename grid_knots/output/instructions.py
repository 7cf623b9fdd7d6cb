"""Generate human-readable and JSON summaries of a knot."""

from __future__ import annotations
import json
import math
from pathlib import Path

import numpy as np

from grid_knots.models import KnotPattern


class _NumpyEncoder(json.JSONEncoder):
    def default(self, obj):
        if isinstance(obj, np.ndarray):
            return obj.tolist()
        if isinstance(obj, (np.integer,)):
            return int(obj)
        if isinstance(obj, (np.floating,)):
            return float(obj)
        return super().default(obj)


def _crossing_summary(c) -> dict:
    return {
        "crossing_id": c.crossing_id,
        "absolute_index": c.absolute_index,
        "cell": [c.row, c.column],
        "over_edge": list(c.over_edge),
        "under_edge": list(c.under_edge),
    }


def _curve_summary(pattern: KnotPattern) -> dict:
    path = pattern.knot.get_path()
    lo, hi = path.bounding_box()
    clearance = path.minimum_clearance()
    return {
        "num_vertices": len(path),
        "length": path.length(),
        "average_segment_length": path.get_average_segment_length(),
        "bounding_box": [lo, hi],
        "minimum_clearance": None if math.isinf(clearance) else clearance,
        "relaxation_steps": pattern.knot.steps_taken,
    }


def write_json(
    pattern: KnotPattern,
    output_path: str | Path,
    verbose: bool = False,
) -> Path:
    """Write a machine-readable summary of the knot as JSON."""
    output_path = Path(output_path)
    topo = pattern.topology

    data = {
        "diagram": {
            "resolution": pattern.diagram.resolution,
            "cells": ["".join(row) for row in pattern.diagram.cells],
        },
        "summary": {
            "base_circuit_length": len(topo.base_circuit),
            "circuit_length": len(topo.circuit),
            "num_crossings": topo.num_crossings,
        },
        "base_circuit": topo.base_circuit,
        "circuit": topo.circuit,
        "lifted": sorted(topo.lifted),
        "crossings": [_crossing_summary(c) for c in topo.crossings],
        "curve": _curve_summary(pattern),
        "vertices": pattern.knot.get_vertices(),
    }

    output_path.write_text(
        json.dumps(data, indent=2, cls=_NumpyEncoder), encoding="utf-8"
    )
    if verbose:
        print(f"  JSON written → {output_path}")
    return output_path


def write_txt(
    pattern: KnotPattern,
    output_path: str | Path,
    verbose: bool = False,
) -> Path:
    """Write a human-readable knot report as plain text."""
    output_path = Path(output_path)
    topo = pattern.topology
    curve = _curve_summary(pattern)

    lines: list[str] = []
    lines.append("=" * 60)
    lines.append("GRID DIAGRAM KNOT")
    lines.append("=" * 60)
    lines.append(f"Resolution : {pattern.diagram.resolution}×{pattern.diagram.resolution}")
    lines.append(f"Crossings  : {topo.num_crossings}")
    lines.append(f"Vertices   : {curve['num_vertices']} (after refinement)")
    lines.append(f"Relaxation : {curve['relaxation_steps']} step(s)")
    lines.append("")

    lines.append("DIAGRAM")
    lines.append("-" * 40)
    for row in pattern.diagram.cells:
        lines.append("  |" + "".join(row) + "|")
    lines.append("")

    lines.append("CIRCUIT")
    lines.append("-" * 40)
    lines.append(f"  Base     : {topo.base_circuit}")
    lines.append(f"  Resolved : {topo.circuit}")
    lines.append("")

    lines.append("CROSSING DETAILS")
    lines.append("-" * 40)
    if not topo.crossings:
        lines.append("  No crossings: the projection is a simple closed curve.")
    else:
        lines.append("  Format: Crossing ID | Cell (row, col) | OVER column edge | UNDER row edge")
        for c in topo.crossings:
            lines.append(
                f"  Crossing {c.crossing_id:4d} | ({c.row:3d}, {c.column:3d}) | "
                f"{c.over_edge[0]:4d} → {c.over_edge[1]:4d} | "
                f"{c.under_edge[0]:4d} → {c.under_edge[1]:4d}"
            )
    lines.append("")

    lines.append("CURVE")
    lines.append("-" * 40)
    lines.append(f"  Length                 : {curve['length']:.4f}")
    lines.append(f"  Average segment length : {curve['average_segment_length']:.4f}")
    if curve["minimum_clearance"] is not None:
        lines.append(f"  Minimum clearance      : {curve['minimum_clearance']:.4f}")

    output_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    if verbose:
        print(f"  TXT written → {output_path}")
    return output_path
