"""Top-level pipeline orchestration for grid_knots."""

from __future__ import annotations
import warnings
from pathlib import Path
from typing import Iterable

from grid_knots.config import KnotConfig
from grid_knots.diagram.grid import GridDiagram
from grid_knots.diagram.models import CromwellMove
from grid_knots.models import KnotPattern

_FORMATS = {"json", "txt", "png", "html", "obj", "csv"}

# Above this many vertices the O(V²) relaxation step gets slow.
_MAX_COMFORTABLE_VERTICES = 5_000


def build_knot(
    diagram: GridDiagram,
    config: KnotConfig | None = None,
    verbose: bool = False,
) -> KnotPattern:
    """Trace *diagram*, build its refined 3D curve and wrap it in a Knot.

    The diagram is copied, so later moves on *diagram* do not affect the
    returned pattern.
    """
    from grid_knots.curve.builder import circuit_to_polyline, refine_curve
    from grid_knots.relax.knot import Knot
    from grid_knots.topology.extractor import extract_topology

    if config is None:
        config = KnotConfig()

    topology = extract_topology(diagram)
    if verbose:
        print(f"      Base circuit: {topology.base_circuit}")
        print(f"      {topology.num_crossings} crossing(s), "
              f"resolved circuit has {len(topology.circuit)} entries")

    raw_path = circuit_to_polyline(topology, lift_amount=config.curve.lift_amount)
    path = refine_curve(raw_path, config.curve)
    if verbose:
        print(f"      Curve: {len(path)} vertices after refinement "
              f"(min segment {config.curve.minimum_segment_length})")
    if len(path) > _MAX_COMFORTABLE_VERTICES:
        warnings.warn(
            f"Refined curve has {len(path):,} vertices; each relaxation step "
            "is quadratic in the vertex count.  Consider a larger "
            "minimum segment length."
        )

    return KnotPattern(
        diagram=diagram.copy(),
        topology=topology,
        raw_path=raw_path,
        knot=Knot(path, config.relaxation),
        config=config,
    )


def knot_from_csv(
    csv_path: str | Path,
    moves: Iterable[CromwellMove] | None = None,
    steps: int = 0,
    config: KnotConfig | None = None,
    output_dir: str | Path = ".",
    formats: list[str] | None = None,
    tube_radius: float = 0.1,
    verbose: bool = False,
) -> KnotPattern:
    """Full pipeline: CSV grid diagram → relaxed knot + output files.

    Parameters
    ----------
    csv_path:
        Path to a CSV grid diagram (cells ``x``, ``o`` or empty).
    moves:
        Cromwell moves applied to the diagram, in order, before tracing.
    steps:
        Number of relaxation steps to run.
    config:
        Curve and relaxation constants.  Defaults to ``KnotConfig()``.
    output_dir:
        Directory for output files (created if absent).
    formats:
        Output formats, any subset of ``{"json", "txt", "png", "html",
        "obj", "csv"}``.  Defaults to ``["json", "txt"]``.
    tube_radius:
        Radius of the extruded tube written for the ``obj`` format.
    verbose:
        Print progress messages.
    """
    from grid_knots.io.csv_parser import parse_diagram_csv, write_diagram_csv
    from grid_knots.output.instructions import write_json, write_txt
    from grid_knots.output.tube import export_tube_obj
    from grid_knots.output.viz3d import render_3d_html, render_3d_png

    if formats is None:
        formats = ["json", "txt"]
    unknown = set(formats) - _FORMATS
    if unknown:
        raise ValueError(
            f"Unknown output format(s): {', '.join(sorted(unknown))}. "
            f"Use any of: {', '.join(sorted(_FORMATS))}."
        )
    if steps < 0:
        raise ValueError(f"steps must be non-negative, got {steps}")

    csv_path = Path(csv_path)
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    moves = list(moves or [])
    total = 4

    if verbose:
        print(f"[1/{total}] Loading diagram: {csv_path}")
    diagram = parse_diagram_csv(csv_path)
    if verbose:
        n = diagram.resolution
        print(f"      {n}×{n} grid")

    if moves and verbose:
        print(f"      Applying {len(moves)} Cromwell move(s) …")
    for move in moves:
        diagram.apply_move(move)
        if verbose:
            print(f"        {move} → {diagram.resolution}×{diagram.resolution}")

    if verbose:
        print(f"[2/{total}] Tracing circuit and building curve …")
    pattern = build_knot(diagram, config=config, verbose=verbose)

    if verbose:
        print(f"[3/{total}] Relaxing ({steps} step(s)) …")
    if steps:
        largest = pattern.knot.relax(steps, verbose=verbose)
        if verbose:
            print(f"      Largest displacement in final step: {largest:.3g}")
        if not pattern.knot.is_finite():
            warnings.warn(
                "Relaxation produced non-finite vertex positions; try a "
                "smaller max_displacement or a larger epsilon"
            )

    if verbose:
        print(f"[4/{total}] Writing output …")

    stem = f"knot_{csv_path.stem}"

    if "json" in formats:
        write_json(pattern, output_dir / f"{stem}.json", verbose=verbose)
    if "txt" in formats:
        write_txt(pattern, output_dir / f"{stem}.txt", verbose=verbose)
    if "png" in formats:
        render_3d_png(pattern, output_dir / f"{stem}_3d.png", verbose=verbose)
    if "html" in formats:
        render_3d_html(pattern, output_dir / f"{stem}_3d.html", verbose=verbose)
    if "obj" in formats:
        export_tube_obj(pattern.knot.get_path(), output_dir / f"{stem}_tube.obj",
                        radius=tube_radius, verbose=verbose)
    if "csv" in formats:
        write_diagram_csv(pattern.diagram, output_dir / f"{stem}_diagram.csv",
                          verbose=verbose)

    if verbose:
        print("Done.")

    return pattern
