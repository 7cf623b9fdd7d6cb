"""Click CLI entry point for grid_knots."""

from __future__ import annotations

import click

from grid_knots.diagram.models import (
    Axis,
    Cardinality,
    Commutation,
    CromwellMove,
    Direction,
    Stabilization,
    Translation,
)


def _parse_move(value: str) -> CromwellMove:
    """Parse a Cromwell move spec string.

    Accepted formats:
      ``up`` / ``down`` / ``left`` / ``right``    translation
      ``commute:row|column:K``                    e.g. ``commute:row:2``
      ``stabilize:nw|ne|sw|se:I:J``               e.g. ``stabilize:nw:0:3``
    """
    parts = [p.strip().lower() for p in value.split(":")]
    try:
        if len(parts) == 1 and parts[0] in {d.value for d in Direction}:
            return Translation(Direction(parts[0]))
        if len(parts) == 3 and parts[0] == "commute":
            return Commutation(Axis(parts[1]), int(parts[2]))
        if len(parts) == 4 and parts[0] == "stabilize":
            return Stabilization(Cardinality(parts[1]), int(parts[2]), int(parts[3]))
    except ValueError:
        pass
    raise click.BadParameter(
        f"Cannot parse move {value!r}. "
        "Use 'up', 'down', 'left', 'right', 'commute:row|column:K' "
        "(e.g. commute:row:2) or 'stabilize:nw|ne|sw|se:I:J' "
        "(e.g. stabilize:nw:0:3)."
    )


@click.command()
@click.argument("input", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--move", "move_strs", multiple=True, metavar="SPEC",
    help=(
        "Cromwell move applied before tracing.  Repeat for several moves.  "
        "Format: 'up|down|left|right', 'commute:row|column:K' or "
        "'stabilize:nw|ne|sw|se:I:J'."
    ),
)
@click.option(
    "--steps", default=0, show_default=True, type=click.IntRange(min=0),
    help="Number of relaxation steps.",
)
@click.option(
    "--config", "config_path", default=None,
    type=click.Path(exists=True, dir_okay=False),
    help="JSON file with 'curve' and 'relaxation' sections.",
)
@click.option(
    "--lift", default=None, type=float,
    help="Height of over-strand crossing vertices (overrides --config).",
)
@click.option(
    "--min-segment", default=None, type=float,
    help="Refinement segment length (overrides --config).",
)
@click.option(
    "--tube-radius", default=0.1, show_default=True, type=float,
    help="Tube radius for OBJ output.",
)
@click.option(
    "--output-dir", default=".", show_default=True,
    type=click.Path(file_okay=False),
    help="Directory for output files.",
)
@click.option(
    "--formats", default="json,txt", show_default=True,
    help="Comma-separated list of output formats: json,txt,png,html,obj,csv.",
)
@click.option("--verbose", is_flag=True, help="Print progress messages.")
def main(
    input: str,
    move_strs: tuple[str, ...],
    steps: int,
    config_path: str | None,
    lift: float | None,
    min_segment: float | None,
    tube_radius: float,
    output_dir: str,
    formats: str,
    verbose: bool,
) -> None:
    """Build (and optionally relax) the knot of the grid diagram in INPUT.

    INPUT is a CSV file with one grid row per line; each cell is 'x', 'o'
    or empty.

    \b
    Examples
    --------
    Trace and summarise:
      grid-knots trefoil.csv

    Stabilize, relax for 200 steps and export a tube mesh:
      grid-knots trefoil.csv --move stabilize:nw:0:0 --steps 200 \\
          --formats json,obj,png
    """
    from grid_knots.config import KnotConfig
    from grid_knots.diagram.models import DiagramError
    from grid_knots.pipeline import knot_from_csv
    from grid_knots.topology.models import TopologyError

    moves = [_parse_move(s) for s in move_strs]
    fmt_list = [f.strip().lower() for f in formats.split(",") if f.strip()]

    try:
        config = KnotConfig.from_file(config_path) if config_path else KnotConfig()
        overrides = {}
        if lift is not None:
            overrides["lift_amount"] = lift
        if min_segment is not None:
            overrides["minimum_segment_length"] = min_segment
        if overrides:
            config = config.with_curve(**overrides)

        pattern = knot_from_csv(
            csv_path=input,
            moves=moves,
            steps=steps,
            config=config,
            output_dir=output_dir,
            formats=fmt_list,
            tube_radius=tube_radius,
            verbose=verbose,
        )
    except (DiagramError, TopologyError, ValueError) as exc:
        raise click.ClickException(str(exc)) from exc

    if not verbose:
        topo = pattern.topology
        click.echo(
            f"{pattern.diagram.resolution}×{pattern.diagram.resolution} grid, "
            f"{topo.num_crossings} crossing(s), "
            f"{len(pattern.knot)} curve vertices"
        )
