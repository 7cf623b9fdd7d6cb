"""3D visualisation of the knot curve."""

from __future__ import annotations
import warnings
from pathlib import Path

import numpy as np
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from mpl_toolkits.mplot3d import Axes3D   # noqa: F401 – registers 3D projection

from grid_knots.models import KnotPattern

_CURVE_COLOUR = "#457b9d"
_LIFT_COLOUR = "#e63946"


def _closed(points: np.ndarray) -> np.ndarray:
    return np.vstack([points, points[:1]]) if len(points) else points


def _lifted_points(pattern: KnotPattern) -> np.ndarray:
    """Current positions of vertices whose anchors sit above half the lift height."""
    anchors = pattern.knot.anchors
    if len(anchors) == 0:
        return np.zeros((0, 3))
    mask = anchors[:, 2] > 0.5 * pattern.config.curve.lift_amount
    return pattern.knot.positions[mask]


def render_3d_png(
    pattern: KnotPattern,
    output_path: str | Path,
    dpi: int = 150,
    verbose: bool = False,
) -> Path:
    """Render a matplotlib 3D view of the knot."""
    output_path = Path(output_path)

    pts = _closed(pattern.knot.get_vertices())
    lifted = _lifted_points(pattern)

    fig = plt.figure(figsize=(8, 8))
    ax = fig.add_subplot(111, projection="3d")
    ax.plot(pts[:, 0], pts[:, 1], pts[:, 2],
            color=_CURVE_COLOUR, linewidth=1.5)
    if len(lifted):
        ax.scatter(lifted[:, 0], lifted[:, 1], lifted[:, 2],
                   color=_LIFT_COLOUR, s=8, label="over-strand")
        ax.legend(loc="upper right")

    lo = pts.min(axis=0)
    hi = pts.max(axis=0)
    span = max(float((hi - lo).max()), 1e-6)
    mid = 0.5 * (lo + hi)
    ax.set_xlim(mid[0] - span / 2, mid[0] + span / 2)
    ax.set_ylim(mid[1] - span / 2, mid[1] + span / 2)
    ax.set_zlim(mid[2] - span / 2, mid[2] + span / 2)
    ax.set_xlabel("x")
    ax.set_ylabel("y")
    ax.set_zlabel("z")
    n = pattern.diagram.resolution
    ax.set_title(
        f"{n}×{n} grid knot, {pattern.topology.num_crossings} crossings, "
        f"{pattern.knot.steps_taken} relaxation steps"
    )

    plt.tight_layout()
    fig.savefig(str(output_path), dpi=dpi)
    plt.close(fig)

    if verbose:
        print(f"  3D PNG written → {output_path}")
    return output_path


def render_3d_html(
    pattern: KnotPattern,
    output_path: str | Path,
    verbose: bool = False,
) -> Path | None:
    """Render an interactive Plotly HTML view of the knot.

    Returns None and warns if plotly is not installed.
    """
    output_path = Path(output_path)

    try:
        import plotly.graph_objects as go
    except ImportError:
        warnings.warn(
            "plotly is not installed; HTML output skipped.  "
            "Install with: pip install plotly"
        )
        return None

    pts = _closed(pattern.knot.get_vertices())
    lifted = _lifted_points(pattern)

    fig = go.Figure()
    fig.add_trace(go.Scatter3d(
        x=pts[:, 0], y=pts[:, 1], z=pts[:, 2],
        mode="lines",
        line={"color": _CURVE_COLOUR, "width": 6},
        name="knot",
    ))
    if len(lifted):
        fig.add_trace(go.Scatter3d(
            x=lifted[:, 0], y=lifted[:, 1], z=lifted[:, 2],
            mode="markers",
            marker={"color": _LIFT_COLOUR, "size": 3},
            name="over-strand",
        ))

    fig.update_layout(
        title=f"Grid knot, {pattern.topology.num_crossings} crossings",
        scene={"aspectmode": "data"},
        margin={"l": 0, "r": 0, "b": 0, "t": 40},
    )
    fig.write_html(str(output_path))

    if verbose:
        print(f"  HTML written → {output_path}")
    return output_path
