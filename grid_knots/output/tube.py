"""Tube extrusion of a closed polyline into a triangle mesh.

A circular stamp of ``number_of_segments`` points is placed around every
vertex.  The frame at each vertex comes from its two wrapped neighbours: the
tangent is the normalised difference of the unit vectors towards them, and
the ``u``/``v`` basis is parallel-transported from the previous ring so the
tube does not twist.  Consecutive rings, including last → first, are joined
with two triangles per quad.
"""

from __future__ import annotations
from pathlib import Path
from typing import Callable

import numpy as np
import trimesh

from grid_knots.curve.polyline import Polyline


def _normalize(v: np.ndarray) -> np.ndarray:
    n = np.linalg.norm(v)
    return v / n if n > 0 else v


def generate_tube(
    path: Polyline,
    radius: float = 0.1,
    number_of_segments: int = 12,
    radius_modifier: Callable[[float], float] | None = None,
) -> trimesh.Trimesh:
    """Extrude a tube along *path*, treated as a closed loop.

    Parameters
    ----------
    path:
        Polyline with at least three vertices and no repeated closing vertex.
    radius:
        Tube radius, in the same units as the polyline.
    number_of_segments:
        Vertices per circular cross-section (≥ 3).
    radius_modifier:
        Optional ``f(fraction) -> radius`` evaluated at each vertex, where
        ``fraction`` is the vertex index divided by the vertex count.

    Returns
    -------
    trimesh.Trimesh  (process=False) with ``V * number_of_segments`` vertices
    and ``2 * V * number_of_segments`` faces.
    """
    verts = path.get_vertices()
    n = len(verts)
    if n < 3:
        raise ValueError(f"Tube extrusion needs at least 3 vertices, got {n}")
    if number_of_segments < 3:
        raise ValueError(f"number_of_segments must be ≥ 3, got {number_of_segments}")

    theta = 2.0 * np.pi * np.arange(number_of_segments) / number_of_segments
    cos_t, sin_t = np.cos(theta), np.sin(theta)

    rings = np.empty((n, number_of_segments, 3), dtype=np.float64)
    v_prev = None
    for center_index in range(n):
        left, right = path.get_neighboring_indices_wrapped(center_index)
        center = verts[center_index]
        towards_l = _normalize(verts[left] - center)
        towards_r = _normalize(verts[right] - center)

        diff = towards_r - towards_l
        t = _normalize(diff) if np.linalg.norm(diff) > 0 else -towards_l

        if v_prev is None:
            u = np.cross([0.0, 0.0, 1.0], t)
            if np.linalg.norm(u) < 1e-9:
                u = np.cross([1.0, 0.0, 0.0], t)
            u = _normalize(u)
        else:
            u = _normalize(np.cross(t, v_prev))
        v = _normalize(np.cross(u, t))

        r = radius if radius_modifier is None else radius_modifier(center_index / n)
        rings[center_index] = center + r * (cos_t[:, None] * u + sin_t[:, None] * v)
        v_prev = v

    m = number_of_segments
    ring = np.arange(n)[:, None]
    local = np.arange(m)[None, :]
    a = ring * m + local
    b = ((ring + 1) % n) * m + local
    c = ((ring + 1) % n) * m + (local + 1) % m
    d = ring * m + (local + 1) % m
    faces = np.concatenate([
        np.stack([a, b, c], axis=-1).reshape(-1, 3),
        np.stack([a, c, d], axis=-1).reshape(-1, 3),
    ])

    return trimesh.Trimesh(
        vertices=rings.reshape(-1, 3),
        faces=faces.astype(np.int64),
        process=False,
    )


def export_tube_obj(
    path: Polyline,
    output_path: str | Path,
    radius: float = 0.1,
    number_of_segments: int = 12,
    verbose: bool = False,
) -> Path:
    """Extrude *path* and write the tube as a Wavefront OBJ file."""
    output_path = Path(output_path)
    mesh = generate_tube(path, radius=radius, number_of_segments=number_of_segments)
    mesh.export(str(output_path))
    if verbose:
        print(f"  Tube mesh exported → {output_path} "
              f"({len(mesh.vertices)} verts, {len(mesh.faces)} faces)")
    return output_path
