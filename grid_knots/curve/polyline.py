"""Segments and polylines in 3D."""

from __future__ import annotations
import math

import numpy as np

_EPSILON = 1e-9


class Segment:
    """A line segment between two 3D points."""

    def __init__(self, a: np.ndarray, b: np.ndarray):
        self.start = np.asarray(a, dtype=np.float64)
        self.end = np.asarray(b, dtype=np.float64)

    def length(self) -> float:
        return float(np.linalg.norm(self.end - self.start))

    def midpoint(self) -> np.ndarray:
        return 0.5 * (self.start + self.end)

    def point_at(self, t: float) -> np.ndarray:
        """Point at parameter ``t`` in [0, 1]; 0 is the start, 1 the end."""
        if not 0.0 <= t <= 1.0:
            raise ValueError(f"t must lie in [0, 1], got {t}")
        return self.start + (self.end - self.start) * t

    def shortest_distance_between(self, other: "Segment") -> np.ndarray:
        """Vector between the closest points of this segment and *other*.

        Closest-point parameters are found on the supporting lines and then
        clamped to the segments, edge by edge (Sunday's segment-segment
        distance).  The returned vector points from *other* to ``self``.
        """
        u = self.end - self.start
        v = other.end - other.start
        w = self.start - other.start
        a = float(u @ u)
        b = float(u @ v)
        c = float(v @ v)
        d = float(u @ w)
        e = float(v @ w)
        denom = a * c - b * b

        s_d = t_d = denom
        if denom < _EPSILON:
            # Nearly parallel: pin s to the start of self
            s_n, s_d = 0.0, 1.0
            t_n, t_d = e, c
        else:
            s_n = b * e - c * d
            t_n = a * e - b * d
            if s_n < 0.0:
                s_n, t_n, t_d = 0.0, e, c
            elif s_n > s_d:
                s_n, t_n, t_d = s_d, e + b, c

        if t_n < 0.0:
            t_n = 0.0
            if -d < 0.0:
                s_n = 0.0
            elif -d > a:
                s_n = s_d
            else:
                s_n, s_d = -d, a
        elif t_n > t_d:
            t_n = t_d
            if -d + b < 0.0:
                s_n = 0.0
            elif -d + b > a:
                s_n = s_d
            else:
                s_n, s_d = -d + b, a

        sc = 0.0 if abs(s_n) < _EPSILON else s_n / s_d
        tc = 0.0 if abs(t_n) < _EPSILON else t_n / t_d
        return w + sc * u - tc * v

    def __repr__(self) -> str:
        return f"Segment({self.start.tolist()}, {self.end.tolist()})"


class Polyline:
    """An ordered sequence of 3D vertices.

    Stored open, but neighbour lookups wrap so the first and last vertices
    are adjacent.
    """

    def __init__(self, vertices: np.ndarray | list | None = None):
        if vertices is None:
            self._vertices = np.zeros((0, 3), dtype=np.float64)
        else:
            self._vertices = np.array(vertices, dtype=np.float64).reshape(-1, 3)

    # ------------------------------------------------------------------
    # Vertex access
    # ------------------------------------------------------------------

    def get_vertices(self) -> np.ndarray:
        return self._vertices.copy()

    vertices = property(get_vertices)

    def set_vertices(self, vertices: np.ndarray) -> None:
        self._vertices = np.array(vertices, dtype=np.float64).reshape(-1, 3)

    def push_vertex(self, v) -> None:
        self._vertices = np.vstack([self._vertices, np.asarray(v, dtype=np.float64)])

    def pop_vertex(self) -> np.ndarray:
        last = self._vertices[-1].copy()
        self._vertices = self._vertices[:-1]
        return last

    def clear(self) -> None:
        self._vertices = np.zeros((0, 3), dtype=np.float64)

    def get_number_of_vertices(self) -> int:
        return len(self._vertices)

    def __len__(self) -> int:
        return len(self._vertices)

    def get_wrapped_index(self, index: int) -> int:
        return index % len(self._vertices)

    def get_neighboring_indices_wrapped(self, center_index: int) -> tuple[int, int]:
        """Indices of the left and right neighbours of a vertex, wrapping at the ends."""
        n = len(self._vertices)
        i = self.get_wrapped_index(center_index)
        return (i - 1) % n, (i + 1) % n

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    def get_segment(self, index: int) -> Segment:
        """The segment between vertex ``index`` and ``index + 1``."""
        return Segment(self._vertices[index], self._vertices[index + 1])

    def segment_lengths(self) -> np.ndarray:
        return np.linalg.norm(np.diff(self._vertices, axis=0), axis=1)

    def length(self) -> float:
        return float(self.segment_lengths().sum())

    def get_average_segment_length(self) -> float:
        lengths = self.segment_lengths()
        return float(lengths.mean()) if len(lengths) else 0.0

    def point_at(self, t: float) -> np.ndarray:
        """Point at fraction ``t`` of the arc length (0 = first, 1 = last vertex)."""
        if len(self._vertices) == 0 or not 0.0 <= t <= 1.0:
            raise ValueError(f"point_at needs a non-empty polyline and t in [0, 1], got {t}")
        if t == 0.0:
            return self._vertices[0].copy()
        if t == 1.0:
            return self._vertices[-1].copy()

        desired = self.length() * t
        traversed = 0.0
        for index in range(len(self._vertices) - 1):
            segment = self.get_segment(index)
            seg_len = segment.length()
            if traversed + seg_len >= desired and seg_len > 0.0:
                return segment.point_at((desired - traversed) / seg_len)
            traversed += seg_len
        return self._vertices[-1].copy()

    def bounding_box(self) -> tuple[np.ndarray, np.ndarray]:
        """Axis-aligned (min corner, max corner)."""
        return self._vertices.min(axis=0), self._vertices.max(axis=0)

    def refine(self, minimum_segment_length: float) -> "Polyline":
        """Return a denser copy with extra points along every segment.

        A segment of length ``L`` receives ``floor(L / minimum_segment_length) - 1``
        equally spaced interior points.  All original vertices are kept and
        shared vertices appear once.
        """
        if minimum_segment_length <= 0:
            raise ValueError(
                f"minimum_segment_length must be positive, got {minimum_segment_length}"
            )
        if len(self._vertices) < 2:
            return Polyline(self._vertices)

        points: list[np.ndarray] = []
        for index in range(len(self._vertices) - 1):
            segment = self.get_segment(index)
            points.append(segment.start)
            subdivisions = math.floor(segment.length() / minimum_segment_length)
            for division in range(1, subdivisions):
                points.append(segment.point_at(division / subdivisions))
        points.append(self._vertices[-1])
        return Polyline(np.array(points))

    def without_closing_vertex(self) -> "Polyline":
        """Drop the last vertex if it repeats the first one.

        Circuits are stored closed (first index == last index); relaxation
        and tube extrusion want each point once, with wrap-around adjacency.
        """
        v = self._vertices
        if len(v) > 1 and np.allclose(v[0], v[-1]):
            return Polyline(v[:-1])
        return Polyline(v)

    def minimum_clearance(self) -> float:
        """Smallest distance between two non-adjacent segments of the closed curve.

        Returns ``inf`` when there are fewer than four segments.
        """
        n = len(self._vertices)
        if n < 4:
            return math.inf
        segments = [
            Segment(self._vertices[k], self._vertices[(k + 1) % n]) for k in range(n)
        ]
        best = math.inf
        for a in range(n):
            for b in range(a + 2, n):
                if a == 0 and b == n - 1:
                    continue
                gap = float(np.linalg.norm(segments[a].shortest_distance_between(segments[b])))
                best = min(best, gap)
        return best

    def __repr__(self) -> str:
        return f"Polyline({len(self._vertices)} vertices)"
