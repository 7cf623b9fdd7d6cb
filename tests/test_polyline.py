"""
Tests for curve/polyline.py.

Tests:
- Vertex access and wrapped neighbours
- Arc-length parametrisation
- Segment-segment distance
- Refinement and closing-vertex removal
"""

import math

import numpy as np
import pytest

from grid_knots.curve.polyline import Polyline, Segment


def _straight_line():
    """Four unit segments along x, from 0 to 4."""
    return Polyline([[k, 0, 0] for k in range(5)])


def _unit_square(closed=False):
    pts = [[0, 0, 0], [1, 0, 0], [1, 1, 0], [0, 1, 0]]
    if closed:
        pts.append([0, 0, 0])
    return Polyline(pts)


# =============================================================================
# Test vertex access
# =============================================================================

class TestVertexAccess:

    def test_empty(self):
        path = Polyline()
        assert len(path) == 0
        assert path.get_vertices().shape == (0, 3)

    def test_push_and_pop(self):
        path = Polyline()
        path.push_vertex([1, 2, 3])
        path.push_vertex([4, 5, 6])
        assert path.get_number_of_vertices() == 2
        np.testing.assert_allclose(path.pop_vertex(), [4, 5, 6])
        assert len(path) == 1

    def test_clear(self):
        path = _straight_line()
        path.clear()
        assert len(path) == 0

    def test_get_vertices_is_a_copy(self):
        path = _straight_line()
        verts = path.get_vertices()
        verts[0] = [9, 9, 9]
        np.testing.assert_allclose(path.vertices[0], [0, 0, 0])

    def test_neighbours_wrap(self):
        path = _straight_line()
        assert path.get_neighboring_indices_wrapped(0) == (4, 1)
        assert path.get_neighboring_indices_wrapped(4) == (3, 0)
        assert path.get_neighboring_indices_wrapped(2) == (1, 3)

    def test_wrapped_index(self):
        path = _straight_line()
        assert path.get_wrapped_index(5) == 0
        assert path.get_wrapped_index(-1) == 4


# =============================================================================
# Test geometry
# =============================================================================

class TestGeometry:

    def test_length(self):
        path = _straight_line()
        assert path.length() == pytest.approx(4.0)
        assert path.get_average_segment_length() == pytest.approx(1.0)

    @pytest.mark.parametrize("t,expected", [
        (0.0, [0, 0, 0]),
        (0.125, [0.5, 0, 0]),
        (0.25, [1, 0, 0]),
        (0.6, [2.4, 0, 0]),
        (1.0, [4, 0, 0]),
    ])
    def test_point_at(self, t, expected):
        np.testing.assert_allclose(_straight_line().point_at(t), expected, atol=1e-12)

    def test_point_at_out_of_range(self):
        with pytest.raises(ValueError):
            _straight_line().point_at(1.5)
        with pytest.raises(ValueError):
            Polyline().point_at(0.5)

    def test_segment_point_at(self):
        seg = Segment([0, 0, 0], [0, 2, 0])
        np.testing.assert_allclose(seg.point_at(0.5), [0, 1, 0])
        np.testing.assert_allclose(seg.midpoint(), [0, 1, 0])
        with pytest.raises(ValueError):
            seg.point_at(-0.1)

    def test_bounding_box(self):
        lo, hi = _unit_square().bounding_box()
        np.testing.assert_allclose(lo, [0, 0, 0])
        np.testing.assert_allclose(hi, [1, 1, 0])


# =============================================================================
# Test segment distance
# =============================================================================

class TestSegmentDistance:

    def test_skew_segments(self):
        """Perpendicular segments two units apart along z."""
        a = Segment([-1, 0, 0], [1, 0, 0])
        b = Segment([0, -1, 2], [0, 1, 2])
        gap = a.shortest_distance_between(b)
        assert np.linalg.norm(gap) == pytest.approx(2.0)
        # Points from b towards a.
        assert gap[2] == pytest.approx(-2.0)

    def test_parallel_segments(self):
        a = Segment([0, 0, 0], [1, 0, 0])
        b = Segment([0, 1, 0], [1, 1, 0])
        assert np.linalg.norm(a.shortest_distance_between(b)) == pytest.approx(1.0)

    def test_clamped_to_endpoints(self):
        """Collinear segments with a gap measure end-to-end."""
        a = Segment([0, 0, 0], [1, 0, 0])
        b = Segment([3, 0, 0], [4, 0, 0])
        assert np.linalg.norm(a.shortest_distance_between(b)) == pytest.approx(2.0)

    def test_intersecting_segments(self):
        a = Segment([-1, 0, 0], [1, 0, 0])
        b = Segment([0, -1, 0], [0, 1, 0])
        assert np.linalg.norm(a.shortest_distance_between(b)) == pytest.approx(0.0)


# =============================================================================
# Test refinement
# =============================================================================

class TestRefine:

    def test_unit_segments_split_in_four(self):
        refined = _straight_line().refine(0.25)
        # Four points per unit segment plus the final vertex.
        assert len(refined) == 17
        np.testing.assert_allclose(refined.segment_lengths(), 0.25)

    def test_keeps_original_vertices(self):
        path = _unit_square(closed=True)
        refined = path.refine(0.3)
        for v in path.get_vertices():
            assert np.any(np.all(np.isclose(refined.get_vertices(), v), axis=1))

    def test_short_segments_untouched(self):
        path = _unit_square(closed=True)
        refined = path.refine(2.0)
        np.testing.assert_allclose(refined.get_vertices(), path.get_vertices())

    @pytest.mark.parametrize("m", [0.1, 0.3, 0.45])
    def test_segment_bound(self, m):
        """Every refined segment is shorter than twice the minimum length."""
        refined = _unit_square(closed=True).refine(m)
        assert refined.segment_lengths().max() < 2 * m + 1e-12
        assert refined.length() == pytest.approx(4.0)

    def test_rejects_non_positive(self):
        with pytest.raises(ValueError):
            _straight_line().refine(0.0)

    def test_without_closing_vertex(self):
        closed = _unit_square(closed=True)
        assert len(closed.without_closing_vertex()) == 4
        assert len(_unit_square().without_closing_vertex()) == 4


# =============================================================================
# Test clearance
# =============================================================================

class TestClearance:

    def test_unit_square(self):
        """Opposite sides of the closed square are one unit apart."""
        assert _unit_square().minimum_clearance() == pytest.approx(1.0)

    def test_triangle_has_no_pairs(self):
        assert math.isinf(Polyline([[0, 0, 0], [1, 0, 0], [0, 1, 0]]).minimum_clearance())
