"""
Tests for curve/builder.py.

Tests:
- Grid → plane coordinates
- Lifted crossing heights
- Refinement and closing-vertex handling in build_curve
"""

import numpy as np
import pytest

from grid_knots.config import CurveConfig
from grid_knots.curve.builder import build_curve, circuit_to_polyline, refine_curve
from grid_knots.topology.extractor import extract_topology


class TestCircuitToPolyline:

    def test_unknot_coordinates(self, unknot):
        """Circuit [0, 1, 3, 2, 0] on a 2×2 grid centred at the origin."""
        path = circuit_to_polyline(extract_topology(unknot))
        np.testing.assert_allclose(path.get_vertices(), [
            [-1, 1, 0],
            [-1, 0, 0],
            [0, 0, 0],
            [0, 1, 0],
            [-1, 1, 0],
        ])

    def test_one_point_per_circuit_entry(self, trefoil):
        topo = extract_topology(trefoil)
        assert len(circuit_to_polyline(topo)) == len(topo.circuit)

    def test_lifted_heights(self, kink):
        """Only the crossing cell (1, 2), index 9, leaves the plane."""
        topo = extract_topology(kink)
        verts = circuit_to_polyline(topo, lift_amount=0.3).get_vertices()
        pos = topo.circuit.index(9)
        np.testing.assert_allclose(verts[pos], [0, 1, 0.3])
        others = np.delete(verts[:, 2], pos)
        assert np.all(others == 0.0)

    def test_grid_edges_are_axis_aligned(self, trefoil):
        """Consecutive base points differ in x or y, never both."""
        topo = extract_topology(trefoil)
        verts = circuit_to_polyline(topo, lift_amount=0.0).get_vertices()
        steps = np.abs(np.diff(verts[:, :2], axis=0)) > 1e-12
        assert not np.any(steps.all(axis=1))


class TestBuildCurve:

    def test_unknot_refined(self, unknot):
        """Four unit edges at m = 0.25: 17 points, minus the closing one."""
        path = build_curve(extract_topology(unknot), CurveConfig(minimum_segment_length=0.25))
        assert len(path) == 16
        assert not np.allclose(path.get_vertices()[0], path.get_vertices()[-1])

    def test_default_config(self, trefoil):
        path = build_curve(extract_topology(trefoil))
        assert path.get_vertices()[:, 2].max() == pytest.approx(0.1)

    def test_coarse_refinement_keeps_circuit(self, kink):
        """A segment length longer than every edge leaves only circuit points."""
        topo = extract_topology(kink)
        path = build_curve(topo, CurveConfig(minimum_segment_length=100.0))
        assert len(path) == len(topo.circuit) - 1

    def test_refine_curve_matches_build_curve(self, trefoil):
        topo = extract_topology(trefoil)
        config = CurveConfig(minimum_segment_length=0.3)
        raw = circuit_to_polyline(topo, lift_amount=config.lift_amount)
        np.testing.assert_array_equal(
            refine_curve(raw, config).get_vertices(),
            build_curve(topo, config).get_vertices(),
        )
