"""
Tests for cli.py.
"""

import json

import click
import pytest
from click.testing import CliRunner

from grid_knots.cli import _parse_move, main
from grid_knots.diagram.models import (
    Axis,
    Cardinality,
    Commutation,
    Direction,
    Stabilization,
    Translation,
)


class TestParseMove:

    @pytest.mark.parametrize("spec,expected", [
        ("up", Translation(Direction.UP)),
        ("Right", Translation(Direction.RIGHT)),
        ("commute:row:2", Commutation(Axis.ROW, 2)),
        ("commute:column:0", Commutation(Axis.COLUMN, 0)),
        ("stabilize:nw:0:3", Stabilization(Cardinality.NW, 0, 3)),
        ("stabilize:SE:1:1", Stabilization(Cardinality.SE, 1, 1)),
    ])
    def test_valid(self, spec, expected):
        assert _parse_move(spec) == expected

    @pytest.mark.parametrize("spec", [
        "sideways", "commute:diagonal:1", "commute:row:x", "stabilize:nw:0",
    ])
    def test_invalid(self, spec):
        with pytest.raises(click.BadParameter):
            _parse_move(spec)


class TestMain:

    def test_summary_line(self, trefoil_csv, tmp_path):
        result = CliRunner().invoke(main, [str(trefoil_csv), "--output-dir", str(tmp_path)])
        assert result.exit_code == 0, result.output
        assert "5×5 grid, 3 crossing(s)" in result.output
        assert (tmp_path / "knot_trefoil.json").exists()

    def test_moves_and_steps(self, trefoil_csv, tmp_path):
        result = CliRunner().invoke(main, [
            str(trefoil_csv), "--output-dir", str(tmp_path),
            "--move", "stabilize:se:4:4", "--move", "up",
            "--steps", "2", "--formats", "json",
        ])
        assert result.exit_code == 0, result.output
        data = json.loads((tmp_path / "knot_trefoil.json").read_text())
        assert data["diagram"]["resolution"] == 6
        assert data["curve"]["relaxation_steps"] == 2

    def test_config_and_overrides(self, unknot_csv, tmp_path):
        config = tmp_path / "config.json"
        config.write_text(json.dumps({"curve": {"minimum_segment_length": 0.5}}))
        result = CliRunner().invoke(main, [
            str(unknot_csv), "--output-dir", str(tmp_path),
            "--config", str(config), "--lift", "0.3",
        ])
        assert result.exit_code == 0, result.output
        # Four unit edges at 0.5 spacing, closing point dropped.
        assert "8 curve vertices" in result.output

    def test_bad_move_is_usage_error(self, trefoil_csv, tmp_path):
        result = CliRunner().invoke(main, [
            str(trefoil_csv), "--output-dir", str(tmp_path), "--move", "jump",
        ])
        assert result.exit_code == 2

    def test_illegal_move_reported(self, trefoil_csv, tmp_path):
        result = CliRunner().invoke(main, [
            str(trefoil_csv), "--output-dir", str(tmp_path), "--move", "commute:column:4",
        ])
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_link_reported(self, hopf_csv, tmp_path):
        result = CliRunner().invoke(main, [str(hopf_csv), "--output-dir", str(tmp_path)])
        assert result.exit_code == 1

    def test_unknown_format(self, unknot_csv, tmp_path):
        result = CliRunner().invoke(main, [
            str(unknot_csv), "--output-dir", str(tmp_path), "--formats", "json,stl",
        ])
        assert result.exit_code == 1
        assert "stl" in result.output
