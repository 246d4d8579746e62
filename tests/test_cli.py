"""Tests for the command line interface."""

import json

import pytest

from pasturewatch.core.client import RepositoryError
from pasturewatch.pasture import cli


@pytest.fixture
def snapshot_file(tmp_path, snapshot_data):
    path = tmp_path / "farm.json"
    path.write_text(json.dumps(snapshot_data))
    return str(path)


async def run_json(capsys, *argv):
    await cli.cli_main([*argv, "--json", "--as-of", "2026-03-31"])
    return json.loads(capsys.readouterr().out)


class TestJsonOutput:
    """Commands emit the result's to_dict() with --json."""

    async def test_velocity(self, capsys, snapshot_file):
        data = await run_json(capsys, "velocity", "L1", "--snapshot", snapshot_file)

        assert data["kind"] == "velocity"
        assert data["velocity"] == -0.38

    async def test_velocity_window_override(self, capsys, snapshot_file):
        data = await run_json(capsys, "velocity", "L1", "--days", "5", "--snapshot", snapshot_file)

        assert data["kind"] == "no_data"
        assert data["records_seen"] == 1

    async def test_project(self, capsys, snapshot_file):
        data = await run_json(capsys, "project", "L1", "--snapshot", snapshot_file)

        assert data["days_until_critical"] == 14
        assert data["projected_date"] == "2026-04-14"

    async def test_stocking_with_adjustment(self, capsys, snapshot_file):
        data = await run_json(capsys, "stocking", "L1", "--current-head", "150", "--snapshot", snapshot_file)

        assert data["recommended_head"] == 100
        assert data["adjustment"]["action"] == "reduce"
        assert data["adjustment"]["priority"] == "high"

    async def test_compare(self, capsys, snapshot_file):
        data = await run_json(capsys, "compare", "--premise", "P1", "--snapshot", snapshot_file)

        assert [r["lot_id"] for r in data] == ["L1", "L2"]

    async def test_stats_history(self, capsys, snapshot_file):
        data = await run_json(
            capsys, "stats", "L1", "--start", "2026-03-01", "--end", "2026-03-31", "--snapshot", snapshot_file
        )

        assert data["kind"] == "height_history"
        assert data["mean_cm"] == 15.0

    async def test_correlate_with_rainfall(self, capsys, snapshot_file):
        data = await run_json(capsys, "correlate", "L1", "--rainfall-mm", "200", "--snapshot", snapshot_file)

        assert data["projected_yield"] == 2500
        assert data["rainfall_adjustment"]["adjusted_yield"] == 1500

    async def test_rainfall(self, capsys, snapshot_file):
        data = await run_json(capsys, "rainfall", "--premise", "P1", "--snapshot", snapshot_file)

        assert data["kind"] == "rainfall_summary"
        assert data["deficit"]["severity"] == "moderate"


class TestTableOutput:
    """Operator tables on stdout."""

    async def test_stats_table(self, capsys, snapshot_file, monkeypatch):
        monkeypatch.setattr(cli.settings, "display_units", "metric")

        await cli.cli_main(["stats", "L1", "--snapshot", snapshot_file, "--as-of", "2026-03-31"])
        out = capsys.readouterr().out

        assert "Lot Statistics - North" in out
        assert "Current height: 10.0 cm" in out
        assert "=" * 70 in out

    async def test_compare_table(self, capsys, snapshot_file):
        await cli.cli_main(["compare", "--premise", "P1", "--snapshot", snapshot_file, "--as-of", "2026-03-31"])
        out = capsys.readouterr().out

        assert "Lots ranked: 2" in out

    async def test_no_data_message(self, capsys, snapshot_file):
        await cli.cli_main(["project", "L3", "--snapshot", snapshot_file])
        out = capsys.readouterr().out

        assert out.startswith("No data:")

    async def test_no_command_prints_help(self, capsys):
        await cli.cli_main([])
        assert "usage: pasturewatch" in capsys.readouterr().out


class TestErrors:
    async def test_rainfall_needs_premise(self, capsys, snapshot_file, monkeypatch):
        monkeypatch.setattr(cli.settings, "premise_id", None)

        with pytest.raises(SystemExit) as exc:
            await cli.cli_main(["rainfall", "--snapshot", snapshot_file])

        assert exc.value.code == 2

    async def test_repository_error_exits(self, capsys, snapshot_file, monkeypatch):
        async def failing(*args, **kwargs):
            raise RepositoryError("HTTP 401: invalid key")

        monkeypatch.setattr(cli, "velocity_for_lot", failing)

        with pytest.raises(SystemExit) as exc:
            await cli.cli_main(["velocity", "L1", "--snapshot", snapshot_file])

        assert exc.value.code == 1
        assert "Error: HTTP 401: invalid key" in capsys.readouterr().out

    @pytest.mark.parametrize("days", ["0", "-3"])
    async def test_non_positive_days_rejected(self, capsys, snapshot_file, days):
        with pytest.raises(SystemExit) as exc:
            await cli.cli_main(["velocity", "L1", "--days", days, "--snapshot", snapshot_file])

        assert exc.value.code == 2
        assert "positive number of days" in capsys.readouterr().err

    async def test_stats_start_without_end(self, capsys, snapshot_file):
        """A half-open period is an error, not a silent fallback to the summary."""
        with pytest.raises(SystemExit) as exc:
            await cli.cli_main(["stats", "L1", "--start", "2026-03-01", "--snapshot", snapshot_file])

        assert exc.value.code == 2
        assert "--start and --end must be given together" in capsys.readouterr().err
