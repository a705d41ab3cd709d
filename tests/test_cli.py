import json

import pytest
from click.testing import CliRunner

from stats_simulator.cli.client import APIClient
from stats_simulator.cli.main import cli


@pytest.fixture
def runner(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    return CliRunner()


def test_run_prints_json_summary(runner):
    result = runner.invoke(
        cli, ["run", "-p", "0.5", "-t", "20", "-n", "40", "--seed", "3"]
    )

    assert result.exit_code == 0, result.output
    summary = json.loads(result.stdout)
    assert summary["completed"] == 40
    assert summary["params"]["trials_per_experiment"] == 20
    assert sum(summary["histogram"]["data"]) == 40
    assert summary["statistics"]["expected_value"] == 10.0


def test_run_with_certain_success(runner):
    result = runner.invoke(cli, ["run", "-p", "1", "-t", "5", "-n", "4"])

    summary = json.loads(result.stdout)
    assert summary["histogram"] == {"labels": ["5"], "data": [4]}
    assert summary["statistics"]["z_score"] == 0.0


def test_run_table_format(runner):
    result = runner.invoke(
        cli, ["run", "-p", "0", "-t", "5", "-n", "3", "--format", "table"]
    )

    assert result.exit_code == 0, result.output
    assert "expected_value" in result.stdout
    assert "frequency" in result.stdout


def test_run_writes_results_file(runner, tmp_path):
    out = tmp_path / "results.json"

    result = runner.invoke(
        cli, ["run", "-t", "10", "-n", "6", "--seed", "1", "-o", str(out)]
    )

    assert result.exit_code == 0, result.output
    records = json.loads(out.read_text())
    assert [r["experiment_number"] for r in records] == [1, 2, 3, 4, 5, 6]
    assert all(0 <= r["successes"] <= 10 for r in records)


@pytest.mark.parametrize(
    "args",
    [
        ["run", "-p", "1.5"],
        ["run", "-p", "abc"],
        ["run", "-t", "0"],
        ["run", "-n", "-3"],
    ],
)
def test_run_rejects_invalid_params(runner, args):
    result = runner.invoke(cli, args)

    assert result.exit_code == 2


def test_sim_params_requires_an_option(runner):
    result = runner.invoke(cli, ["sim", "params"])

    assert result.exit_code == 2


def test_sim_status_reports_connection_errors(runner, monkeypatch):
    # Nothing listens on the discard port
    monkeypatch.setattr(
        "stats_simulator.cli.remote.APIClient",
        lambda: APIClient(base_url="http://127.0.0.1:9"),
    )

    result = runner.invoke(cli, ["sim", "status"])

    assert result.exit_code == 0
    assert "Failed to connect to API" in result.stderr
