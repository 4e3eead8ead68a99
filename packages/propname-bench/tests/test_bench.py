from typer.testing import CliRunner

from propname import PropertyNames
from propname.bench import SCENARIOS
from propname.bench.main import app

runner = CliRunner()


def test_scenarios_produce_paths():
    names = PropertyNames()

    assert SCENARIOS["single"](names) == "a"
    assert SCENARIOS["chain"](names) == "b"
    assert SCENARIOS["collection"](names) == "b.a.bs"


def test_run_single_scenario():
    result = runner.invoke(app, ["single", "--iterations", "5", "--warmup", "1"])

    assert result.exit_code == 0, result.output
    assert "single" in result.output
    assert "ns/op" in result.output
    assert "collection" not in result.output


def test_run_all_scenarios_by_default():
    result = runner.invoke(app, ["--iterations", "3", "--warmup", "0"])

    assert result.exit_code == 0, result.output
    for key in SCENARIOS:
        assert key in result.output
    assert "'b.a.bs'" in result.output


def test_unknown_scenario_is_rejected():
    result = runner.invoke(app, ["everything"])
    assert result.exit_code != 0


def test_profile_writes_html_report(tmp_path):
    report = tmp_path / "profile.html"

    result = runner.invoke(
        app, ["chain", "--iterations", "50", "--warmup", "0", "--profile", "--html", str(report)]
    )

    assert result.exit_code == 0, result.output
    assert report.is_file()
    assert "HTML report saved" in result.output
