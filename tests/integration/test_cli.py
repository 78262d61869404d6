"""Integration tests for CLI commands."""

import json

import pytest
from click.testing import CliRunner

from listcheck import __version__
from listcheck.cli import cli
from listcheck.operations import enumerate_operations

FAST_ENV = {
    "LISTCHECK_MIN_SEED_LENGTH": "10",
    "LISTCHECK_MAX_SEED_LENGTH": "100",
    "LISTCHECK_MAX_ARRAY_LENGTH": "150",
}


@pytest.fixture
def runner():
    """Create a Click CLI runner."""
    return CliRunner()


def invoke(runner, args):
    with runner.isolated_filesystem():
        return runner.invoke(cli, args, env=FAST_ENV, catch_exceptions=False)


class TestRunCommand:
    """Test the run command."""

    def test_passing_target(self, runner):
        result = invoke(runner, ["run", "listcheck.containers:DynamicArray", "--seed", "5"])

        assert result.exit_code == 0
        assert "Running test 5" in result.output
        assert "insert(Index, Element).. ok" in result.output
        assert f"all {len(enumerate_operations())} operations passed" in result.output

    def test_failing_target_exits_nonzero(self, runner):
        result = invoke(runner, ["run", "tests.fixtures.candidates:ShortSizeArray", "--seed", "3"])

        assert result.exit_code == 1
        assert "size().. fail" in result.output
        assert "returned same: False, post-values same: False" in result.output
        assert "desynced" in result.output
        assert "--seed 3" in result.output

    def test_quiet_prints_only_summary(self, runner):
        result = invoke(runner, ["run", "listcheck.containers:DynamicArray", "--seed", "5", "--quiet"])

        assert result.exit_code == 0
        assert ".. ok" not in result.output
        assert "Run 5" in result.output

    def test_multiple_runs_use_consecutive_seeds(self, runner):
        with runner.isolated_filesystem():
            result = runner.invoke(
                cli,
                ["run", "listcheck.containers:DynamicArray", "--seed", "10", "--runs", "3",
                 "--quiet", "--output", "results.json"],
                env=FAST_ENV,
                catch_exceptions=False,
            )
            with open("results.json") as f:
                payload = json.load(f)

        assert result.exit_code == 0
        assert "Run Summary" in result.output
        assert payload["target"] == "listcheck.containers:DynamicArray"
        assert [run["seed"] for run in payload["runs"]] == [10, 11, 12]
        assert all(run["succeeded"] for run in payload["runs"])

    def test_each_batch_seed_reproduces_alone(self, runner):
        target = "tests.fixtures.candidates:NonShiftingPopArray"

        def run_to_json(*extra):
            runner.invoke(
                cli,
                ["run", target, "--quiet", "--output", "out.json", *extra],
                env=FAST_ENV,
                catch_exceptions=False,
            )
            with open("out.json") as f:
                return json.load(f)["runs"]

        with runner.isolated_filesystem():
            batch = run_to_json("--seed", "20", "--runs", "4")
            alone = [run_to_json("--seed", str(seed))[0] for seed in range(20, 24)]

        assert [run["seed"] for run in batch] == [20, 21, 22, 23]
        assert batch == alone

    def test_output_records_divergence(self, runner):
        with runner.isolated_filesystem():
            result = runner.invoke(
                cli,
                ["run", "tests.fixtures.candidates:ShortSizeArray", "--seed", "1", "-q",
                 "-o", "out.json"],
                env=FAST_ENV,
                catch_exceptions=False,
            )
            with open("out.json") as f:
                payload = json.load(f)

        assert result.exit_code == 1
        run = payload["runs"][0]
        assert run["succeeded"] is False
        assert run["failed_on"]["name"] == "size"
        assert run["divergence"]["kind"] == "harness"

    def test_custom_reference(self, runner):
        result = invoke(runner, [
            "run", "listcheck.containers:ReferenceList",
            "--reference", "listcheck.containers:DynamicArray",
            "--seed", "8", "-q",
        ])
        assert result.exit_code == 0

    def test_unknown_target(self, runner):
        result = invoke(runner, ["run", "no_such_module_xyz:Thing"])

        assert result.exit_code == 1
        assert "Cannot import module" in result.output

    def test_abstract_target(self, runner):
        result = invoke(runner, ["run", "listcheck.contract:ListContract"])

        assert result.exit_code == 1
        assert "does not implement every list operation" in result.output

    def test_negative_seed(self, runner):
        result = invoke(runner, ["run", "listcheck.containers:DynamicArray", "--seed", "-1"])

        assert result.exit_code == 1
        assert "must not be negative" in result.output


class TestOperationsCommand:
    """Test the operations command."""

    def test_lists_every_operation(self, runner):
        result = invoke(runner, ["operations"])

        assert result.exit_code == 0
        assert "List Operations" in result.output
        for operation in enumerate_operations():
            assert operation.name in result.output


class TestConfigCommand:
    """Test the config command."""

    def test_shows_effective_config(self, runner):
        result = invoke(runner, ["config"])

        assert result.exit_code == 0
        assert "Harness Configuration" in result.output
        assert "100" in result.output

    @pytest.mark.parametrize("fmt,marker", [
        ("yaml", "harness:"),
        ("toml", "[harness]"),
        ("json", '"harness"'),
    ])
    def test_templates(self, runner, fmt, marker):
        result = invoke(runner, ["config", "--template", fmt])

        assert result.exit_code == 0
        assert marker in result.output

    def test_config_file_option(self, runner, tmp_path):
        config_file = tmp_path / "listcheck.toml"
        config_file.write_text("[harness]\nruns = 2\nmax_seed_length = 30\n")

        result = runner.invoke(cli, ["--config", str(config_file), "config"], catch_exceptions=False)

        assert result.exit_code == 0
        assert "30" in result.output


def test_version(runner):
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output
