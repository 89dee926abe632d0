"""Unit tests for the award-graph CLI."""

import json
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from award_graph.cli.errors import CLIError, exit_code_for, format_error
from award_graph.cli.main import app
from award_graph.exceptions import ConfigurationError, Neo4jError


pytestmark = pytest.mark.fast

MODULE = "award_graph.cli.main"


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def patched(pipeline_config, memory_store):
    with (
        patch(f"{MODULE}.get_config", return_value=pipeline_config),
        patch(f"{MODULE}.build_store", return_value=memory_store),
    ):
        yield memory_store


class TestRunCommand:
    def test_run_loads_graph(self, runner, patched, sample_csv):
        result = runner.invoke(app, ["run"])

        assert result.exit_code == 0, result.output
        assert "verify" in patched.calls
        assert patched.count_nodes() == 13
        assert patched.closed is True
        assert "neighbors" in result.output

    def test_run_writes_neighborhood(self, runner, patched, sample_csv, tmp_path):
        output = tmp_path / "out" / "jane.json"

        result = runner.invoke(app, ["run", "--person", "Jane Doe", "--hops", "1", "-o", str(output)])

        assert result.exit_code == 0, result.output
        data = json.loads(output.read_text())
        assert data["nodes"][0]["name"] == "Jane Doe"
        assert data["nodes"][0]["group"] == "Focus"
        assert {link["type"] for link in data["links"]} == {"Based_At", "Applied_for", "Awarded_to"}

    def test_run_unknown_person(self, runner, patched, sample_csv, tmp_path):
        output = tmp_path / "nobody.json"

        result = runner.invoke(app, ["run", "-p", "Nobody", "-o", str(output)])

        assert result.exit_code == 0
        assert not output.exists()
        assert "No person named" in result.output

    def test_run_missing_export(self, runner, patched):
        result = runner.invoke(app, ["run"])

        assert result.exit_code == 1
        assert "FileSystemError" in result.output

    def test_run_store_failure(self, runner, pipeline_config, sample_csv):
        failing = patch(
            f"{MODULE}.build_store",
            side_effect=Neo4jError("Neo4j connection failed", operation="verify"),
        )
        with patch(f"{MODULE}.get_config", return_value=pipeline_config), failing:
            result = runner.invoke(app, ["run"])

        assert result.exit_code == 1
        assert "reset" in result.output

    def test_configuration_error_exit_code(self, runner):
        with patch(f"{MODULE}.get_config", side_effect=ConfigurationError("bad yaml")):
            result = runner.invoke(app, ["run"])

        assert result.exit_code == 2


class TestResetCommand:
    def test_reset_with_yes(self, runner, patched):
        patched.create_node("Person", {"name": "A"})

        result = runner.invoke(app, ["reset", "--yes"])

        assert result.exit_code == 0
        assert patched.count_nodes() == 0
        assert "1 nodes deleted" in result.output

    def test_reset_declined(self, runner, patched):
        patched.create_node("Person", {"name": "A"})

        result = runner.invoke(app, ["reset"], input="n\n")

        assert result.exit_code == 1
        assert patched.count_nodes() == 1


class TestErrors:
    def test_exit_codes(self):
        assert exit_code_for(ConfigurationError("x")) == 2
        assert exit_code_for(CLIError("x", exit_code=3)) == 3
        assert exit_code_for(Neo4jError("x")) == 1

    def test_format_error_includes_suggestions(self):
        panel = format_error(CLIError("boom", suggestions=["try again"]))

        assert "try again" in panel.renderable.plain
