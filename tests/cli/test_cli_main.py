"""Tests for the main CLI entry point."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from colmapper import __version__
from colmapper.cli.main import app


class TestVersion:
    """Tests for version display."""

    def test_version_flag(self, cli_runner: CliRunner):
        """Test --version flag shows version."""
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout

    def test_version_short_flag(self, cli_runner: CliRunner):
        """Test -v flag shows version."""
        result = cli_runner.invoke(app, ["-v"])
        assert result.exit_code == 0
        assert __version__ in result.stdout


class TestHelp:
    """Tests for help display."""

    def test_help_flag(self, cli_runner: CliRunner):
        """Test --help flag lists commands."""
        result = cli_runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "new-table" in result.stdout
        assert "column-map" in result.stdout

    def test_no_args_shows_help(self, cli_runner: CliRunner):
        """Test that running without arguments shows help."""
        result = cli_runner.invoke(app, [])
        assert result.exit_code == 2
        assert "Usage" in result.stdout


class TestNewTableCommand:
    """Tests for the new-table command."""

    def test_json_output(self, cli_runner: CliRunner):
        """Test new-table prints the table definition as JSON."""
        result = cli_runner.invoke(
            app, ["new-table", "sample_models:User", "--keyspace", "app", "--table", "users"]
        )
        assert result.exit_code == 0
        output = json.loads(result.stdout)
        assert output["keyspace_name"] == "app"
        assert output["partition_key"] == [
            {"name": "login", "role": "partition_key", "type": "text"}
        ]
        assert [c["name"] for c in output["regular_columns"]] == [
            "email_address",
            "email_address_2",
        ]

    def test_cql_output(self, cli_runner: CliRunner):
        """Test new-table renders a CREATE TABLE statement."""
        result = cli_runner.invoke(
            app,
            ["new-table", "sample_models:Order", "-k", "shop", "-t", "orders", "-f", "cql"],
        )
        assert result.exit_code == 0
        assert "CREATE TABLE shop.orders" in result.stdout
        assert "items list<text>" in result.stdout
        assert "PRIMARY KEY (order_id)" in result.stdout

    def test_table_output(self, cli_runner: CliRunner):
        """Test new-table renders a column table."""
        result = cli_runner.invoke(
            app,
            ["new-table", "sample_models:User", "-k", "app", "-t", "users", "-f", "table"],
        )
        assert result.exit_code == 0
        assert "partition_key" in result.stdout
        assert "email_address" in result.stdout

    def test_partition_key_option(self, cli_runner: CliRunner):
        """Test choosing the partition key."""
        result = cli_runner.invoke(
            app,
            [
                "new-table",
                "sample_models:User",
                "-k",
                "app",
                "-t",
                "users",
                "--partition-key",
                "emailAddress",
            ],
        )
        assert result.exit_code == 0
        output = json.loads(result.stdout)
        assert output["partition_key"][0]["name"] == "email_address"

    def test_unknown_target(self, cli_runner: CliRunner):
        """Test that unknown targets exit with an error."""
        result = cli_runner.invoke(
            app, ["new-table", "sample_models:Missing", "-k", "app", "-t", "missing"]
        )
        assert result.exit_code == 1

    def test_no_mappable_properties(self, cli_runner: CliRunner):
        """Test that classes without mappable members exit with an error."""
        result = cli_runner.invoke(
            app, ["new-table", "sample_models:Opaque", "-k", "app", "-t", "opaque"]
        )
        assert result.exit_code == 1


class TestColumnMapCommand:
    """Tests for the column-map command."""

    def test_json_output(self, cli_runner: CliRunner, users_schema_file: Path):
        """Test column-map prints the column map as JSON."""
        result = cli_runner.invoke(
            app, ["column-map", "sample_models:User", "--schema", str(users_schema_file)]
        )
        assert result.exit_code == 0
        output = json.loads(result.stdout)
        assert output["table"] == "app.users"
        assert output["constructor"] == ["login", "email_address", "email_address_2"]
        assert output["setters"]["emailAddress_$eq"] == "email_address"

    def test_with_mapping_file(
        self, cli_runner: CliRunner, users_schema_file: Path, tmp_path: Path
    ):
        """Test overrides from a mapping file."""
        mapping = tmp_path / "mapping.yaml"
        mapping.write_text("overrides:\n  emailAddress: contact\n")

        result = cli_runner.invoke(
            app,
            [
                "column-map",
                "sample_models:User",
                "-s",
                str(users_schema_file),
                "-m",
                str(mapping),
            ],
        )
        assert result.exit_code == 0
        output = json.loads(result.stdout)
        assert output["getters"]["emailAddress"] == "contact"

    def test_missing_schema(self, cli_runner: CliRunner, tmp_path: Path):
        """Test that a missing schema file exits with an error."""
        result = cli_runner.invoke(
            app, ["column-map", "sample_models:User", "-s", str(tmp_path / "missing.yaml")]
        )
        assert result.exit_code == 1


class TestShapeCommand:
    """Tests for the shape command."""

    def test_json_output(self, cli_runner: CliRunner):
        """Test shape lists members with their types."""
        result = cli_runner.invoke(app, ["shape", "sample_models:Sensor"])
        assert result.exit_code == 0
        output = json.loads(result.stdout)
        assert output["type_name"] == "sample_models.Sensor"
        assert {"kind": "getter", "name": "reading", "type": "float"} in output["members"]
        assert {"kind": "setter", "name": "reading_$eq", "type": "float"} in output["members"]

    def test_root_getters(self, cli_runner: CliRunner):
        """Test that inherited runtime getters are reported."""
        result = cli_runner.invoke(app, ["shape", "sample_models:Account"])
        assert result.exit_code == 0
        output = json.loads(result.stdout)
        assert "model_fields_set" in output["root_getters"]

    def test_table_output_without_members(self, cli_runner: CliRunner):
        """Test that a class without members shows an empty table with headers."""
        result = cli_runner.invoke(app, ["shape", "sample_models:Marker", "-f", "table"])
        assert result.exit_code == 0
        assert "kind" in result.stdout
        assert "name" in result.stdout
        assert "[]" not in result.stdout


class TestDefaultFormat:
    """Tests for the configured default output format."""

    def test_default_format_from_settings(
        self, cli_runner: CliRunner, monkeypatch: pytest.MonkeyPatch
    ):
        """Test COLMAPPER_DEFAULT_FORMAT applies when --format is not given."""
        monkeypatch.setenv("COLMAPPER_DEFAULT_FORMAT", "table")
        result = cli_runner.invoke(app, ["shape", "sample_models:User"])
        assert result.exit_code == 0
        assert "kind" in result.stdout
        assert not result.stdout.lstrip().startswith("{")

    def test_format_option_wins(self, cli_runner: CliRunner, monkeypatch: pytest.MonkeyPatch):
        """Test that --format overrides the configured default."""
        monkeypatch.setenv("COLMAPPER_DEFAULT_FORMAT", "table")
        result = cli_runner.invoke(app, ["shape", "sample_models:User", "-f", "json"])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["type_name"] == "sample_models.User"

    def test_default_format_for_new_table(
        self, cli_runner: CliRunner, monkeypatch: pytest.MonkeyPatch
    ):
        """Test the configured default applies to new-table."""
        monkeypatch.setenv("COLMAPPER_DEFAULT_FORMAT", "table")
        result = cli_runner.invoke(
            app, ["new-table", "sample_models:User", "-k", "app", "-t", "users"]
        )
        assert result.exit_code == 0
        assert "partition_key" in result.stdout
        assert "role" in result.stdout
