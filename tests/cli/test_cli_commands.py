"""
Tests for the confucius command line.
"""

import json

import pytest
from click.testing import CliRunner

from confucius.__main__ import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def app_files(write_file):
    properties = write_file(
        "app.properties",
        "[Default]\n"
        "db.host = localhost\n"
        "db.port = 5432\n"
        "db.url = pg://${db.host}:${db.port}/app\n"
        "hosts = a, b, c\n"
        "debug = TRUE\n"
        "broken = ${nowhere}\n"
        "[Production]\n"
        "db.host = db.internal\n",
    )
    dotenv = write_file(".env", "db.port=6543\n")
    return properties, dotenv


class TestCliGroup:
    def test_help_without_subcommand(self, runner):
        result = runner.invoke(cli, [])
        assert result.exit_code == 0
        assert "get" in result.output
        assert "check" in result.output

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "confucius" in result.output


class TestGetCommand:
    def test_get_substitutes_placeholders(self, runner, app_files):
        properties, _ = app_files
        result = runner.invoke(cli, ["get", "db.url", "--source", str(properties)])

        assert result.exit_code == 0
        assert result.output.strip() == "pg://localhost:5432/app"

    def test_first_source_wins(self, runner, app_files):
        properties, dotenv = app_files
        result = runner.invoke(
            cli, ["get", "db.url", "--source", str(dotenv), "--source", str(properties)]
        )
        assert result.output.strip() == "pg://localhost:6543/app"

    def test_context(self, runner, app_files):
        properties, _ = app_files
        result = runner.invoke(
            cli, ["get", "db.host", "--source", str(properties), "--context", "production"]
        )
        assert result.output.strip() == "db.internal"

    def test_typed_value(self, runner, app_files):
        properties, _ = app_files
        result = runner.invoke(
            cli, ["get", "debug", "--type", "boolean", "--source", str(properties)]
        )
        assert result.output.strip() == "true"

    def test_list_json(self, runner, app_files):
        properties, _ = app_files
        result = runner.invoke(
            cli, ["get", "hosts", "--type", "list", "--json-output", "--source", str(properties)]
        )

        assert result.exit_code == 0
        assert json.loads(result.output) == {"status": "ok", "result": ["a", "b", "c"]}

    def test_missing_key_fails(self, runner, app_files):
        properties, _ = app_files
        result = runner.invoke(cli, ["get", "nope", "--source", str(properties)])

        assert result.exit_code != 0
        assert "Unable to find configuration value for key 'nope'" in result.output

    def test_default_for_missing_key(self, runner, app_files):
        properties, _ = app_files
        result = runner.invoke(
            cli, ["get", "nope", "--default", "fallback", "--source", str(properties)]
        )
        assert result.exit_code == 0
        assert result.output.strip() == "fallback"

    def test_typed_default_is_converted(self, runner, app_files):
        properties, _ = app_files
        result = runner.invoke(
            cli,
            ["get", "port", "--type", "integer", "--default", "8080", "--json-output", "--source", str(properties)],
        )

        assert result.exit_code == 0
        assert json.loads(result.output) == {"status": "ok", "result": 8080}

    def test_typed_default_must_fit_the_type(self, runner, app_files):
        properties, _ = app_files
        result = runner.invoke(
            cli,
            ["get", "port", "--type", "integer", "--default", "abc", "--json-output", "--source", str(properties)],
        )

        assert result.exit_code != 0
        output = result.output
        payload = json.loads(output[output.index("{") : output.rindex("}") + 1])
        assert payload["status"] == "error"
        assert payload["failure"]["kind"] == "conversion_error"
        assert payload["failure"]["raw_value"] == "abc"

    def test_default_does_not_hide_broken_value(self, runner, app_files):
        properties, _ = app_files
        result = runner.invoke(
            cli, ["get", "broken", "--default", "fallback", "--source", str(properties)]
        )
        assert result.exit_code != 0
        assert "nowhere" in result.output

    def test_conversion_error_json(self, runner, app_files):
        properties, _ = app_files
        result = runner.invoke(
            cli,
            ["get", "db.host", "--type", "integer", "--json-output", "--source", str(properties)],
        )

        assert result.exit_code != 0
        output = result.output
        payload = json.loads(output[output.index("{") : output.rindex("}") + 1])
        assert payload["status"] == "error"
        assert payload["failure"]["kind"] == "conversion_error"
        assert payload["failure"]["raw_value"] == "localhost"

    def test_settings_file(self, runner, write_file):
        write_file("values.yaml", "server:\n  port: 8080\n")
        settings = write_file(
            "settings.yaml", "sources:\n  - type: yaml\n    path: values.yaml\n"
        )
        result = runner.invoke(
            cli, ["get", "server.port", "--type", "integer", "--config", str(settings)]
        )
        assert result.output.strip() == "8080"


class TestListCommand:
    def test_lists_keys_and_failures(self, runner, app_files):
        properties, _ = app_files
        result = runner.invoke(cli, ["list", "--source", str(properties)])

        assert result.exit_code == 0
        assert "db.url = pg://localhost:5432/app" in result.output
        assert "✗ broken" in result.output
        assert "6 keys, 1 failed" in result.output

    def test_show_origin(self, runner, app_files):
        properties, dotenv = app_files
        result = runner.invoke(
            cli, ["list", "--show-origin", "--source", str(dotenv), "--source", str(properties)]
        )
        assert f"db.port = 6543    ({dotenv})" in result.output

    def test_json(self, runner, app_files):
        properties, _ = app_files
        result = runner.invoke(cli, ["list", "--json-output", "--source", str(properties)])

        entries = json.loads(result.output)["result"]
        by_key = {entry["key"]: entry for entry in entries}
        assert by_key["db.url"]["references"] == ["db.host", "db.port"]
        assert by_key["broken"]["kind"] == "unresolved_placeholder"


class TestCheckCommand:
    def test_all_keys_resolve(self, runner, app_files):
        properties, _ = app_files
        result = runner.invoke(cli, ["check", "db.url", "db.port", "--source", str(properties)])

        assert result.exit_code == 0
        assert "✓ db.url" in result.output
        assert "2 keys checked, 0 failed" in result.output

    def test_reports_every_failure(self, runner, app_files):
        properties, _ = app_files
        result = runner.invoke(
            cli, ["check", "db.port", "nope", "broken", "--source", str(properties)]
        )

        assert result.exit_code == 1
        assert "✓ db.port" in result.output
        assert "✗ nope" in result.output
        assert "✗ broken" in result.output
        assert "3 keys checked, 2 failed" in result.output

    def test_typed_check_json(self, runner, app_files):
        properties, _ = app_files
        result = runner.invoke(
            cli,
            ["check", "db.port", "db.host", "--type", "integer", "--json-output", "--source", str(properties)],
        )

        assert result.exit_code == 1
        payload = json.loads(result.output)
        assert payload["status"] == "error"
        assert payload["checked"] == ["db.port", "db.host"]
        assert [f["key"] for f in payload["failures"]] == ["db.host"]

    def test_requires_keys(self, runner):
        result = runner.invoke(cli, ["check"])
        assert result.exit_code == 2
