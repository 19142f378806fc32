"""
Tests for the mdb-data-api command line.

uvicorn, dotenv and logging setup are patched out; the tests check the
settings that reach the server.
"""

from unittest.mock import patch

import pytest
from click.testing import CliRunner
from fastapi import FastAPI

from mdb_data_api.cli.main import cli
from mdb_data_api.constants import SUPPORTED_ACTIONS


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def patched_server():
    with patch("mdb_data_api.cli.main.uvicorn.run") as run, patch(
        "mdb_data_api.cli.main.load_dotenv"
    ) as load_dotenv, patch("mdb_data_api.cli.main.configure_logging") as configure_logging:
        yield run, load_dotenv, configure_logging


class TestServeCommand:
    """Test the serve command."""

    def test_serve_defaults(self, runner, patched_server):
        run, load_dotenv, configure_logging = patched_server

        result = runner.invoke(cli, ["serve"])

        assert result.exit_code == 0, result.output
        load_dotenv.assert_called_once_with()
        configure_logging.assert_called_once_with("INFO")
        app = run.call_args.args[0]
        assert isinstance(app, FastAPI)
        assert run.call_args.kwargs == {
            "host": "0.0.0.0",
            "port": 8080,
            "log_level": "info",
            "timeout_graceful_shutdown": 5,
        }

    def test_serve_options_override_env(self, runner, patched_server, monkeypatch):
        run, _, configure_logging = patched_server
        monkeypatch.setenv("PORT", "7000")
        monkeypatch.setenv("SHUTDOWN_GRACE_SECONDS", "12")

        result = runner.invoke(
            cli, ["serve", "--host", "127.0.0.1", "--port", "9000", "--log-level", "debug"]
        )

        assert result.exit_code == 0, result.output
        configure_logging.assert_called_once_with("DEBUG")
        assert run.call_args.kwargs["host"] == "127.0.0.1"
        assert run.call_args.kwargs["port"] == 9000
        assert run.call_args.kwargs["log_level"] == "debug"
        assert run.call_args.kwargs["timeout_graceful_shutdown"] == 12

    def test_serve_settings_reach_app(self, runner, patched_server, monkeypatch):
        run, _, _ = patched_server
        monkeypatch.setenv("MONGODB_URI", "mongodb://db.internal:27017")

        result = runner.invoke(cli, ["serve"])

        assert result.exit_code == 0, result.output
        app = run.call_args.args[0]
        assert app.state.settings.mongodb_uri == "mongodb://db.internal:27017"

    def test_serve_env_file(self, runner, patched_server, tmp_path):
        _, load_dotenv, _ = patched_server
        env_file = tmp_path / "server.env"
        env_file.write_text("PORT=7000\n")

        result = runner.invoke(cli, ["serve", "--env-file", str(env_file)])

        assert result.exit_code == 0, result.output
        load_dotenv.assert_called_once_with(env_file)

    def test_serve_missing_env_file(self, runner, patched_server, tmp_path):
        run, _, _ = patched_server

        result = runner.invoke(cli, ["serve", "--env-file", str(tmp_path / "missing.env")])

        assert result.exit_code != 0
        run.assert_not_called()

    def test_serve_invalid_port(self, runner, patched_server):
        run, _, _ = patched_server

        result = runner.invoke(cli, ["serve", "--port", "0"])

        assert result.exit_code == 1
        assert "port must be between 1 and 65535" in result.output
        run.assert_not_called()

    def test_serve_invalid_env_value(self, runner, patched_server, monkeypatch):
        run, _, _ = patched_server
        monkeypatch.setenv("MONGO_MAX_POOL_SIZE", "many")

        result = runner.invoke(cli, ["serve"])

        assert result.exit_code == 1
        assert "MONGO_MAX_POOL_SIZE must be an integer" in result.output
        run.assert_not_called()


class TestInfoCommands:
    """Test informational commands."""

    def test_actions(self, runner):
        result = runner.invoke(cli, ["actions"])

        assert result.exit_code == 0
        assert result.output.split() == list(SUPPORTED_ACTIONS)

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert "1.0.0" in result.output
