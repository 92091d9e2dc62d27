"""Tests for the typer command line entry points."""
from unittest.mock import patch

import pytest
import typer
from typer.testing import CliRunner

from squat_trainer import cli
from squat_trainer.services.session_driver import SessionOutcome
from squat_trainer.services.terminal_input import InputAction

runner = CliRunner()


class FakeTerminal:
    """Stands in for TerminalInput without touching the real TTY."""

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return None

    def read_input(self, timeout):
        return InputAction.EXIT


@pytest.fixture
def captured_driver(monkeypatch):
    calls = {}

    class FakeDriver:
        def __init__(self, config, renderer, read_input, options=None, **kwargs):
            calls["config"] = config
            calls["options"] = options
            calls["read_input"] = read_input

        def run(self):
            calls["ran"] = True
            return SessionOutcome(True, 0, 0, 0.0)

    monkeypatch.setattr(cli, "SessionDriver", FakeDriver)
    monkeypatch.setattr(cli, "TerminalInput", FakeTerminal)
    return calls


@pytest.fixture
def mock_uvicorn_run():
    """Patch uvicorn.run so squat-web returns instead of serving."""
    with patch("squat_trainer.cli.uvicorn.run") as mock_run:
        yield mock_run


class TestSquatCommand:
    def test_defaults(self, captured_driver):
        result = runner.invoke(cli.app, ["squat"])
        assert result.exit_code == 0, result.output
        config = captured_driver["config"]
        assert config.set_active_seconds == 300.0
        assert config.reps_per_set == 20
        assert config.sets == 1
        assert captured_driver["options"].countdown_seconds == 3
        assert captured_driver["ran"] is True

    def test_options_pass_through(self, captured_driver):
        result = runner.invoke(
            cli.app,
            ["squat", "--duration", "60", "--count", "6", "--hold", "2", "--sets", "3", "--interval", "15",
             "--countdown", "0", "--rest-countdown", "5"],
        )
        assert result.exit_code == 0, result.output
        config = captured_driver["config"]
        assert config.total_duration == 210.0
        assert captured_driver["options"].countdown_seconds == 0
        assert captured_driver["options"].rest_countdown_seconds == 5

    def test_invalid_hold_exits_with_message(self, captured_driver):
        result = runner.invoke(cli.app, ["squat", "--duration", "10", "--count", "2", "--hold", "5"])
        assert result.exit_code == cli.CONFIG_ERROR_EXIT_CODE
        assert "Error:" in result.output
        assert "ran" not in captured_driver

    def test_zero_count_rejected_by_option(self, captured_driver):
        result = runner.invoke(cli.app, ["squat", "--count", "0"])
        assert result.exit_code != 0
        assert "ran" not in captured_driver


class TestSquatWebCommand:
    def test_defaults(self, mock_uvicorn_run):
        result = runner.invoke(cli.app, ["squat-web"])
        assert result.exit_code == 0, result.output
        mock_uvicorn_run.assert_called_once()
        kwargs = mock_uvicorn_run.call_args.kwargs
        assert kwargs["host"] == "127.0.0.1"
        assert kwargs["port"] == 12002
        page_config = mock_uvicorn_run.call_args.args[0].state.page_config
        assert page_config.set_active_seconds == 150.0
        assert page_config.reps_per_set == 10
        assert page_config.sets == 2
        assert page_config.rest_seconds == 60.0

    def test_addr_and_options(self, mock_uvicorn_run):
        result = runner.invoke(
            cli.app,
            ["squat-web", "--addr", "0.0.0.0:8080", "--set", "3", "--freq", "6", "--no-voice"],
        )
        assert result.exit_code == 0, result.output
        assert mock_uvicorn_run.call_args.kwargs["host"] == "0.0.0.0"
        assert mock_uvicorn_run.call_args.kwargs["port"] == 8080
        app = mock_uvicorn_run.call_args.args[0]
        assert app.state.page_config.sets == 3
        assert app.state.page_options.freq == 6.0
        assert app.state.page_options.voice is False

    def test_negative_swing_exits(self, mock_uvicorn_run):
        result = runner.invoke(cli.app, ["squat-web", "--swing-start", "-1"])
        assert result.exit_code == cli.CONFIG_ERROR_EXIT_CODE
        mock_uvicorn_run.assert_not_called()

    def test_invalid_hold_exits(self, mock_uvicorn_run):
        result = runner.invoke(cli.app, ["squat-web", "--duration", "20", "--count", "4", "--hold", "5"])
        assert result.exit_code == cli.CONFIG_ERROR_EXIT_CODE
        mock_uvicorn_run.assert_not_called()

    def test_bad_addr(self, mock_uvicorn_run):
        result = runner.invoke(cli.app, ["squat-web", "--addr", "localhost"])
        assert result.exit_code == 2
        mock_uvicorn_run.assert_not_called()


class TestParseAddr:
    def test_host_and_port(self):
        assert cli.parse_addr("127.0.0.1:12002") == ("127.0.0.1", 12002)

    def test_ipv6_host(self):
        assert cli.parse_addr("[::1]:9000") == ("[::1]", 9000)

    @pytest.mark.parametrize("addr", ["localhost", ":8080", "host:port"])
    def test_invalid(self, addr):
        with pytest.raises(typer.BadParameter):
            cli.parse_addr(addr)
