"""Tests for the command-line interface."""

from unittest.mock import patch

import pytest

from calendar_dashboard.cli import main
from calendar_dashboard.config import VERSION, get_settings


def test_no_command_prints_help(capsys):
    assert main([]) == 0
    assert "serve" in capsys.readouterr().out


def test_version(capsys):
    with pytest.raises(SystemExit) as exc_info:
        main(["--version"])
    assert exc_info.value.code == 0
    assert VERSION in capsys.readouterr().out
    assert get_settings().app_version == VERSION


def test_serve_uses_settings():
    with patch("calendar_dashboard.cli.uvicorn.run") as mock_run:
        assert main(["serve"]) == 0

    args, kwargs = mock_run.call_args
    assert args == ("calendar_dashboard.api.app:create_app",)
    assert kwargs["factory"] is True
    settings = get_settings()
    assert kwargs["host"] == settings.host
    assert kwargs["port"] == settings.port
    assert kwargs["log_level"] == settings.log_level.lower()


def test_serve_overrides():
    with patch("calendar_dashboard.cli.uvicorn.run") as mock_run:
        main(["serve", "--host", "0.0.0.0", "--port", "9000", "--reload"])

    kwargs = mock_run.call_args.kwargs
    assert kwargs["host"] == "0.0.0.0"
    assert kwargs["port"] == 9000
    assert kwargs["reload"] is True
