"""
Integration tests for the CLI commands.
"""

import pytest
from typer.testing import CliRunner

from autoform_filler import main
from autoform_filler.config import ConfigLoader
from autoform_filler.content_script import MessageType


@pytest.fixture
def runner():
    """Create a CLI runner."""
    return CliRunner()


@pytest.fixture
def sent(monkeypatch, tmp_path):
    """Replace the browser round trip and record what would be sent."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(ConfigLoader, "DEFAULT_CONFIG_PATHS", [])
    monkeypatch.setattr(main, "setup_logging", lambda *args, **kwargs: None)

    calls = []
    replies = {
        MessageType.PING: {"ok": True, "message": "pong"},
        MessageType.DETECT: {"ok": True, "message": "Detected 4 fields", "count": 4},
        MessageType.FILL: {"ok": False, "message": "API key not set. Save your API key in the settings first."},
    }

    async def fake_send(url, message_type, settings, hold_ms=0):
        calls.append((url, message_type, settings, hold_ms))
        return replies[message_type]

    monkeypatch.setattr(main, "_send_message", fake_send)
    return calls


class TestCLIHelp:
    """Test command help."""

    def test_fill_help(self, runner):
        result = runner.invoke(main.app, ["fill", "--help"])
        assert result.exit_code == 0
        assert "Fetch your profile and fill the form" in result.stdout
        assert "--api-key" in result.stdout
        assert "--visible" in result.stdout

    def test_detect_help(self, runner):
        result = runner.invoke(main.app, ["detect", "--help"])
        assert result.exit_code == 0
        assert "Count the fillable fields" in result.stdout

    def test_ping_help(self, runner):
        result = runner.invoke(main.app, ["ping", "--help"])
        assert result.exit_code == 0


class TestCLICommands:
    """Test commands with the browser round trip replaced."""

    def test_ping(self, runner, sent):
        result = runner.invoke(main.app, ["ping", "https://jobs.example.com"])

        assert result.exit_code == 0
        assert "pong" in result.stdout
        assert sent[0][1] == MessageType.PING

    def test_detect_visible(self, runner, sent):
        result = runner.invoke(main.app, ["detect", "https://jobs.example.com", "--visible"])

        assert result.exit_code == 0
        assert "Detected 4 fields" in result.stdout
        assert sent[0][2].browser.headless is False

    def test_fill_refusal_exits_nonzero(self, runner, sent):
        result = runner.invoke(main.app, ["fill", "https://jobs.example.com"])

        assert result.exit_code == 1
        assert "API key not set" in result.stdout

    def test_fill_overrides(self, runner, sent):
        runner.invoke(main.app, [
            "fill", "https://jobs.example.com",
            "--api-key", "ak_cli",
            "--api-base", "https://api.example.com",
            "--timeout-ms", "9000",
            "--settle-ms", "800",
            "--hold-ms", "50",
        ])

        url, message_type, settings, hold_ms = sent[0]
        assert url == "https://jobs.example.com"
        assert message_type == MessageType.FILL
        assert settings.profile_service.api_key.get_secret_value() == "ak_cli"
        assert settings.profile_service.base_url == "https://api.example.com"
        assert settings.fill.timeout_ms == 9000
        assert settings.fill.settle_ms == 800
        assert hold_ms == 50
