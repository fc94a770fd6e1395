"""Tests for pommai.cli — click commands."""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from click.testing import CliRunner

from pommai.cli import cli
from pommai.session.errors import InitializationError


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def vocab_file(tmp_path):
    path = tmp_path / "vocab.json"
    path.write_text(
        json.dumps(
            {
                "commands": {"jump": ["குதி", "குதித்தல்"]},
                "words": [{"word": "யானை", "english": "elephant"}],
            },
            ensure_ascii=False,
        ),
        encoding="utf-8",
    )
    return path


# ---------------------------------------------------------------------------
# resolve
# ---------------------------------------------------------------------------


class TestResolveCommand:
    def test_resolves_command(self, runner: CliRunner):
        result = runner.invoke(cli, ["resolve", "உட்கார்"])
        assert result.exit_code == 0
        assert "command: sit" in result.output
        assert "tier=exact" in result.output

    def test_resolves_letter(self, runner: CliRunner):
        result = runner.invoke(cli, ["resolve", "அ"])
        assert "letter: அ (அகரம்)" in result.output

    def test_resolves_word_with_gloss(self, runner: CliRunner):
        result = runner.invoke(cli, ["resolve", "poonai"])
        assert "word: பூனை - cat" in result.output

    def test_no_match(self, runner: CliRunner):
        result = runner.invoke(cli, ["resolve", "hello"])
        assert result.exit_code == 0
        assert "No match" in result.output

    def test_custom_vocab(self, runner: CliRunner, vocab_file):
        result = runner.invoke(cli, ["resolve", "குதித்தல்", "--vocab", str(vocab_file)])
        assert "command: jump" in result.output
        result = runner.invoke(cli, ["resolve", "உட்கார்", "--vocab", str(vocab_file)])
        assert "No match" in result.output

    def test_broken_vocab_is_cli_error(self, runner: CliRunner, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{", encoding="utf-8")
        result = runner.invoke(cli, ["resolve", "நட", "--vocab", str(path)])
        assert result.exit_code == 1
        assert "Could not load vocabulary" in result.output


# ---------------------------------------------------------------------------
# triggers
# ---------------------------------------------------------------------------


class TestTriggersCommand:
    def test_lists_commands(self, runner: CliRunner, vocab_file):
        result = runner.invoke(
            cli, ["triggers", "--category", "command", "--vocab", str(vocab_file)]
        )
        assert result.exit_code == 0
        assert "குதித்தல்" in result.output
        assert result.output.strip().endswith("2 triggers")

    def test_unknown_category_rejected(self, runner: CliRunner):
        result = runner.invoke(cli, ["triggers", "--category", "emoji"])
        assert result.exit_code == 2


# ---------------------------------------------------------------------------
# listen / serve
# ---------------------------------------------------------------------------


class TestListenCommand:
    def test_unavailable_recognizer_exits(self, runner: CliRunner):
        with patch(
            "pommai.cli._listen_forever",
            AsyncMock(side_effect=InitializationError("no microphone")),
        ):
            result = runner.invoke(cli, ["listen"])
        assert result.exit_code == 1
        assert "Speech recognition unavailable: no microphone" in result.output


class TestServeCommand:
    @pytest.mark.parametrize("port", ["80", "70000"])
    def test_rejects_out_of_range_port(self, runner: CliRunner, port: str):
        result = runner.invoke(cli, ["serve", "--port", port])
        assert result.exit_code == 2
        assert "Port must be between" in result.output


# ---------------------------------------------------------------------------
# status
# ---------------------------------------------------------------------------


class TestStatusCommand:
    def test_healthy_server(self, runner: CliRunner):
        response = MagicMock()
        response.json.return_value = {
            "version": "0.1.0",
            "session_status": "listening",
            "desired_listening": True,
            "init_error": None,
        }
        with patch("pommai.cli.httpx.get", return_value=response) as mock_get:
            result = runner.invoke(cli, ["status", "--port", "7866"])
        assert result.exit_code == 0
        assert "Server is healthy." in result.output
        assert "listening" in result.output
        mock_get.assert_called_once_with("http://127.0.0.1:7866/health", timeout=2.0)

    def test_reports_init_error(self, runner: CliRunner):
        response = MagicMock()
        response.json.return_value = {"session_status": "idle", "init_error": "denied"}
        with patch("pommai.cli.httpx.get", return_value=response):
            result = runner.invoke(cli, ["status"])
        assert "Recognizer: denied" in result.output

    def test_no_server(self, runner: CliRunner):
        with patch("pommai.cli.httpx.get", side_effect=httpx.ConnectError("refused")):
            result = runner.invoke(cli, ["status", "--port", "7866"])
        assert result.exit_code == 1
        assert "No Pommai server responding on port 7866" in result.output
