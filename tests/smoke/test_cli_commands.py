"""
Smoke Tests for CLI Commands.

These tests verify that CLI commands run without errors and produce output.
They don't validate correctness deeply - just that commands work against a
throwaway database.

Usage:
    pytest tests/smoke/test_cli_commands.py -v
    pytest tests/smoke/test_cli_commands.py -v -m smoke
"""

import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

from src.delivery.state_store import StateStore
from src.game.models import KidProgress
from src.game.scheduler import ReviewScheduler
from src.game.types import GameDomain

# Mark all tests in this module as smoke tests
pytestmark = pytest.mark.smoke

# Project root
PROJECT_ROOT = Path(__file__).parent.parent.parent


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "state.db"


@pytest.fixture
def run_cli(db_path):
    """
    Run a CLI command and return exit code, stdout, stderr.

    The command runs as 'python -m src.delivery <command>' with the
    database pointed at a temporary file.
    """
    env = {
        **os.environ,
        "KIDQUEST_DATABASE_PATH": str(db_path),
        "KIDQUEST_SYNC_ENABLED": "false",
        "KIDQUEST_LOG_LEVEL": "WARNING",
        "COLUMNS": "200",
        "PYTHONIOENCODING": "utf-8",
    }

    def _run(command: str, input_text: str | None = None, timeout: int = 30) -> tuple[int, str, str]:
        result = subprocess.run(
            [sys.executable, "-m", "src.delivery", *command.split()],
            cwd=PROJECT_ROOT,
            env=env,
            input=input_text,
            capture_output=True,
            text=True,
            encoding="utf-8",
            timeout=timeout,
        )
        return result.returncode, result.stdout, result.stderr

    return _run


@pytest.fixture
def completed_level(db_path):
    """Store a fresh completion of mathematics level 1 for kid-1."""
    store = StateStore(db_path)
    scheduler = ReviewScheduler()
    store.save_completion("kid-1", scheduler.create_completion(GameDomain.MATHEMATICS, 1, 4))
    store.save_progress(
        KidProgress(kid_id="kid-1", completed_levels={"mathematics-level-1": 4}, sessions_completed=1)
    )
    store.close()


class TestCLIHelp:
    """Test that help commands work."""

    def test_main_help(self, run_cli):
        """Main help should display without errors."""
        code, stdout, stderr = run_cli("--help")

        assert code == 0, f"Help failed: {stderr}"
        assert "kidquest" in stdout.lower()
        assert "Commands" in stdout

    @pytest.mark.parametrize("command", ["play", "preview", "status", "lock", "reset", "export", "clear"])
    def test_command_help(self, run_cli, command):
        code, stdout, stderr = run_cli(f"{command} --help")

        assert code == 0, f"{command} help failed: {stderr}"


class TestCLIPreview:
    """Test preview command."""

    def test_preview_math(self, run_cli):
        code, stdout, stderr = run_cli("preview mathematics 1 --seed 3")

        assert code == 0, f"Preview failed: {stderr}"
        assert "Math Level 1" in stdout
        assert "150s total" in stdout

    def test_preview_is_deterministic_with_seed(self, run_cli):
        first = run_cli("preview logical 7 --seed 11")
        second = run_cli("preview logical 7 --seed 11")

        assert first[0] == 0
        assert first[1] == second[1]

    @pytest.mark.parametrize("locale", ["en", "hi", "zh"])
    def test_preview_language_locales(self, run_cli, locale):
        code, stdout, stderr = run_cli(f"preview language 12 --locale {locale} --seed 1")

        assert code == 0, f"Preview {locale} failed: {stderr}"
        assert "Language Level 12" in stdout

    def test_preview_rejects_level_zero(self, run_cli):
        code, _, _ = run_cli("preview mathematics 0")
        assert code != 0


class TestCLIPlay:
    """Test play command with scripted input."""

    def test_play_skipping_everything(self, run_cli):
        code, stdout, stderr = run_cli("play mathematics 1 --seed 5", input_text="?\n" * 5)

        assert code == 0, f"Play failed: {stderr}"
        assert "Question 5/5" in stdout
        assert "Keep practicing" in stdout

    def test_play_locked_level(self, run_cli, completed_level):
        code, stdout, _ = run_cli("play mathematics 1")

        assert code == 1
        assert "locked" in stdout

    def test_play_level_not_unlocked(self, run_cli):
        code, stdout, _ = run_cli("play logical 2")

        assert code == 1
        assert "not unlocked" in stdout


class TestCLIProgress:
    """Test status, lock, reset, export and clear."""

    def test_status_empty(self, run_cli):
        code, stdout, stderr = run_cli("status")

        assert code == 0, f"Status failed: {stderr}"
        assert "Progress for kid-1" in stdout
        assert "mathematics" in stdout

    def test_status_shows_completions(self, run_cli, completed_level):
        code, stdout, _ = run_cli("status")

        assert code == 0
        assert "mathematics-level-1" in stdout

    def test_lock_ready(self, run_cli):
        code, stdout, _ = run_cli("lock language 1")

        assert code == 0
        assert "ready to play" in stdout

    def test_lock_cooling_down(self, run_cli, completed_level):
        code, stdout, _ = run_cli("lock mathematics 1")

        assert code == 0
        assert "is locked for" in stdout

    def test_reset_unlocks(self, run_cli, completed_level):
        code, stdout, _ = run_cli("reset mathematics 1 --yes")
        assert code == 0
        assert "is unlocked" in stdout

        code, stdout, _ = run_cli("lock mathematics 1")
        assert "ready to play" in stdout

    def test_reset_never_completed(self, run_cli):
        code, stdout, _ = run_cli("reset logical 3 --yes")

        assert code == 0
        assert "never been completed" in stdout

    def test_export_json(self, run_cli, completed_level):
        code, stdout, stderr = run_cli("export")

        assert code == 0, f"Export failed: {stderr}"
        data = json.loads(stdout)
        assert data["kid_id"] == "kid-1"
        assert data["completions"][0]["level_number"] == 1

    def test_export_to_file(self, run_cli, tmp_path):
        target = tmp_path / "export.json"

        code, _, _ = run_cli(f"export --kid kid-7 --output {target}")

        assert code == 0
        assert json.loads(target.read_text(encoding="utf-8"))["kid_id"] == "kid-7"

    def test_clear(self, run_cli, completed_level):
        code, stdout, _ = run_cli("clear --yes")
        assert code == 0
        assert "Removed 2 records" in stdout

        code, stdout, _ = run_cli("lock mathematics 1")
        assert "ready to play" in stdout
