"""
Smoke Tests for CLI Commands.

These tests verify that CLI commands run without errors and produce output.
They don't validate correctness deeply - just that commands work.

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

# Mark all tests in this module as smoke tests
pytestmark = pytest.mark.smoke

# Project root
PROJECT_ROOT = Path(__file__).parent.parent.parent


def run_cli_command(
    *args: str, timeout: int = 30, env: dict[str, str] | None = None
) -> tuple[int, str, str]:
    """
    Run a CLI command and return exit code, stdout, stderr.

    Args:
        args: Arguments passed after 'python -m src.cli.planner_cli'
        timeout: Maximum time to wait
        env: Extra environment variables

    Returns:
        Tuple of (exit_code, stdout, stderr)
    """
    result = subprocess.run(
        [sys.executable, "-m", "src.cli.planner_cli", *args],
        cwd=PROJECT_ROOT,
        capture_output=True,
        text=True,
        timeout=timeout,
        env={**os.environ, **(env or {})},
    )

    return result.returncode, result.stdout, result.stderr


@pytest.fixture
def snapshot(tmp_path):
    """Write a progress snapshot file and return its path."""

    def _write(data) -> Path:
        path = tmp_path / "snapshot.json"
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def progress_record():
    return {
        "id": "progress-001",
        "user_id": "user-001",
        "course_id": "course-b2",
        "overall_progress": 0.55,
        "component_progress": {"reading": 0.4, "writing": 0.3, "speaking": 0.85},
        "weaknesses": [{"component": "reading", "score": 0.4}, {"component": "writing", "score": 0.3}],
        "strengths": [{"component": "speaking", "score": 0.85}],
    }


class TestCLIHelp:
    """Test that help commands work."""

    def test_main_help(self):
        """Main help should display without errors."""
        code, stdout, stderr = run_cli_command("--help")

        assert code == 0, f"Help failed: {stderr}"
        assert "plan" in stdout
        assert "sync" in stdout

    def test_plan_help(self):
        code, stdout, stderr = run_cli_command("plan", "--help")

        assert code == 0, f"Plan help failed: {stderr}"
        assert "--seed" in stdout


class TestCLIPlan:
    """Test the plan command on local snapshots."""

    def test_plan_renders_tables(self, snapshot, progress_record):
        code, stdout, stderr = run_cli_command("plan", str(snapshot(progress_record)), "--seed", "7")

        assert code == 0, f"Plan failed: {stderr}"
        assert "Study Plan" in stdout
        assert "Milestones" in stdout
        assert "Traceback" not in stderr

    def test_plan_json_output(self, snapshot, progress_record):
        path = snapshot(
            {
                "progress": progress_record,
                "exam_sessions": [{"id": "exam-001", "component": "reading", "score": 0.6}],
                "config": {"weekly_commitment_hours": 10, "study_intensity": "intensive"},
            }
        )

        code, stdout, stderr = run_cli_command("plan", str(path), "--json", "--seed", "7")

        assert code == 0, f"Plan failed: {stderr}"
        data = json.loads(stdout)
        assert data["user_id"] == "user-001"
        assert data["plan_name"].startswith("Intensive Study Plan")
        assert data["study_sessions"]

    def test_seed_makes_output_reproducible(self, snapshot, progress_record):
        path = str(snapshot(progress_record))

        first = run_cli_command("plan", path, "--json", "--seed", "3")[1]
        second = run_cli_command("plan", path, "--json", "--seed", "3")[1]

        assert json.loads(first)["study_sessions"][0]["session_type"] == (
            json.loads(second)["study_sessions"][0]["session_type"]
        )

    def test_invalid_json_fails_gracefully(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        code, stdout, stderr = run_cli_command("plan", str(path))

        assert code == 1
        assert "Invalid snapshot" in stdout
        assert "Traceback" not in stderr

    def test_invalid_config_fails_gracefully(self, snapshot, progress_record):
        path = snapshot({"progress": progress_record, "config": {"weekly_commitment_hours": 0}})

        code, stdout, stderr = run_cli_command("plan", str(path))

        assert code == 1
        assert "Traceback" not in stderr


class TestCLISync:
    """Test the sync command without a running progress service."""

    def test_unreachable_service_fails_gracefully(self):
        code, stdout, stderr = run_cli_command(
            "sync",
            "user-001",
            "course-b2",
            env={"PROGRESS_API_URL": "http://127.0.0.1:9", "PROGRESS_API_TIMEOUT": "2"},
        )

        assert code == 1
        assert "Sync failed" in stdout
        assert "Traceback" not in stderr


class TestCLIPerformance:
    """Test CLI performance."""

    def test_help_fast(self):
        """Help should complete very quickly."""
        import time

        start = time.time()

        run_cli_command("--help", timeout=5)

        elapsed = time.time() - start

        assert elapsed < 3, f"Help took {elapsed:.1f}s, expected < 3s"
