"""CLI integration tests."""

import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).parent.parent.parent


def run_cli(*args):
    return subprocess.run(
        [sys.executable, "-m", "moviehub.cli", *args],
        capture_output=True,
        text=True,
        encoding="utf-8",
        env={**os.environ, "PYTHONIOENCODING": "utf-8"},
        cwd=PROJECT_ROOT,
        timeout=60,
    )


@pytest.mark.integration
def test_cli_help():
    """Test CLI help command."""
    result = run_cli("--help")

    assert result.returncode == 0
    assert "MovieHub" in result.stdout
    for command in ("init", "serve", "search", "details", "ask", "status", "clear-cache"):
        assert command in result.stdout


@pytest.mark.integration
def test_cli_init_command(tmp_path):
    """Test CLI init command."""
    config_path = tmp_path / "test_config.yaml"

    result = run_cli("init", "--output", str(config_path))

    assert result.returncode == 0
    assert config_path.exists()

    content = config_path.read_text()
    assert "llm:" in content
    assert "tmdb:" in content
    assert "omdb:" in content


@pytest.mark.integration
def test_cli_status_command(temp_config_file):
    """Test CLI status command."""
    result = run_cli("--config", str(temp_config_file), "status")

    assert result.returncode == 0
    assert "MovieHub Status" in result.stdout
    assert "TMDb Configured" in result.stdout
    assert "Cache Backend: memory" in result.stdout
    assert "Cache Status" in result.stdout


@pytest.mark.integration
def test_cli_clear_cache(temp_config_file):
    result = run_cli("--config", str(temp_config_file), "clear-cache")

    assert result.returncode == 0
    assert json.loads(result.stdout) == {"removed": 0}


@pytest.mark.integration
def test_cli_details_unknown_id_fails(temp_config_file):
    """Test that domain errors exit non-zero with a message."""
    result = run_cli("--config", str(temp_config_file), "details", "netflix-1")

    assert result.returncode == 1
    assert "netflix-1" in result.stderr


@pytest.mark.integration
def test_cli_missing_config_file(tmp_path):
    result = run_cli("--config", str(tmp_path / "missing.yaml"), "status")

    assert result.returncode != 0
