"""Integration tests for the mtime-rewind command."""

import logging
import subprocess
import sys

import pytest
from typer.testing import CliRunner

from mtime_rewind.cli import app
from mtime_rewind.constants import CONFIG_FILE, STATE_FILE

from tests.helpers import T0, T1, mtime, set_mtime


# ========== Fixtures ==========

@pytest.fixture
def runner():
    """Create a CliRunner for in-process testing."""
    return CliRunner()


@pytest.fixture(autouse=True)
def restore_logging():
    """setup_logging replaces root handlers; put them back after each test."""
    root_logger = logging.getLogger()
    handlers = root_logger.handlers[:]
    level = root_logger.level
    yield
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


# ========== Tests ==========

class TestRewindCommand:
    """Test the CLI end to end against a real directory."""

    def test_first_run(self, runner, root, test_files):
        result = runner.invoke(app, [str(root)])

        assert result.exit_code == 0, result.output
        assert "Recorded initial state for 3 files" in result.output
        assert (root / STATE_FILE).exists()

    def test_touch_then_rewind(self, runner, root, test_files):
        a, b = test_files["a"], test_files["b"]
        assert runner.invoke(app, [str(root)]).exit_code == 0

        set_mtime(a, T1)
        b.write_text("b2")
        set_mtime(b, T1)
        result = runner.invoke(app, [str(root)])

        assert result.exit_code == 0, result.output
        assert "1 files rewound" in result.output
        assert mtime(a) == T0
        assert mtime(b) == T1

    def test_dry_run(self, runner, root, test_files):
        a = test_files["a"]
        runner.invoke(app, [str(root)])
        state_before = (root / STATE_FILE).read_bytes()
        set_mtime(a, T1)

        result = runner.invoke(app, [str(root), "--dry"])

        assert result.exit_code == 0, result.output
        assert "1 files would be rewound (dry run)" in result.output
        assert mtime(a) == T1
        assert (root / STATE_FILE).read_bytes() == state_before

    def test_nothing_to_do(self, runner, root, test_files):
        runner.invoke(app, [str(root)])

        result = runner.invoke(app, [str(root), "--verbose"])

        assert result.exit_code == 0, result.output
        assert "0 files rewound" in result.output

    def test_missing_root(self, runner, tmp_path):
        result = runner.invoke(app, [str(tmp_path / "missing")])

        assert result.exit_code != 0

    def test_root_must_be_directory(self, runner, tmp_path):
        f = tmp_path / "file"
        f.write_text("x")

        result = runner.invoke(app, [str(f)])

        assert result.exit_code != 0

    def test_corrupt_state_fails(self, runner, root, test_files):
        (root / STATE_FILE).write_bytes(b"garbage")

        result = runner.invoke(app, [str(root)])

        assert result.exit_code == 1
        assert "✗" in result.output

    def test_bad_config_fails(self, runner, root, test_files):
        (root / CONFIG_FILE).write_text("chunk_size: -1\n")

        result = runner.invoke(app, [str(root)])

        assert result.exit_code == 1
        assert "chunk_size" in result.output
        assert not (root / STATE_FILE).exists()


def test_module_entry_point(root, test_files):
    """python -m mtime_rewind runs the same command."""
    result = subprocess.run(
        [sys.executable, "-m", "mtime_rewind", str(root), "--dry"],
        capture_output=True,
        text=True,
    )

    assert result.returncode == 0, result.stderr
    assert not (root / STATE_FILE).exists()
