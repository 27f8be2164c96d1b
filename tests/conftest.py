"""Shared test fixtures and utilities."""

import pytest

from tests.helpers import T0, set_mtime


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep developer environment variables from leaking into tests."""
    monkeypatch.delenv("DEBUG", raising=False)
    monkeypatch.delenv("MTIME_REWIND_LOG_LEVEL", raising=False)


@pytest.fixture
def root(tmp_path):
    """Resolved root directory for a project tree."""
    path = tmp_path / "project"
    path.mkdir()
    return path.resolve()


@pytest.fixture
def write_file(root):
    """Factory fixture to write files relative to the root with a fixed mtime."""
    def _write(path: str, content: str = "test content", mtime_ns: int = T0):
        file_path = root / path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content)
        set_mtime(file_path, mtime_ns)
        return file_path
    return _write


@pytest.fixture
def test_files(write_file):
    """Create a small tree: two files at the top and one in a subdirectory."""
    return {
        "a": write_file("a", "a"),
        "b": write_file("b", "b"),
        "src/main.py": write_file("src/main.py", "print('hello')"),
    }
