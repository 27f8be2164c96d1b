"""Tests for hashing module."""

import hashlib

import pytest

from mtime_rewind.hashing import compute_file_digest


class TestFileHashing:
    """Test file-based hashing."""

    def test_digest_matches_sha256(self, tmp_path):
        """Digest should be the raw SHA256 of the content."""
        f = tmp_path / "test.txt"
        f.write_bytes(b"hello world")

        assert compute_file_digest(f) == hashlib.sha256(b"hello world").digest()
        assert len(compute_file_digest(f)) == 32

    def test_detects_changes(self, tmp_path):
        """Changing a single byte changes the digest."""
        f = tmp_path / "test.py"
        f.write_text("def foo():\n    return 42")
        hash1 = compute_file_digest(f)

        f.write_text("def foo():\n    return 43")
        hash2 = compute_file_digest(f)

        assert hash1 != hash2

    def test_chunk_size_does_not_change_digest(self, tmp_path):
        """Streaming in small chunks should give the same digest."""
        f = tmp_path / "data.bin"
        f.write_bytes(bytes(range(256)) * 100)

        assert compute_file_digest(f, chunk_size=7) == compute_file_digest(f)

    def test_empty_file(self, tmp_path):
        f = tmp_path / "empty"
        f.write_bytes(b"")

        assert compute_file_digest(f) == hashlib.sha256(b"").digest()

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            compute_file_digest(tmp_path / "missing")
