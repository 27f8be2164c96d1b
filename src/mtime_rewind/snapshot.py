"""Snapshot computation: walk a root and hash every regular file.

This is the expensive operation - every file under the root is rehashed on
every run.
"""

import logging
import os
import stat
from pathlib import Path
from typing import Iterator

from .constants import CACHEDIR_TAG, DEFAULT_CHUNK_SIZE, HIDDEN_PREFIX
from .core import FileEntry, Snapshot
from .errors import ScanError
from .hashing import compute_file_digest

logger = logging.getLogger(__name__)


def is_hidden(name: str) -> bool:
    """Check if a directory entry name is hidden."""
    return name.startswith(HIDDEN_PREFIX)


def is_cache_dir(path: Path) -> bool:
    """Check if a directory is marked with a CACHEDIR.TAG file.

    A marker that cannot be stat-ed (e.g. the directory is not searchable)
    counts as absent; the walk then reports the directory itself.
    """
    return os.path.exists(path / CACHEDIR_TAG)


def should_traverse(path: Path) -> bool:
    """Check if a directory below the root should be descended into."""
    return not is_hidden(path.name) and not is_cache_dir(path)


def _walk_error(err: OSError) -> None:
    # Unlistable directories are skipped, not fatal
    logger.warning("Skipping directory %s: %s", err.filename, err.strerror or err)


def iter_files(root: Path) -> Iterator[Path]:
    """Yield every regular file strictly inside ``root``.

    Hidden entries and directories holding a cache marker are pruned
    together with their whole subtree. Symlinks are not followed and are
    never yielded. The root itself is never pruned.

    Raises:
        ScanError: If a candidate file cannot be stat-ed
    """
    for dirpath, dirnames, filenames in os.walk(root, onerror=_walk_error):
        current = Path(dirpath)
        # Prune in place so os.walk does not descend
        dirnames[:] = sorted(d for d in dirnames if should_traverse(current / d))

        for name in sorted(filenames):
            if is_hidden(name):
                continue
            path = current / name
            try:
                mode = path.lstat().st_mode
            except OSError as e:
                raise ScanError(path, e.strerror or str(e)) from e
            if stat.S_ISREG(mode):
                yield path


def hash_entry(path: Path, chunk_size: int = DEFAULT_CHUNK_SIZE) -> FileEntry:
    """Hash a file and capture its mtime right after reading it.

    Raises:
        ScanError: If the file cannot be opened, read or stat-ed
    """
    try:
        digest = compute_file_digest(path, chunk_size)
        mtime_ns = path.stat().st_mtime_ns
    except OSError as e:
        raise ScanError(path, e.strerror or str(e)) from e
    return FileEntry(hash=digest, mtime_ns=mtime_ns)


def compute_snapshot(root: Path, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Snapshot:
    """Compute the live snapshot of ``root``.

    Args:
        root: Absolute root directory
        chunk_size: Bytes read per hashing chunk

    Returns:
        Snapshot with one entry per regular file under the root

    Raises:
        ScanError: On the first file that cannot be hashed; no partial
            snapshot is returned
    """
    logger.info("Computing hashes...")
    entries = {}
    for path in iter_files(root):
        entries[path] = hash_entry(path, chunk_size)
        logger.debug("Hashed %s", path)
    logger.info("Computed hashes for %d files", len(entries))
    return Snapshot(root=root, entries=entries)
