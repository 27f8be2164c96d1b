"""State store: persist a snapshot to the hidden state file inside its root.

Binary layout (big-endian):

    magic     4 bytes   b"MTRW"
    version   u16
    root      u32 length + bytes
    count     u32
    entries   count x (path: u32 length + bytes,
                       hash: u16 length + bytes,
                       mtime_ns: i64)

Paths are stored with os.fsencode so names that are not valid UTF-8 survive
a round trip. Entries are written sorted by path, so an unchanged snapshot
always produces identical bytes. There is no migration: any other version
is rejected.
"""

import logging
import os
import struct
import tempfile
from pathlib import Path
from typing import List

from .constants import STATE_FILE, STATE_MAGIC, STATE_VERSION
from .core import FileEntry, Snapshot
from .errors import (
    RootMismatchError,
    StateDecodeError,
    StateIOError,
    StateNotFoundError,
)

logger = logging.getLogger(__name__)

_HEADER = struct.Struct(">4sH")
_U16 = struct.Struct(">H")
_U32 = struct.Struct(">I")
_I64 = struct.Struct(">q")


def state_path(root: Path) -> Path:
    """Get path to the state file of a root."""
    return root / STATE_FILE


# ============= Encoding =============

def _put_blob(parts: List[bytes], length: struct.Struct, data: bytes) -> None:
    parts.append(length.pack(len(data)))
    parts.append(data)


def encode_snapshot(snapshot: Snapshot) -> bytes:
    """Serialize a snapshot to the state file format."""
    parts = [_HEADER.pack(STATE_MAGIC, STATE_VERSION)]
    _put_blob(parts, _U32, os.fsencode(snapshot.root))
    parts.append(_U32.pack(len(snapshot.entries)))
    for path in sorted(snapshot.entries):
        entry = snapshot.entries[path]
        _put_blob(parts, _U32, os.fsencode(path))
        _put_blob(parts, _U16, entry.hash)
        parts.append(_I64.pack(entry.mtime_ns))
    return b"".join(parts)


class _Reader:
    """Cursor over state file bytes that fails on truncation."""

    def __init__(self, data: bytes):
        self.data = data
        self.offset = 0

    def take(self, size: int) -> bytes:
        end = self.offset + size
        if end > len(self.data):
            raise StateDecodeError(
                f"State file is truncated (needed {size} bytes at offset {self.offset})"
            )
        chunk = self.data[self.offset:end]
        self.offset = end
        return chunk

    def unpack(self, fmt: struct.Struct) -> int:
        return fmt.unpack(self.take(fmt.size))[0]

    def blob(self, length: struct.Struct) -> bytes:
        return self.take(self.unpack(length))

    @property
    def exhausted(self) -> bool:
        return self.offset == len(self.data)


def decode_snapshot(data: bytes) -> Snapshot:
    """Deserialize a snapshot from the state file format.

    Raises:
        StateDecodeError: On bad magic, unsupported version, truncated data,
            duplicate paths or trailing bytes
    """
    reader = _Reader(data)
    magic, version = _HEADER.unpack(reader.take(_HEADER.size))
    if magic != STATE_MAGIC:
        raise StateDecodeError("Not an mtime-rewind state file (bad magic)")
    if version != STATE_VERSION:
        raise StateDecodeError(
            f"Unsupported state file version {version} (expected {STATE_VERSION}); "
            f"delete it to record a new baseline"
        )

    root = Path(os.fsdecode(reader.blob(_U32)))
    count = reader.unpack(_U32)
    entries = {}
    for _ in range(count):
        path = Path(os.fsdecode(reader.blob(_U32)))
        digest = reader.blob(_U16)
        mtime_ns = reader.unpack(_I64)
        if path in entries:
            raise StateDecodeError(f"Duplicate entry for {path} in state file")
        entries[path] = FileEntry(hash=digest, mtime_ns=mtime_ns)

    if not reader.exhausted:
        raise StateDecodeError(
            f"Unexpected {len(data) - reader.offset} trailing bytes in state file"
        )
    return Snapshot(root=root, entries=entries)


# ============= File I/O =============

def _atomic_write_bytes(path: Path, data: bytes) -> None:
    """Atomically write bytes to file.

    Writes to a temp file in the same directory, fsyncs it, then renames it
    over the target so readers never see a half-written state file.
    """
    with tempfile.NamedTemporaryFile(
        mode="wb",
        delete=False,
        dir=path.parent,
        prefix=f"{path.name}.tmp-",
        suffix=""
    ) as f:
        tmp = Path(f.name)
        try:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        except BaseException:
            f.close()
            tmp.unlink(missing_ok=True)
            raise

    try:
        os.replace(tmp, path)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise


def load_state(root: Path) -> Snapshot:
    """Load the stored snapshot of a root.

    Raises:
        StateNotFoundError: If the root has no state file yet
        StateIOError: If the state file cannot be read
        StateDecodeError: If the state file is malformed
        RootMismatchError: If the state file was recorded for another root
    """
    path = state_path(root)
    logger.info("Loading cached state...")
    try:
        data = path.read_bytes()
    except FileNotFoundError as e:
        raise StateNotFoundError(path) from e
    except OSError as e:
        raise StateIOError(path, e.strerror or str(e)) from e

    stored = decode_snapshot(data)
    if stored.root != root:
        raise RootMismatchError(stored.root, root)
    logger.info("Loaded hashes for %d files", len(stored))
    return stored


def save_state(snapshot: Snapshot) -> Path:
    """Write a snapshot to its root's state file, replacing any previous one.

    Raises:
        StateIOError: If the state file cannot be written
    """
    path = state_path(snapshot.root)
    try:
        _atomic_write_bytes(path, encode_snapshot(snapshot))
    except OSError as e:
        raise StateIOError(path, e.strerror or str(e)) from e
    logger.info("Wrote %s", path)
    return path
