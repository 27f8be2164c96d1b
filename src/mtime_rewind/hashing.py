"""Content hashing for snapshot entries.

Files are hashed byte-for-byte; any change to the content changes the digest.
"""

from pathlib import Path
import hashlib

from .constants import DEFAULT_CHUNK_SIZE


def compute_file_digest(path: Path, chunk_size: int = DEFAULT_CHUNK_SIZE) -> bytes:
    """Compute the SHA256 digest of file contents.

    The file is streamed in chunks rather than loaded into memory at once.
    OSError from opening or reading propagates; a partial digest is never
    returned.

    Args:
        path: Path to file to hash
        chunk_size: Bytes read per chunk

    Returns:
        Raw 32-byte SHA256 digest
    """
    sha256 = hashlib.sha256()
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(chunk_size), b""):
            sha256.update(chunk)
    return sha256.digest()


__all__ = ["compute_file_digest"]
