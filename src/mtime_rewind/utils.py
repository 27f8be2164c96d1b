"""Display helpers for mtime-rewind."""

from datetime import datetime
from pathlib import Path


def short_digest(digest: bytes) -> str:
    """First 12 hex characters of a digest, for log lines."""
    return digest.hex()[:12]


def format_mtime(mtime_ns: int) -> str:
    """Format a nanosecond timestamp as local time.

    Examples:
        1724640677317839000 -> "2024-08-26 02:51:17.317839"
    """
    seconds, nanos = divmod(mtime_ns, 1_000_000_000)
    dt = datetime.fromtimestamp(seconds)
    return f"{dt:%Y-%m-%d %H:%M:%S}.{nanos // 1000:06d}"


def display_path(path: Path, root: Path) -> str:
    """Show a path relative to the root when it lies inside it."""
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return str(path)
