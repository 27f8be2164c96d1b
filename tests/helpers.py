"""Shared timestamps and mtime helpers for tests."""

import os
from pathlib import Path

# Fixed timestamps so comparisons never depend on filesystem clock granularity
T0 = 1_600_000_000_000_000_000
T1 = T0 + 10_000_000_000
T2 = T1 + 10_000_000_000


def set_mtime(path: Path, mtime_ns: int) -> None:
    """Set mtime (and atime) of a file in nanoseconds."""
    os.utime(path, ns=(mtime_ns, mtime_ns))


def mtime(path: Path) -> int:
    """Get mtime of a file in nanoseconds."""
    return path.stat().st_mtime_ns
