"""Core data models for mtime-rewind.

A Snapshot records a (content digest, mtime) pair for every regular file
under a root. Each run computes a live snapshot, compares it against the
stored one, and rewinds the mtime of files that were touched without being
edited:

    stored   live      content     outcome
    ------   -------   ---------   ---------------------------
    T0       <= T0     any         UNCHANGED, nothing to do
    T0       > T0      differs     MODIFIED, legitimate advance
    T0       > T0      equal       TOUCHED, rewind to T0
    T0       missing   -           DELETED, dropped from state
"""

from enum import Enum
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from pydantic import BaseModel, Field


# ============= Snapshot =============

class FileEntry(BaseModel):
    """Recorded state of a single file."""

    hash: bytes  # raw SHA256 of the full content
    mtime_ns: int  # st_mtime_ns captured right after hashing


class Snapshot(BaseModel):
    """All entries for a root at one point in time, keyed by absolute path."""

    root: Path
    entries: Dict[Path, FileEntry] = Field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.entries)

    def merged(self, overrides: Mapping[Path, FileEntry]) -> "Snapshot":
        """Return a copy with ``overrides`` replacing the matching entries.

        Neither this snapshot nor ``overrides`` is modified.
        """
        entries = dict(self.entries)
        entries.update(overrides)
        return Snapshot(root=self.root, entries=entries)


# ============= Change Detection =============

class ChangeType(str, Enum):
    """Outcome of comparing a stored entry against the live one."""

    UNCHANGED = "unchanged"
    MODIFIED = "modified"
    TOUCHED = "touched"
    DELETED = "deleted"


class FileChange(BaseModel):
    """Comparison result for one path of the stored snapshot."""

    path: Path
    change_type: ChangeType
    stored: FileEntry
    live: Optional[FileEntry] = None


class RewindPlan(BaseModel):
    """Classified differences between the live and stored snapshots."""

    live: Snapshot
    stored: Snapshot
    changes: List[FileChange] = Field(default_factory=list)

    def _of_type(self, change_type: ChangeType) -> List[FileChange]:
        return [c for c in self.changes if c.change_type == change_type]

    @property
    def touched(self) -> List[FileChange]:
        """Files whose mtime advanced while the content stayed the same."""
        return self._of_type(ChangeType.TOUCHED)

    @property
    def modified(self) -> List[FileChange]:
        return self._of_type(ChangeType.MODIFIED)

    @property
    def deleted(self) -> List[FileChange]:
        return self._of_type(ChangeType.DELETED)

    def merged_snapshot(self, rewound: List[FileChange]) -> Snapshot:
        """Live snapshot with the stored entry put back for every rewound file."""
        return self.live.merged({c.path: c.stored for c in rewound})


# ============= Results =============

class RewindSummary(BaseModel):
    """Result of a reconcile run."""

    root: Path
    dry_run: bool = False
    first_run: bool = False
    hashed: int = 0  # files in the live snapshot
    rewound: List[FileChange] = Field(default_factory=list)  # would-be rewinds under dry run
    modified: int = 0
    deleted: int = 0
    state_saved: bool = False

    @property
    def applied(self) -> bool:
        """Whether rewinds were written to disk."""
        return not self.dry_run

    @property
    def rewound_count(self) -> int:
        return len(self.rewound)

    def summary(self) -> str:
        """Get human-readable summary."""
        if self.first_run:
            if self.state_saved:
                return f"✓ Recorded initial state for {self.hashed} files"
            return f"No state recorded yet for {self.hashed} files (dry run)"
        if self.dry_run:
            parts = [f"{self.rewound_count} files would be rewound (dry run)"]
        else:
            parts = [f"✓ {self.rewound_count} files rewound"]
        if self.modified:
            parts.append(f"{self.modified} modified")
        if self.deleted:
            parts.append(f"{self.deleted} deleted")
        return ", ".join(parts)
