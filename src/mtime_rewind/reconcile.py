"""Reconciliation: rewind mtimes of files touched without being edited."""

import logging
import os
from pathlib import Path
from typing import List, Optional, Union

from .config import RewindConfig, load_config
from .core import ChangeType, FileChange, RewindPlan, RewindSummary, Snapshot
from .errors import RewindApplyError, StateNotFoundError
from .snapshot import compute_snapshot
from .state import load_state, save_state
from .utils import format_mtime, short_digest

logger = logging.getLogger(__name__)


def classify_changes(live: Snapshot, stored: Snapshot) -> List[FileChange]:
    """
    Compare every stored entry against the live snapshot.

    Args:
        live: Snapshot computed on this run.
        stored: Snapshot loaded from the state file.

    Returns:
        One FileChange per stored path. Files only present in the live
        snapshot are not classified.

    Note:
        Equal mtimes count as UNCHANGED; only a strict advance is checked
        against the content hash.
    """
    changes = []
    for path, stored_entry in stored.entries.items():
        live_entry = live.entries.get(path)

        if live_entry is None:
            change_type = ChangeType.DELETED
        else:
            logger.debug(
                "%s: mtime %d hash %s (live) vs mtime %d hash %s (stored)",
                path, live_entry.mtime_ns, short_digest(live_entry.hash),
                stored_entry.mtime_ns, short_digest(stored_entry.hash),
            )
            if live_entry.mtime_ns <= stored_entry.mtime_ns:
                change_type = ChangeType.UNCHANGED
            elif live_entry.hash != stored_entry.hash:
                change_type = ChangeType.MODIFIED
            else:
                change_type = ChangeType.TOUCHED

        changes.append(FileChange(
            path=path,
            change_type=change_type,
            stored=stored_entry,
            live=live_entry,
        ))
    return changes


def plan_rewind(live: Snapshot, stored: Snapshot) -> RewindPlan:
    """Classify differences between the live and stored snapshots."""
    return RewindPlan(live=live, stored=stored, changes=classify_changes(live, stored))


def set_mtime(path: Path, mtime_ns: int) -> None:
    """Set a file's mtime, keeping its current access time.

    Raises:
        RewindApplyError: If the file cannot be stat-ed or updated
    """
    try:
        atime_ns = os.stat(path).st_atime_ns
        os.utime(path, ns=(atime_ns, mtime_ns))
    except OSError as e:
        raise RewindApplyError(path, e.strerror or str(e)) from e


def apply_rewind(plan: RewindPlan, dry_run: bool = False) -> List[FileChange]:
    """Rewind every touched file of the plan back to its stored mtime.

    Stops at the first failure; rewinds already applied stay in place.

    Returns:
        The touched changes, in plan order. Under dry run nothing is written
        and the list holds what would have been rewound.
    """
    for change in plan.modified:
        logger.info("%s was actually modified", change.path)

    rewound = []
    for change in plan.touched:
        logger.info(
            "Rewinding %s from %s to %s as its contents did not change",
            change.path, format_mtime(change.live.mtime_ns), format_mtime(change.stored.mtime_ns),
        )
        if dry_run:
            logger.warning("Dry mode, not applying changes")
        else:
            set_mtime(change.path, change.stored.mtime_ns)
        rewound.append(change)
    return rewound


def reconcile(
    root: Union[str, Path],
    dry_run: bool = False,
    config: Optional[RewindConfig] = None,
) -> RewindSummary:
    """Rewind mtimes under ``root`` for files whose content did not change.

    On the first run (no state file) the live snapshot is stored as the
    baseline and nothing is rewound. Under dry run neither mtimes nor the
    state file are written. This includes the first run, which
    deliberately differs from the upstream Rust mtime-rewind: that tool saves
    the baseline even with --dry, while a dry first run here records nothing.

    Args:
        root: Root directory; resolved to an absolute path
        dry_run: Only report what would be rewound
        config: Settings; loaded from the root when omitted

    Returns:
        RewindSummary describing the run

    Raises:
        RewindError: Any failure aborts the run
    """
    root = Path(root).resolve()
    if config is None:
        config = load_config(root)

    live = compute_snapshot(root, chunk_size=config.chunk_size)
    summary = RewindSummary(root=root, dry_run=dry_run, hashed=len(live))

    try:
        stored = load_state(root)
    except StateNotFoundError:
        summary.first_run = True
        if dry_run:
            logger.warning("Dry mode, not writing the initial state")
        else:
            logger.info("Writing hashes for the first time...")
            save_state(live)
            summary.state_saved = True
        logger.info("Done")
        return summary

    logger.info("Restoring modification times for unchanged files...")
    plan = plan_rewind(live, stored)
    summary.rewound = apply_rewind(plan, dry_run=dry_run)
    summary.modified = len(plan.modified)
    summary.deleted = len(plan.deleted)

    if dry_run:
        logger.info("%d files would be rewound", summary.rewound_count)
    else:
        logger.info("%d files rewound", summary.rewound_count)
        logger.info("Saving the new state...")
        save_state(plan.merged_snapshot(summary.rewound))
        summary.state_saved = True

    logger.info("Done")
    return summary
