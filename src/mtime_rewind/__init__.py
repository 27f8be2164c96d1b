"""Rewind mtimes of files whose content did not change since the last run."""

from .constants import VERSION as __version__
from .reconcile import reconcile

__all__ = ["reconcile", "__version__"]
