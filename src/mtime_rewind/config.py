"""Per-root configuration helpers."""

import os
from dataclasses import dataclass
from pathlib import Path

import yaml

from .constants import CONFIG_FILE, DEFAULT_CHUNK_SIZE
from .errors import ConfigError

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


@dataclass
class RewindConfig:
    """Settings controlling a reconcile run."""

    chunk_size: int = DEFAULT_CHUNK_SIZE
    log_level: str = "INFO"


def load_config(root: Path) -> RewindConfig:
    """Load configuration from <root>/.mtime-rewind.yaml if present.

    ``MTIME_REWIND_LOG_LEVEL`` overrides the configured log level and
    ``DEBUG`` (any non-empty value) forces debug logging.

    Raises:
        ConfigError: If the file cannot be parsed or holds invalid values
    """
    cfg_path = root / CONFIG_FILE
    data = {}
    if cfg_path.exists():
        try:
            data = yaml.safe_load(cfg_path.read_text()) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Could not read {cfg_path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"{cfg_path} must contain a mapping")

    unknown = sorted(set(data) - {"chunk_size", "log_level"})
    if unknown:
        raise ConfigError(f"Unknown keys in {cfg_path}: {unknown}")

    chunk_size = data.get("chunk_size", DEFAULT_CHUNK_SIZE)
    if isinstance(chunk_size, bool) or not isinstance(chunk_size, int) or chunk_size <= 0:
        raise ConfigError(f"chunk_size must be a positive integer, got {chunk_size!r}")

    log_level = os.environ.get("MTIME_REWIND_LOG_LEVEL") or data.get("log_level", "INFO")
    log_level = str(log_level).upper()
    if os.environ.get("DEBUG"):
        log_level = "DEBUG"
    if log_level not in LOG_LEVELS:
        raise ConfigError(f"Invalid log level {log_level!r} (expected one of {', '.join(LOG_LEVELS)})")

    return RewindConfig(chunk_size=chunk_size, log_level=log_level)
