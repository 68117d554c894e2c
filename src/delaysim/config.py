"""
Configuration for the delay simulator.

Distribution files and mapping files are resolved relative to a files root.
Every setting can be provided by environment variable so a mock server can
switch latency profiles (e.g. BAU vs peak, or no delays at all for
integration tests) without code changes:

- DELAYSIM_ROOT: files root (default: current working directory)
- DELAYSIM_DISTRIBUTION_FILES: comma-separated distribution files, relative
  to the root, loaded in order with later files overriding earlier ones.
  Unset means file-based distributions are not used.
- DELAYSIM_MAPPINGS_DIR: directory of request mapping files, relative to the root
- DELAYSIM_CHECK_DISTRIBUTIONS: "1", "true", "yes" or "on" to verify at startup
  that every file-based key used by a mapping is defined
- DELAYSIM_METRIC_PREFIX: prefix for emitted metric names (default: delaysim)
"""

import os
from dataclasses import dataclass
from pathlib import Path

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})


def get_files_root() -> Path:
    """Return the root directory distribution and mapping files are resolved against."""
    env_root = os.environ.get("DELAYSIM_ROOT", "").strip()
    if env_root:
        return Path(env_root).expanduser().resolve()
    return Path.cwd()


def parse_file_list(raw: str | None) -> list[str] | None:
    """Split a comma-separated file list; None stays None, blank entries are dropped."""
    if raw is None:
        return None
    return [name.strip() for name in raw.split(",") if name.strip()]


def get_distribution_files() -> list[str] | None:
    """Distribution files from DELAYSIM_DISTRIBUTION_FILES, or None when unset."""
    return parse_file_list(os.environ.get("DELAYSIM_DISTRIBUTION_FILES"))


def get_mappings_dir() -> str | None:
    """Mappings directory name from DELAYSIM_MAPPINGS_DIR, or None when unset."""
    return os.environ.get("DELAYSIM_MAPPINGS_DIR", "").strip() or None


def get_metric_prefix() -> str:
    """Metric name prefix. Default: delaysim."""
    return (os.environ.get("DELAYSIM_METRIC_PREFIX") or "delaysim").strip() or "delaysim"


def metric_name(suffix: str) -> str:
    """Return full metric name with configured prefix (e.g. 'response.delay' -> 'delaysim.response.delay')."""
    prefix = get_metric_prefix()
    return f"{prefix}.{suffix}" if suffix else prefix


def env_flag(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUE_VALUES


@dataclass
class DelayConfiguration:
    """Where to find distribution and mapping files, and whether to check them at startup."""

    files_root: Path
    distribution_files: list[str] | None = None
    mappings_dir: Path | None = None
    check_distributions: bool = False

    @classmethod
    def from_env(cls) -> "DelayConfiguration":
        """Build configuration from DELAYSIM_* environment variables."""
        root = get_files_root()
        mappings_raw = get_mappings_dir()
        return cls(
            files_root=root,
            distribution_files=get_distribution_files(),
            mappings_dir=(root / mappings_raw) if mappings_raw else None,
            check_distributions=env_flag("DELAYSIM_CHECK_DISTRIBUTIONS"),
        )
