"""Global configuration data structures and loading.

Provides immutable global config data loaded from ~/.sourceify/config.toml.
Every key is optional; a missing default config file means defaults.

Example config:
  max_workers = 4
  workspace_root = "/var/tmp/sourceify"
"""

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path


def default_max_workers() -> int:
    return min(4, os.cpu_count() or 1)


@dataclass(frozen=True)
class GlobalConfig:
    """Immutable global configuration data.

    Loaded once at CLI entry point and stored in SourceifyContext.
    """

    max_workers: int
    workspace_root: Path | None

    @staticmethod
    def defaults() -> "GlobalConfig":
        return GlobalConfig(max_workers=default_max_workers(), workspace_root=None)


def global_config_path() -> Path:
    """Get the path to the default global config file."""
    return Path.home() / ".sourceify" / "config.toml"


def load_global_config(path: Path | None = None) -> GlobalConfig:
    """Load global config from path, or from ~/.sourceify/config.toml.

    Args:
        path: Explicit config file. Unlike the default location, an explicit
            path must exist.

    Returns:
        GlobalConfig instance with loaded values

    Raises:
        FileNotFoundError: If an explicit config path doesn't exist
        ValueError: If a key has an invalid value or the TOML is malformed
    """
    if path is None:
        config_path = global_config_path()
        if not config_path.exists():
            return GlobalConfig.defaults()
    else:
        config_path = path
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found at {config_path}")

    try:
        data = tomllib.loads(config_path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Malformed config {config_path}: {e}") from e

    max_workers = data.get("max_workers", default_max_workers())
    if isinstance(max_workers, bool) or not isinstance(max_workers, int) or max_workers < 1:
        raise ValueError(
            f"Invalid 'max_workers' in {config_path}: expected a positive integer, "
            f"got {max_workers!r}"
        )

    root = data.get("workspace_root")
    if root is not None and not isinstance(root, str):
        raise ValueError(f"Invalid 'workspace_root' in {config_path}: expected a path string")

    return GlobalConfig(
        max_workers=max_workers,
        workspace_root=Path(root).expanduser() if root else None,
    )
