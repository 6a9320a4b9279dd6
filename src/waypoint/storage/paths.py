"""
Path utilities for Waypoint.

Provides consistent path resolution for configuration and data files.
"""

import os
from pathlib import Path

PROJECT_DIR_NAME = ".waypoint"
PROJECT_CONFIG_NAME = "project.yaml"


def get_waypoint_home() -> Path:
    """
    Get the Waypoint home directory.

    Resolution order:
    1. WAYPOINT_HOME environment variable
    2. Default: ~/.waypoint

    Returns:
        Path to the Waypoint home directory.
    """
    env_home = os.environ.get("WAYPOINT_HOME")
    if env_home:
        return Path(env_home).expanduser().resolve()
    return Path.home() / ".waypoint"


def get_global_config_path() -> Path:
    """
    Get the path to the global configuration file.

    Returns:
        Path to ~/.waypoint/config.yaml
    """
    return get_waypoint_home() / "config.yaml"


def find_project_config(start_path: Path | None = None) -> Path | None:
    """
    Find the nearest project configuration, walking up from start_path.

    Args:
        start_path: Directory to start from. Defaults to cwd.

    Returns:
        Path to .waypoint/project.yaml, or None if no project config exists.
    """
    current = (start_path or Path.cwd()).expanduser().resolve()

    for directory in (current, *current.parents):
        candidate = directory / PROJECT_DIR_NAME / PROJECT_CONFIG_NAME
        if candidate.is_file():
            return candidate

    return None


def ensure_directory(path: Path) -> Path:
    """
    Create a directory (and parents) if it does not exist.

    Args:
        path: Directory to create.

    Returns:
        The same path, for chaining.
    """
    path.mkdir(parents=True, exist_ok=True)
    return path
