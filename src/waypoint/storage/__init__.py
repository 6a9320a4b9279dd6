"""Storage utilities for Waypoint."""

from waypoint.storage.paths import (
    ensure_directory,
    find_project_config,
    get_global_config_path,
    get_waypoint_home,
)
from waypoint.storage.trash import TrashError, TrashItem, TrashManager

__all__ = [
    "TrashError",
    "TrashItem",
    "TrashManager",
    "ensure_directory",
    "find_project_config",
    "get_global_config_path",
    "get_waypoint_home",
]
