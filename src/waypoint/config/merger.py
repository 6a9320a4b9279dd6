"""
Configuration merger for Waypoint.

Implements deep merge and dotted-key access for nested config dicts.
"""

from typing import Any


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep merge two dictionaries.

    Merge rules:
    - Scalar values and lists: override replaces base
    - Dicts: recursive deep merge
    - null/None value: remove key from result

    Args:
        base: Base configuration dictionary.
        override: Override configuration dictionary.

    Returns:
        Merged configuration dictionary.
    """
    result = base.copy()

    for key, value in override.items():
        if value is None:
            result.pop(key, None)
        elif isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def get_nested_value(config: dict[str, Any], key_path: str, default: Any = None) -> Any:
    """
    Read a value using a dotted path such as "agent.max_iterations".

    Args:
        config: Configuration dictionary.
        key_path: Dot-separated key path.
        default: Returned when any segment is missing.

    Returns:
        The value, or default.
    """
    current: Any = config
    for part in key_path.split("."):
        if not isinstance(current, dict) or part not in current:
            return default
        current = current[part]
    return current


def set_nested_value(config: dict[str, Any], key_path: str, value: Any) -> dict[str, Any]:
    """
    Set a value using a dotted path, creating intermediate dicts.

    Args:
        config: Configuration dictionary (not modified).
        key_path: Dot-separated key path.
        value: Value to set.

    Returns:
        A new dictionary with the value set.
    """
    parts = key_path.split(".")
    override: dict[str, Any] = {parts[-1]: value}
    for part in reversed(parts[:-1]):
        override = {part: override}
    return deep_merge(config, override)
