"""
Configuration loader for Waypoint.

Loads and merges configuration from multiple sources:
1. Default values
2. Global config (~/.waypoint/config.yaml)
3. Project config (./.waypoint/project.yaml)
4. Environment variables (WAYPOINT_*)
"""

import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from waypoint.config.merger import deep_merge, get_nested_value, set_nested_value
from waypoint.config.schema import Config
from waypoint.errors import ConfigurationError
from waypoint.storage.paths import find_project_config, get_global_config_path

ENV_PREFIX = "WAYPOINT_"

# Handled outside the config tree
_RESERVED_ENV = {"WAYPOINT_HOME"}


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        path: Path to the YAML file.

    Returns:
        Parsed configuration dictionary.

    Raises:
        ConfigurationError: If the file cannot be read or parsed.
    """
    try:
        with open(path, encoding="utf-8") as f:
            content = yaml.safe_load(f)
    except FileNotFoundError:
        return {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read {path}: {e}") from e

    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ConfigurationError(f"Top level of {path} must be a mapping")
    return content


def _parse_env_value(value: str) -> Any:
    """
    Parse an environment variable value to the appropriate type.

    Args:
        value: String value from environment.

    Returns:
        Parsed value (bool, int, float, list or string).
    """
    if value.lower() in ("true", "yes", "on"):
        return True
    if value.lower() in ("false", "no", "off"):
        return False

    if re.match(r"^-?\d+$", value):
        return int(value)

    if re.match(r"^-?\d+\.\d+$", value):
        return float(value)

    if "," in value:
        return [item.strip() for item in value.split(",")]

    return value


def _env_key_to_path(config: dict[str, Any], env_key: str) -> str:
    """
    Map WAYPOINT_AGENT_MAX_ITERATIONS to "agent.max_iterations".

    Underscores are ambiguous, so segments are matched greedily against
    the keys that already exist at each level of the config tree.
    """
    tokens = env_key[len(ENV_PREFIX) :].lower().split("_")
    parts: list[str] = []
    current: Any = config

    while tokens:
        for size in range(len(tokens), 0, -1):
            candidate = "_".join(tokens[:size])
            if isinstance(current, dict) and candidate in current:
                parts.append(candidate)
                current = current[candidate]
                tokens = tokens[size:]
                break
        else:
            # Unknown key: keep the remainder as a single segment
            parts.append("_".join(tokens))
            break

    return ".".join(parts)


def apply_env_overrides(config: dict[str, Any]) -> dict[str, Any]:
    """
    Apply WAYPOINT_<SECTION>_<KEY>=<value> environment overrides.

    Args:
        config: Configuration dictionary.

    Returns:
        Configuration with environment overrides applied.
    """
    for key, value in os.environ.items():
        if not key.startswith(ENV_PREFIX) or key in _RESERVED_ENV:
            continue

        config = set_nested_value(config, _env_key_to_path(config, key), _parse_env_value(value))

    # Conventional variable used by the Brave Search API
    brave_key = os.environ.get("BRAVE_API_KEY")
    if brave_key and not get_nested_value(config, "tools.brave_api_key"):
        config = set_nested_value(config, "tools.brave_api_key", brave_key)

    return config


def load_config_dict(
    project_path: Path | None = None,
    skip_project: bool = False,
    skip_env: bool = False,
) -> dict[str, Any]:
    """
    Merge every configuration source into a plain dictionary.

    Args:
        project_path: Starting path to search for project config. Defaults to cwd.
        skip_project: Skip loading project configuration.
        skip_env: Skip environment variable overrides.

    Returns:
        Merged, unvalidated configuration dictionary.
    """
    config_dict = Config().model_dump()

    global_path = get_global_config_path()
    if global_path.exists():
        config_dict = deep_merge(config_dict, load_yaml_file(global_path))

    if not skip_project:
        project_config_path = find_project_config(project_path)
        if project_config_path is not None:
            config_dict = deep_merge(config_dict, load_yaml_file(project_config_path))

    if not skip_env:
        config_dict = apply_env_overrides(config_dict)

    return config_dict


def load_config(
    project_path: Path | None = None,
    skip_project: bool = False,
    skip_env: bool = False,
) -> Config:
    """
    Load and validate configuration from all sources.

    Loading order (later overrides earlier): defaults, global config,
    project config, environment variables.

    Returns:
        Merged and validated Config object.

    Raises:
        ConfigurationError: If configuration is invalid.
    """
    config_dict = load_config_dict(project_path, skip_project, skip_env)

    try:
        return Config.model_validate(config_dict)
    except ValidationError as e:
        raise ConfigurationError(f"Configuration validation failed: {e}") from e


# Singleton for cached config
_cached_config: Config | None = None


def get_config(reload: bool = False) -> Config:
    """
    Get the global configuration instance.

    Uses a cached instance. Use reload=True to force refresh.

    Args:
        reload: Force reload configuration from disk.

    Returns:
        Config instance.
    """
    global _cached_config

    if _cached_config is None or reload:
        _cached_config = load_config()

    return _cached_config


def clear_config_cache() -> None:
    """Clear the cached configuration."""
    global _cached_config
    _cached_config = None
