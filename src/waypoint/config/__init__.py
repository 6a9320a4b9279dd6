"""Configuration system for Waypoint."""

from waypoint.config.loader import (
    apply_env_overrides,
    clear_config_cache,
    get_config,
    load_config,
    load_config_dict,
    load_yaml_file,
)
from waypoint.config.merger import deep_merge, get_nested_value, set_nested_value
from waypoint.config.schema import (
    AgentConfigSchema,
    ApprovalConfig,
    Config,
    LoggingConfig,
    PriceEntry,
    PricingConfig,
    ProviderConfig,
    ToolsConfig,
)
from waypoint.errors import ConfigurationError

__all__ = [
    "AgentConfigSchema",
    "ApprovalConfig",
    "Config",
    "ConfigurationError",
    "LoggingConfig",
    "PriceEntry",
    "PricingConfig",
    "ProviderConfig",
    "ToolsConfig",
    "apply_env_overrides",
    "clear_config_cache",
    "deep_merge",
    "get_config",
    "get_nested_value",
    "load_config",
    "load_config_dict",
    "load_yaml_file",
    "set_nested_value",
]
