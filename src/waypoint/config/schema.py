"""
Pydantic configuration schema for Waypoint.

This module defines all configuration models with validation.
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

# =============================================================================
# Provider Configuration
# =============================================================================


class ProviderConfig(BaseModel):
    """Model client configuration."""

    model_config = ConfigDict(extra="allow")

    default: str = "openai/gpt-4o-mini"
    aliases: dict[str, str] = Field(default_factory=dict)
    api_base: str | None = None
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int | None = Field(default=4096, ge=1)


# =============================================================================
# Agent Configuration
# =============================================================================


class AgentConfigSchema(BaseModel):
    """Orchestration loop configuration."""

    model_config = ConfigDict(extra="allow")

    default_mode: Literal["chat", "agent", "plan", "question"] = "agent"
    max_iterations: int = Field(
        default=10,
        ge=1,
        le=50,
        description="Maximum dispatched tool batches per run",
    )
    max_result_chars: int = Field(
        default=500,
        ge=50,
        description="Tool output kept in the conversation before truncation",
    )


# =============================================================================
# Approval Configuration
# =============================================================================


class ApprovalConfig(BaseModel):
    """Approval gate polling configuration."""

    model_config = ConfigDict(extra="allow")

    poll_interval: float = Field(
        default=0.5,
        ge=0.0,
        description="Seconds between output polls of an approved command",
    )
    max_polls: int = Field(
        default=60,
        ge=1,
        description="Polls before returning partial output",
    )


# =============================================================================
# Tools Configuration
# =============================================================================


class ToolsConfig(BaseModel):
    """Built-in tool configuration."""

    model_config = ConfigDict(extra="allow")

    workspace_root: Path = Field(default_factory=Path.cwd)
    max_read_size: int = Field(default=2 * 1024 * 1024, ge=1)
    search_scan_limit: int = Field(default=200, ge=1)
    search_display_limit: int = Field(default=20, ge=1)
    web_search_max_results: int = Field(default=10, ge=1, le=10)
    brave_api_key: str | None = None
    trash_dir_name: str = ".trash"


# =============================================================================
# Pricing Configuration
# =============================================================================


class PriceEntry(BaseModel):
    """Prices in USD per million tokens."""

    input: float = Field(default=0.10, ge=0.0)
    output: float = Field(default=0.10, ge=0.0)


class PricingConfig(BaseModel):
    """Price table configuration."""

    model_config = ConfigDict(extra="allow")

    use_litellm_prices: bool = True
    default: PriceEntry = Field(default_factory=PriceEntry)
    models: dict[str, PriceEntry] = Field(default_factory=dict)


# =============================================================================
# Logging Configuration
# =============================================================================


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"
    file: Path | None = None


# =============================================================================
# Root Configuration
# =============================================================================


class Config(BaseModel):
    """Root configuration model."""

    model_config = ConfigDict(extra="allow")

    providers: ProviderConfig = Field(default_factory=ProviderConfig)
    agent: AgentConfigSchema = Field(default_factory=AgentConfigSchema)
    approvals: ApprovalConfig = Field(default_factory=ApprovalConfig)
    tools: ToolsConfig = Field(default_factory=ToolsConfig)
    pricing: PricingConfig = Field(default_factory=PricingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
