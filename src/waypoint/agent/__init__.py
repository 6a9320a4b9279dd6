"""Orchestration of multi-turn, tool-using model runs."""

from waypoint.agent.loop import Orchestrator
from waypoint.agent.models import (
    AgentConfig,
    AgentEvent,
    AgentMode,
    Completed,
    EventType,
    Failed,
    RunOutcome,
    RunStatus,
    Suspended,
    SuspendedRun,
)
from waypoint.agent.prompts import get_system_prompt

__all__ = [
    "AgentConfig",
    "AgentEvent",
    "AgentMode",
    "Completed",
    "EventType",
    "Failed",
    "Orchestrator",
    "RunOutcome",
    "RunStatus",
    "Suspended",
    "SuspendedRun",
    "get_system_prompt",
]
