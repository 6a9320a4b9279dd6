"""Tool system for the Waypoint agent.

Tools are registered once, exposed to the model per mode, and dispatched
one call at a time. Commands that need human consent are routed through
the approval gate instead of running directly.
"""

from waypoint.tools.base import CommandTool, Tool, ToolExecutionError, ToolInputError
from waypoint.tools.models import ToolCallRequest, ToolDefinition, ToolParameter, ToolResult
from waypoint.tools.parser import ToolCallParser
from waypoint.tools.registry import ToolRegistry

__all__ = [
    "CommandTool",
    "Tool",
    "ToolCallParser",
    "ToolCallRequest",
    "ToolDefinition",
    "ToolExecutionError",
    "ToolInputError",
    "ToolParameter",
    "ToolRegistry",
    "ToolResult",
]
