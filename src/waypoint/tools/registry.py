"""Tool registry for managing available tools."""

import logging
from typing import Optional

from waypoint.errors import ToolDefinitionError
from waypoint.tools.base import CommandTool, Tool
from waypoint.tools.models import ToolDefinition

logger = logging.getLogger(__name__)

# Modes that expose tools to the model; conversational modes expose none
TOOL_MODES = frozenset({"agent", "plan"})


def mode_uses_tools(mode: str) -> bool:
    """Whether a mode exposes any tools."""
    return getattr(mode, "value", mode) in TOOL_MODES


class ToolRegistry:
    """Registry for managing available tools.

    The registry maintains the closed set of tools the model may invoke.
    Tools are registered once at startup and looked up by name.
    """

    def __init__(self):
        """Initialize the tool registry."""
        self._tools: dict[str, Tool] = {}

    def register(self, tool: Tool) -> None:
        """Register a tool.

        Args:
            tool: Tool instance to register

        Raises:
            ValueError: If tool name already registered
            ToolDefinitionError: If an approval tool cannot describe its command
        """
        if tool.name in self._tools:
            raise ValueError(f"Tool '{tool.name}' is already registered")

        if tool.requires_approval and not isinstance(tool, CommandTool):
            raise ToolDefinitionError(
                f"Tool '{tool.name}' requires approval but cannot build a pending command"
            )

        self._tools[tool.name] = tool
        logger.info(f"Registered tool: {tool.name}")

    def resolve(self, name: str) -> Optional[Tool]:
        """Get a tool by name.

        Args:
            name: Tool name

        Returns:
            Tool instance or None if not found
        """
        return self._tools.get(name)

    def list_tools(self, mode: str = "agent") -> list[Tool]:
        """Get the tools exposed in a mode, in registration order.

        Args:
            mode: Orchestration mode

        Returns:
            List of tools (empty for conversational modes)
        """
        if not mode_uses_tools(mode):
            return []
        return list(self._tools.values())

    def list_definitions(self, mode: str = "agent") -> list[ToolDefinition]:
        """Get the tool definitions sent to the model in a mode.

        Returns:
            List of tool definitions
        """
        return [tool.definition for tool in self.list_tools(mode)]

    def __len__(self) -> int:
        """Get number of registered tools."""
        return len(self._tools)

    def __contains__(self, name: str) -> bool:
        """Check if tool is registered."""
        return name in self._tools

    def __str__(self) -> str:
        """String representation."""
        return f"ToolRegistry({len(self._tools)} tools)"

    def __repr__(self) -> str:
        """Representation."""
        tools = ", ".join(self._tools.keys())
        return f"<ToolRegistry tools=[{tools}]>"
