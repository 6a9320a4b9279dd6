"""Shell command tool. Every call goes through the approval gate."""

import logging
from pathlib import Path
from typing import Any, Optional

from waypoint.approvals.models import PendingCommand
from waypoint.tools.base import CommandTool, ToolInputError
from waypoint.tools.builtin.workspace import resolve_path
from waypoint.tools.models import ToolParameter

logger = logging.getLogger(__name__)


class RunCommandTool(CommandTool):
    """Execute a shell command after the user approves it."""

    def __init__(self, workspace_root: Optional[Path] = None):
        """Initialize the tool.

        Args:
            workspace_root: Default working directory for commands
        """
        self.workspace_root = Path(workspace_root or Path.cwd()).resolve()
        super().__init__()

    @property
    def name(self) -> str:
        """Tool name."""
        return "run_command"

    @property
    def description(self) -> str:
        """Tool description."""
        return (
            "Execute a terminal/shell command. Commands require user approval before "
            "execution. Use for tasks like installing dependencies, git commands, build "
            "scripts, or any shell commands."
        )

    @property
    def parameters(self) -> list[ToolParameter]:
        """Tool parameters."""
        return [
            ToolParameter(
                name="command",
                type="string",
                description="The shell command to execute",
                required=True,
            ),
            ToolParameter(
                name="workingDirectory",
                type="string",
                description=(
                    "Working directory for the command "
                    "(optional, defaults to workspace root)"
                ),
                required=False,
            ),
            ToolParameter(
                name="reason",
                type="string",
                description="Brief explanation of why this command is needed",
                required=False,
            ),
        ]

    def build_pending_command(self, tool_call_id: str, arguments: dict[str, Any]) -> PendingCommand:
        """Describe the command without running it."""
        self.validate_input(**arguments)

        command = str(arguments["command"]).strip()
        if not command:
            raise ToolInputError("Missing required parameters: command")

        working_dir = resolve_path(self.workspace_root, str(arguments.get("workingDirectory") or "."))
        reason = arguments.get("reason")

        logger.info(f"Command requires approval: {command[:100]}")
        return PendingCommand(
            tool_call_id=tool_call_id,
            command=command,
            working_directory=str(working_dir),
            reason=str(reason) if reason else None,
        )
