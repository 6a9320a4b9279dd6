"""Tests for the run_command tool."""

import pytest

from waypoint.approvals.models import CommandStatus
from waypoint.tools.base import ToolExecutionError, ToolInputError
from waypoint.tools.builtin.command import RunCommandTool


class TestRunCommandTool:
    """Tests for RunCommandTool."""

    def test_tool_properties(self, workspace):
        tool = RunCommandTool(workspace)

        assert tool.name == "run_command"
        assert tool.requires_approval is True
        assert tool.definition.requires_approval is True
        params = {p.name: p for p in tool.parameters}
        assert params["command"].required is True
        assert params["workingDirectory"].required is False
        assert params["reason"].required is False

    def test_build_pending_command_defaults_to_workspace(self, workspace):
        pending = RunCommandTool(workspace).build_pending_command(
            "call_1", {"command": "  git status  "}
        )

        assert pending.tool_call_id == "call_1"
        assert pending.command == "git status"
        assert pending.working_directory == str(workspace)
        assert pending.reason is None
        assert pending.status == CommandStatus.PENDING

    def test_relative_working_directory(self, workspace):
        pending = RunCommandTool(workspace).build_pending_command(
            "call_1", {"command": "make", "workingDirectory": "build", "reason": "compile"}
        )

        assert pending.working_directory == str(workspace / "build")
        assert pending.reason == "compile"

    def test_missing_command(self, workspace):
        with pytest.raises(ToolInputError, match="command"):
            RunCommandTool(workspace).build_pending_command("call_1", {})

    def test_blank_command(self, workspace):
        with pytest.raises(ToolInputError):
            RunCommandTool(workspace).build_pending_command("call_1", {"command": "   "})

    @pytest.mark.asyncio
    async def test_direct_execution_refused(self, workspace):
        with pytest.raises(ToolExecutionError, match="only run after approval"):
            await RunCommandTool(workspace).execute(command="ls")
