"""Tool dispatcher: runs one model-issued tool call and normalizes its result."""

import logging
from typing import Optional, Sequence

from waypoint.approvals.gate import ApprovalGate
from waypoint.tools.base import CommandTool, ToolExecutionError
from waypoint.tools.models import TRUNCATION_MARKER, ToolCallRequest, ToolDefinition, ToolResult
from waypoint.tools.parser import ToolCallParser
from waypoint.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)

AWAITING_APPROVAL = "awaiting approval"


def truncate_result(text: str, max_chars: int) -> str:
    """Cap result text at max_chars, appending an explicit marker when cut."""
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + TRUNCATION_MARKER


class ToolDispatcher:
    """Dispatches tool calls to their implementations or the approval gate.

    Every call yields exactly one ToolResult. Tool failures, unknown tools
    and malformed arguments become unsuccessful results; nothing raised by
    a tool escapes dispatch.
    """

    def __init__(
        self,
        registry: ToolRegistry,
        gate: ApprovalGate,
        max_result_chars: int = 500,
    ):
        """Initialize the dispatcher.

        Args:
            registry: Tools available for execution
            gate: Approval gate receiving approval-gated commands
            max_result_chars: Cap on successful result text
        """
        self.registry = registry
        self.gate = gate
        self.max_result_chars = max_result_chars

    async def dispatch(
        self,
        call: ToolCallRequest,
        available: Optional[Sequence[ToolDefinition]] = None,
    ) -> ToolResult:
        """Dispatch a single tool call.

        Args:
            call: Tool call requested by the model
            available: Tool definitions offered to the model for this run.
                Names outside this set are treated as unknown. None allows
                every registered tool.

        Returns:
            ToolResult answering the call
        """
        tool = self.registry.resolve(call.tool_name)
        if available is not None and call.tool_name not in {d.name for d in available}:
            tool = None
        if tool is None:
            logger.warning(f"Model requested unknown tool: {call.tool_name}")
            return ToolResult(
                tool_call_id=call.id,
                success=False,
                text_result=f"Unknown tool: {call.tool_name}",
            )

        arguments = ToolCallParser.parse_arguments(call.raw_arguments)
        # Reserved for the dispatcher
        arguments.pop("tool_call_id", None)

        if isinstance(tool, CommandTool):
            return self._enqueue(tool, call, arguments)

        logger.info(f"Executing tool: {call.tool_name}")
        try:
            tool.validate_input(**arguments)
            text = await tool.execute(**arguments, tool_call_id=call.id)
        except Exception as e:
            message = str(e) or type(e).__name__
            if isinstance(e, (ToolExecutionError, ValueError, OSError)):
                logger.info(f"Tool {call.tool_name} failed: {message}")
            else:
                logger.error(f"Unexpected error in tool {call.tool_name}: {e}", exc_info=True)
            return ToolResult(tool_call_id=call.id, success=False, text_result=message)

        return ToolResult(
            tool_call_id=call.id,
            success=True,
            text_result=truncate_result(text, self.max_result_chars),
        )

    def _enqueue(self, tool: CommandTool, call: ToolCallRequest, arguments: dict) -> ToolResult:
        """Register an approval-gated call with the gate without running it."""
        try:
            pending = tool.build_pending_command(call.id, arguments)
        except Exception as e:
            message = str(e) or type(e).__name__
            logger.info(f"Tool {call.tool_name} rejected its arguments: {message}")
            return ToolResult(tool_call_id=call.id, success=False, text_result=message)

        command_id = self.gate.enqueue(pending)
        return ToolResult(
            tool_call_id=call.id,
            success=True,
            text_result=AWAITING_APPROVAL,
            requires_approval=True,
            pending_command_id=command_id,
        )
