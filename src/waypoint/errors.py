"""
Exception hierarchy for Waypoint.

Tool failures are reported as ToolResult values, never raised. The
exceptions here cover caller misuse and registry corruption only.
"""


class WaypointError(Exception):
    """Base exception for all Waypoint errors."""

    pass


class ConfigurationError(WaypointError):
    """Raised when configuration loading or validation fails."""

    pass


class ToolDefinitionError(WaypointError):
    """A tool was declared or registered inconsistently."""

    pass


class ApprovalError(WaypointError):
    """Base exception for approval gate errors."""

    pass


class PendingCommandNotFound(ApprovalError):
    """No pending command is registered under the given id."""

    def __init__(self, command_id: str):
        super().__init__(f"Pending command not found: {command_id}")
        self.command_id = command_id


class OrchestrationError(WaypointError):
    """Base exception for orchestration loop misuse."""

    pass


class ResumeMismatchError(OrchestrationError):
    """The resolution does not belong to the suspended run it was given to."""

    def __init__(self, expected: str, actual: str):
        super().__init__(
            f"Resolution for tool call '{actual}' cannot resume run paused at '{expected}'"
        )
        self.expected = expected
        self.actual = actual


class RunInProgressError(OrchestrationError):
    """Another run is already advancing the same conversation."""

    def __init__(self, conversation_id: str):
        super().__init__(f"A run is already active for conversation {conversation_id}")
        self.conversation_id = conversation_id
