"""Base classes for tool implementation."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Optional

from waypoint.tools.models import ToolDefinition, ToolParameter

if TYPE_CHECKING:
    from waypoint.approvals.models import PendingCommand


class ToolExecutionError(Exception):
    """Raised when tool execution fails."""

    def __init__(self, message: str, exit_code: Optional[int] = None):
        """Initialize error.

        Args:
            message: Error message
            exit_code: Optional exit code
        """
        super().__init__(message)
        self.exit_code = exit_code


class ToolInputError(ValueError):
    """Raised when a tool receives arguments it cannot work with."""

    pass


class Tool(ABC):
    """Base class for all tools.

    Tools are actions the model can invoke to perform operations beyond
    text generation. Each tool defines:
    - Name and description (for the model to understand when to use it)
    - Input parameters (JSON schema)
    - Execution logic, returning the result text
    - Whether a human must approve it before it runs

    Implementations signal failure by raising; the dispatcher turns every
    exception into an unsuccessful ToolResult.
    """

    def __init__(self):
        """Initialize the tool."""
        self._validate_definition()

    @property
    @abstractmethod
    def name(self) -> str:
        """Tool name (must be unique)."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Description of what the tool does (for the model)."""
        pass

    @property
    @abstractmethod
    def parameters(self) -> list[ToolParameter]:
        """List of tool parameters."""
        pass

    @property
    def requires_approval(self) -> bool:
        """Whether a human must approve each call before it executes.

        Returns:
            True if calls are routed through the approval gate
        """
        return False

    def get_input_schema(self) -> dict[str, Any]:
        """Get JSON schema for tool input.

        Returns:
            JSON schema describing tool parameters
        """
        properties = {}
        required = []

        for param in self.parameters:
            param_schema: dict[str, Any] = {
                "type": param.type,
                "description": param.description,
            }

            if param.enum:
                param_schema["enum"] = param.enum

            if param.default is not None:
                param_schema["default"] = param.default

            properties[param.name] = param_schema

            if param.required:
                required.append(param.name)

        return {
            "type": "object",
            "properties": properties,
            "required": required,
        }

    @property
    def definition(self) -> ToolDefinition:
        """Static declaration exposed to the model."""
        return ToolDefinition(
            name=self.name,
            description=self.description,
            parameter_schema=self.get_input_schema(),
            requires_approval=self.requires_approval,
        )

    @abstractmethod
    async def execute(self, **kwargs) -> str:
        """Execute the tool with given parameters.

        Args:
            **kwargs: Tool parameters, plus the internal tool_call_id

        Returns:
            Result text shown to the model

        Raises:
            ToolExecutionError: If execution fails
            ToolInputError: If arguments are missing or invalid
        """
        pass

    def validate_input(self, **kwargs) -> None:
        """Validate input parameters.

        Unknown parameters are ignored; models routinely add extras.

        Args:
            **kwargs: Tool parameters

        Raises:
            ToolInputError: If a required parameter is missing
        """
        required_params = [p.name for p in self.parameters if p.required]
        missing = [name for name in required_params if kwargs.get(name) is None]
        if missing:
            raise ToolInputError(f"Missing required parameters: {', '.join(missing)}")

    def _validate_definition(self) -> None:
        """Validate tool definition is correct.

        Raises:
            ValueError: If tool definition is invalid
        """
        if not self.name:
            raise ValueError("Tool name cannot be empty")

        if not self.description:
            raise ValueError("Tool description cannot be empty")

        param_names = [p.name for p in self.parameters]
        if len(param_names) != len(set(param_names)):
            raise ValueError("Parameter names must be unique")

    def __str__(self) -> str:
        """String representation."""
        return f"Tool({self.name})"

    def __repr__(self) -> str:
        """Representation."""
        return f"<Tool name={self.name} requires_approval={self.requires_approval}>"


class CommandTool(Tool):
    """A tool whose calls only ever run through the approval gate.

    Instead of executing, the dispatcher asks the tool to describe the
    command it would run; the gate executes it after explicit approval.
    """

    @property
    def requires_approval(self) -> bool:
        """Command tools always require approval."""
        return True

    @abstractmethod
    def build_pending_command(
        self, tool_call_id: str, arguments: dict[str, Any]
    ) -> "PendingCommand":
        """Describe the command a call would run.

        Args:
            tool_call_id: Id of the model's tool call
            arguments: Parsed call arguments

        Returns:
            PendingCommand in pending status

        Raises:
            ToolInputError: If arguments are missing or invalid
        """
        pass

    async def execute(self, **kwargs) -> str:
        """Command tools have no direct execution path."""
        raise ToolExecutionError(f"Tool '{self.name}' can only run after approval")
