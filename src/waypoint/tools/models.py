"""Data models for the tool system."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

# Appended to result text cut short to bound prompt growth
TRUNCATION_MARKER = "...(truncated)"


class ToolParameter(BaseModel):
    """Defines a parameter for a tool."""

    name: str
    type: str  # "string", "integer", "boolean", "array", "object"
    description: str
    required: bool = True
    default: Optional[Any] = None
    enum: Optional[list[str]] = None


class ToolDefinition(BaseModel):
    """Static declaration of a tool as the model sees it."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    parameter_schema: dict[str, Any]
    requires_approval: bool = False

    def to_openai(self) -> dict[str, Any]:
        """Render in OpenAI function-calling format."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameter_schema,
            },
        }


class ToolCallRequest(BaseModel):
    """A tool invocation requested by the model."""

    model_config = ConfigDict(frozen=True)

    id: str  # Opaque, issued by the model
    tool_name: str
    raw_arguments: str = "{}"  # Serialized JSON, as received

    def __str__(self) -> str:
        """String representation."""
        return f"{self.tool_name}({self.raw_arguments})"


class ToolResult(BaseModel):
    """Outcome of dispatching one tool call."""

    tool_call_id: str
    success: bool
    text_result: str = ""
    requires_approval: bool = False
    pending_command_id: Optional[str] = Field(
        default=None,
        description="Approval gate id when requires_approval is set",
    )

    def __str__(self) -> str:
        """String representation."""
        prefix = "" if self.success else "Error: "
        text = self.text_result[:200] + ("..." if len(self.text_result) > 200 else "")
        return f"{prefix}{text}"
