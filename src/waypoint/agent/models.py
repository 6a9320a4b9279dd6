"""Data models for orchestration runs."""

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from waypoint.providers.models import Message, TokenUsage
from waypoint.tools.models import ToolDefinition

if TYPE_CHECKING:
    from waypoint.config.schema import Config

# Bumped when the SuspendedRun dict layout changes
SUSPENDED_RUN_VERSION = 1


class AgentMode(str, Enum):
    """Orchestration mode. Selects the system prompt and the exposed tools."""

    CHAT = "chat"  # Conversation only
    AGENT = "agent"  # Full tool set, executes tasks
    PLAN = "plan"  # Full tool set, proposes plans before acting
    QUESTION = "question"  # Conversation only, answers questions

    @property
    def uses_tools(self) -> bool:
        """Whether the mode exposes tools to the model."""
        return self in (AgentMode.AGENT, AgentMode.PLAN)


class AgentConfig(BaseModel):
    """Configuration for orchestration runs."""

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

    temperature: float = Field(default=0.7, ge=0.0, le=2.0)

    max_tokens: Optional[int] = Field(default=4096, ge=1)

    @classmethod
    def from_config(cls, config: "Config") -> "AgentConfig":
        """Build from the loaded configuration."""
        return cls(
            max_iterations=config.agent.max_iterations,
            max_result_chars=config.agent.max_result_chars,
            temperature=config.providers.temperature,
            max_tokens=config.providers.max_tokens,
        )


class EventType(str, Enum):
    """Run lifecycle events."""

    RUN_START = "run_start"
    RUN_RESUMED = "run_resumed"
    ITERATION_START = "iteration_start"
    AI_RESPONSE = "ai_response"
    TOOL_START = "tool_start"
    TOOL_COMPLETE = "tool_complete"
    TOOL_ERROR = "tool_error"
    TOOL_APPROVAL_NEEDED = "tool_approval_needed"
    RUN_SUSPENDED = "run_suspended"
    RUN_COMPLETE = "run_complete"
    RUN_FAILED = "run_failed"


class AgentEvent(BaseModel):
    """Event emitted during a run for progress display."""

    model_config = ConfigDict(use_enum_values=True)

    event_type: EventType = Field(description="Type of event")

    iteration: int = Field(description="Dispatched batches so far")

    tool_name: Optional[str] = Field(default=None, description="Tool name (for tool events)")

    tool_call_id: Optional[str] = Field(
        default=None, description="Tool call ID (for tool events)"
    )

    message: Optional[str] = Field(
        default=None, description="Human-readable message describing the event"
    )

    data: Optional[dict[str, Any]] = Field(default=None, description="Additional event data")

    timestamp: Optional[str] = Field(default=None, description="ISO format timestamp")


class RunStatus(str, Enum):
    """Terminal state of one run segment."""

    COMPLETED = "completed"
    SUSPENDED = "suspended"
    FAILED = "failed"


@dataclass(frozen=True)
class SuspendedRun:
    """Resume token for a run paused on an approval-gated tool call.

    Holds everything needed to continue: the conversation up to and
    including the assistant message that requested the paused call (plus
    results of calls dispatched before it), the tool set the model was
    shown, and the iteration counter. Owned by the caller; dropping it
    abandons the run.
    """

    conversation_id: str
    conversation_snapshot: tuple[Message, ...]
    pending_tool_call_id: str
    pending_command_id: str
    tool_definitions_snapshot: tuple[ToolDefinition, ...]
    mode: AgentMode
    model: Optional[str] = None
    iterations: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        return {
            "version": SUSPENDED_RUN_VERSION,
            "conversation_id": self.conversation_id,
            "conversation_snapshot": [msg.to_snapshot() for msg in self.conversation_snapshot],
            "pending_tool_call_id": self.pending_tool_call_id,
            "pending_command_id": self.pending_command_id,
            "tool_definitions_snapshot": [
                definition.model_dump() for definition in self.tool_definitions_snapshot
            ],
            "mode": self.mode.value,
            "model": self.model,
            "iterations": self.iterations,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SuspendedRun":
        """Rebuild a token written by to_dict().

        Raises:
            ValueError: If the dict was written by an incompatible version
        """
        version = data.get("version", SUSPENDED_RUN_VERSION)
        if version != SUSPENDED_RUN_VERSION:
            raise ValueError(f"Unsupported suspended run version: {version}")

        return cls(
            conversation_id=data["conversation_id"],
            conversation_snapshot=tuple(
                Message.from_snapshot(msg) for msg in data["conversation_snapshot"]
            ),
            pending_tool_call_id=data["pending_tool_call_id"],
            pending_command_id=data["pending_command_id"],
            tool_definitions_snapshot=tuple(
                ToolDefinition.model_validate(definition)
                for definition in data.get("tool_definitions_snapshot", [])
            ),
            mode=AgentMode(data["mode"]),
            model=data.get("model"),
            iterations=int(data.get("iterations", 0)),
        )


@dataclass(frozen=True)
class Completed:
    """The model produced a final answer."""

    message: Message
    conversation: tuple[Message, ...]
    usage: TokenUsage = field(default_factory=TokenUsage)
    iterations: int = 0
    status: RunStatus = RunStatus.COMPLETED


@dataclass(frozen=True)
class Suspended:
    """The run is waiting on a human decision."""

    resume_token: SuspendedRun
    pending_command_id: str
    usage: TokenUsage = field(default_factory=TokenUsage)
    status: RunStatus = RunStatus.SUSPENDED

    @property
    def conversation(self) -> tuple[Message, ...]:
        """Conversation up to the suspension point."""
        return self.resume_token.conversation_snapshot


@dataclass(frozen=True)
class Failed:
    """The run stopped without a final answer.

    The conversation holds every message committed before the failure.
    """

    reason: str
    conversation: tuple[Message, ...]
    usage: TokenUsage = field(default_factory=TokenUsage)
    iterations: int = 0
    status: RunStatus = RunStatus.FAILED


RunOutcome = Union[Completed, Suspended, Failed]
