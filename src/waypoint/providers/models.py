"""
Provider data models for Waypoint.

Defines the message, usage and reply types shared by the model client,
the orchestration loop and the session accumulator.
"""

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any

from waypoint.tools.models import ToolCallRequest


class MessageRole(str, Enum):
    """Valid message roles."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


def _new_message_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class Message:
    """Conversation message. Never mutated once appended."""

    role: str  # "system" | "user" | "assistant" | "tool"
    content: str
    id: str = field(default_factory=_new_message_id)
    tool_call_id: str | None = None  # Set on tool messages
    tool_calls: tuple[ToolCallRequest, ...] = ()  # Set on assistant messages
    timestamp: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to an OpenAI/LiteLLM-compatible dict."""
        result: dict[str, Any] = {"role": self.role, "content": self.content}
        if self.tool_call_id:
            result["tool_call_id"] = self.tool_call_id
        if self.tool_calls:
            result["tool_calls"] = [
                {
                    "id": call.id,
                    "type": "function",
                    "function": {"name": call.tool_name, "arguments": call.raw_arguments},
                }
                for call in self.tool_calls
            ]
        return result

    def to_snapshot(self) -> dict[str, Any]:
        """Serialize every field, including identity and timestamp."""
        data = self.to_dict()
        data["id"] = self.id
        if self.timestamp is not None:
            data["timestamp"] = self.timestamp.isoformat()
        return data

    @classmethod
    def from_snapshot(cls, data: dict[str, Any]) -> "Message":
        """Rebuild a message written by to_snapshot()."""
        tool_calls = tuple(
            ToolCallRequest(
                id=call["id"],
                tool_name=call["function"]["name"],
                raw_arguments=call["function"].get("arguments") or "{}",
            )
            for call in data.get("tool_calls") or []
        )
        timestamp = data.get("timestamp")
        return cls(
            role=data["role"],
            content=data.get("content") or "",
            id=data.get("id") or _new_message_id(),
            tool_call_id=data.get("tool_call_id"),
            tool_calls=tool_calls,
            timestamp=datetime.fromisoformat(timestamp) if timestamp else None,
        )

    @classmethod
    def system(cls, content: str) -> "Message":
        """Create a system message."""
        return cls(role=MessageRole.SYSTEM.value, content=content)

    @classmethod
    def user(cls, content: str) -> "Message":
        """Create a user message."""
        return cls(role=MessageRole.USER.value, content=content, timestamp=datetime.now())

    @classmethod
    def assistant(
        cls, content: str, tool_calls: tuple[ToolCallRequest, ...] | list[ToolCallRequest] = ()
    ) -> "Message":
        """Create an assistant message, optionally carrying tool calls."""
        return cls(
            role=MessageRole.ASSISTANT.value,
            content=content,
            tool_calls=tuple(tool_calls),
            timestamp=datetime.now(),
        )

    @classmethod
    def tool(cls, tool_call_id: str, content: str) -> "Message":
        """Create a tool-result message answering a tool call."""
        return cls(
            role=MessageRole.TOOL.value,
            content=content,
            tool_call_id=tool_call_id,
            timestamp=datetime.now(),
        )


@dataclass(frozen=True)
class TokenUsage:
    """Token usage statistics for one completion."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    def __post_init__(self) -> None:
        if self.total_tokens == 0:
            object.__setattr__(
                self, "total_tokens", self.prompt_tokens + self.completion_tokens
            )

    def __add__(self, other: "TokenUsage") -> "TokenUsage":
        return TokenUsage(
            prompt_tokens=self.prompt_tokens + other.prompt_tokens,
            completion_tokens=self.completion_tokens + other.completion_tokens,
            total_tokens=self.total_tokens + other.total_tokens,
        )


@dataclass(frozen=True)
class ModelReply:
    """Unified reply from a model client."""

    content: str = ""
    tool_calls: tuple[ToolCallRequest, ...] = ()
    usage: TokenUsage | None = None
    model: str | None = None
    finish_reason: str | None = None

    @property
    def has_tool_calls(self) -> bool:
        """Whether the model asked for at least one tool."""
        return bool(self.tool_calls)


@dataclass(frozen=True)
class ModelPrice:
    """Per-token prices for one model, in USD."""

    input_per_token: float
    output_per_token: float

    @classmethod
    def per_million(cls, input_price: float, output_price: float) -> "ModelPrice":
        """Build from per-million-token prices."""
        return cls(input_price / 1_000_000, output_price / 1_000_000)


@dataclass
class ModelUsage:
    """Aggregated usage for a session by model."""

    model: str
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_cost: float = 0.0
    request_count: int = 0

    def add(self, usage: TokenUsage, cost: float) -> None:
        """Add usage from a completion."""
        self.prompt_tokens += usage.prompt_tokens
        self.completion_tokens += usage.completion_tokens
        self.total_cost += cost
        self.request_count += 1


@dataclass
class SessionStats:
    """Cumulative statistics for a logical session."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0
    total_cost: float = 0.0
    message_count: int = 0

    def copy(self) -> "SessionStats":
        """Detached copy for read-only display."""
        return replace(self)
