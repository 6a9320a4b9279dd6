"""Data models for the approval gate."""

import uuid
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from waypoint.providers.models import Message


class CommandStatus(str, Enum):
    """Lifecycle of a command awaiting human consent."""

    PENDING = "pending"
    EXECUTING = "executing"
    COMPLETED = "completed"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        """Whether no further transition is possible."""
        return self in (CommandStatus.COMPLETED, CommandStatus.REJECTED)


class PendingCommand(BaseModel):
    """A command that needs approval before it runs."""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    tool_call_id: str
    command: str
    working_directory: str = "."
    reason: Optional[str] = None
    status: CommandStatus = CommandStatus.PENDING
    result: Optional[str] = None
    error: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.now)
    resolved_at: Optional[datetime] = None

    def __str__(self) -> str:
        """String representation."""
        return f"[{self.status.value}] {self.command} (in {self.working_directory})"


@dataclass(frozen=True)
class Resolution:
    """Outcome of approving or rejecting a pending command.

    Carries the single tool message that answers the original tool call.
    """

    command_id: str
    tool_call_id: str
    status: CommandStatus
    message: Message

    @property
    def content(self) -> str:
        """Text of the synthesized tool message."""
        return self.message.content
