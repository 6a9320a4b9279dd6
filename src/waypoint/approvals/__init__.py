"""Approval gate for commands that require human consent."""

from waypoint.approvals.executor import CommandExecutor, ProcessOutput, SubprocessExecutor
from waypoint.approvals.gate import ApprovalGate
from waypoint.approvals.models import CommandStatus, PendingCommand, Resolution

__all__ = [
    "ApprovalGate",
    "CommandExecutor",
    "CommandStatus",
    "PendingCommand",
    "ProcessOutput",
    "Resolution",
    "SubprocessExecutor",
]
