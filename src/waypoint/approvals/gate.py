"""
Approval gate for commands that need human consent.

Commands move pending -> executing -> completed, or pending -> rejected.
Each command is resolved at most once; every resolution yields exactly one
tool message answering the original tool call.
"""

import asyncio
import logging
import threading
from datetime import datetime
from typing import Optional

from waypoint.approvals.executor import CommandExecutor, ProcessOutput, SubprocessExecutor
from waypoint.approvals.models import CommandStatus, PendingCommand, Resolution
from waypoint.errors import PendingCommandNotFound
from waypoint.providers.models import Message

logger = logging.getLogger(__name__)

REJECTED_MESSAGE = "User rejected the command execution."
NO_OUTPUT_MESSAGE = "(Command completed with no output)"
STILL_RUNNING_NOTE = "(Command did not finish in time; the process may still be running)"


class ApprovalGate:
    """Owns the table of commands awaiting approval."""

    def __init__(
        self,
        executor: CommandExecutor | None = None,
        poll_interval: float = 0.5,
        max_polls: int = 60,
    ) -> None:
        """
        Initialize the gate.

        Args:
            executor: Runs approved commands. Defaults to a shell executor.
            poll_interval: Seconds between output polls.
            max_polls: Polls before giving up and returning partial output.
        """
        self.executor = executor or SubprocessExecutor()
        self.poll_interval = poll_interval
        self.max_polls = max_polls
        self._commands: dict[str, PendingCommand] = {}
        self._lock = threading.Lock()

    def enqueue(self, command: PendingCommand) -> str:
        """
        Register a command for approval.

        Args:
            command: Command in pending status.

        Returns:
            The command id.
        """
        with self._lock:
            if command.id in self._commands:
                raise ValueError(f"Command '{command.id}' is already enqueued")
            self._commands[command.id] = command.model_copy()

        logger.info(f"Command awaiting approval {command.id}: {command.command[:100]}")
        return command.id

    def get(self, command_id: str) -> PendingCommand:
        """
        Look up a command.

        Raises:
            PendingCommandNotFound: If the id is unknown.
        """
        with self._lock:
            command = self._commands.get(command_id)
            if command is None:
                raise PendingCommandNotFound(command_id)
            return command.model_copy()

    def list_commands(self, status: Optional[CommandStatus] = None) -> list[PendingCommand]:
        """All commands, oldest first, optionally filtered by status."""
        with self._lock:
            commands = [cmd.model_copy() for cmd in self._commands.values()]
        if status is not None:
            commands = [cmd for cmd in commands if cmd.status == status]
        return sorted(commands, key=lambda cmd: cmd.created_at)

    def list_pending(self) -> list[PendingCommand]:
        """Commands still waiting for a decision."""
        return self.list_commands(CommandStatus.PENDING)

    def clear_resolved(self) -> int:
        """
        Drop completed and rejected commands from the table.

        Returns:
            Number of commands removed.
        """
        with self._lock:
            resolved = [cid for cid, cmd in self._commands.items() if cmd.status.is_terminal]
            for cid in resolved:
                del self._commands[cid]
        return len(resolved)

    def _claim(self, command_id: str, new_status: CommandStatus) -> Optional[PendingCommand]:
        """Atomically move a pending command to new_status.

        Returns None when the command was already claimed.
        """
        with self._lock:
            command = self._commands.get(command_id)
            if command is None:
                raise PendingCommandNotFound(command_id)
            if command.status != CommandStatus.PENDING:
                logger.info(f"Ignoring decision on {command_id}: already {command.status.value}")
                return None
            command.status = new_status
            if new_status.is_terminal:
                command.resolved_at = datetime.now()
            return command.model_copy()

    def _finish(
        self, command_id: str, result: Optional[str] = None, error: Optional[str] = None
    ) -> None:
        with self._lock:
            command = self._commands[command_id]
            command.status = CommandStatus.COMPLETED
            command.result = result
            command.error = error
            command.resolved_at = datetime.now()

    def reject(self, command_id: str) -> Optional[Resolution]:
        """
        Reject a pending command without running it.

        Returns:
            The resolution, or None if the command was already resolved.

        Raises:
            PendingCommandNotFound: If the id is unknown.
        """
        command = self._claim(command_id, CommandStatus.REJECTED)
        if command is None:
            return None

        logger.info(f"Command rejected {command_id}")
        return Resolution(
            command_id=command_id,
            tool_call_id=command.tool_call_id,
            status=CommandStatus.REJECTED,
            message=Message.tool(command.tool_call_id, REJECTED_MESSAGE),
        )

    async def approve(self, command_id: str) -> Optional[Resolution]:
        """
        Approve a pending command and run it.

        The command is polled until it exits or max_polls is reached; in the
        latter case whatever output exists is returned and the command is
        still marked completed.

        Returns:
            The resolution, or None if the command was already resolved.

        Raises:
            PendingCommandNotFound: If the id is unknown.
        """
        command = self._claim(command_id, CommandStatus.EXECUTING)
        if command is None:
            return None

        logger.info(f"Command approved {command_id}: {command.command[:100]}")

        try:
            content = await self._run(command)
        except Exception as e:
            error = str(e) or type(e).__name__
            logger.warning(f"Approved command {command_id} failed: {error}")
            self._finish(command_id, error=error)
            content = f"Error: {error}"
        else:
            self._finish(command_id, result=content)

        return Resolution(
            command_id=command_id,
            tool_call_id=command.tool_call_id,
            status=CommandStatus.COMPLETED,
            message=Message.tool(command.tool_call_id, content),
        )

    async def _run(self, command: PendingCommand) -> str:
        # Spawn and poll block on the process, so they run in worker threads
        process_id = await asyncio.to_thread(
            self.executor.spawn, command.command, command.working_directory
        )

        try:
            status = ProcessOutput(output="", is_running=True)
            for attempt in range(self.max_polls):
                status = await asyncio.to_thread(self.executor.poll, process_id)
                if not status.is_running:
                    break
                if attempt < self.max_polls - 1:
                    await asyncio.sleep(self.poll_interval)
        finally:
            self._release_finished()

        output = status.output.rstrip("\n")
        if status.is_running:
            logger.warning(f"Command {command.id} still running after {self.max_polls} polls")
            return f"{output}\n{STILL_RUNNING_NOTE}" if output else STILL_RUNNING_NOTE

        return output or NO_OUTPUT_MESSAGE

    def _release_finished(self) -> None:
        """Let the executor forget processes that have exited."""
        cleanup = getattr(self.executor, "cleanup", None)
        if cleanup is not None:
            cleanup()
