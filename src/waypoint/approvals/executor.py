"""
Command executors used by the approval gate.

An executor spawns shell commands and lets the gate poll their combined
output until they finish or the gate stops waiting.
"""

import logging
import os
import subprocess
import threading
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Protocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcessOutput:
    """Output captured so far from a spawned command."""

    output: str
    is_running: bool
    exit_code: int | None = None


class CommandExecutor(Protocol):
    """Spawns commands and reports their progress."""

    def spawn(self, command: str, cwd: str | Path) -> str:
        """Start a command, returning its process id."""
        ...

    def poll(self, process_id: str) -> ProcessOutput:
        """Report accumulated output and whether the command still runs."""
        ...

    def kill(self, process_id: str) -> bool:
        """Stop a running command."""
        ...


class _ManagedProcess:
    """A spawned process plus the buffer its reader threads fill."""

    def __init__(self, process: subprocess.Popen, cwd: str) -> None:
        self.process = process
        self.cwd = cwd
        self._lock = threading.Lock()
        self._chunks: list[str] = []
        self._readers = [
            threading.Thread(target=self._drain, args=(stream,), daemon=True)
            for stream in (process.stdout, process.stderr)
            if stream is not None
        ]
        for reader in self._readers:
            reader.start()

    def _drain(self, stream: IO[str]) -> None:
        for line in stream:
            with self._lock:
                self._chunks.append(line)
        stream.close()

    def snapshot(self) -> ProcessOutput:
        exit_code = self.process.poll()
        if exit_code is not None:
            # Let the readers finish so no trailing output is lost
            for reader in self._readers:
                reader.join(timeout=1.0)
        with self._lock:
            output = "".join(self._chunks)
        return ProcessOutput(output=output, is_running=exit_code is None, exit_code=exit_code)


class SubprocessExecutor:
    """
    Runs commands through the system shell.

    stdout and stderr are merged line by line into a single buffer, read by
    background threads so polling never blocks.
    """

    def __init__(self, env: dict[str, str] | None = None) -> None:
        """
        Initialize the executor.

        Args:
            env: Extra environment variables for spawned commands.
        """
        self.env = env
        self._processes: dict[str, _ManagedProcess] = {}
        self._lock = threading.Lock()

    def spawn(self, command: str, cwd: str | Path) -> str:
        """
        Start a shell command.

        Args:
            command: Shell command line.
            cwd: Working directory.

        Returns:
            Process id used for polling.

        Raises:
            OSError: If the working directory or shell cannot be used.
        """
        working_dir = Path(cwd).expanduser()
        if not working_dir.is_dir():
            raise FileNotFoundError(f"Working directory not found: {cwd}")

        exec_env = os.environ.copy()
        if self.env:
            exec_env.update(self.env)

        process = subprocess.Popen(
            command,
            shell=True,
            cwd=working_dir,
            env=exec_env,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            errors="replace",
        )

        process_id = uuid.uuid4().hex
        with self._lock:
            self._processes[process_id] = _ManagedProcess(process, str(working_dir))

        logger.info(f"Spawned command {process_id} (pid {process.pid}): {command[:100]}")
        return process_id

    def _get(self, process_id: str) -> _ManagedProcess:
        with self._lock:
            managed = self._processes.get(process_id)
        if managed is None:
            raise KeyError(f"Unknown process: {process_id}")
        return managed

    def poll(self, process_id: str) -> ProcessOutput:
        """
        Report output captured so far.

        Raises:
            KeyError: If the process id is unknown.
        """
        return self._get(process_id).snapshot()

    def kill(self, process_id: str) -> bool:
        """
        Kill a running command.

        Returns:
            True if the process was running and has been killed.
        """
        managed = self._get(process_id)
        if managed.process.poll() is not None:
            return False
        managed.process.kill()
        managed.process.wait(timeout=5)
        logger.info(f"Killed command {process_id}")
        return True

    def cleanup(self) -> int:
        """
        Forget finished processes.

        Returns:
            Number of processes removed.
        """
        with self._lock:
            finished = [
                pid for pid, managed in self._processes.items() if managed.process.poll() is not None
            ]
            for pid in finished:
                del self._processes[pid]
        if finished:
            logger.debug(f"Cleaned up {len(finished)} finished processes")
        return len(finished)
