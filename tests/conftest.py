"""
Pytest configuration and fixtures for waypoint tests.
"""

import logging
import os
import tempfile
import threading
from collections.abc import Generator, Sequence
from pathlib import Path

import pytest
from typer.testing import CliRunner

from waypoint.approvals.executor import ProcessOutput
from waypoint.approvals.gate import ApprovalGate
from waypoint.config.loader import clear_config_cache
from waypoint.providers.client import CompletionOptions
from waypoint.providers.models import Message, ModelReply, TokenUsage
from waypoint.tools.builtin import register_builtin_tools
from waypoint.tools.models import ToolCallRequest, ToolDefinition
from waypoint.tools.registry import ToolRegistry


class ScriptedModelClient:
    """Model client that replays queued replies and records every request."""

    def __init__(self, replies: Sequence[ModelReply | Exception] = ()):
        self.replies = list(replies)
        self.calls: list[tuple[list[Message], list[ToolDefinition], CompletionOptions]] = []

    def queue(self, *replies: ModelReply | Exception) -> None:
        self.replies.extend(replies)

    async def complete(self, messages, tool_definitions, options) -> ModelReply:
        self.calls.append((list(messages), list(tool_definitions), options))
        if not self.replies:
            raise AssertionError("Model called more times than scripted")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


class FakeExecutor:
    """Executor that returns scripted poll results instead of running commands."""

    def __init__(self, outputs: Sequence[ProcessOutput] = (), spawn_error: Exception | None = None):
        self.outputs = list(outputs) or [ProcessOutput(output="ok\n", is_running=False, exit_code=0)]
        self.spawn_error = spawn_error
        self.spawned: list[tuple[str, str]] = []
        self.poll_count = 0
        self.threads: set[int] = set()

    def spawn(self, command: str, cwd) -> str:
        if self.spawn_error is not None:
            raise self.spawn_error
        self.threads.add(threading.get_ident())
        self.spawned.append((command, str(cwd)))
        return f"proc-{len(self.spawned)}"

    def poll(self, process_id: str) -> ProcessOutput:
        self.threads.add(threading.get_ident())
        self.poll_count += 1
        if len(self.outputs) > 1:
            return self.outputs.pop(0)
        return self.outputs[0]

    def kill(self, process_id: str) -> bool:
        return False


def build_tool_reply(*calls: tuple[str, str, str], content: str = "") -> ModelReply:
    """Build a reply requesting (id, tool_name, raw_arguments) calls."""
    return ModelReply(
        content=content,
        tool_calls=tuple(
            ToolCallRequest(id=call_id, tool_name=name, raw_arguments=args)
            for call_id, name, args in calls
        ),
        usage=TokenUsage(prompt_tokens=100, completion_tokens=20),
        model="openai/gpt-4o-mini",
    )


def build_text_reply(content: str) -> ModelReply:
    """Build a final-answer reply."""
    return ModelReply(
        content=content,
        usage=TokenUsage(prompt_tokens=120, completion_tokens=30),
        model="openai/gpt-4o-mini",
    )


@pytest.fixture(autouse=True)
def isolated_environment(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Keep user configuration and cached state out of every test."""
    for key in list(os.environ):
        if key.startswith("WAYPOINT_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.delenv("BRAVE_API_KEY", raising=False)
    monkeypatch.setenv("WAYPOINT_HOME", str(temp_dir / ".waypoint-home"))

    clear_config_cache()
    yield
    clear_config_cache()

    logger = logging.getLogger("waypoint")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def workspace(temp_dir: Path) -> Path:
    """Provide an empty workspace root."""
    root = temp_dir / "workspace"
    root.mkdir()
    return root


@pytest.fixture
def mock_waypoint_home(temp_dir: Path) -> Path:
    """Provide the ~/.waypoint directory used during the test."""
    home = temp_dir / ".waypoint-home"
    home.mkdir(exist_ok=True)
    return home


@pytest.fixture
def model_client() -> ScriptedModelClient:
    """Provide a model client with an empty reply script."""
    return ScriptedModelClient()


@pytest.fixture
def fake_executor() -> FakeExecutor:
    """Provide an executor that reports a single successful run."""
    return FakeExecutor()


@pytest.fixture
def gate(fake_executor: FakeExecutor) -> ApprovalGate:
    """Provide an approval gate that never sleeps."""
    return ApprovalGate(executor=fake_executor, poll_interval=0, max_polls=3)


@pytest.fixture
def registry(workspace: Path) -> ToolRegistry:
    """Provide a registry with every built-in tool rooted at the workspace."""
    registry = ToolRegistry()
    register_builtin_tools(registry, workspace_root=workspace)
    return registry


@pytest.fixture
def tool_reply():
    """Provide a builder for replies that request tool calls."""
    return build_tool_reply


@pytest.fixture
def text_reply():
    """Provide a builder for final-answer replies."""
    return build_text_reply
