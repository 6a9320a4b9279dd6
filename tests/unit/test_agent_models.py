"""Tests for orchestration data models."""

import json

import pytest

from waypoint.agent.models import (
    AgentConfig,
    AgentEvent,
    AgentMode,
    EventType,
    SuspendedRun,
)
from waypoint.agent.prompts import SYSTEM_PROMPTS, get_system_prompt
from waypoint.config.schema import Config
from waypoint.providers.models import Message
from waypoint.tools.models import ToolCallRequest, ToolDefinition


@pytest.fixture
def token() -> SuspendedRun:
    call = ToolCallRequest(id="call_2", tool_name="run_command", raw_arguments='{"command": "ls"}')
    return SuspendedRun(
        conversation_id="conv-1",
        conversation_snapshot=(
            Message.user("list files"),
            Message.assistant("", [call]),
        ),
        pending_tool_call_id="call_2",
        pending_command_id="cmd-1",
        tool_definitions_snapshot=(
            ToolDefinition(
                name="run_command",
                description="Run it",
                parameter_schema={"type": "object", "properties": {}, "required": []},
                requires_approval=True,
            ),
        ),
        mode=AgentMode.PLAN,
        model="fast",
        iterations=3,
    )


class TestSuspendedRun:
    """Tests for SuspendedRun serialization."""

    def test_dict_is_json_compatible(self, token):
        data = json.loads(json.dumps(token.to_dict()))

        assert data["version"] == 1
        assert data["mode"] == "plan"
        assert data["iterations"] == 3

    def test_round_trip(self, token):
        restored = SuspendedRun.from_dict(json.loads(json.dumps(token.to_dict())))

        assert restored == token
        assert restored.conversation_snapshot[1].tool_calls[0].id == "call_2"
        assert restored.tool_definitions_snapshot[0].requires_approval is True

    def test_unknown_version(self, token):
        data = token.to_dict()
        data["version"] = 99

        with pytest.raises(ValueError, match="version"):
            SuspendedRun.from_dict(data)

    def test_frozen(self, token):
        with pytest.raises(AttributeError):
            token.iterations = 0


class TestMessage:
    """Tests for Message serialization."""

    def test_tool_message_dict(self):
        message = Message.tool("call_1", "done")

        assert message.to_dict() == {"role": "tool", "content": "done", "tool_call_id": "call_1"}

    def test_assistant_tool_calls_dict(self):
        call = ToolCallRequest(id="c1", tool_name="read_file", raw_arguments='{"path": "a"}')

        data = Message.assistant("", [call]).to_dict()

        assert data["tool_calls"] == [
            {
                "id": "c1",
                "type": "function",
                "function": {"name": "read_file", "arguments": '{"path": "a"}'},
            }
        ]

    def test_ids_unique(self):
        assert Message.user("a").id != Message.user("a").id


class TestAgentConfig:
    """Tests for AgentConfig."""

    def test_from_config(self):
        config = Config.model_validate(
            {"agent": {"max_iterations": 4, "max_result_chars": 100}, "providers": {"temperature": 0.1}}
        )

        agent_config = AgentConfig.from_config(config)

        assert agent_config.max_iterations == 4
        assert agent_config.max_result_chars == 100
        assert agent_config.temperature == 0.1

    def test_bounds(self):
        with pytest.raises(ValueError):
            AgentConfig(max_iterations=0)


class TestAgentEvent:
    """Tests for AgentEvent."""

    def test_enum_stored_as_value(self):
        event = AgentEvent(event_type=EventType.TOOL_START, iteration=0, tool_name="read_file")

        assert event.event_type == "tool_start"


class TestPrompts:
    """Tests for mode system prompts."""

    def test_every_mode_has_prompt(self):
        assert set(SYSTEM_PROMPTS) == set(AgentMode)

    def test_lookup_by_value(self):
        assert get_system_prompt("plan") == get_system_prompt(AgentMode.PLAN)
        assert get_system_prompt(AgentMode.AGENT) != get_system_prompt(AgentMode.CHAT)
