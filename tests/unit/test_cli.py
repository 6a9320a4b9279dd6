"""
Unit tests for CLI commands.
"""

import json
from unittest.mock import patch

import pytest
import yaml
from typer.testing import CliRunner

from waypoint import __version__
from waypoint.agent import AgentConfig, Orchestrator
from waypoint.cli.app import app
from waypoint.storage.trash import TrashManager


@pytest.fixture
def in_workspace(workspace, monkeypatch):
    """Run CLI commands from inside the workspace."""
    monkeypatch.chdir(workspace)
    return workspace


def test_version(cli_runner: CliRunner) -> None:
    """Test --version flag."""
    result = cli_runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_help(cli_runner: CliRunner) -> None:
    """Test --help flag."""
    result = cli_runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "waypoint" in result.stdout
    for command in ("run", "tools", "trash", "config"):
        assert command in result.stdout


class TestToolsCommand:
    """Tests for waypoint tools."""

    def test_list_agent_mode(self, cli_runner: CliRunner, in_workspace) -> None:
        result = cli_runner.invoke(app, ["tools", "list"])

        assert result.exit_code == 0
        assert "read_file" in result.stdout
        assert "run_command" in result.stdout

    def test_list_chat_mode(self, cli_runner: CliRunner, in_workspace) -> None:
        result = cli_runner.invoke(app, ["tools", "list", "--mode", "chat"])

        assert result.exit_code == 0
        assert "No tools are exposed in chat mode." in result.stdout


class TestConfigCommand:
    """Tests for waypoint config."""

    def test_show_section_json(self, cli_runner: CliRunner, in_workspace) -> None:
        result = cli_runner.invoke(app, ["config", "show", "agent", "--json"])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["max_iterations"] == 10

    def test_show_picks_up_project_config(self, cli_runner: CliRunner, in_workspace) -> None:
        (in_workspace / ".waypoint").mkdir()
        (in_workspace / ".waypoint" / "project.yaml").write_text(
            yaml.safe_dump({"agent": {"max_iterations": 4}})
        )

        result = cli_runner.invoke(app, ["config", "show", "agent.max_iterations", "--json"])

        assert result.exit_code == 0
        assert result.stdout.strip() == "4"

    def test_show_unknown_section(self, cli_runner: CliRunner, in_workspace) -> None:
        result = cli_runner.invoke(app, ["config", "show", "nonexistent"])

        assert result.exit_code == 1
        assert "not found" in result.stdout

    def test_sources(self, cli_runner: CliRunner, in_workspace) -> None:
        result = cli_runner.invoke(app, ["config", "sources"])

        assert result.exit_code == 0
        assert "global" in result.stdout


class TestTrashCommand:
    """Tests for waypoint trash."""

    def test_list_empty(self, cli_runner: CliRunner, in_workspace) -> None:
        result = cli_runner.invoke(app, ["trash", "list"])

        assert result.exit_code == 0
        assert "Trash is empty." in result.stdout

    def test_restore(self, cli_runner: CliRunner, in_workspace) -> None:
        (in_workspace / "gone.txt").write_text("back")
        item = TrashManager(in_workspace).move_to_trash(in_workspace / "gone.txt", "gone.txt")

        result = cli_runner.invoke(app, ["trash", "restore", item.trash_id])

        assert result.exit_code == 0
        assert (in_workspace / "gone.txt").read_text() == "back"

    def test_restore_unknown(self, cli_runner: CliRunner, in_workspace) -> None:
        result = cli_runner.invoke(app, ["trash", "restore", "missing-id"])

        assert result.exit_code == 1
        assert "not found" in result.stdout

    def test_purge_all_with_confirmation(self, cli_runner: CliRunner, in_workspace) -> None:
        (in_workspace / "a.txt").write_text("a")
        manager = TrashManager(in_workspace)
        manager.move_to_trash(in_workspace / "a.txt", "a.txt")

        result = cli_runner.invoke(app, ["trash", "purge"], input="y\n")

        assert result.exit_code == 0
        assert "Purged 1 item(s)" in result.stdout
        assert manager.list_items() == []


class TestRunCommand:
    """Tests for waypoint run."""

    def _orchestrator(self, model_client, registry, gate) -> Orchestrator:
        return Orchestrator(model_client, registry, gate=gate, config=AgentConfig())

    def test_run_completes(
        self, cli_runner, in_workspace, model_client, registry, gate, text_reply
    ) -> None:
        model_client.queue(text_reply("All done"))
        orchestrator = self._orchestrator(model_client, registry, gate)

        with patch.object(Orchestrator, "from_config", return_value=orchestrator):
            result = cli_runner.invoke(app, ["run", "say hi"])

        assert result.exit_code == 0
        assert "All done" in result.stdout
        assert "Responses: 1" in result.stdout

    def test_run_rejects_command_when_declined(
        self, cli_runner, in_workspace, model_client, registry, gate, fake_executor, tool_reply, text_reply
    ) -> None:
        model_client.queue(
            tool_reply(("c1", "run_command", '{"command": "make clean"}')),
            text_reply("Understood, skipping."),
        )
        orchestrator = self._orchestrator(model_client, registry, gate)

        with patch.object(Orchestrator, "from_config", return_value=orchestrator):
            result = cli_runner.invoke(app, ["run", "clean the build"], input="n\n")

        assert result.exit_code == 0
        assert "Approval required" in result.stdout
        assert "make clean" in result.stdout
        assert "Command rejected" in result.stdout
        assert fake_executor.spawned == []

    def test_run_auto_approves_with_yes(
        self, cli_runner, in_workspace, model_client, registry, gate, fake_executor, tool_reply, text_reply
    ) -> None:
        model_client.queue(
            tool_reply(("c1", "run_command", '{"command": "make test"}')),
            text_reply("Tests pass."),
        )
        orchestrator = self._orchestrator(model_client, registry, gate)

        with patch.object(Orchestrator, "from_config", return_value=orchestrator):
            result = cli_runner.invoke(app, ["run", "run the tests", "--yes"])

        assert result.exit_code == 0
        assert [command for command, _ in fake_executor.spawned] == ["make test"]
        assert "Tests pass." in result.stdout

    def test_run_failure_exits_nonzero(
        self, cli_runner, in_workspace, model_client, registry, gate
    ) -> None:
        model_client.queue(RuntimeError("no API key"))
        orchestrator = self._orchestrator(model_client, registry, gate)

        with patch.object(Orchestrator, "from_config", return_value=orchestrator):
            result = cli_runner.invoke(app, ["run", "hello"])

        assert result.exit_code == 1
        assert "Run failed" in result.stdout
