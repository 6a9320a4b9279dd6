"""
waypoint run - Work on a goal with tools, pausing for command approval.

Usage:
    waypoint run "Add a README for this project"
    waypoint run "What does main.py do?" --mode question
    waypoint run "Run the test suite" --yes
"""

import asyncio
from pathlib import Path
from typing import Annotated

import typer
from rich.markdown import Markdown

from waypoint.agent import AgentMode, Completed, Failed, Orchestrator, RunOutcome, Suspended
from waypoint.cli.output import (
    console,
    print_error,
    print_info,
    print_pending_command,
    print_session_stats,
    print_success,
    print_warning,
)
from waypoint.config import ConfigurationError, get_config
from waypoint.errors import WaypointError
from waypoint.logging_setup import configure_logging

app = typer.Typer(
    name="run",
    help="Work on a goal with the agent.",
    invoke_without_command=True,
)


async def _drive(
    orchestrator: Orchestrator,
    goal: str,
    mode: AgentMode,
    model: str | None,
    auto_approve: bool,
) -> RunOutcome:
    """Run to a terminal outcome, asking for a decision at each suspension."""
    outcome = await orchestrator.start_run([], goal, mode, model=model)

    while isinstance(outcome, Suspended):
        command = orchestrator.gate.get(outcome.pending_command_id)
        print_pending_command(command)

        if auto_approve or typer.confirm("Approve this command?", default=False):
            with console.status("[dim]Running command...[/dim]"):
                resolution = await orchestrator.approve(command.id)
        else:
            resolution = orchestrator.reject(command.id)
            print_warning("Command rejected")

        if resolution is None:
            # Already resolved elsewhere; nothing can resume this run
            print_error(f"Command {command.id} was already resolved")
            break

        outcome = await orchestrator.resume_run(outcome.resume_token, resolution)

    return outcome


@app.callback(invoke_without_command=True)
def run_goal(
    goal: Annotated[
        str,
        typer.Argument(help="What you want the agent to do."),
    ],
    mode: Annotated[
        AgentMode | None,
        typer.Option(
            "--mode",
            help="Orchestration mode: chat, agent, plan or question.",
            case_sensitive=False,
        ),
    ] = None,
    model: Annotated[
        str | None,
        typer.Option(
            "--model",
            "-m",
            help="Model to use (name or alias).",
        ),
    ] = None,
    workspace: Annotated[
        Path | None,
        typer.Option(
            "--workspace",
            "-w",
            help="Workspace root for file tools (default: current directory).",
        ),
    ] = None,
    yes: Annotated[
        bool,
        typer.Option(
            "--yes",
            "-y",
            help="Approve every command without asking.",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Show debug logging.",
        ),
    ] = False,
) -> None:
    """Run the agent on a goal until it answers, fails, or you stop it."""
    try:
        config = get_config()
    except ConfigurationError as e:
        print_error(f"Configuration error: {e}")
        raise typer.Exit(1)

    configure_logging(config.logging, verbose=verbose)

    if workspace is not None:
        config = config.model_copy(deep=True)
        config.tools.workspace_root = workspace.expanduser().resolve()

    run_mode = mode or AgentMode(config.agent.default_mode)
    orchestrator = Orchestrator.from_config(config)

    print_info(f"Mode: {run_mode.value} | Workspace: {config.tools.workspace_root}")

    try:
        outcome = asyncio.run(_drive(orchestrator, goal, run_mode, model, yes))
    except WaypointError as e:
        print_error(str(e))
        raise typer.Exit(1)

    if isinstance(outcome, Completed):
        console.print()
        console.print(Markdown(outcome.message.content or "(empty response)"))
        console.print()
        print_success(f"Completed after {outcome.iterations} tool iteration(s)")
    elif isinstance(outcome, Failed):
        print_error(f"Run failed: {outcome.reason}")
    else:
        print_warning("Run left suspended")

    print_session_stats(orchestrator.accumulator.stats)

    if not isinstance(outcome, Completed):
        raise typer.Exit(1)
