"""
waypoint tools - Inspect the tools exposed to the model.

Usage:
    waypoint tools list
    waypoint tools list --mode chat
"""

from typing import Annotated

import typer
from rich.table import Table

from waypoint.agent import AgentMode
from waypoint.cli.output import console, print_error, print_info
from waypoint.config import ConfigurationError, get_config
from waypoint.tools.builtin import register_builtin_tools
from waypoint.tools.registry import ToolRegistry

app = typer.Typer(
    name="tools",
    help="Inspect available tools.",
)


@app.command("list")
def list_tools(
    mode: Annotated[
        AgentMode,
        typer.Option(
            "--mode",
            help="Show the tools exposed in this mode.",
            case_sensitive=False,
        ),
    ] = AgentMode.AGENT,
) -> None:
    """List the tools the model can call."""
    try:
        config = get_config()
    except ConfigurationError as e:
        print_error(f"Configuration error: {e}")
        raise typer.Exit(1)

    registry = ToolRegistry()
    register_builtin_tools(registry, config.tools)

    tools = registry.list_tools(mode)
    if not tools:
        print_info(f"No tools are exposed in {mode.value} mode.")
        return

    table = Table(title=f"Tools ({mode.value} mode)")
    table.add_column("Name", style="cyan")
    table.add_column("Approval", justify="center")
    table.add_column("Parameters")
    table.add_column("Description")

    for tool in tools:
        params = ", ".join(
            p.name if p.required else f"[dim]{p.name}?[/dim]" for p in tool.parameters
        )
        approval = "[yellow]required[/yellow]" if tool.requires_approval else "[green]no[/green]"
        table.add_row(tool.name, approval, params, tool.description)

    console.print(table)
