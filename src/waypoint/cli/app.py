"""
Main Typer application for the waypoint CLI.

This module defines the root CLI application and registers all command groups.
"""

from typing import Annotated

import typer

from waypoint import __version__
from waypoint.cli.commands import config, run, tools, trash
from waypoint.cli.output import print_info

# Create the main Typer app
app = typer.Typer(
    name="waypoint",
    help="Agentic tool-calling assistant with human approval for commands.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        print_info(f"waypoint version [green]{__version__}[/green]")
        raise typer.Exit()


# noinspection PyUnusedLocal
@app.callback()
def main_callback(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """
    [bold blue]waypoint[/bold blue] - agentic assistant for your workspace

    The agent reads, writes and searches files on its own; shell commands
    always wait for your approval.
    """


# Register command groups
app.add_typer(run.app, name="run")
app.add_typer(tools.app, name="tools")
app.add_typer(trash.app, name="trash")
app.add_typer(config.app, name="config")


def main() -> None:
    """Entry point for the waypoint console script."""
    app()


if __name__ == "__main__":
    main()
