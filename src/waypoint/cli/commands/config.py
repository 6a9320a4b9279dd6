"""
waypoint config - Inspect configuration.

Usage:
    waypoint config show
    waypoint config show agent
    waypoint config show --json
"""

import json
from typing import Annotated

import typer
import yaml
from rich.syntax import Syntax

from waypoint.cli.output import console, print_error, print_table
from waypoint.config import ConfigurationError, get_nested_value, load_config
from waypoint.storage.paths import find_project_config, get_global_config_path

app = typer.Typer(
    name="config",
    help="Inspect configuration.",
)


@app.command()
def show(
    section: Annotated[
        str | None,
        typer.Argument(help="Config section or key to show (e.g. 'agent', 'tools.workspace_root')."),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON."),
    ] = False,
) -> None:
    """Show the effective (merged) configuration."""
    try:
        config = load_config()
    except ConfigurationError as e:
        print_error(f"Configuration error: {e}")
        raise typer.Exit(1)

    data = config.model_dump(mode="json")
    if section:
        data = get_nested_value(data, section)
        if data is None:
            print_error(f"Section '{section}' not found in configuration.")
            raise typer.Exit(1)

    if json_output:
        console.print(Syntax(json.dumps(data, indent=2), "json"))
    else:
        output = yaml.dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True)
        console.print(Syntax(output, "yaml"))


@app.command()
def sources() -> None:
    """Show which configuration files are in effect."""
    global_path = get_global_config_path()
    project_path = find_project_config()
    rows = [
        ["global", str(global_path), "loaded" if global_path.exists() else "not found"],
        ["project", str(project_path) if project_path else "-", "loaded" if project_path else "not found"],
    ]
    print_table(["Source", "Path", "Status"], rows, title="Configuration Sources")
