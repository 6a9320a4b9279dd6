"""
waypoint trash - Manage files deleted by the agent.

Usage:
    waypoint trash list
    waypoint trash restore <trash-id>
    waypoint trash purge [<trash-id>] [--older-than 30]
"""

from pathlib import Path
from typing import Annotated

import typer

from waypoint.cli.output import format_size, print_error, print_info, print_success, print_table
from waypoint.config import ConfigurationError, get_config
from waypoint.storage.trash import TrashError, TrashManager

app = typer.Typer(
    name="trash",
    help="List, restore or purge trashed files.",
)


def _get_manager() -> TrashManager:
    try:
        config = get_config()
    except ConfigurationError as e:
        print_error(f"Configuration error: {e}")
        raise typer.Exit(1)
    return TrashManager(config.tools.workspace_root, config.tools.trash_dir_name)


@app.command("list")
def list_items() -> None:
    """List trashed items, newest first."""
    manager = _get_manager()
    items = manager.list_items()

    if not items:
        print_info("Trash is empty.")
        return

    rows = [
        [
            item.trash_id,
            item.original_path,
            item.item_type,
            format_size(item.size) if item.item_type == "file" else "-",
            item.deleted_at.astimezone().strftime("%Y-%m-%d %H:%M"),
        ]
        for item in items
    ]
    print_table(["ID", "Original Path", "Type", "Size", "Deleted"], rows, title="Trash")


@app.command("restore")
def restore(
    trash_id: Annotated[str, typer.Argument(help="ID of the item to restore.")],
    to: Annotated[
        Path | None,
        typer.Option("--to", help="Restore to this path instead of the original."),
    ] = None,
) -> None:
    """Restore a trashed item."""
    manager = _get_manager()
    try:
        destination = manager.restore(trash_id, to)
    except TrashError as e:
        print_error(str(e))
        raise typer.Exit(1)
    print_success(f"Restored to {destination}")


@app.command("purge")
def purge(
    trash_id: Annotated[
        str | None,
        typer.Argument(help="ID of the item to purge (default: all)."),
    ] = None,
    older_than: Annotated[
        int | None,
        typer.Option("--older-than", help="Only purge items older than this many days."),
    ] = None,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Do not ask for confirmation."),
    ] = False,
) -> None:
    """Permanently delete trashed items."""
    manager = _get_manager()

    if trash_id is None and not yes:
        scope = f"older than {older_than} days" if older_than is not None else "in the trash"
        if not typer.confirm(f"Permanently delete all items {scope}?", default=False):
            raise typer.Exit(0)

    try:
        purged = manager.purge(trash_id, older_than)
    except TrashError as e:
        print_error(str(e))
        raise typer.Exit(1)
    print_success(f"Purged {len(purged)} item(s)")
