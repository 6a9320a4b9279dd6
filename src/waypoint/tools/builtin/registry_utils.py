"""Utility functions for tool registry setup."""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from waypoint.tools.builtin.command import RunCommandTool
from waypoint.tools.builtin.file import (
    CreateDirectoryTool,
    DeleteFileTool,
    ListDirectoryTool,
    ReadFileTool,
    WriteFileTool,
)
from waypoint.tools.builtin.search import SearchFilesTool
from waypoint.tools.builtin.web import WebSearchTool
from waypoint.tools.registry import ToolRegistry

if TYPE_CHECKING:
    from waypoint.config.schema import ToolsConfig

logger = logging.getLogger(__name__)


def register_builtin_tools(
    registry: ToolRegistry,
    config: Optional["ToolsConfig"] = None,
    workspace_root: Optional[Path] = None,
) -> None:
    """Register all built-in tools.

    Args:
        registry: ToolRegistry to register tools in
        config: Tools configuration. Defaults apply when omitted.
        workspace_root: Overrides config.workspace_root
    """
    if config is None:
        from waypoint.config.schema import ToolsConfig

        config = ToolsConfig()

    root = Path(workspace_root or config.workspace_root).expanduser().resolve()

    tools = [
        ReadFileTool(root, max_size=config.max_read_size),
        WriteFileTool(root),
        DeleteFileTool(root, trash_dir_name=config.trash_dir_name),
        ListDirectoryTool(root, trash_dir_name=config.trash_dir_name),
        CreateDirectoryTool(root),
        SearchFilesTool(
            root,
            display_limit=config.search_display_limit,
            scan_limit=config.search_scan_limit,
        ),
        RunCommandTool(root),
        WebSearchTool(
            api_key=config.brave_api_key,
            max_results=config.web_search_max_results,
        ),
    ]

    for tool in tools:
        registry.register(tool)

    logger.info(f"Registered {len(tools)} built-in tools in {root}")
