"""Built-in tools for the Waypoint agent.

File access (read, write, delete to trash, list, create directory), content
search, shell commands behind the approval gate, and web search.
"""

from waypoint.tools.builtin.command import RunCommandTool
from waypoint.tools.builtin.file import (
    CreateDirectoryTool,
    DeleteFileTool,
    ListDirectoryTool,
    ReadFileTool,
    WriteFileTool,
)
from waypoint.tools.builtin.registry_utils import register_builtin_tools
from waypoint.tools.builtin.search import SearchFilesTool
from waypoint.tools.builtin.web import WebSearchTool

__all__ = [
    "CreateDirectoryTool",
    "DeleteFileTool",
    "ListDirectoryTool",
    "ReadFileTool",
    "RunCommandTool",
    "SearchFilesTool",
    "WebSearchTool",
    "WriteFileTool",
    "register_builtin_tools",
]
