"""Shared base for tools that operate inside the workspace."""

from abc import ABC
from pathlib import Path
from typing import Optional

from waypoint.tools.base import Tool, ToolInputError


def resolve_path(workspace_root: Path, path: str) -> Path:
    """Resolve a path relative to the workspace root.

    Absolute paths are used as given.

    Raises:
        ToolInputError: If the path is not usable
    """
    if "\0" in path:
        raise ToolInputError(f"Path invalid: {path!r}")

    candidate = Path(path).expanduser()
    if not candidate.is_absolute():
        candidate = workspace_root / candidate
    return candidate.resolve()


class WorkspaceTool(Tool, ABC):
    """A tool that resolves its paths against a workspace root."""

    def __init__(self, workspace_root: Optional[Path] = None):
        """Initialize the tool.

        Args:
            workspace_root: Base for relative paths. Defaults to cwd.
        """
        self.workspace_root = Path(workspace_root or Path.cwd()).resolve()
        super().__init__()

    def resolve(self, path: str) -> Path:
        """Resolve a path against this tool's workspace."""
        return resolve_path(self.workspace_root, path)

    def display_path(self, path: Path) -> str:
        """Workspace-relative form of path for result text."""
        try:
            return path.relative_to(self.workspace_root).as_posix() or "."
        except ValueError:
            return str(path)
