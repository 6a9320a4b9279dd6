"""File operation tools."""

import logging
import os
import uuid
from pathlib import Path
from typing import Optional

from waypoint.storage.trash import TrashManager
from waypoint.tools.base import ToolExecutionError
from waypoint.tools.builtin.workspace import WorkspaceTool
from waypoint.tools.models import ToolParameter

logger = logging.getLogger(__name__)

DEFAULT_MAX_READ_SIZE = 2 * 1024 * 1024


def _path_parameter(description: str, required: bool = True) -> ToolParameter:
    return ToolParameter(name="path", type="string", description=description, required=required)


class ReadFileTool(WorkspaceTool):
    """Read file contents.

    Safe read-only operation that returns a text file's content.
    """

    def __init__(
        self, workspace_root: Optional[Path] = None, max_size: int = DEFAULT_MAX_READ_SIZE
    ):
        """Initialize the tool.

        Args:
            workspace_root: Base for relative paths
            max_size: Largest file, in bytes, the tool will read
        """
        self.max_size = max_size
        super().__init__(workspace_root)

    @property
    def name(self) -> str:
        """Tool name."""
        return "read_file"

    @property
    def description(self) -> str:
        """Tool description."""
        return "Read the contents of a file"

    @property
    def parameters(self) -> list[ToolParameter]:
        """Tool parameters."""
        return [_path_parameter("The file path relative to workspace root")]

    async def execute(self, **kwargs) -> str:
        """Read file contents.

        Args:
            path: Path to file

        Returns:
            The file content
        """
        path = kwargs["path"]
        file_path = self.resolve(path)
        logger.info(f"Reading file: {path}")

        if not file_path.exists():
            raise ToolExecutionError(f"File not found: {path}")
        if file_path.is_dir():
            raise ToolExecutionError(f"Is a directory: {path}")
        if file_path.stat().st_size > self.max_size:
            raise ToolExecutionError(f"File too large: {path} (max: {self.max_size} bytes)")

        try:
            return file_path.read_text(encoding="utf-8")
        except UnicodeDecodeError:
            raise ToolExecutionError(f"Not a UTF-8 text file: {path}") from None


class WriteFileTool(WorkspaceTool):
    """Write content to a file.

    Creates parent directories as needed and replaces the target atomically.
    """

    @property
    def name(self) -> str:
        """Tool name."""
        return "write_file"

    @property
    def description(self) -> str:
        """Tool description."""
        return "Create or overwrite a file with the given content"

    @property
    def parameters(self) -> list[ToolParameter]:
        """Tool parameters."""
        return [
            _path_parameter("The file path relative to workspace root"),
            ToolParameter(
                name="content",
                type="string",
                description="The content to write to the file",
                required=True,
            ),
        ]

    async def execute(self, **kwargs) -> str:
        """Write file contents.

        Args:
            path: Path to file
            content: Text to write

        Returns:
            Confirmation with the number of bytes written
        """
        path = kwargs["path"]
        content = str(kwargs["content"])
        file_path = self.resolve(path)
        logger.info(f"Writing file: {path}")

        if file_path.is_dir():
            raise ToolExecutionError(f"Is a directory: {path}")

        file_path.parent.mkdir(parents=True, exist_ok=True)

        data = content.encode("utf-8")
        temp_path = file_path.with_name(f".{file_path.name}.tmp.{uuid.uuid4().hex}")
        try:
            temp_path.write_bytes(data)
            os.replace(temp_path, file_path)
        finally:
            if temp_path.exists():
                temp_path.unlink()

        return f"File written successfully: {path} ({len(data)} bytes)"


class DeleteFileTool(WorkspaceTool):
    """Delete a file or directory by moving it to the workspace trash."""

    def __init__(self, workspace_root: Optional[Path] = None, trash_dir_name: str = ".trash"):
        """Initialize the tool.

        Args:
            workspace_root: Base for relative paths
            trash_dir_name: Trash directory inside the workspace
        """
        super().__init__(workspace_root)
        self.trash = TrashManager(self.workspace_root, trash_dir_name)

    @property
    def name(self) -> str:
        """Tool name."""
        return "delete_file"

    @property
    def description(self) -> str:
        """Tool description."""
        return "Delete a file or directory (moves to trash)"

    @property
    def parameters(self) -> list[ToolParameter]:
        """Tool parameters."""
        return [_path_parameter("The file or directory path to delete")]

    async def execute(self, **kwargs) -> str:
        path = kwargs["path"]
        target = self.resolve(path)

        if not target.exists():
            raise ToolExecutionError(f"File not found: {path}")
        if target == self.workspace_root:
            raise ToolExecutionError("Refusing to delete the workspace root")
        if target == self.trash.trash_dir or self.trash.trash_dir in target.parents:
            raise ToolExecutionError(f"Cannot delete items inside the trash: {path}")

        item = self.trash.move_to_trash(
            target, self.display_path(target), kwargs.get("tool_call_id", "")
        )
        return f"File deleted: {path} (moved to trash as {item.trash_id})"


class ListDirectoryTool(WorkspaceTool):
    """List directory contents."""

    def __init__(self, workspace_root: Optional[Path] = None, trash_dir_name: str = ".trash"):
        self.trash_dir_name = trash_dir_name
        super().__init__(workspace_root)

    @property
    def name(self) -> str:
        """Tool name."""
        return "list_directory"

    @property
    def description(self) -> str:
        """Tool description."""
        return "List all files and directories in a given path"

    @property
    def parameters(self) -> list[ToolParameter]:
        """Tool parameters."""
        return [
            _path_parameter(
                'The directory path to list (use "." for workspace root)', required=False
            )
        ]

    async def execute(self, **kwargs) -> str:
        """List a directory.

        Returns:
            One entry per line, directories suffixed with "/"
        """
        path = kwargs.get("path") or "."
        dir_path = self.resolve(path)

        if not dir_path.exists():
            raise ToolExecutionError(f"File not found: {path}")
        if not dir_path.is_dir():
            raise ToolExecutionError(f"Not a directory: {path}")

        entries = []
        for entry in sorted(dir_path.iterdir(), key=lambda p: p.name):
            if dir_path == self.workspace_root and entry.name == self.trash_dir_name:
                continue
            entries.append(f"{entry.name}/" if entry.is_dir() else entry.name)

        if not entries:
            return "(empty directory)"
        return "\n".join(entries)


class CreateDirectoryTool(WorkspaceTool):
    """Create a directory, tolerating one that already exists."""

    @property
    def name(self) -> str:
        """Tool name."""
        return "create_directory"

    @property
    def description(self) -> str:
        """Tool description."""
        return "Create a new directory"

    @property
    def parameters(self) -> list[ToolParameter]:
        """Tool parameters."""
        return [_path_parameter("The directory path to create")]

    async def execute(self, **kwargs) -> str:
        path = kwargs["path"]
        dir_path = self.resolve(path)

        if dir_path.is_dir():
            return f"Directory already exists: {path}"
        if dir_path.exists():
            raise ToolExecutionError(f"Already exists: {path}")

        dir_path.mkdir(parents=True, exist_ok=True)
        return f"Directory created: {path}"
