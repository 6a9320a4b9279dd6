"""Tests for built-in file operation tools."""

import pytest

from waypoint.tools.base import ToolExecutionError, ToolInputError
from waypoint.tools.builtin.file import (
    CreateDirectoryTool,
    DeleteFileTool,
    ListDirectoryTool,
    ReadFileTool,
    WriteFileTool,
)
from waypoint.tools.builtin.workspace import resolve_path


class TestResolvePath:
    """Tests for workspace path resolution."""

    def test_relative_joined_to_root(self, workspace):
        assert resolve_path(workspace, "src/app.py") == workspace / "src" / "app.py"

    def test_absolute_kept(self, workspace, temp_dir):
        assert resolve_path(workspace, str(temp_dir)) == temp_dir

    def test_nul_rejected(self, workspace):
        with pytest.raises(ToolInputError):
            resolve_path(workspace, "bad\0name")


class TestReadFileTool:
    """Tests for ReadFileTool."""

    def test_tool_properties(self, workspace):
        tool = ReadFileTool(workspace)

        assert tool.name == "read_file"
        assert tool.requires_approval is False
        params = {p.name: p for p in tool.parameters}
        assert params["path"].required is True

    @pytest.mark.asyncio
    async def test_read_file_success(self, workspace):
        (workspace / "test.txt").write_text("Hello, World!")

        result = await ReadFileTool(workspace).execute(path="test.txt", tool_call_id="c1")

        assert result == "Hello, World!"

    @pytest.mark.asyncio
    async def test_read_file_not_found(self, workspace):
        with pytest.raises(ToolExecutionError, match="File not found: nope.txt"):
            await ReadFileTool(workspace).execute(path="nope.txt")

    @pytest.mark.asyncio
    async def test_read_directory(self, workspace):
        (workspace / "sub").mkdir()

        with pytest.raises(ToolExecutionError, match="Is a directory"):
            await ReadFileTool(workspace).execute(path="sub")

    @pytest.mark.asyncio
    async def test_read_too_large(self, workspace):
        (workspace / "big.bin").write_text("x" * 100)

        with pytest.raises(ToolExecutionError, match="File too large"):
            await ReadFileTool(workspace, max_size=10).execute(path="big.bin")

    @pytest.mark.asyncio
    async def test_read_non_utf8(self, workspace):
        (workspace / "latin.txt").write_bytes(b"\xff\xfe\xfa")

        with pytest.raises(ToolExecutionError, match="Not a UTF-8 text file"):
            await ReadFileTool(workspace).execute(path="latin.txt")


class TestWriteFileTool:
    """Tests for WriteFileTool."""

    @pytest.mark.asyncio
    async def test_write_creates_parents(self, workspace):
        result = await WriteFileTool(workspace).execute(path="docs/readme.md", content="# Hi")

        assert (workspace / "docs" / "readme.md").read_text() == "# Hi"
        assert result == "File written successfully: docs/readme.md (4 bytes)"

    @pytest.mark.asyncio
    async def test_overwrite(self, workspace):
        target = workspace / "a.txt"
        target.write_text("old")

        await WriteFileTool(workspace).execute(path="a.txt", content="new")

        assert target.read_text() == "new"
        assert sorted(p.name for p in workspace.iterdir()) == ["a.txt"]

    @pytest.mark.asyncio
    async def test_empty_content_allowed(self, workspace):
        tool = WriteFileTool(workspace)
        tool.validate_input(path="empty.txt", content="")

        result = await tool.execute(path="empty.txt", content="")

        assert (workspace / "empty.txt").read_text() == ""
        assert "(0 bytes)" in result

    def test_missing_content_rejected(self, workspace):
        with pytest.raises(ToolInputError, match="content"):
            WriteFileTool(workspace).validate_input(path="a.txt")

    @pytest.mark.asyncio
    async def test_write_to_directory_fails(self, workspace):
        (workspace / "sub").mkdir()

        with pytest.raises(ToolExecutionError, match="Is a directory"):
            await WriteFileTool(workspace).execute(path="sub", content="x")


class TestDeleteFileTool:
    """Tests for DeleteFileTool."""

    @pytest.mark.asyncio
    async def test_delete_moves_to_trash(self, workspace):
        (workspace / "old.txt").write_text("bye")
        tool = DeleteFileTool(workspace)

        result = await tool.execute(path="old.txt", tool_call_id="c1")

        assert not (workspace / "old.txt").exists()
        items = tool.trash.list_items()
        assert len(items) == 1
        assert items[0].original_path == "old.txt"
        assert items[0].request_id == "c1"
        assert result == f"File deleted: old.txt (moved to trash as {items[0].trash_id})"

    @pytest.mark.asyncio
    async def test_delete_directory(self, workspace):
        (workspace / "build").mkdir()
        (workspace / "build" / "out.o").write_text("x")
        tool = DeleteFileTool(workspace)

        await tool.execute(path="build")

        assert not (workspace / "build").exists()
        assert tool.trash.list_items()[0].item_type == "directory"

    @pytest.mark.asyncio
    async def test_delete_missing(self, workspace):
        with pytest.raises(ToolExecutionError, match="File not found"):
            await DeleteFileTool(workspace).execute(path="ghost.txt")

    @pytest.mark.asyncio
    async def test_refuses_workspace_root(self, workspace):
        with pytest.raises(ToolExecutionError, match="workspace root"):
            await DeleteFileTool(workspace).execute(path=".")

    @pytest.mark.asyncio
    async def test_refuses_trash_contents(self, workspace):
        (workspace / "a.txt").write_text("a")
        tool = DeleteFileTool(workspace)
        await tool.execute(path="a.txt")

        with pytest.raises(ToolExecutionError, match="inside the trash"):
            await tool.execute(path=".trash")


class TestListDirectoryTool:
    """Tests for ListDirectoryTool."""

    @pytest.mark.asyncio
    async def test_list_sorted_with_directory_suffix(self, workspace):
        (workspace / "b.txt").write_text("")
        (workspace / "a.txt").write_text("")
        (workspace / "src").mkdir()

        result = await ListDirectoryTool(workspace).execute()

        assert result.splitlines() == ["a.txt", "b.txt", "src/"]

    @pytest.mark.asyncio
    async def test_trash_hidden_at_root(self, workspace):
        (workspace / ".trash").mkdir()
        (workspace / "main.py").write_text("")

        result = await ListDirectoryTool(workspace).execute(path=".")

        assert result == "main.py"

    @pytest.mark.asyncio
    async def test_empty_directory(self, workspace):
        assert await ListDirectoryTool(workspace).execute() == "(empty directory)"

    @pytest.mark.asyncio
    async def test_not_a_directory(self, workspace):
        (workspace / "f.txt").write_text("")

        with pytest.raises(ToolExecutionError, match="Not a directory"):
            await ListDirectoryTool(workspace).execute(path="f.txt")


class TestCreateDirectoryTool:
    """Tests for CreateDirectoryTool."""

    @pytest.mark.asyncio
    async def test_create_nested(self, workspace):
        result = await CreateDirectoryTool(workspace).execute(path="a/b/c")

        assert (workspace / "a" / "b" / "c").is_dir()
        assert result == "Directory created: a/b/c"

    @pytest.mark.asyncio
    async def test_existing_directory_tolerated(self, workspace):
        (workspace / "src").mkdir()

        result = await CreateDirectoryTool(workspace).execute(path="src")

        assert result == "Directory already exists: src"

    @pytest.mark.asyncio
    async def test_existing_file_conflicts(self, workspace):
        (workspace / "src").write_text("")

        with pytest.raises(ToolExecutionError, match="Already exists"):
            await CreateDirectoryTool(workspace).execute(path="src")
