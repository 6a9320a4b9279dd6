"""Content search tool."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

from waypoint.tools.base import ToolExecutionError
from waypoint.tools.builtin.workspace import WorkspaceTool
from waypoint.tools.models import TRUNCATION_MARKER, ToolParameter

logger = logging.getLogger(__name__)

# Dependency and build directories never worth searching
SKIP_DIRS = frozenset(
    {"node_modules", "__pycache__", "venv", "env", "target", "dist", "build", "site-packages"}
)

BINARY_SNIFF_BYTES = 8192


@dataclass(frozen=True)
class SearchMatch:
    """A single matching line."""

    path: str
    line: int
    text: str

    def format(self) -> str:
        return f"{self.path}:{self.line}: {self.text.strip()}"


def _is_binary(path: Path) -> bool:
    try:
        with open(path, "rb") as f:
            return b"\0" in f.read(BINARY_SNIFF_BYTES)
    except OSError:
        return True


class SearchFilesTool(WorkspaceTool):
    """Search for text across workspace files.

    Safe read-only, case-insensitive substring search. Hidden directories,
    dependency directories and binary files are skipped.
    """

    def __init__(
        self,
        workspace_root: Optional[Path] = None,
        display_limit: int = 20,
        scan_limit: int = 200,
    ):
        """Initialize the tool.

        Args:
            workspace_root: Base for relative paths
            display_limit: Matching lines included in the result
            scan_limit: Matches collected before the scan stops
        """
        self.display_limit = display_limit
        self.scan_limit = max(scan_limit, display_limit + 1)
        super().__init__(workspace_root)

    @property
    def name(self) -> str:
        """Tool name."""
        return "search_files"

    @property
    def description(self) -> str:
        """Tool description."""
        return "Search for text content across files in the workspace"

    @property
    def parameters(self) -> list[ToolParameter]:
        """Tool parameters."""
        return [
            ToolParameter(
                name="query",
                type="string",
                description="The text to search for",
                required=True,
            ),
            ToolParameter(
                name="path",
                type="string",
                description="Directory to search in (optional, defaults to workspace root)",
                required=False,
            ),
        ]

    def _iter_files(self, root: Path) -> Iterator[Path]:
        if root.is_file():
            yield root
            return
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames[:] = sorted(
                d for d in dirnames if not d.startswith(".") and d not in SKIP_DIRS
            )
            for filename in sorted(filenames):
                if not filename.startswith("."):
                    yield Path(dirpath) / filename

    def find_matches(self, query: str, root: Path) -> list[SearchMatch]:
        """Collect up to scan_limit matches under root, in walk order."""
        needle = query.lower()
        matches: list[SearchMatch] = []

        for file_path in self._iter_files(root):
            if _is_binary(file_path):
                continue
            try:
                with open(file_path, encoding="utf-8", errors="replace") as f:
                    for line_num, line in enumerate(f, start=1):
                        if needle in line.lower():
                            matches.append(
                                SearchMatch(self.display_path(file_path), line_num, line)
                            )
                            if len(matches) >= self.scan_limit:
                                return matches
            except OSError as e:
                logger.debug(f"Skipping unreadable file {file_path}: {e}")

        return matches

    async def execute(self, **kwargs) -> str:
        """Search file contents.

        Args:
            query: Text to search for
            path: Optional directory scope

        Returns:
            Matching lines as "path:line: text", capped at display_limit
        """
        query = str(kwargs["query"])
        path = kwargs.get("path") or "."
        root = self.resolve(path)

        if not query.strip():
            raise ToolExecutionError("Search query cannot be empty")
        if not root.exists():
            raise ToolExecutionError(f"File not found: {path}")

        logger.info(f"Searching {path} for '{query}'")
        matches = self.find_matches(query, root)
        if not matches:
            return "No matches found"

        lines = [match.format() for match in matches[: self.display_limit]]
        if len(matches) > self.display_limit:
            lines.append(TRUNCATION_MARKER)
        return "\n".join(lines)
