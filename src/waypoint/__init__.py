"""
Waypoint - agentic tool-calling orchestrator.

Drives multi-turn model conversations with side-effecting tools, pausing
for human approval and resuming from an explicit snapshot.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("waypoint")
except PackageNotFoundError:
    __version__ = "0.4.0"

__all__ = [
    "__version__",
]
