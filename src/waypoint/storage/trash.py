"""
Reversible trash for the workspace.

Deleted items are moved to <workspace>/.trash/<YYYY-MM-DD>/<trash_id>/
next to a metadata.json describing where they came from, so they can be
restored or purged later.
"""

import hashlib
import json
import logging
import shutil
import uuid
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from waypoint.errors import WaypointError

logger = logging.getLogger(__name__)

METADATA_FILE = "metadata.json"


class TrashError(WaypointError):
    """Raised when a trash operation cannot be completed."""

    pass


class TrashItem(BaseModel):
    """Metadata stored alongside a trashed file or directory."""

    model_config = ConfigDict(populate_by_name=True)

    trash_id: str = Field(alias="trashId")
    original_path: str = Field(alias="originalPath")
    deleted_at: datetime = Field(alias="deletedAt")
    item_type: Literal["file", "directory"] = Field(alias="type")
    size: int = 0
    sha256: Optional[str] = None
    request_id: str = ""


def _hash_file(path: Path) -> str:
    digest = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(65536), b""):
            digest.update(chunk)
    return digest.hexdigest()


class TrashManager:
    """Moves workspace items into the trash and back."""

    def __init__(self, workspace_root: Path, trash_dir_name: str = ".trash") -> None:
        """
        Initialize the trash manager.

        Args:
            workspace_root: Workspace the trash belongs to.
            trash_dir_name: Trash directory name inside the workspace.
        """
        self.workspace_root = Path(workspace_root)
        self.trash_dir = self.workspace_root / trash_dir_name

    def move_to_trash(self, source: Path, original_path: str, request_id: str = "") -> TrashItem:
        """
        Move a file or directory into the trash.

        Args:
            source: Absolute path of the item.
            original_path: Path as the caller named it, used for restore.
            request_id: Id of the request that deleted it.

        Returns:
            Metadata of the trashed item.

        Raises:
            TrashError: If the item does not exist.
        """
        if not source.exists():
            raise TrashError(f"File not found: {original_path}")

        is_dir = source.is_dir()
        item = TrashItem(
            trash_id=str(uuid.uuid4()),
            original_path=original_path,
            deleted_at=datetime.now(timezone.utc),
            item_type="directory" if is_dir else "file",
            size=0 if is_dir else source.stat().st_size,
            sha256=None if is_dir else _hash_file(source),
            request_id=request_id,
        )

        item_dir = self.trash_dir / item.deleted_at.strftime("%Y-%m-%d") / item.trash_id
        item_dir.mkdir(parents=True, exist_ok=True)
        (item_dir / METADATA_FILE).write_text(
            item.model_dump_json(by_alias=True, indent=2), encoding="utf-8"
        )
        shutil.move(str(source), str(item_dir / (source.name or "item")))

        logger.info(f"Moved {original_path} to trash as {item.trash_id}")
        return item

    def _item_dirs(self) -> list[Path]:
        if not self.trash_dir.is_dir():
            return []
        return [
            item_dir
            for date_dir in self.trash_dir.iterdir()
            if date_dir.is_dir()
            for item_dir in date_dir.iterdir()
            if item_dir.is_dir()
        ]

    @staticmethod
    def _read_metadata(item_dir: Path) -> Optional[TrashItem]:
        try:
            data = json.loads((item_dir / METADATA_FILE).read_text(encoding="utf-8"))
            return TrashItem.model_validate(data)
        except (OSError, ValueError, ValidationError) as e:
            logger.warning(f"Skipping unreadable trash entry {item_dir}: {e}")
            return None

    def list_items(self) -> list[TrashItem]:
        """Trashed items, newest first."""
        items = [
            item for item in map(self._read_metadata, self._item_dirs()) if item is not None
        ]
        return sorted(items, key=lambda item: item.deleted_at, reverse=True)

    def find(self, trash_id: str) -> Optional[tuple[TrashItem, Path]]:
        """
        Locate a trashed item.

        Returns:
            Tuple of metadata and the trashed payload path, or None.
        """
        for item_dir in self._item_dirs():
            if item_dir.name != trash_id:
                continue
            item = self._read_metadata(item_dir)
            if item is None:
                continue
            for entry in item_dir.iterdir():
                if entry.name != METADATA_FILE:
                    return item, entry
        return None

    def restore(self, trash_id: str, to_path: Optional[Path] = None) -> Path:
        """
        Restore a trashed item to its original location.

        Args:
            trash_id: Id of the trashed item.
            to_path: Alternative destination.

        Returns:
            Path the item was restored to.

        Raises:
            TrashError: If the item is unknown or the destination exists.
        """
        found = self.find(trash_id)
        if found is None:
            raise TrashError(f"Trash item not found: {trash_id}")
        item, payload = found

        if to_path is not None:
            destination = Path(to_path)
        else:
            destination = Path(item.original_path)
            if not destination.is_absolute():
                destination = self.workspace_root / destination

        if destination.exists():
            raise TrashError(f"Already exists: {destination}")

        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.move(str(payload), str(destination))
        shutil.rmtree(payload.parent, ignore_errors=True)

        logger.info(f"Restored trash item {trash_id} to {destination}")
        return destination

    def purge(
        self, trash_id: Optional[str] = None, older_than_days: Optional[int] = None
    ) -> list[str]:
        """
        Permanently delete trashed items.

        Args:
            trash_id: Purge only this item.
            older_than_days: Purge only items deleted before this many days ago.

        Returns:
            Ids of purged items.

        Raises:
            TrashError: If trash_id is given but unknown.
        """
        purged: list[str] = []

        if trash_id is not None:
            found = self.find(trash_id)
            if found is None:
                raise TrashError(f"Trash item not found: {trash_id}")
            shutil.rmtree(found[1].parent)
            purged.append(trash_id)
        else:
            cutoff = None
            if older_than_days is not None:
                cutoff = datetime.now(timezone.utc) - timedelta(days=older_than_days)
            for item in self.list_items():
                if cutoff is not None and item.deleted_at >= cutoff:
                    continue
                found = self.find(item.trash_id)
                if found is not None:
                    shutil.rmtree(found[1].parent, ignore_errors=True)
                    purged.append(item.trash_id)

        self._remove_empty_date_dirs()
        if purged:
            logger.info(f"Purged {len(purged)} trash items")
        return purged

    def _remove_empty_date_dirs(self) -> None:
        if not self.trash_dir.is_dir():
            return
        for date_dir in self.trash_dir.iterdir():
            if date_dir.is_dir() and not any(date_dir.iterdir()):
                date_dir.rmdir()
