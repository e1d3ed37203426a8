# App Settings File Storage
# =========================
# Named disks backed by local directories
"""
Store uploaded setting files on named disks.

This module provides:
- DiskNotConfiguredError: Raised for unknown disk names
- LocalFileStorage: Disk name -> root directory file storage
"""

import logging
import os
import uuid
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class DiskNotConfiguredError(KeyError):
    """Raised when a disk name has no configured root."""

    def __init__(self, disk: str):
        self.disk = disk
        super().__init__(f"Disk [{disk}] is not configured")

    def __str__(self) -> str:
        return self.args[0]


class LocalFileStorage:
    """
    File storage over local directories.

    Features:
    - Each disk is a root directory, created on first write
    - Stored files get a random name that keeps the original extension
    - Paths are returned relative to the disk root
    """

    def __init__(self, disks: Dict[str, str], base_url: str = "/storage"):
        """
        Initialize the storage.

        Args:
            disks: Disk name to root directory
            base_url: URL prefix used by url() for the public disk
        """
        self.disks = {name: Path(root) for name, root in disks.items()}
        self.base_url = base_url.rstrip("/")

    def root(self, disk: str) -> Path:
        if disk not in self.disks:
            raise DiskNotConfiguredError(disk)
        return self.disks[disk]

    def _full_path(self, path: str, disk: str) -> Path:
        root = self.root(disk).resolve()
        full = (root / path.lstrip("/")).resolve()
        if root != full and root not in full.parents:
            raise ValueError(f"Path escapes disk [{disk}]: {path}")
        return full

    @staticmethod
    def hash_name(extension: str = "") -> str:
        """Random file name, with extension when given."""
        name = uuid.uuid4().hex
        extension = extension.lstrip(".")
        return f"{name}.{extension}" if extension else name

    def store(self, content: bytes, path: str, disk: str, extension: str = "") -> str:
        """
        Write content into directory path on disk.

        Returns:
            Stored file path relative to the disk root (e.g. "app/3f2a....png")
        """
        directory = path.strip("/")
        relative = "/".join(p for p in (directory, self.hash_name(extension)) if p)

        target = self._full_path(relative, disk)
        os.makedirs(target.parent, exist_ok=True)
        with open(target, "wb") as f:
            f.write(content)

        logger.info(f"Stored {len(content)} bytes at {disk}:{relative}")
        return relative

    def exists(self, path: str, disk: str) -> bool:
        if not path:
            return False
        return self._full_path(path, disk).is_file()

    def delete(self, path: str, disk: str) -> None:
        """Delete a file; missing files are ignored."""
        target = self._full_path(path, disk)
        if target.is_file():
            target.unlink()
            logger.info(f"Deleted {disk}:{path}")

    def get(self, path: str, disk: str) -> Optional[bytes]:
        """Read a stored file, or None when it does not exist."""
        target = self._full_path(path, disk)
        if not target.is_file():
            return None
        return target.read_bytes()

    def url(self, path: Optional[str], disk: str) -> Optional[str]:
        """Public URL of a stored file."""
        if not path:
            return None
        return f"{self.base_url}/{disk}/{path.lstrip('/')}"
