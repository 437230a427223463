"""
app/storage/local_storage.py

Concrete FileStorage backed by a directory on the local disk.
"""

from __future__ import annotations

import shutil
from pathlib import Path

from app.core.config import settings
from app.core.exceptions import StorageError
from app.core.logger import get_logger
from app.storage.base import FileStorage

logger = get_logger(__name__)


class LocalFileStorage(FileStorage):
    """
    Stores files under a root directory.

    Every path is resolved against the root and must stay inside it;
    ``../`` tricks raise StorageError instead of writing elsewhere.
    """

    driver = "local"

    def __init__(self, root: str | Path | None = None) -> None:
        """
        Args:
            root : Directory holding stored files.
                   Defaults to ``settings.upload_root``.
        """
        self._root = Path(root or settings.upload_root).resolve()

    @property
    def root(self) -> Path:
        return self._root

    # ── FileStorage interface ──────────────────────────────────────────────────

    def upload(self, path: str, source: Path) -> str:
        target = self.absolute_path(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(source, target)
        except OSError as exc:
            raise StorageError(f"Failed to store '{path}': {exc}") from exc

        logger.debug("Stored %s (%d bytes).", path, target.stat().st_size)
        return path

    def delete(self, path: str) -> bool:
        target = self.absolute_path(path)
        if not target.is_file():
            return False
        try:
            target.unlink()
        except OSError as exc:
            raise StorageError(f"Failed to delete '{path}': {exc}") from exc
        return True

    def exists(self, path: str) -> bool:
        return self.absolute_path(path).is_file()

    def absolute_path(self, path: str) -> Path:
        target = (self._root / path).resolve()
        if target != self._root and self._root not in target.parents:
            raise StorageError(f"Path escapes the storage root: '{path}'")
        return target
