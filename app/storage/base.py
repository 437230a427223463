"""
app/storage/base.py

Abstract interface for the file storage layer.

Design goals:
  - Services depend only on this interface, never on a concrete backend.
  - StoredFile and StorageUsage are the shared vocabulary across all layers.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ── Shared data-transfer objects ──────────────────────────────────────────────

@dataclass
class StoredFile:
    """
    One accepted upload.

    Attributes:
        id             : Registry id, assigned on registration.
        tenant_id      : Dive center that owns the file.
        entity_type    : Kind of record the file is attached to ("customer", ...).
        entity_id      : Id of that record.
        category       : Upload category it was validated against.
        original_name  : Client filename.
        storage_path   : Backend-relative path of the stored bytes.
        file_size      : Size in bytes.
        mime_type      : Client-declared MIME type.
        storage_driver : Name of the backend holding the bytes.
    """

    tenant_id: int
    entity_type: str
    entity_id: str
    category: str
    original_name: str
    storage_path: str
    file_size: int
    mime_type: Optional[str]
    storage_driver: str
    id: int = 0
    created_at: datetime = field(default_factory=utcnow)


@dataclass
class StorageUsage:
    """Running totals of what one tenant has stored."""

    tenant_id: int
    storage_bytes: int = 0
    file_count: int = 0
    last_updated: datetime = field(default_factory=utcnow)

    @property
    def formatted_storage(self) -> str:
        """Human-readable size, e.g. "1.5 MB"."""
        size = float(self.storage_bytes)
        units = ["B", "KB", "MB", "GB", "TB"]
        i = 0
        while size > 1024 and i < len(units) - 1:
            size /= 1024
            i += 1
        return f"{round(size, 2):g} {units[i]}"


# ── Abstract base ──────────────────────────────────────────────────────────────

class FileStorage(ABC):
    """
    Contract every storage backend must fulfil.

    Paths are backend-relative, forward-slash separated strings such as
    ``uploads/tenants/blue-reef/customer/42/customer-photo/<uuid>.jpg``.
    """

    driver: str = "abstract"

    @abstractmethod
    def upload(self, path: str, source: Path) -> str:
        """
        Copy the local file ``source`` to ``path``.

        Returns:
            The storage path the file was written to.

        Raises:
            StorageError: If the write fails.
        """

    @abstractmethod
    def delete(self, path: str) -> bool:
        """
        Remove the file at ``path``.

        Returns:
            True if a file was removed, False if none existed.

        Raises:
            StorageError: If the backend operation fails.
        """

    @abstractmethod
    def exists(self, path: str) -> bool:
        """Return True when a file is stored at ``path``."""

    @abstractmethod
    def absolute_path(self, path: str) -> Path:
        """Return the local filesystem path backing ``path`` (for downloads)."""
