"""app/storage/__init__.py — public API of the storage package."""

from app.storage.base import FileStorage, StoredFile, StorageUsage
from app.storage.local_storage import LocalFileStorage
from app.storage.registry import FileRegistry

__all__ = [
    "FileRegistry",
    "FileStorage",
    "LocalFileStorage",
    "StorageUsage",
    "StoredFile",
]
