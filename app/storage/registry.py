"""
app/storage/registry.py

In-memory index of stored files and per-tenant usage totals.

The upload controller runs validation and storage in Starlette's thread
pool while lookups run on the event loop, so every read and write of the
index holds the same lock.
"""

from __future__ import annotations

import itertools
import threading
from dataclasses import replace
from typing import Dict, List, Optional

from app.storage.base import StorageUsage, StoredFile, utcnow


class FileRegistry:
    """Keeps StoredFile records by id and usage totals by tenant."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self._files: Dict[int, StoredFile] = {}
        self._usage: Dict[int, StorageUsage] = {}

    def add(self, stored: StoredFile) -> StoredFile:
        """Assign an id to ``stored``, index it and count it against its tenant."""
        with self._lock:
            stored.id = next(self._ids)
            self._files[stored.id] = stored
            self._bump(stored.tenant_id, stored.file_size, 1)
            return stored

    def get(self, file_id: int) -> Optional[StoredFile]:
        with self._lock:
            return self._files.get(file_id)

    def remove(self, file_id: int) -> Optional[StoredFile]:
        """Drop a record and release its bytes from the tenant's usage."""
        with self._lock:
            stored = self._files.pop(file_id, None)
            if stored is not None:
                self._bump(stored.tenant_id, -stored.file_size, -1)
            return stored

    def list_for_entity(
        self,
        tenant_id: int,
        entity_type: str,
        entity_id: str,
        category: Optional[str] = None,
    ) -> List[StoredFile]:
        """Files attached to one record, newest first."""
        with self._lock:
            matches = [
                f for f in self._files.values()
                if f.tenant_id == tenant_id
                and f.entity_type == entity_type
                and f.entity_id == entity_id
                and (category is None or f.category == category)
            ]
        return sorted(matches, key=lambda f: (f.created_at, f.id), reverse=True)

    def usage(self, tenant_id: int) -> StorageUsage:
        """Snapshot of a tenant's usage (zeros for a tenant with no files)."""
        with self._lock:
            usage = self._usage.get(tenant_id)
            return replace(usage) if usage else StorageUsage(tenant_id=tenant_id)

    def _bump(self, tenant_id: int, size_delta: int, count_delta: int) -> None:
        usage = self._usage.setdefault(tenant_id, StorageUsage(tenant_id=tenant_id))
        usage.storage_bytes = max(0, usage.storage_bytes + size_delta)
        usage.file_count = max(0, usage.file_count + count_delta)
        usage.last_updated = utcnow()
