"""
app/services/upload_service.py

Orchestrates the upload pipeline for one file:

    UploadedFile (spooled to disk by the controller)
      └─ FileCategoryValidator.validate()   category/type/content/size/dimensions
           └─ FileStorage.upload()           bytes → storage path
                └─ FileRegistry.add()         index + tenant usage

All three dependencies are constructor-injected so tests can swap them
out; the module-level singleton wires in the production implementations.
"""

from __future__ import annotations

import re
import uuid
from pathlib import Path
from typing import List, Optional

from app.core.constants import ALLOWED_ENTITY_TYPES, MIME_TYPES_BY_EXTENSION, STORAGE_PATH_PREFIX
from app.core.exceptions import (
    FileAccessDeniedError,
    FileRejectedError,
    InvalidEntityTypeError,
    StoredFileNotFoundError,
    UploadReadError,
)
from app.core.logger import get_logger
from app.storage.base import FileStorage, StorageUsage, StoredFile
from app.storage.local_storage import LocalFileStorage
from app.storage.registry import FileRegistry
from app.validation.category_rules import get_rule
from app.validation.file_category_validator import (
    FileCategoryValidator,
    ValidationOutcome,
    file_category_validator,
)
from app.validation.uploaded_file import UploadedFile

logger = get_logger(__name__)

UNREADABLE_UPLOAD_MESSAGE = "Unable to read uploaded file."


def slugify(text: str, fallback: str = "tenant") -> str:
    """Lowercase ``text`` and collapse every run of non [a-z0-9] characters to '-'."""
    slug = re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")
    return slug or fallback


class UploadService:
    """
    Validates uploads and keeps the accepted ones.

    Rejections surface as FileRejectedError carrying the validator's
    message verbatim; the controller returns it to the user unchanged.
    """

    def __init__(
        self,
        validator: FileCategoryValidator | None = None,
        storage: FileStorage | None = None,
        registry: FileRegistry | None = None,
    ) -> None:
        self._validator: FileCategoryValidator = validator or file_category_validator
        self._storage: FileStorage = storage or LocalFileStorage()
        self._registry: FileRegistry = registry or FileRegistry()

    # ── Public API ─────────────────────────────────────────────────────────────

    def check(self, category: str, file: Optional[UploadedFile]) -> ValidationOutcome:
        """
        Validate without storing.

        An unreadable upload is not retried: it is reported as a rejection.
        """
        try:
            return self._validator.validate(category, file)
        except UploadReadError as exc:
            logger.warning("Upload could not be read: %s", exc)
            return ValidationOutcome.failed(UNREADABLE_UPLOAD_MESSAGE)

    def upload(
        self,
        file: UploadedFile,
        tenant_id: int,
        entity_type: str,
        entity_id: str,
        category: str,
        tenant_name: Optional[str] = None,
    ) -> StoredFile:
        """
        Validate ``file`` for ``category`` and store it for the given record.

        Args:
            file        : The spooled upload.
            tenant_id   : Owning dive center.
            entity_type : One of ALLOWED_ENTITY_TYPES.
            entity_id   : Id of the record the file belongs to.
            category    : Upload category key.
            tenant_name : Dive center name used for the storage folder.

        Returns:
            The registered StoredFile.

        Raises:
            InvalidEntityTypeError: If ``entity_type`` is not supported.
            FileRejectedError:      If the file fails category validation.
            StorageError:           If the backend cannot write the file.
        """
        if entity_type not in ALLOWED_ENTITY_TYPES:
            raise InvalidEntityTypeError(f"Invalid entity type: {entity_type}")

        outcome = self.check(category, file)
        if not outcome.valid:
            raise FileRejectedError(outcome.message or "File rejected.")

        path = self._storage_path(file, tenant_id, entity_type, entity_id, category, tenant_name)
        storage_path = self._storage.upload(path, Path(file.path))

        stored = self._registry.add(
            StoredFile(
                tenant_id=tenant_id,
                entity_type=entity_type,
                entity_id=entity_id,
                category=category,
                original_name=file.original_name,
                storage_path=storage_path,
                file_size=file.size,
                mime_type=file.mime_type,
                storage_driver=self._storage.driver,
            )
        )
        logger.info(
            "Stored '%s' as file #%d for %s/%s (tenant %d).",
            file.original_name, stored.id, entity_type, entity_id, tenant_id,
        )
        return stored

    def get(self, file_id: int, tenant_id: int) -> StoredFile:
        """
        Raises:
            StoredFileNotFoundError: Unknown id.
            FileAccessDeniedError:   The file belongs to another tenant.
        """
        stored = self._registry.get(file_id)
        if stored is None:
            raise StoredFileNotFoundError(f"File {file_id} not found.")
        if stored.tenant_id != tenant_id:
            raise FileAccessDeniedError("Unauthorized access to this file")
        return stored

    def delete(self, file_id: int, tenant_id: int) -> bool:
        """Delete the stored bytes and the record. Returns False if the backend had no file."""
        stored = self.get(file_id, tenant_id)
        deleted = self._storage.delete(stored.storage_path)
        if deleted:
            self._registry.remove(stored.id)
            logger.info("Deleted file #%d (%s).", stored.id, stored.storage_path)
        else:
            logger.warning("File #%d missing from storage at %s.", stored.id, stored.storage_path)
        return deleted

    def list_files(
        self,
        tenant_id: int,
        entity_type: str,
        entity_id: str,
        category: Optional[str] = None,
    ) -> List[StoredFile]:
        if entity_type not in ALLOWED_ENTITY_TYPES:
            raise InvalidEntityTypeError(f"Invalid entity type: {entity_type}")
        return self._registry.list_for_entity(tenant_id, entity_type, entity_id, category)

    def usage(self, tenant_id: int) -> StorageUsage:
        return self._registry.usage(tenant_id)

    def resolve_path(self, stored: StoredFile) -> Path:
        """Local path of a stored file's bytes, for streaming downloads."""
        if not self._storage.exists(stored.storage_path):
            raise StoredFileNotFoundError("File not found in storage")
        return self._storage.absolute_path(stored.storage_path)

    # ── Internals ──────────────────────────────────────────────────────────────

    def _storage_path(
        self,
        file: UploadedFile,
        tenant_id: int,
        entity_type: str,
        entity_id: str,
        category: str,
        tenant_name: Optional[str],
    ) -> str:
        """uploads/tenants/{tenant-slug}/{entity_type}/{entity_id}/{category}/{uuid}.{ext}"""
        tenant_slug = slugify(tenant_name or f"tenant-{tenant_id}")
        filename = f"{uuid.uuid4()}.{self._stored_extension(file, category)}"
        entity_slug = slugify(entity_id, fallback="unknown")
        return "/".join(
            [STORAGE_PATH_PREFIX, tenant_slug, entity_type, entity_slug, category, filename]
        )

    @staticmethod
    def _stored_extension(file: UploadedFile, category: str) -> str:
        # A file admitted through its MIME type keeps the extension that MIME
        # type stands for, never the client's (e.g. ".exe").
        rule = get_rule(category)
        if rule is None or file.extension in rule.extensions:
            return file.extension
        mime_type = file.normalized_mime_type
        for ext in rule.extensions:
            if mime_type in MIME_TYPES_BY_EXTENSION.get(ext, ()):
                return ext
        return rule.extensions[0]


# ── Module-level singleton ─────────────────────────────────────────────────────
# Controllers import this instance.  Tests construct UploadService directly
# with injected dependencies.

upload_service = UploadService()
