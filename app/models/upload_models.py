"""
app/models/upload_models.py

Pydantic DTOs for the file endpoints.
Requests are multipart/form-data and handled by FastAPI's Form/File
parameters in the controller; only the response shapes live here.
"""

from datetime import datetime
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from app.storage.base import StorageUsage, StoredFile
from app.validation.category_rules import CategoryRule


class ValidationResponse(BaseModel):
    """
    Response for POST /files/validate.

        { "valid": false, "message": "File must be less than 5MB" }
    """

    valid: bool
    message: Optional[str] = None


class ErrorResponse(BaseModel):
    """Body returned with every 4xx/5xx from the file endpoints."""

    success: bool = False
    message: str


class CategoryRuleModel(BaseModel):
    name: str
    extensions: List[str]
    max_size: int = Field(description="Largest accepted size in bytes.")
    max_size_mb: float
    min_dimensions: Optional[Tuple[int, int]] = None

    @classmethod
    def from_rule(cls, rule: CategoryRule) -> "CategoryRuleModel":
        return cls(
            name=rule.name,
            extensions=list(rule.extensions),
            max_size=rule.max_size,
            max_size_mb=rule.max_size_mb,
            min_dimensions=rule.min_dimensions,
        )


class CategoryListResponse(BaseModel):
    categories: List[CategoryRuleModel]


class StoredFileModel(BaseModel):
    """
    A stored file as shown to the dashboard.

        {
            "id": 7,
            "originalName": "passport.jpg",
            "fileSize": 482113,
            "mimeType": "image/jpeg",
            "category": "customer-photo",
            ...
        }
    """

    model_config = ConfigDict(populate_by_name=True)

    id: int
    original_name: str = Field(alias="originalName")
    file_size: int = Field(alias="fileSize")
    mime_type: Optional[str] = Field(default=None, alias="mimeType")
    category: str
    entity_type: str = Field(alias="entityType")
    entity_id: str = Field(alias="entityId")
    storage_path: str = Field(alias="storagePath")
    created_at: datetime = Field(alias="createdAt")

    @classmethod
    def from_stored(cls, stored: StoredFile) -> "StoredFileModel":
        return cls(
            id=stored.id,
            original_name=stored.original_name,
            file_size=stored.file_size,
            mime_type=stored.mime_type,
            category=stored.category,
            entity_type=stored.entity_type,
            entity_id=stored.entity_id,
            storage_path=stored.storage_path,
            created_at=stored.created_at,
        )


class UploadResponse(BaseModel):
    success: bool = True
    file: StoredFileModel


class FileListResponse(BaseModel):
    success: bool = True
    files: List[StoredFileModel]


class DeleteResponse(BaseModel):
    success: bool = True
    message: str


class StorageUsageModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    storage_bytes: int = Field(alias="storageBytes")
    storage_formatted: str = Field(alias="storageFormatted")
    file_count: int = Field(alias="fileCount")
    last_updated: datetime = Field(alias="lastUpdated")

    @classmethod
    def from_usage(cls, usage: StorageUsage) -> "StorageUsageModel":
        return cls(
            storage_bytes=usage.storage_bytes,
            storage_formatted=usage.formatted_storage,
            file_count=usage.file_count,
            last_updated=usage.last_updated,
        )


class StorageUsageResponse(BaseModel):
    success: bool = True
    usage: StorageUsageModel
