"""
app/api/upload_controller.py

Handles incoming requests under /files.

This layer is responsible only for HTTP concerns:
  - Parsing the multipart form and spooling the uploaded bytes to a
    temporary file that the validator can sniff and measure.
  - Delegating validation, storage and lookups to UploadService.
  - Translating service-level errors into appropriate HTTP responses.
  - Removing the temporary file whatever the outcome.

Responses:
  200  Request succeeded (validate-only always answers 200 with the verdict).
  201  Upload accepted and stored.
  400  Unknown entity type.
  403  The file belongs to another tenant.
  404  Unknown file id, or the bytes are gone from storage.
  422  The upload failed category validation.  The body's message is the
       validator's message, verbatim.
  500  Storage or another unexpected failure.
"""

from __future__ import annotations

import os
import tempfile
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional

from fastapi import APIRouter, File, Form, Query, UploadFile
from fastapi.responses import FileResponse, JSONResponse
from starlette.concurrency import run_in_threadpool

from app.core.exceptions import (
    AppBaseException,
    FileAccessDeniedError,
    FileRejectedError,
    InvalidEntityTypeError,
    StoredFileNotFoundError,
)
from app.core.logger import get_logger
from app.models.upload_models import (
    CategoryListResponse,
    CategoryRuleModel,
    DeleteResponse,
    ErrorResponse,
    FileListResponse,
    StorageUsageModel,
    StorageUsageResponse,
    StoredFileModel,
    UploadResponse,
    ValidationResponse,
)
from app.services.upload_service import upload_service
from app.validation.category_rules import CATEGORY_RULES
from app.validation.uploaded_file import UploadedFile

logger = get_logger(__name__)

router = APIRouter(prefix="/files", tags=["Files"])

_SPOOL_CHUNK = 1024 * 1024

_ERROR = {"model": ErrorResponse}


# ── Helpers ────────────────────────────────────────────────────────────────────

def _err(message: str, status: int = 400) -> JSONResponse:
    """Return a JSON error response with the standard error shape."""
    return JSONResponse(status_code=status, content=ErrorResponse(message=message).model_dump())


def _ok(model, status: int = 200) -> JSONResponse:
    return JSONResponse(status_code=status, content=model.model_dump(mode="json", by_alias=True))


@asynccontextmanager
async def _spooled(upload: UploadFile) -> AsyncIterator[UploadedFile]:
    """
    Copy an upload to a named temporary file and describe it.

    The temporary file is deleted when the block exits.
    """
    filename = upload.filename or ""
    fd, tmp_path = tempfile.mkstemp(prefix="upload-", suffix=Path(filename).suffix)
    try:
        with os.fdopen(fd, "wb") as tmp:
            while True:
                chunk = await upload.read(_SPOOL_CHUNK)
                if not chunk:
                    break
                tmp.write(chunk)
        yield UploadedFile.from_path(tmp_path, original_name=filename, mime_type=upload.content_type)
    finally:
        try:
            os.unlink(tmp_path)
        except FileNotFoundError:
            pass


# ── Endpoints ──────────────────────────────────────────────────────────────────

@router.get("/categories", response_model=CategoryListResponse, summary="List upload categories")
async def list_categories() -> JSONResponse:
    """The fixed category table: allowed extensions, size limit and minimum dimensions."""
    body = CategoryListResponse(
        categories=[CategoryRuleModel.from_rule(rule) for rule in CATEGORY_RULES.values()]
    )
    return _ok(body)


@router.post("/validate", response_model=ValidationResponse, summary="Validate a file without storing it")
async def validate_file(
    category: str = Form(...),
    file: UploadFile = File(...),
) -> JSONResponse:
    """Run the category checks and report the verdict; nothing is stored."""
    async with _spooled(file) as uploaded:
        outcome = await run_in_threadpool(upload_service.check, category, uploaded)
    return _ok(ValidationResponse(valid=outcome.valid, message=outcome.message))


@router.post(
    "/",
    response_model=UploadResponse,
    status_code=201,
    summary="Upload a file",
    responses={400: _ERROR, 422: _ERROR, 500: _ERROR},
)
async def upload_file(
    file: UploadFile = File(...),
    tenant_id: int = Form(...),
    entity_type: str = Form(...),
    entity_id: str = Form(...),
    category: str = Form(...),
    tenant_name: Optional[str] = Form(None),
) -> JSONResponse:
    """
    Validate the file against ``category`` and store it under the given record.

    On rejection the response is 422 with the validator's message.
    """
    logger.info(
        "Upload request received — '%s' for %s/%s as %s (tenant %d).",
        file.filename, entity_type, entity_id, category, tenant_id,
    )

    try:
        async with _spooled(file) as uploaded:
            stored = await run_in_threadpool(
                upload_service.upload,
                uploaded,
                tenant_id=tenant_id,
                entity_type=entity_type,
                entity_id=entity_id,
                category=category,
                tenant_name=tenant_name,
            )

    except InvalidEntityTypeError as exc:
        return _err(str(exc))

    except FileRejectedError as exc:
        return _err(exc.message, status=422)

    except AppBaseException as exc:
        logger.exception("Upload pipeline error: %s", exc)
        return _err("Upload failed.", status=500)

    return _ok(UploadResponse(file=StoredFileModel.from_stored(stored)), status=201)


@router.get("/usage/{tenant_id}", response_model=StorageUsageResponse, summary="Tenant storage usage")
async def storage_usage(tenant_id: int) -> JSONResponse:
    usage = upload_service.usage(tenant_id)
    return _ok(StorageUsageResponse(usage=StorageUsageModel.from_usage(usage)))


# File ids match digits only, so /files/customer/download falls through to list_files.
@router.get(
    "/{file_id:int}/download",
    summary="Download a stored file",
    responses={403: _ERROR, 404: _ERROR},
)
async def download_file(file_id: int, tenant_id: int = Query(...)):
    try:
        stored = upload_service.get(file_id, tenant_id)
        path = upload_service.resolve_path(stored)
    except StoredFileNotFoundError as exc:
        return _err(str(exc), status=404)
    except FileAccessDeniedError as exc:
        return _err(str(exc), status=403)

    return FileResponse(
        path,
        filename=stored.original_name,
        media_type=stored.mime_type or "application/octet-stream",
    )


@router.get(
    "/{file_id:int}",
    response_model=UploadResponse,
    summary="Stored file details",
    responses={403: _ERROR, 404: _ERROR},
)
async def show_file(file_id: int, tenant_id: int = Query(...)) -> JSONResponse:
    try:
        stored = upload_service.get(file_id, tenant_id)
    except StoredFileNotFoundError as exc:
        return _err(str(exc), status=404)
    except FileAccessDeniedError as exc:
        return _err(str(exc), status=403)

    return _ok(UploadResponse(file=StoredFileModel.from_stored(stored)))


@router.get(
    "/{entity_type}/{entity_id}",
    response_model=FileListResponse,
    summary="List files attached to a record",
    responses={400: _ERROR},
)
async def list_files(
    entity_type: str,
    entity_id: str,
    tenant_id: int = Query(...),
    category: Optional[str] = Query(None),
) -> JSONResponse:
    try:
        files = upload_service.list_files(tenant_id, entity_type, entity_id, category)
    except InvalidEntityTypeError as exc:
        return _err(str(exc))

    return _ok(FileListResponse(files=[StoredFileModel.from_stored(f) for f in files]))


@router.delete(
    "/{file_id:int}",
    response_model=DeleteResponse,
    summary="Delete a stored file",
    responses={403: _ERROR, 404: _ERROR, 500: _ERROR},
)
async def delete_file(file_id: int, tenant_id: int = Query(...)) -> JSONResponse:
    try:
        deleted = upload_service.delete(file_id, tenant_id)
    except StoredFileNotFoundError as exc:
        return _err(str(exc), status=404)
    except FileAccessDeniedError as exc:
        return _err(str(exc), status=403)
    except AppBaseException as exc:
        logger.exception("Delete failed for file %d: %s", file_id, exc)
        return _err("Failed to delete file.", status=500)

    if not deleted:
        return _err("File not found in storage", status=404)
    return _ok(DeleteResponse(message="File deleted successfully"))
