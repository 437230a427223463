"""
app/main.py

FastAPI application entry point: the app, its routers, the /health route,
and the fallback mapping from AppBaseException subclasses to HTTP statuses
for errors a route did not handle itself.
"""

from contextlib import asynccontextmanager
from typing import Dict, Type

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.api.upload_controller import router as upload_router
from app.core.config import settings
from app.core.exceptions import (
    AppBaseException,
    FileAccessDeniedError,
    FileRejectedError,
    InvalidEntityTypeError,
    StoredFileNotFoundError,
)
from app.core.logger import get_logger
from app.models.upload_models import ErrorResponse
from app.validation.category_rules import CATEGORY_RULES

logger = get_logger(__name__)

# Anything not listed here (StorageError, UploadReadError, ...) is a 500.
_STATUS_BY_EXCEPTION: Dict[Type[AppBaseException], int] = {
    InvalidEntityTypeError: 400,
    FileAccessDeniedError: 403,
    StoredFileNotFoundError: 404,
    FileRejectedError: 422,
}


def status_for(exc: AppBaseException) -> int:
    """HTTP status for ``exc``, honouring subclasses of the mapped types."""
    for exc_type in type(exc).__mro__:
        if exc_type in _STATUS_BY_EXCEPTION:
            return _STATUS_BY_EXCEPTION[exc_type]
    return 500


@asynccontextmanager
async def lifespan(_: FastAPI):
    logger.info(
        "%s v%s starting: %d upload categories, %s storage at %s.",
        settings.app_name,
        settings.app_version,
        len(CATEGORY_RULES),
        settings.storage_driver,
        settings.upload_root,
    )
    yield
    logger.info("%s shutting down.", settings.app_name)


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description=(
        "Accepts dive center uploads (customer photos, certificates, "
        "insurance cards, maps, receipts, invoices), checks each one "
        "against its category's rules, and stores the accepted files "
        "per tenant."
    ),
    lifespan=lifespan,
)

app.include_router(upload_router)


@app.exception_handler(AppBaseException)
async def app_exception_handler(request: Request, exc: AppBaseException) -> JSONResponse:
    status = status_for(exc)
    if status >= 500:
        logger.exception("Unhandled application error on %s: %s", request.url.path, exc)
    else:
        logger.warning("%s on %s: %s", type(exc).__name__, request.url.path, exc)
    return JSONResponse(
        status_code=status,
        content=ErrorResponse(message=str(exc)).model_dump(),
    )


@app.get("/health", tags=["Health"], summary="Liveness check")
async def health() -> dict:
    return {"status": "ok", "version": settings.app_version}
