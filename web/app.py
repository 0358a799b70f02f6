"""
FastAPI application for the CRM backend.

Exposes the property/contact write API, the property document API and the
NAS proxy. Production deployment configuration via environment variables.
"""

import logging
import os

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core.mapping import UnknownFieldError, ValidationError
from core.records import IntegrityError, RecordNotFoundError
from core.storage import InvalidCategoryError, StorageError, StorageNotFoundError
from web.file_routes import router as file_router
from web.record_routes import router as record_router


logger = logging.getLogger(__name__)

# =============================================================================
# Environment Configuration
# =============================================================================

IS_PRODUCTION = os.getenv("PRODUCTION", "").lower() == "true"

ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "").split(",") if os.getenv("ALLOWED_ORIGINS") else []
if not ALLOWED_ORIGINS and not IS_PRODUCTION:
    # Development fallback only
    ALLOWED_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000"]

DEBUG_MODE = os.getenv("DEBUG", "false").lower() == "true" and not IS_PRODUCTION


# =============================================================================
# Error Translation
# =============================================================================


def _validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    status = 422 if isinstance(exc, UnknownFieldError) else 400
    return JSONResponse(status_code=status, content=exc.to_dict())


def _not_found(request: Request, exc: RecordNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": "not_found", "detail": str(exc)})


def _integrity_error(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.error("Integrity violation on %s: %s", exc.table, exc)
    return JSONResponse(status_code=409, content={"error": "integrity_error", "detail": str(exc)})


def _invalid_category(request: Request, exc: InvalidCategoryError) -> JSONResponse:
    return JSONResponse(
        status_code=400, content={"error": "invalid_category", "detail": str(exc)}
    )


def _storage_error(request: Request, exc: StorageError) -> JSONResponse:
    status = 404 if isinstance(exc, StorageNotFoundError) else 502
    logger.warning("Storage %s failed for %s: %s", exc.operation, exc.path, exc.kind.value)
    return JSONResponse(status_code=status, content={"error": "storage_error", **exc.to_dict()})


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Makler CRM",
        description="Property and contact records with NAS document storage",
        version="0.1.0",
        docs_url=None if IS_PRODUCTION else "/docs",
        redoc_url=None if IS_PRODUCTION else "/redoc",
        openapi_url=None if IS_PRODUCTION else "/openapi.json",
        debug=DEBUG_MODE,
    )

    # Healthcheck first, no dependencies, no IO
    @app.get("/health", include_in_schema=False)
    def health():
        return {"status": "healthy"}

    if ALLOWED_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=ALLOWED_ORIGINS,
            allow_credentials=True,
            allow_methods=["GET", "POST", "PATCH", "DELETE"],
            allow_headers=["*"],
        )

    app.add_exception_handler(ValidationError, _validation_error)
    app.add_exception_handler(RecordNotFoundError, _not_found)
    app.add_exception_handler(IntegrityError, _integrity_error)
    app.add_exception_handler(InvalidCategoryError, _invalid_category)
    app.add_exception_handler(StorageError, _storage_error)

    app.include_router(record_router)
    app.include_router(file_router)

    return app


# Create app instance for uvicorn
app = create_app()
