"""
FastAPI application factory and API package.

Run with:
    uvicorn oci_bom.api:app --reload --port 8000

Or via main.py:
    python -m oci_bom --serve
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from oci_bom.api.routes import bom_router, health_router
from oci_bom.api.saved_prompt_routes import saved_prompt_router
from oci_bom.config import get_settings
from oci_bom.errors import BOMError, ValidationError

logger = logging.getLogger(__name__)


# ── Error mapping ────────────────────────────────────────

async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ())[1:]) or "body",
            "message": err.get("msg", "Invalid value"),
        }
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": "Validation failed", "details": details},
    )


async def _bom_error_handler(request: Request, exc: BOMError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.title}: {exc.message}")
    else:
        logger.warning(f"{request.method} {request.url.path} rejected: {exc.message}")

    content = {"success": False, "error": exc.title, "message": exc.message}
    if isinstance(exc, ValidationError):
        content["details"] = [{"field": exc.field, "message": exc.message}]
    return JSONResponse(status_code=exc.status_code, content=content)


def create_app() -> FastAPI:
    """Application factory — create and configure the FastAPI instance."""
    settings = get_settings()

    application = FastAPI(
        title="OCI BOM Generator API",
        description="Turns free-text infrastructure requirements into a validated OCI bill of materials",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # CORS — allow the frontend (adjust origins in production)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.add_exception_handler(RequestValidationError, _request_validation_handler)
    application.add_exception_handler(BOMError, _bom_error_handler)

    # Register route groups
    application.include_router(health_router, prefix="/api", tags=["Health"])
    application.include_router(bom_router, prefix="/api", tags=["BOM"])
    application.include_router(saved_prompt_router, prefix="/api/saved-prompts", tags=["Saved Prompts"])

    logger.info(f"Created {settings.app_name} API")
    return application


# Module-level instance for `uvicorn oci_bom.api:app`
app = create_app()
