# src/vibe_gallery/main.py
"""Main entry point for the gallery application."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from vibe_gallery.api.v1 import (
    auth_router,
    leaderboard_router,
    live_router,
    submissions_router,
    system_router,
    users_router,
    votes_router,
)
from vibe_gallery.core.errors import GalleryError, IdentityRequiredError, ValidationError
from vibe_gallery.core.settings import settings
from vibe_gallery.schemas.common import ErrorResponse

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Vibe Gallery API",
    description="Project gallery with budgeted voting and a live leaderboard",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers
app.include_router(auth_router, prefix="/api/v1")
app.include_router(submissions_router, prefix="/api/v1")
app.include_router(votes_router, prefix="/api/v1")
app.include_router(leaderboard_router, prefix="/api/v1")
app.include_router(live_router, prefix="/api/v1")
app.include_router(system_router, prefix="/api/v1")
app.include_router(users_router, prefix="/api/v1")


@app.exception_handler(GalleryError)
async def gallery_error_handler(request: Request, exc: GalleryError) -> JSONResponse:
    """Render every gallery failure as an ErrorResponse payload."""
    if exc.status_code >= 500:
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc.code)
    payload = ErrorResponse(
        detail=exc.detail,
        code=exc.code,
        fields=exc.fields if isinstance(exc, ValidationError) else None,
    )
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, IdentityRequiredError) else None
    return JSONResponse(
        status_code=exc.status_code,
        content=payload.model_dump(exclude_none=True),
        headers=headers,
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies in the same shape as service validation errors."""
    fields: dict[str, str] = {}
    for error in exc.errors():
        loc = [str(part) for part in error["loc"] if part not in ("body", "query", "path")]
        fields.setdefault(".".join(loc) or "request", error["msg"])
    return await gallery_error_handler(request, ValidationError(fields))


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("vibe_gallery.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
