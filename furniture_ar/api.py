"""
FastAPI application for the Furniture AR catalog.
"""

from __future__ import annotations

import importlib.metadata
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .catalog.routes import router as catalog_router
from .config import get_settings
from .db.base import init_database
from .log import configure_logging
from .seo.routes import router as sharing_router
from .seo.store import DataStoreUnavailable

logger = structlog.get_logger()

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    configure_logging(settings)
    logger.info("Starting Furniture AR catalog", environment=settings.environment)

    try:
        init_database()
    except Exception as e:
        logger.error("Failed to start application", error=str(e))
        raise

    yield

    logger.info("Shutdown complete")


app = FastAPI(
    title="Furniture AR Catalog",
    description="3D model catalog with variants, view analytics and SEO/QR share links",
    version=importlib.metadata.version("furniture-ar"),
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(sharing_router)
app.include_router(catalog_router)


@app.exception_handler(DataStoreUnavailable)
async def data_store_unavailable_handler(
    request: Request, exc: DataStoreUnavailable
) -> JSONResponse:
    """The store could not be reached; never reported as not-found."""
    logger.error(
        "Data store unavailable",
        operation=exc.operation,
        error=exc.message,
        path=request.url.path,
    )
    return JSONResponse(status_code=503, content=exc.to_dict())


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Generic 500 without internal details."""
    logger.exception("Unhandled error", path=request.url.path)
    return JSONResponse(
        status_code=500,
        content={"error": {"code": "INTERNAL_ERROR", "message": "Internal server error"}},
    )


@app.get("/health", tags=["system"])
def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}


@app.get("/version", tags=["system"])
def version() -> dict[str, str]:
    """Return the version of the application."""
    return {"version": importlib.metadata.version("furniture-ar")}
