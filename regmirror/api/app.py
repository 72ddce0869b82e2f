# regmirror/api/app.py
"""FastAPI application serving a persisted mirror."""

from __future__ import annotations

from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from regmirror.api.dependencies import get_version
from regmirror.api.routes import health_router, registry_router
from regmirror.mirror.store import MirrorStore

DEFAULT_MIRROR_PATH = "./fake-registry"


def create_app(mirror_path: str | Path = DEFAULT_MIRROR_PATH) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        mirror_path: Directory holding index.json and items/.

    Returns:
        Configured FastAPI app instance.
    """
    app = FastAPI(
        title="Registry API",
        description="API for registry operations",
        version=get_version(),
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )
    app.state.store = MirrorStore(Path(mirror_path).resolve())

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["*"],
    )

    app.include_router(health_router)
    app.include_router(registry_router)

    return app
