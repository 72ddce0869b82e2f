# regmirror/api/routes/health.py
"""Health check endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from regmirror.api.dependencies import get_store, get_version
from regmirror.api.models.schemas import HealthResponse
from regmirror.mirror.store import MirrorStore

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health(store: MirrorStore = Depends(get_store)) -> HealthResponse:
    """Server status, version, and whether a mirror has been built."""
    return HealthResponse(
        status="healthy",
        version=get_version(),
        mirror_exists=store.exists(),
    )
