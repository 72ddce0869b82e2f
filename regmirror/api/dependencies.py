# regmirror/api/dependencies.py
"""Shared dependencies for API routes."""

from __future__ import annotations

from fastapi import Request

from regmirror import __version__
from regmirror.mirror.store import MirrorStore


def get_version() -> str:
    return __version__


def get_store(request: Request) -> MirrorStore:
    """The store the app was created for."""
    return request.app.state.store


def base_url(request: Request) -> str:
    """scheme://host[:port] of the incoming request."""
    return f"{request.url.scheme}://{request.url.netloc}"
