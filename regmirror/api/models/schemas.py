# regmirror/api/models/schemas.py
"""Response models for the read API."""

from __future__ import annotations

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str = Field(..., description="Server status")
    version: str = Field(..., description="regmirror version")
    mirror_exists: bool = Field(..., description="Whether index.json exists in the mirror directory")


class ErrorResponse(BaseModel):
    error: str = Field(..., description="Error message")
