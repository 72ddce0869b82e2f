"""API response models."""

from regmirror.api.models.schemas import ErrorResponse, HealthResponse

__all__ = ["ErrorResponse", "HealthResponse"]
