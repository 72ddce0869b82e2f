"""API route modules."""

from regmirror.api.routes.health import router as health_router
from regmirror.api.routes.registry import router as registry_router

__all__ = ["health_router", "registry_router"]
