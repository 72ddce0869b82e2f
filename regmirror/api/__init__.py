"""Read API for the registry mirror."""

from regmirror.api.app import create_app

__all__ = ["create_app"]
