"""Logging helpers for regmirror."""

from .logger import configure_logging, get_logger

__all__ = ["get_logger", "configure_logging"]
