"""
Configuration for regmirror.

Usage:
    >>> from regmirror.config import load_config
    >>> config = load_config("regmirror.yaml")
"""

from .loader import DEFAULT_CONFIG_PATH, load_config, load_config_dict
from .schema import (
    ApiConfig,
    LoggingConfig,
    MirrorConfig,
    MirrorStoreConfig,
    SnapshotConfig,
    SourceConfig,
)

__all__ = [
    "MirrorConfig",
    "load_config",
    "load_config_dict",
    "SourceConfig",
    "SnapshotConfig",
    "MirrorStoreConfig",
    "ApiConfig",
    "LoggingConfig",
    "DEFAULT_CONFIG_PATH",
]
