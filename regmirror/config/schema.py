# regmirror/config/schema.py
"""
Configuration schema for regmirror.

Schema hierarchy:
- MirrorConfig: the root config consumed by the CLI and the runner
- SourceConfig: upstream git repository and relevance filter
- SnapshotConfig: how a commit's manifest is materialized
- MirrorStoreConfig: where and how the mirror is written
- ApiConfig: read API bind address
- LoggingConfig: logging settings
"""

from __future__ import annotations

import logging
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SourceConfig(BaseModel):
    """Upstream repository settings."""

    repo_url: str = Field(..., description="Clone URL of the upstream repository")
    local_repo: str = Field(..., description="Working copy location")
    branch: str = "main"
    watch_patterns: List[str] = Field(
        default_factory=list,
        description="Globs; a commit is relevant if it touches a matching path",
    )

    model_config = ConfigDict(extra="forbid")


class SnapshotConfig(BaseModel):
    """Paths inside the working copy, relative to its root."""

    install: bool = Field(True, description="Run the package manager before reading manifests")
    lockfile: str = "pnpm-lock.yaml"
    manifest_path: str = Field(..., description="Structured (current) manifest")
    legacy_manifest_path: str = Field(..., description="Bare-path (legacy) manifest")
    component_root: str = Field(..., description="Directory manifest file paths resolve against")

    model_config = ConfigDict(extra="forbid")


class MirrorStoreConfig(BaseModel):
    """Mirror output settings."""

    output_path: str = "./fake-registry"
    max_workers: int = Field(1, ge=1, description="Parallel file reads per component")

    model_config = ConfigDict(extra="forbid")


class ApiConfig(BaseModel):
    host: str = "127.0.0.1"
    port: int = Field(8000, ge=1, le=65535)

    model_config = ConfigDict(extra="forbid")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"

    model_config = ConfigDict(extra="forbid")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level


class MirrorConfig(BaseModel):
    """
    Root configuration.

    Examples:
        >>> from regmirror.config import load_config
        >>> config = load_config()
        >>> config.mirror.output_path
        './fake-registry'
    """

    source: SourceConfig
    snapshot: SnapshotConfig
    mirror: MirrorStoreConfig = Field(default_factory=MirrorStoreConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(extra="forbid")
