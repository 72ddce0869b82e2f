# regmirror/exceptions.py
"""
Error taxonomy for regmirror.

RegistryMirrorError
├── SourceReadError        fatal: a manifest-referenced file is unreadable
├── PriorStateReadError    recoverable: prior mirror document missing/corrupt
├── PersistError           fatal: a mirror document could not be written
├── SnapshotError          the snapshot for a commit could not be produced
├── GitCommandError        a git invocation failed
└── ConfigError
    └── ConfigNotFoundError
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence


class RegistryMirrorError(Exception):
    """Base error for all regmirror failures."""
    pass


class SourceReadError(RegistryMirrorError):
    """A file referenced by the manifest could not be read."""

    def __init__(self, component: str, path: Path, cause: Optional[BaseException] = None):
        self.component = component
        self.path = Path(path)
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Cannot read '{self.path}' for component '{component}'{detail}")


class PriorStateReadError(RegistryMirrorError):
    """A previously persisted mirror document is missing or unreadable."""

    def __init__(self, path: Path, reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Cannot load prior mirror document '{self.path}': {reason}")


class PersistError(RegistryMirrorError):
    """A mirror document could not be written."""

    def __init__(self, path: Path, cause: Optional[BaseException] = None):
        self.path = Path(path)
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Cannot write mirror document '{self.path}'{detail}")


class SnapshotError(RegistryMirrorError):
    """The snapshot producer could not build or locate a manifest."""
    pass


class GitCommandError(RegistryMirrorError):
    """A git command exited with a non-zero status."""

    def __init__(self, args: Sequence[str], returncode: int, stderr: str = ""):
        self.args_list = list(args)
        self.returncode = returncode
        self.stderr = stderr.strip()
        message = f"git {' '.join(self.args_list)} failed with exit code {returncode}"
        if self.stderr:
            message += f": {self.stderr}"
        super().__init__(message)


class ConfigError(RegistryMirrorError):
    """Configuration could not be loaded or failed validation."""
    pass


class ConfigNotFoundError(ConfigError, FileNotFoundError):
    """A configuration file does not exist."""
    pass


__all__ = [
    "RegistryMirrorError",
    "SourceReadError",
    "PriorStateReadError",
    "PersistError",
    "SnapshotError",
    "GitCommandError",
    "ConfigError",
    "ConfigNotFoundError",
]
