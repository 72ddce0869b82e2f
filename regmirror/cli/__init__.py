"""
Main regmirror CLI module.

Provides the top-level `regmirror` command.
"""

from regmirror.cli.cli import app

__all__ = ["app"]
