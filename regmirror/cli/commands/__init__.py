"""CLI commands."""

from regmirror.cli.commands import build, config, merge, serve

__all__ = ["build", "config", "merge", "serve"]
