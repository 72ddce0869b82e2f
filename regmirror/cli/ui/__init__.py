# regmirror/cli/ui/__init__.py
"""
CLI UI components.

Usage:
    from regmirror.cli.ui import ui

    ui.header("Mirror build")
    ui.success("Done!")
"""

from __future__ import annotations

from .console import console
from .output import OutputMixin


class UI(OutputMixin):
    """Styled terminal output built on Rich."""

    pass


ui = UI()

__all__ = ["UI", "ui", "console"]
