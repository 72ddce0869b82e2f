# regmirror/cli/utils.py
"""Shared CLI utilities."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

from regmirror.cli.ui import ui
from regmirror.config import MirrorConfig, load_config
from regmirror.exceptions import ConfigError
from regmirror.logging.logger import configure_logging


def load_cli_config(config_path: Optional[Path], verbose: bool = False) -> MirrorConfig:
    """
    Load config for a command and apply its logging level.

    Exits with status 1 and a readable message when the config is invalid.
    """
    try:
        config = load_config(config_path)
    except ConfigError as e:
        ui.error(str(e))
        raise typer.Exit(1)

    configure_logging(logging.DEBUG if verbose else config.logging.level)
    return config


CONFIG_OPTION = typer.Option(
    None,
    "--config",
    "-c",
    exists=True,
    dir_okay=False,
    readable=True,
    help="YAML config overriding the packaged defaults.",
)

VERBOSE_OPTION = typer.Option(
    False,
    "--verbose",
    "-v",
    help="Show debug logging and tracebacks.",
)

__all__ = ["load_cli_config", "CONFIG_OPTION", "VERBOSE_OPTION"]
