# regmirror/cli/commands/config.py
"""
Config command - show the resolved configuration.

Usage:
    regmirror config
    regmirror config -c my.yaml
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
import yaml

from regmirror.cli.ui import ui
from regmirror.cli.utils import CONFIG_OPTION, load_cli_config


def command(config: Optional[Path] = CONFIG_OPTION) -> None:
    """Print the configuration after defaults, overrides and ${ENV} expansion."""
    cfg = load_cli_config(config)
    ui.section("Resolved configuration")
    typer.echo(yaml.safe_dump(cfg.model_dump(mode="json"), sort_keys=False).rstrip())
