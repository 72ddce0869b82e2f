# regmirror/cli/commands/build.py
"""
Build command - mirror a range of upstream commits.

Usage:
    regmirror build START             # Single commit
    regmirror build START END         # Every relevant commit in START..END
    regmirror build START END -c my.yaml
"""

from __future__ import annotations

import traceback
from pathlib import Path
from typing import Optional

import typer

from regmirror.cli.ui import ui
from regmirror.cli.ui.console import ARROW
from regmirror.cli.utils import CONFIG_OPTION, VERBOSE_OPTION, load_cli_config
from regmirror.exceptions import RegistryMirrorError
from regmirror.logging.logger import get_logger
from regmirror.logging.tags import CLI
from regmirror.runner import MirrorRunner

logger = get_logger(__name__)


def command(
    start: str = typer.Argument(..., help="First commit (exclusive when END is given)."),
    end: Optional[str] = typer.Argument(None, help="Last commit. Omit to process START only."),
    config: Optional[Path] = CONFIG_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """
    Mirror the registry for one commit or a range of commits.

    Commits that do not touch the watched paths are skipped. A commit that
    fails to build or merge is reported and the run moves on.
    """
    cfg = load_cli_config(config, verbose)
    ui.header("Registry mirror", f"{cfg.source.repo_url} {ARROW} {cfg.mirror.output_path}")

    runner = MirrorRunner(cfg)
    logger.debug(f"{CLI} build start={start} end={end}")

    try:
        summary = runner.run(
            start,
            end,
            on_progress=lambda i, total, commit: ui.step(i, total, f"{commit.short} {commit.message}"),
        )
    except KeyboardInterrupt:
        ui.warning("Process interrupted. Exiting...")
        raise typer.Exit(0)
    except RegistryMirrorError as e:
        ui.error(f"Error during build: {e}")
        if verbose:
            traceback.print_exc()
        raise typer.Exit(1)

    for failure in summary.failures:
        ui.warning(f"Failed to mirror commit {failure.commit[:7]}", failure.error)

    ui.summary_panel(
        f"{summary}\nDuration: {summary.duration_seconds:.1f}s",
        title="All commits processed",
        style="yellow" if summary.failed else "green",
    )
