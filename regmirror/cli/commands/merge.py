# regmirror/cli/commands/merge.py
"""
Merge command - fold a single manifest into a mirror.

Usage:
    regmirror merge index.json -s ./registry/default -o ./fake-registry --commit abc123
    regmirror merge index.json -s ./registry/default --commit abc123 --shape legacy

Works without a git checkout: the manifest and source files are read as-is.
"""

from __future__ import annotations

import traceback
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Optional

import typer

from regmirror.cli.ui import ui
from regmirror.cli.utils import CONFIG_OPTION, VERBOSE_OPTION, load_cli_config
from regmirror.exceptions import RegistryMirrorError
from regmirror.mirror.descriptors import BARE_PATH, STRUCTURED, detect_resolver
from regmirror.mirror.merger import merge
from regmirror.source.snapshot import load_manifest_file


class ManifestShape(str, Enum):
    AUTO = "auto"
    STRUCTURED = "structured"
    LEGACY = "legacy"


def command(
    manifest: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        readable=True,
        help="Manifest JSON (array of components).",
    ),
    source_root: Path = typer.Option(
        ...,
        "--source-root",
        "-s",
        exists=True,
        file_okay=False,
        help="Directory the manifest's file paths resolve against.",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Mirror directory. Defaults to mirror.output_path from config.",
    ),
    commit: str = typer.Option(..., "--commit", help="Commit id recorded on changed files."),
    timestamp: Optional[str] = typer.Option(
        None,
        "--timestamp",
        help="ISO 8601 commit time. Defaults to now (UTC).",
    ),
    shape: ManifestShape = typer.Option(
        ManifestShape.AUTO,
        "--shape",
        case_sensitive=False,
        help="Manifest file entry shape.",
    ),
    config: Optional[Path] = CONFIG_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """
    Merge one manifest into the mirror and print the changelog.
    """
    cfg = load_cli_config(config, verbose)
    output_root = output or Path(cfg.mirror.output_path)
    commit_time = timestamp or datetime.now(timezone.utc).isoformat(timespec="seconds")

    try:
        components = load_manifest_file(manifest)
        if components is None:
            ui.error(f"Manifest not found: {manifest}")
            raise typer.Exit(1)

        if shape is ManifestShape.STRUCTURED:
            resolver = STRUCTURED
        elif shape is ManifestShape.LEGACY:
            resolver = BARE_PATH
        else:
            resolver = detect_resolver(components)

        result = merge(
            components,
            source_root,
            output_root,
            commit,
            commit_time,
            resolver=resolver,
            max_workers=cfg.mirror.max_workers,
        )
    except RegistryMirrorError as e:
        ui.error(f"Merge failed: {e}")
        if verbose:
            traceback.print_exc()
        raise typer.Exit(1)

    if result.changelog:
        ui.table(
            ["Component", "File", "Change"],
            [(e.name, e.file_path, e.change_type.value) for e in result.changelog],
            title=f"Changes at {commit[:7]}",
        )
    else:
        ui.info("No changes")

    ui.success(f"Mirror written to {output_root} ({result.summary})")
