# regmirror/source/snapshot.py
"""
Snapshot producer.

For the commit currently checked out in the working copy:
1. Install dependencies with the pnpm version pinned by the lockfile
2. Locate the registry manifest (current shape first, then legacy)
3. Report where the manifest's file paths resolve
"""

from __future__ import annotations

import json
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import ValidationError

from regmirror.config.schema import SnapshotConfig
from regmirror.exceptions import SnapshotError
from regmirror.logging.logger import get_logger
from regmirror.logging.tags import SNAPSHOT
from regmirror.mirror.descriptors import BARE_PATH, STRUCTURED, DescriptorResolver
from regmirror.mirror.schema import ManifestComponent

logger = get_logger(__name__)


@dataclass
class Snapshot:
    """The manifest of one commit and where its files live."""

    resolver: DescriptorResolver
    components: List[ManifestComponent] = field(default_factory=list)
    component_root: Optional[Path] = None
    manifest_path: Optional[Path] = None

    @property
    def is_legacy(self) -> bool:
        return self.resolver is BARE_PATH


def load_manifest_file(path: Path) -> Optional[List[ManifestComponent]]:
    """
    Parse a manifest file. Returns None if the file does not exist.

    Raises:
        SnapshotError: The file exists but is not a valid manifest.
    """
    if not path.is_file():
        return None

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise SnapshotError(f"Cannot read manifest {path}: {e}") from e

    if not isinstance(data, list):
        raise SnapshotError(f"Manifest {path} is not a JSON array")

    try:
        return [ManifestComponent.model_validate(c) for c in data]
    except ValidationError as e:
        raise SnapshotError(f"Invalid manifest {path}: {e}") from e


class SnapshotBuilder:
    """
    Materializes the manifest of the checked-out commit.

    Usage:
        builder = SnapshotBuilder(repo.local_path, config.snapshot)
        builder.install()
        snapshot = builder.load_manifest()
    """

    def __init__(self, repo_root: str | Path, config: SnapshotConfig) -> None:
        self.repo_root = Path(repo_root)
        self.config = config

    @property
    def component_root(self) -> Path:
        return (self.repo_root / self.config.component_root).resolve()

    def package_manager_version(self) -> str:
        """pnpm version from the lockfile, or "latest" when it cannot be told."""
        lockfile = self.repo_root / self.config.lockfile
        try:
            with lockfile.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"{SNAPSHOT} Could not read {lockfile} to determine pnpm version: {e}")
            return "latest"

        version = data.get("lockfileVersion") if isinstance(data, dict) else None
        if version is None:
            logger.warning(f"{SNAPSHOT} No lockfileVersion in {lockfile}. Using latest pnpm.")
            return "latest"
        return str(version)

    def install_command(self) -> List[str]:
        return ["npx", "--yes", f"pnpm@{self.package_manager_version()}", "install", "--force"]

    def install(self) -> None:
        """
        Install dependencies for the checked-out commit.

        Raises:
            SnapshotError: The install command failed or could not start.
        """
        if not self.config.install:
            logger.debug(f"{SNAPSHOT} Install disabled, using working copy as-is")
            return

        cmd = self.install_command()
        logger.info(f"{SNAPSHOT} Building registry: {' '.join(cmd)}")
        try:
            subprocess.run(cmd, cwd=str(self.repo_root), check=True)
        except (OSError, subprocess.CalledProcessError) as e:
            raise SnapshotError(f"Failed to build registry: {e}") from e

    def load_manifest(self) -> Snapshot:
        """
        Load the current-shape manifest, falling back to the legacy one.

        Raises:
            SnapshotError: Neither manifest exists, or one is malformed.
        """
        candidates = [
            (self.repo_root / self.config.manifest_path, STRUCTURED),
            (self.repo_root / self.config.legacy_manifest_path, BARE_PATH),
        ]
        for path, resolver in candidates:
            components = load_manifest_file(path)
            if components is None:
                logger.debug(f"{SNAPSHOT} No manifest at {path}")
                continue

            logger.info(f"{SNAPSHOT} Loaded {len(components)} components from {path} ({resolver.name})")
            return Snapshot(
                resolver=resolver,
                components=components,
                component_root=self.component_root,
                manifest_path=path,
            )

        raise SnapshotError(f"No registry manifest found under {self.repo_root}")


__all__ = ["Snapshot", "SnapshotBuilder", "load_manifest_file"]
