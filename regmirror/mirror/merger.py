# regmirror/mirror/merger.py
"""
Mirror-merge engine.

Folds one commit's manifest into the mirror:

1. Find or create each manifest component in the mirror
2. Read and digest every file the component lists
3. Files that are new or whose digest changed get a new current version;
   the version they replace moves into history
4. Once every component merged, write the touched item documents and
   rewrite index.json over the whole mirror

Nothing is written if any source file of the commit cannot be read, so the
store never holds half a commit.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from regmirror.exceptions import SnapshotError, SourceReadError
from regmirror.logging.logger import get_logger
from regmirror.logging.tags import MERGE
from regmirror.mirror.descriptors import BARE_PATH, STRUCTURED, DescriptorResolver
from regmirror.mirror.hashing import compute_digest
from regmirror.mirror.schema import (
    ChangelogEntry,
    ChangeType,
    ManifestComponent,
    MergeResult,
    Mirror,
    MirrorComponent,
    MirrorFile,
)
from regmirror.mirror.store import MirrorStore, is_valid_component_name

logger = get_logger(__name__)

SourceFile = Tuple[str, str, str]  # (path, content, digest)


def _read_source(component: str, root: Path, path: str) -> SourceFile:
    full_path = root / path
    try:
        content = full_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SourceReadError(component, full_path, e) from e
    return path, content, compute_digest(content)


def _read_sources(
    component: str,
    root: Path,
    paths: List[str],
    max_workers: int,
) -> List[SourceFile]:
    """Read and digest files; results come back in manifest order."""
    if max_workers <= 1 or len(paths) <= 1:
        return [_read_source(component, root, p) for p in paths]

    with ThreadPoolExecutor(max_workers=min(max_workers, len(paths))) as pool:
        return list(pool.map(lambda p: _read_source(component, root, p), paths))


def merge_file(
    component: MirrorComponent,
    path: str,
    content: str,
    digest: str,
    commit_id: str,
    commit_timestamp: str,
) -> Optional[ChangeType]:
    """
    Record a file version in the component.

    Returns the kind of change, or None when the digest is already current.
    """
    existing = component.files.get(path)
    if existing is not None and existing.digest == digest:
        return None

    history = list(existing.history) if existing is not None else []
    if existing is not None and (not history or history[-1].digest != existing.digest):
        history.append(existing.to_history_entry())

    component.files[path] = MirrorFile(
        path=path,
        digest=digest,
        content=content,
        commit=commit_id,
        timestamp=commit_timestamp,
        history=history,
        versions=len(history) + 1,
    )
    return ChangeType.ADDED if existing is None else ChangeType.UPDATED


def _as_manifest_components(
    components: Iterable[ManifestComponent | Mapping[str, Any]],
) -> List[ManifestComponent]:
    return [
        c if isinstance(c, ManifestComponent) else ManifestComponent.model_validate(c)
        for c in components
    ]


def merge(
    manifest_components: Iterable[ManifestComponent | Mapping[str, Any]],
    component_source_root: str | Path,
    output_root: str | Path,
    commit_id: str,
    commit_timestamp: str,
    prior_mirror: Optional[Mirror] = None,
    *,
    resolver: DescriptorResolver = STRUCTURED,
    store: Optional[MirrorStore] = None,
    max_workers: int = 1,
) -> MergeResult:
    """
    Merge one commit's manifest into the mirror and persist the result.

    Args:
        manifest_components: Components reported for the commit.
        component_source_root: Directory the manifest's file paths resolve against.
        output_root: Mirror directory.
        commit_id: Commit recorded on every file version written by this call.
        commit_timestamp: ISO 8601 time of the commit.
        prior_mirror: Mirror to merge into. If None, it is loaded from output_root.
        resolver: How a raw file entry maps to a path (manifest shape).
        store: Store to use instead of MirrorStore(output_root).
        max_workers: Parallel file reads per component.

    Returns:
        MergeResult with a new Mirror (prior_mirror is left untouched) and
        the changelog of added/updated files.

    Raises:
        SourceReadError: A listed file could not be read. Nothing is persisted.
        SnapshotError: A file entry does not match the manifest shape, or a
            component name cannot be stored as items/<name>.json.
        PersistError: A document could not be written.
    """
    store = store or MirrorStore(output_root)
    source_root = Path(component_source_root)
    components = _as_manifest_components(manifest_components)
    for manifest_component in components:
        if not is_valid_component_name(manifest_component.name):
            raise SnapshotError(f"Invalid component name in manifest: '{manifest_component.name}'")

    mirror = prior_mirror.copy() if prior_mirror is not None else store.load_mirror()

    changelog: List[ChangelogEntry] = []
    touched: List[str] = []

    for manifest_component in components:
        name = manifest_component.name
        component = mirror.get(name)
        if component is None:
            component = MirrorComponent(
                name=name,
                type=manifest_component.type,
                dependencies=list(manifest_component.dependencies),
            )
            mirror.add(component)

        paths = [resolver.resolve(entry) for entry in manifest_component.files]
        for path, content, digest in _read_sources(name, source_root, paths, max_workers):
            change = merge_file(component, path, content, digest, commit_id, commit_timestamp)
            if change is not None:
                changelog.append(ChangelogEntry(name=name, file_path=path, change_type=change))

        if name not in touched:
            touched.append(name)

    for name in touched:
        store.save_component(mirror[name])
    store.save_index(mirror)

    result = MergeResult(mirror=mirror, changelog=changelog)
    logger.info(f"{MERGE} Commit {commit_id[:7]} merged ({resolver.name}): {result.summary}")
    for entry in changelog:
        logger.debug(f"{MERGE}   {entry.change_type.value:<7} {entry.name}/{entry.file_path}")

    return result


def merge_registry(
    manifest_components: Iterable[ManifestComponent | Mapping[str, Any]],
    component_source_root: str | Path,
    output_root: str | Path,
    commit_id: str,
    commit_timestamp: str,
    prior_mirror: Optional[Mirror] = None,
    **kwargs: Any,
) -> MergeResult:
    """Merge a manifest whose files are `{path, ...}` descriptors."""
    return merge(
        manifest_components,
        component_source_root,
        output_root,
        commit_id,
        commit_timestamp,
        prior_mirror,
        resolver=STRUCTURED,
        **kwargs,
    )


def merge_legacy_registry(
    manifest_components: Iterable[ManifestComponent | Mapping[str, Any]],
    component_source_root: str | Path,
    output_root: str | Path,
    commit_id: str,
    commit_timestamp: str,
    prior_mirror: Optional[Mirror] = None,
    **kwargs: Any,
) -> MergeResult:
    """Merge a legacy manifest whose files are bare path strings."""
    return merge(
        manifest_components,
        component_source_root,
        output_root,
        commit_id,
        commit_timestamp,
        prior_mirror,
        resolver=BARE_PATH,
        **kwargs,
    )


__all__ = [
    "merge",
    "merge_file",
    "merge_registry",
    "merge_legacy_registry",
]
