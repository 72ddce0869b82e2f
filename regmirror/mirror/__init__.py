# regmirror/mirror/__init__.py
"""
Versioned mirror of registry components.

Key components:
- compute_digest: content fingerprint used for change detection
- DescriptorResolver: maps a manifest file entry to a path (two shapes)
- MirrorStore: index.json + items/<name>.json persistence
- merge: folds one commit's manifest into the mirror

Usage:
    from regmirror.mirror import MirrorStore, merge_registry

    result = merge_registry(components, source_root, "./fake-registry", sha, date)
    for change in result.changelog:
        print(change.name, change.file_path, change.change_type.value)
"""

from .descriptors import (
    BARE_PATH,
    STRUCTURED,
    BarePathResolver,
    DescriptorResolver,
    StructuredDescriptorResolver,
    detect_resolver,
)
from .hashing import compute_digest
from .merger import merge, merge_file, merge_legacy_registry, merge_registry
from .schema import (
    ChangelogEntry,
    ChangeType,
    HistoryEntry,
    IndexEntry,
    IndexFile,
    ManifestComponent,
    MergeResult,
    Mirror,
    MirrorComponent,
    MirrorFile,
)
from .store import INDEX_FILENAME, ITEMS_DIRNAME, MirrorStore, is_valid_component_name

__all__ = [
    # Digest
    "compute_digest",
    # Model
    "HistoryEntry",
    "MirrorFile",
    "MirrorComponent",
    "IndexFile",
    "IndexEntry",
    "ManifestComponent",
    "ChangeType",
    "ChangelogEntry",
    "Mirror",
    "MergeResult",
    # Descriptors
    "DescriptorResolver",
    "StructuredDescriptorResolver",
    "BarePathResolver",
    "STRUCTURED",
    "BARE_PATH",
    "detect_resolver",
    # Store
    "MirrorStore",
    "is_valid_component_name",
    "INDEX_FILENAME",
    "ITEMS_DIRNAME",
    # Merge
    "merge",
    "merge_file",
    "merge_registry",
    "merge_legacy_registry",
]
