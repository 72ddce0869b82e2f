# regmirror/mirror/descriptors.py
"""
Resolution of raw manifest file entries to paths.

Two manifest shapes exist upstream:
- structured (current): files: [{"path": "ui/button.tsx", "type": ...}]
- bare paths (legacy):  files: ["ui/button.tsx"]

The merge engine only needs a path per entry, so each shape gets a
resolver and the merge logic itself is shared.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Protocol, runtime_checkable

from regmirror.exceptions import SnapshotError
from regmirror.mirror.schema import ManifestComponent


@runtime_checkable
class DescriptorResolver(Protocol):
    """Turns one raw file entry of a manifest component into a path."""

    name: str

    def resolve(self, entry: Any) -> str:
        ...


class StructuredDescriptorResolver:
    """Reads `path` from a `{path, ...}` descriptor."""

    name = "structured"

    def resolve(self, entry: Any) -> str:
        if not isinstance(entry, Mapping):
            raise SnapshotError(f"Expected a file descriptor object, got {type(entry).__name__}")
        path = entry.get("path")
        if not isinstance(path, str) or not path:
            raise SnapshotError(f"File descriptor without a path: {dict(entry)!r}")
        return path


class BarePathResolver:
    """Legacy manifests list file paths directly."""

    name = "legacy"

    def resolve(self, entry: Any) -> str:
        if not isinstance(entry, str) or not entry:
            raise SnapshotError(f"Expected a file path string, got {entry!r}")
        return entry


STRUCTURED = StructuredDescriptorResolver()
BARE_PATH = BarePathResolver()


def detect_resolver(components: Iterable[ManifestComponent | Mapping[str, Any]]) -> DescriptorResolver:
    """
    Pick a resolver from the first file entry found in the manifest.

    Manifests with no file entries at all resolve to the structured shape.
    """
    for component in components:
        files = component.files if isinstance(component, ManifestComponent) else component.get("files")
        for entry in files or []:
            return BARE_PATH if isinstance(entry, str) else STRUCTURED
    return STRUCTURED


__all__ = [
    "DescriptorResolver",
    "StructuredDescriptorResolver",
    "BarePathResolver",
    "STRUCTURED",
    "BARE_PATH",
    "detect_resolver",
]
