# regmirror/mirror/schema.py
"""
Data model for the registry mirror.

Persisted shapes:
- MirrorComponent: one items/<name>.json document (full file history)
- IndexEntry: one element of index.json (paths and version counts only)

In memory, a component keys its files by path and a Mirror keys its
components by name. Both mappings keep first-seen order, which is the
order of the persisted lists.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Mapping, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
)


def _none_to_list(v: Any) -> Any:
    return [] if v is None else v


# =============================================================================
# Mirror documents
# =============================================================================


class HistoryEntry(BaseModel):
    """A superseded version of a file."""

    digest: str = Field(..., validation_alias=AliasChoices("digest", "hash"))
    content: str
    commit: str
    timestamp: str

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class MirrorFile(BaseModel):
    """Current version of a file plus everything it replaced, oldest first."""

    path: str
    digest: str = Field(..., validation_alias=AliasChoices("digest", "hash"))
    content: str
    commit: str
    timestamp: str
    history: List[HistoryEntry] = Field(default_factory=list)
    versions: int = Field(1, ge=1)

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("history", mode="before")
    @classmethod
    def _history_default(cls, v: Any) -> Any:
        return _none_to_list(v)

    def to_history_entry(self) -> HistoryEntry:
        return HistoryEntry(
            digest=self.digest,
            content=self.content,
            commit=self.commit,
            timestamp=self.timestamp,
        )


class MirrorComponent(BaseModel):
    """A named component and the versioned files that belong to it."""

    name: str
    type: str = ""
    dependencies: List[str] = Field(default_factory=list)
    files: Dict[str, MirrorFile] = Field(default_factory=dict)

    model_config = ConfigDict(extra="ignore")

    @field_validator("dependencies", mode="before")
    @classmethod
    def _dependencies_default(cls, v: Any) -> Any:
        return _none_to_list(v)

    @field_validator("files", mode="before")
    @classmethod
    def _files_by_path(cls, v: Any) -> Any:
        if v is None:
            return {}
        if isinstance(v, list):
            keyed: Dict[str, Any] = {}
            for entry in v:
                if isinstance(entry, MirrorFile):
                    path = entry.path
                elif isinstance(entry, Mapping):
                    path = entry.get("path")
                else:
                    raise ValueError(f"file entry must be an object, got {type(entry).__name__}")
                if not isinstance(path, str) or not path:
                    raise ValueError("file entry has no 'path'")
                keyed[path] = entry
            return keyed
        return v

    @field_serializer("files")
    def _files_as_list(self, files: Dict[str, MirrorFile]) -> List[Dict[str, Any]]:
        return [f.model_dump() for f in files.values()]

    def to_index_entry(self) -> "IndexEntry":
        return IndexEntry(
            name=self.name,
            type=self.type,
            dependencies=list(self.dependencies),
            files=[IndexFile(path=f.path, versions=f.versions) for f in self.files.values()],
        )


# =============================================================================
# Index documents
# =============================================================================


class IndexFile(BaseModel):
    path: str
    versions: int

    model_config = ConfigDict(extra="ignore")


class IndexEntry(BaseModel):
    """Projection of a component used by index.json."""

    name: str
    type: str = ""
    dependencies: List[str] = Field(default_factory=list)
    files: List[IndexFile] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")

    @field_validator("dependencies", "files", mode="before")
    @classmethod
    def _lists_default(cls, v: Any) -> Any:
        return _none_to_list(v)


# =============================================================================
# Manifest input
# =============================================================================


class ManifestComponent(BaseModel):
    """
    A component as reported by the snapshot producer for one commit.

    `files` holds raw entries; a DescriptorResolver turns each into a path.
    Extra manifest keys are kept but never used by the merge.
    """

    name: str
    type: str = ""
    dependencies: List[str] = Field(default_factory=list)
    files: List[Any] = Field(default_factory=list)

    model_config = ConfigDict(extra="allow")

    @field_validator("dependencies", "files", mode="before")
    @classmethod
    def _lists_default(cls, v: Any) -> Any:
        return _none_to_list(v)


# =============================================================================
# Merge output
# =============================================================================


class ChangeType(str, Enum):
    ADDED = "added"
    UPDATED = "updated"


@dataclass(frozen=True)
class ChangelogEntry:
    """One file-level change produced by a merge."""

    name: str
    file_path: str
    change_type: ChangeType


class Mirror:
    """
    The accumulated registry: component name -> MirrorComponent.

    A merge works on a copy and returns it, so a Mirror handed to merge()
    is never modified.
    """

    def __init__(self, components: Optional[Mapping[str, MirrorComponent]] = None) -> None:
        self._components: Dict[str, MirrorComponent] = dict(components or {})

    @classmethod
    def from_components(cls, components: List[MirrorComponent]) -> "Mirror":
        return cls({c.name: c for c in components})

    def get(self, name: str) -> Optional[MirrorComponent]:
        return self._components.get(name)

    def add(self, component: MirrorComponent) -> None:
        self._components[component.name] = component

    def copy(self) -> "Mirror":
        return Mirror({name: c.model_copy(deep=True) for name, c in self._components.items()})

    def to_index(self) -> List[IndexEntry]:
        return [c.to_index_entry() for c in self._components.values()]

    def __getitem__(self, name: str) -> MirrorComponent:
        return self._components[name]

    def __contains__(self, name: object) -> bool:
        return name in self._components

    def __iter__(self) -> Iterator[MirrorComponent]:
        return iter(self._components.values())

    def __len__(self) -> int:
        return len(self._components)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Mirror):
            return NotImplemented
        return self._components == other._components

    def __repr__(self) -> str:
        return f"Mirror(components={len(self)})"


@dataclass
class MergeResult:
    """Updated mirror plus the changes one merge call made."""

    mirror: Mirror
    changelog: List[ChangelogEntry] = field(default_factory=list)

    @property
    def summary(self) -> str:
        added = sum(1 for e in self.changelog if e.change_type is ChangeType.ADDED)
        updated = len(self.changelog) - added
        return f"components={len(self.mirror)}, added={added}, updated={updated}"


__all__ = [
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
]
