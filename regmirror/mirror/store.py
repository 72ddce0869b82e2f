# regmirror/mirror/store.py
"""
Mirror store: a directory of JSON documents.

Layout:
    <root>/index.json          simplified listing of every component
    <root>/items/<name>.json   full component document with file history

The store is the source of truth between runs. Reads of prior state are
forgiving (a bad document means "no prior state"), writes are not.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, List, Optional

from pydantic import ValidationError

from regmirror.exceptions import PersistError, PriorStateReadError
from regmirror.logging.logger import get_logger
from regmirror.logging.tags import STORE
from regmirror.mirror.schema import IndexEntry, Mirror, MirrorComponent

logger = get_logger(__name__)

INDEX_FILENAME = "index.json"
ITEMS_DIRNAME = "items"


def is_valid_component_name(name: str) -> bool:
    """True if `name` maps to a single file directly under items/."""
    return (
        bool(name)
        and not name.startswith(".")
        and "/" not in name
        and "\\" not in name
        and "\x00" not in name
    )


class MirrorStore:
    """
    Load/save contract over a mirror directory.

    Usage:
        store = MirrorStore("./fake-registry")
        mirror = store.load_mirror()
        ...
        store.save_component(mirror["button"])
        store.save_index(mirror)
    """

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    @property
    def index_path(self) -> Path:
        return self.root / INDEX_FILENAME

    @property
    def items_dir(self) -> Path:
        return self.root / ITEMS_DIRNAME

    def item_path(self, name: str) -> Path:
        return self.items_dir / f"{name}.json"

    def exists(self) -> bool:
        return self.index_path.is_file()

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def _read_json(self, path: Path) -> Any:
        try:
            with path.open("r", encoding="utf-8") as f:
                return json.load(f)
        except FileNotFoundError as e:
            raise PriorStateReadError(path, "file not found") from e
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise PriorStateReadError(path, str(e)) from e

    def read_index_document(self) -> List[dict]:
        """Raw index.json contents."""
        data = self._read_json(self.index_path)
        if not isinstance(data, list):
            raise PriorStateReadError(self.index_path, "index is not a JSON array")
        return data

    def read_item_document(self, name: str) -> dict:
        """Raw items/<name>.json contents."""
        path = self.item_path(name)
        if not is_valid_component_name(name):
            raise PriorStateReadError(path, f"invalid component name '{name}'")
        data = self._read_json(path)
        if not isinstance(data, dict):
            raise PriorStateReadError(path, "item document is not a JSON object")
        return data

    def load_index(self) -> List[IndexEntry]:
        """
        Valid entries of index.json, in order.

        A malformed entry is logged and skipped; the rest of the index
        still loads.

        Raises:
            PriorStateReadError: index.json is missing, unreadable or not an array.
        """
        entries: List[IndexEntry] = []
        for position, raw in enumerate(self.read_index_document()):
            try:
                entry = IndexEntry.model_validate(raw)
            except ValidationError as e:
                logger.warning(f"{STORE} Skipping invalid entry #{position} in {self.index_path}: {e}")
                continue
            if not is_valid_component_name(entry.name):
                logger.warning(f"{STORE} Skipping entry #{position} in {self.index_path}: bad name '{entry.name}'")
                continue
            entries.append(entry)
        return entries

    def load_component(self, name: str) -> MirrorComponent:
        try:
            return MirrorComponent.model_validate(self.read_item_document(name))
        except ValidationError as e:
            raise PriorStateReadError(self.item_path(name), f"invalid item document: {e}") from e

    def load_mirror(self) -> Mirror:
        """
        Rebuild the mirror from index.json and the item documents it lists.

        A missing index yields an empty mirror. An unreadable index is logged
        and treated as absent state. A bad index entry or item document only
        drops that one component.
        """
        if not self.exists():
            logger.debug(f"{STORE} No index at {self.index_path}, starting with an empty mirror")
            return Mirror()

        try:
            index = self.load_index()
        except PriorStateReadError as e:
            logger.warning(f"{STORE} {e}; starting with an empty mirror")
            return Mirror()

        components: List[MirrorComponent] = []
        for entry in index:
            try:
                component = self.load_component(entry.name)
            except PriorStateReadError as e:
                logger.warning(f"{STORE} {e}; component '{entry.name}' treated as new")
                continue
            if not component.type and entry.type:
                component.type = entry.type
            if not component.dependencies and entry.dependencies:
                component.dependencies = list(entry.dependencies)
            components.append(component)

        mirror = Mirror.from_components(components)
        logger.info(f"{STORE} Loaded {len(mirror)} components from {self.root}")
        return mirror

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------

    def _write_json(self, path: Path, data: Any) -> None:
        tmp_name: Optional[str] = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_name, path)
        except (OSError, TypeError, ValueError) as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise PersistError(path, e) from e

    def save_component(self, component: MirrorComponent) -> Path:
        path = self.item_path(component.name)
        if not is_valid_component_name(component.name):
            raise PersistError(path, ValueError(f"invalid component name '{component.name}'"))
        self._write_json(path, component.model_dump(mode="json"))
        return path

    def save_index(self, mirror: Mirror) -> Path:
        index = [entry.model_dump(mode="json") for entry in mirror.to_index()]
        self._write_json(self.index_path, index)
        return self.index_path


__all__ = ["MirrorStore", "INDEX_FILENAME", "ITEMS_DIRNAME", "is_valid_component_name"]
