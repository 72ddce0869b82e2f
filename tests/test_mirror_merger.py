# tests/test_mirror_merger.py
"""
Tests for regmirror.mirror.merger.

Key tests verify that:
1. Only changed content creates a new version (idempotent re-merge)
2. History grows oldest-first and versions == len(history) + 1
3. A retried supersede never archives the same version twice
4. Nothing is persisted when a source file is missing
5. Structured and bare-path manifests produce the same mirror
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from regmirror.exceptions import SnapshotError, SourceReadError
from regmirror.mirror import (
    ChangeType,
    HistoryEntry,
    Mirror,
    MirrorComponent,
    MirrorFile,
    MirrorStore,
    compute_digest,
    merge,
    merge_file,
    merge_legacy_registry,
    merge_registry,
)


def write_source(root: Path, rel_path: str, content: str) -> None:
    path = root / rel_path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def button_manifest(*paths: str) -> list:
    return [
        {
            "name": "button",
            "type": "components:ui",
            "dependencies": ["@radix-ui/react-slot"],
            "files": [{"path": p, "type": "registry:ui"} for p in (paths or ("ui/button.tsx",))],
        }
    ]


@pytest.fixture
def src(tmp_path: Path) -> Path:
    root = tmp_path / "src"
    root.mkdir()
    return root


@pytest.fixture
def out(tmp_path: Path) -> Path:
    return tmp_path / "mirror"


class TestButtonScenario:
    """A file merged at c1, changed at c2, then c2 merged again."""

    def test_first_merge_adds_file(self, src: Path, out: Path):
        write_source(src, "ui/button.tsx", "A")

        result = merge_registry(button_manifest(), src, out, "c1", "2024-01-01T00:00:00+00:00")

        f = result.mirror["button"].files["ui/button.tsx"]
        assert f.versions == 1
        assert f.history == []
        assert f.content == "A"
        assert f.commit == "c1"
        assert f.digest == compute_digest("A")
        assert [(e.name, e.file_path, e.change_type) for e in result.changelog] == [
            ("button", "ui/button.tsx", ChangeType.ADDED)
        ]

    def test_changed_content_archives_previous_version(self, src: Path, out: Path):
        write_source(src, "ui/button.tsx", "A")
        first = merge_registry(button_manifest(), src, out, "c1", "2024-01-01T00:00:00+00:00")

        write_source(src, "ui/button.tsx", "B")
        second = merge_registry(
            button_manifest(), src, out, "c2", "2024-01-02T00:00:00+00:00", first.mirror
        )

        f = second.mirror["button"].files["ui/button.tsx"]
        assert f.versions == 2
        assert f.content == "B"
        assert f.commit == "c2"
        assert len(f.history) == 1
        assert f.history[0].content == "A"
        assert f.history[0].commit == "c1"
        assert f.history[0].timestamp == "2024-01-01T00:00:00+00:00"
        assert second.changelog[0].change_type is ChangeType.UPDATED

    def test_remerging_same_commit_is_noop(self, src: Path, out: Path):
        write_source(src, "ui/button.tsx", "A")
        first = merge_registry(button_manifest(), src, out, "c1", "t1")
        write_source(src, "ui/button.tsx", "B")
        second = merge_registry(button_manifest(), src, out, "c2", "t2", first.mirror)

        third = merge_registry(button_manifest(), src, out, "c2", "t2", second.mirror)

        assert third.changelog == []
        assert third.mirror == second.mirror
        assert third.mirror["button"].files["ui/button.tsx"].versions == 2


class TestIdempotence:
    def test_same_manifest_twice_gives_empty_changelog(self, src: Path, out: Path):
        write_source(src, "ui/button.tsx", "export const Button = 1")
        write_source(src, "ui/card.tsx", "export const Card = 1")
        manifest = button_manifest("ui/button.tsx", "ui/card.tsx")

        first = merge_registry(manifest, src, out, "c1", "t1")
        second = merge_registry(manifest, src, out, "c1", "t1", first.mirror)

        assert len(first.changelog) == 2
        assert second.changelog == []
        assert second.mirror == first.mirror

    def test_same_manifest_twice_via_store_gives_identical_documents(self, src: Path, out: Path):
        write_source(src, "ui/button.tsx", "A")
        merge_registry(button_manifest(), src, out, "c1", "t1")
        index_before = (out / "index.json").read_text(encoding="utf-8")
        item_before = (out / "items" / "button.json").read_text(encoding="utf-8")

        result = merge_registry(button_manifest(), src, out, "c1", "t1")

        assert result.changelog == []
        assert (out / "index.json").read_text(encoding="utf-8") == index_before
        assert (out / "items" / "button.json").read_text(encoding="utf-8") == item_before


class TestHistoryGrowth:
    def test_n_distinct_contents_give_n_versions(self, src: Path, out: Path):
        mirror = None
        contents = ["v1", "v2", "v3", "v4", "v5"]
        for i, content in enumerate(contents, start=1):
            write_source(src, "ui/button.tsx", content)
            mirror = merge_registry(button_manifest(), src, out, f"c{i}", f"t{i}", mirror).mirror

        f = mirror["button"].files["ui/button.tsx"]
        assert f.versions == len(contents)
        assert len(f.history) == len(contents) - 1
        assert [h.content for h in f.history] == contents[:-1]
        assert [h.commit for h in f.history] == ["c1", "c2", "c3", "c4"]

    def test_reverted_content_is_not_collapsed(self, src: Path, out: Path):
        mirror = None
        for i, content in enumerate(["A", "B", "A", "C"], start=1):
            write_source(src, "ui/button.tsx", content)
            mirror = merge_registry(button_manifest(), src, out, f"c{i}", f"t{i}", mirror).mirror

        f = mirror["button"].files["ui/button.tsx"]
        assert [h.content for h in f.history] == ["A", "B", "A"]
        assert f.versions == 4


class TestRetryGuard:
    def test_does_not_archive_version_already_at_end_of_history(self):
        """A crash between archiving and replacing leaves the current version in history."""
        current = MirrorFile(
            path="ui/button.tsx",
            digest=compute_digest("A"),
            content="A",
            commit="c1",
            timestamp="t1",
            history=[HistoryEntry(digest=compute_digest("A"), content="A", commit="c1", timestamp="t1")],
            versions=1,
        )
        component = MirrorComponent(name="button", files={"ui/button.tsx": current})

        change = merge_file(component, "ui/button.tsx", "B", compute_digest("B"), "c2", "t2")

        f = component.files["ui/button.tsx"]
        assert change is ChangeType.UPDATED
        assert len(f.history) == 1
        assert f.versions == 2
        assert f.content == "B"

    def test_unchanged_digest_returns_none(self):
        component = MirrorComponent(name="button")
        merge_file(component, "a.tsx", "A", compute_digest("A"), "c1", "t1")

        assert merge_file(component, "a.tsx", "A", compute_digest("A"), "c2", "t2") is None
        assert component.files["a.tsx"].commit == "c1"


class TestPersistence:
    def test_writes_item_documents_and_index(self, src: Path, out: Path):
        write_source(src, "ui/button.tsx", "A")
        merge_registry(button_manifest(), src, out, "c1", "t1")

        item = json.loads((out / "items" / "button.json").read_text(encoding="utf-8"))
        index = json.loads((out / "index.json").read_text(encoding="utf-8"))

        assert item["name"] == "button"
        assert item["dependencies"] == ["@radix-ui/react-slot"]
        assert item["files"][0]["digest"] == compute_digest("A")
        assert item["files"][0]["history"] == []
        assert index == [
            {
                "name": "button",
                "type": "components:ui",
                "dependencies": ["@radix-ui/react-slot"],
                "files": [{"path": "ui/button.tsx", "versions": 1}],
            }
        ]

    def test_index_projection_matches_documents(self, src: Path, out: Path):
        mirror = None
        for i, content in enumerate(["A", "B", "C"], start=1):
            write_source(src, "ui/button.tsx", content)
            write_source(src, "ui/card.tsx", "card")
            manifest = button_manifest("ui/button.tsx", "ui/card.tsx")
            mirror = merge_registry(manifest, src, out, f"c{i}", f"t{i}", mirror).mirror

        index = json.loads((out / "index.json").read_text(encoding="utf-8"))
        for entry in index:
            item = json.loads((out / "items" / f"{entry['name']}.json").read_text(encoding="utf-8"))
            item_versions = {f["path"]: f["versions"] for f in item["files"]}
            for f in entry["files"]:
                assert set(f) == {"path", "versions"}
                assert f["versions"] == item_versions[f["path"]]
        assert index[0]["files"] == [
            {"path": "ui/button.tsx", "versions": 3},
            {"path": "ui/card.tsx", "versions": 1},
        ]

    def test_index_keeps_components_missing_from_manifest(self, src: Path, out: Path):
        write_source(src, "ui/button.tsx", "A")
        write_source(src, "ui/card.tsx", "card")
        merge_registry(
            button_manifest() + [{"name": "card", "type": "components:ui", "files": [{"path": "ui/card.tsx"}]}],
            src,
            out,
            "c1",
            "t1",
        )

        write_source(src, "ui/button.tsx", "B")
        merge_registry(button_manifest(), src, out, "c2", "t2")

        index = json.loads((out / "index.json").read_text(encoding="utf-8"))
        assert [e["name"] for e in index] == ["button", "card"]

    def test_reloads_prior_mirror_from_store(self, src: Path, out: Path):
        write_source(src, "ui/button.tsx", "A")
        merge_registry(button_manifest(), src, out, "c1", "t1")

        write_source(src, "ui/button.tsx", "B")
        result = merge_registry(button_manifest(), src, out, "c2", "t2")

        f = result.mirror["button"].files["ui/button.tsx"]
        assert f.versions == 2
        assert f.history[0].content == "A"

    def test_corrupt_prior_item_is_treated_as_new(self, src: Path, out: Path):
        write_source(src, "ui/button.tsx", "A")
        merge_registry(button_manifest(), src, out, "c1", "t1")
        (out / "items" / "button.json").write_text("{not json", encoding="utf-8")

        write_source(src, "ui/button.tsx", "B")
        result = merge_registry(button_manifest(), src, out, "c2", "t2")

        f = result.mirror["button"].files["ui/button.tsx"]
        assert result.changelog[0].change_type is ChangeType.ADDED
        assert f.versions == 1
        assert f.history == []

    @pytest.mark.parametrize(
        "files",
        [
            [{"digest": "x", "content": "A", "commit": "c1", "timestamp": "t1"}],
            ["ui/button.tsx"],
        ],
        ids=["entry-without-path", "entry-not-an-object"],
    )
    def test_malformed_prior_file_entry_is_treated_as_new(self, src: Path, out: Path, files):
        write_source(src, "ui/button.tsx", "A")
        merge_registry(button_manifest(), src, out, "c1", "t1")
        (out / "items" / "button.json").write_text(
            json.dumps({"name": "button", "files": files}), encoding="utf-8"
        )

        write_source(src, "ui/button.tsx", "B")
        result = merge_registry(button_manifest(), src, out, "c2", "t2")

        f = result.mirror["button"].files["ui/button.tsx"]
        assert result.changelog[0].change_type is ChangeType.ADDED
        assert f.versions == 1
        item = json.loads((out / "items" / "button.json").read_text(encoding="utf-8"))
        assert item["files"][0]["path"] == "ui/button.tsx"

    def test_invalid_index_entry_keeps_other_components(self, src: Path, out: Path):
        write_source(src, "ui/button.tsx", "A")
        merge_registry(button_manifest(), src, out, "c1", "t1")
        index = json.loads((out / "index.json").read_text(encoding="utf-8"))
        index.append({"type": "components:ui"})
        (out / "index.json").write_text(json.dumps(index), encoding="utf-8")

        write_source(src, "ui/card.tsx", "C")
        card = [{"name": "card", "files": [{"path": "ui/card.tsx"}]}]
        result = merge_registry(card, src, out, "c2", "t2")

        index_after = json.loads((out / "index.json").read_text(encoding="utf-8"))
        assert [entry["name"] for entry in index_after] == ["button", "card"]
        assert "button" in result.mirror


class TestFailureSemantics:
    @pytest.mark.parametrize("name", ["../button", "ui/button", ".button"])
    def test_path_like_component_name_is_rejected(self, src: Path, out: Path, name: str):
        write_source(src, "ui/button.tsx", "A")
        manifest = [{"name": name, "files": [{"path": "ui/button.tsx"}]}]

        with pytest.raises(SnapshotError):
            merge_registry(manifest, src, out, "c1", "t1")

        assert not out.exists()

    def test_missing_source_file_is_fatal(self, src: Path, out: Path):
        with pytest.raises(SourceReadError) as exc_info:
            merge_registry(button_manifest(), src, out, "c1", "t1")

        assert exc_info.value.component == "button"
        assert not (out / "index.json").exists()

    def test_failed_commit_persists_nothing(self, src: Path, out: Path):
        write_source(src, "ui/button.tsx", "A")
        first = merge_registry(button_manifest(), src, out, "c1", "t1")
        index_before = (out / "index.json").read_text(encoding="utf-8")

        write_source(src, "ui/button.tsx", "B")
        manifest = button_manifest() + [{"name": "card", "files": [{"path": "ui/missing.tsx"}]}]
        with pytest.raises(SourceReadError):
            merge_registry(manifest, src, out, "c2", "t2", first.mirror)

        assert (out / "index.json").read_text(encoding="utf-8") == index_before
        assert not (out / "items" / "card.json").exists()
        item = json.loads((out / "items" / "button.json").read_text(encoding="utf-8"))
        assert item["files"][0]["content"] == "A"

    def test_prior_mirror_is_not_mutated(self, src: Path, out: Path):
        write_source(src, "ui/button.tsx", "A")
        first = merge_registry(button_manifest(), src, out, "c1", "t1")

        write_source(src, "ui/button.tsx", "B")
        merge_registry(button_manifest(), src, out, "c2", "t2", first.mirror)

        assert first.mirror["button"].files["ui/button.tsx"].content == "A"
        assert first.mirror["button"].files["ui/button.tsx"].versions == 1

    def test_wrong_descriptor_shape_raises(self, src: Path, out: Path):
        write_source(src, "ui/button.tsx", "A")
        legacy = [{"name": "button", "files": ["ui/button.tsx"]}]

        with pytest.raises(SnapshotError):
            merge_registry(legacy, src, out, "c1", "t1")


class TestCrossVariantEquivalence:
    def test_structured_and_bare_paths_produce_same_mirror(self, tmp_path: Path, src: Path):
        write_source(src, "ui/button.tsx", "button")
        write_source(src, "example/button-demo.tsx", "demo")
        structured = [
            {
                "name": "button",
                "type": "components:ui",
                "dependencies": ["@radix-ui/react-slot"],
                "files": [
                    {"path": "ui/button.tsx", "type": "registry:ui", "target": ""},
                    {"path": "example/button-demo.tsx", "type": "registry:example"},
                ],
            }
        ]
        legacy = [
            {
                "name": "button",
                "type": "components:ui",
                "dependencies": ["@radix-ui/react-slot"],
                "files": ["ui/button.tsx", "example/button-demo.tsx"],
            }
        ]

        a = merge_registry(structured, src, tmp_path / "a", "c1", "t1")
        b = merge_legacy_registry(legacy, src, tmp_path / "b", "c1", "t1")

        assert a.mirror == b.mirror
        assert a.changelog == b.changelog
        assert (tmp_path / "a" / "index.json").read_text(encoding="utf-8") == (
            tmp_path / "b" / "index.json"
        ).read_text(encoding="utf-8")


class TestConcurrentReads:
    def test_parallel_reads_keep_manifest_order(self, src: Path, out: Path):
        paths = [f"ui/file{i}.tsx" for i in range(8)]
        for i, p in enumerate(paths):
            write_source(src, p, f"content {i}")

        result = merge_registry(button_manifest(*paths), src, out, "c1", "t1", max_workers=4)

        assert list(result.mirror["button"].files) == paths
        assert [e.file_path for e in result.changelog] == paths

    def test_custom_store_is_used(self, src: Path, tmp_path: Path):
        write_source(src, "ui/button.tsx", "A")
        store = MirrorStore(tmp_path / "custom")

        merge(button_manifest(), src, tmp_path / "ignored", "c1", "t1", store=store)

        assert store.exists()
        assert not (tmp_path / "ignored").exists()


class TestComponentAttributes:
    def test_type_and_dependencies_fixed_at_creation(self, src: Path, out: Path):
        write_source(src, "ui/button.tsx", "A")
        first = merge_registry(button_manifest(), src, out, "c1", "t1")

        changed = button_manifest()
        changed[0]["type"] = "registry:ui"
        changed[0]["dependencies"] = ["clsx"]
        second = merge_registry(changed, src, out, "c2", "t2", first.mirror)

        assert second.mirror["button"].type == "components:ui"
        assert second.mirror["button"].dependencies == ["@radix-ui/react-slot"]

    def test_empty_prior_mirror_is_not_reloaded(self, src: Path, out: Path):
        write_source(src, "ui/button.tsx", "A")
        merge_registry(button_manifest(), src, out, "c1", "t1")

        result = merge_registry([], src, out, "c2", "t2", Mirror())

        assert len(result.mirror) == 0
        assert json.loads((out / "index.json").read_text(encoding="utf-8")) == []
