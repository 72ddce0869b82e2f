# regmirror/runner.py
"""
Multi-commit mirror run.

Orchestrates:
1. Clone or update the working copy
2. Select commits (a range, or a single commit) touching watched paths
3. For each commit, strictly in order: checkout, install, load manifest, merge
4. Carry the merged mirror into the next commit

A commit that fails to build or merge is logged and skipped; the run
continues with the next one and the store keeps the last good state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, List, Optional

from regmirror.config.schema import MirrorConfig
from regmirror.exceptions import RegistryMirrorError
from regmirror.logging.logger import get_logger
from regmirror.logging.tags import RUN
from regmirror.mirror.merger import merge
from regmirror.mirror.schema import MergeResult, Mirror
from regmirror.mirror.store import MirrorStore
from regmirror.source.git import Commit, GitRepository
from regmirror.source.snapshot import SnapshotBuilder

logger = get_logger(__name__)

ProgressCallback = Callable[[int, int, Commit], None]


@dataclass
class CommitFailure:
    commit: str
    error: str


@dataclass
class RunSummary:
    """Summary of a mirror run."""

    selected: int = 0
    processed: int = 0
    skipped: int = 0
    failed: int = 0
    changes: int = 0
    failures: List[CommitFailure] = field(default_factory=list)
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    finished_at: Optional[datetime] = None

    @property
    def duration_seconds(self) -> float:
        if self.finished_at is None:
            return 0.0
        return (self.finished_at - self.started_at).total_seconds()

    def __str__(self) -> str:
        return (
            f"processed {self.processed}, skipped {self.skipped}, "
            f"failed {self.failed}, file changes {self.changes}"
        )


class MirrorRunner:
    """
    Runs the mirror over a range of upstream commits.

    Usage:
        runner = MirrorRunner(load_config())
        summary = runner.run("abc123", "def456")
        print(summary)
    """

    def __init__(
        self,
        config: MirrorConfig,
        *,
        repository: Optional[GitRepository] = None,
        builder: Optional[SnapshotBuilder] = None,
        store: Optional[MirrorStore] = None,
    ) -> None:
        self.config = config
        self.repository = repository or GitRepository(
            config.source.local_repo,
            repo_url=config.source.repo_url,
            branch=config.source.branch,
        )
        self.builder = builder or SnapshotBuilder(self.repository.local_path, config.snapshot)
        self.store = store or MirrorStore(config.mirror.output_path)
        self.mirror: Optional[Mirror] = None

    def select_commits(self, start: str, end: Optional[str] = None) -> List[Commit]:
        if end:
            return self.repository.commits_between(start, end)
        return [Commit(hash=start, message="Single commit processing")]

    def process_commit(self, commit: Commit) -> MergeResult:
        """
        Build the snapshot of one commit and merge it into the running mirror.

        Raises:
            RegistryMirrorError: The commit could not be built or merged.
        """
        self.repository.checkout(commit.hash)
        commit_date = self.repository.commit_date(commit.hash)

        self.builder.install()
        snapshot = self.builder.load_manifest()

        result = merge(
            snapshot.components,
            snapshot.component_root,
            self.store.root,
            commit.hash,
            commit_date,
            self.mirror,
            resolver=snapshot.resolver,
            store=self.store,
            max_workers=self.config.mirror.max_workers,
        )
        self.mirror = result.mirror
        return result

    def run(
        self,
        start: str,
        end: Optional[str] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> RunSummary:
        summary = RunSummary()

        self.repository.clone_or_update()
        commits = self.select_commits(start, end)
        watch_patterns = self.config.source.watch_patterns

        relevant: List[Commit] = []
        for commit in commits:
            if watch_patterns and not self.repository.has_relevant_changes(commit.hash, watch_patterns):
                logger.info(f"{RUN} skip {commit.short} - {commit.message}")
                summary.skipped += 1
                continue
            logger.info(f"{RUN} process {commit.short} - {commit.message}")
            relevant.append(commit)

        summary.selected = len(relevant)
        logger.info(f"{RUN} Total commits: {len(relevant)}")

        for i, commit in enumerate(relevant, start=1):
            if on_progress is not None:
                on_progress(i, len(relevant), commit)
            try:
                result = self.process_commit(commit)
            except RegistryMirrorError as e:
                logger.warning(f"{RUN} Failed to mirror registry for commit {commit.hash}: {e}")
                summary.failed += 1
                summary.failures.append(CommitFailure(commit=commit.hash, error=str(e)))
                continue

            summary.processed += 1
            summary.changes += len(result.changelog)
            logger.info(f"{RUN} Registry built successfully for commit {commit.hash}")

        summary.finished_at = datetime.now(timezone.utc)
        logger.info(f"{RUN} All commits processed: {summary}")
        return summary


__all__ = ["MirrorRunner", "RunSummary", "CommitFailure"]
