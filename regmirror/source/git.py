# regmirror/source/git.py
"""
Commit source backed by a local git working copy.

Wraps the git binary; every method runs one or two git commands in the
working copy and parses their output.
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from datetime import datetime
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from regmirror.exceptions import GitCommandError
from regmirror.logging.logger import get_logger
from regmirror.logging.tags import GIT

logger = get_logger(__name__)

# Unit separator keeps commit subjects with spaces/tabs intact
_LOG_SEPARATOR = "\x1f"
_LOG_FORMAT = _LOG_SEPARATOR.join(["%H", "%cI", "%s"])


@dataclass(frozen=True)
class Commit:
    hash: str
    message: str
    date: Optional[datetime] = None

    @property
    def short(self) -> str:
        return self.hash[:7]


def matches_pattern(path: str, pattern: str) -> bool:
    """
    Glob match where `**/` may also match zero directories.

    `apps/www/registry/**/*` matches both `apps/www/registry/a.tsx`
    and `apps/www/registry/default/ui/a.tsx`.
    """
    if fnmatchcase(path, pattern):
        return True
    return "**/" in pattern and fnmatchcase(path, pattern.replace("**/", ""))


def any_path_matches(paths: Iterable[str], patterns: Sequence[str]) -> bool:
    return any(matches_pattern(p, pattern) for p in paths for pattern in patterns)


class GitRepository:
    """
    Local working copy of the upstream repository.

    Usage:
        repo = GitRepository("./repos/ui", repo_url="https://github.com/shadcn-ui/ui")
        repo.clone_or_update()
        for commit in repo.commits_between("abc123", "def456"):
            repo.checkout(commit.hash)
    """

    def __init__(self, local_path: str | Path, repo_url: str = "", branch: str = "main") -> None:
        self.local_path = Path(local_path)
        self.repo_url = repo_url
        self.branch = branch

    def _run(self, args: Sequence[str], cwd: Optional[Path] = None) -> str:
        cmd = ["git", *args]
        logger.debug(f"{GIT} {' '.join(cmd)}")
        try:
            result = subprocess.run(
                cmd,
                cwd=str(cwd or self.local_path),
                capture_output=True,
                text=True,
                check=False,
            )
        except FileNotFoundError as e:
            raise GitCommandError(args, 127, f"git executable not found: {e}") from e

        if result.returncode != 0:
            raise GitCommandError(args, result.returncode, result.stderr)
        return result.stdout

    def exists(self) -> bool:
        return (self.local_path / ".git").exists()

    def clone_or_update(self) -> None:
        """Clone the repository if missing, otherwise fetch."""
        if not self.exists():
            self.local_path.parent.mkdir(parents=True, exist_ok=True)
            logger.info(f"{GIT} Cloning repository {self.repo_url}...")
            self._run(
                ["clone", "--quiet", self.repo_url, str(self.local_path)],
                cwd=self.local_path.parent,
            )
        else:
            logger.info(f"{GIT} Updating repository...")
            self._run(["fetch", "--quiet"])

    def checkout(self, commit: str) -> None:
        logger.info(f"{GIT} Checking out commit {commit}...")
        self._run(["reset", "--hard"])
        self._run(["checkout", "--quiet", commit])

    def commit_date(self, commit: str) -> str:
        """Committer date in strict ISO 8601."""
        return self._run(["show", "-s", "--format=%cI", commit]).strip()

    def commits_between(self, start: Optional[str], end: Optional[str] = None) -> List[Commit]:
        """
        Commits reachable from `end` (default HEAD) but not from `start`,
        oldest first.
        """
        self._run(["checkout", "--force", self.branch])
        self._run(["pull", "--quiet", "origin", self.branch])

        rev_range = f"{start}..{end or 'HEAD'}" if start else (end or "HEAD")
        output = self._run(["log", "--topo-order", f"--format={_LOG_FORMAT}", rev_range])

        commits: List[Commit] = []
        for line in output.splitlines():
            if not line.strip():
                continue
            sha, date, message = (line.split(_LOG_SEPARATOR, 2) + ["", ""])[:3]
            commits.append(Commit(hash=sha, message=message, date=datetime.fromisoformat(date)))

        return sorted(commits, key=lambda c: c.date)

    def changed_files(self, commit: str) -> List[str]:
        output = self._run(["show", "--name-only", "--pretty=format:", commit])
        return [line for line in output.strip().splitlines() if line]

    def has_relevant_changes(self, commit: str, watch_patterns: Sequence[str]) -> bool:
        return any_path_matches(self.changed_files(commit), watch_patterns)


__all__ = ["Commit", "GitRepository", "matches_pattern", "any_path_matches"]
