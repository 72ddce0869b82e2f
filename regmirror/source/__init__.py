"""
External collaborators of the merge engine.

- GitRepository: commits, dates and touched paths from a git working copy
- SnapshotBuilder: installs and loads the registry manifest of a commit
"""

from .git import Commit, GitRepository, any_path_matches, matches_pattern
from .snapshot import Snapshot, SnapshotBuilder, load_manifest_file

__all__ = [
    "Commit",
    "GitRepository",
    "matches_pattern",
    "any_path_matches",
    "Snapshot",
    "SnapshotBuilder",
    "load_manifest_file",
]
