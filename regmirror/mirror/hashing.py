# regmirror/mirror/hashing.py
"""
Content digests for change detection.

Digests are persisted in every mirror document; switching the algorithm
invalidates all stored digests and needs a migration of the mirror.
"""

from __future__ import annotations

import hashlib

DIGEST_ALGORITHM = "sha256"


def compute_digest(content: str) -> str:
    """Return the lowercase hex SHA-256 of the UTF-8 encoded content."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


__all__ = ["DIGEST_ALGORITHM", "compute_digest"]
