# regmirror/logging/tags.py
"""Short prefixes that mark which subsystem produced a log line."""

MERGE = "[MERGE]"
STORE = "[STORE]"
GIT = "[GIT]"
SNAPSHOT = "[SNAPSHOT]"
RUN = "[RUN]"
API = "[API]"
CLI = "[CLI]"

__all__ = ["MERGE", "STORE", "GIT", "SNAPSHOT", "RUN", "API", "CLI"]
