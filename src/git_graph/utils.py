"""Path and text formatting helpers."""

from __future__ import annotations

import os
import time
from pathlib import Path

UNABLE_TO_FIND_GIT_MSG = (
    "Unable to find a Git executable. Either: Set the Git Graph config "
    "'git_path' to the path of your Git executable, or install Git."
)

# (upper bound in seconds, unit, seconds per unit)
_TIME_UNITS: list[tuple[float, str, int]] = [
    (60, "second", 1),
    (3600, "minute", 60),
    (86400, "hour", 3600),
    (604800, "day", 86400),
    (2629800, "week", 604800),
    (31557600, "month", 2629800),
    (float("inf"), "year", 31557600),
]


def abbrev_commit(commit_hash: str) -> str:
    return commit_hash[:8]


def abbrev_text(text: str, to_chars: int) -> str:
    """Truncate ``text`` to at most ``to_chars`` characters, marking truncation with '...'."""
    if len(text) <= to_chars:
        return text
    return text[: to_chars - 1] + "..."


def get_relative_time_diff(unix_timestamp: int, now: float | None = None) -> str:
    """Describe a unix timestamp relative to now, e.g. '3 hours ago'."""
    current = round(time.time() if now is None else now)
    diff = current - unix_timestamp
    for bound, unit, seconds in _TIME_UNITS:
        if diff < bound:
            break
    value = round(diff / seconds)
    return f"{value} {unit}{'' if value == 1 else 's'} ago"


def normalize_path(path: str | Path) -> str:
    """Absolute path with forward slashes and no trailing separator."""
    normalized = os.path.normpath(os.path.abspath(os.path.expanduser(str(path))))
    return normalized.replace("\\", "/")


def get_repo_name(path: str) -> str:
    """Last path component of a repo path, or the path itself for a filesystem root."""
    trimmed = path.rstrip("/")
    if not trimmed or "/" not in trimmed:
        return path
    return trimmed[trimmed.rfind("/") + 1:]


def is_path_within(path: str, folder: str) -> bool:
    folder = folder.rstrip("/")
    return path == folder or path.startswith(folder + "/")


def is_path_in_workspace(path: str, workspace_folders: list[str]) -> bool:
    normalized = normalize_path(path)
    return any(is_path_within(normalized, normalize_path(folder)) for folder in workspace_folders)


def resolve_to_canonical_path(path: str) -> str:
    """Resolve symlinks so the same repository always maps to one path."""
    return normalize_path(os.path.realpath(path))
