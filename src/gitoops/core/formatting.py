"""Text helpers for plan descriptions, branch names and marker timestamps.

Design principles:
- Summaries fit on one line (~80 chars max)
- Grammatically correct (1 commit vs 2 commits)
- Generated names are valid git ref components
"""

from __future__ import annotations

import re
from datetime import UTC, datetime

_SHA_RE = re.compile(r"^[0-9a-f]{7,40}$", re.IGNORECASE)
_BRANCH_INVALID_RE = re.compile(r"[^a-z0-9-]")
_DASH_RUN_RE = re.compile(r"-+")

BRANCH_NAME_MAX = 50


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    """Return grammatically correct singular/plural form.

    Examples:
        pluralize(1, "commit") -> "1 commit"
        pluralize(3, "commit") -> "3 commits"
    """
    if plural is None:
        plural = singular + "s"
    word = singular if count == 1 else plural
    return f"{count} {word}"


def truncate_text(text: str, max_len: int = 60, suffix: str = "...") -> str:
    """Truncate text to max_len characters, suffix included."""
    if len(text) <= max_len:
        return text
    return text[: max_len - len(suffix)] + suffix


def sanitize_branch_name(text: str) -> str:
    """Turn free text (usually a commit subject) into a branch name component.

    Lowercases, replaces anything outside [a-z0-9-] with dashes, collapses dash
    runs and trims to BRANCH_NAME_MAX characters.

    Examples:
        "Fix: login bug!" -> "fix-login-bug"
        "  ***  " -> ""
    """
    slug = _BRANCH_INVALID_RE.sub("-", text.lower())
    slug = _DASH_RUN_RE.sub("-", slug).strip("-")
    return slug[:BRANCH_NAME_MAX].rstrip("-")


def is_valid_sha(sha: str) -> bool:
    """True for 7-40 hex characters (abbreviated or full object name)."""
    return bool(_SHA_RE.match(sha))


def short_sha(sha: str, length: int = 8) -> str:
    return sha[:length]


def format_timestamp(moment: datetime | None = None) -> str:
    """Compact UTC timestamp with seconds granularity: YYYYMMDD-HHMMSS."""
    moment = moment or datetime.now(UTC)
    return moment.astimezone(UTC).strftime("%Y%m%d-%H%M%S")


def format_path_list(paths: list[str], *, max_shown: int = 5) -> list[str]:
    """Bullet lines for a path list, collapsing the tail into '... and N more'."""
    lines = [f"• {p}" for p in paths[:max_shown]]
    if len(paths) > max_shown:
        lines.append(f"... and {len(paths) - max_shown} more")
    return lines
