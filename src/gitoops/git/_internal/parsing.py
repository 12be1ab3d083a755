"""Parsers for git porcelain output and ref names.

Every parser here is pure and tolerant of trailing newlines. Free-text parsing
is confined to this module so a change in git's output has one point of change.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime

from gitoops.config.constants import POCKET_NAMESPACE
from gitoops.git._internal.constants import (
    BRANCH_HEADER_PREFIX,
    DETACHED_HEADER,
    LOG_FIELD_SEP,
    REFS_HEADS,
    STATUS_COPIED,
    STATUS_IGNORED,
    STATUS_RENAMED,
    STATUS_UNMODIFIED,
    STATUS_UNTRACKED,
    UNBORN_HEADER_PREFIXES,
)
from gitoops.git.models import CommitRecord, PocketEntry, RepositoryStatus

_AHEAD_RE = re.compile(r"ahead (\d+)")
_BEHIND_RE = re.compile(r"behind (\d+)")


@dataclass(frozen=True, slots=True)
class BranchHeader:
    branch: str
    upstream: str | None = None
    ahead: int = 0
    behind: int = 0
    is_detached: bool = False
    is_unborn: bool = False


def parse_branch_header(line: str) -> BranchHeader:
    """Parse the '## ...' line of `git status --branch --porcelain`.

    Examples:
        "## main...origin/main [ahead 3, behind 1]" -> main, origin/main, 3, 1
        "## No commits yet on main" -> main (unborn)
        "## HEAD (no branch)" -> HEAD (detached)
    """
    text = line[len(BRANCH_HEADER_PREFIX) :] if line.startswith(BRANCH_HEADER_PREFIX) else line
    text = text.strip()

    for prefix in UNBORN_HEADER_PREFIXES:
        if text.startswith(prefix):
            return BranchHeader(branch=text[len(prefix) :].split("...", 1)[0], is_unborn=True)

    if text == DETACHED_HEADER:
        return BranchHeader(branch="HEAD", is_detached=True)

    tracking = ""
    if " [" in text:
        text, tracking = text.split(" [", 1)

    upstream: str | None = None
    branch = text
    if "..." in text:
        branch, upstream = text.split("...", 1)

    ahead = _AHEAD_RE.search(tracking)
    behind = _BEHIND_RE.search(tracking)
    return BranchHeader(
        branch=branch,
        upstream=upstream or None,
        ahead=int(ahead.group(1)) if ahead else 0,
        behind=int(behind.group(1)) if behind else 0,
    )


def parse_status(output: str) -> RepositoryStatus:
    """Parse `git status --porcelain=v1 --branch -z` output.

    Classification per entry's two status columns:
    - first column not space and not '?' -> staged
    - second column not space (and entry not untracked) -> unstaged
    - both '?' -> untracked
    A path may be both staged and unstaged ("MM").
    """
    entries = output.split("\0")
    header = BranchHeader(branch="HEAD")
    staged: dict[str, None] = {}
    unstaged: dict[str, None] = {}
    untracked: dict[str, None] = {}

    i = 0
    while i < len(entries):
        entry = entries[i]
        i += 1
        if not entry:
            continue
        if entry.startswith(BRANCH_HEADER_PREFIX):
            header = parse_branch_header(entry)
            continue

        code, path = entry[:2], entry[3:]
        index_col, tree_col = code[0], code[1]

        # -z puts the source path of a rename/copy in the following entry
        if index_col in (STATUS_RENAMED, STATUS_COPIED) or tree_col in (
            STATUS_RENAMED,
            STATUS_COPIED,
        ):
            i += 1

        if code == STATUS_UNTRACKED * 2:
            untracked[path] = None
            continue
        if code == STATUS_IGNORED * 2:
            continue
        if index_col not in (STATUS_UNMODIFIED, STATUS_UNTRACKED):
            staged[path] = None
        if tree_col != STATUS_UNMODIFIED:
            unstaged[path] = None

    return RepositoryStatus(
        staged=tuple(staged),
        unstaged=tuple(unstaged),
        untracked=tuple(untracked),
        branch=header.branch,
        upstream=header.upstream,
        ahead=header.ahead,
        behind=header.behind,
        is_detached=header.is_detached,
        is_unborn=header.is_unborn,
    )


def parse_log(output: str) -> list[CommitRecord]:
    """Parse log lines produced with LOG_FORMAT, newest first."""
    commits: list[CommitRecord] = []
    for line in output.splitlines():
        if not line.strip():
            continue
        sha, subject, author, date = line.split(LOG_FIELD_SEP, 3)
        commits.append(
            CommitRecord(
                sha=sha,
                subject=subject,
                author=author,
                timestamp=datetime.fromisoformat(date.strip()),
            )
        )
    return commits


def parse_parents(output: str) -> list[str]:
    """Parse `git rev-list --parents -n 1 <sha>`: the commit then its parents."""
    parts = output.split()
    return parts[1:]


def parse_pocket_refs(output: str) -> list[PocketEntry]:
    """Parse `for-each-ref --format=%(refname)%09%(objectname) refs/pocket/`."""
    entries: list[PocketEntry] = []
    for line in output.splitlines():
        if not line.strip():
            continue
        ref, sha = line.split("\t", 1)
        entries.append(PocketEntry(branch=ref[len(POCKET_NAMESPACE) :], ref=ref, sha=sha.strip()))
    return entries


def make_branch_ref(name: str) -> str:
    return f"{REFS_HEADS}{name}"


def make_pocket_ref(branch: str) -> str:
    return f"{POCKET_NAMESPACE}{branch}"
