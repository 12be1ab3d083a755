"""Value snapshots of repository state.

Every model here is immutable and recomputed fresh at each decision point;
nothing is cached across a mutating call.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from gitoops.config.constants import ROOT_GROUP, ROOT_GROUP_LABEL


@dataclass(frozen=True, slots=True)
class RepositoryStatus:
    """Working tree snapshot parsed from porcelain status output."""

    staged: tuple[str, ...]
    unstaged: tuple[str, ...]
    untracked: tuple[str, ...]
    branch: str
    upstream: str | None = None
    ahead: int = 0
    behind: int = 0
    is_detached: bool = False
    is_unborn: bool = False

    @property
    def has_tracked_changes(self) -> bool:
        return bool(self.staged or self.unstaged)

    @property
    def is_clean(self) -> bool:
        return not (self.staged or self.unstaged or self.untracked)

    @property
    def changed_paths(self) -> tuple[str, ...]:
        """Every path with any pending change, each listed once."""
        return tuple(dict.fromkeys((*self.staged, *self.unstaged, *self.untracked)))


@dataclass(frozen=True, slots=True)
class CommitRecord:
    """Read-only projection of one commit, fetched by range query."""

    sha: str
    subject: str
    author: str
    timestamp: datetime

    @property
    def short_sha(self) -> str:
        return self.sha[:8]


@dataclass(frozen=True, slots=True)
class UpstreamRelationship:
    """Link from a local branch to the ref it is compared against."""

    branch: str
    upstream: str
    is_tracking: bool
    """False when the upstream is a best-effort match on the default remote."""


@dataclass(frozen=True, slots=True)
class FileGroup:
    """Staged files sharing a top-level directory, sorted."""

    key: str
    files: tuple[str, ...]

    @property
    def is_root(self) -> bool:
        return self.key == ROOT_GROUP

    @property
    def label(self) -> str:
        return ROOT_GROUP_LABEL if self.is_root else self.key


@dataclass(frozen=True, slots=True)
class SafetyMarker:
    """Annotated recovery tag created at HEAD right before a destructive step."""

    name: str
    sha: str
    operation: str
    created_at: datetime

    @property
    def restore_command(self) -> str:
        return f"git reset --hard {self.name}"


@dataclass(frozen=True, slots=True)
class PocketEntry:
    """A hidden per-branch snapshot reference."""

    branch: str
    ref: str
    sha: str
