"""Risk classification: protected branches, shared history, merge parents."""

from __future__ import annotations

from enum import Enum, auto

from gitoops.git._internal.access import RepoAccess

PROTECTED_BRANCHES = frozenset({"main", "master", "production", "prod"})
PROTECTED_PREFIXES = ("release/", "hotfix/")


class PushState(Enum):
    """Whether the newest commits are already shared with the upstream."""

    UNPUSHED = auto()
    MAY_BE_PUSHED = auto()
    UNKNOWN = auto()

    @property
    def is_risky(self) -> bool:
        """True when rewriting the commits may affect shared history."""
        return self is not PushState.UNPUSHED


def is_protected_branch(name: str) -> bool:
    """Check a branch name against the fixed protection denylist. Pure."""
    return name in PROTECTED_BRANCHES or name.startswith(PROTECTED_PREFIXES)


def commits_are_unpushed(access: RepoAccess, count: int, upstream: str | None) -> PushState:
    """Classify the newest `count` first-parent commits on HEAD against upstream.

    UNPUSHED iff at least `count` first-parent commits in upstream..HEAD.
    Commits merged in from another side do not count. An invalid range counts
    0 commits, so it lands on MAY_BE_PUSHED rather than raising.
    """
    if upstream is None:
        return PushState.UNKNOWN
    if access.count_commits(f"{upstream}..HEAD", first_parent=True) >= count:
        return PushState.UNPUSHED
    return PushState.MAY_BE_PUSHED


def merge_parents(access: RepoAccess, sha: str) -> list[str]:
    """Ordered parent hashes of sha. Fewer than 2 means not a merge."""
    return access.parents(sha)


def push_warning(state: PushState, count: int, upstream: str | None) -> str | None:
    """Warning line for a history rewrite, or None when the commits are local only."""
    noun = "commit" if count == 1 else "commits"
    if state is PushState.UNKNOWN:
        return (
            f"No upstream configured: cannot tell whether the {noun} "
            "were already pushed. Proceed with care."
        )
    if state is PushState.MAY_BE_PUSHED:
        return (
            f"The {noun} may already be pushed to {upstream}. "
            "Rewriting shared history can disrupt collaborators."
        )
    return None
