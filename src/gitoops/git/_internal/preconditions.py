"""Precondition helpers shared by the workflow executors.

Every helper here only reads. A failing precondition raises ValidationError,
which always happens before any mutating git call.
"""

from __future__ import annotations

from gitoops.core.errors import ValidationError
from gitoops.core.formatting import is_valid_sha
from gitoops.git._internal.access import RepoAccess
from gitoops.git.models import RepositoryStatus

# =============================================================================
# Branch Preconditions
# =============================================================================


def require_commits(access: RepoAccess, operation: str) -> None:
    """Raise if HEAD is unborn (no commits yet)."""
    if not access.has_commits():
        raise ValidationError.precondition(
            f"Cannot {operation}: no commits yet", operation=operation
        )


def require_current_branch(access: RepoAccess, operation: str) -> str:
    """Raise if detached HEAD; return current branch name."""
    branch = access.current_branch()
    if not branch:
        raise ValidationError.precondition(
            f"Cannot {operation}: HEAD is detached, switch to a branch first",
            operation=operation,
        )
    return branch


def require_branch_absent(access: RepoAccess, name: str) -> None:
    """Raise if name is not a valid new local branch name or already exists."""
    if not access.is_valid_branch_name(name):
        raise ValidationError.invalid_argument("branch", name, f"Invalid branch name '{name}'")
    if access.branch_exists(name):
        raise ValidationError.precondition(f"Branch '{name}' already exists", branch=name)


# =============================================================================
# Working Tree Preconditions
# =============================================================================


def require_no_tracked_changes(status: RepositoryStatus, operation: str) -> None:
    """Raise if staged or unstaged changes to tracked files are present."""
    if status.has_tracked_changes:
        raise ValidationError.precondition(
            f"Cannot {operation}: you have uncommitted changes to tracked files. "
            "Commit, stash or pocket them first.",
            operation=operation,
            paths=list(dict.fromkeys((*status.staged, *status.unstaged))),
        )


# =============================================================================
# Argument Preconditions
# =============================================================================


def require_count_in_range(name: str, value: int, low: int, high: int) -> None:
    if not low <= value <= high:
        raise ValidationError.invalid_argument(
            name, value, f"{name.capitalize()} must be between {low} and {high}"
        )


def require_valid_sha(sha: str) -> None:
    if not is_valid_sha(sha):
        raise ValidationError.invalid_argument(
            "sha", sha, f"Invalid commit SHA '{sha}': expected 7-40 hex characters"
        )


def require_commit(access: RepoAccess, rev: str) -> str:
    """Resolve rev to a full commit sha or raise."""
    sha = access.resolve_commit(rev)
    if sha is None:
        raise ValidationError.invalid_argument("sha", rev, f"Commit '{rev}' not found")
    return sha
