"""Internal components for git operations - not part of public API."""

from gitoops.git._internal.access import RepoAccess
from gitoops.git._internal.parsing import (
    make_branch_ref,
    make_pocket_ref,
)
from gitoops.git._internal.preconditions import (
    require_branch_absent,
    require_commit,
    require_commits,
    require_count_in_range,
    require_current_branch,
    require_no_tracked_changes,
    require_valid_sha,
)

__all__ = [
    "RepoAccess",
    "make_branch_ref",
    "make_pocket_ref",
    "require_branch_absent",
    "require_commit",
    "require_commits",
    "require_count_in_range",
    "require_current_branch",
    "require_no_tracked_changes",
    "require_valid_sha",
]
