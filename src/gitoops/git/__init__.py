"""Git layer: repository access, risk classification, plans and safety markers."""

from gitoops.git._internal.access import RepoAccess
from gitoops.git.models import (
    CommitRecord,
    FileGroup,
    PocketEntry,
    RepositoryStatus,
    SafetyMarker,
    UpstreamRelationship,
)
from gitoops.git.planners import (
    ActionKind,
    Plan,
    PlannedAction,
    group_files_by_directory,
)
from gitoops.git.risk import PushState, commits_are_unpushed, is_protected_branch, merge_parents
from gitoops.git.safety import MarkerNamer, SafetyNet

__all__ = [
    # Access
    "RepoAccess",
    # Models
    "CommitRecord",
    "FileGroup",
    "PocketEntry",
    "RepositoryStatus",
    "SafetyMarker",
    "UpstreamRelationship",
    # Plans
    "ActionKind",
    "Plan",
    "PlannedAction",
    "group_files_by_directory",
    # Risk
    "PushState",
    "commits_are_unpushed",
    "is_protected_branch",
    "merge_parents",
    # Safety
    "MarkerNamer",
    "SafetyNet",
]
