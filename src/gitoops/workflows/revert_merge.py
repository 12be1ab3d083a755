"""revert-merge: revert a merge commit with an explicit mainline parent.

Conflicts are detected by querying unmerged index entries and reported with
manual resolution steps. They are never resolved automatically.
"""

from __future__ import annotations

from gitoops.core.errors import ConflictError, ExternalToolError, GitOopsError, ValidationError
from gitoops.core.formatting import truncate_text
from gitoops.git._internal.flows import RunState, check_conflicts
from gitoops.git._internal.preconditions import (
    require_commit,
    require_no_tracked_changes,
    require_valid_sha,
)
from gitoops.git.planners import Plan, plan_revert_merge
from gitoops.git.risk import merge_parents
from gitoops.workflows.base import Workflow, WorkflowContext

CONFLICT_STEPS = [
    "Resolve the conflicts in the files listed above",
    "Stage the resolved files: git add <file>",
    "Complete the revert: git revert --continue",
    "Or abort the revert: git revert --abort",
]


class RevertMergeWorkflow(Workflow):
    operation = "revert-merge"

    def __init__(self, ctx: WorkflowContext, sha: str, mainline: int = 1) -> None:
        super().__init__(ctx)
        self.sha = sha.strip()
        self.mainline = mainline

    def build_plan(self) -> Plan:
        require_valid_sha(self.sha)
        full_sha = require_commit(self.access, self.sha)

        parents = merge_parents(self.access, full_sha)
        if len(parents) < 2:
            raise ValidationError.not_a_merge(self.sha, len(parents))
        if not 1 <= self.mainline <= len(parents):
            raise ValidationError.mainline_out_of_range(self.mainline, len(parents))

        require_no_tracked_changes(self.access.status(), "revert")
        commit = self.access.commits(full_sha, limit=1)[0]
        return plan_revert_merge(commit=commit, parents=parents, mainline=self.mainline)

    def handle_failure(self, err: GitOopsError, plan: Plan, state: RunState) -> GitOopsError:
        if isinstance(err, ExternalToolError):
            conflicts = check_conflicts(self.access)
            if conflicts.has_conflicts:
                err = ConflictError.unmerged(self.operation, list(conflicts.conflict_paths), err)
                err = err.with_recovery(steps=CONFLICT_STEPS)
        return super().handle_failure(err, plan, state)

    def summarize(self, plan: Plan, state: RunState) -> list[str]:
        head = self.access.commits("HEAD", limit=1)[0]
        return [
            f"Reverted merge {self.sha[:8]} keeping parent {self.mainline}",
            f"Created {head.short_sha} {truncate_text(head.subject)}",
        ]
