"""undo: soft-move HEAD back N commits, keeping every change staged."""

from __future__ import annotations

from gitoops.config.constants import UNDO_MAX_COMMITS, UNDO_MIN_COMMITS
from gitoops.core.errors import ValidationError
from gitoops.core.formatting import pluralize, truncate_text
from gitoops.git._internal.flows import RunState
from gitoops.git._internal.preconditions import require_commits, require_count_in_range
from gitoops.git.planners import Plan, plan_undo
from gitoops.git.risk import commits_are_unpushed, push_warning
from gitoops.workflows.base import Workflow, WorkflowContext


class UndoWorkflow(Workflow):
    operation = "undo"

    def __init__(self, ctx: WorkflowContext, count: int = 1) -> None:
        super().__init__(ctx)
        self.count = count
        self._undone = 0

    def build_plan(self) -> Plan:
        require_count_in_range("count", self.count, UNDO_MIN_COMMITS, UNDO_MAX_COMMITS)
        require_commits(self.access, "undo")

        commits = self.access.commits("HEAD", limit=self.count, first_parent=True)
        available = self.access.count_commits("HEAD", first_parent=True)
        self._undone = len(commits)
        removes_root = self._undone >= available

        branch = self.access.current_branch()
        if removes_root and branch is None:
            raise ValidationError.precondition(
                "Cannot undo the root commit on a detached HEAD; switch to a branch first"
            )

        upstream = self.access.upstream(branch) if branch else None
        state = commits_are_unpushed(self.access, self._undone, upstream)
        self.log.debug("undo_classified", count=self._undone, push_state=state.name)

        return plan_undo(
            branch=branch,
            commits=commits,
            requested=self.count,
            removes_root=removes_root,
            push_warning=push_warning(state, self._undone, upstream),
        )

    def summarize(self, plan: Plan, state: RunState) -> list[str]:
        status = self.access.status()
        lines = [
            f"Undid {pluralize(self._undone, 'commit')}",
            f"{pluralize(len(status.staged), 'file')} staged",
        ]
        head = self.access.commits("HEAD", limit=1) if self.access.has_commits() else []
        if head:
            lines.append(f"HEAD is now {head[0].short_sha} {truncate_text(head[0].subject)}")
        else:
            lines.append(f"Branch '{status.branch}' has no commits; all changes are staged")
        return lines
