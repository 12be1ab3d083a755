"""pocket: save the full working state to a hidden per-branch ref, and get it back.

Pocket refs live under refs/pocket/<branch>, outside refs/heads and refs/tags,
so default branch and tag listings never show them. They are written with a
reflog, which keeps an overwritten pocket reachable.
"""

from __future__ import annotations

from gitoops.core.errors import ValidationError
from gitoops.core.formatting import format_timestamp, short_sha
from gitoops.git._internal.access import RepoAccess
from gitoops.git._internal.flows import RunState
from gitoops.git._internal.parsing import make_pocket_ref
from gitoops.git._internal.preconditions import (
    require_commits,
    require_current_branch,
    require_no_tracked_changes,
)
from gitoops.git.models import PocketEntry
from gitoops.git.planners import ActionKind, Plan, plan_pocket_restore, plan_pocket_save
from gitoops.workflows.base import Workflow, WorkflowContext


def list_pockets(access: RepoAccess) -> list[PocketEntry]:
    """Every pocket ref in the repository, sorted by branch. Read-only."""
    return sorted(access.pocket_refs(), key=lambda entry: entry.branch)


def is_snapshot_commit(access: RepoAccess, sha: str) -> bool:
    """Snapshot (stash-style) commits have the base commit and the index as parents."""
    return len(access.parents(sha)) >= 2


class PocketSaveWorkflow(Workflow):
    operation = "pocket-save"

    def __init__(self, ctx: WorkflowContext) -> None:
        super().__init__(ctx)
        self._branch: str | None = None
        self._ref: str | None = None

    def build_plan(self) -> Plan:
        branch = require_current_branch(self.access, "pocket")
        require_commits(self.access, "pocket")
        ref = make_pocket_ref(branch)
        self._branch, self._ref = branch, ref
        return plan_pocket_save(
            branch=branch,
            ref=ref,
            status=self.access.status(),
            snapshot_message=f"pocket-{format_timestamp()}",
            overwrites=self.access.ref_exists(ref),
        )

    def summarize(self, plan: Plan, state: RunState) -> list[str]:
        lines = [f"Saved working state to pocket ref {self._ref} ({short_sha(state.snapshot or '')})"]
        if any(a.kind is ActionKind.CLEAN for a in state.completed):
            lines.append("Working directory is now clean")
        else:
            lines.append("No changes detected; saved the current commit")
        return lines

    def next_steps(self, plan: Plan, state: RunState) -> list[str]:
        return [
            "To restore: git-oops pocket restore",
            f"To inspect: git switch -c pocket/{self._branch} {self._ref}",
        ]


class PocketRestoreWorkflow(Workflow):
    operation = "pocket-restore"

    def __init__(
        self,
        ctx: WorkflowContext,
        branch: str | None = None,
        *,
        drop: bool = False,
    ) -> None:
        super().__init__(ctx)
        self.branch = branch or None
        self.drop = drop
        self._entry: PocketEntry | None = None

    def build_plan(self) -> Plan:
        branch = self.branch or require_current_branch(self.access, "restore a pocket")
        ref = make_pocket_ref(branch)
        sha = self.access.resolve_commit(ref)
        if sha is None:
            raise ValidationError.precondition(f"No pocket found for branch '{branch}'", ref=ref)

        entry = PocketEntry(branch=branch, ref=ref, sha=sha)
        is_snapshot = is_snapshot_commit(self.access, sha)
        if is_snapshot:
            require_no_tracked_changes(self.access.status(), "restore a pocket")

        self._entry = entry
        return plan_pocket_restore(entry=entry, is_snapshot=is_snapshot, drop=self.drop)

    def summarize(self, plan: Plan, state: RunState) -> list[str]:
        assert self._entry is not None
        lines = []
        if any(a.kind is ActionKind.STASH_APPLY for a in state.completed):
            changed = len(self.access.status().changed_paths)
            lines.append(f"Restored pocket {self._entry.ref} ({changed} paths changed)")
        if self.drop:
            lines.append(f"Deleted {self._entry.ref}")
        else:
            lines.append(f"Pocket kept; delete it with: git update-ref -d {self._entry.ref}")
        return lines
