"""yank: pull with rebase, stashing local work around the pull when dirty.

A pull failure aborts before any restore and leaves the stash intact. A
restore failure after a successful pull is a partial success, not an error.
"""

from __future__ import annotations

from gitoops.core.errors import GitOopsError
from gitoops.core.formatting import format_timestamp
from gitoops.git._internal.flows import RunState
from gitoops.git.planners import ActionKind, Plan, plan_yank
from gitoops.workflows.base import Workflow

STASH_RESTORE_STEPS = [
    "Try again: git stash pop",
    "Or view the stash: git stash show -p",
]


class YankWorkflow(Workflow):
    operation = "yank"

    def build_plan(self) -> Plan:
        status = self.access.status()
        upstream = self.access.upstream_relationship() if not status.is_detached else None
        return plan_yank(
            status=status,
            upstream=upstream,
            stash_message=f"oops-yank-{format_timestamp()}",
        )

    def handle_failure(self, err: GitOopsError, plan: Plan, state: RunState) -> GitOopsError:
        if state.stash is None:
            return err
        steps = ["Your stashed changes are intact. To restore them: git stash pop"]
        if state.current is not None and state.current.kind is ActionKind.PULL_REBASE:
            steps.insert(0, "If a rebase is in progress, finish or abort it: git rebase --abort")
        return err.with_recovery(steps=steps)

    def summarize(self, plan: Plan, state: RunState) -> list[str]:
        status = self.access.status()
        lines = ["Pulled latest changes"]
        if state.is_partial:
            lines.append("Pull succeeded but restoring the stashed changes failed")
        elif state.stash is not None:
            lines.append(f"Restored local changes ({len(status.changed_paths)} paths changed)")
        else:
            lines.append("Working tree was clean, nothing stashed")
        if status.behind:
            lines.append(f"Still {status.behind} behind {status.upstream}")
        return lines

    def next_steps(self, plan: Plan, state: RunState) -> list[str]:
        if state.is_partial:
            return list(STASH_RESTORE_STEPS)
        return []
