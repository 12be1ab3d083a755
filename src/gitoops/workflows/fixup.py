"""fixup: fold pending changes into the last commit, optionally rewording it."""

from __future__ import annotations

from gitoops.core.formatting import truncate_text
from gitoops.git._internal.flows import RunState
from gitoops.git._internal.preconditions import require_commits
from gitoops.git.planners import Plan, plan_fixup
from gitoops.git.risk import commits_are_unpushed, push_warning
from gitoops.workflows.base import Workflow, WorkflowContext


class FixupWorkflow(Workflow):
    operation = "fixup"

    def __init__(self, ctx: WorkflowContext, message: str | None = None) -> None:
        super().__init__(ctx)
        self.message = message or None

    def build_plan(self) -> Plan:
        require_commits(self.access, "fix up")
        head = self.access.commits("HEAD", limit=1)[0]
        status = self.access.status()

        upstream = self.access.upstream()
        state = commits_are_unpushed(self.access, 1, upstream)
        return plan_fixup(
            head=head,
            status=status,
            message=self.message,
            push_warning=push_warning(state, 1, upstream),
        )

    def summarize(self, plan: Plan, state: RunState) -> list[str]:
        head = self.access.commits("HEAD", limit=1)[0]
        return [f"Amended commit: {head.short_sha} {truncate_text(head.subject)}"]
