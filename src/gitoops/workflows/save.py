"""save: commit everything, untracked files included, in one step."""

from __future__ import annotations

from gitoops.core.formatting import truncate_text
from gitoops.git._internal.flows import RunState
from gitoops.git.planners import Plan, plan_save
from gitoops.workflows.base import Workflow, WorkflowContext


class SaveWorkflow(Workflow):
    operation = "save"

    def __init__(self, ctx: WorkflowContext, message: str | None = None) -> None:
        super().__init__(ctx)
        self.message = message or ctx.config.workflows.save_message

    def build_plan(self) -> Plan:
        return plan_save(status=self.access.status(), message=self.message)

    def summarize(self, plan: Plan, state: RunState) -> list[str]:
        head = self.access.commits("HEAD", limit=1)[0]
        lines = [f"Saved as {head.short_sha} {truncate_text(head.subject)}"]
        if not self.access.status().is_clean:
            lines.append("Working tree still has changes (ignored files are never saved)")
        return lines
