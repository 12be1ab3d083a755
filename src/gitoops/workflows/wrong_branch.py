"""wrong-branch: move commits made on the wrong branch onto a new branch."""

from __future__ import annotations

from gitoops.core.errors import ValidationError
from gitoops.core.formatting import pluralize, sanitize_branch_name, truncate_text
from gitoops.git._internal.flows import RunState
from gitoops.git._internal.preconditions import (
    require_branch_absent,
    require_commits,
    require_current_branch,
    require_no_tracked_changes,
)
from gitoops.git.planners import Plan, noop_plan, plan_wrong_branch
from gitoops.git.risk import is_protected_branch
from gitoops.workflows.base import Workflow, WorkflowContext

GENERIC_BRANCH_SUFFIX = "moved-commits"


class WrongBranchWorkflow(Workflow):
    operation = "wrong-branch"

    def __init__(
        self,
        ctx: WorkflowContext,
        name: str | None = None,
        *,
        allow_protected: bool = False,
    ) -> None:
        super().__init__(ctx)
        self.name = name or None
        self.allow_protected = allow_protected
        self._branch: str | None = None
        self._target: str | None = None

    def build_plan(self) -> Plan:
        branch = require_current_branch(self.access, "move commits")
        require_commits(self.access, "move commits")

        warnings: list[str] = []
        if is_protected_branch(branch):
            if not self.allow_protected:
                raise ValidationError.protected_branch(branch)
            warnings.append(f"'{branch}' is a protected branch; proceeding because --yes was given.")

        upstream = self._reset_base(branch, warnings)
        commits = self.access.commits(f"{upstream}..HEAD")
        if not commits:
            return noop_plan(
                self.operation,
                f"Nothing to move: '{branch}' is already up to date with {upstream}",
            )

        status = self.access.status()
        require_no_tracked_changes(status, "move commits")
        if status.untracked:
            warnings.append(
                f"{pluralize(len(status.untracked), 'untracked file')} will stay in the working tree."
            )

        target = self.name or self._generated_name(commits[0].subject)
        require_branch_absent(self.access, target)

        self._branch, self._target = branch, target
        return plan_wrong_branch(
            branch=branch,
            target=target,
            upstream=upstream,
            commits=commits,
            warnings=warnings,
        )

    def _reset_base(self, branch: str, warnings: list[str]) -> str:
        """Tracking upstream, else the first existing local fallback base."""
        upstream = self.access.upstream(branch)
        if upstream:
            return upstream
        for base in self.ctx.config.workflows.fallback_bases:
            if self.access.branch_exists(base):
                warnings.append(f"No upstream configured, using local '{base}' as reference.")
                return base
        raise ValidationError.precondition(
            f"Branch '{branch}' has no upstream and no "
            f"{'/'.join(self.ctx.config.workflows.fallback_bases)} branch found. "
            f"Set upstream with: git push -u {self.access.remote} {branch}",
            branch=branch,
        )

    def _generated_name(self, subject: str) -> str:
        prefix = self.ctx.config.workflows.branch_prefix
        return f"{prefix}{sanitize_branch_name(subject) or GENERIC_BRANCH_SUFFIX}"

    def summarize(self, plan: Plan, state: RunState) -> list[str]:
        branch = self.access.current_branch()
        head = self.access.commits("HEAD", limit=1)[0]
        moved = self.access.count_commits(f"{self._branch}..{self._target}")
        return [
            f"Moved {pluralize(moved, 'commit')} to '{self._target}'",
            f"Now on '{branch}' at {head.short_sha} {truncate_text(head.subject)}",
        ]
