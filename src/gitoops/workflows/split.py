"""split: turn one mixed staging area into one commit per top-level directory.

If a commit fails partway (a rejecting pre-commit hook, say), earlier groups
are already committed and later groups are unstaged. The recovery steps name
both, and a soft reset to the marker plus re-staging the unfinished groups
brings the original index back.
"""

from __future__ import annotations

import shlex

from gitoops.core.errors import GitOopsError
from gitoops.git._internal.flows import RunState
from gitoops.git.planners import ActionKind, Plan, group_files_by_directory, noop_plan, plan_split
from gitoops.workflows.base import Workflow


def _unfinished_paths(plan: Plan, state: RunState) -> list[str]:
    """Files of every group whose commit neither ran nor was skipped."""
    done = {id(a) for a in (*state.completed, *state.skipped)}
    pending: list[str] = []
    paths: tuple[str, ...] = ()
    for action in plan.actions:
        if action.kind is ActionKind.STAGE_FILES:
            paths = action.paths
        elif action.kind is ActionKind.COMMIT_IF_STAGED and id(action) not in done:
            pending.extend(paths)
    return pending


class SplitWorkflow(Workflow):
    operation = "split"

    def build_plan(self) -> Plan:
        staged = self.access.staged_files()
        if not staged:
            return noop_plan(self.operation, "Nothing to split: no staged changes")
        groups = group_files_by_directory(staged)
        return plan_split(groups=groups, template=self.ctx.config.workflows.split_message_template)

    def summarize(self, plan: Plan, state: RunState) -> list[str]:
        created = [a for a in state.completed if a.kind is ActionKind.COMMIT_IF_STAGED]
        lines = [f"Created {len(created)} of {len(created) + len(state.skipped)} commits"]
        if created:
            commits = self.access.commits("HEAD", limit=len(created))
            lines += [f"  {c.short_sha} {c.subject}" for c in reversed(commits)]
        lines += [f"Skipped '{a.message}': nothing left to stage" for a in state.skipped]
        return lines

    def next_steps(self, plan: Plan, state: RunState) -> list[str]:
        # a hard reset would delete files that were only ever staged
        if state.marker is None:
            return []
        return [
            f"To undo this (changes stay staged): git reset --soft {state.marker.name}",
            f"To remove the safety marker: git tag -d {state.marker.name}",
        ]

    def handle_failure(self, err: GitOopsError, plan: Plan, state: RunState) -> GitOopsError:
        if state.marker is None:
            return err

        created = [a for a in state.completed if a.kind is ActionKind.COMMIT_IF_STAGED]
        steps = [f"Already committed: '{a.message}'" for a in created]
        if not created:
            steps.append("No commits were created")

        pending = _unfinished_paths(plan, state)
        restage = f"git reset --soft {state.marker.name}"
        if pending:
            restage += f" && git add -- {shlex.join(pending)}"
            steps.append(f"Not yet committed: {len(pending)} files, now partly unstaged")
        steps.append(f"To get the original staged changes back: {restage}")
        return err.with_recovery(marker=state.marker.name, steps=steps)
