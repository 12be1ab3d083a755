"""Plan execution: runs the planned actions in order against the accessor."""

from __future__ import annotations

from dataclasses import dataclass, field

from gitoops.core.errors import ExternalToolError, InternalError
from gitoops.core.logging import get_logger
from gitoops.git._internal.access import RepoAccess
from gitoops.git.models import SafetyMarker
from gitoops.git.planners import ActionKind, Plan, PlannedAction
from gitoops.git.safety import SafetyNet

log = get_logger("flows")


@dataclass(frozen=True, slots=True)
class ConflictCheckResult:
    """Result of an operation that may produce conflicts."""

    has_conflicts: bool
    conflict_paths: tuple[str, ...]


def check_conflicts(access: RepoAccess) -> ConflictCheckResult:
    """Query unmerged index entries.

    Contract: Non-destructive read. Does not modify index or resolve conflicts.
    """
    paths = tuple(access.unmerged_paths())
    return ConflictCheckResult(bool(paths), paths)


@dataclass(slots=True)
class RunState:
    """What a run has done so far. Survives a failure so recovery can read it."""

    marker: SafetyMarker | None = None
    snapshot: str | None = None
    stash: str | None = None
    current: PlannedAction | None = None
    completed: list[PlannedAction] = field(default_factory=list)
    skipped: list[PlannedAction] = field(default_factory=list)
    soft_failures: list[tuple[PlannedAction, ExternalToolError]] = field(default_factory=list)

    @property
    def is_partial(self) -> bool:
        return bool(self.soft_failures)


class ActionRunner:
    """Executes exactly ``plan.actions``, in order, with no retries."""

    def __init__(self, access: RepoAccess, safety: SafetyNet) -> None:
        self._access = access
        self._safety = safety

    def run(self, plan: Plan, state: RunState | None = None) -> RunState:
        """Run every action of plan.

        A failing critical action propagates immediately; state.current names
        it. A failing non-critical action is recorded in state.soft_failures
        and the run continues.
        """
        state = state if state is not None else RunState()
        for action in plan.actions:
            state.current = action
            log.debug("action_start", operation=plan.operation, action=action.kind.name)
            try:
                ran = self._dispatch(plan, action, state)
            except ExternalToolError as e:
                if action.critical:
                    raise
                log.warning(
                    "action_failed_non_critical",
                    operation=plan.operation,
                    action=action.kind.name,
                    error=e.message,
                )
                state.soft_failures.append((action, e))
                continue
            (state.completed if ran else state.skipped).append(action)
        state.current = None
        return state

    def _dispatch(self, plan: Plan, action: PlannedAction, state: RunState) -> bool:
        """Perform one action. Returns False when it was skipped."""
        access = self._access
        kind = action.kind

        if kind is ActionKind.CREATE_MARKER:
            state.marker = self._safety.create_marker(plan.operation, action.qualifier or "head")
        elif kind is ActionKind.STAGE_ALL:
            access.stage_all()
        elif kind is ActionKind.STAGE_TRACKED:
            access.stage_tracked()
        elif kind is ActionKind.STAGE_FILES:
            access.stage(action.paths)
        elif kind is ActionKind.UNSTAGE_ALL:
            access.unstage_all()
        elif kind is ActionKind.COMMIT:
            access.commit(_required(action.message, action))
        elif kind is ActionKind.COMMIT_IF_STAGED:
            if not access.staged_files():
                log.info("group_skipped_nothing_staged", group=action.qualifier)
                return False
            access.commit(_required(action.message, action))
        elif kind is ActionKind.AMEND:
            access.amend(action.message)
        elif kind is ActionKind.SOFT_RESET:
            access.reset_soft(_required(action.target, action))
        elif kind is ActionKind.HARD_RESET:
            access.reset_hard(_required(action.target, action))
        elif kind is ActionKind.CLEAN:
            access.clean()
        elif kind is ActionKind.CREATE_BRANCH:
            access.create_branch(_required(action.target, action))
        elif kind is ActionKind.SWITCH_BRANCH:
            access.switch_branch(_required(action.target, action))
        elif kind is ActionKind.DELETE_REF:
            access.delete_ref(_required(action.target, action))
        elif kind is ActionKind.SNAPSHOT:
            state.snapshot = access.stash_create(_required(action.message, action)) or access.head_sha()
            if state.snapshot is None:
                raise InternalError.unexpected("snapshot requires at least one commit")
        elif kind is ActionKind.UPDATE_REF:
            if state.snapshot is None:
                raise InternalError.unexpected("UPDATE_REF planned without a prior SNAPSHOT")
            access.update_ref(_required(action.target, action), state.snapshot, action.message)
        elif kind is ActionKind.STASH_PUSH:
            state.stash = access.stash_push(_required(action.message, action))
            if state.stash is None:
                return False
        elif kind is ActionKind.STASH_POP:
            if state.stash is None:
                return False
            access.stash_pop()
        elif kind is ActionKind.STASH_APPLY:
            access.stash_apply(_required(action.target, action))
        elif kind is ActionKind.PULL_REBASE:
            access.pull_rebase()
        elif kind is ActionKind.REVERT_MERGE:
            if action.mainline is None:
                raise InternalError.unexpected("REVERT_MERGE planned without mainline")
            access.revert_merge(_required(action.target, action), action.mainline)
        else:
            raise InternalError.unexpected(f"unhandled action kind {kind.name}")
        return True


def _required(value: str | None, action: PlannedAction) -> str:
    if value is None:
        raise InternalError.unexpected(f"{action.kind.name} planned without a required value")
    return value
