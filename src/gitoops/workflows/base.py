"""Shared workflow state machine.

    Inspect -> Classify -> Plan -> (PreviewExit | ConfirmGate)
        -> Secure (marker) -> Mutate -> Verify -> Report

``build_plan`` covers Inspect, Classify and Plan and never mutates. ``execute``
handles the gate and hands the plan to the ActionRunner, which performs Secure
and Mutate. ``summarize`` re-reads repository state for Verify and Report. If a
mutating call fails, ``handle_failure`` (the Recover branch) attaches the
rollback handle to the error, which is logged and re-raised. Nothing retries.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import ClassVar

import structlog

from gitoops.config.models import OopsConfig
from gitoops.core.errors import GitOopsError
from gitoops.core.logging import clear_operation_id, get_logger, set_operation_id
from gitoops.git._internal.access import RepoAccess
from gitoops.git._internal.flows import ActionRunner, RunState
from gitoops.git.models import SafetyMarker
from gitoops.git.planners import Plan
from gitoops.git.safety import MarkerNamer, SafetyNet

ConfirmFn = Callable[[Plan], bool]


class OutcomeStatus(StrEnum):
    NOOP = "noop"
    PREVIEW = "preview"
    CANCELLED = "cancelled"
    SUCCESS = "success"
    PARTIAL = "partial"


@dataclass(frozen=True, slots=True)
class Outcome:
    """Terminal result of a workflow run that did not raise.

    The CLI exits 0 for every Outcome, PARTIAL included: the primary effect
    happened and the secondary failure comes with next_steps.
    """

    status: OutcomeStatus
    plan: Plan
    marker: SafetyMarker | None = None
    summary: tuple[str, ...] = ()
    next_steps: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class WorkflowContext:
    """Explicit per-invocation context threaded into every workflow."""

    access: RepoAccess
    config: OopsConfig
    safety: SafetyNet
    logger: structlog.stdlib.BoundLogger

    @classmethod
    def create(
        cls,
        repo_path: Path | str,
        config: OopsConfig | None = None,
        *,
        namer: MarkerNamer | None = None,
    ) -> WorkflowContext:
        config = config or OopsConfig()
        access = RepoAccess.open(repo_path, config.git)
        return cls(
            access=access,
            config=config,
            safety=SafetyNet(access, namer),
            logger=get_logger("workflow").bind(repo=str(access.path)),
        )


class Workflow(ABC):
    """Base class for all workflow executors."""

    operation: ClassVar[str]

    def __init__(self, ctx: WorkflowContext) -> None:
        self.ctx = ctx
        self.access = ctx.access
        self.log = ctx.logger.bind(operation=self.operation)

    @abstractmethod
    def build_plan(self) -> Plan:
        """Inspect, classify and plan. Must not call any mutating primitive."""

    def summarize(self, plan: Plan, state: RunState) -> list[str]:
        """Verify step: fresh reads describing the end state."""
        return [plan.headline]

    def next_steps(self, plan: Plan, state: RunState) -> list[str]:
        if state.marker is None:
            return []
        return [
            f"To undo this: {state.marker.restore_command}",
            f"To remove the safety marker: git tag -d {state.marker.name}",
        ]

    def handle_failure(self, err: GitOopsError, plan: Plan, state: RunState) -> GitOopsError:
        """Recover branch: attach the rollback handle to a failure after Secure."""
        if state.marker is None:
            return err
        return err.with_recovery(
            marker=state.marker.name,
            steps=[f"Restore the previous state with: {state.marker.restore_command}"],
        )

    def execute(
        self,
        *,
        dry_run: bool = False,
        confirm: ConfirmFn | None = None,
        assume_yes: bool = False,
    ) -> Outcome:
        """Run the full state machine.

        Without assume_yes, a plan that asks for confirmation only proceeds
        when confirm(plan) returns True; a missing confirm callback cancels.

        Raises:
            ValidationError: before any mutating call.
            ExternalToolError: git failed; carries recovery steps once a marker exists.
            Exception: anything else is logged with its traceback and re-raised as is.
        """
        set_operation_id()
        log = self.log
        try:
            plan = self.build_plan()
            if plan.is_noop:
                log.info("workflow_noop", reason=plan.noop_reason)
                return Outcome(OutcomeStatus.NOOP, plan, summary=(plan.headline,))
            if dry_run:
                return Outcome(OutcomeStatus.PREVIEW, plan, warnings=plan.warnings)
            if plan.needs_confirmation and not assume_yes:
                if confirm is None or not confirm(plan):
                    log.info("workflow_cancelled")
                    return Outcome(OutcomeStatus.CANCELLED, plan, summary=("Operation cancelled",))

            state = RunState()
            try:
                ActionRunner(self.access, self.ctx.safety).run(plan, state)
            except GitOopsError as e:
                failed = state.current.kind.name if state.current else None
                log.error(
                    "workflow_mutation_failed",
                    action=failed,
                    marker=state.marker.name if state.marker else None,
                    error=e.error_name,
                )
                raise self.handle_failure(e, plan, state) from e

            status = OutcomeStatus.PARTIAL if state.is_partial else OutcomeStatus.SUCCESS
            log.info("workflow_done", status=status.value, actions=len(state.completed))
            return Outcome(
                status=status,
                plan=plan,
                marker=state.marker,
                summary=tuple(self.summarize(plan, state)),
                next_steps=tuple(self.next_steps(plan, state)),
                warnings=plan.warnings,
            )
        except GitOopsError as e:
            log.error("workflow_failed", error=e.error_name, message=e.message, marker=e.marker)
            raise
        except Exception:
            log.exception("workflow_unexpected_error")
            raise
        finally:
            clear_operation_id()
