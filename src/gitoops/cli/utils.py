"""CLI utilities: per-invocation app state, the error boundary and the confirm gate."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

import click
import questionary
from rich.console import Console

from gitoops.cli.output import render_error, render_outcome, render_plan
from gitoops.config.models import OopsConfig
from gitoops.core.errors import GitOopsError, InternalError
from gitoops.git.planners import Plan
from gitoops.workflows.base import Outcome, Workflow, WorkflowContext

WorkflowFactory = Callable[[WorkflowContext], Workflow]


@contextmanager
def error_boundary(console: Console) -> Iterator[None]:
    """Print a GitOopsError with its recovery steps and exit with its exit code.

    Any other exception is reported as an InternalError (exit 2). SystemExit
    and KeyboardInterrupt pass through.
    """
    try:
        yield
    except GitOopsError as e:
        render_error(console, e)
        raise SystemExit(e.exit_code) from e
    except Exception as e:
        err = InternalError.unexpected(str(e) or type(e).__name__, exception=type(e).__name__)
        render_error(console, err)
        raise SystemExit(err.exit_code) from e


def confirm_plan(console: Console, plan: Plan) -> bool:
    """Show the plan, then ask. Ctrl-C or EOF counts as no."""
    render_plan(console, plan)
    console.print()
    answer = questionary.confirm(
        plan.confirm_prompt or "Proceed?",
        default=plan.confirm_default,
    ).ask()
    return bool(answer)


@dataclass(slots=True)
class AppContext:
    """Everything the commands need, built once by the root group."""

    repo: Path
    config: OopsConfig
    console: Console

    def workflow_context(self) -> WorkflowContext:
        return WorkflowContext.create(self.repo, self.config)

    def run(self, factory: WorkflowFactory, *, dry_run: bool = False, yes: bool = False) -> Outcome:
        """Build and execute one workflow inside the error boundary."""
        with error_boundary(self.console):
            workflow = factory(self.workflow_context())
            outcome = workflow.execute(
                dry_run=dry_run,
                assume_yes=yes,
                confirm=lambda plan: confirm_plan(self.console, plan),
            )
        render_outcome(self.console, outcome)
        return outcome


pass_app = click.make_pass_decorator(AppContext)
