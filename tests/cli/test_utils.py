"""Tests for CLI utilities and terminal output.

Covers:
- error_boundary() exit codes and recovery rendering
- confirm_plan() questionary handling
- render_outcome() per outcome status
- render_pockets()
"""

from __future__ import annotations

from io import StringIO
from unittest.mock import MagicMock, patch

import pytest
from rich.console import Console

from gitoops.cli.output import render_outcome, render_pockets, status
from gitoops.cli.utils import confirm_plan, error_boundary
from gitoops.core.errors import (
    ConflictError,
    ExternalToolError,
    InternalError,
    ValidationError,
)
from gitoops.git.models import PocketEntry
from gitoops.git.planners import ActionKind, Plan, PlannedAction, noop_plan
from gitoops.workflows.base import Outcome, OutcomeStatus


@pytest.fixture
def buffer() -> StringIO:
    return StringIO()


@pytest.fixture
def console(buffer: StringIO) -> Console:
    return Console(file=buffer, no_color=True, width=200, highlight=False)


def _plan() -> Plan:
    return Plan(
        operation="save",
        headline="Save 1 file as a commit",
        actions=(
            PlannedAction(ActionKind.STAGE_ALL, "Stage all changes including untracked files"),
            PlannedAction(ActionKind.COMMIT, "Commit with message 'WIP'", message="WIP"),
        ),
        confirm_prompt="Create commit 'WIP'?",
        confirm_default=True,
    )


class TestErrorBoundary:
    @pytest.mark.parametrize(
        ("error", "code"),
        [
            (ValidationError.precondition("bad input"), 1),
            (ExternalToolError.command_failed(["git", "pull"], "fatal: nope", 128), 2),
            (InternalError.unexpected("broken"), 2),
        ],
    )
    def test_exit_code_follows_error_class(
        self, console: Console, error: Exception, code: int
    ) -> None:
        with pytest.raises(SystemExit) as exc_info, error_boundary(console):
            raise error

        assert exc_info.value.code == code

    def test_prints_recovery_steps_last(self, console: Console, buffer: StringIO) -> None:
        err = ExternalToolError.command_failed(["git", "reset"], "fatal", 1).with_recovery(
            marker="oops/undo-1-commits-20240101-000000-abc123",
            steps=["Restore the previous state with: git reset --hard oops/undo-1-commits-20240101-000000-abc123"],
        )

        with pytest.raises(SystemExit), error_boundary(console):
            raise err

        output = buffer.getvalue()
        assert "Safety marker: oops/undo-1-commits-20240101-000000-abc123" in output
        assert output.rstrip().endswith(
            "git reset --hard oops/undo-1-commits-20240101-000000-abc123"
        )

    def test_conflicted_files_are_listed(self, console: Console, buffer: StringIO) -> None:
        cause = ExternalToolError.command_failed(["git", "revert"], "CONFLICT", 1)
        err = ConflictError.unmerged("revert-merge", ["a.txt", "b.txt"], cause)

        with pytest.raises(SystemExit), error_boundary(console):
            raise err

        output = buffer.getvalue()
        assert "Conflicted files:" in output
        assert "a.txt" in output and "b.txt" in output

    def test_unexpected_exception_is_internal_error(
        self, console: Console, buffer: StringIO
    ) -> None:
        with pytest.raises(SystemExit) as exc_info, error_boundary(console):
            raise OSError("disk gone")

        assert exc_info.value.code == 2
        assert isinstance(exc_info.value.__cause__, OSError)
        assert "Internal error: disk gone" in buffer.getvalue()

    def test_keyboard_interrupt_passes_through(self, console: Console) -> None:
        with pytest.raises(KeyboardInterrupt), error_boundary(console):
            raise KeyboardInterrupt

    def test_passes_through_without_error(self, console: Console) -> None:
        with error_boundary(console):
            value = 1
        assert value == 1


class TestConfirmPlan:
    def test_shows_plan_and_returns_answer(self, console: Console, buffer: StringIO) -> None:
        with patch("gitoops.cli.utils.questionary.confirm") as mock_confirm:
            mock_confirm.return_value.ask.return_value = True

            assert confirm_plan(console, _plan()) is True

        mock_confirm.assert_called_once_with("Create commit 'WIP'?", default=True)
        assert "1. Stage all changes including untracked files" in buffer.getvalue()

    def test_interrupt_counts_as_no(self, console: Console) -> None:
        """questionary returns None on Ctrl-C."""
        with patch("gitoops.cli.utils.questionary.confirm") as mock_confirm:
            mock_confirm.return_value.ask.return_value = None

            assert confirm_plan(console, _plan()) is False


class TestRenderOutcome:
    def test_noop(self, console: Console, buffer: StringIO) -> None:
        plan = noop_plan("save", "Nothing to save: working tree is clean")

        render_outcome(console, Outcome(OutcomeStatus.NOOP, plan))

        assert "✓ Nothing to save: working tree is clean" in buffer.getvalue()

    def test_preview(self, console: Console, buffer: StringIO) -> None:
        render_outcome(console, Outcome(OutcomeStatus.PREVIEW, _plan()))

        output = buffer.getvalue()
        assert "2. Commit with message 'WIP'" in output
        assert "Dry run - no changes made" in output

    def test_partial_shows_manual_steps(self, console: Console, buffer: StringIO) -> None:
        outcome = Outcome(
            OutcomeStatus.PARTIAL,
            _plan(),
            summary=("Pulled latest changes", "Restoring the stash failed"),
            next_steps=("Try again: git stash pop",),
        )

        render_outcome(console, outcome)

        output = buffer.getvalue()
        assert "! Pulled latest changes" in output
        assert "To restore your changes manually:" in output
        assert "Try again: git stash pop" in output

    def test_repository_text_is_not_markup(self, console: Console, buffer: StringIO) -> None:
        status(console, "Saved as abc12345 [bold]literal[/bold]")

        assert "[bold]literal[/bold]" in buffer.getvalue()


class TestRenderPockets:
    def test_empty(self, console: Console, buffer: StringIO) -> None:
        render_pockets(console, [])
        assert "No pockets saved" in buffer.getvalue()

    def test_rows(self, console: Console, buffer: StringIO) -> None:
        entry = PocketEntry(branch="feature/x", ref="refs/pocket/feature/x", sha="a" * 40)

        render_pockets(console, [entry])

        output = buffer.getvalue()
        assert "feature/x" in output
        assert "aaaaaaaa" in output
        assert "refs/pocket/feature/x" in output


def test_status_logs_at_debug() -> None:
    console = MagicMock()
    with patch("gitoops.cli.output.get_logger") as mock_get_logger:
        status(console, "hello", style="success")

    mock_get_logger.return_value.debug.assert_called_once_with(
        "status", message="hello", style="success"
    )
