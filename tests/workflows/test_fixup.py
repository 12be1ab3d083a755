"""Tests for the fixup workflow."""

from __future__ import annotations

from pathlib import Path

import pytest

from gitoops.core.errors import ValidationError
from gitoops.workflows import FixupWorkflow, OutcomeStatus, WorkflowContext
from repo_helpers import commit_file, git, head_sha, subjects, tags


@pytest.fixture
def repo(temp_repo: Path) -> Path:
    commit_file(temp_repo, "app.py", "print('v1')\n", "Add app")
    return temp_repo


class TestFixup:
    def test_folds_unstaged_tracked_change_into_head(self, repo: Path) -> None:
        before = head_sha(repo)
        (repo / "app.py").write_text("print('v2')\n")

        outcome = FixupWorkflow(WorkflowContext.create(repo)).execute(assume_yes=True)

        assert outcome.status is OutcomeStatus.SUCCESS
        assert head_sha(repo) != before
        assert subjects(repo) == ["Add app", "Initial commit"]
        assert git(repo, "show", "HEAD:app.py") == "print('v2')\n"
        assert git(repo, "status", "--porcelain") == ""

    def test_marker_points_at_original_commit(self, repo: Path) -> None:
        before = head_sha(repo)
        (repo / "app.py").write_text("print('v2')\n")

        outcome = FixupWorkflow(WorkflowContext.create(repo)).execute(assume_yes=True)

        assert outcome.marker is not None
        assert outcome.marker.sha == before
        assert tags(repo) == [outcome.marker.name]

    def test_message_only_rewords(self, repo: Path) -> None:
        outcome = FixupWorkflow(WorkflowContext.create(repo), "Add the app").execute(assume_yes=True)

        assert outcome.status is OutcomeStatus.SUCCESS
        assert subjects(repo)[0] == "Add the app"

    def test_nothing_to_do_is_noop(self, repo: Path) -> None:
        before = head_sha(repo)

        outcome = FixupWorkflow(WorkflowContext.create(repo)).execute(assume_yes=True)

        assert outcome.status is OutcomeStatus.NOOP
        assert head_sha(repo) == before
        assert tags(repo) == []

    def test_untracked_files_are_left_alone(self, repo: Path) -> None:
        (repo / "scratch.txt").write_text("notes\n")

        outcome = FixupWorkflow(WorkflowContext.create(repo)).execute(assume_yes=True)

        assert outcome.status is OutcomeStatus.NOOP
        assert "untracked" in (outcome.plan.noop_reason or "")
        assert git(repo, "status", "--porcelain") == "?? scratch.txt\n"

    def test_possibly_pushed_commit_defaults_to_no(self, repo_with_remote: Path) -> None:
        (repo_with_remote / "README.md").write_text("# changed\n")

        plan = FixupWorkflow(WorkflowContext.create(repo_with_remote)).build_plan()

        assert plan.warnings
        assert plan.confirm_default is False

    def test_empty_repository(self, empty_repo: Path) -> None:
        with pytest.raises(ValidationError, match="no commits yet"):
            FixupWorkflow(WorkflowContext.create(empty_repo)).execute(assume_yes=True)
