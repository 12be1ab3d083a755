"""Tests for the split workflow."""

from __future__ import annotations

from pathlib import Path

import pytest

from gitoops.core.errors import ExternalToolError
from gitoops.workflows import OutcomeStatus, SplitWorkflow, WorkflowContext
from repo_helpers import git, head_sha, subjects, tags


def _stage(repo: Path, *paths: str) -> None:
    for path in paths:
        target = repo / path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(f"{path}\n")
    git(repo, "add", "--", *paths)


def _files_in(repo: Path, rev: str) -> list[str]:
    return git(repo, "show", "--name-only", "--format=", rev).split()


class TestSplit:
    def test_one_commit_per_directory(self, temp_repo: Path) -> None:
        _stage(temp_repo, "src/a.js", "src/b.js", "docs/readme.md")

        outcome = SplitWorkflow(WorkflowContext.create(temp_repo)).execute(assume_yes=True)

        assert outcome.status is OutcomeStatus.SUCCESS
        assert subjects(temp_repo) == [
            "chore(src): split from mixed changes",
            "chore(docs): split from mixed changes",
            "Initial commit",
        ]
        assert _files_in(temp_repo, "HEAD") == ["src/a.js", "src/b.js"]
        assert _files_in(temp_repo, "HEAD~1") == ["docs/readme.md"]
        assert git(temp_repo, "status", "--porcelain") == ""
        assert outcome.summary[0] == "Created 2 of 2 commits"
        assert len(tags(temp_repo)) == 1
        assert tags(temp_repo)[0].startswith("oops/split-2-groups-")
        assert any("git reset --soft" in step for step in outcome.next_steps)

    def test_root_files_commit_last(self, temp_repo: Path) -> None:
        _stage(temp_repo, "top.txt", "lib/x.py")

        SplitWorkflow(WorkflowContext.create(temp_repo)).execute(assume_yes=True)

        assert subjects(temp_repo)[:2] == [
            "chore(root): split from mixed changes",
            "chore(lib): split from mixed changes",
        ]
        assert _files_in(temp_repo, "HEAD") == ["top.txt"]

    def test_single_group_is_noop(self, temp_repo: Path) -> None:
        _stage(temp_repo, "src/a.js", "src/b.js")

        outcome = SplitWorkflow(WorkflowContext.create(temp_repo)).execute(assume_yes=True)

        assert outcome.status is OutcomeStatus.NOOP
        assert subjects(temp_repo) == ["Initial commit"]

    def test_nothing_staged_is_noop(self, temp_repo: Path) -> None:
        (temp_repo / "loose.txt").write_text("x\n")

        outcome = SplitWorkflow(WorkflowContext.create(temp_repo)).execute(assume_yes=True)

        assert outcome.status is OutcomeStatus.NOOP
        assert outcome.plan.noop_reason == "Nothing to split: no staged changes"

    def test_preview_lists_groups_in_commit_order(self, temp_repo: Path) -> None:
        _stage(temp_repo, "src/a.js", "docs/readme.md")

        outcome = SplitWorkflow(WorkflowContext.create(temp_repo)).execute(dry_run=True)

        commits = [line for line in outcome.plan.describe() if "Commit" in line]
        assert "chore(docs)" in commits[0]
        assert "chore(src)" in commits[1]
        assert git(temp_repo, "diff", "--cached", "--name-only").split() == [
            "docs/readme.md",
            "src/a.js",
        ]


REJECT_SRC_HOOK = """#!/bin/sh
git diff --cached --name-only | grep -q '^src/' && exit 1
exit 0
"""


class TestSplitFailure:
    @pytest.fixture
    def rejecting_repo(self, temp_repo: Path) -> Path:
        hook = temp_repo / ".git" / "hooks" / "pre-commit"
        hook.parent.mkdir(parents=True, exist_ok=True)
        hook.write_text(REJECT_SRC_HOOK)
        hook.chmod(0o755)
        _stage(temp_repo, "docs/readme.md", "src/a.js", "tests/t.py")
        return temp_repo

    def test_hook_failure_lists_created_commits_and_pending_paths(
        self, rejecting_repo: Path
    ) -> None:
        with pytest.raises(ExternalToolError) as exc_info:
            SplitWorkflow(WorkflowContext.create(rejecting_repo)).execute(assume_yes=True)

        err = exc_info.value
        marker = tags(rejecting_repo)[0]
        assert err.marker == marker
        assert subjects(rejecting_repo)[0] == "chore(docs): split from mixed changes"
        assert "Already committed: 'chore(docs): split from mixed changes'" in err.recovery_steps
        assert err.recovery_steps[-1] == (
            "To get the original staged changes back: "
            f"git reset --soft {marker} && git add -- src/a.js tests/t.py"
        )
        assert not any("--hard" in step for step in err.recovery_steps)

    def test_recovery_steps_restore_original_staging(self, rejecting_repo: Path) -> None:
        initial = head_sha(rejecting_repo)

        with pytest.raises(ExternalToolError) as exc_info:
            SplitWorkflow(WorkflowContext.create(rejecting_repo)).execute(assume_yes=True)

        git(rejecting_repo, "reset", "-q", "--soft", exc_info.value.marker)
        git(rejecting_repo, "add", "--", "src/a.js", "tests/t.py")
        assert head_sha(rejecting_repo) == initial
        assert git(rejecting_repo, "diff", "--cached", "--name-only").split() == [
            "docs/readme.md",
            "src/a.js",
            "tests/t.py",
        ]
