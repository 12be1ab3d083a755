"""Tests for RepoAccess against real throwaway repositories."""

from __future__ import annotations

from pathlib import Path

import pytest

from repo_helpers import commit_file, git, head_sha, make_merge
from gitoops.config.models import GitConfig
from gitoops.core.errors import ErrorCode, ExternalToolError
from gitoops.git._internal.access import RepoAccess


@pytest.fixture
def access(temp_repo: Path) -> RepoAccess:
    return RepoAccess.open(temp_repo)


class TestOpen:
    def test_opens_from_subdirectory_at_top_level(self, temp_repo: Path) -> None:
        sub = temp_repo / "a" / "b"
        sub.mkdir(parents=True)

        access = RepoAccess.open(sub)

        assert access.path.resolve() == temp_repo.resolve()

    def test_not_a_repository(self, tmp_path: Path) -> None:
        plain = tmp_path / "plain"
        plain.mkdir()

        with pytest.raises(ExternalToolError) as exc_info:
            RepoAccess.open(plain)
        assert exc_info.value.code == ErrorCode.NOT_A_REPOSITORY

    def test_missing_executable(self, temp_repo: Path) -> None:
        with pytest.raises(ExternalToolError) as exc_info:
            RepoAccess.open(temp_repo, GitConfig(executable="definitely-not-git-xyz"))
        assert exc_info.value.code == ErrorCode.TOOL_NOT_FOUND


class TestRun:
    def test_failure_carries_command_and_stderr(self, access: RepoAccess) -> None:
        with pytest.raises(ExternalToolError) as exc_info:
            access.run(["rev-parse", "--verify", "no-such-ref"])

        err = exc_info.value
        assert err.code == ErrorCode.COMMAND_FAILED
        assert err.command[1:] == ["rev-parse", "--verify", "no-such-ref"]
        assert err.stderr


class TestStatus:
    def test_reports_all_categories(self, temp_repo: Path, access: RepoAccess) -> None:
        commit_file(temp_repo, "tracked.txt", "v1\n", "add tracked")
        (temp_repo / "tracked.txt").write_text("v2\n")
        (temp_repo / "staged.txt").write_text("new\n")
        git(temp_repo, "add", "staged.txt")
        (temp_repo / "dir").mkdir()
        (temp_repo / "dir" / "loose.txt").write_text("x\n")

        status = access.status()

        assert status.branch == "main"
        assert status.staged == ("staged.txt",)
        assert status.unstaged == ("tracked.txt",)
        assert status.untracked == ("dir/loose.txt",)

    def test_unborn_repo(self, empty_repo: Path) -> None:
        access = RepoAccess.open(empty_repo)

        status = access.status()

        assert status.is_unborn
        assert access.current_branch() == "main"
        assert not access.has_commits()


class TestHistoryQueries:
    def test_commits_newest_first_with_limit(self, temp_repo: Path, access: RepoAccess) -> None:
        commit_file(temp_repo, "a.txt", "a\n", "second")
        commit_file(temp_repo, "b.txt", "b\n", "third")

        commits = access.commits("HEAD", limit=2)

        assert [c.subject for c in commits] == ["third", "second"]
        assert commits[0].sha == head_sha(temp_repo)

    def test_count_commits_invalid_range_is_zero(self, access: RepoAccess) -> None:
        assert access.count_commits("nope..HEAD") == 0

    def test_count_commits(self, temp_repo: Path, access: RepoAccess) -> None:
        commit_file(temp_repo, "a.txt", "a\n", "second")
        assert access.count_commits("HEAD") == 2
        assert access.count_commits("HEAD~1..HEAD") == 1

    def test_first_parent_skips_merged_side(self, temp_repo: Path, access: RepoAccess) -> None:
        make_merge(temp_repo)

        assert access.count_commits("HEAD") == 4
        assert access.count_commits("HEAD", first_parent=True) == 3
        subjects = [c.subject for c in access.commits("HEAD", limit=3, first_parent=True)]
        assert subjects == ["Merge feature", "Advance main", "Initial commit"]

    def test_resolve_commit(self, temp_repo: Path, access: RepoAccess) -> None:
        sha = head_sha(temp_repo)
        assert access.resolve_commit(sha[:7]) == sha
        assert access.resolve_commit("deadbeef") is None

    def test_parents_of_root(self, temp_repo: Path, access: RepoAccess) -> None:
        assert access.parents(head_sha(temp_repo)) == []


class TestUpstream:
    def test_tracking_upstream(self, repo_with_remote: Path) -> None:
        access = RepoAccess.open(repo_with_remote)

        relationship = access.upstream_relationship()

        assert relationship is not None
        assert relationship.upstream == "origin/main"
        assert relationship.is_tracking

    def test_falls_back_to_same_named_remote_branch(self, repo_with_remote: Path) -> None:
        git(repo_with_remote, "branch", "--unset-upstream")
        access = RepoAccess.open(repo_with_remote)

        relationship = access.upstream_relationship("main")

        assert relationship is not None
        assert relationship.upstream == "origin/main"
        assert not relationship.is_tracking

    def test_none_without_remote(self, access: RepoAccess) -> None:
        assert access.upstream() is None

    def test_none_when_detached(self, temp_repo: Path, access: RepoAccess) -> None:
        git(temp_repo, "checkout", "-q", "--detach")
        assert access.current_branch() is None
        assert access.upstream() is None


class TestStash:
    def test_stash_push_returns_new_sha(self, temp_repo: Path, access: RepoAccess) -> None:
        (temp_repo / "README.md").write_text("changed\n")
        (temp_repo / "new.txt").write_text("new\n")

        sha = access.stash_push("oops-yank-test")

        assert sha is not None
        assert sha == access.stash_top()
        assert access.status().is_clean

    def test_stash_push_clean_tree_returns_none(self, access: RepoAccess) -> None:
        assert access.stash_push("nothing") is None

    def test_stash_create_clean_tree_returns_none(self, access: RepoAccess) -> None:
        assert access.stash_create("pocket-x") is None


class TestRefs:
    def test_update_ref_writes_reflog(self, temp_repo: Path, access: RepoAccess) -> None:
        sha = head_sha(temp_repo)

        access.update_ref("refs/pocket/main", sha, "git-oops: test")

        assert access.ref_exists("refs/pocket/main")
        assert "git-oops: test" in git(temp_repo, "reflog", "refs/pocket/main")
        assert [e.branch for e in access.pocket_refs()] == ["main"]

    def test_delete_ref(self, temp_repo: Path, access: RepoAccess) -> None:
        access.update_ref("refs/pocket/main", head_sha(temp_repo))
        access.delete_ref("refs/pocket/main")
        assert not access.ref_exists("refs/pocket/main")

    def test_branch_name_validation(self, access: RepoAccess) -> None:
        assert access.is_valid_branch_name("fix/login-bug")
        assert not access.is_valid_branch_name("bad..name")
