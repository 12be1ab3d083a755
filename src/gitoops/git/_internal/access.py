"""Repository access layer - runs git subprocesses and exposes parsed facts.

Every call runs with an explicit working directory. Nothing is cached: any
mutating call invalidates previous reads, so callers re-query afterwards.
"""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from pathlib import Path

from gitoops.config.constants import POCKET_NAMESPACE
from gitoops.config.models import GitConfig
from gitoops.core.errors import ErrorCode, ExternalToolError
from gitoops.core.logging import get_logger
from gitoops.git._internal.constants import LOG_FORMAT, REF_STASH, REFS_REMOTES
from gitoops.git._internal.errors import git_operation
from gitoops.git._internal.parsing import (
    make_branch_ref,
    parse_log,
    parse_parents,
    parse_pocket_refs,
    parse_status,
)
from gitoops.git.models import CommitRecord, PocketEntry, RepositoryStatus, UpstreamRelationship


class RepoAccess:
    """Owns the git invocation protocol and provides normalized repo state."""

    def __init__(self, repo_path: Path | str, config: GitConfig | None = None) -> None:
        self._path = Path(repo_path)
        self._config = config or GitConfig()
        self._log = get_logger("git")

    @classmethod
    def open(cls, repo_path: Path | str, config: GitConfig | None = None) -> RepoAccess:
        """Open the repository containing repo_path, rooted at its top level."""
        start = cls(repo_path, config)
        try:
            top = start.run(["rev-parse", "--show-toplevel"]).strip()
        except ExternalToolError as e:
            if e.code == ErrorCode.TOOL_NOT_FOUND:
                raise
            raise ExternalToolError.not_a_repository(str(repo_path)) from e
        return cls(top, config)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def remote(self) -> str:
        return self._config.remote

    # =========================================================================
    # Invocation Protocol
    # =========================================================================

    def run(self, args: Sequence[str]) -> str:
        """Run one git command and return its stdout.

        Raises:
            ExternalToolError: non-zero exit or missing executable.
        """
        command = [self._config.executable, *args]
        self._log.debug("git_exec", argv=command, cwd=str(self._path))
        with git_operation(command):
            result = subprocess.run(
                command,
                cwd=self._path,
                capture_output=True,
                text=True,
                check=True,
            )
        return result.stdout

    def _query(self, args: Sequence[str]) -> str | None:
        """Run a lookup whose failure means 'absent'. A missing executable still raises."""
        try:
            return self.run(args)
        except ExternalToolError as e:
            if e.code == ErrorCode.TOOL_NOT_FOUND:
                raise
            self._log.debug("git_query_empty", argv=list(args), stderr=e.stderr.strip())
            return None

    # =========================================================================
    # Read Operations
    # =========================================================================

    def status(self) -> RepositoryStatus:
        output = self.run(["status", "--porcelain=v1", "--branch", "-z", "--untracked-files=all"])
        return parse_status(output)

    def current_branch(self) -> str | None:
        """Current branch name (also when unborn), or None if HEAD is detached."""
        output = self._query(["symbolic-ref", "--short", "-q", "HEAD"])
        return output.strip() if output else None

    def resolve_commit(self, rev: str) -> str | None:
        """Full sha of rev if it names a commit, else None."""
        output = self._query(["rev-parse", "-q", "--verify", f"{rev}^{{commit}}"])
        return output.strip() if output else None

    def head_sha(self) -> str | None:
        return self.resolve_commit("HEAD")

    def has_commits(self) -> bool:
        return self.head_sha() is not None

    def ref_exists(self, ref: str) -> bool:
        return self._query(["rev-parse", "-q", "--verify", ref]) is not None

    def branch_exists(self, name: str) -> bool:
        return self.ref_exists(make_branch_ref(name))

    def is_valid_branch_name(self, name: str) -> bool:
        return self._query(["check-ref-format", "--branch", name]) is not None

    def commits(
        self, rev_range: str, limit: int | None = None, *, first_parent: bool = False
    ) -> list[CommitRecord]:
        """Commits in rev_range (e.g. 'HEAD' or 'origin/main..HEAD'), newest first.

        With first_parent, only the chain HEAD~1, HEAD~2, ... is walked, which
        is exactly what HEAD~N resets move over.
        """
        args = ["log", LOG_FORMAT]
        if first_parent:
            args.append("--first-parent")
        if limit is not None:
            args.append(f"-n{limit}")
        args.extend([rev_range, "--"])
        return parse_log(self.run(args))

    def count_commits(self, rev_range: str, *, first_parent: bool = False) -> int:
        """Number of commits in rev_range. An invalid or empty range counts as 0."""
        args = ["rev-list", "--count"]
        if first_parent:
            args.append("--first-parent")
        output = self._query([*args, rev_range])
        if output is None:
            return 0
        try:
            return int(output.strip())
        except ValueError:
            return 0

    def upstream_relationship(self, branch: str | None = None) -> UpstreamRelationship | None:
        """Tracking ref of branch, falling back to <remote>/<branch> when it exists."""
        branch = branch or self.current_branch()
        if not branch:
            return None

        tracking = self._query(
            ["rev-parse", "--abbrev-ref", "--symbolic-full-name", f"{branch}@{{u}}"]
        )
        if tracking and tracking.strip():
            return UpstreamRelationship(branch, tracking.strip(), is_tracking=True)

        candidate = f"{self.remote}/{branch}"
        if self.ref_exists(f"{REFS_REMOTES}{candidate}"):
            return UpstreamRelationship(branch, candidate, is_tracking=False)
        return None

    def upstream(self, branch: str | None = None) -> str | None:
        relationship = self.upstream_relationship(branch)
        return relationship.upstream if relationship else None

    def parents(self, sha: str) -> list[str]:
        """Ordered parent hashes of a commit."""
        return parse_parents(self.run(["rev-list", "--parents", "-n", "1", sha, "--"]))

    def staged_files(self) -> list[str]:
        """Paths staged against HEAD; renames listed as delete + add."""
        output = self.run(["diff", "--cached", "--name-only", "--no-renames", "-z"])
        return [p for p in output.split("\0") if p]

    def unmerged_paths(self) -> list[str]:
        output = self.run(["diff", "--name-only", "--diff-filter=U", "-z"])
        return sorted({p for p in output.split("\0") if p})

    def stash_top(self) -> str | None:
        output = self._query(["rev-parse", "-q", "--verify", REF_STASH])
        return output.strip() if output else None

    def pocket_refs(self) -> list[PocketEntry]:
        output = self.run(
            ["for-each-ref", "--format=%(refname)%09%(objectname)", POCKET_NAMESPACE]
        )
        return parse_pocket_refs(output)

    # =========================================================================
    # Write Operations
    # =========================================================================

    def stage(self, paths: Sequence[str]) -> None:
        if not paths:
            return
        self.run(["add", "--", *paths])

    def stage_all(self) -> None:
        """Stage everything, untracked files included."""
        self.run(["add", "-A"])

    def stage_tracked(self) -> None:
        """Stage modifications and deletions of tracked files only."""
        self.run(["add", "-u"])

    def unstage_all(self) -> None:
        self.run(["reset", "-q"])

    def commit(self, message: str) -> None:
        self.run(["commit", "-q", "-m", message])

    def amend(self, message: str | None = None) -> None:
        if message:
            self.run(["commit", "-q", "--amend", "-m", message])
        else:
            self.run(["commit", "-q", "--amend", "--no-edit"])

    def create_tag(self, name: str, message: str, target: str = "HEAD") -> None:
        self.run(["tag", "-a", name, "-m", message, target])

    def reset_soft(self, target: str) -> None:
        self.run(["reset", "-q", "--soft", target])

    def reset_hard(self, target: str) -> None:
        self.run(["reset", "-q", "--hard", target])

    def clean(self) -> None:
        self.run(["clean", "-fdq"])

    def update_ref(self, ref: str, sha: str, message: str | None = None) -> None:
        args = ["update-ref", "--create-reflog"]
        if message:
            args.extend(["-m", message])
        self.run([*args, ref, sha])

    def delete_ref(self, ref: str) -> None:
        self.run(["update-ref", "-d", ref])

    def create_branch(self, name: str) -> None:
        """Create branch at HEAD and switch to it."""
        self.run(["switch", "-q", "-c", name])

    def switch_branch(self, name: str) -> None:
        self.run(["switch", "-q", name])

    def stash_push(self, message: str) -> str | None:
        """Stash tracked and untracked changes. Returns the new stash sha, or None."""
        before = self.stash_top()
        self.run(["stash", "push", "--include-untracked", "-m", message])
        after = self.stash_top()
        return after if after and after != before else None

    def stash_pop(self) -> None:
        self.run(["stash", "pop"])

    def stash_create(self, message: str) -> str | None:
        """Create a stash commit without touching the stash list or the tree."""
        sha = self.run(["stash", "create", message]).strip()
        return sha or None

    def stash_apply(self, sha: str) -> None:
        self.run(["stash", "apply", sha])

    def pull_rebase(self) -> None:
        self.run(["pull", "--rebase"])

    def revert_merge(self, sha: str, mainline: int) -> None:
        self.run(["revert", "--no-edit", "-m", str(mainline), sha])
