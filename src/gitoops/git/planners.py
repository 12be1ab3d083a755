"""Plan builders that separate "what to do" from "how to do it".

A Plan is a pure value: builders here never call git. The same Plan drives
both the preview (``Plan.describe()``) and the real run (``ActionRunner``
executes ``plan.actions`` in order), so preview and execution cannot drift.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum, auto

from gitoops.config.constants import PLAN_FILES_SHOWN, ROOT_GROUP, SUBJECT_DISPLAY_MAX
from gitoops.core.errors import InternalError
from gitoops.core.formatting import format_path_list, pluralize, short_sha, truncate_text
from gitoops.git._internal.parsing import make_branch_ref
from gitoops.git.models import (
    CommitRecord,
    FileGroup,
    PocketEntry,
    RepositoryStatus,
    UpstreamRelationship,
)


class ActionKind(Enum):
    """Every mutating primitive a plan may schedule."""

    CREATE_MARKER = auto()
    STAGE_ALL = auto()
    STAGE_TRACKED = auto()
    STAGE_FILES = auto()
    UNSTAGE_ALL = auto()
    COMMIT = auto()
    COMMIT_IF_STAGED = auto()
    AMEND = auto()
    SOFT_RESET = auto()
    HARD_RESET = auto()
    CLEAN = auto()
    CREATE_BRANCH = auto()
    SWITCH_BRANCH = auto()
    DELETE_REF = auto()
    UPDATE_REF = auto()
    SNAPSHOT = auto()
    STASH_PUSH = auto()
    STASH_POP = auto()
    STASH_APPLY = auto()
    PULL_REBASE = auto()
    REVERT_MERGE = auto()


DESTRUCTIVE_KINDS = frozenset(
    {
        ActionKind.AMEND,
        ActionKind.SOFT_RESET,
        ActionKind.HARD_RESET,
        ActionKind.CLEAN,
        ActionKind.DELETE_REF,
        ActionKind.REVERT_MERGE,
    }
)
"""Actions that rewrite or discard state; a marker must come first when the plan has one."""


@dataclass(frozen=True, slots=True)
class PlannedAction:
    """One intended mutating call."""

    kind: ActionKind
    description: str
    target: str | None = None
    paths: tuple[str, ...] = ()
    message: str | None = None
    mainline: int | None = None
    qualifier: str | None = None
    critical: bool = True
    """A failing non-critical action ends the run as a partial success."""


@dataclass(frozen=True, slots=True)
class Plan:
    """Ordered intended actions plus everything needed to describe them."""

    operation: str
    headline: str
    actions: tuple[PlannedAction, ...] = ()
    details: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()
    confirm_prompt: str | None = None
    confirm_default: bool = False
    noop_reason: str | None = None

    def __post_init__(self) -> None:
        kinds = [a.kind for a in self.actions]
        if ActionKind.CREATE_MARKER not in kinds:
            return
        marker_at = kinds.index(ActionKind.CREATE_MARKER)
        for i, kind in enumerate(kinds[:marker_at]):
            if kind in DESTRUCTIVE_KINDS:
                raise InternalError.unexpected(
                    "destructive action planned before its safety marker",
                    operation=self.operation,
                    action=kind.name,
                    position=i,
                )

    @property
    def is_noop(self) -> bool:
        return self.noop_reason is not None

    @property
    def needs_confirmation(self) -> bool:
        return self.confirm_prompt is not None and not self.is_noop

    @property
    def creates_marker(self) -> bool:
        return any(a.kind is ActionKind.CREATE_MARKER for a in self.actions)

    def describe(self) -> list[str]:
        """Numbered action lines, exactly in execution order."""
        return [f"{i}. {action.description}" for i, action in enumerate(self.actions, 1)]


def noop_plan(operation: str, reason: str) -> Plan:
    return Plan(operation=operation, headline=reason, noop_reason=reason)


def _marker_action(qualifier: str) -> PlannedAction:
    return PlannedAction(
        ActionKind.CREATE_MARKER,
        "Create safety marker tag at current HEAD",
        qualifier=qualifier,
    )


def _commit_lines(commits: Sequence[CommitRecord]) -> list[str]:
    return [f"  {c.short_sha} {truncate_text(c.subject, SUBJECT_DISPLAY_MAX)}" for c in commits]


def _path_lines(title: str, paths: Sequence[str]) -> list[str]:
    if not paths:
        return []
    lines = format_path_list(list(paths), max_shown=PLAN_FILES_SHOWN)
    return [f"{title} ({len(paths)}):", *(f"  {line}" for line in lines)]


# =============================================================================
# Directory Grouping
# =============================================================================


def group_key(path: str) -> str:
    """First path segment, or the root sentinel for top-level files."""
    head, sep, _ = path.partition("/")
    return head if sep and head else ROOT_GROUP


def group_files_by_directory(paths: Iterable[str]) -> list[FileGroup]:
    """Partition paths by top-level directory.

    Every input path lands in exactly one group. Groups sort alphabetically by
    key with the root group always last; files inside a group are sorted.
    """
    buckets: dict[str, set[str]] = {}
    for path in paths:
        buckets.setdefault(group_key(path), set()).add(path)

    ordered = sorted(buckets, key=lambda key: (key == ROOT_GROUP, key))
    return [FileGroup(key=key, files=tuple(sorted(buckets[key]))) for key in ordered]


# =============================================================================
# Workflow Plans
# =============================================================================


def plan_undo(
    *,
    branch: str | None,
    commits: Sequence[CommitRecord],
    requested: int,
    removes_root: bool,
    push_warning: str | None = None,
) -> Plan:
    """Soft-move HEAD back len(commits), keeping every change staged."""
    count = len(commits)
    warnings: list[str] = []
    if count < requested:
        warnings.append(
            f"Only {pluralize(count, 'commit')} available; undoing {count} instead of {requested}."
        )
    if push_warning:
        warnings.append(push_warning)

    if removes_root and branch:
        reset = PlannedAction(
            ActionKind.DELETE_REF,
            f"Delete ref of branch '{branch}' (whole history undone, changes stay staged)",
            target=make_branch_ref(branch),
        )
    else:
        reset = PlannedAction(
            ActionKind.SOFT_RESET,
            f"Soft reset HEAD~{count} (changes stay staged)",
            target=f"HEAD~{count}",
        )

    return Plan(
        operation="undo",
        headline=f"Undo the last {pluralize(count, 'commit')}",
        actions=(_marker_action(f"{count}-commits"), reset),
        details=("Commits to undo:", *_commit_lines(commits)),
        warnings=tuple(warnings),
        confirm_prompt=f"Undo {pluralize(count, 'commit')}?",
        confirm_default=False,
    )


def plan_fixup(
    *,
    head: CommitRecord,
    status: RepositoryStatus,
    message: str | None,
    push_warning: str | None = None,
) -> Plan:
    """Fold pending tracked changes (and optionally a new message) into HEAD."""
    if not status.has_tracked_changes and not message:
        reason = "Nothing to fix up: no pending changes and no new message"
        if status.untracked:
            reason += " (untracked files are not included; stage them first)"
        return noop_plan("fixup", reason)

    actions = [_marker_action(head.short_sha)]
    if status.unstaged:
        actions.append(PlannedAction(ActionKind.STAGE_TRACKED, "Stage changes to tracked files"))
    actions.append(
        PlannedAction(
            ActionKind.AMEND,
            f"Amend {head.short_sha} with new message" if message else f"Amend {head.short_sha}",
            message=message,
        )
    )

    details = ["Target commit:", *_commit_lines([head])]
    details += _path_lines("Staged", status.staged)
    details += _path_lines("Unstaged (will be staged)", status.unstaged)
    if message:
        details.append(f"New message: {message}")

    warnings = []
    if status.untracked:
        warnings.append(f"{pluralize(len(status.untracked), 'untracked file')} will not be included.")
    if push_warning:
        warnings.append(push_warning)

    return Plan(
        operation="fixup",
        headline=f"Amend last commit {head.short_sha}",
        actions=tuple(actions),
        details=tuple(details),
        warnings=tuple(warnings),
        confirm_prompt=f"Amend commit {head.short_sha}?",
        confirm_default=push_warning is None,
    )


def plan_save(*, status: RepositoryStatus, message: str) -> Plan:
    """Stage everything, untracked included, and commit."""
    if status.is_clean:
        return noop_plan("save", "Nothing to save: working tree is clean")

    details = _path_lines("Staged", status.staged)
    details += _path_lines("Modified", status.unstaged)
    details += _path_lines("Untracked", status.untracked)
    return Plan(
        operation="save",
        headline=f"Save {pluralize(len(status.changed_paths), 'file')} as a commit",
        actions=(
            PlannedAction(ActionKind.STAGE_ALL, "Stage all changes including untracked files"),
            PlannedAction(ActionKind.COMMIT, f"Commit with message '{message}'", message=message),
        ),
        details=tuple(details),
        confirm_prompt=f"Create commit '{message}'?",
        confirm_default=True,
    )


def plan_split(*, groups: Sequence[FileGroup], template: str) -> Plan:
    """One commit per directory group, in group order.

    The marker records HEAD before the first commit, so a soft reset to it
    plus re-staging the unfinished groups restores the original index.
    """
    if len(groups) <= 1:
        return noop_plan("split", "Nothing to split: all staged files are in one directory group")

    actions: list[PlannedAction] = [_marker_action(f"{len(groups)}-groups")]
    details: list[str] = []
    for group in groups:
        message = template.format(group=group.label)
        actions += [
            PlannedAction(ActionKind.UNSTAGE_ALL, "Unstage everything"),
            PlannedAction(
                ActionKind.STAGE_FILES,
                f"Stage {pluralize(len(group.files), 'file')} in {group.label}",
                paths=group.files,
            ),
            PlannedAction(
                ActionKind.COMMIT_IF_STAGED,
                f"Commit '{message}'",
                message=message,
                qualifier=group.key,
            ),
        ]
        details += _path_lines(group.label, group.files)

    return Plan(
        operation="split",
        headline=f"Split staged changes into {pluralize(len(groups), 'commit')}",
        actions=tuple(actions),
        details=tuple(details),
        warnings=(
            "Files are re-staged from the working tree: unstaged edits to these files are included.",
        ),
        confirm_prompt=f"Create {pluralize(len(groups), 'commit')}?",
        confirm_default=True,
    )


def plan_wrong_branch(
    *,
    branch: str,
    target: str,
    upstream: str,
    commits: Sequence[CommitRecord],
    warnings: Sequence[str] = (),
) -> Plan:
    """Move the commits in upstream..HEAD from branch onto a new branch."""
    count = len(commits)
    return Plan(
        operation="wrong-branch",
        headline=f"Move {pluralize(count, 'commit')} from '{branch}' to new branch '{target}'",
        actions=(
            _marker_action(f"{count}-commits"),
            PlannedAction(ActionKind.CREATE_BRANCH, f"Create branch '{target}' at HEAD", target=target),
            PlannedAction(ActionKind.SWITCH_BRANCH, f"Switch back to '{branch}'", target=branch),
            PlannedAction(ActionKind.HARD_RESET, f"Hard reset '{branch}' to {upstream}", target=upstream),
            PlannedAction(ActionKind.SWITCH_BRANCH, f"Switch to '{target}'", target=target),
        ),
        details=(f"Commits to move (reset base {upstream}):", *_commit_lines(commits)),
        warnings=tuple(warnings),
        confirm_prompt=f"Move {pluralize(count, 'commit')} to '{target}'?",
        confirm_default=False,
    )


def plan_yank(
    *,
    status: RepositoryStatus,
    upstream: UpstreamRelationship | None,
    stash_message: str,
) -> Plan:
    """Pull with rebase, stashing around it only when the tree is dirty.

    `git pull` uses only the configured tracking branch, so a same-named
    remote branch that is not tracked gets the same warning as none at all.
    """
    actions: list[PlannedAction] = []
    dirty = not status.is_clean
    if dirty:
        actions.append(
            PlannedAction(
                ActionKind.STASH_PUSH,
                "Stash local changes (including untracked)",
                message=stash_message,
            )
        )
    actions.append(PlannedAction(ActionKind.PULL_REBASE, "Pull with rebase"))
    if dirty:
        actions.append(
            PlannedAction(ActionKind.STASH_POP, "Restore stashed changes", critical=False)
        )

    warnings = []
    if upstream is None:
        warnings.append("No upstream configured for this branch; the pull will likely fail.")
    elif not upstream.is_tracking:
        warnings.append(
            f"'{upstream.branch}' does not track {upstream.upstream}; the pull will likely fail. "
            f"Set it with: git branch --set-upstream-to={upstream.upstream}"
        )

    details = [f"Upstream: {upstream.upstream if upstream else '(none)'}"]
    if dirty:
        details.append(f"Local changes: {pluralize(len(status.changed_paths), 'file')}")

    return Plan(
        operation="yank",
        headline="Pull latest changes" + (" and restore local work" if dirty else ""),
        actions=tuple(actions),
        details=tuple(details),
        warnings=tuple(warnings),
    )


def plan_pocket_save(
    *,
    branch: str,
    ref: str,
    status: RepositoryStatus,
    snapshot_message: str,
    overwrites: bool,
) -> Plan:
    """Snapshot the full working tree under a hidden ref, then clean the tree."""
    actions: list[PlannedAction] = []
    if status.untracked:
        actions.append(
            PlannedAction(ActionKind.STAGE_ALL, "Stage untracked files so they are part of the snapshot")
        )
    actions += [
        PlannedAction(
            ActionKind.SNAPSHOT,
            "Create snapshot commit (current commit if nothing changed)",
            message=snapshot_message,
        ),
        PlannedAction(
            ActionKind.UPDATE_REF,
            f"Point {ref} at the snapshot",
            target=ref,
            message=f"git-oops: pocket save on {branch}",
        ),
    ]
    if not status.is_clean:
        actions += [
            PlannedAction(ActionKind.HARD_RESET, "Hard reset working tree to HEAD", target="HEAD"),
            PlannedAction(ActionKind.CLEAN, "Remove untracked files and directories"),
        ]

    warnings = []
    if overwrites:
        warnings.append(f"Overwriting existing pocket; the previous one stays in 'git reflog {ref}'.")

    details = [f"Pocket: {ref}"]
    details += _path_lines("Changes", status.changed_paths)
    return Plan(
        operation="pocket-save",
        headline=f"Pocket working tree of '{branch}'",
        actions=tuple(actions),
        details=tuple(details),
        warnings=tuple(warnings),
        confirm_prompt=None if status.is_clean else "Save to pocket and clean the working tree?",
        confirm_default=True,
    )


def plan_pocket_restore(*, entry: PocketEntry, is_snapshot: bool, drop: bool) -> Plan:
    """Apply a pocket snapshot onto the working tree, optionally dropping the ref."""
    if not is_snapshot and not drop:
        return noop_plan(
            "pocket-restore",
            f"Pocket {entry.ref} holds a plain commit ({short_sha(entry.sha)}): nothing to apply",
        )

    actions: list[PlannedAction] = []
    if is_snapshot:
        actions.append(
            PlannedAction(
                ActionKind.STASH_APPLY,
                f"Apply snapshot {short_sha(entry.sha)} to the working tree",
                target=entry.sha,
            )
        )
    if drop:
        actions.append(PlannedAction(ActionKind.DELETE_REF, f"Delete {entry.ref}", target=entry.ref))

    return Plan(
        operation="pocket-restore",
        headline=f"Restore pocket of '{entry.branch}'",
        actions=tuple(actions),
        details=(f"Pocket: {entry.ref} -> {short_sha(entry.sha)}",),
        confirm_prompt=f"Restore and delete {entry.ref}?" if drop else None,
        confirm_default=True,
    )


def plan_revert_merge(*, commit: CommitRecord, parents: Sequence[str], mainline: int) -> Plan:
    """Revert a merge keeping the mainline parent's side of history."""
    details = ["Merge commit:", *_commit_lines([commit]), "Parents:"]
    for i, parent in enumerate(parents, 1):
        suffix = " (mainline, kept)" if i == mainline else ""
        details.append(f"  {i}. {short_sha(parent)}{suffix}")

    return Plan(
        operation="revert-merge",
        headline=f"Revert merge {commit.short_sha} keeping parent {mainline}",
        actions=(
            _marker_action(commit.short_sha),
            PlannedAction(
                ActionKind.REVERT_MERGE,
                f"Revert {commit.short_sha} with mainline {mainline}",
                target=commit.sha,
                mainline=mainline,
            ),
        ),
        details=tuple(details),
        confirm_prompt=f"Revert merge {commit.short_sha}?",
        confirm_default=True,
    )
