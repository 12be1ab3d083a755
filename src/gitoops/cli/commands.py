"""git-oops workflow commands."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import click

from gitoops.cli.output import render_pockets
from gitoops.cli.utils import AppContext, error_boundary, pass_app
from gitoops.config.constants import UNDO_MAX_COMMITS
from gitoops.workflows import (
    FixupWorkflow,
    PocketRestoreWorkflow,
    PocketSaveWorkflow,
    RevertMergeWorkflow,
    SaveWorkflow,
    SplitWorkflow,
    UndoWorkflow,
    WrongBranchWorkflow,
    YankWorkflow,
    list_pockets,
)

Decorator = Callable[[Callable[..., Any]], Callable[..., Any]]


def dry_run_option(f: Callable[..., Any]) -> Callable[..., Any]:
    return click.option("--dry-run", is_flag=True, help="Show the plan without changing anything")(f)


def yes_option(help_text: str = "Skip confirmation prompts") -> Decorator:
    return click.option("-y", "--yes", is_flag=True, help=help_text)


@click.command("undo")
@click.option(
    "-n",
    "--count",
    type=int,
    default=1,
    show_default=True,
    help=f"Number of commits to undo (1-{UNDO_MAX_COMMITS})",
)
@dry_run_option
@yes_option()
@pass_app
def undo_command(app: AppContext, count: int, dry_run: bool, yes: bool) -> None:
    """Undo the last commits, keeping their changes staged."""
    app.run(lambda ctx: UndoWorkflow(ctx, count), dry_run=dry_run, yes=yes)


@click.command("fixup")
@click.option("-m", "--message", default=None, help="Replace the last commit's message")
@dry_run_option
@yes_option()
@pass_app
def fixup_command(app: AppContext, message: str | None, dry_run: bool, yes: bool) -> None:
    """Fold pending changes into the last commit."""
    app.run(lambda ctx: FixupWorkflow(ctx, message), dry_run=dry_run, yes=yes)


@click.command("save")
@click.option("-m", "--message", default=None, help="Commit message (default: 'WIP: quick save')")
@dry_run_option
@yes_option()
@pass_app
def save_command(app: AppContext, message: str | None, dry_run: bool, yes: bool) -> None:
    """Commit everything, including untracked files."""
    app.run(lambda ctx: SaveWorkflow(ctx, message), dry_run=dry_run, yes=yes)


@click.command("split")
@dry_run_option
@yes_option()
@pass_app
def split_command(app: AppContext, dry_run: bool, yes: bool) -> None:
    """Split staged changes into one commit per top-level directory."""
    app.run(SplitWorkflow, dry_run=dry_run, yes=yes)


@click.command("wrong-branch")
@click.argument("new_branch", required=False)
@dry_run_option
@yes_option("Skip confirmation and allow protected branches")
@pass_app
def wrong_branch_command(
    app: AppContext, new_branch: str | None, dry_run: bool, yes: bool
) -> None:
    """Move commits made on the wrong branch to NEW_BRANCH.

    Without NEW_BRANCH the name is derived from the newest commit subject.
    """
    app.run(
        lambda ctx: WrongBranchWorkflow(ctx, new_branch, allow_protected=yes),
        dry_run=dry_run,
        yes=yes,
    )


@click.command("yank")
@dry_run_option
@pass_app
def yank_command(app: AppContext, dry_run: bool) -> None:
    """Pull with rebase, stashing and restoring local work around it."""
    app.run(YankWorkflow, dry_run=dry_run)


@click.command("revert-merge")
@click.argument("sha")
@click.option(
    "-m",
    "--mainline",
    type=int,
    default=1,
    show_default=True,
    help="Parent number to keep (1 is the branch merged into)",
)
@dry_run_option
@yes_option()
@pass_app
def revert_merge_command(
    app: AppContext, sha: str, mainline: int, dry_run: bool, yes: bool
) -> None:
    """Revert merge commit SHA."""
    app.run(lambda ctx: RevertMergeWorkflow(ctx, sha, mainline), dry_run=dry_run, yes=yes)


# =============================================================================
# Pocket
# =============================================================================


@click.group("pocket", invoke_without_command=True)
@click.pass_context
def pocket_group(ctx: click.Context) -> None:
    """Save the exact working state to a hidden per-branch ref.

    Without a subcommand this runs 'pocket save'.
    """
    if ctx.invoked_subcommand is None:
        ctx.invoke(pocket_save_command)


@pocket_group.command("save")
@dry_run_option
@yes_option()
@pass_app
def pocket_save_command(app: AppContext, dry_run: bool = False, yes: bool = False) -> None:
    """Snapshot the working tree to refs/pocket/<branch> and clean it."""
    app.run(PocketSaveWorkflow, dry_run=dry_run, yes=yes)


@pocket_group.command("restore")
@click.argument("branch", required=False)
@click.option("--drop", is_flag=True, help="Delete the pocket after restoring it")
@dry_run_option
@yes_option()
@pass_app
def pocket_restore_command(
    app: AppContext, branch: str | None, drop: bool, dry_run: bool, yes: bool
) -> None:
    """Apply the pocket of BRANCH (default: current branch) to the working tree."""
    app.run(lambda ctx: PocketRestoreWorkflow(ctx, branch, drop=drop), dry_run=dry_run, yes=yes)


@pocket_group.command("list")
@pass_app
def pocket_list_command(app: AppContext) -> None:
    """List saved pockets."""
    with error_boundary(app.console):
        entries = list_pockets(app.workflow_context().access)
    render_pockets(app.console, entries)
