"""git-oops CLI - git-oops command."""

from pathlib import Path

import click

from gitoops import __version__
from gitoops.cli.commands import (
    fixup_command,
    pocket_group,
    revert_merge_command,
    save_command,
    split_command,
    undo_command,
    wrong_branch_command,
    yank_command,
)
from gitoops.cli.output import make_console
from gitoops.cli.utils import AppContext, error_boundary
from gitoops.config.loader import load_config
from gitoops.core.logging import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="git-oops")
@click.option(
    "-C",
    "--repo",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Run as if started in this directory",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option("--no-color", is_flag=True, help="Disable colored output")
@click.pass_context
def cli(ctx: click.Context, repo: Path | None, verbose: bool, no_color: bool) -> None:
    """git-oops - safety nets for common git mistakes.

    Every destructive command creates an oops/... tag first, so
    'git reset --hard <tag>' always gets you back.
    """
    console = make_console(no_color=no_color)
    with error_boundary(console):
        config = load_config()
    logging_config = config.logging
    if verbose:
        logging_config = logging_config.model_copy(update={"level": "DEBUG"})
    configure_logging(config=logging_config)

    ctx.obj = AppContext(repo=repo or Path.cwd(), config=config, console=console)


cli.add_command(undo_command, name="undo")
cli.add_command(fixup_command, name="fixup")
cli.add_command(save_command, name="save")
cli.add_command(split_command, name="split")
cli.add_command(wrong_branch_command, name="wrong-branch")
cli.add_command(yank_command, name="yank")
cli.add_command(pocket_group, name="pocket")
cli.add_command(revert_merge_command, name="revert-merge")


if __name__ == "__main__":
    cli()
