"""User-facing terminal output for plans, outcomes and errors.

Design principles:
- One styled line per fact, no spam
- Repository data (paths, subjects, ref names) is printed without markup
- Recovery information always comes last so it stays on screen
"""

from __future__ import annotations

from rich.console import Console
from rich.table import Table
from rich.text import Text

from gitoops.core.errors import ConflictError, GitOopsError
from gitoops.core.formatting import format_path_list, short_sha
from gitoops.core.logging import get_logger
from gitoops.git.models import PocketEntry
from gitoops.git.planners import Plan
from gitoops.workflows.base import Outcome, OutcomeStatus

# Style prefixes
_STYLES = {
    "success": ("✓ ", "green"),
    "error": ("✗ ", "red"),
    "warning": ("! ", "yellow"),
    "info": ("  ", ""),
    "none": ("", ""),
}


def make_console(*, no_color: bool = False) -> Console:
    return Console(stderr=True, no_color=no_color, highlight=False)


def status(console: Console, message: str, *, style: str = "info", indent: int = 0) -> None:
    """Print a styled status line.

    The message is never parsed as markup or wrapped, so printed commands stay
    copy-pastable.
    """
    prefix, color = _STYLES.get(style, _STYLES["none"])
    line = Text(" " * indent)
    line.append(prefix, style=color)
    line.append(message)
    console.print(line, soft_wrap=True)

    get_logger("output").debug("status", message=message, style=style)


def _section(console: Console, title: str, lines: list[str] | tuple[str, ...], *, indent: int = 2) -> None:
    if not lines:
        return
    console.print(f"\n[bold]{title}[/bold]")
    for line in lines:
        status(console, line, style="none", indent=indent)


def render_plan(console: Console, plan: Plan) -> None:
    """Headline, details, warnings and the numbered action list."""
    console.print()
    console.print(Text(plan.headline, style="bold"))
    for line in plan.details:
        status(console, line, style="none", indent=2)
    for warning in plan.warnings:
        status(console, warning, style="warning")
    _section(console, "Plan:", plan.describe())


def render_outcome(console: Console, outcome: Outcome) -> None:
    if outcome.status is OutcomeStatus.NOOP:
        status(console, outcome.plan.headline, style="success")
        return
    if outcome.status is OutcomeStatus.PREVIEW:
        render_plan(console, outcome.plan)
        console.print("\n[dim]Dry run - no changes made[/dim]")
        return
    if outcome.status is OutcomeStatus.CANCELLED:
        console.print("[dim]Cancelled[/dim]")
        return

    console.print()
    for warning in outcome.warnings:
        status(console, warning, style="warning")

    partial = outcome.status is OutcomeStatus.PARTIAL
    for i, line in enumerate(outcome.summary):
        style = "info"
        if i == 0:
            style = "warning" if partial else "success"
        elif partial:
            style = "warning"
        status(console, line, style=style)

    if outcome.marker is not None:
        status(console, f"Safety marker: {outcome.marker.name}", style="info")

    title = "To restore your changes manually:" if partial else "Next steps:"
    _section(console, title, outcome.next_steps)


def render_error(console: Console, err: GitOopsError) -> None:
    status(console, err.message, style="error")
    if isinstance(err, ConflictError) and err.paths:
        _section(console, "Conflicted files:", format_path_list(err.paths, max_shown=10))
    if err.marker:
        status(console, f"Safety marker: {err.marker}", style="info")
    _section(console, "To recover:", err.recovery_steps)


def render_pockets(console: Console, entries: list[PocketEntry]) -> None:
    if not entries:
        status(console, "No pockets saved", style="info")
        return

    table = Table(show_header=False, box=None, padding=(0, 1), pad_edge=False)
    table.add_column("branch", style="cyan")
    table.add_column("sha", style="dim")
    table.add_column("ref")
    for entry in entries:
        table.add_row(Text(entry.branch), short_sha(entry.sha), Text(entry.ref))
    console.print(table)
