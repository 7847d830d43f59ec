"""Typer CLI entrypoint for git-wt."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

import click
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from typer.core import TyperGroup

from . import __version__
from .config import Settings, load_settings
from .exceptions import GitWtError, UserAbort
from .git import GitRunner
from .interactive import InquirerPrompter
from .inventory import current_worktree_branch
from .worktrees import WorktreeManager, render_worktrees_json, render_worktrees_table

logger = logging.getLogger(__name__)


class SwitchByDefaultGroup(TyperGroup):
    """Treat ``git-wt <branch>`` as ``git-wt switch <branch>``."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        for index, arg in enumerate(args):
            if arg == "--":
                break
            if arg.startswith("-"):
                continue
            if arg not in self.commands:
                args = [*args[:index], "switch", *args[index:]]
            break
        return super().parse_args(ctx, args)


app = typer.Typer(
    cls=SwitchByDefaultGroup,
    help="Switch between git worktrees by (fuzzy) branch name.",
    add_completion=False,
    rich_markup_mode="rich",
)


@dataclass(slots=True)
class AppState:
    settings: Settings
    manager: WorktreeManager
    console: Console


def configure_logging(console: Console, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def build_state(verbose: bool) -> AppState:
    console = Console(stderr=True)
    configure_logging(console, verbose)
    settings = load_settings(verbose=verbose)
    manager = WorktreeManager(
        runner=GitRunner(settings.git_binary),
        prompter=InquirerPrompter(page_size=settings.page_size),
        console=console,
        settings=settings,
        cwd=Path.cwd(),
    )
    return AppState(settings=settings, manager=manager, console=console)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"git-wt {__version__}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging."),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the git-wt version and exit.",
    ),
) -> None:
    """Switch between git worktrees by (fuzzy) branch name.

    Run ``git-wt <branch>`` as a shortcut for ``git-wt switch <branch>``.
    """
    _ = version  # handled via callback
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help(), err=True)
        raise typer.Exit(1)
    err_console = Console(stderr=True)
    try:
        ctx.obj = build_state(verbose)
    except GitWtError as exc:
        _fail(err_console, str(exc))


def _require_state(ctx: typer.Context) -> AppState:
    state = ctx.obj
    if not isinstance(state, AppState):  # pragma: no cover
        raise typer.Exit(1)
    return state


@contextmanager
def _handle_errors(state: AppState) -> Iterator[None]:
    try:
        yield
    except UserAbort as exc:
        state.console.print(f"[dim]{escape(str(exc))}[/dim]")
        raise typer.Exit(0) from exc
    except GitWtError as exc:
        logger.debug("Command aborted", exc_info=exc)
        _fail(state.console, str(exc))


def _fail(console: Console, message: str, code: int = 1) -> None:
    console.print(f"[black on red] ERROR [/black on red] {escape(message)}")
    raise typer.Exit(code)


def _emit_cd(path: Path) -> None:
    typer.echo(f"CD:{path}")


@app.command(help="Clone a repository with a bare worktree layout.")
def clone(
    ctx: typer.Context,
    url: str = typer.Argument(..., help="Repository URL."),
    name: Optional[str] = typer.Argument(None, help="Directory name (defaults to the repository name)."),
) -> None:
    state = _require_state(ctx)
    with _handle_errors(state):
        target = state.manager.clone(url, name)
    _emit_cd(target)


@app.command(help="Fetch from the remote with prune.")
def fetch(ctx: typer.Context) -> None:
    state = _require_state(ctx)
    with _handle_errors(state):
        state.manager.fetch()


@app.command(help="Add a new worktree next to the existing ones.")
def add(
    ctx: typer.Context,
    branch: str = typer.Argument(..., help="Branch name for the new worktree."),
    from_ref: Optional[str] = typer.Option(
        None,
        "--from",
        "-f",
        help="Create the branch from this ref (defaults to <remote>/<branch>).",
    ),
) -> None:
    state = _require_state(ctx)
    with _handle_errors(state):
        target = state.manager.add(branch, from_ref)
    _emit_cd(target)


@app.command("rm", help="Remove a worktree.")
@app.command("remove", hidden=True)
def rm(
    ctx: typer.Context,
    branch: Optional[str] = typer.Argument(
        None,
        help="Branch of the worktree to remove (defaults to the current worktree).",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Force removal even if the worktree has uncommitted changes.",
    ),
) -> None:
    state = _require_state(ctx)
    with _handle_errors(state):
        state.manager.remove(branch, force=force)


@app.command("switch", help="Switch to a worktree by branch name.")
@app.command("s", hidden=True)
def switch(
    ctx: typer.Context,
    branch: str = typer.Argument(..., help="Branch name to switch to."),
) -> None:
    state = _require_state(ctx)
    with _handle_errors(state):
        target = state.manager.switch(branch)
    _emit_cd(target)


@app.command(help="Pull changes in a worktree.")
def pull(
    ctx: typer.Context,
    branch: Optional[str] = typer.Argument(
        None,
        help="Branch of the worktree to pull (defaults to the current worktree).",
    ),
) -> None:
    state = _require_state(ctx)
    with _handle_errors(state):
        state.manager.pull(branch)


@app.command(help="List worktrees that are checked out on a branch.")
def ls(
    ctx: typer.Context,
    json_: bool = typer.Option(False, "--json", help="Output JSON instead of a table."),
) -> None:
    state = _require_state(ctx)
    with _handle_errors(state):
        records = state.manager.list_records()
    if json_:
        typer.echo(render_worktrees_json(records))
        return
    if not records:
        state.console.print("No worktrees found.")
        return
    current = current_worktree_branch(records, state.manager.cwd)
    render_worktrees_table(records, Console(), current=current)


__all__ = ["app"]
