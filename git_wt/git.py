"""Thin wrappers around git CLI commands."""

from __future__ import annotations

import logging
import subprocess
import sys
from pathlib import Path
from typing import Protocol, Sequence

from .exceptions import GitCommandError, NotInRepositoryError, QueryError
from .models import CommandResult

logger = logging.getLogger(__name__)


class CommandRunner(Protocol):
    def run(
        self,
        args: Sequence[str],
        *,
        cwd: Path | None = None,
        capture: bool = True,
    ) -> CommandResult: ...


class GitRunner:
    """Execute git as a subprocess.

    Captured runs collect stdout/stderr for parsing. Passthrough runs let git
    talk to the terminal directly, with its stdout sent to our stderr so the
    ``CD:`` line stays the only thing on stdout.
    """

    def __init__(self, binary: str = "git"):
        self.binary = binary

    def run(
        self,
        args: Sequence[str],
        *,
        cwd: Path | None = None,
        capture: bool = True,
    ) -> CommandResult:
        command = [self.binary, *args]
        logger.debug("Running %s (cwd=%s)", " ".join(command), cwd or ".")
        try:
            if capture:
                proc = subprocess.run(
                    command,
                    cwd=str(cwd) if cwd else None,
                    capture_output=True,
                    text=True,
                    check=False,
                )
            else:
                proc = subprocess.run(
                    command,
                    cwd=str(cwd) if cwd else None,
                    stdout=sys.stderr,
                    text=True,
                    check=False,
                )
        except OSError as exc:
            raise QueryError(f"Failed to execute command: {command[0]} ({exc})") from exc
        logger.debug("%s exited with %d", command[0], proc.returncode)
        return CommandResult(
            command=command,
            returncode=proc.returncode,
            stdout=proc.stdout or "",
            stderr=proc.stderr or "",
        )


def run_checked(runner: CommandRunner, args: Sequence[str], *, cwd: Path | None = None) -> None:
    """Run a mutating git command in passthrough mode and raise on failure."""

    result = runner.run(args, cwd=cwd, capture=False)
    if not result.ok:
        raise GitCommandError(result.command, result.returncode, stdout=result.stdout, stderr=result.stderr)


def ensure_repo(runner: CommandRunner, cwd: Path | None = None) -> None:
    result = runner.run(["rev-parse", "--git-dir"], cwd=cwd)
    if not result.ok:
        raise NotInRepositoryError("Not in a git repository")


def common_dir(runner: CommandRunner, cwd: Path | None = None) -> Path:
    result = runner.run(["rev-parse", "--git-common-dir"], cwd=cwd)
    if not result.ok:
        raise NotInRepositoryError("Not in a git repository")
    return Path(result.stdout.strip())


def ref_exists(runner: CommandRunner, ref: str, cwd: Path | None = None) -> bool:
    result = runner.run(["rev-parse", "--verify", "--quiet", ref], cwd=cwd)
    return result.ok


def worktree_list_porcelain(runner: CommandRunner, cwd: Path | None = None) -> str:
    result = runner.run(["worktree", "list", "--porcelain"], cwd=cwd)
    if not result.ok:
        raise QueryError(result.stderr.strip() or "Failed to list worktrees")
    return result.stdout


def clone_bare(runner: CommandRunner, url: str, target: Path, store: str = ".bare") -> None:
    run_checked(runner, ["clone", "--bare", url, store], cwd=target)


def configure_fetch_refspec(runner: CommandRunner, target: Path, remote: str = "origin") -> None:
    run_checked(
        runner,
        ["config", f"remote.{remote}.fetch", f"+refs/heads/*:refs/remotes/{remote}/*"],
        cwd=target,
    )


def fetch(
    runner: CommandRunner,
    remote: str = "origin",
    *,
    prune: bool = False,
    cwd: Path | None = None,
) -> None:
    args = ["fetch", remote]
    if prune:
        args.append("--prune")
    run_checked(runner, args, cwd=cwd)


def worktree_add_existing(runner: CommandRunner, target: Path, branch: str, cwd: Path | None = None) -> None:
    run_checked(runner, ["worktree", "add", str(target), branch], cwd=cwd)


def worktree_add_new(
    runner: CommandRunner,
    target: Path,
    branch: str,
    start_point: str,
    cwd: Path | None = None,
) -> None:
    run_checked(runner, ["worktree", "add", str(target), "-b", branch, start_point], cwd=cwd)


def worktree_remove(
    runner: CommandRunner,
    target: Path,
    *,
    force: bool = False,
    cwd: Path | None = None,
) -> None:
    args = ["worktree", "remove"]
    if force:
        args.append("--force")
    args.append(str(target))
    run_checked(runner, args, cwd=cwd)


def pull(runner: CommandRunner, worktree: Path) -> None:
    run_checked(runner, ["pull"], cwd=worktree)


__all__ = [
    "CommandRunner",
    "GitRunner",
    "run_checked",
    "ensure_repo",
    "common_dir",
    "ref_exists",
    "worktree_list_porcelain",
    "clone_bare",
    "configure_fetch_refspec",
    "fetch",
    "worktree_add_existing",
    "worktree_add_new",
    "worktree_remove",
    "pull",
]
