"""Enumerate the worktrees git knows about."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from . import git
from .git import CommandRunner
from .models import WorktreeRecord

_BRANCH_PREFIX = "refs/heads/"


def list_worktrees(runner: CommandRunner, cwd: Path | None = None) -> list[WorktreeRecord]:
    """Return the branch-backed worktrees in git's listing order."""

    output = git.worktree_list_porcelain(runner, cwd=cwd)
    return parse_worktree_porcelain(output)


def parse_worktree_porcelain(output: str) -> list[WorktreeRecord]:
    # Detached worktrees never get a ``branch`` line and are dropped.
    records: list[WorktreeRecord] = []
    current_path: str | None = None
    for line in output.splitlines():
        if line.startswith("worktree "):
            current_path = line[len("worktree ") :]
        elif line.startswith("branch "):
            branch = line[len("branch ") :]
            if branch.startswith(_BRANCH_PREFIX):
                branch = branch[len(_BRANCH_PREFIX) :]
            if current_path is not None:
                records.append(WorktreeRecord(branch=branch, path=Path(current_path)))
                current_path = None
    return records


def current_worktree_branch(records: Iterable[WorktreeRecord], cwd: Path) -> str | None:
    """Return the branch of the worktree whose directory is exactly ``cwd``."""

    current = cwd.resolve()
    for record in records:
        if record.path.resolve() == current:
            return record.branch
    return None


__all__ = ["list_worktrees", "parse_worktree_porcelain", "current_worktree_branch"]
