"""Shared dataclasses used throughout the CLI."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class WorktreeRecord:
    """A worktree checked out on a branch, as reported by git."""

    branch: str
    path: Path


@dataclass(frozen=True, slots=True)
class ResolutionCandidate:
    record: WorktreeRecord
    score: float


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Outcome of a single git invocation."""

    command: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0
