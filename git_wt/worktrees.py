"""High-level orchestration for worktree operations."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from pathlib import Path

from rich.console import Console
from rich.table import Table

from . import git
from .config import Settings
from .exceptions import (
    GitWtError,
    PathExistsError,
    ResolveNotFoundError,
    UserAbort,
    ValidationError,
)
from .git import CommandRunner
from .interactive import Prompter
from .inventory import current_worktree_branch, list_worktrees
from .models import WorktreeRecord
from .resolver import BranchResolver

BARE_STORE = ".bare"
GITDIR_POINTER = f"gitdir: ./{BARE_STORE}\n"
REMOVE_PROMPT = "Are you sure you want to remove the worktree?"


def repo_name_from_url(url: str) -> str:
    """Derive a directory name from the last segment of a clone URL."""

    segment = re.split(r"[/:]", url.rstrip("/"))[-1]
    if segment.endswith(".git"):
        segment = segment[: -len(".git")]
    if not segment:
        raise ValidationError(f"Invalid URL: {url}")
    return segment


@dataclass
class WorktreeManager:
    runner: CommandRunner
    prompter: Prompter
    console: Console
    settings: Settings = field(default_factory=Settings)
    cwd: Path = field(default_factory=Path.cwd)

    @property
    def resolver(self) -> BranchResolver:
        return BranchResolver(self.runner, self.prompter, cwd=self.cwd)

    def clone(self, url: str, name: str | None = None) -> Path:
        dir_name = name or repo_name_from_url(url)
        target = self.cwd / dir_name
        if target.exists():
            raise PathExistsError(f"Directory '{dir_name}' already exists")
        try:
            target.mkdir()
        except OSError as exc:
            raise GitWtError(f"Failed to create directory '{dir_name}': {exc}") from exc

        self._info(f"Cloning {url} into {dir_name}/")
        git.clone_bare(self.runner, url, target, store=BARE_STORE)
        try:
            (target / ".git").write_text(GITDIR_POINTER)
        except OSError as exc:
            raise GitWtError(f"Failed to create .git file: {exc}") from exc
        git.configure_fetch_refspec(self.runner, target, remote=self.settings.remote)
        self._info("Fetching branches...")
        git.fetch(self.runner, self.settings.remote, cwd=target)
        self._info("Repository cloned successfully.")
        return target

    def fetch(self) -> None:
        git.ensure_repo(self.runner, cwd=self.cwd)
        self._info(f"Fetching from {self.settings.remote} with prune...")
        git.fetch(self.runner, self.settings.remote, prune=True, cwd=self.cwd)
        self._info("Fetch completed.")

    def worktree_root(self) -> Path:
        common = git.common_dir(self.runner, cwd=self.cwd)
        return (self.cwd / common).resolve().parent

    def add(self, branch: str, from_ref: str | None = None) -> Path:
        if not branch.strip():
            raise ValidationError("Branch name cannot be empty.")
        git.ensure_repo(self.runner, cwd=self.cwd)
        target = self.worktree_root() / branch
        if target.exists():
            raise PathExistsError(f"Directory '{target}' already exists")

        branch_exists = git.ref_exists(self.runner, f"refs/heads/{branch}", cwd=self.cwd)
        base_ref = from_ref or f"{self.settings.remote}/{branch}"
        base_exists = git.ref_exists(self.runner, base_ref, cwd=self.cwd)

        self._info(f"Creating worktree '{branch}'...")
        if branch_exists:
            git.worktree_add_existing(self.runner, target, branch, cwd=self.cwd)
        elif base_exists:
            git.worktree_add_new(self.runner, target, branch, base_ref, cwd=self.cwd)
        else:
            self._info(f"Note: {base_ref} doesn't exist, creating from HEAD")
            git.worktree_add_new(self.runner, target, branch, "HEAD", cwd=self.cwd)
        self._info("Worktree created.")
        return target

    def remove(self, branch: str | None = None, *, force: bool = False) -> WorktreeRecord:
        git.ensure_repo(self.runner, cwd=self.cwd)
        token = branch or self._current_branch()
        record = self._resolve(token)

        confirmed = self.prompter.confirm(REMOVE_PROMPT, default=False)
        if not confirmed:
            raise UserAbort("Cancelled.")

        git.worktree_remove(self.runner, record.path, force=force, cwd=self.cwd)
        self._info(f"Worktree '{record.branch}' removed.")
        return record

    def switch(self, branch: str) -> Path:
        git.ensure_repo(self.runner, cwd=self.cwd)
        return self._resolve(branch).path

    def pull(self, branch: str | None = None) -> WorktreeRecord:
        git.ensure_repo(self.runner, cwd=self.cwd)
        token = branch or self._current_branch()
        record = self._resolve(token)
        self._info(f"Pulling changes in worktree '{record.branch}'...")
        git.pull(self.runner, record.path)
        self._info("Pull completed.")
        return record

    def list_records(self) -> list[WorktreeRecord]:
        git.ensure_repo(self.runner, cwd=self.cwd)
        return list_worktrees(self.runner, cwd=self.cwd)

    def _current_branch(self) -> str:
        records = list_worktrees(self.runner, cwd=self.cwd)
        branch = current_worktree_branch(records, self.cwd)
        if branch is None:
            raise ValidationError("Could not determine current worktree branch")
        return branch

    def _resolve(self, token: str) -> WorktreeRecord:
        record = self.resolver.resolve(token)
        if record is None:
            raise ResolveNotFoundError(token)
        return record

    def _info(self, message: str) -> None:
        self.console.print(message, highlight=False, markup=False)


def render_worktrees_table(records: list[WorktreeRecord], console: Console, current: str | None = None) -> None:
    table = Table(show_header=True, header_style="bold")
    table.add_column("Branch", no_wrap=True)
    table.add_column("Path")
    for record in records:
        marker = "* " if record.branch == current else "  "
        table.add_row(f"{marker}{record.branch}", str(record.path))
    console.print(table)


def render_worktrees_json(records: list[WorktreeRecord]) -> str:
    payload = [{"branch": record.branch, "path": str(record.path)} for record in records]
    return json.dumps(payload, indent=2)


__all__ = [
    "WorktreeManager",
    "repo_name_from_url",
    "render_worktrees_table",
    "render_worktrees_json",
]
