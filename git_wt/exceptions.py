"""Custom error hierarchy for git-wt."""

from __future__ import annotations


class GitWtError(RuntimeError):
    """Base error for the CLI."""


class NotInRepositoryError(GitWtError):
    """Raised when the working directory is not inside a git repository."""


class QueryError(GitWtError):
    """Raised when git cannot answer a read-only query."""


class ResolveNotFoundError(GitWtError):
    """Raised when no worktree matches the requested branch."""

    def __init__(self, branch: str):
        super().__init__(f"Worktree for branch '{branch}' not found.")
        self.branch = branch


class PathExistsError(GitWtError):
    """Raised when a directory we are about to create is already there."""


class GitCommandError(GitWtError):
    """Raised when an underlying git command fails."""

    def __init__(
        self,
        command: list[str],
        returncode: int,
        *,
        stdout: str | None = None,
        stderr: str | None = None,
    ):
        self.command = command
        self.returncode = returncode
        self.stdout = stdout or ""
        self.stderr = stderr or ""
        message = f"Command failed (exit {returncode}): {' '.join(command)}"
        details = "\n".join(
            section
            for section in (self.stdout.strip(), self.stderr.strip())
            if section
        )
        if details:
            message = f"{message}\n{details}"
        super().__init__(message)


class ValidationError(GitWtError):
    """Raised when user input fails validation."""


class UserAbort(GitWtError):
    """Raised when the user cancels an interactive flow."""


__all__ = [
    "GitWtError",
    "NotInRepositoryError",
    "QueryError",
    "ResolveNotFoundError",
    "PathExistsError",
    "GitCommandError",
    "ValidationError",
    "UserAbort",
]
