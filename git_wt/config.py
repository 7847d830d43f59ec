"""Load runtime settings from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .exceptions import ValidationError

DEFAULT_REMOTE = "origin"
DEFAULT_GIT_BINARY = "git"
DEFAULT_PAGE_SIZE = 10


@dataclass(slots=True)
class Settings:
    remote: str = DEFAULT_REMOTE
    git_binary: str = DEFAULT_GIT_BINARY
    page_size: int = DEFAULT_PAGE_SIZE
    verbose: bool = False


def load_settings(environ: dict[str, str] | None = None, *, verbose: bool = False) -> Settings:
    env = os.environ if environ is None else environ
    return Settings(
        remote=_get_str(env, "GIT_WT_REMOTE", DEFAULT_REMOTE),
        git_binary=_get_str(env, "GIT_WT_GIT", DEFAULT_GIT_BINARY),
        page_size=_get_positive_int(env, "GIT_WT_PAGE_SIZE", DEFAULT_PAGE_SIZE),
        verbose=verbose,
    )


def _get_str(env, var_name: str, default: str) -> str:
    raw = env.get(var_name, "").strip()
    return raw or default


def _get_positive_int(env, var_name: str, default: int) -> int:
    raw = env.get(var_name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValidationError(f"{var_name} must be an integer, got {raw!r}.") from exc
    if value < 1:
        raise ValidationError(f"{var_name} must be at least 1, got {value}.")
    return value


__all__ = ["Settings", "load_settings"]
