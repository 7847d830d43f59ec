"""Interactive prompt helpers built on InquirerPy.

Prompts are drawn on stderr so that stdout only ever carries the ``CD:``
directive read by the shell wrapper. Both prompts return ``None`` when the
user cancels.
"""

from __future__ import annotations

import sys
from typing import Protocol, Sequence

from InquirerPy import inquirer
from prompt_toolkit.application import create_app_session
from prompt_toolkit.output import create_output

from .exceptions import ValidationError


class Prompter(Protocol):
    def select(self, message: str, choices: Sequence[str]) -> str | None: ...

    def confirm(self, message: str, default: bool = False) -> bool | None: ...


def _ensure_tty() -> None:
    if not sys.stdin.isatty():
        raise ValidationError(
            "Interactive mode requires a TTY. Pass an exact branch name to run non-interactively."
        )


class InquirerPrompter:
    def __init__(self, page_size: int = 10):
        self.page_size = page_size

    def select(self, message: str, choices: Sequence[str]) -> str | None:
        _ensure_tty()
        if not choices:
            return None
        prompt = inquirer.select(
            message=message,
            choices=list(choices),
            qmark="›",
            amark="›",
            pointer=">",
            max_height=self.page_size,
            mandatory=False,
            instruction="(esc/ctrl-z to cancel)",
            keybindings={"skip": [{"key": "c-z"}, {"key": "escape"}]},
        )
        return self._execute(prompt)

    def confirm(self, message: str, default: bool = False) -> bool | None:
        _ensure_tty()
        prompt = inquirer.confirm(
            message=message,
            default=default,
            qmark="›",
            amark="›",
            mandatory=False,
        )
        answer = self._execute(prompt)
        return None if answer is None else bool(answer)

    @staticmethod
    def _execute(prompt):
        try:
            with create_app_session(output=create_output(stdout=sys.stderr)):
                return prompt.execute()
        except KeyboardInterrupt:
            return None


__all__ = ["Prompter", "InquirerPrompter"]
