"""Tests for the InquirerPy-backed prompter."""

from __future__ import annotations

import contextlib
import unittest
from unittest import mock

from git_wt import interactive
from git_wt.exceptions import ValidationError


class InquirerPrompterTests(unittest.TestCase):
    def setUp(self) -> None:
        patches = [
            mock.patch.object(interactive, "inquirer"),
            mock.patch.object(interactive, "create_output"),
            mock.patch.object(interactive, "create_app_session", return_value=contextlib.nullcontext()),
            mock.patch.object(interactive.sys, "stdin"),
        ]
        self.inquirer, _, _, self.stdin = [patch.start() for patch in patches]
        for patch in patches:
            self.addCleanup(patch.stop)
        self.stdin.isatty.return_value = True
        self.prompter = interactive.InquirerPrompter(page_size=7)

    def test_select_returns_choice(self) -> None:
        self.inquirer.select.return_value.execute.return_value = "develop"

        answer = self.prompter.select("Pick one", ["develop", "dev-tools"])

        self.assertEqual(answer, "develop")
        kwargs = self.inquirer.select.call_args.kwargs
        self.assertEqual(kwargs["choices"], ["develop", "dev-tools"])
        self.assertEqual(kwargs["max_height"], 7)
        self.assertFalse(kwargs["mandatory"])

    def test_skipped_select_is_cancelled(self) -> None:
        self.inquirer.select.return_value.execute.return_value = None

        self.assertIsNone(self.prompter.select("Pick one", ["a", "b"]))

    def test_keyboard_interrupt_is_cancelled(self) -> None:
        self.inquirer.confirm.return_value.execute.side_effect = KeyboardInterrupt

        self.assertIsNone(self.prompter.confirm("Sure?"))

    def test_confirm_passes_default(self) -> None:
        self.inquirer.confirm.return_value.execute.return_value = True

        self.assertTrue(self.prompter.confirm("Sure?", default=False))
        self.assertFalse(self.inquirer.confirm.call_args.kwargs["default"])

    def test_requires_tty(self) -> None:
        self.stdin.isatty.return_value = False

        with self.assertRaises(ValidationError):
            self.prompter.select("Pick one", ["a", "b"])

        self.inquirer.select.assert_not_called()


if __name__ == "__main__":
    unittest.main()
