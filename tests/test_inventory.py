"""Tests for worktree enumeration and current-worktree detection."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from git_wt.exceptions import QueryError
from git_wt.inventory import current_worktree_branch, list_worktrees, parse_worktree_porcelain
from git_wt.models import WorktreeRecord

from tests.fakes import FakeRunner, porcelain, runner_with_worktrees


class ParseWorktreePorcelainTests(unittest.TestCase):
    def test_keeps_listing_order_and_strips_ref_prefix(self) -> None:
        output = porcelain(("main", "/r/main"), ("feature/login", "/r/feature/login"), bare="/r/.bare")

        records = parse_worktree_porcelain(output)

        self.assertEqual(
            records,
            [
                WorktreeRecord(branch="main", path=Path("/r/main")),
                WorktreeRecord(branch="feature/login", path=Path("/r/feature/login")),
            ],
        )

    def test_drops_bare_and_detached_worktrees(self) -> None:
        output = porcelain(("main", "/r/main"), (None, "/r/scratch"), ("develop", "/r/develop"), bare="/r/.bare")

        branches = [record.branch for record in parse_worktree_porcelain(output)]

        self.assertEqual(branches, ["main", "develop"])

    def test_ignores_unknown_lines_and_paths_with_spaces(self) -> None:
        output = "worktree /r/my tree\nHEAD abc\nlocked reason\nbranch refs/heads/topic\n\nprunable gone\n"

        records = parse_worktree_porcelain(output)

        self.assertEqual(records, [WorktreeRecord(branch="topic", path=Path("/r/my tree"))])

    def test_empty_output(self) -> None:
        self.assertEqual(parse_worktree_porcelain(""), [])


class ListWorktreesTests(unittest.TestCase):
    def test_queries_git_porcelain_listing(self) -> None:
        runner = runner_with_worktrees(("main", "/r/main"))

        records = list_worktrees(runner, cwd=Path("/r/main"))

        self.assertEqual(records, [WorktreeRecord(branch="main", path=Path("/r/main"))])
        self.assertEqual(runner.commands(), [["worktree", "list", "--porcelain"]])
        self.assertEqual(runner.calls[0].cwd, Path("/r/main"))

    def test_failed_listing_raises_query_error(self) -> None:
        runner = FakeRunner().on(
            "worktree", "list", returncode=128, stderr="fatal: not a git repository"
        )

        with self.assertRaises(QueryError) as ctx:
            list_worktrees(runner)

        self.assertIn("not a git repository", str(ctx.exception))


class CurrentWorktreeBranchTests(unittest.TestCase):
    def setUp(self) -> None:
        self.records = [
            WorktreeRecord(branch="main", path=Path("/r/main")),
            WorktreeRecord(branch="feature", path=Path("/r/feature")),
        ]

    def test_matches_exact_directory(self) -> None:
        self.assertEqual(current_worktree_branch(self.records, Path("/r/feature")), "feature")

    def test_subdirectory_does_not_match(self) -> None:
        self.assertIsNone(current_worktree_branch(self.records, Path("/r/feature/src")))

    def test_parent_directory_does_not_match(self) -> None:
        self.assertIsNone(current_worktree_branch(self.records, Path("/r")))

    def test_canonicalizes_symlinked_cwd(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            real = root / "feature"
            real.mkdir()
            link = root / "shortcut"
            link.symlink_to(real, target_is_directory=True)
            records = [WorktreeRecord(branch="feature", path=real)]

            self.assertEqual(current_worktree_branch(records, link), "feature")


if __name__ == "__main__":
    unittest.main()
