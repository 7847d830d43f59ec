"""Resolve a user supplied branch token to a single worktree.

Resolution runs in strict order and stops at the first step that decides:

1. no worktrees at all -> not found;
2. a branch equal to the token -> that worktree, first one wins;
3. fuzzy scoring with the fzy algorithm, keeping only subsequence matches;
4. no fuzzy match -> not found, one match -> that worktree;
5. several matches -> the user picks from a list ordered best first.

Matching is smart-case: an all-lowercase token matches case-insensitively,
a token containing an uppercase letter must match case exactly. Both sides
are Unicode-normalized so accented branch names match plain ASCII tokens.
"""

from __future__ import annotations

import logging
import math
import unicodedata
from pathlib import Path
from typing import Sequence

from pfzy.score import fzy_scorer

from .exceptions import UserAbort
from .git import CommandRunner
from .interactive import Prompter
from .inventory import list_worktrees
from .models import ResolutionCandidate, WorktreeRecord

logger = logging.getLogger(__name__)


def normalize(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(char for char in decomposed if not unicodedata.combining(char))


def _is_subsequence(needle: str, haystack: str) -> bool:
    offset = 0
    for char in needle:
        offset = haystack.find(char, offset) + 1
        if offset <= 0:
            return False
    return True


def fuzzy_score(token: str, branch: str) -> float | None:
    """Score ``branch`` against ``token``; ``None`` means no match."""

    needle = normalize(token)
    haystack = normalize(branch)
    if not needle:
        return None
    case_sensitive = any(char.isupper() for char in needle)
    if case_sensitive:
        if not _is_subsequence(needle, haystack):
            return None
    elif not _is_subsequence(needle, haystack.lower()):
        return None
    score, _ = fzy_scorer(needle, haystack)
    if math.isinf(score) and score < 0:
        return None
    return score


def exact_match(token: str, records: Sequence[WorktreeRecord]) -> WorktreeRecord | None:
    for record in records:
        if record.branch == token:
            return record
    return None


def rank_candidates(token: str, records: Sequence[WorktreeRecord]) -> list[ResolutionCandidate]:
    """Return fuzzy matches best first; ties keep inventory order."""

    candidates: list[ResolutionCandidate] = []
    for record in records:
        score = fuzzy_score(token, record.branch)
        if score is not None:
            candidates.append(ResolutionCandidate(record=record, score=score))
    # sorted() is stable, so equal scores stay in listing order.
    return sorted(candidates, key=lambda candidate: candidate.score, reverse=True)


class BranchResolver:
    def __init__(self, runner: CommandRunner, prompter: Prompter, cwd: Path | None = None):
        self.runner = runner
        self.prompter = prompter
        self.cwd = cwd

    def resolve(self, token: str) -> WorktreeRecord | None:
        records = list_worktrees(self.runner, cwd=self.cwd)
        if not records:
            return None

        exact = exact_match(token, records)
        if exact is not None:
            return exact

        candidates = rank_candidates(token, records)
        logger.debug(
            "Fuzzy candidates for %r: %s",
            token,
            ", ".join(f"{c.record.branch}={c.score:.3f}" for c in candidates) or "none",
        )
        if not candidates:
            return None
        if len(candidates) == 1:
            return candidates[0].record
        return self._disambiguate(token, candidates)

    def _disambiguate(self, token: str, candidates: list[ResolutionCandidate]) -> WorktreeRecord | None:
        labels = [candidate.record.branch for candidate in candidates]
        selected = self.prompter.select(f"'{token}' matches multiple worktrees.", labels)
        if selected is None:
            raise UserAbort("Cancelled.")
        for candidate in candidates:
            if candidate.record.branch == selected:
                return candidate.record
        return None


__all__ = ["BranchResolver", "fuzzy_score", "exact_match", "rank_candidates", "normalize"]
