"""Merging, deduplication and ordering of completion candidates."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace
from typing import NamedTuple

from .core import Candidate, TextRange

# Sorts above every digit, so tier "00" stays ahead of tier "0" whatever the label
SORT_KEY_SEPARATOR = "|"


class CompletionResult(NamedTuple):
    """Ordered candidates plus the default replacement range."""

    candidates: list[Candidate]
    range: TextRange

    @property
    def labels(self) -> list[str]:
        return [candidate.label for candidate in self.candidates]


def _resolve_range(candidate_range: TextRange | None, word_range: TextRange, cursor_pos: int) -> TextRange:
    if candidate_range is None:
        return word_range
    # A generator range that stops at the cursor also covers the rest of the word
    if candidate_range.end == cursor_pos and word_range.end > cursor_pos:
        return TextRange(candidate_range.start, word_range.end)
    return candidate_range


def merge_candidates(
    batches: Iterable[Iterable[Candidate]],
    word_range: TextRange,
    cursor_pos: int | None = None,
) -> CompletionResult:
    """Combine generator output into the final ordered list.

    Batches must be given in matcher order: the first occurrence of a
    ``(label, insert_text)`` pair wins, so earlier generators decide the
    priority of duplicates. The sort is stable, so candidates with equal
    sort keys keep their emission order.

    Args:
        batches: Candidate lists, one per fired generator
        word_range: Range of the word at the cursor
        cursor_pos: Cursor offset, defaults to the end of ``word_range``

    Returns:
        CompletionResult with sort keys and ranges filled in
    """
    if cursor_pos is None:
        cursor_pos = word_range.end

    seen: set[tuple[str, str]] = set()
    unique: list[Candidate] = []
    for batch in batches:
        for candidate in batch:
            key = candidate.dedupe_key
            if key in seen:
                continue
            seen.add(key)
            unique.append(
                replace(
                    candidate,
                    sort_key=f"{candidate.priority}{SORT_KEY_SEPARATOR}{candidate.label}",
                    range=_resolve_range(candidate.range, word_range, cursor_pos),
                )
            )

    unique.sort(key=lambda c: c.sort_key)
    return CompletionResult(candidates=unique, range=word_range)


def _match_score(text_lower: str, candidate: str) -> tuple[int, int] | None:
    """Score a candidate against lowercased text, None if it does not match."""
    c_lower = candidate.lower()

    if c_lower.startswith(text_lower):
        return (0, 0)

    # All chars must appear in order
    idx = 0
    first_match_pos = -1
    for char in text_lower:
        idx = c_lower.find(char, idx)
        if idx == -1:
            return None
        if first_match_pos == -1:
            first_match_pos = idx
        idx += 1

    return (1, first_match_pos)


def filter_candidates(candidates: list[Candidate], prefix: str, max_results: int = 50) -> list[Candidate]:
    """Narrow an ordered candidate list to those matching the typed prefix.

    Matches if all characters of the prefix appear in the label in order,
    e.g. "djmi" matches "django_migrations". Prefix matches keep their
    ranked order and come before subsequence matches. Meant for hosts that
    do not filter on their own.
    """
    if not prefix:
        return candidates[:max_results]

    prefix_lower = prefix.lower()
    results: list[tuple[tuple[int, int], int, Candidate]] = []
    for position, candidate in enumerate(candidates):
        score = _match_score(prefix_lower, candidate.label)
        if score is not None:
            results.append((score, position, candidate))

    results.sort(key=lambda x: (x[0], x[1]))
    return [r[2] for r in results[:max_results]]
