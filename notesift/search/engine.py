"""Matching notes against filter state.

`filter_notes` and `narrow` are pure: they take a sequence of notes and
return a new FilterResult. `FilterEngine` holds the current state and result
set for an interactive session and picks between the two.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Sequence

from ..models import Note, SearchMode
from .filters import (
    TAG_SIGIL,
    FilterState,
    empty_filter,
    filter_from_text,
    switch_mode,
)

logger = logging.getLogger(__name__)

REGEX_FLAGS = re.IGNORECASE | re.MULTILINE


@dataclass(frozen=True)
class FilterResult:
    """Notes matching a filter, plus the regex error if one was invalid."""

    notes: tuple[Note, ...]
    error: str | None = None


def haystack(note: Note) -> str:
    """Text searched by non-tag terms: path, title and content."""
    return f"{note.path}\n{note.title or ''}\n{note.content}"


def compile_term(term: str) -> re.Pattern[str]:
    """Compile a regex-mode term. Raises re.error when invalid."""
    return re.compile(term, REGEX_FLAGS)


def _tag_matcher(term: str):
    prefix = term[len(TAG_SIGIL):]
    return lambda note: any(tag.startswith(prefix) for tag in note.tags)


def build_matcher(term: str, mode: SearchMode):
    """Return a predicate for one term.

    Returns (predicate, error). An invalid regex yields a match-all predicate
    and the error message.
    """
    if term == "":
        return (lambda note: True), None
    if term.startswith(TAG_SIGIL):
        return _tag_matcher(term), None
    if mode is SearchMode.REGEX:
        try:
            pattern = compile_term(term)
        except re.error as e:
            logger.warning("Invalid filter regex %r: %s", term, e)
            return (lambda note: True), str(e)
        return (lambda note: pattern.search(haystack(note)) is not None), None

    needle = term.casefold()
    return (lambda note: needle in haystack(note).casefold()), None


def match_term(note: Note, term: str, mode: SearchMode = SearchMode.INCREMENTAL) -> bool:
    """Check one note against one term."""
    predicate, _ = build_matcher(term, mode)
    return predicate(note)


def filter_notes(notes: Sequence[Note], state: FilterState) -> FilterResult:
    """Full recompute: keep notes matching every term of `state`, in order."""
    matchers = []
    error = None
    for term in state.terms:
        predicate, term_error = build_matcher(term, state.mode)
        matchers.append(predicate)
        error = error or term_error

    if not matchers:
        return FilterResult(tuple(notes), error)
    return FilterResult(tuple(n for n in notes if all(m(n) for m in matchers)), error)


def narrow(results: Sequence[Note], term: str, mode: SearchMode) -> FilterResult:
    """Filter an existing result set by one updated term. Never widens."""
    predicate, error = build_matcher(term, mode)
    return FilterResult(tuple(n for n in results if predicate(n)), error)


class FilterEngine:
    """Current filter state and result set for one browsing session."""

    def __init__(self, mode: SearchMode = SearchMode.INCREMENTAL) -> None:
        self.state: FilterState = empty_filter(mode)
        self.results: tuple[Note, ...] = ()
        self.error: str | None = None

    @property
    def mode(self) -> SearchMode:
        return self.state.mode

    @property
    def text(self) -> str:
        return self.state.text()

    def _apply(self, result: FilterResult) -> tuple[Note, ...]:
        self.results = result.notes
        self.error = result.error
        return self.results

    def recompute(self, corpus: Sequence[Note]) -> tuple[Note, ...]:
        """Recompute the result set from the full corpus."""
        return self._apply(filter_notes(corpus, self.state))

    def extend(self, char: str) -> tuple[Note, ...]:
        """Add one character and narrow the current results by the updated term."""
        self.state = self.state.extend(char)
        term = self.state.newest
        if not term:
            # Fresh placeholder: matches everything, nothing to narrow
            return self.results
        before = len(self.results)
        self._apply(narrow(self.results, term, self.mode))
        logger.debug("Narrowed %d -> %d notes on %r", before, len(self.results), term)
        return self.results

    def shrink(self, corpus: Sequence[Note]) -> tuple[Note, ...]:
        self.state = self.state.shrink()
        return self.recompute(corpus)

    def shrink_word(self, corpus: Sequence[Note]) -> tuple[Note, ...]:
        self.state = self.state.shrink_word()
        return self.recompute(corpus)

    def reset(self, text: str, corpus: Sequence[Note]) -> tuple[Note, ...]:
        self.state = filter_from_text(self.mode, text)
        return self.recompute(corpus)

    def clear(self, corpus: Sequence[Note]) -> tuple[Note, ...]:
        self.state = empty_filter(self.mode)
        return self.recompute(corpus)

    def switch_mode(self, corpus: Sequence[Note]) -> tuple[Note, ...]:
        self.state = switch_mode(self.state)
        return self.recompute(corpus)
