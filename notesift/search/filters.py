"""Filter state: a term list in incremental mode, one pattern in regex mode.

Both variants are immutable; every edit returns a new value.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import ClassVar, Union

from ..models import SearchMode

TAG_SIGIL = ":"

_TRAILING_WORD = re.compile(r"\s?\S*\Z")


@dataclass(frozen=True)
class IncrementalFilter:
    """Whitespace-separated terms that must all match.

    `terms` is stored newest first. An empty string is a placeholder left by
    a typed space; it matches everything.
    """

    terms: tuple[str, ...] = ()

    mode: ClassVar[SearchMode] = SearchMode.INCREMENTAL

    @classmethod
    def from_text(cls, text: str) -> "IncrementalFilter":
        return cls(tuple(reversed(text.split())))

    @property
    def is_empty(self) -> bool:
        return not self.terms

    @property
    def newest(self) -> str | None:
        return self.terms[0] if self.terms else None

    def text(self) -> str:
        return " ".join(reversed(self.terms))

    def extend(self, char: str) -> "IncrementalFilter":
        if char == " ":
            return IncrementalFilter(("",) + self.terms)
        if not self.terms:
            return IncrementalFilter((char,))
        return IncrementalFilter((self.terms[0] + char,) + self.terms[1:])

    def shrink(self) -> "IncrementalFilter":
        if not self.terms:
            return self
        newest, rest = self.terms[0], self.terms[1:]
        if newest == "":
            # Undo the space that opened this placeholder
            return IncrementalFilter(rest)
        newest = newest[:-1]
        if newest == "" and not rest:
            return IncrementalFilter()
        return IncrementalFilter((newest,) + rest)

    def shrink_word(self) -> "IncrementalFilter":
        return IncrementalFilter(self.terms[1:])


@dataclass(frozen=True)
class RegexFilter:
    """A single regular expression, never split on whitespace."""

    pattern: str = ""

    mode: ClassVar[SearchMode] = SearchMode.REGEX

    @classmethod
    def from_text(cls, text: str) -> "RegexFilter":
        return cls(text)

    @property
    def is_empty(self) -> bool:
        return not self.pattern

    @property
    def terms(self) -> tuple[str, ...]:
        return (self.pattern,) if self.pattern else ()

    @property
    def newest(self) -> str | None:
        return self.pattern or None

    def text(self) -> str:
        return self.pattern

    def extend(self, char: str) -> "RegexFilter":
        return RegexFilter(self.pattern + char)

    def shrink(self) -> "RegexFilter":
        return RegexFilter(self.pattern[:-1])

    def shrink_word(self) -> "RegexFilter":
        return RegexFilter(_TRAILING_WORD.sub("", self.pattern, count=1))


FilterState = Union[IncrementalFilter, RegexFilter]


def empty_filter(mode: SearchMode) -> FilterState:
    return filter_from_text(mode, "")


def filter_from_text(mode: SearchMode, text: str) -> FilterState:
    """Build filter state for `mode` from literal text."""
    if mode is SearchMode.REGEX:
        return RegexFilter.from_text(text)
    return IncrementalFilter.from_text(text)


def switch_mode(state: FilterState) -> FilterState:
    """Rebuild `state` in the other mode from its plain-text rendering."""
    return filter_from_text(state.mode.other, state.text())
