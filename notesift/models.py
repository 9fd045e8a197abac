"""Data models for tracked notes."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import NamedTuple


class SearchMode(str, Enum):
    """How filter text is interpreted."""

    INCREMENTAL = "incremental"  # whitespace-separated AND terms
    REGEX = "regex"  # one regular expression

    @property
    def other(self) -> "SearchMode":
        return SearchMode.REGEX if self is SearchMode.INCREMENTAL else SearchMode.INCREMENTAL


class ParsedNote(NamedTuple):
    """Fields derived from one parse pass over raw note content."""

    title: str | None
    tags: tuple[str, ...]
    date: float | None  # authored timestamp, epoch seconds
    summary: str


@dataclass(frozen=True)
class Note:
    """One tracked note file and the metadata derived from it.

    Instances are immutable: a reparse produces a new Note, so every field
    always comes from the same pass over `content`.
    """

    path: Path
    mtime: float
    content: str
    title: str | None = None
    tags: tuple[str, ...] = field(default_factory=tuple)
    authored: float | None = None
    summary: str = ""

    @classmethod
    def from_parse(cls, path: Path, mtime: float, content: str, parsed: ParsedNote) -> "Note":
        return cls(
            path=path,
            mtime=mtime,
            content=content,
            title=parsed.title,
            tags=parsed.tags,
            authored=parsed.date,
            summary=parsed.summary,
        )

    @property
    def date(self) -> float:
        """Sort timestamp: the authored date when present, else mtime."""
        return self.authored if self.authored is not None else self.mtime

    @property
    def name(self) -> str:
        """Filename without extension."""
        return self.path.stem

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON output."""
        return {
            "path": str(self.path),
            "title": self.title,
            "tags": list(self.tags),
            "date": self.date,
            "mtime": self.mtime,
            "summary": self.summary,
        }
