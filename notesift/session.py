"""Browser session: ties the note cache to the filter engine.

A session is the entry point for whatever drives the browser (the CLI, an
editor integration). Refresh operations go through the cache and then
recompute the result set; single keystrokes only narrow the current results.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from .config import BrowserConfig
from .models import Note, SearchMode
from .notes.cache import NoteCache
from .search.engine import FilterEngine

logger = logging.getLogger(__name__)


class BrowserSession:
    """One browsing session over a note directory.

    Owns its cache and filter engine; nothing is shared between sessions.
    """

    def __init__(
        self,
        directory: Path,
        extensions: Iterable[str] = ("org",),
        *,
        mode: SearchMode = SearchMode.INCREMENTAL,
        ignore: Iterable[str] = (),
    ) -> None:
        self.cache = NoteCache(directory, extensions, ignore)
        self.engine = FilterEngine(mode)
        self._open = False

    @classmethod
    def from_config(cls, config: BrowserConfig) -> "BrowserSession":
        return cls(
            config.directory,
            config.extensions,
            mode=config.mode,
            ignore=config.ignore,
        )

    # lifecycle
    def open(self) -> tuple[Note, ...]:
        """Load the directory and compute the initial result set."""
        self._open = True
        logger.debug("Opening session on %s", self.cache.directory)
        return self.full_refresh()

    def close(self) -> None:
        """Drop cached notes and results."""
        self.cache.clear()
        self.engine = FilterEngine(self.engine.mode)
        self._open = False

    def __enter__(self) -> "BrowserSession":
        self.open()
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    @property
    def is_open(self) -> bool:
        return self._open

    # read access
    @property
    def directory(self) -> Path:
        return self.cache.directory

    @property
    def results(self) -> tuple[Note, ...]:
        return self.engine.results

    @property
    def error(self) -> str | None:
        """Regex error message while the current pattern is invalid."""
        return self.engine.error

    @property
    def mode(self) -> SearchMode:
        return self.engine.mode

    @property
    def filter_text(self) -> str:
        return self.engine.text

    def notes(self) -> list[Note]:
        """All cached notes, unfiltered, most recent first."""
        return self.cache.notes()

    def get(self, path: Path | str) -> Note | None:
        return self.cache.get(path)

    # refresh
    def full_refresh(self) -> tuple[Note, ...]:
        notes = self.cache.refresh_all()
        return self.engine.recompute(notes)

    rescan_and_refresh = full_refresh

    def targeted_refresh(self, path: Path | str) -> tuple[Note, ...]:
        """Update one path in the cache, then recompute the results."""
        if self.cache.accepts(path) and self.cache.resolve(path).exists():
            self.cache.refresh_one(path)
        else:
            self.cache.remove(path)
        return self.engine.recompute(self.cache.notes())

    def on_file_saved(self, path: Path | str) -> tuple[Note, ...]:
        return self.targeted_refresh(path)

    def on_file_created(self, path: Path | str) -> tuple[Note, ...]:
        return self.targeted_refresh(path)

    def on_file_deleted(self, path: Path | str) -> tuple[Note, ...]:
        self.cache.remove(path)
        return self.engine.recompute(self.cache.notes())

    def on_file_renamed(self, old: Path | str, new: Path | str) -> tuple[Note, ...]:
        self.cache.remove(old)
        return self.targeted_refresh(new)

    # filtering
    def apply_char(self, char: str) -> tuple[Note, ...]:
        if len(char) != 1:
            raise ValueError(f"apply_char expects a single character, got {char!r}")
        return self.engine.extend(char)

    def apply_backspace(self) -> tuple[Note, ...]:
        return self.engine.shrink(self.cache.notes())

    def apply_backspace_word(self) -> tuple[Note, ...]:
        return self.engine.shrink_word(self.cache.notes())

    def apply_reset(self, text: str) -> tuple[Note, ...]:
        return self.engine.reset(text, self.cache.notes())

    def apply_clear(self) -> tuple[Note, ...]:
        return self.engine.clear(self.cache.notes())

    def toggle_mode(self) -> tuple[Note, ...]:
        results = self.engine.switch_mode(self.cache.notes())
        logger.debug("Switched to %s mode, filter=%r", self.mode.value, self.filter_text)
        return results
