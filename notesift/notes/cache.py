"""Note cache: one metadata record per note file, ordered by date."""

from __future__ import annotations

import fnmatch
import logging
import os
from pathlib import Path
from typing import Iterable

from ..models import Note
from .parser import parse

logger = logging.getLogger(__name__)

# Editor leftovers that share the note extension
BACKUP_PATTERNS = ("*~", ".#*", "#*#")


def normalize_extensions(extensions: Iterable[str]) -> tuple[str, ...]:
    """Lowercase extensions and strip any leading dot: (".Org", "txt") -> ("org", "txt")."""
    result = []
    for ext in extensions:
        ext = ext.strip().lstrip(".").lower()
        if ext and ext not in result:
            result.append(ext)
    return tuple(result)


def is_note_file(path: Path, extensions: tuple[str, ...], ignore: tuple[str, ...] = ()) -> bool:
    """Check whether a file name qualifies as a note (ignores existence)."""
    name = path.name
    if name.startswith("."):
        return False
    if any(fnmatch.fnmatch(name, pattern) for pattern in BACKUP_PATTERNS + ignore):
        return False
    return path.suffix.lstrip(".").lower() in extensions


def scan_directory(
    directory: Path,
    extensions: Iterable[str],
    ignore: Iterable[str] = (),
) -> set[Path]:
    """List readable note files directly inside `directory`.

    Does not recurse. Unreadable files, hidden files and editor backups are
    left out. A missing directory yields an empty set.
    """
    exts = normalize_extensions(extensions)
    ignore = tuple(ignore)
    directory = Path(directory).expanduser().absolute()

    try:
        entries = list(directory.iterdir())
    except OSError as e:
        logger.warning("Cannot list note directory %s: %s", directory, e)
        return set()

    found = set()
    for path in entries:
        if not is_note_file(path, exts, ignore):
            continue
        try:
            if not path.is_file():
                continue
        except OSError:
            continue
        if not os.access(path, os.R_OK):
            logger.debug("Skipping unreadable file %s", path)
            continue
        found.add(path)
    return found


class NoteCache:
    """Source of truth for path -> Note, plus the date-ordered path list.

    Reparsing is lazy: a file is only read again when its on-disk mtime is
    strictly newer than the cached one.
    """

    def __init__(
        self,
        directory: Path,
        extensions: Iterable[str] = ("org",),
        ignore: Iterable[str] = (),
    ) -> None:
        self.directory = Path(directory).expanduser().absolute()
        self.extensions = normalize_extensions(extensions)
        self.ignore = tuple(ignore)
        self._notes: dict[Path, Note] = {}
        self._order: list[Path] = []

    def __len__(self) -> int:
        return len(self._notes)

    def __contains__(self, path: object) -> bool:
        return isinstance(path, (str, Path)) and self.resolve(path) in self._notes

    def resolve(self, path: Path | str) -> Path:
        """Absolute form of `path`; relative paths are taken from the note directory."""
        path = Path(path).expanduser()
        if not path.is_absolute():
            path = self.directory / path
        return path

    def accepts(self, path: Path | str) -> bool:
        """Whether a scan would consider this path (location and name only)."""
        path = self.resolve(path)
        return path.parent == self.directory and is_note_file(path, self.extensions, self.ignore)

    def rescan(self) -> set[Path]:
        """List the note files currently in the directory."""
        return scan_directory(self.directory, self.extensions, self.ignore)

    def get(self, path: Path | str) -> Note | None:
        return self._notes.get(self.resolve(path))

    def notes(self) -> list[Note]:
        """All cached notes, most recent date first."""
        return [self._notes[p] for p in self._order]

    def paths(self) -> list[Path]:
        return list(self._order)

    def clear(self) -> None:
        self._notes.clear()
        self._order.clear()

    def _update(self, path: Path) -> bool:
        """Reparse `path` if new or stale. Returns True when a parse happened.

        Raises FileNotFoundError if the file vanished.
        """
        mtime = path.stat().st_mtime
        cached = self._notes.get(path)
        if cached is not None and mtime <= cached.mtime:
            return False

        content = path.read_text(encoding="utf-8", errors="replace")
        self._notes[path] = Note.from_parse(path, mtime, content, parse(content))
        if cached is None:
            self._order.append(path)
        logger.debug("Parsed %s (mtime=%s)", path, mtime)
        return True

    def _discard(self, path: Path) -> bool:
        if self._notes.pop(path, None) is None:
            return False
        self._order.remove(path)
        return True

    def _sort(self) -> None:
        # Stable: ties keep their previous relative order
        self._order.sort(key=lambda p: self._notes[p].date, reverse=True)

    def refresh_all(self) -> list[Note]:
        """Rescan the directory, reparse stale files and drop vanished ones."""
        found = self.rescan()
        parsed = 0

        for path in sorted(found):
            try:
                if self._update(path):
                    parsed += 1
            except FileNotFoundError:
                found.discard(path)
            except OSError as e:
                logger.warning("Skipping %s: %s", path, e)
                found.discard(path)

        pruned = [p for p in self._order if p not in found]
        for path in pruned:
            self._discard(path)

        self._sort()
        logger.debug(
            "Refreshed %s: %d notes, %d parsed, %d pruned",
            self.directory,
            len(self._notes),
            parsed,
            len(pruned),
        )
        return self.notes()

    def refresh_one(self, path: Path | str) -> bool:
        """Reparse a single file if stale; a vanished file is removed instead."""
        path = self.resolve(path)
        try:
            changed = self._update(path)
        except FileNotFoundError:
            changed = self._discard(path)
        except OSError as e:
            logger.warning("Skipping %s: %s", path, e)
            return False
        if changed:
            self._sort()
        return changed

    def remove(self, path: Path | str) -> bool:
        """Forget a note. Unknown paths are ignored."""
        return self._discard(self.resolve(path))
