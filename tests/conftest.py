"""Pytest configuration and fixtures."""

import os
from pathlib import Path

import pytest

from notesift.session import BrowserSession

# Pinned mtimes so ordering does not depend on write speed
OLDER = 1_700_000_000
NEWER = 1_700_100_000


def write_note(path: Path, lines: list[str], mtime: float | None = None) -> Path:
    """Write a note file and optionally pin its mtime."""
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    if mtime is not None:
        os.utime(path, (mtime, mtime))
    return path


@pytest.fixture
def notes_dir(tmp_path: Path) -> Path:
    """Directory with a.org (tagged, newer) and b.org (untagged, older)."""
    directory = tmp_path / "notes"
    directory.mkdir()
    write_note(
        directory / "a.org",
        ["#+TITLE: Alpha", "#+FILETAGS: :work:urgent:", "", "alpha body"],
        mtime=NEWER,
    )
    write_note(
        directory / "b.org",
        ["#+TITLE: Beta", "", "beta body"],
        mtime=OLDER,
    )
    return directory


@pytest.fixture
def session(notes_dir: Path) -> BrowserSession:
    """Open session over the fixture notes directory."""
    s = BrowserSession(notes_dir, ("org",))
    s.open()
    yield s
    s.close()
