"""
Push-based watching of the note directory.

The cache detects staleness from mtimes on refresh; this module adds an
optional watchdog observer so a long-running browser picks up changes without
an explicit refresh.

Watchdog delivers events on its own thread. The handler only records them;
`flush_pending()` is called from the browsing thread and forwards debounced
events to the session, so the session is never touched concurrently.
"""

from __future__ import annotations

import logging
import threading
import time
from enum import Enum
from pathlib import Path
from typing import Callable

from watchdog.events import (
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from .models import Note
from .session import BrowserSession

logger = logging.getLogger(__name__)


class EventKind(str, Enum):
    """Types of file system events."""

    FILE_CREATED = "file_created"
    FILE_MODIFIED = "file_modified"
    FILE_DELETED = "file_deleted"
    FILE_RENAMED = "file_renamed"


class PendingEvent:
    """Tracks a pending event for debouncing."""

    def __init__(
        self,
        event_kind: EventKind,
        path: Path,
        timestamp: float,
        rename_from: Path | None = None,
    ):
        self.event_kind = event_kind
        self.path = path
        self.timestamp = timestamp
        self.rename_from = rename_from


class NoteEventHandler(FileSystemEventHandler):
    """
    Collects file system events for one browser session.

    Key behaviors:
    - Debounces rapid modifications (e.g., editor save cycles)
    - Ignores files the session's cache would not scan
    - Folds create-then-delete into nothing
    - Maps moves onto rename, delete or create depending on which side is a note
    """

    DEBOUNCE_SECONDS = 0.5

    def __init__(
        self,
        session: BrowserSession,
        on_change: Callable[[tuple[Note, ...]], None] | None = None,
        debounce_seconds: float | None = None,
    ):
        super().__init__()
        self.session = session
        self.on_change = on_change
        if debounce_seconds is not None:
            self.DEBOUNCE_SECONDS = debounce_seconds

        self._lock = threading.Lock()
        self.pending: dict[Path, PendingEvent] = {}

    def _is_relevant(self, path: str) -> bool:
        return self.session.cache.accepts(Path(path))

    def _put(self, event_kind: EventKind, path: Path, rename_from: Path | None = None) -> None:
        # Caller holds self._lock
        self.pending[path] = PendingEvent(
            event_kind=event_kind,
            path=path,
            timestamp=time.time(),
            rename_from=rename_from,
        )

    def _queue(self, event_kind: EventKind, path: Path, rename_from: Path | None = None) -> None:
        with self._lock:
            self._put(event_kind, path, rename_from)

    def _dispatch(self, pending: PendingEvent) -> tuple[Note, ...]:
        path = pending.path
        if pending.event_kind == EventKind.FILE_CREATED:
            return self.session.on_file_created(path)
        if pending.event_kind == EventKind.FILE_MODIFIED:
            return self.session.on_file_saved(path)
        if pending.event_kind == EventKind.FILE_DELETED:
            return self.session.on_file_deleted(path)
        return self.session.on_file_renamed(pending.rename_from, path)

    def flush_pending(self, force: bool = False) -> int:
        """Forward events older than the debounce window to the session.

        Returns the number of events dispatched.
        """
        now = time.time()
        with self._lock:
            ready = [
                p
                for p in self.pending.values()
                if force or now - p.timestamp >= self.DEBOUNCE_SECONDS
            ]
            for p in ready:
                del self.pending[p.path]

        if not ready:
            return 0

        results = self.session.results
        for pending in sorted(ready, key=lambda p: p.timestamp):
            logger.debug("Dispatching %s for %s", pending.event_kind.value, pending.path)
            results = self._dispatch(pending)

        if self.on_change:
            self.on_change(results)
        return len(ready)

    def on_created(self, event: FileCreatedEvent) -> None:
        """Handle file creation."""
        if event.is_directory or not self._is_relevant(event.src_path):
            return
        self._queue(EventKind.FILE_CREATED, Path(event.src_path))

    def on_modified(self, event: FileModifiedEvent) -> None:
        """Handle file modification."""
        if event.is_directory or not self._is_relevant(event.src_path):
            return

        path = Path(event.src_path)
        with self._lock:
            current = self.pending.get(path)
            # Don't override pending creation or rename with modification
            if current and current.event_kind in (EventKind.FILE_CREATED, EventKind.FILE_RENAMED):
                return
            self._put(EventKind.FILE_MODIFIED, path)

    def on_deleted(self, event: FileDeletedEvent) -> None:
        """Handle file deletion."""
        if event.is_directory or not self._is_relevant(event.src_path):
            return

        path = Path(event.src_path)
        with self._lock:
            current = self.pending.get(path)
            if current and current.event_kind == EventKind.FILE_CREATED:
                # File created then deleted before flush - no event
                del self.pending[path]
                return
            if current and current.event_kind == EventKind.FILE_RENAMED:
                # Renamed then deleted before flush - the old path is gone too
                source = current.rename_from
                if source is not None and source not in self.pending:
                    self._put(EventKind.FILE_DELETED, source)
            self._put(EventKind.FILE_DELETED, path)

    def on_moved(self, event: FileMovedEvent) -> None:
        """Handle file rename/move."""
        if event.is_directory:
            return

        src_relevant = self._is_relevant(event.src_path)
        dest_relevant = self._is_relevant(event.dest_path)
        src, dest = Path(event.src_path), Path(event.dest_path)

        if src_relevant and dest_relevant:
            self._queue(EventKind.FILE_RENAMED, dest, rename_from=src)
        elif src_relevant:
            # Renamed away (e.g. to a backup name) - treat as delete
            self._queue(EventKind.FILE_DELETED, src)
        elif dest_relevant:
            # Editors that save via a temp file land here - treat as create
            self._queue(EventKind.FILE_CREATED, dest)


def watch_directory(
    session: BrowserSession,
    on_change: Callable[[tuple[Note, ...]], None] | None = None,
    debounce_seconds: float | None = None,
) -> tuple[Observer, NoteEventHandler]:
    """
    Start watching a session's note directory.

    Returns:
        Tuple of (observer, handler) - caller should call observer.stop() to stop watching
    """
    handler = NoteEventHandler(session, on_change=on_change, debounce_seconds=debounce_seconds)

    observer = Observer()
    observer.schedule(handler, str(session.directory), recursive=False)
    observer.start()
    logger.debug("Watching %s", session.directory)

    return observer, handler


def run_watch_loop(
    session: BrowserSession,
    on_change: Callable[[tuple[Note, ...]], None] | None = None,
    debounce_seconds: float | None = None,
    poll_interval: float = 0.25,
) -> None:
    """
    Run the watch loop until interrupted.

    This is a blocking function that flushes pending events into the session
    periodically.
    """
    observer, handler = watch_directory(session, on_change=on_change, debounce_seconds=debounce_seconds)

    try:
        while True:
            time.sleep(poll_interval)
            handler.flush_pending()
    except KeyboardInterrupt:
        pass
    finally:
        observer.stop()
        observer.join()
