"""Watch command - keep a filtered note list up to date as files change."""

from __future__ import annotations

from dataclasses import replace
from typing import Sequence

from rich.console import Console
from rich.live import Live

from ..config import BrowserConfig
from ..models import Note, SearchMode
from ..session import BrowserSession
from ..watcher import run_watch_loop
from .list_cmd import build_table, describe_filter


def run_watch(
    config: BrowserConfig,
    terms: Sequence[str] = (),
    *,
    regex: bool = False,
    limit: int | None = None,
) -> None:
    """
    Show the filtered note list and redraw it whenever the directory changes.

    This is a blocking command that runs until interrupted (Ctrl+C).
    """
    console = Console(stderr=True)
    if regex:
        config = replace(config, mode=SearchMode.REGEX)

    session = BrowserSession.from_config(config)
    session.open()
    session.apply_reset(" ".join(terms))

    def render(results: Sequence[Note]):
        title = f"{len(results)}/{len(session.notes())} notes ({describe_filter(session)})"
        if session.error:
            title += f" [red]invalid regex: {session.error}[/red]"
        return build_table(results, title=title, limit=limit)

    console.print(f"[bold]Watching[/bold] {session.directory}")
    console.print("[dim]Press Ctrl+C to stop watching[/dim]")
    console.print()

    try:
        with Live(render(session.results), console=console, auto_refresh=False) as live:

            def on_change(results: tuple[Note, ...]) -> None:
                live.update(render(results), refresh=True)

            run_watch_loop(session, on_change=on_change, debounce_seconds=config.debounce_seconds)
    finally:
        session.close()
    console.print("[bold]Stopped.[/bold]")
