"""List command implementation."""

import json
from dataclasses import replace
from datetime import datetime
from typing import Sequence

from rich.console import Console
from rich.table import Table

from ..config import BrowserConfig
from ..models import Note, SearchMode
from ..session import BrowserSession

UNTITLED = "[untitled]"
SUMMARY_WIDTH = 60


def format_date(timestamp: float) -> str:
    return datetime.fromtimestamp(timestamp).strftime("%Y-%m-%d %H:%M")


def format_tags(note: Note) -> str:
    return " ".join(f":{tag}" for tag in note.tags)


def build_table(notes: Sequence[Note], *, title: str | None = None, limit: int | None = None) -> Table:
    """Render notes as a rich table, most recent first."""
    table = Table(title=title, show_header=True, header_style="bold", expand=False)
    table.add_column("Date", style="dim", no_wrap=True)
    table.add_column("Title", style="bold")
    table.add_column("Tags", style="cyan")
    table.add_column("Summary", max_width=SUMMARY_WIDTH, no_wrap=True, overflow="ellipsis")

    shown = notes if limit is None else notes[:limit]
    for note in shown:
        table.add_row(
            format_date(note.date),
            note.title or UNTITLED,
            format_tags(note),
            " ".join(note.summary.split()),
        )
    return table


def describe_filter(session: BrowserSession) -> str:
    text = session.filter_text
    label = "regex" if session.mode is SearchMode.REGEX else "filter"
    return f"{label}: {text!r}" if text else "no filter"


def run_list(
    config: BrowserConfig,
    terms: Sequence[str] = (),
    *,
    regex: bool = False,
    limit: int | None = None,
    output_json: bool = False,
) -> int:
    """List notes matching the given filter terms.

    Args:
        config: Browser configuration (directory, extensions, default mode)
        terms: Filter text, joined with spaces
        regex: Interpret the joined text as one regular expression
        limit: Show at most this many notes
        output_json: Output results as JSON instead of a table

    Returns:
        Exit code (0 = success, 1 = invalid regex)
    """
    console = Console()
    err_console = Console(stderr=True)

    if regex:
        config = replace(config, mode=SearchMode.REGEX)

    session = BrowserSession.from_config(config)
    with session:
        results = session.apply_reset(" ".join(terms))

        if output_json:
            shown = results if limit is None else results[:limit]
            print(
                json.dumps(
                    {
                        "directory": str(session.directory),
                        "mode": session.mode.value,
                        "filter": session.filter_text,
                        "error": session.error,
                        "total": len(session.notes()),
                        "matched": len(results),
                        "notes": [n.to_dict() for n in shown],
                    },
                    indent=2,
                )
            )
        else:
            title = f"{len(results)}/{len(session.notes())} notes ({describe_filter(session)})"
            console.print(build_table(results, title=title, limit=limit))

        if session.error:
            err_console.print(f"Invalid regex: {session.error}", style="bold red")
            return 1
    return 0
