"""Show command - metadata for a single note."""

from __future__ import annotations

import json
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..config import BrowserConfig
from ..session import BrowserSession
from .list_cmd import UNTITLED, format_date, format_tags


def run_show(config: BrowserConfig, path: Path, *, output_json: bool = False) -> int:
    """
    Print the parsed metadata of one note.

    `path` may be absolute or relative to the note directory.
    Returns 1 when the path is not a tracked note.
    """
    console = Console()

    with BrowserSession.from_config(config) as session:
        note = session.get(path)
        if note is None:
            Console(stderr=True).print(f"Not a tracked note: {path}", style="bold red")
            return 1

        if output_json:
            data = note.to_dict()
            data["authored"] = note.authored
            print(json.dumps(data, indent=2))
            return 0

        grid = Table.grid(padding=(0, 2))
        grid.add_column(style="dim")
        grid.add_column()
        grid.add_row("Path", str(note.path))
        grid.add_row("Date", format_date(note.date) + ("" if note.authored is not None else " (mtime)"))
        grid.add_row("Modified", format_date(note.mtime))
        grid.add_row("Tags", format_tags(note) or "-")

        console.print(Panel(grid, title=note.title or UNTITLED, title_align="left"))
        if note.summary:
            console.print(note.summary, highlight=False, markup=False)
    return 0
