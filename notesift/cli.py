"""CLI entrypoint for notesift."""

import logging
import sys
from pathlib import Path

import click

from . import __version__
from .config import BrowserConfig, ConfigError, load_config


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


@click.group()
@click.version_option(__version__, prog_name="notesift")
@click.option(
    "--dir",
    "-d",
    "directory",
    type=click.Path(exists=False, file_okay=False, dir_okay=True, path_type=Path),
    default=None,
    help="Note directory (overrides config and NOTESIFT_DIR)",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to config.toml (defaults to $XDG_CONFIG_HOME/notesift/config.toml)",
)
@click.option("--verbose", "-V", is_flag=True, help="Log debug output to stderr")
@click.pass_context
def cli(ctx: click.Context, directory: Path | None, config_path: Path | None, verbose: bool) -> None:
    """notesift - browse and filter a directory of plain-text notes.

    Notes carry org-style metadata lines (#+TITLE, #+FILETAGS, #+DATE).
    Filter terms are ANDed substrings; a term starting with ':' matches a
    tag prefix.
    """
    _configure_logging(verbose)
    ctx.ensure_object(dict)

    try:
        config = load_config(config_path)
    except ConfigError as e:
        raise click.ClickException(str(e))

    if directory is not None:
        config = config.with_directory(directory)

    if not config.directory.is_dir():
        raise click.BadParameter(f"Directory '{config.directory}' does not exist.", param_hint="--dir / -d")

    ctx.obj["config"] = config


def _config(ctx: click.Context) -> BrowserConfig:
    return ctx.obj["config"]


@cli.command("list")
@click.argument("terms", nargs=-1)
@click.option("--regex", "-r", is_flag=True, help="Treat the terms as one regular expression")
@click.option("--limit", "-n", type=click.IntRange(min=1), default=None, help="Show at most N notes")
@click.option("--json", "output_json", is_flag=True, help="Output results as JSON")
@click.pass_context
def list_notes(
    ctx: click.Context,
    terms: tuple[str, ...],
    regex: bool,
    limit: int | None,
    output_json: bool,
) -> None:
    """List notes, most recent first, matching all TERMS.

    Examples:

        notesift list meeting :work

        notesift list --regex '^todo'
    """
    from .commands.list_cmd import run_list

    exit_code = run_list(_config(ctx), terms, regex=regex, limit=limit, output_json=output_json)
    sys.exit(exit_code)


@cli.command()
@click.argument("path", type=click.Path(path_type=Path))
@click.option("--json", "output_json", is_flag=True, help="Output metadata as JSON")
@click.pass_context
def show(ctx: click.Context, path: Path, output_json: bool) -> None:
    """Show the parsed metadata of one note.

    PATH may be relative to the note directory.
    """
    from .commands.show_cmd import run_show

    sys.exit(run_show(_config(ctx), path, output_json=output_json))


@cli.command()
@click.argument("terms", nargs=-1)
@click.option("--regex", "-r", is_flag=True, help="Treat the terms as one regular expression")
@click.option("--limit", "-n", type=click.IntRange(min=1), default=None, help="Show at most N notes")
@click.pass_context
def watch(ctx: click.Context, terms: tuple[str, ...], regex: bool, limit: int | None) -> None:
    """Show a live list of matching notes, updated as files change.

    Runs until interrupted (Ctrl+C).
    """
    from .commands.watch_cmd import run_watch

    run_watch(_config(ctx), terms, regex=regex, limit=limit)


def main() -> None:
    """Main entrypoint."""
    cli()


if __name__ == "__main__":
    main()
