"""CLI for mtime-rewind."""

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .config import load_config
from .core import RewindSummary
from .errors import ConfigError, RewindError
from .utils import display_path, format_mtime


app = typer.Typer(help="""\
Rewind the mtime of files whose mtime advanced since the last execution
without a content change.""")

console = Console()


def setup_logging(level: str) -> None:
    """Route log records through rich on stderr."""
    handler = RichHandler(console=Console(stderr=True), show_path=False)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )


def _print_rewound(summary: RewindSummary) -> None:
    """Show the rewound files as a table."""
    title = "Would rewind" if summary.dry_run else "Rewound"
    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("File", style="cyan")
    table.add_column("From")
    table.add_column("To", style="green")
    for change in summary.rewound:
        table.add_row(
            display_path(change.path, summary.root),
            format_mtime(change.live.mtime_ns),
            format_mtime(change.stored.mtime_ns),
        )
    console.print(table)


@app.command()
def rewind(
    root: Path = typer.Argument(
        ...,
        exists=True,
        file_okay=False,
        dir_okay=True,
        resolve_path=True,
        help="Directory tree to rewind",
    ),
    dry: bool = typer.Option(
        False, "--dry", help="Do not edit any mtime, only list the changes that would be made"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug output"),
):
    """Rewind mtimes of unchanged files under ROOT.

    The first run records a hash and mtime for every file. Later runs put
    back the recorded mtime of files that were touched but not edited.

    Examples:
        mtime-rewind .              # record / rewind the current directory
        mtime-rewind src --dry      # list what would be rewound
    """
    from .reconcile import reconcile

    try:
        config = load_config(root)
    except ConfigError as e:
        console.print(f"[red]✗[/red] {e}")
        raise typer.Exit(1)

    setup_logging("DEBUG" if verbose else config.log_level)

    try:
        summary = reconcile(root, dry_run=dry, config=config)
    except RewindError as e:
        console.print(f"[red]✗[/red] {e}")
        raise typer.Exit(1)

    if summary.rewound:
        _print_rewound(summary)
    console.print(summary.summary())


def main():
    """Entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
