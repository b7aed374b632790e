"""Command-line interface for ratingmatrix.

This package provides the Typer app and global console for all CLI commands.

- app: The Typer application object, used by the ``ratingmatrix`` entrypoint.
- console: Rich Console instance for consistent, styled output.
- Commands live in ``ratingmatrix.cli.commands`` and register themselves on
  ``app`` when this package is imported.
"""

import os

import typer
from rich.console import Console
from rich.traceback import install

install(show_locals=False)

_ENV_DISABLE_RICH = "RATINGMATRIX_NO_RICH"

console = Console()

app = typer.Typer(
    name="ratingmatrix",
    help="Episode ratings for TV series, merged from OMDb and TMDB.",
    add_completion=False,
)


@app.callback()
def callback(
    no_rich: bool = typer.Option(
        False,
        "--no-rich",
        help=(
            "Disable Rich colour output. "
            "Can also be set with the RATINGMATRIX_NO_RICH environment variable."
        ),
    ),
) -> None:
    """Top-level CLI callback adding global options."""
    if no_rich or os.getenv(_ENV_DISABLE_RICH, "0").lower() in {"1", "true", "yes"}:
        os.environ[_ENV_DISABLE_RICH] = "1"
        console.no_color = True


@app.command()
def version() -> None:
    """Show the version of ratingmatrix."""
    from ratingmatrix.__about__ import __version__

    console.print(f"RatingMatrix version: [bold]{__version__}[/bold]")


from ratingmatrix.cli import commands  # noqa: E402,F401

if __name__ == "__main__":
    app()
