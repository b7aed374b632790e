"""CLI commands for ratingmatrix.

Thin consumers of the reconciler: each command opens a session, makes one
or two reconciler calls and prints the result as JSON.

Design:
- Request tunables resolve with precedence CLI option > RATINGMATRIX_* env
  var > config.toml > Settings default (see ``ratingmatrix.utils.config``).
- Provider outages never fail ``search`` or ``season``; they print empty
  results. A show that cannot be resolved exits with ExitCode.ERROR.
"""

import asyncio
from collections.abc import Coroutine
from dataclasses import asdict
from enum import Enum
from typing import Annotated, Any, Optional, TypeVar

import typer

from ratingmatrix.cli import app, console
from ratingmatrix.metadata.errors import ShowNotFound
from ratingmatrix.metadata.models import EpisodeRecord
from ratingmatrix.metadata.ratings import classify, format_rating, summarize_series
from ratingmatrix.metadata.session import open_session
from ratingmatrix.metadata.settings import MissingAPIKeyError, Settings
from ratingmatrix.utils.config import resolve_setting

T = TypeVar("T")


class ExitCode(int, Enum):
    """Exit codes for CLI commands."""

    SUCCESS = 0
    ERROR = 1


TIMEOUT = Annotated[
    Optional[float],
    typer.Option("--timeout", help="Per-request deadline in seconds."),
]
RETRIES = Annotated[
    Optional[int],
    typer.Option("--retries", help="Retries after a failed request."),
]


def load_settings(timeout: float | None = None, retries: int | None = None) -> Settings:
    """Load Settings and apply CLI/env/config overrides for request tunables."""
    settings = Settings()
    return settings.model_copy(
        update={
            "REQUEST_TIMEOUT": resolve_setting(
                "request.timeout", default=settings.REQUEST_TIMEOUT, cli_value=timeout
            ),
            "REQUEST_RETRIES": resolve_setting(
                "request.retries", default=settings.REQUEST_RETRIES, cli_value=retries
            ),
        }
    )


def _run(coro: Coroutine[Any, Any, T]) -> T:
    """Run *coro*, turning expected failures into a red message and exit code."""
    try:
        return asyncio.run(coro)
    except (MissingAPIKeyError, ShowNotFound) as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(ExitCode.ERROR)


def episode_payload(episode: EpisodeRecord) -> dict[str, Any]:
    """Serialize an episode with its display rating and quality label."""
    data = episode.model_dump(mode="json")
    data["rating_display"] = format_rating(episode.rating)
    data["category"] = classify(episode.rating).label
    return data


@app.command()
def search(
    query: Annotated[str, typer.Argument(help="Series title to search for")],
    timeout: TIMEOUT = None,
    retries: RETRIES = None,
) -> None:
    """Search TV series (IMDb results first, TMDB as fallback)."""

    async def _search() -> list[dict[str, Any]]:
        async with open_session(load_settings(timeout, retries)) as reconciler:
            hits = await reconciler.search(query)
        return [hit.model_dump(mode="json") for hit in hits]

    console.print_json(data=_run(_search()))


@app.command()
def show(
    show_id: Annotated[str, typer.Argument(help="IMDb id (tt...) or TMDB id")],
    title: Annotated[
        Optional[str], typer.Option("--title", help="Title hint for TMDB ids")
    ] = None,
    timeout: TIMEOUT = None,
    retries: RETRIES = None,
) -> None:
    """Show the reconciled record for one series."""

    async def _show() -> dict[str, Any]:
        async with open_session(load_settings(timeout, retries)) as reconciler:
            record = await reconciler.get_show(show_id, title)
        return record.model_dump(mode="json")

    console.print_json(data=_run(_show()))


@app.command()
def season(
    show_id: Annotated[str, typer.Argument(help="IMDb id (tt...) or TMDB id")],
    number: Annotated[int, typer.Argument(min=1, help="Season number")],
    timeout: TIMEOUT = None,
    retries: RETRIES = None,
) -> None:
    """Show merged episode ratings for one season."""

    async def _season() -> dict[str, Any]:
        async with open_session(load_settings(timeout, retries)) as reconciler:
            record = await reconciler.get_show(show_id)
            episodes = await reconciler.get_season_episodes(record, number)
        return {
            "season_number": number,
            "episodes": [episode_payload(ep) for ep in episodes],
        }

    console.print_json(data=_run(_season()))


@app.command()
def series(
    show_id: Annotated[str, typer.Argument(help="IMDb id (tt...) or TMDB id")],
    timeout: TIMEOUT = None,
    retries: RETRIES = None,
) -> None:
    """Show every season of a series with an overall summary."""

    async def _series() -> dict[str, Any]:
        async with open_session(load_settings(timeout, retries)) as reconciler:
            record = await reconciler.get_show(show_id)
            seasons = await reconciler.get_series(record)
        summary = summarize_series(seasons)
        return {
            "show": record.model_dump(mode="json"),
            "seasons": [
                {
                    "season_number": s.season_number,
                    "episodes": [episode_payload(ep) for ep in s.episodes],
                }
                for s in seasons
            ],
            "summary": {**asdict(summary), "limited_data": summary.limited_data},
        }

    console.print_json(data=_run(_series()))
