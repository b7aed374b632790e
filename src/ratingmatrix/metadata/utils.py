"""Utility functions for metadata processing.

This module provides helpers for loading test fixtures, telling identifier
spaces apart, and building display strings shared by both provider clients.

Design:
- load_fixture enables deterministic, offline testing of provider clients using
  static JSON files.
- detect_id_space is the single place that decides which provider an
  identifier belongs to.
"""

import json
from pathlib import Path
from typing import Any

from ratingmatrix.metadata.models import IMDB_PREFIX, IdSpace

YEAR_LENGTH = 4
EN_DASH = "–"
ENDED_STATUSES = frozenset({"Ended", "Canceled"})


def load_fixture(provider: str, fixture_name: str) -> dict[str, Any]:
    """Load a fixture JSON file from the tests/fixtures directory.

    Args:
        provider: The provider name (e.g., 'omdb', 'tmdb').
        fixture_name: The name of the fixture file without extension.

    Returns:
        The loaded JSON data as a dictionary.

    Raises:
        FileNotFoundError: If the fixture file doesn't exist.
        json.JSONDecodeError: If the fixture contains invalid JSON.
    """
    # current file -> metadata -> ratingmatrix -> src -> project root
    base_path = Path(__file__).parents[3] / "tests" / "fixtures" / "stubs" / provider

    fixture_path = base_path / f"{fixture_name}.json"

    if not fixture_path.exists():
        raise FileNotFoundError(f"Fixture file not found: {fixture_path}")

    with open(fixture_path, encoding="utf-8") as f:
        return json.load(f)  # type: ignore[no-any-return]


def detect_id_space(show_id: str | int) -> IdSpace:
    """Return the identifier space of *show_id*.

    Anything starting with the IMDb "tt" prefix is an IMDb id; every other
    token is assumed to be a numeric TMDB id.
    """
    if isinstance(show_id, str) and show_id.strip().startswith(IMDB_PREFIX):
        return IdSpace.IMDB
    return IdSpace.TMDB


def coerce_tmdb_id(show_id: str | int) -> int | None:
    """Return *show_id* as an int, or None when it is not a valid TMDB id."""
    if isinstance(show_id, int):
        return show_id
    token = show_id.strip()
    return int(token) if token.isdigit() else None


def extract_year(date_str: str | None) -> str | None:
    """Extract the year from a YYYY-MM-DD string, or return None."""
    if date_str and len(date_str) >= YEAR_LENGTH and date_str[:YEAR_LENGTH].isdigit():
        return date_str[:YEAR_LENGTH]
    return None


def format_year_range(
    first_air_date: str | None, last_air_date: str | None, status: str
) -> str:
    """Build a year display string from air dates and series status.

    Running shows get an open range ("2019–"). Ended or canceled shows get a
    closed range ("2019–2021"), or a single year when both years match.
    """
    start = extract_year(first_air_date)
    if start is None:
        return ""
    if status not in ENDED_STATUSES:
        return f"{start}{EN_DASH}"
    end = extract_year(last_air_date)
    if end is None or end == start:
        return start
    return f"{start}{EN_DASH}{end}"


def format_vote_count(count: int | None) -> str | None:
    """Format a vote count with thousands separators ("12,345")."""
    if not count:
        return None
    return f"{count:,}"
