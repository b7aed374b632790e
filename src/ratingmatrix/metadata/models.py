"""Data models for reconciled show, season and episode metadata.

This module defines two layers of models:

- Provider-level shapes (``ProviderShow``, ``ProviderEpisode``) produced by the
  OMDb and TMDB clients. Sentinel values ("N/A", zero-vote averages, relative
  poster paths) are already resolved at this point; nothing provider-specific
  leaks past the client that built them.
- Canonical records (``SearchHit``, ``ShowRecord``, ``EpisodeRecord``,
  ``SeasonRecord``) produced by the reconciler and handed to consumers.

Design:
- Identifiers live in two spaces: IMDb ids are strings prefixed with "tt",
  TMDB ids are integers. ``IdSpace`` names them.
- ``ShowRecord`` must carry at least one identifier. ``tmdb_id`` may be filled
  in after the record is first produced; ``imdb_id`` never changes.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

IMDB_PREFIX = "tt"


class IdSpace(str, Enum):
    """Identifier namespaces understood by the reconciler."""

    IMDB = "imdb"
    TMDB = "tmdb"


class RatingSource(str, Enum):
    """Provider that supplied a rating, or NONE when no usable value exists."""

    IMDB = "imdb"
    TMDB = "tmdb"
    NONE = "none"


class SearchHit(BaseModel):
    """One search result, tagged with the identifier space of its provider."""

    model_config = ConfigDict(frozen=True)

    primary_id: str | int
    id_space: IdSpace
    title: str
    year: str
    poster_url: str | None = None
    approx_rating: float | None = None


class ProviderShow(BaseModel):
    """Show-level fields as reported by a single provider."""

    provider: IdSpace
    imdb_id: str | None = None
    tmdb_id: int | None = None
    title: str
    year_display: str = ""
    poster_url: str | None = None
    rating: float | None = None
    vote_count: str | None = None
    total_seasons: int | None = None
    status: str = ""


class ProviderEpisode(BaseModel):
    """Episode-level fields as reported by a single provider.

    ``vote_count`` is only known for TMDB episodes; OMDb does not report
    per-episode vote counts.
    """

    episode_number: int
    title: str
    release_date: str | None = None
    rating: float | None = None
    vote_count: int | None = None


class ShowRecord(BaseModel):
    """Canonical per-show record."""

    imdb_id: str | None = None
    tmdb_id: int | None = None
    title: str
    year_display: str = ""
    poster_url: str | None = None
    rating: float | None = None
    vote_count: str | None = None
    total_seasons: int = 1
    status: str = ""
    rating_source: RatingSource

    @model_validator(mode="after")
    def _require_identifier(self) -> "ShowRecord":
        if self.imdb_id is None and self.tmdb_id is None:
            raise ValueError("ShowRecord needs an IMDb or a TMDB identifier")
        return self


class EpisodeRecord(BaseModel):
    """Canonical per-episode record.

    ``rating`` is None when neither provider has a usable value, which is
    distinct from a rating of zero.
    """

    episode_number: int = Field(ge=1)
    title: str
    release_date: str | None = None
    rating: float | None = Field(default=None, ge=0, le=10)
    rating_source: RatingSource = RatingSource.NONE


class SeasonRecord(BaseModel):
    """Episodes of one season ordered by episode number (gaps allowed)."""

    season_number: int
    episodes: list[EpisodeRecord] = Field(default_factory=list)
