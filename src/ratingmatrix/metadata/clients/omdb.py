"""OMDb client (IMDb ratings).

OMDb is the rating-authoritative provider. It answers every query on a
single keyed endpoint:

- ``s=<title>&type=series`` for search
- ``i=<imdbId>`` or ``t=<title>&type=series`` for show details
- ``i=<imdbId>&Season=<n>`` for a season's episodes

Every payload carries ``Response: "True" | "False"``. Scalar fields that are
not available are reported as the literal string "N/A".
"""

from typing import Any

from ratingmatrix.metadata.base import MetadataClient, dedupe_episodes
from ratingmatrix.metadata.cache import Payload
from ratingmatrix.metadata.http import RequestClient
from ratingmatrix.metadata.models import (
    IdSpace,
    ProviderEpisode,
    ProviderShow,
    SearchHit,
)
from ratingmatrix.metadata.utils import EN_DASH

PROVIDER = "omdb"
OMDB_URL = "https://www.omdbapi.com/"
NOT_AVAILABLE = "N/A"
MAX_RATING = 10.0


def is_positive(payload: Payload) -> bool:
    """Return False for OMDb's explicit negative response."""
    return payload.get("Response") != "False"


def _available(value: Any) -> str | None:
    """Return *value* as a stripped string, or None for "N/A" and blanks."""
    if value is None:
        return None
    text = str(value).strip()
    if not text or text.upper() == NOT_AVAILABLE:
        return None
    return text


def _parse_rating(value: Any) -> float | None:
    text = _available(value)
    if text is None:
        return None
    try:
        rating = float(text)
    except ValueError:
        return None
    return rating if 0.0 <= rating <= MAX_RATING else None


def _parse_int(value: Any) -> int | None:
    text = _available(value)
    if text is None:
        return None
    try:
        return int(text)
    except ValueError:
        return None


class OMDbClient(MetadataClient):
    """Async OMDb client returning normalized provider models."""

    id_space = IdSpace.IMDB

    def __init__(
        self,
        http: RequestClient,
        api_key: str,
        *,
        base_url: str = OMDB_URL,
        search_limit: int = 10,
    ) -> None:
        """Initialize OMDb client with API key.

        Args:
            http: Shared request client.
            api_key: OMDb API key from environment or settings.
            base_url: OMDb endpoint.
            search_limit: Maximum number of search hits returned.
        """
        super().__init__(http, search_limit=search_limit)
        self.api_key = api_key
        self.base_url = base_url

    async def _get(self, params: dict[str, str]) -> Payload:
        return await self.http.request(
            PROVIDER,
            self.base_url,
            params=params,
            credentials={"apikey": self.api_key},
            accept=is_positive,
        )

    async def search(self, query: str) -> list[SearchHit]:
        data = await self._get({"s": query, "type": "series"})
        if not is_positive(data):
            return []
        # Rows without an IMDb id cannot be resolved later.
        hits = [item for item in data.get("Search") or [] if item.get("imdbID")]
        return [self.normalize_search_hit(item) for item in hits[: self.search_limit]]

    async def show(self, show_id: Any) -> ProviderShow | None:
        data = await self._get({"i": str(show_id), "plot": "short"})
        if not is_positive(data):
            return None
        return self.normalize_show(data)

    async def show_by_title(self, title: str) -> ProviderShow | None:
        """Fetch show details by exact title match."""
        data = await self._get({"t": title, "type": "series"})
        if not is_positive(data):
            return None
        return self.normalize_show(data)

    async def season(self, show_id: Any, season_number: int) -> list[ProviderEpisode]:
        data = await self._get({"i": str(show_id), "Season": str(season_number)})
        if not is_positive(data):
            return []
        return self.normalize_episode_list(data)

    def normalize_search_hit(self, raw: dict[str, Any]) -> SearchHit:
        return SearchHit(
            primary_id=raw["imdbID"],
            id_space=IdSpace.IMDB,
            title=raw.get("Title") or "Unknown",
            year=_available(raw.get("Year")) or "",
            poster_url=_available(raw.get("Poster")),
        )

    def normalize_show(self, raw: dict[str, Any]) -> ProviderShow:
        year = _available(raw.get("Year")) or ""
        return ProviderShow(
            provider=IdSpace.IMDB,
            imdb_id=_available(raw.get("imdbID")),
            title=raw.get("Title") or "Unknown",
            year_display=year,
            poster_url=_available(raw.get("Poster")),
            rating=_parse_rating(raw.get("imdbRating")),
            vote_count=_available(raw.get("imdbVotes")),
            total_seasons=_parse_int(raw.get("totalSeasons")),
            # OMDb has no series status; an open year range means still airing.
            status="Returning Series" if year.endswith(EN_DASH) else "Ended",
        )

    def normalize_episode_list(self, raw: dict[str, Any]) -> list[ProviderEpisode]:
        episodes = []
        for item in raw.get("Episodes") or []:
            number = _parse_int(item.get("Episode"))
            if number is None or number < 1:
                continue
            episodes.append(
                ProviderEpisode(
                    episode_number=number,
                    title=item.get("Title") or f"Episode {number}",
                    release_date=_available(item.get("Released")),
                    rating=_parse_rating(item.get("imdbRating")),
                )
            )
        return dedupe_episodes(episodes)
