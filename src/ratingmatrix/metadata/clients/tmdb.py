# WARNING: API token loading from .env is for LOCAL DEVELOPMENT ONLY.
# Never commit your .env file or distribute your API keys.

"""TMDB metadata provider client.

TMDB is the coverage provider and the source of episode structure. It is a
bearer-token REST API under a versioned base path:

- ``/search/tv``, ``/tv/{id}``, ``/tv/{id}/season/{n}``
- ``/tv/{id}/external_ids`` and ``/find/{imdbId}?external_source=imdb_id`` for
  identifier lookups

Poster paths are relative and are joined with the image CDN base and a width
descriptor (e.g. ``w342``).
"""

from collections.abc import Callable
from typing import Any

from ratingmatrix.metadata.base import MetadataClient, dedupe_episodes
from ratingmatrix.metadata.cache import Payload
from ratingmatrix.metadata.http import RequestClient
from ratingmatrix.metadata.models import (
    IMDB_PREFIX,
    IdSpace,
    ProviderEpisode,
    ProviderShow,
    SearchHit,
)
from ratingmatrix.metadata.utils import extract_year, format_vote_count, format_year_range

PROVIDER = "tmdb"
TMDB_URL = "https://api.themoviedb.org/3"
TMDB_IMAGE = "https://image.tmdb.org/t/p"
LANGUAGE = "en-US"
MAX_RATING = 10.0


def is_positive(payload: Payload) -> bool:
    """Return False for TMDB's explicit failure body."""
    return payload.get("success") is not False


def _has_tv_results(payload: Payload) -> bool:
    return is_positive(payload) and bool(payload.get("tv_results"))


def _has_imdb_id(payload: Payload) -> bool:
    return is_positive(payload) and bool(payload.get("imdb_id"))


def _parse_rating(value: Any) -> float | None:
    if value is None:
        return None
    try:
        rating = float(value)
    except (TypeError, ValueError):
        return None
    return rating if 0.0 <= rating <= MAX_RATING else None


class TMDBClient(MetadataClient):
    """Client for The Movie Database (TMDB) API."""

    id_space = IdSpace.TMDB

    def __init__(
        self,
        http: RequestClient,
        read_access_token: str,
        *,
        base_url: str = TMDB_URL,
        image_base: str = TMDB_IMAGE,
        search_poster_size: str = "w185",
        detail_poster_size: str = "w342",
        search_limit: int = 10,
    ) -> None:
        """Initialize TMDBClient.

        Args:
            http: Shared request client.
            read_access_token: TMDB v4 read access token (bearer).
            base_url: Versioned API base URL.
            image_base: Image CDN base URL.
            search_poster_size: Width descriptor for search result posters.
            detail_poster_size: Width descriptor for show posters.
            search_limit: Maximum number of search hits returned.
        """
        super().__init__(http, search_limit=search_limit)
        self.read_access_token = read_access_token
        self.base_url = base_url.rstrip("/")
        self.image_base = image_base.rstrip("/")
        self.search_poster_size = search_poster_size
        self.detail_poster_size = detail_poster_size

    async def _get(
        self,
        path: str,
        params: dict[str, str] | None = None,
        *,
        accept: Callable[[Payload], bool] = is_positive,
    ) -> Payload:
        return await self.http.request(
            PROVIDER,
            f"{self.base_url}{path}",
            path=path,
            params=params,
            headers={
                "Authorization": f"Bearer {self.read_access_token}",
                "accept": "application/json",
            },
            accept=accept,
        )

    def poster_url(self, path: str | None, size: str) -> str | None:
        """Join a relative poster path with the image CDN base."""
        if not path:
            return None
        return f"{self.image_base}/{size}{path}"

    async def search(self, query: str) -> list[SearchHit]:
        data = await self._get(
            "/search/tv",
            {
                "query": query,
                "include_adult": "false",
                "language": LANGUAGE,
                "page": "1",
            },
        )
        results = [
            item
            for item in data.get("results") or []
            if isinstance(item.get("id"), int)
        ]
        return [
            self.normalize_search_hit(item) for item in results[: self.search_limit]
        ]

    async def show(self, show_id: Any) -> ProviderShow | None:
        data = await self._get(f"/tv/{int(show_id)}", {"language": LANGUAGE})
        if not is_positive(data) or "id" not in data:
            return None
        return self.normalize_show(data)

    async def season(self, show_id: Any, season_number: int) -> list[ProviderEpisode]:
        data = await self._get(
            f"/tv/{int(show_id)}/season/{season_number}", {"language": LANGUAGE}
        )
        return self.normalize_episode_list(data)

    async def external_imdb_id(self, tmdb_id: int) -> str | None:
        """Return the IMDb id linked to a TMDB series, or None."""
        data = await self._get(f"/tv/{int(tmdb_id)}/external_ids", accept=_has_imdb_id)
        imdb_id = data.get("imdb_id")
        if isinstance(imdb_id, str) and imdb_id.startswith(IMDB_PREFIX):
            return imdb_id
        return None

    async def find_by_imdb_id(self, imdb_id: str) -> int | None:
        """Return the TMDB series id for an IMDb id, or None."""
        data = await self._get(
            f"/find/{imdb_id}", {"external_source": "imdb_id"}, accept=_has_tv_results
        )
        for item in data.get("tv_results") or []:
            if isinstance(item.get("id"), int):
                return item["id"]
        return None

    def normalize_search_hit(self, raw: dict[str, Any]) -> SearchHit:
        vote_average = _parse_rating(raw.get("vote_average"))
        return SearchHit(
            primary_id=int(raw["id"]),
            id_space=IdSpace.TMDB,
            title=raw.get("name") or "Unknown",
            year=extract_year(raw.get("first_air_date")) or "",
            poster_url=self.poster_url(raw.get("poster_path"), self.search_poster_size),
            approx_rating=round(vote_average, 1) if vote_average else None,
        )

    def normalize_show(self, raw: dict[str, Any]) -> ProviderShow:
        status = raw.get("status") or ""
        return ProviderShow(
            provider=IdSpace.TMDB,
            tmdb_id=int(raw["id"]),
            title=raw.get("name") or "Unknown",
            year_display=format_year_range(
                raw.get("first_air_date"), raw.get("last_air_date"), status
            ),
            poster_url=self.poster_url(raw.get("poster_path"), self.detail_poster_size),
            rating=_parse_rating(raw.get("vote_average")),
            vote_count=format_vote_count(raw.get("vote_count")),
            total_seasons=raw.get("number_of_seasons") or None,
            status=status,
        )

    def normalize_episode_list(self, raw: dict[str, Any]) -> list[ProviderEpisode]:
        episodes = []
        for item in raw.get("episodes") or []:
            number = item.get("episode_number")
            if not isinstance(number, int) or number < 1:
                continue
            episodes.append(
                ProviderEpisode(
                    episode_number=number,
                    title=item.get("name") or f"Episode {number}",
                    release_date=item.get("air_date") or None,
                    rating=_parse_rating(item.get("vote_average")),
                    vote_count=item.get("vote_count") or 0,
                )
            )
        return dedupe_episodes(episodes)
