"""Session wiring for the reconciliation stack.

A session owns one response cache and one HTTP client. Both are created when
the session opens and discarded when it closes.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from ratingmatrix.metadata.cache import ResponseCache
from ratingmatrix.metadata.clients.omdb import OMDbClient
from ratingmatrix.metadata.clients.tmdb import TMDBClient
from ratingmatrix.metadata.http import RequestClient
from ratingmatrix.metadata.reconciler import Reconciler
from ratingmatrix.metadata.resolver import IdentifierResolver
from ratingmatrix.metadata.settings import Settings


def build_reconciler(settings: Settings, http: RequestClient) -> Reconciler:
    """Build the provider clients, resolver and reconciler on top of *http*."""
    settings.require_keys()
    omdb = OMDbClient(
        http,
        settings.OMDB_API_KEY or "",
        base_url=settings.OMDB_BASE_URL,
        search_limit=settings.SEARCH_LIMIT,
    )
    tmdb = TMDBClient(
        http,
        settings.TMDB_READ_ACCESS_TOKEN or "",
        base_url=settings.TMDB_BASE_URL,
        image_base=settings.TMDB_IMAGE_BASE,
        search_poster_size=settings.SEARCH_POSTER_SIZE,
        detail_poster_size=settings.DETAIL_POSTER_SIZE,
        search_limit=settings.SEARCH_LIMIT,
    )
    return Reconciler(
        omdb,
        tmdb,
        IdentifierResolver(tmdb),
        season_pause=settings.SEASON_PAUSE,
        season_pause_every=settings.SEASON_PAUSE_EVERY,
    )


@asynccontextmanager
async def open_session(settings: Settings | None = None) -> AsyncIterator[Reconciler]:
    """Yield a Reconciler backed by a fresh cache and HTTP client.

    Raises:
        MissingAPIKeyError: If a provider credential is not configured.
    """
    settings = settings or Settings()
    cache = ResponseCache()
    async with RequestClient(
        cache,
        timeout=settings.REQUEST_TIMEOUT,
        max_retries=settings.REQUEST_RETRIES,
        retry_delay=settings.RETRY_DELAY,
    ) as http:
        yield build_reconciler(settings, http)
