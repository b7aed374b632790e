"""Shared fixtures for the ratingmatrix test suite.

Every test gets a fresh ResponseCache and a RequestClient with no retry
delay, so retry tests run instantly and no cached payload leaks between
tests. HTTP traffic is mocked with respx.
"""

from collections.abc import AsyncIterator

import pytest
import pytest_asyncio

from ratingmatrix.metadata.cache import ResponseCache
from ratingmatrix.metadata.clients.omdb import OMDbClient
from ratingmatrix.metadata.clients.tmdb import TMDBClient
from ratingmatrix.metadata.http import RequestClient
from ratingmatrix.metadata.reconciler import Reconciler
from ratingmatrix.metadata.resolver import IdentifierResolver

OMDB_URL = "https://www.omdbapi.com/"
TMDB_URL = "https://api.themoviedb.org/3"
OMDB_KEY = "dummy-omdb"  # pragma: allowlist secret
TMDB_TOKEN = "dummy-token"  # pragma: allowlist secret


@pytest.fixture
def cache() -> ResponseCache:
    return ResponseCache()


@pytest_asyncio.fixture
async def http(cache: ResponseCache) -> AsyncIterator[RequestClient]:
    async with RequestClient(cache, timeout=5.0, retry_delay=0) as client:
        yield client


@pytest.fixture
def omdb(http: RequestClient) -> OMDbClient:
    return OMDbClient(http, OMDB_KEY)


@pytest.fixture
def tmdb(http: RequestClient) -> TMDBClient:
    return TMDBClient(http, TMDB_TOKEN)


@pytest.fixture
def resolver(tmdb: TMDBClient) -> IdentifierResolver:
    return IdentifierResolver(tmdb)


@pytest.fixture
def reconciler(
    omdb: OMDbClient, tmdb: TMDBClient, resolver: IdentifierResolver
) -> Reconciler:
    return Reconciler(omdb, tmdb, resolver, season_pause=0)
