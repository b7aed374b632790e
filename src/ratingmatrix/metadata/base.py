"""Base abstraction for metadata provider clients.

Defines the interface shared by the OMDb and TMDB clients. Each client does
two jobs:

- Fetching: issue provider requests through the shared ``RequestClient``.
- Normalizing: translate raw provider payloads into ``SearchHit``,
  ``ProviderShow`` and ``ProviderEpisode``. This is the only place where a
  provider's "not available" sentinels are recognised.

Clients never call each other or the identifier resolver.
"""

from abc import ABC, abstractmethod
from typing import Any, ClassVar

from ratingmatrix.metadata.http import RequestClient
from ratingmatrix.metadata.models import (
    IdSpace,
    ProviderEpisode,
    ProviderShow,
    SearchHit,
)


class MetadataClient(ABC):
    """Abstract base class for provider clients."""

    id_space: ClassVar[IdSpace]

    def __init__(self, http: RequestClient, *, search_limit: int = 10) -> None:
        """Initialize the client.

        Args:
            http: Shared request client (owns timeout, retry and cache policy).
            search_limit: Maximum number of search hits returned.
        """
        self.http = http
        self.search_limit = search_limit

    @abstractmethod
    async def search(self, query: str) -> list[SearchHit]:
        """Search TV series by title.

        Returns an empty list when the provider reports no results.

        Raises:
            RequestError: When the provider call fails.
        """
        raise NotImplementedError

    @abstractmethod
    async def show(self, show_id: Any) -> ProviderShow | None:
        """Fetch show-level fields by the provider's own identifier.

        Returns None when the provider reports the id as unknown.

        Raises:
            RequestError: When the provider call fails.
        """
        raise NotImplementedError

    @abstractmethod
    async def season(self, show_id: Any, season_number: int) -> list[ProviderEpisode]:
        """Fetch the episode list of one season.

        Raises:
            RequestError: When the provider call fails.
        """
        raise NotImplementedError

    @abstractmethod
    def normalize_search_hit(self, raw: dict[str, Any]) -> SearchHit:
        """Translate one raw search result."""
        raise NotImplementedError

    @abstractmethod
    def normalize_show(self, raw: dict[str, Any]) -> ProviderShow:
        """Translate a raw show payload."""
        raise NotImplementedError

    @abstractmethod
    def normalize_episode_list(self, raw: dict[str, Any]) -> list[ProviderEpisode]:
        """Translate a raw season payload into episodes ordered by number."""
        raise NotImplementedError


def dedupe_episodes(episodes: list[ProviderEpisode]) -> list[ProviderEpisode]:
    """Order episodes by number, keeping the first entry for each number."""
    seen: dict[int, ProviderEpisode] = {}
    for episode in episodes:
        seen.setdefault(episode.episode_number, episode)
    return [seen[number] for number in sorted(seen)]
