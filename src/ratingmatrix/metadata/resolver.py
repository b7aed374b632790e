"""Identifier resolution between the IMDb and TMDB id spaces.

Lookups are TMDB calls (``/find`` for IMDb -> TMDB, ``/tv/{id}/external_ids``
for TMDB -> IMDb) and therefore go through the same request client, timeout,
retry and cache policy as any other provider call.

A missing counterpart is an expected outcome: many titles exist in only one
catalog. ``to_other_space`` returns None in that case and also when the
lookup itself fails, so callers continue with the identifier they have.
"""

from ratingmatrix.metadata.clients.tmdb import TMDBClient
from ratingmatrix.metadata.errors import RequestError
from ratingmatrix.metadata.models import IdSpace
from ratingmatrix.metadata.utils import coerce_tmdb_id
from ratingmatrix.utils.debug import debug, warn


class IdentifierResolver:
    """Maps a show identifier to its counterpart in the other id space."""

    def __init__(self, tmdb: TMDBClient) -> None:
        self.tmdb = tmdb

    async def to_other_space(
        self, known_id: str | int, known_space: IdSpace
    ) -> str | int | None:
        """Return the identifier of the same show in the other space.

        Args:
            known_id: An IMDb id ("tt...") or a TMDB id.
            known_space: The space *known_id* belongs to.

        Returns:
            The TMDB id (int) for an IMDb input, the IMDb id (str) for a TMDB
            input, or None when no counterpart is found.
        """
        try:
            if known_space is IdSpace.IMDB:
                other: str | int | None = await self.tmdb.find_by_imdb_id(str(known_id))
            else:
                tmdb_id = coerce_tmdb_id(known_id)
                if tmdb_id is None:
                    return None
                other = await self.tmdb.external_imdb_id(tmdb_id)
        except RequestError as exc:
            warn(f"identifier lookup for {known_id!r} failed: {exc}")
            return None
        if other is None:
            debug(f"no {known_space.value} counterpart found for {known_id!r}")
        return other
