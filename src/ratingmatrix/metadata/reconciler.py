"""Reconciliation of OMDb and TMDB data into canonical records.

OMDb (IMDb ratings) is rating-authoritative; TMDB is the coverage provider
and the source of episode structure. Every operation follows the same rule:
take the rating from OMDb whenever it has one, take structure (episode lists,
season counts) from the more complete provider, and never let one provider's
outage hide the other provider's data.

Consumers use three entry points, plus one convenience loop over seasons:

- ``search(query)``: OMDb hits, or TMDB hits when OMDb has none.
- ``get_show(show_id, title_hint)``: runs an ordered list of named
  strategies until one yields a record; raises ``ShowNotFound`` otherwise.
- ``get_season_episodes(show, n)``: TMDB skeleton enriched with OMDb
  ratings; never raises for provider failures.
- ``get_series(show)``: loads every season in order through
  ``get_season_episodes``, with a pause every few seasons.
"""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TypeVar

from ratingmatrix.metadata.base import MetadataClient
from ratingmatrix.metadata.clients.omdb import OMDbClient
from ratingmatrix.metadata.clients.tmdb import TMDBClient
from ratingmatrix.metadata.errors import RequestError, ShowNotFound
from ratingmatrix.metadata.models import (
    EpisodeRecord,
    IdSpace,
    ProviderEpisode,
    ProviderShow,
    RatingSource,
    SearchHit,
    SeasonRecord,
    ShowRecord,
)
from ratingmatrix.metadata.resolver import IdentifierResolver
from ratingmatrix.metadata.utils import coerce_tmdb_id, detect_id_space
from ratingmatrix.utils.debug import debug, error, info, warn

MIN_QUERY_LENGTH = 2

T = TypeVar("T")


@dataclass
class ShowResolution:
    """Working state shared by the show strategies of one ``get_show`` call."""

    show_id: str | int
    title_hint: str | None = None
    imdb_id: str | None = None
    tmdb_id: int | None = None
    queried_imdb_ids: set[str] = field(default_factory=set)
    last_error: RequestError | None = None


@dataclass(frozen=True)
class StrategyResult:
    success: bool
    record: ShowRecord | None = None


FAILED = StrategyResult(success=False)

ShowStrategy = Callable[[ShowResolution], Awaitable[StrategyResult]]


def merge_show(
    imdb: ProviderShow | None,
    tmdb: ProviderShow | None,
    *,
    imdb_id: str | None,
    tmdb_id: int | None,
) -> ShowRecord:
    """Merge show-level fields from one or both providers.

    The OMDb rating and vote count are used verbatim whenever OMDb has a
    rating; TMDB's are used only when OMDb's is absent. Descriptive fields
    come from OMDb when present. TMDB's status and the larger season count
    win when TMDB data is available.
    """
    primary = imdb or tmdb
    if primary is None:
        raise ValueError("merge_show needs at least one provider record")

    if imdb is not None and imdb.rating is not None:
        rating, votes, source = imdb.rating, imdb.vote_count, RatingSource.IMDB
    elif tmdb is not None and tmdb.rating is not None:
        rating, votes, source = tmdb.rating, tmdb.vote_count, RatingSource.TMDB
    else:
        rating, votes = None, None
        source = RatingSource.IMDB if imdb is not None else RatingSource.TMDB

    poster = imdb.poster_url if imdb is not None else None
    if poster is None and tmdb is not None:
        poster = tmdb.poster_url

    season_counts = [
        show.total_seasons for show in (imdb, tmdb) if show and show.total_seasons
    ]
    status = tmdb.status if tmdb is not None and tmdb.status else primary.status
    year_display = primary.year_display or (tmdb.year_display if tmdb else "")

    return ShowRecord(
        imdb_id=imdb_id,
        tmdb_id=tmdb_id,
        title=primary.title,
        year_display=year_display,
        poster_url=poster,
        rating=rating,
        vote_count=votes,
        total_seasons=max(season_counts, default=1),
        status=status,
        rating_source=source,
    )


def merge_episode(
    skeleton: ProviderEpisode, imdb_episode: ProviderEpisode | None
) -> EpisodeRecord:
    """Merge one TMDB skeleton episode with its OMDb counterpart.

    A TMDB rating with zero votes is treated as absent, not as zero.
    """
    if imdb_episode is not None and imdb_episode.rating is not None:
        rating, source = imdb_episode.rating, RatingSource.IMDB
    elif skeleton.rating is not None and (skeleton.vote_count or 0) > 0:
        rating, source = skeleton.rating, RatingSource.TMDB
    else:
        rating, source = None, RatingSource.NONE
    return EpisodeRecord(
        episode_number=skeleton.episode_number,
        title=skeleton.title,
        release_date=skeleton.release_date,
        rating=rating,
        rating_source=source,
    )


def merge_episodes(
    imdb_episodes: list[ProviderEpisode], tmdb_episodes: list[ProviderEpisode]
) -> list[EpisodeRecord]:
    """Build a season's episode list from both providers' lists.

    TMDB's list is the skeleton when it has any episodes. Otherwise OMDb's
    list is used directly. Both empty yields an empty list.
    """
    if tmdb_episodes:
        by_number = {ep.episode_number: ep for ep in imdb_episodes}
        return [merge_episode(ep, by_number.get(ep.episode_number)) for ep in tmdb_episodes]
    return [
        EpisodeRecord(
            episode_number=ep.episode_number,
            title=ep.title,
            release_date=ep.release_date,
            rating=ep.rating,
            rating_source=RatingSource.IMDB if ep.rating is not None else RatingSource.NONE,
        )
        for ep in imdb_episodes
    ]


class Reconciler:
    """Merges OMDb and TMDB into search hits, show records and seasons."""

    def __init__(
        self,
        omdb: OMDbClient,
        tmdb: TMDBClient,
        resolver: IdentifierResolver,
        *,
        season_pause: float = 0.2,
        season_pause_every: int = 3,
    ) -> None:
        """Initialize the reconciler.

        Args:
            omdb: Rating-authoritative client.
            tmdb: Coverage and structure client.
            resolver: Identifier resolver (backed by TMDB lookups).
            season_pause: Seconds to wait before every ``season_pause_every``-th
                season during ``get_series``.
            season_pause_every: Season interval for the pause.
        """
        self.omdb = omdb
        self.tmdb = tmdb
        self.resolver = resolver
        self.season_pause = season_pause
        self.season_pause_every = season_pause_every
        self.show_strategies: list[tuple[str, ShowStrategy]] = [
            ("imdb_by_id", self._imdb_by_id),
            ("imdb_by_title", self._imdb_by_title),
            ("tmdb_fallback", self._tmdb_fallback),
        ]

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------
    async def search(self, query: str) -> list[SearchHit]:
        """Search series, preferring OMDb hits and falling back to TMDB.

        Queries shorter than two characters (after trimming) return an empty
        list without any request. Provider failures degrade to the next
        provider and finally to an empty list.
        """
        query = (query or "").strip()
        if len(query) < MIN_QUERY_LENGTH:
            return []
        clients: tuple[MetadataClient, ...] = (self.omdb, self.tmdb)
        for client in clients:
            try:
                hits = await client.search(query)
            except RequestError as exc:
                warn(f"search for {query!r} failed on {client.id_space.value}: {exc}")
                continue
            if hits:
                return hits
        return []

    # ------------------------------------------------------------------
    # Show
    # ------------------------------------------------------------------
    async def get_show(
        self, show_id: str | int, title_hint: str | None = None
    ) -> ShowRecord:
        """Resolve a canonical show record.

        Args:
            show_id: IMDb id ("tt...") or TMDB id.
            title_hint: Optional title used when the id is not an IMDb id.

        Raises:
            ShowNotFound: When no provider yields a usable record.
        """
        state = ShowResolution(
            show_id=show_id,
            title_hint=(title_hint or "").strip() or None,
        )
        if detect_id_space(show_id) is IdSpace.IMDB:
            state.imdb_id = str(show_id).strip()
        else:
            state.tmdb_id = coerce_tmdb_id(show_id)

        for name, strategy in self.show_strategies:
            result = await strategy(state)
            if result.success and result.record is not None:
                debug(f"show {show_id!r} resolved by {name}")
                return result.record
        error(f"show {show_id!r} could not be resolved by any provider")
        raise ShowNotFound(show_id) from state.last_error

    async def _guard(self, state: ShowResolution, call: Awaitable[T]) -> T | None:
        """Await a provider call, recording a RequestError instead of raising."""
        try:
            return await call
        except RequestError as exc:
            warn(f"provider call failed while resolving {state.show_id!r}: {exc}")
            state.last_error = exc
            return None

    async def _imdb_by_id(self, state: ShowResolution) -> StrategyResult:
        if state.imdb_id is None:
            return FAILED
        state.queried_imdb_ids.add(state.imdb_id)
        show = await self._guard(state, self.omdb.show(state.imdb_id))
        if show is None:
            return FAILED
        return StrategyResult(True, await self._complete_from_imdb(state, show))

    async def _imdb_by_title(self, state: ShowResolution) -> StrategyResult:
        # Title lookup only stands in for ids that are not IMDb ids.
        if state.imdb_id is not None or state.title_hint is None:
            return FAILED
        show = await self._guard(state, self.omdb.show_by_title(state.title_hint))
        if show is None or show.imdb_id is None:
            return FAILED
        return StrategyResult(True, await self._complete_from_imdb(state, show))

    async def _complete_from_imdb(
        self, state: ShowResolution, show: ProviderShow
    ) -> ShowRecord:
        """Fill in the TMDB id of an OMDb-sourced record (best effort)."""
        imdb_id = show.imdb_id or state.imdb_id
        tmdb_id = state.tmdb_id
        if tmdb_id is None and imdb_id is not None:
            resolved = await self.resolver.to_other_space(imdb_id, IdSpace.IMDB)
            tmdb_id = resolved if isinstance(resolved, int) else None
        return merge_show(show, None, imdb_id=imdb_id, tmdb_id=tmdb_id)

    async def _tmdb_fallback(self, state: ShowResolution) -> StrategyResult:
        tmdb_id = state.tmdb_id
        if tmdb_id is None and state.imdb_id is not None:
            resolved = await self.resolver.to_other_space(state.imdb_id, IdSpace.IMDB)
            tmdb_id = resolved if isinstance(resolved, int) else None
        if tmdb_id is None:
            return FAILED

        info(f"falling back to TMDB for show {state.show_id!r}")
        tmdb_show, imdb_id = await asyncio.gather(
            self._guard(state, self.tmdb.show(tmdb_id)),
            self._imdb_counterpart(state, tmdb_id),
        )
        if tmdb_show is None:
            return FAILED

        imdb_show = None
        if imdb_id is not None and imdb_id not in state.queried_imdb_ids:
            state.queried_imdb_ids.add(imdb_id)
            imdb_show = await self._guard(state, self.omdb.show(imdb_id))
        record = merge_show(imdb_show, tmdb_show, imdb_id=imdb_id, tmdb_id=tmdb_id)
        return StrategyResult(True, record)

    async def _imdb_counterpart(self, state: ShowResolution, tmdb_id: int) -> str | None:
        if state.imdb_id is not None:
            return state.imdb_id
        resolved = await self.resolver.to_other_space(tmdb_id, IdSpace.TMDB)
        return resolved if isinstance(resolved, str) else None

    # ------------------------------------------------------------------
    # Seasons
    # ------------------------------------------------------------------
    async def get_season_episodes(
        self, show: ShowRecord, season_number: int
    ) -> list[EpisodeRecord]:
        """Return the merged episode list of one season.

        Fills in ``show.tmdb_id`` when it can be resolved. Provider failures
        degrade to an empty list; this call never raises RequestError.
        """
        if show.tmdb_id is None and show.imdb_id is not None:
            resolved = await self.resolver.to_other_space(show.imdb_id, IdSpace.IMDB)
            if isinstance(resolved, int):
                show.tmdb_id = resolved

        imdb_episodes, tmdb_episodes = await asyncio.gather(
            self._season_or_empty(self.omdb, show.imdb_id, season_number),
            self._season_or_empty(self.tmdb, show.tmdb_id, season_number),
        )
        episodes = merge_episodes(imdb_episodes, tmdb_episodes)
        if not episodes:
            warn(f"season {season_number} of {show.title!r} has no episode data")
        return episodes

    async def _season_or_empty(
        self, client: MetadataClient, show_id: str | int | None, season_number: int
    ) -> list[ProviderEpisode]:
        if show_id is None:
            return []
        try:
            return await client.season(show_id, season_number)
        except RequestError as exc:
            warn(
                f"season {season_number} unavailable from "
                f"{client.id_space.value}: {exc}"
            )
            return []

    async def get_series(self, show: ShowRecord) -> list[SeasonRecord]:
        """Load every season of *show* sequentially.

        A season that fails for any reason is recorded with no episodes and
        the remaining seasons are still loaded.
        """
        seasons: list[SeasonRecord] = []
        for number in range(1, max(show.total_seasons, 1) + 1):
            if (
                number > 1
                and self.season_pause_every > 0
                and number % self.season_pause_every == 1
            ):
                await asyncio.sleep(self.season_pause)
            try:
                episodes = await self.get_season_episodes(show, number)
            except Exception as exc:  # noqa: BLE001
                error(f"failed to load season {number} of {show.title!r}: {exc}")
                episodes = []
            seasons.append(SeasonRecord(season_number=number, episodes=episodes))
        return seasons
