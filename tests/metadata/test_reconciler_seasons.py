"""Tests for season and series loading in the Reconciler."""

import asyncio

import httpx
import pytest
import respx

from ratingmatrix.metadata import reconciler as reconciler_module
from ratingmatrix.metadata.models import (
    EpisodeRecord,
    IdSpace,
    ProviderEpisode,
    RatingSource,
    ShowRecord,
)
from ratingmatrix.metadata.reconciler import (
    Reconciler,
    merge_episode,
    merge_episodes,
)
from ratingmatrix.metadata.resolver import IdentifierResolver
from ratingmatrix.metadata.utils import load_fixture

OMDB_URL = "https://www.omdbapi.com/"
TMDB_URL = "https://api.themoviedb.org/3"


def breaking_bad(**overrides: object) -> ShowRecord:
    fields: dict[str, object] = {
        "imdb_id": "tt0903747",
        "tmdb_id": 1396,
        "title": "Breaking Bad",
        "total_seasons": 5,
        "rating_source": RatingSource.IMDB,
    }
    fields.update(overrides)
    return ShowRecord(**fields)


def mock_seasons(respx_mock: respx.MockRouter) -> None:
    respx_mock.get(OMDB_URL, params={"i": "tt0903747", "Season": "1"}).mock(
        return_value=httpx.Response(
            200, json=load_fixture("omdb", "season_breaking_bad_1")
        )
    )
    respx_mock.get(f"{TMDB_URL}/tv/1396/season/1").mock(
        return_value=httpx.Response(
            200, json=load_fixture("tmdb", "season_breaking_bad_1")
        )
    )


@pytest.mark.asyncio
async def test_breaking_bad_end_to_end(
    respx_mock: respx.MockRouter, reconciler: Reconciler
) -> None:
    """Search, resolve and load season one of Breaking Bad."""
    respx_mock.get(OMDB_URL, params={"s": "Breaking Bad"}).mock(
        return_value=httpx.Response(200, json=load_fixture("omdb", "search_breaking_bad"))
    )
    respx_mock.get(OMDB_URL, params={"i": "tt0903747", "plot": "short"}).mock(
        return_value=httpx.Response(200, json=load_fixture("omdb", "show_breaking_bad"))
    )
    respx_mock.get(f"{TMDB_URL}/find/tt0903747").mock(
        return_value=httpx.Response(200, json=load_fixture("tmdb", "find_breaking_bad"))
    )
    mock_seasons(respx_mock)

    hits = await reconciler.search("Breaking Bad")
    assert str(hits[0].primary_id).startswith("tt")

    record = await reconciler.get_show(hits[0].primary_id)
    assert record.total_seasons == 5
    assert record.rating_source is RatingSource.IMDB

    episodes = await reconciler.get_season_episodes(record, 1)
    assert [ep.episode_number for ep in episodes] == [1, 2, 3, 4, 5, 6, 7]
    assert all(ep.rating is not None for ep in episodes)
    assert all(ep.rating_source is RatingSource.IMDB for ep in episodes)
    assert episodes[0].rating == 9.0
    assert episodes[0].title == "Pilot"


@pytest.mark.asyncio
async def test_tmdb_id_is_filled_in_lazily(
    respx_mock: respx.MockRouter, reconciler: Reconciler
) -> None:
    respx_mock.get(f"{TMDB_URL}/find/tt0903747").mock(
        return_value=httpx.Response(200, json=load_fixture("tmdb", "find_breaking_bad"))
    )
    mock_seasons(respx_mock)
    show = breaking_bad(tmdb_id=None)
    episodes = await reconciler.get_season_episodes(show, 1)
    assert show.tmdb_id == 1396
    assert len(episodes) == 7


@pytest.mark.asyncio
async def test_omdb_list_used_when_tmdb_fails(
    respx_mock: respx.MockRouter, reconciler: Reconciler
) -> None:
    respx_mock.get(OMDB_URL, params={"i": "tt0903747", "Season": "1"}).mock(
        return_value=httpx.Response(
            200, json=load_fixture("omdb", "season_breaking_bad_1")
        )
    )
    respx_mock.get(f"{TMDB_URL}/tv/1396/season/1").mock(
        return_value=httpx.Response(503)
    )
    episodes = await reconciler.get_season_episodes(breaking_bad(), 1)
    assert len(episodes) == 7
    assert all(ep.rating_source is RatingSource.IMDB for ep in episodes)


@pytest.mark.asyncio
async def test_tmdb_ratings_used_when_omdb_fails(
    respx_mock: respx.MockRouter, reconciler: Reconciler
) -> None:
    respx_mock.get(OMDB_URL).mock(side_effect=httpx.ConnectError("down"))
    respx_mock.get(f"{TMDB_URL}/tv/1396/season/1").mock(
        return_value=httpx.Response(
            200, json=load_fixture("tmdb", "season_breaking_bad_1")
        )
    )
    episodes = await reconciler.get_season_episodes(breaking_bad(), 1)
    assert episodes[0].rating == 8.1
    assert all(ep.rating_source is RatingSource.TMDB for ep in episodes)


@pytest.mark.asyncio
async def test_both_providers_empty(
    respx_mock: respx.MockRouter, reconciler: Reconciler
) -> None:
    respx_mock.get(OMDB_URL).mock(
        return_value=httpx.Response(200, json=load_fixture("omdb", "not_found"))
    )
    respx_mock.get(f"{TMDB_URL}/tv/1396/season/9").mock(
        return_value=httpx.Response(404)
    )
    assert await reconciler.get_season_episodes(breaking_bad(), 9) == []


class _BarrierClient:
    """Season stub that only answers once its peer has been called too."""

    def __init__(self, mine: asyncio.Event, peer: asyncio.Event, id_space: IdSpace):
        self.mine = mine
        self.peer = peer
        self.id_space = id_space

    async def season(self, show_id: object, season_number: int) -> list[ProviderEpisode]:
        self.mine.set()
        await self.peer.wait()
        rating = 9.0 if self.id_space is IdSpace.IMDB else 7.0
        return [
            ProviderEpisode(episode_number=1, title="One", rating=rating, vote_count=5)
        ]


@pytest.mark.asyncio
async def test_providers_are_queried_concurrently(resolver: IdentifierResolver) -> None:
    omdb_called, tmdb_called = asyncio.Event(), asyncio.Event()
    reconciler = Reconciler(
        _BarrierClient(omdb_called, tmdb_called, IdSpace.IMDB),  # type: ignore[arg-type]
        _BarrierClient(tmdb_called, omdb_called, IdSpace.TMDB),  # type: ignore[arg-type]
        resolver,
    )
    episodes = await asyncio.wait_for(
        reconciler.get_season_episodes(breaking_bad(), 1), timeout=1
    )
    assert episodes[0].rating == 9.0


@pytest.mark.asyncio
async def test_get_series_degrades_failed_season(
    reconciler: Reconciler, monkeypatch: pytest.MonkeyPatch
) -> None:
    async def fake_season(show: ShowRecord, number: int) -> list[EpisodeRecord]:
        if number == 2:
            raise RuntimeError("boom")
        return [EpisodeRecord(episode_number=1, title=f"S{number}E1", rating=8.0)]

    monkeypatch.setattr(reconciler, "get_season_episodes", fake_season)
    seasons = await reconciler.get_series(breaking_bad(total_seasons=3))
    assert [s.season_number for s in seasons] == [1, 2, 3]
    assert seasons[1].episodes == []
    assert seasons[2].episodes[0].title == "S3E1"


@pytest.mark.asyncio
async def test_get_series_pauses_every_third_season(
    reconciler: Reconciler, monkeypatch: pytest.MonkeyPatch
) -> None:
    loaded: list[int] = []
    pauses: list[int] = []

    async def fake_season(show: ShowRecord, number: int) -> list[EpisodeRecord]:
        loaded.append(number)
        return []

    async def fake_sleep(delay: float) -> None:
        pauses.append(loaded[-1] + 1)

    monkeypatch.setattr(reconciler, "get_season_episodes", fake_season)
    monkeypatch.setattr(reconciler_module.asyncio, "sleep", fake_sleep)
    seasons = await reconciler.get_series(breaking_bad(total_seasons=7))
    assert loaded == [1, 2, 3, 4, 5, 6, 7]
    assert pauses == [4, 7]
    assert len(seasons) == 7


class TestMergeEpisode:
    """Episode-level merge precedence."""

    def test_imdb_rating_wins(self) -> None:
        merged = merge_episode(
            ProviderEpisode(episode_number=3, title="Skeleton", rating=6.0, vote_count=80),
            ProviderEpisode(episode_number=3, title="Other", rating=8.7),
        )
        assert merged.rating == 8.7
        assert merged.rating_source is RatingSource.IMDB
        assert merged.title == "Skeleton"

    def test_zero_vote_tmdb_rating_is_absent(self) -> None:
        merged = merge_episode(
            ProviderEpisode(episode_number=1, title="New", rating=0.0, vote_count=0),
            None,
        )
        assert merged.rating is None
        assert merged.rating_source is RatingSource.NONE

    def test_tmdb_rating_with_votes(self) -> None:
        merged = merge_episode(
            ProviderEpisode(episode_number=1, title="One", rating=7.4, vote_count=3),
            ProviderEpisode(episode_number=1, title="One"),
        )
        assert merged.rating == 7.4
        assert merged.rating_source is RatingSource.TMDB

    def test_skeleton_keeps_tmdb_numbering_and_gaps(self) -> None:
        merged = merge_episodes(
            [ProviderEpisode(episode_number=n, title=f"I{n}", rating=8.0) for n in (1, 2, 3)],
            [ProviderEpisode(episode_number=n, title=f"T{n}") for n in (1, 3)],
        )
        assert [ep.episode_number for ep in merged] == [1, 3]
        assert [ep.title for ep in merged] == ["T1", "T3"]

    def test_both_empty(self) -> None:
        assert merge_episodes([], []) == []
