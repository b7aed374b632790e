"""Rating classification and season statistics.

Pure functions consumed by whatever renders the reconciled data. Nothing here
touches the network.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from ratingmatrix.metadata.models import EpisodeRecord, SeasonRecord

LIMITED_DATA_THRESHOLD = 50.0


class RatingBucket(str, Enum):
    """Quality buckets, highest first."""

    ABSOLUTE_CINEMA = "rating-absolute-cinema"
    AWESOME = "rating-awesome"
    GREAT = "rating-great"
    GOOD = "rating-good"
    REGULAR = "rating-regular"
    BAD = "rating-bad"
    GARBAGE = "rating-garbage"
    NA = "rating-na"


@dataclass(frozen=True)
class RatingCategory:
    bucket: RatingBucket
    label: str


# Checked top-down; the first threshold met wins.
_THRESHOLDS: tuple[tuple[float, RatingCategory], ...] = (
    (9.5, RatingCategory(RatingBucket.ABSOLUTE_CINEMA, "Absolute Cinema")),
    (8.5, RatingCategory(RatingBucket.AWESOME, "Awesome")),
    (7.5, RatingCategory(RatingBucket.GREAT, "Great")),
    (6.5, RatingCategory(RatingBucket.GOOD, "Good")),
    (5.5, RatingCategory(RatingBucket.REGULAR, "Regular")),
    (4.0, RatingCategory(RatingBucket.BAD, "Bad")),
)
_GARBAGE = RatingCategory(RatingBucket.GARBAGE, "Garbage")
_NOT_AVAILABLE = RatingCategory(RatingBucket.NA, "N/A")


def classify(rating: float | None) -> RatingCategory:
    """Map a rating to its quality bucket; None maps to the N/A bucket."""
    if rating is None:
        return _NOT_AVAILABLE
    for threshold, category in _THRESHOLDS:
        if rating >= threshold:
            return category
    return _GARBAGE


def format_rating(rating: float | None) -> str:
    """Format a rating with one decimal, or "N/A" when absent."""
    return "N/A" if rating is None else f"{rating:.1f}"


def average_rating(episodes: Iterable[EpisodeRecord]) -> float | None:
    """Return the mean of all non-null episode ratings, or None."""
    ratings = [ep.rating for ep in episodes if ep.rating is not None]
    if not ratings:
        return None
    return sum(ratings) / len(ratings)


@dataclass(frozen=True)
class SeriesSummary:
    """Aggregate view over every loaded season of a series."""

    episode_count: int
    rated_count: int
    average_rating: float | None
    missing_percentage: float

    @property
    def limited_data(self) -> bool:
        """True when more than half of the episodes have no rating."""
        return self.missing_percentage > LIMITED_DATA_THRESHOLD


def summarize_series(seasons: Iterable[SeasonRecord]) -> SeriesSummary:
    """Summarize ratings across *seasons*."""
    episodes = [ep for season in seasons for ep in season.episodes]
    rated = [ep for ep in episodes if ep.rating is not None]
    missing = 0.0
    if episodes:
        missing = (len(episodes) - len(rated)) / len(episodes) * 100
    return SeriesSummary(
        episode_count=len(episodes),
        rated_count=len(rated),
        average_rating=average_rating(rated),
        missing_percentage=missing,
    )
