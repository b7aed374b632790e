"""OMDb/TMDB reconciliation: request client, provider clients and merge logic."""

from ratingmatrix.metadata.errors import RequestError, RequestErrorKind, ShowNotFound
from ratingmatrix.metadata.models import (
    EpisodeRecord,
    IdSpace,
    RatingSource,
    SearchHit,
    SeasonRecord,
    ShowRecord,
)
from ratingmatrix.metadata.reconciler import Reconciler
from ratingmatrix.metadata.session import open_session

__all__ = [
    "EpisodeRecord",
    "IdSpace",
    "RatingSource",
    "Reconciler",
    "RequestError",
    "RequestErrorKind",
    "SearchHit",
    "SeasonRecord",
    "ShowNotFound",
    "ShowRecord",
    "open_session",
]
