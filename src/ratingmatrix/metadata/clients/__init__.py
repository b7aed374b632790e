"""Client implementations for the OMDb and TMDB providers."""

from ratingmatrix.metadata.clients.omdb import OMDbClient
from ratingmatrix.metadata.clients.tmdb import TMDBClient

__all__ = ["OMDbClient", "TMDBClient"]
