# WARNING: This settings loader is for LOCAL DEVELOPMENT ONLY.
# Never commit your .env file or share your API keys.
# Ensure .env is listed in .gitignore!

"""Settings loader for provider credentials and request tunables.

Loads OMDb and TMDB credentials from environment variables or .env file.

Required .env keys:
- OMDB_API_KEY
- TMDB_READ_ACCESS_TOKEN (v4 bearer token)

Optional tunables (defaults match the request policy):
- REQUEST_TIMEOUT, REQUEST_RETRIES, RETRY_DELAY
- SEASON_PAUSE, SEASON_PAUSE_EVERY
- SEARCH_LIMIT, SEARCH_POSTER_SIZE, DETAIL_POSTER_SIZE
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class MissingAPIKeyError(Exception):
    """Raised when a required API key is missing from the environment or .env file."""

    def __init__(self, key: str) -> None:
        """Initialize the error with the missing key name."""
        super().__init__(
            f"Missing required API key: {key}\n"
            "Set it in the environment or in a .env file next to where you run "
            "ratingmatrix."
        )
        self.key = key


class Settings(BaseSettings):
    """Provider credentials, endpoints and request policy."""

    OMDB_API_KEY: str | None = None
    TMDB_READ_ACCESS_TOKEN: str | None = None

    OMDB_BASE_URL: str = "https://www.omdbapi.com/"
    TMDB_BASE_URL: str = "https://api.themoviedb.org/3"
    TMDB_IMAGE_BASE: str = "https://image.tmdb.org/t/p"

    REQUEST_TIMEOUT: float = 15.0
    REQUEST_RETRIES: int = 2
    RETRY_DELAY: float = 1.0

    SEASON_PAUSE: float = 0.2
    SEASON_PAUSE_EVERY: int = 3

    SEARCH_LIMIT: int = 10
    SEARCH_POSTER_SIZE: str = "w185"
    DETAIL_POSTER_SIZE: str = "w342"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    def require_keys(self) -> None:
        """Raise MissingAPIKeyError if any required key is missing."""
        required = ["OMDB_API_KEY", "TMDB_READ_ACCESS_TOKEN"]
        for key in required:
            if not getattr(self, key, None):
                raise MissingAPIKeyError(key)
