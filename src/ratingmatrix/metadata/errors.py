"""Error taxonomy for provider requests and show resolution.

- RequestError is raised by the request client once its retry budget is spent
  (or immediately for non-retryable kinds).
- ShowNotFound is the only error that reaches the consumer of the reconciler.
  Search, season and identifier failures degrade to empty results instead.
"""

from enum import Enum


class RequestErrorKind(str, Enum):
    """Classification of a failed provider call."""

    TIMEOUT = "timeout"
    NETWORK = "network"
    RATE_LIMITED = "rate_limited"
    SERVER_ERROR = "server_error"
    CLIENT_ERROR = "client_error"

    @property
    def retryable(self) -> bool:
        """Whether the request client may try again after this kind of failure."""
        return self is not RequestErrorKind.CLIENT_ERROR


class RequestError(Exception):
    """Raised when a provider call fails after exhausting its retries."""

    def __init__(
        self,
        provider: str,
        kind: RequestErrorKind,
        message: str,
        *,
        status_code: int | None = None,
    ) -> None:
        """Initialize the error with the provider name and failure kind."""
        super().__init__(f"{provider}: {message}")
        self.provider = provider
        self.kind = kind
        self.status_code = status_code

    @property
    def retryable(self) -> bool:
        return self.kind.retryable


class ShowNotFound(Exception):
    """Raised when no provider returns a usable record for a show."""

    def __init__(self, show_id: str | int) -> None:
        """Initialize the error with the identifier that could not be resolved."""
        super().__init__(f"Show details not found for {show_id!r}.")
        self.show_id = show_id
