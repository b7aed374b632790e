"""In-memory response cache for provider requests.

One cache lives for the length of a session and is handed to the request
client explicitly, so each test can start from an empty instance.

- Keys are request signatures: provider name plus the exact query string
  (see ``make_signature``). Parameter order is part of the key, so callers
  must build their parameters in a fixed order.
- Entries are write-once. A signature that already holds a payload is never
  overwritten.
- Only positive provider responses are stored. The request client decides
  what counts as positive using a per-provider predicate.
- Nothing is evicted; a session issues a few dozen distinct queries.

Not thread-safe. The cache is only touched from the event loop thread.
"""

from collections.abc import Mapping
from typing import Any
from urllib.parse import urlencode

from ratingmatrix.utils.debug import debug

Payload = dict[str, Any]


def make_signature(provider: str, path: str, params: Mapping[str, Any]) -> str:
    """Build the cache key for a provider request.

    Args:
        provider: Provider name (e.g. "omdb", "tmdb").
        path: Endpoint path relative to the provider base URL ("" for OMDb).
        params: Query parameters excluding credentials, in canonical order.

    Returns:
        A string such as ``"omdb:?i=tt0903747&Season=1"``.
    """
    return f"{provider}:{path}?{urlencode(list(params.items()))}"


class ResponseCache:
    """Append-only mapping from request signature to provider payload."""

    def __init__(self) -> None:
        self._entries: dict[str, Payload] = {}

    def get(self, signature: str) -> Payload | None:
        """Return the cached payload for *signature*, or None when absent."""
        payload = self._entries.get(signature)
        if payload is not None:
            debug(f"cache hit: {signature}")
        return payload

    def put(self, signature: str, payload: Payload) -> None:
        """Store *payload* under *signature* unless the signature is already cached."""
        if signature in self._entries:
            return
        self._entries[signature] = payload

    def __contains__(self, signature: object) -> bool:
        return signature in self._entries

    def __len__(self) -> int:
        return len(self._entries)
