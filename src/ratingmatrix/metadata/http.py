"""Resilient request client shared by the OMDb and TMDB clients.

Every outbound provider call goes through ``RequestClient.request``:

1. The response cache is consulted by request signature.
2. The call is issued with a wall-clock deadline. An attempt that has not
   answered when the deadline passes is abandoned and counted as a timeout.
3. Failures are classified (see ``RequestErrorKind``). Timeouts, network
   errors, HTTP 429 and HTTP 5xx are retried after a fixed delay until the
   retry budget is spent. Other 4xx responses fail immediately.
4. Positive payloads (as judged by the caller's ``accept`` predicate) are
   written to the cache.
"""

import asyncio
from collections.abc import Callable, Mapping
from http import HTTPStatus
from types import TracebackType
from typing import Any

import httpx

from ratingmatrix.metadata.cache import Payload, ResponseCache, make_signature
from ratingmatrix.metadata.errors import RequestError, RequestErrorKind
from ratingmatrix.utils.debug import debug, warn

DEFAULT_TIMEOUT = 15.0
DEFAULT_RETRIES = 2
DEFAULT_RETRY_DELAY = 1.0


def _always(payload: Payload) -> bool:
    return True


def classify_status(status_code: int) -> RequestErrorKind | None:
    """Map an HTTP status code to an error kind, or None for success."""
    if status_code == HTTPStatus.TOO_MANY_REQUESTS:
        return RequestErrorKind.RATE_LIMITED
    if status_code >= HTTPStatus.INTERNAL_SERVER_ERROR:
        return RequestErrorKind.SERVER_ERROR
    if status_code >= HTTPStatus.BAD_REQUEST:
        return RequestErrorKind.CLIENT_ERROR
    return None


class RequestClient:
    """Issues provider GET requests with timeout, retry and memoization."""

    def __init__(
        self,
        cache: ResponseCache,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_RETRIES,
        retry_delay: float = DEFAULT_RETRY_DELAY,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            cache: Session response cache.
            timeout: Per-attempt deadline in seconds.
            max_retries: Additional attempts after the first one.
            retry_delay: Fixed pause between attempts in seconds.
            http_client: Optional pre-built httpx client. When omitted one is
                created and closed by ``aclose``.
        """
        self.cache = cache
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=timeout)

    async def __aenter__(self) -> "RequestClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying httpx client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    async def request(
        self,
        provider: str,
        url: str,
        *,
        path: str = "",
        params: Mapping[str, Any] | None = None,
        credentials: Mapping[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
        accept: Callable[[Payload], bool] = _always,
        retries: int | None = None,
    ) -> Payload:
        """Fetch a JSON object from a provider.

        Args:
            provider: Provider name, used in the cache signature and errors.
            url: Absolute URL to request.
            path: Endpoint path used in the cache signature.
            params: Query parameters in canonical order.
            credentials: Extra query parameters (API keys) kept out of the
                cache signature.
            headers: Extra request headers.
            accept: Predicate deciding whether a payload is positive and may
                be cached.
            retries: Retry budget for this call; defaults to ``max_retries``.

        Returns:
            The decoded JSON payload.

        Raises:
            RequestError: When the call fails and no retries remain, or on a
                non-retryable failure.
        """
        params = dict(params or {})
        signature = make_signature(provider, path, params)
        cached = self.cache.get(signature)
        if cached is not None:
            return cached

        query = {**params, **(credentials or {})}
        remaining = self.max_retries if retries is None else retries
        while True:
            try:
                payload = await self._attempt(provider, url, query, headers)
            except RequestError as exc:
                if not exc.retryable or remaining <= 0:
                    raise
                remaining -= 1
                warn(
                    f"{provider} request failed ({exc.kind.value}); "
                    f"retrying, {remaining} retries left"
                )
                await asyncio.sleep(self.retry_delay)
                continue
            if accept(payload):
                self.cache.put(signature, payload)
            return payload

    async def _attempt(
        self,
        provider: str,
        url: str,
        query: Mapping[str, Any],
        headers: Mapping[str, str] | None,
    ) -> Payload:
        """Run a single attempt and classify its outcome."""
        debug(f"{provider} GET {url}")
        try:
            response = await asyncio.wait_for(
                self._client.get(url, params=query, headers=headers),
                timeout=self.timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            raise RequestError(
                provider, RequestErrorKind.TIMEOUT, "request timed out"
            ) from exc
        except httpx.TransportError as exc:
            raise RequestError(
                provider, RequestErrorKind.NETWORK, f"network error: {exc}"
            ) from exc

        kind = classify_status(response.status_code)
        if kind is not None:
            raise RequestError(
                provider,
                kind,
                f"HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise RequestError(
                provider,
                RequestErrorKind.SERVER_ERROR,
                "response body is not JSON",
                status_code=response.status_code,
            ) from exc
        if not isinstance(payload, dict):
            raise RequestError(
                provider,
                RequestErrorKind.SERVER_ERROR,
                "response body is not a JSON object",
                status_code=response.status_code,
            )
        return payload
