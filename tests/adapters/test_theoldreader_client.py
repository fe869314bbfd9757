from __future__ import annotations

import asyncio
from collections.abc import Callable  # noqa: TC003

import httpx
import pytest

from readsync.adapters.http_resilience import ResilienceConfig, ResilientClient, RetryPolicy
from readsync.adapters.theoldreader import TheOldReaderAPIError, TheOldReaderFetcher
from readsync.domain.ports.fetching import UpdateRequest

FEED_URL = "http://theoldreader.com/reader/atom/feed/1"


def _make_client_factory(
    handler: Callable[[httpx.Request], httpx.Response],
) -> Callable[[ResilienceConfig], ResilientClient]:
    async def async_handler(request: httpx.Request) -> httpx.Response:
        return handler(request)

    def factory(resilience: ResilienceConfig) -> ResilientClient:
        client = ResilientClient(resilience)
        client._client = httpx.AsyncClient(transport=httpx.MockTransport(async_handler))  # noqa: SLF001  # type: ignore[reportPrivateUsage]
        return client

    return factory


def _fetcher(
    handler: Callable[[httpx.Request], httpx.Response],
    *,
    retry: RetryPolicy | None = None,
) -> TheOldReaderFetcher:
    return TheOldReaderFetcher(
        resilience=ResilienceConfig(name="theoldreader-test", retry=retry or RetryPolicy(total=0)),
        client_factory=_make_client_factory(handler),
    )


def test_fetch_sends_authorization_and_returns_body() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, content=b"<feed/>")

    fetcher = _fetcher(handler)
    result = fetcher(UpdateRequest(source=FEED_URL, auth_value="GoogleLogin auth=secret"))

    assert result.data == b"<feed/>"
    assert result.http_status == 200
    assert result.source == FEED_URL
    assert seen[0].headers["Authorization"] == "GoogleLogin auth=secret"
    assert "atom+xml" in seen[0].headers["Accept"]


def test_fetch_not_modified_has_no_body() -> None:
    fetcher = _fetcher(lambda _request: httpx.Response(304))

    result = fetcher(UpdateRequest(source=FEED_URL))

    assert result.data is None
    assert result.http_status == 304


def test_fetch_error_status_raises() -> None:
    fetcher = _fetcher(lambda _request: httpx.Response(401, content=b"Unauthorized"))

    with pytest.raises(TheOldReaderAPIError) as excinfo:
        fetcher(UpdateRequest(source=FEED_URL))

    assert excinfo.value.status_code == 401


def test_fetch_transport_error_is_wrapped() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    fetcher = _fetcher(handler)

    with pytest.raises(TheOldReaderAPIError):
        fetcher(UpdateRequest(source=FEED_URL))


def test_fetch_retries_retryable_status() -> None:
    statuses = [503, 200]
    calls: list[int] = []

    def handler(_request: httpx.Request) -> httpx.Response:
        status = statuses[len(calls)]
        calls.append(status)
        return httpx.Response(status, content=b"<feed/>")

    fetcher = _fetcher(handler, retry=RetryPolicy(total=2, backoff_factor=0))

    result = fetcher(UpdateRequest(source=FEED_URL))

    assert calls == [503, 200]
    assert result.http_status == 200


def test_exhausted_retries_return_last_response() -> None:
    calls: list[int] = []

    def handler(_request: httpx.Request) -> httpx.Response:
        calls.append(1)
        return httpx.Response(503)

    fetcher = _fetcher(handler, retry=RetryPolicy(total=1, backoff_factor=0))

    with pytest.raises(TheOldReaderAPIError) as excinfo:
        fetcher(UpdateRequest(source=FEED_URL))

    assert len(calls) == 2
    assert excinfo.value.status_code == 503


def test_feed_id_path_reaches_server_unencoded() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, content=b"<feed/>")

    _fetcher(handler)(UpdateRequest(source=FEED_URL))

    assert seen[0].url.raw_path == b"/reader/atom/feed/1"


def test_resilient_client_uses_configured_timeout() -> None:
    client = ResilientClient(ResilienceConfig(name="timeouts", timeout_seconds=7.5))

    try:
        assert client._client.timeout == httpx.Timeout(7.5)  # noqa: SLF001  # type: ignore[reportPrivateUsage]
    finally:
        asyncio.run(client.aclose())
