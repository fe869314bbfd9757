"""HTTP fetcher for TheOldReader Atom streams."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

import httpx

from readsync.adapters.http_resilience import ResilienceConfig, ResilientClient
from readsync.config.theoldreader import get_theoldreader_config
from readsync.domain.ports.fetching import FeedFetcher, UpdateRequest, UpdateResult

if TYPE_CHECKING:
    from collections.abc import Callable

log = getLogger(__name__)

ATOM_ACCEPT = "application/atom+xml, application/xml;q=0.9, */*;q=0.1"


def _default_resilience_config() -> ResilienceConfig:
    return get_theoldreader_config().resilience


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


class TheOldReaderAPIError(RuntimeError):
    """Raised when TheOldReader answers a feed request with an error status."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass(slots=True)
class TheOldReaderFetcher:
    resilience: ResilienceConfig = field(default_factory=_default_resilience_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )

    def __call__(self, request: UpdateRequest) -> UpdateResult:
        return asyncio.run(self._fetch_async(request))

    async def _fetch_async(self, request: UpdateRequest) -> UpdateResult:
        headers = {"Accept": ATOM_ACCEPT}
        if request.auth_value:
            headers["Authorization"] = request.auth_value

        async with self.client_factory(self.resilience) as client:
            try:
                response = await client.get(
                    request.source, headers=headers, follow_redirects=True
                )
            except httpx.HTTPError as exc:
                log.error(f"Request to {request.source} failed: {exc}")
                raise TheOldReaderAPIError(str(exc)) from exc

        if response.status_code == httpx.codes.NOT_MODIFIED:
            return UpdateResult(source=request.source, data=None, http_status=response.status_code)
        if response.is_error:
            log.error(f"TheOldReader returned {response.status_code} for {request.source}")
            raise TheOldReaderAPIError(
                f"Unexpected status {response.status_code} for {request.source}",
                status_code=response.status_code,
            )
        return UpdateResult(
            source=request.source,
            data=response.content,
            http_status=response.status_code,
        )


if TYPE_CHECKING:
    _fetcher_check: FeedFetcher = TheOldReaderFetcher()
