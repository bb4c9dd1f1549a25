"""HTTP retrieval of partitioned listing pages."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict

import httpx
import structlog

from ..config import HttpConfig, SourceConfig
from ..errors import FetchError


@dataclass(slots=True)
class FetchResponse:
    """Standardised response wrapper."""

    partition: str
    url: str
    status_code: int
    text: str
    headers: Dict[str, str]
    raw: httpx.Response | None = field(repr=False, default=None)


class DocumentFetcher:
    """Fetch one listing page per partition key."""

    def __init__(
        self,
        source: SourceConfig,
        http: HttpConfig,
        logger: structlog.BoundLogger | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self.source = source
        self.http = http
        self.logger = logger or structlog.get_logger("series_watch.fetcher")
        self._client = client or httpx.Client(
            follow_redirects=True,
            timeout=http.timeout,
            headers={"User-Agent": http.user_agent},
        )

    def __enter__(self) -> "DocumentFetcher":
        return self

    def __exit__(self, *_exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def build_params(self, partition: str) -> dict[str, str]:
        params = dict(self.source.extra_params)
        params[self.source.partition_param] = partition
        return params

    def fetch(self, partition: str) -> FetchResponse:
        params = self.build_params(partition)
        url = self.source.listing_url
        attempts = self.http.retry_on_fail + 1
        last_error: Exception | None = None
        for attempt in range(1, attempts + 1):
            try:
                response = self._client.request(
                    method="GET",
                    url=url,
                    params=params,
                    timeout=self.http.timeout,
                )
            except httpx.HTTPError as exc:
                self.logger.warning(
                    "fetch_error",
                    url=url,
                    partition=partition,
                    attempt=attempt,
                    error=str(exc),
                )
                last_error = exc
                continue
            if self._is_failure(response):
                self.logger.warning(
                    "fetch_unexpected_status",
                    url=str(response.url),
                    partition=partition,
                    attempt=attempt,
                    status=response.status_code,
                )
                last_error = FetchError(
                    f"unexpected status code {response.status_code} for URL {response.url}",
                    partition=partition,
                )
                continue
            return FetchResponse(
                partition=partition,
                url=str(response.url),
                status_code=response.status_code,
                text=response.text,
                headers=dict(response.headers),
                raw=response,
            )

        if isinstance(last_error, FetchError):
            raise last_error
        raise FetchError(
            f"failed to fetch URL {url} for partition {partition}: {last_error}",
            partition=partition,
        ) from last_error

    @staticmethod
    def _is_failure(response: Any) -> bool:
        return getattr(response, "status_code", 0) != httpx.codes.OK


__all__ = ["DocumentFetcher", "FetchResponse"]
