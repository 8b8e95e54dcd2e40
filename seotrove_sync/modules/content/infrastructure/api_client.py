"""SEOTrove content API client implementation."""

from __future__ import annotations

import time
from typing import Any
from urllib.parse import quote

import httpx
from loguru import logger
from pydantic import ValidationError

from seotrove_sync.core.config import settings
from seotrove_sync.modules.content.domain.entities import ContentBundle, SourceConfig
from seotrove_sync.modules.content.domain.exceptions import ContentFetchError

EMPTY_CONTENT_MESSAGE = "No generated pages to publish."


class HttpContentApiClient:
    """Fetch content bundles from the SDK content endpoints.

    A shared ``httpx.AsyncClient`` may be passed in; otherwise a client is
    opened per request. ``transport`` is forwarded to per-request clients.
    """

    NEW_CONTENT_PATH = "/content"
    PREVIOUSLY_PUBLISHED_PATH = "/content/previously-published"

    def __init__(
        self,
        *,
        base_url: str | None = None,
        timeout_sec: float | None = None,
        client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.content_api_base_url).rstrip("/")
        self.timeout_sec = timeout_sec or settings.FETCHER_TIMEOUT_SEC
        self._client = client
        self._transport = transport

    async def fetch_new(self, config: SourceConfig) -> ContentBundle:
        return await self._fetch(config, self.NEW_CONTENT_PATH)

    async def fetch_previously_published(self, config: SourceConfig) -> ContentBundle:
        return await self._fetch(config, self.PREVIOUSLY_PUBLISHED_PATH)

    def build_url(self, config: SourceConfig, path: str) -> str:
        return f"{self.base_url}/{quote(config.domain, safe='')}{path}"

    async def _fetch(self, config: SourceConfig, path: str) -> ContentBundle:
        start_time = time.time()
        url = self.build_url(config, path)
        logger.info(f"[{config.domain}] Fetching content from: {url}")

        try:
            response = await self._get(url, params={"installId": config.install_id})
        except httpx.TimeoutException as exc:
            raise ContentFetchError(f"Timeout: {str(exc)}") from exc
        except httpx.HTTPError as exc:
            raise ContentFetchError(f"Error: {str(exc)}") from exc

        duration_ms = int((time.time() - start_time) * 1000)

        if not response.is_success:
            if self._is_empty_content_response(response):
                logger.info(
                    f"[{config.domain}] No generated pages to publish ({duration_ms}ms)"
                )
                return ContentBundle.empty()
            raise ContentFetchError(
                f"API request failed: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
            )

        bundle = self._parse_payload(response)
        logger.info(
            f"[{config.domain}] Content fetched successfully - "
            f"{len(bundle.pages)} pages ({duration_ms}ms)"
        )
        return bundle

    async def _get(self, url: str, params: dict[str, str]) -> httpx.Response:
        headers = {
            "User-Agent": settings.FETCHER_USER_AGENT,
            "Accept": "application/json",
        }
        if self._client is not None:
            return await self._client.get(url, params=params, headers=headers)

        async with httpx.AsyncClient(
            timeout=self.timeout_sec,
            follow_redirects=True,
            transport=self._transport,
        ) as client:
            return await client.get(url, params=params, headers=headers)

    @staticmethod
    def _is_empty_content_response(response: httpx.Response) -> bool:
        if response.status_code != httpx.codes.NOT_FOUND:
            return False
        try:
            payload: Any = response.json()
        except ValueError:
            return False
        return isinstance(payload, dict) and payload.get("error") == EMPTY_CONTENT_MESSAGE

    @staticmethod
    def _parse_payload(response: httpx.Response) -> ContentBundle:
        try:
            payload = response.json()
        except ValueError as exc:
            raise ContentFetchError(
                "Content API returned invalid JSON",
                status_code=response.status_code,
            ) from exc

        if not isinstance(payload, dict):
            raise ContentFetchError(
                "Content API payload must be a JSON object",
                status_code=response.status_code,
            )

        try:
            return ContentBundle.model_validate(payload)
        except ValidationError as exc:
            raise ContentFetchError(
                f"Content API payload is malformed: {exc.error_count()} errors",
                status_code=response.status_code,
            ) from exc
