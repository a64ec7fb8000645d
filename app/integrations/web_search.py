"""Tavily web search integration used to ground brief generation."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

import httpx
from pydantic import BaseModel

from app.config import settings
from app.core.exceptions import (
    APIKeyMissingError,
    QuotaExhaustedError,
    RateLimitedError,
    UpstreamUnavailableError,
)

logger = logging.getLogger(__name__)

API_NAME = "Tavily"


class SearchDocument(BaseModel):
    """One search hit reduced to what the prompt needs."""

    title: str
    url: str
    excerpt: str


class WebSearchClient:
    """Client for the Tavily search API.

    Usable as an async context manager (one connection pool for several
    searches) or directly, in which case each search opens its own client.
    """

    BASE_URL = "https://api.tavily.com"

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key or settings.tavily_api_key
        self.timeout = timeout or settings.search_timeout_seconds
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

        if not self.api_key:
            raise APIKeyMissingError(API_NAME)

    def _new_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.BASE_URL,
            timeout=self.timeout,
            transport=self._transport,
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
        )

    async def __aenter__(self) -> "WebSearchClient":
        self._client = self._new_client()
        return self

    async def __aexit__(self, *args: Any) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    @asynccontextmanager
    async def _session(self) -> AsyncGenerator[httpx.AsyncClient, None]:
        if self._client is not None:
            yield self._client
            return
        async with self._new_client() as client:
            yield client

    async def search(self, query: str, max_results: int | None = None) -> list[SearchDocument]:
        """Search recent news for `query`; returns at most `max_results` documents."""
        limit = max_results or settings.search_max_results
        payload = {
            "query": query,
            "max_results": limit,
            "search_depth": "basic",
            "topic": "news",
            "include_answer": False,
        }
        logger.info("Tavily search request", extra={"query": query, "max_results": limit})

        try:
            async with self._session() as client:
                response = await client.post("/search", json=payload)
        except httpx.TimeoutException as e:
            logger.warning("Tavily request timed out", extra={"query": query})
            raise UpstreamUnavailableError(API_NAME, "Request timed out") from e
        except httpx.HTTPError as e:
            logger.warning("Tavily HTTP error", extra={"query": query, "error": str(e)})
            raise UpstreamUnavailableError(API_NAME, str(e)) from e

        if response.status_code == 429:
            logger.warning("Tavily rate limit hit", extra={"query": query})
            raise RateLimitedError(API_NAME)
        if response.status_code in (402, 432, 433):
            logger.warning("Tavily quota exhausted", extra={"status_code": response.status_code})
            raise QuotaExhaustedError(API_NAME)
        if response.status_code != 200:
            logger.warning(
                "Tavily non-200 response",
                extra={"status_code": response.status_code, "body": response.text[:500]},
            )
            raise UpstreamUnavailableError(API_NAME, f"HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamUnavailableError(API_NAME, "Invalid JSON in response") from e
        results = data.get("results") if isinstance(data, dict) else None

        documents = [
            SearchDocument(
                title=str(item.get("title") or "").strip(),
                url=str(item.get("url") or "").strip(),
                excerpt=str(item.get("content") or "").strip(),
            )
            for item in results or []
            if isinstance(item, dict) and (item.get("title") or item.get("content"))
        ]
        logger.info("Tavily search completed", extra={"query": query, "documents": len(documents)})
        return documents[:limit]
