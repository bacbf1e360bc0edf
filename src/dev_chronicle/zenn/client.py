"""Zenn public API client."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..cache import DEFAULT_TTL, FileCache

logger = logging.getLogger(__name__)

BASE_URL = "https://zenn.dev"


class ZennClient:
    """Async client for the Zenn article list endpoint."""

    def __init__(
        self,
        no_cache: bool = False,
        base_url: str | None = None,
        cache_ttl: int = DEFAULT_TTL,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url or BASE_URL,
            headers={"Accept": "application/json"},
            timeout=30.0,
        )
        self._cache: FileCache | None = (
            None if no_cache else FileCache("zenn", ttl=cache_ttl)
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> ZennClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    async def list_articles(
        self, username: str, count: int = 20, order: str = "latest"
    ) -> list[dict[str, Any]]:
        """Latest articles written by ``username``."""
        url = "/api/articles"
        params = {"username": username, "order": order, "count": count}
        if self._cache is not None:
            cached = self._cache.get(url, params)
            if cached is not None:
                return cached

        response = await self._client.get(url, params=params)
        response.raise_for_status()
        data = response.json()
        articles = data.get("articles") if isinstance(data, dict) else None
        if not isinstance(articles, list):
            logger.warning("%s: unexpected Zenn response shape", username)
            articles = []
        if self._cache is not None:
            self._cache.set(url, params, articles)
        return articles
