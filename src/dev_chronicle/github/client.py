"""GitHub REST and GraphQL API client."""

from __future__ import annotations

import asyncio
import logging
from typing import Any
from urllib.parse import quote

import httpx

from ..cache import DEFAULT_TTL, FileCache
from .rate_limit import RateLimitMonitor

logger = logging.getLogger(__name__)

BASE_URL = "https://api.github.com"

CONTRIBUTIONS_QUERY = """
query($username: String!) {
  user(login: $username) {
    contributionsCollection {
      contributionCalendar {
        totalContributions
        weeks {
          contributionDays {
            date
            contributionCount
            contributionLevel
          }
        }
      }
    }
  }
}
"""


class GitHubClient:
    """Async GitHub client for the public profile endpoints.

    A token is optional for REST calls; the contribution calendar needs
    GraphQL and is only requested when one is configured.
    """

    def __init__(
        self,
        token: str | None = None,
        concurrency: int = 5,
        no_cache: bool = False,
        base_url: str | None = None,
        cache_ttl: int = DEFAULT_TTL,
    ) -> None:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._token = token
        self._client = httpx.AsyncClient(
            base_url=base_url or BASE_URL,
            headers=headers,
            timeout=30.0,
        )
        self._rate_limit = RateLimitMonitor()
        self._semaphore = asyncio.Semaphore(concurrency)
        self._cache: FileCache | None = (
            None if no_cache else FileCache("github", ttl=cache_ttl)
        )

    @property
    def has_token(self) -> bool:
        return bool(self._token)

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    async def _get(
        self, url: str, params: dict[str, Any] | None = None
    ) -> httpx.Response:
        async with self._semaphore:
            await self._rate_limit.wait_if_needed()
            response = await self._client.get(url, params=params)
            self._rate_limit.update(response)
            response.raise_for_status()
            return response

    async def _cached_get_json(
        self, url: str, params: dict[str, Any] | None = None
    ) -> Any:
        """GET with file cache support. Returns parsed JSON."""
        if self._cache is not None:
            cached = self._cache.get(url, params)
            if cached is not None:
                return cached
        response = await self._get(url, params)
        data = response.json()
        if self._cache is not None:
            self._cache.set(url, params, data)
        return data

    async def get_user(self, username: str) -> dict[str, Any]:
        """Fetch a user profile. Raises ``httpx.HTTPStatusError`` (404) for unknown users."""
        return await self._cached_get_json(f"/users/{quote(username, safe='')}")

    async def list_events(self, username: str, per_page: int = 100) -> list[dict[str, Any]]:
        """Recent public events, newest first as returned by GitHub."""
        data = await self._cached_get_json(
            f"/users/{quote(username, safe='')}/events",
            params={"per_page": per_page},
        )
        return data if isinstance(data, list) else []

    async def list_repos(self, username: str, per_page: int = 30) -> list[dict[str, Any]]:
        """Most recently updated public repositories."""
        data = await self._cached_get_json(
            f"/users/{quote(username, safe='')}/repos",
            params={"sort": "updated", "per_page": per_page},
        )
        return data if isinstance(data, list) else []

    async def get_contribution_calendar(self, username: str) -> dict[str, Any] | None:
        """Raw ``contributionCalendar`` object, or None without a token or data."""
        if not self._token:
            return None
        variables = {"username": username}
        if self._cache is not None:
            cached = self._cache.get("/graphql", variables)
            if cached is not None:
                return cached

        async with self._semaphore:
            response = await self._client.post(
                "/graphql",
                json={"query": CONTRIBUTIONS_QUERY, "variables": variables},
            )
            self._rate_limit.update(response)
            response.raise_for_status()

        data = response.json()
        user = (data.get("data") or {}).get("user") or {}
        calendar = (user.get("contributionsCollection") or {}).get(
            "contributionCalendar"
        )
        if not calendar:
            logger.info("%s: no contribution calendar in GraphQL response", username)
            return None
        if self._cache is not None:
            self._cache.set("/graphql", variables, calendar)
        return calendar
