"""Fetch orchestration: concurrent upstream calls with per-section degradation."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

import httpx

from .aggregator import zenn_stats
from .card import CardData, build_card_data
from .config import Settings
from .github.client import GitHubClient
from .models import (
    Article,
    ContributionCalendar,
    GitHubData,
    Profile,
    Repository,
    ZennData,
    parse_events,
)
from .zenn.client import ZennClient

logger = logging.getLogger(__name__)

EMPTY_ZENN_MESSAGE = "Zenn: 記事が見つかりませんでした"


class UserNotFoundError(Exception):
    """The requested GitHub user does not exist."""

    def __init__(self, username: str) -> None:
        super().__init__(f"GitHubユーザー「{username}」が見つかりません")
        self.username = username


@dataclass
class ReportData:
    github: GitHubData | None = None
    zenn: ZennData | None = None
    errors: list[str] = field(default_factory=list)


def github_client_from_settings(settings: Settings) -> GitHubClient:
    return GitHubClient(
        token=settings.github_token,
        no_cache=settings.no_cache,
        base_url=settings.github_api_base_url,
        cache_ttl=settings.cache_ttl,
    )


def zenn_client_from_settings(settings: Settings) -> ZennClient:
    return ZennClient(
        no_cache=settings.no_cache,
        base_url=settings.zenn_api_base_url,
        cache_ttl=settings.cache_ttl,
    )


async def fetch_github_data(
    client: GitHubClient, username: str, errors: list[str] | None = None
) -> GitHubData:
    """Fetch profile, events, repos and the contribution calendar concurrently.

    Only the profile is mandatory. Event and repository failures degrade to
    empty lists (noted in ``errors`` when given); a missing calendar is not
    an error at all.
    """
    results = await asyncio.gather(
        client.get_user(username),
        client.list_events(username),
        client.list_repos(username),
        client.get_contribution_calendar(username),
        return_exceptions=True,
    )
    profile, events, repos, calendar = results

    if isinstance(profile, httpx.HTTPStatusError):
        if profile.response.status_code == 404:
            raise UserNotFoundError(username) from profile
        raise profile
    if isinstance(profile, BaseException):
        raise profile

    if isinstance(events, Exception):
        logger.warning("Error fetching events for %s: %s", username, events)
        if errors is not None:
            errors.append("GitHub: イベントの取得に失敗しました")
        events = []
    if isinstance(repos, Exception):
        logger.warning("Error fetching repos for %s: %s", username, repos)
        if errors is not None:
            errors.append("GitHub: リポジトリの取得に失敗しました")
        repos = []
    if isinstance(calendar, Exception):
        logger.warning("Error fetching contributions for %s: %s", username, calendar)
        calendar = None

    return GitHubData(
        profile=Profile.from_api(profile),
        events=parse_events(events),
        repos=[Repository.from_api(r) for r in repos if isinstance(r, dict)],
        contributions=(
            ContributionCalendar.from_graphql(calendar) if calendar else None
        ),
    )


async def fetch_zenn_data(client: ZennClient, username: str) -> ZennData:
    raw = await client.list_articles(username)
    return ZennData(
        articles=[Article.from_api(a) for a in raw if isinstance(a, dict)]
    )


def describe_error(source: str, exc: BaseException, username: str) -> str:
    """Human-readable, per-section error line for the report."""
    if isinstance(exc, UserNotFoundError):
        return f"{source}: {exc}"
    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        if source == "Zenn":
            return f"Zenn: Zennユーザー「{username}」の取得に失敗しました ({status})"
        return f"{source}: {source} APIがエラーを返しました ({status})"
    if isinstance(exc, httpx.RequestError):
        return f"{source}: {source} APIへの接続に失敗しました"
    return f"{source}: 取得失敗"


async def gather_report_data(
    github_client: GitHubClient | None,
    zenn_client: ZennClient | None,
    gh_user: str = "",
    zenn_user: str = "",
) -> ReportData:
    """Fetch both sources concurrently; failures become error strings."""
    data = ReportData()
    github_errors: list[str] = []

    async def no_data() -> None:
        return None

    github_task = (
        fetch_github_data(github_client, gh_user, github_errors)
        if gh_user and github_client is not None
        else no_data()
    )
    zenn_task = (
        fetch_zenn_data(zenn_client, zenn_user)
        if zenn_user and zenn_client is not None
        else no_data()
    )
    github, zenn = await asyncio.gather(github_task, zenn_task, return_exceptions=True)

    if isinstance(github, Exception):
        logger.warning("GitHub fetch failed for %s: %s", gh_user, github)
        data.errors.append(describe_error("GitHub", github, gh_user))
    elif github is not None:
        data.github = github
        data.errors.extend(github_errors)

    if isinstance(zenn, Exception):
        logger.warning("Zenn fetch failed for %s: %s", zenn_user, zenn)
        data.errors.append(describe_error("Zenn", zenn, zenn_user))
    elif zenn is not None:
        if zenn.articles:
            data.zenn = zenn
        else:
            data.errors.append(EMPTY_ZENN_MESSAGE)

    return data


async def collect_report_data(
    gh_user: str, zenn_user: str, settings: Settings
) -> ReportData:
    """Open clients from ``settings`` and gather everything for one report."""
    async with github_client_from_settings(settings) as github_client, \
            zenn_client_from_settings(settings) as zenn_client:
        return await gather_report_data(github_client, zenn_client, gh_user, zenn_user)


async def collect_card_data(
    gh_user: str, zenn_user: str, settings: Settings
) -> CardData:
    """Data for the SVG card. Raises ``UserNotFoundError`` for unknown users.

    Zenn is best effort: any failure leaves the Zenn block out.
    """
    async with github_client_from_settings(settings) as github_client, \
            zenn_client_from_settings(settings) as zenn_client:
        github_task = fetch_github_data(github_client, gh_user)
        if zenn_user:
            github, zenn = await asyncio.gather(
                github_task,
                fetch_zenn_data(zenn_client, zenn_user),
                return_exceptions=True,
            )
        else:
            github, zenn = await github_task, None

    if isinstance(github, BaseException):
        raise github
    stats = None
    if isinstance(zenn, Exception):
        logger.warning("Zenn fetch failed for %s: %s", zenn_user, zenn)
    elif zenn is not None:
        stats = zenn_stats(zenn.articles)
    return build_card_data(github, stats, gh_user=gh_user, zenn_user=zenn_user)
