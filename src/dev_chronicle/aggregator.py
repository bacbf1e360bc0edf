"""Event aggregation and relevance ordering.

Everything here is pure: lists of parsed models in, derived values out.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable, Iterable
from typing import Any, TypeVar

from .classifier import is_content_repo
from .models import (
    Article,
    Event,
    PushEvent,
    PushGroup,
    Repository,
    ZennStats,
)

T = TypeVar("T")

UNKNOWN_REPO = "unknown"


def _repo_name_of(item: Any) -> str | None:
    """Resolve the repository name carried by an event, repo or raw API dict."""
    if isinstance(item, Event):
        return item.repo_name
    if isinstance(item, Repository):
        return item.name
    if isinstance(item, dict):
        repo = item.get("repo")
        if isinstance(repo, dict):
            return repo.get("name")
        name = item.get("name")
        return name if isinstance(name, str) else None
    return None


def sort_by_relevance(
    items: Iterable[T], key: Callable[[T], str | None] | None = None
) -> list[T]:
    """Move content-repository items behind product-repository items.

    This is a stable partition, not a sort: both groups keep their input
    order. Items without a repository name count as product.
    """
    resolve = key or _repo_name_of
    product: list[T] = []
    content: list[T] = []
    for item in items:
        if is_content_repo(resolve(item)):
            content.append(item)
        else:
            product.append(item)
    return product + content


def short_repo_name(full_name: str) -> str:
    """``owner/name`` -> ``name``; bare names are returned as-is."""
    parts = full_name.split("/", 1)
    return parts[1] if len(parts) == 2 and parts[1] else full_name


def group_push_events_by_repo(events: Iterable[Event]) -> dict[str, PushGroup]:
    """Group push events by short repository name.

    Keys keep first-seen order. Commits are appended in processing order,
    not re-sorted by time.
    """
    grouped: dict[str, PushGroup] = {}
    for event in events:
        full_name = event.repo_name or UNKNOWN_REPO
        repo = short_repo_name(full_name)
        commits = list(event.commits) if isinstance(event, PushEvent) else []

        group = grouped.get(repo)
        if group is None:
            grouped[repo] = PushGroup(
                full_name=full_name,
                commits=commits,
                latest_date=event.created_at,
                push_count=1,
            )
            continue
        group.commits.extend(commits)
        # ISO 8601 strings order correctly as plain strings
        if event.created_at > group.latest_date:
            group.latest_date = event.created_at
        group.push_count += 1
    return grouped


def events_of_type(events: Iterable[Event], *types: str) -> list[Event]:
    return [e for e in events if e.type in types]


def count_commits(events: Iterable[Event]) -> int:
    return sum(len(e.commits) for e in events if isinstance(e, PushEvent))


def active_repositories(events: Iterable[Event]) -> list[str]:
    """Unique repository names in first-seen order."""
    seen: dict[str, None] = {}
    for e in events:
        if e.repo_name:
            seen.setdefault(e.repo_name, None)
    return list(seen)


def total_stars(repos: Iterable[Repository]) -> int:
    return sum(r.stargazers_count for r in repos)


def top_languages(repos: Iterable[Repository], limit: int = 5) -> list[tuple[str, int]]:
    """Languages by number of repositories, most common first."""
    counts = Counter(r.language for r in repos if r.language)
    return counts.most_common(limit)


def total_likes(articles: Iterable[Article]) -> int:
    return sum(a.liked_count for a in articles)


def zenn_stats(articles: list[Article]) -> ZennStats:
    return ZennStats(count=len(articles), likes=total_likes(articles))
