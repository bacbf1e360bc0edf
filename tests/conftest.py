"""Shared fixtures: raw GitHub / Zenn payloads shaped like the public APIs."""

from __future__ import annotations

import pytest

from dev_chronicle.models import (
    Article,
    ContributionCalendar,
    GitHubData,
    Profile,
    Repository,
    ZennData,
    parse_events,
)


def push(repo: str, created_at: str, *messages: str) -> dict:
    return {
        "type": "PushEvent",
        "repo": {"name": repo},
        "created_at": created_at,
        "payload": {
            "commits": [
                {"sha": f"{repo}-{i}", "message": m} for i, m in enumerate(messages)
            ]
        },
    }


def pull_request(repo: str, created_at: str, action: str = "opened", **pr) -> dict:
    return {
        "type": "PullRequestEvent",
        "repo": {"name": repo},
        "created_at": created_at,
        "payload": {"action": action, "pull_request": pr},
    }


@pytest.fixture
def raw_profile():
    return {
        "login": "octocat",
        "name": "The Octocat",
        "avatar_url": "https://avatars.githubusercontent.com/u/1",
        "bio": "Dev | https://example.com | Twitter: @octo",
        "location": "Tokyo",
        "public_repos": 8,
        "followers": 120,
        "following": 3,
        "site_admin": False,
    }


@pytest.fixture
def raw_events():
    return [
        push("octocat/zenn-content", "2025-01-06T10:00:00Z", "add article"),
        push("octocat/app", "2025-01-05T09:00:00Z", "feat: login\n\nlong body", "fix: typo"),
        pull_request(
            "octocat/app",
            "2025-01-05T08:00:00Z",
            title="Add login",
            html_url="https://github.com/octocat/app/pull/1",
            number=1,
        ),
        push("octocat/app", "2025-01-07T09:00:00Z", "chore: bump"),
        {"type": "IssuesEvent", "repo": {"name": "octocat/app"},
         "created_at": "2025-01-04T00:00:00Z", "payload": {"action": "opened"}},
        {"type": "WatchEvent", "repo": {"name": "other/lib"},
         "created_at": "2025-01-03T00:00:00Z", "payload": {"action": "started"}},
    ]


@pytest.fixture
def raw_repos():
    return [
        {"name": "app", "description": "An app", "language": "TypeScript",
         "stargazers_count": 10, "forks_count": 2, "updated_at": "2025-01-07T00:00:00Z",
         "html_url": "https://github.com/octocat/app"},
        {"name": "zenn-content", "description": None, "language": None,
         "stargazers_count": 1, "forks_count": 0, "updated_at": "2025-01-06T00:00:00Z",
         "html_url": "https://github.com/octocat/zenn-content"},
        {"name": "cli", "description": "x" * 100, "language": "Go",
         "stargazers_count": 30, "forks_count": 5, "updated_at": "2025-01-01T00:00:00Z",
         "html_url": "https://github.com/octocat/cli"},
        {"name": "web", "description": "Site", "language": "TypeScript",
         "stargazers_count": 0, "forks_count": 0, "updated_at": "2024-12-01T00:00:00Z",
         "html_url": "https://github.com/octocat/web"},
    ]


@pytest.fixture
def raw_calendar():
    levels = ["NONE", "FIRST_QUARTILE", "SECOND_QUARTILE", "THIRD_QUARTILE", "FOURTH_QUARTILE"]
    return {
        "totalContributions": 42,
        "weeks": [
            {
                "contributionDays": [
                    {
                        "date": f"2025-{1 + w // 5:02d}-{1 + (w % 5) * 5 + d // 2:02d}",
                        "contributionCount": d,
                        "contributionLevel": levels[d % 5],
                    }
                    for d in range(7)
                ]
            }
            for w in range(30)
        ],
    }


@pytest.fixture
def github_data(raw_profile, raw_events, raw_repos, raw_calendar):
    return GitHubData(
        profile=Profile.from_api(raw_profile),
        events=parse_events(raw_events),
        repos=[Repository.from_api(r) for r in raw_repos],
        contributions=ContributionCalendar.from_graphql(raw_calendar),
    )


@pytest.fixture
def raw_articles():
    return [
        {"title": "Rust入門", "slug": "rust", "emoji": "🦀", "article_type": "tech",
         "liked_count": 12, "published_at": "2025-01-03T10:00:00+09:00",
         "path": "/catnose/articles/rust", "topics": [{"name": "rust"}]},
        {"title": "考えごと", "slug": "idea", "emoji": "💡", "article_type": "idea",
         "liked_count": 0, "published_at": "2024-12-20T10:00:00+09:00",
         "path": "/catnose/articles/idea"},
        {"title": "Go tips", "slug": "go", "emoji": "🐹", "article_type": "tech",
         "liked_count": 3, "published_at": "2024-12-01T10:00:00+09:00",
         "path": "/catnose/articles/go", "topics": ["go", "tips", "cli", "extra"]},
    ]


@pytest.fixture
def zenn_data(raw_articles):
    return ZennData(articles=[Article.from_api(a) for a in raw_articles])
