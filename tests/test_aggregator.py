"""Tests for the aggregator module."""

from __future__ import annotations

from dev_chronicle.aggregator import (
    UNKNOWN_REPO,
    active_repositories,
    count_commits,
    events_of_type,
    group_push_events_by_repo,
    short_repo_name,
    sort_by_relevance,
    top_languages,
    total_likes,
    total_stars,
    zenn_stats,
)
from dev_chronicle.models import Event, PushEvent, Repository, parse_events

from .conftest import push


def test_sort_by_relevance_stable_partition():
    items = [
        {"repo": {"name": "u/zenn-content"}, "id": 1},
        {"repo": {"name": "u/my-app"}, "id": 2},
        {"repo": {"name": "u/my-blog"}, "id": 3},
        {"repo": {"name": "u/api-server"}, "id": 4},
    ]
    assert [e["id"] for e in sort_by_relevance(items)] == [2, 4, 1, 3]


def test_sort_by_relevance_all_product_keeps_order():
    items = [{"repo": {"name": "u/app1"}, "id": 1}, {"repo": {"name": "u/app2"}, "id": 2}]
    assert [e["id"] for e in sort_by_relevance(items)] == [1, 2]


def test_sort_by_relevance_empty():
    assert sort_by_relevance([]) == []


def test_sort_by_relevance_missing_name_is_product():
    items = [{"repo": {"name": "u/blog-posts"}, "id": 1}, {"id": 2}, {"repo": None, "id": 3}]
    assert [e["id"] for e in sort_by_relevance(items)] == [2, 3, 1]


def test_sort_by_relevance_events_and_repositories():
    events = [
        Event("PushEvent", "u/zenn-content", ""),
        Event("PushEvent", "u/app", ""),
    ]
    repos = [Repository(name="my-blog"), Repository(name="tool")]
    assert [e.repo_name for e in sort_by_relevance(events)] == ["u/app", "u/zenn-content"]
    assert [r.name for r in sort_by_relevance(repos)] == ["tool", "my-blog"]


def test_sort_by_relevance_custom_key():
    names = ["a-blog", "b", "c-posts", "d"]
    assert sort_by_relevance(names, key=lambda n: n) == ["b", "d", "a-blog", "c-posts"]


def test_sort_by_relevance_returns_new_list():
    items = [{"repo": {"name": "u/x-blog"}}]
    result = sort_by_relevance(items)
    assert result == items
    assert result is not items


def test_short_repo_name():
    assert short_repo_name("octocat/app") == "app"
    assert short_repo_name("app") == "app"


def test_group_push_events_same_repo():
    events = parse_events([
        push("u/app", "2025-01-01T00:00:00Z", "a1"),
        push("u/app", "2025-01-02T00:00:00Z", "b1"),
    ])
    grouped = group_push_events_by_repo(events)
    assert list(grouped) == ["app"]
    group = grouped["app"]
    assert group.full_name == "u/app"
    assert len(group.commits) == 2
    assert group.push_count == 2
    assert group.latest_date == "2025-01-02T00:00:00Z"


def test_group_push_events_commit_order_is_processing_order():
    events = parse_events([
        push("u/app", "2025-01-05T00:00:00Z", "newer"),
        push("u/app", "2025-01-01T00:00:00Z", "older"),
    ])
    group = group_push_events_by_repo(events)["app"]
    assert [c.message for c in group.commits] == ["newer", "older"]
    assert group.latest_date == "2025-01-05T00:00:00Z"


def test_group_push_events_first_seen_key_order():
    events = parse_events([
        push("u/b", "2025-01-01T00:00:00Z", "1"),
        push("u/a", "2025-01-02T00:00:00Z", "2"),
        push("u/b", "2025-01-03T00:00:00Z", "3"),
    ])
    assert list(group_push_events_by_repo(events)) == ["b", "a"]


def test_group_push_events_zero_commit_event_counts():
    events = parse_events([
        push("u/app", "2025-01-01T00:00:00Z", "a1"),
        push("u/app", "2025-01-09T00:00:00Z"),
    ])
    group = group_push_events_by_repo(events)["app"]
    assert len(group.commits) == 1
    assert group.push_count == 2
    assert group.latest_date == "2025-01-09T00:00:00Z"


def test_group_push_events_unknown_repo():
    grouped = group_push_events_by_repo([PushEvent("PushEvent", None, "2025-01-01T00:00:00Z")])
    assert list(grouped) == [UNKNOWN_REPO]
    assert grouped[UNKNOWN_REPO].full_name == UNKNOWN_REPO


def test_group_push_events_empty():
    assert group_push_events_by_repo([]) == {}


def test_counts(github_data):
    events = github_data.events
    assert count_commits(events) == 4
    assert len(events_of_type(events, "PullRequestEvent")) == 1
    assert len(events_of_type(events, "IssuesEvent", "IssueCommentEvent")) == 1
    assert active_repositories(events) == ["octocat/zenn-content", "octocat/app", "other/lib"]
    assert total_stars(github_data.repos) == 41


def test_top_languages(github_data):
    assert top_languages(github_data.repos) == [("TypeScript", 2), ("Go", 1)]
    assert top_languages(github_data.repos, limit=1) == [("TypeScript", 2)]
    assert top_languages([]) == []


def test_zenn_stats(zenn_data):
    assert total_likes(zenn_data.articles) == 15
    stats = zenn_stats(zenn_data.articles)
    assert stats.count == 3
    assert stats.likes == 15
