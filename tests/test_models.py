"""Tests for data models."""

from __future__ import annotations

from dev_chronicle.classifier import CONTENT, PRODUCT
from dev_chronicle.models import (
    Article,
    Commit,
    ContributionCalendar,
    Event,
    IssueCommentEvent,
    IssuesEvent,
    Profile,
    PullRequestEvent,
    PushEvent,
    Repository,
    parse_event,
    parse_events,
)


def test_profile_from_api_ignores_extra_fields(raw_profile):
    profile = Profile.from_api(raw_profile)
    assert profile.login == "octocat"
    assert profile.display_name == "The Octocat"
    assert profile.public_repos == 8
    assert not hasattr(profile, "site_admin")


def test_profile_display_name_falls_back_to_login():
    assert Profile.from_api({"login": "ghost", "name": None}).display_name == "ghost"


def test_commit_summary_is_first_line():
    assert Commit(sha="a", message="feat: x\n\nbody").summary == "feat: x"


def test_parse_push_event(raw_events):
    event = parse_event(raw_events[1])
    assert isinstance(event, PushEvent)
    assert event.repo_name == "octocat/app"
    assert [c.message for c in event.commits] == ["feat: login\n\nlong body", "fix: typo"]


def test_parse_pull_request_event(raw_events):
    event = parse_event(raw_events[2])
    assert isinstance(event, PullRequestEvent)
    assert event.action == "opened"
    assert event.pull_request.title == "Add login"
    assert event.pull_request.number == 1


def test_closed_merged_pull_request_becomes_merged():
    event = parse_event({
        "type": "PullRequestEvent",
        "repo": {"name": "a/b"},
        "created_at": "2025-01-01T00:00:00Z",
        "payload": {"action": "closed", "pull_request": {"merged": True}},
    })
    assert event.action == "merged"


def test_parse_issue_events():
    issue = parse_event({"type": "IssuesEvent", "payload": {"action": "opened"}})
    comment = parse_event({"type": "IssueCommentEvent", "payload": {"action": "created"}})
    assert isinstance(issue, IssuesEvent)
    assert isinstance(comment, IssueCommentEvent)
    assert issue.repo_name is None


def test_unknown_event_type_is_plain_event():
    event = parse_event({"type": "WatchEvent", "repo": {"name": "x/y"}})
    assert type(event) is Event
    assert event.type == "WatchEvent"


def test_parse_events_skips_non_dicts():
    assert parse_events(None) == []
    assert len(parse_events([{"type": "PushEvent"}, "junk", 3])) == 1


def test_push_event_without_payload():
    event = parse_event({"type": "PushEvent", "repo": {"name": "a/b"}})
    assert isinstance(event, PushEvent)
    assert event.commits == []


def test_repository_kind_is_derived(raw_repos):
    repos = [Repository.from_api(r) for r in raw_repos]
    assert [r.kind for r in repos] == [PRODUCT, CONTENT, PRODUCT, PRODUCT]


def test_article_from_api(raw_articles):
    article = Article.from_api(raw_articles[0])
    assert article.url == "https://zenn.dev/catnose/articles/rust"
    assert article.topics == ["rust"]
    assert Article.from_api(raw_articles[1]).topics == []


def test_contribution_calendar_levels(raw_calendar):
    calendar = ContributionCalendar.from_graphql(raw_calendar)
    assert calendar.total == 42
    assert len(calendar.weeks) == 30
    assert [d.level for d in calendar.weeks[0].days] == [0, 1, 2, 3, 4, 0, 1]


def test_contribution_calendar_unknown_level():
    calendar = ContributionCalendar.from_graphql({
        "totalContributions": 1,
        "weeks": [{"contributionDays": [{"date": "2025-01-01", "contributionLevel": "WHAT"}]}],
    })
    assert calendar.weeks[0].days[0].level == 0


def test_github_data_to_dict_omits_missing_calendar(github_data):
    github_data.contributions = None
    data = github_data.to_dict()
    assert "contributions" not in data
    assert data["profile"]["login"] == "octocat"
