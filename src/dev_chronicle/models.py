"""Data models for dev-chronicle."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

from .classifier import repo_kind

ZENN_BASE_URL = "https://zenn.dev"

_LEVELS = {
    "NONE": 0,
    "FIRST_QUARTILE": 1,
    "SECOND_QUARTILE": 2,
    "THIRD_QUARTILE": 3,
    "FOURTH_QUARTILE": 4,
}


def _int(value: Any) -> int:
    return value if isinstance(value, int) else 0


@dataclass
class Profile:
    login: str
    name: str | None = None
    avatar_url: str = ""
    bio: str | None = None
    location: str | None = None
    public_repos: int = 0
    followers: int = 0
    following: int = 0

    @property
    def display_name(self) -> str:
        return self.name or self.login

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> Profile:
        return cls(
            login=raw.get("login") or "",
            name=raw.get("name"),
            avatar_url=raw.get("avatar_url") or "",
            bio=raw.get("bio"),
            location=raw.get("location"),
            public_repos=_int(raw.get("public_repos")),
            followers=_int(raw.get("followers")),
            following=_int(raw.get("following")),
        )


@dataclass
class Commit:
    sha: str
    message: str

    @property
    def summary(self) -> str:
        """First line of the commit message."""
        return self.message.split("\n", 1)[0]

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> Commit:
        return cls(sha=raw.get("sha") or "", message=raw.get("message") or "")


@dataclass
class PullRequestRef:
    title: str | None = None
    html_url: str | None = None
    number: int | None = None


@dataclass
class Event:
    """A GitHub activity event. Subclasses carry type-specific payloads."""

    type: str
    repo_name: str | None
    created_at: str


@dataclass
class PushEvent(Event):
    commits: list[Commit] = field(default_factory=list)


@dataclass
class PullRequestEvent(Event):
    action: str | None = None
    pull_request: PullRequestRef | None = None


@dataclass
class IssuesEvent(Event):
    action: str | None = None


@dataclass
class IssueCommentEvent(Event):
    action: str | None = None


def parse_event(raw: dict[str, Any]) -> Event:
    """Build the event variant matching ``raw["type"]``."""
    event_type = raw.get("type") or ""
    repo = raw.get("repo")
    repo_name = repo.get("name") if isinstance(repo, dict) else None
    created_at = raw.get("created_at") or ""
    payload = raw.get("payload")
    if not isinstance(payload, dict):
        payload = {}

    if event_type == "PushEvent":
        commits = [
            Commit.from_api(c) for c in payload.get("commits") or [] if isinstance(c, dict)
        ]
        return PushEvent(event_type, repo_name, created_at, commits=commits)

    if event_type == "PullRequestEvent":
        action = payload.get("action")
        pr = payload.get("pull_request")
        ref = None
        if isinstance(pr, dict):
            ref = PullRequestRef(
                title=pr.get("title"),
                html_url=pr.get("html_url"),
                number=pr.get("number"),
            )
            if action == "closed" and pr.get("merged"):
                action = "merged"
        return PullRequestEvent(
            event_type, repo_name, created_at, action=action, pull_request=ref
        )

    if event_type == "IssuesEvent":
        return IssuesEvent(event_type, repo_name, created_at, action=payload.get("action"))

    if event_type == "IssueCommentEvent":
        return IssueCommentEvent(
            event_type, repo_name, created_at, action=payload.get("action")
        )

    return Event(event_type, repo_name, created_at)


def parse_events(raw: Any) -> list[Event]:
    if not isinstance(raw, list):
        return []
    return [parse_event(e) for e in raw if isinstance(e, dict)]


@dataclass
class Repository:
    name: str
    description: str | None = None
    language: str | None = None
    stargazers_count: int = 0
    forks_count: int = 0
    updated_at: str | None = None
    html_url: str = ""

    @property
    def kind(self) -> str:
        return repo_kind(self.name)

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> Repository:
        return cls(
            name=raw.get("name") or "",
            description=raw.get("description"),
            language=raw.get("language"),
            stargazers_count=_int(raw.get("stargazers_count")),
            forks_count=_int(raw.get("forks_count")),
            updated_at=raw.get("updated_at"),
            html_url=raw.get("html_url") or "",
        )


@dataclass
class PushGroup:
    """All push events for one repository within a single report."""

    full_name: str
    commits: list[Commit] = field(default_factory=list)
    latest_date: str = ""
    push_count: int = 0


@dataclass
class Article:
    title: str
    slug: str = ""
    emoji: str = ""
    article_type: str = "tech"
    liked_count: int = 0
    published_at: str = ""
    path: str = ""
    topics: list[str] = field(default_factory=list)

    @property
    def url(self) -> str:
        return f"{ZENN_BASE_URL}{self.path}"

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> Article:
        topics = raw.get("topics") or []
        return cls(
            title=raw.get("title") or "",
            slug=raw.get("slug") or "",
            emoji=raw.get("emoji") or "",
            article_type=raw.get("article_type") or "tech",
            liked_count=_int(raw.get("liked_count")),
            published_at=raw.get("published_at") or "",
            path=raw.get("path") or "",
            topics=[
                t if isinstance(t, str) else t.get("name") or ""
                for t in topics
                if isinstance(t, (str, dict))
            ],
        )


@dataclass
class ContributionDay:
    date: str
    count: int
    level: int


@dataclass
class ContributionWeek:
    days: list[ContributionDay] = field(default_factory=list)


@dataclass
class ContributionCalendar:
    total: int
    weeks: list[ContributionWeek] = field(default_factory=list)

    @classmethod
    def from_graphql(cls, calendar: dict[str, Any]) -> ContributionCalendar:
        """Build from a GraphQL ``contributionCalendar`` object."""
        weeks = [
            ContributionWeek(
                days=[
                    ContributionDay(
                        date=d.get("date") or "",
                        count=_int(d.get("contributionCount")),
                        level=_LEVELS.get(d.get("contributionLevel"), 0),
                    )
                    for d in w.get("contributionDays") or []
                ]
            )
            for w in calendar.get("weeks") or []
        ]
        return cls(total=_int(calendar.get("totalContributions")), weeks=weeks)


@dataclass
class GitHubData:
    profile: Profile
    events: list[Event] = field(default_factory=list)
    repos: list[Repository] = field(default_factory=list)
    contributions: ContributionCalendar | None = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        if self.contributions is None:
            data.pop("contributions")
        return data


@dataclass
class ZennData:
    articles: list[Article] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class ZennStats:
    count: int
    likes: int
