"""Build the newspaper view model from fetched GitHub and Zenn data."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from .aggregator import (
    active_repositories,
    count_commits,
    events_of_type,
    group_push_events_by_repo,
    short_repo_name,
    sort_by_relevance,
    top_languages,
    total_likes,
    total_stars,
)
from .classifier import clean_bio, is_content_repo, pr_color
from .dates import days_ago, format_date, parse_iso, short_date
from .models import (
    ContributionCalendar,
    GitHubData,
    PullRequestEvent,
    ZennData,
)

GITHUB_URL = "https://github.com"

MAX_COMMIT_GROUPS = 5
MAX_COMMITS_PER_GROUP = 3
MAX_PULL_REQUESTS = 5
MAX_ARTICLES = 8
MAX_TOPICS = 3
MAX_LANGUAGES = 5
MAX_FEATURED_REPOS = 12
DESCRIPTION_LIMIT = 80

_MONTHS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
           "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


def truncate(text: str, limit: int) -> str:
    """Cut ``text`` to ``limit`` characters, adding an ellipsis only if cut."""
    if len(text) <= limit:
        return text
    return text[:limit] + "…"


@dataclass
class StatRow:
    label: str
    value: str


@dataclass
class CommitGroupView:
    repo: str
    full_name: str
    url: str
    count_label: str
    date: str
    is_content: bool
    messages: list[str] = field(default_factory=list)
    more: int = 0


@dataclass
class PullRequestView:
    action: str
    color: str
    title: str
    url: str
    repo: str
    repo_url: str
    date: str


@dataclass
class ArticleView:
    title: str
    url: str
    likes: int
    type_label: str
    date: str
    topics: list[str] = field(default_factory=list)


@dataclass
class RepoCardView:
    name: str
    url: str
    description: str
    language: str | None
    stars: int
    forks: int


@dataclass
class MonthLabel:
    label: str
    week_index: int


@dataclass
class Report:
    """Everything the HTML templates need, already formatted."""

    issue_date: str
    handles: str
    gh_user: str
    zenn_user: str
    has_github: bool = False
    has_zenn: bool = False
    display_name: str = ""
    avatar_url: str = ""
    location: str | None = None
    github_headline: str = ""
    github_lead: str = ""
    commit_groups: list[CommitGroupView] = field(default_factory=list)
    pull_requests: list[PullRequestView] = field(default_factory=list)
    zenn_headline: str = ""
    zenn_lead: str = ""
    articles: list[ArticleView] = field(default_factory=list)
    github_stats: list[StatRow] = field(default_factory=list)
    languages: list[StatRow] = field(default_factory=list)
    zenn_stats: list[StatRow] = field(default_factory=list)
    contributions: ContributionCalendar | None = None
    month_labels: list[MonthLabel] = field(default_factory=list)
    featured_repos: list[RepoCardView] = field(default_factory=list)
    ai_comment: str | None = None
    errors: list[str] = field(default_factory=list)


def _month_labels(calendar: ContributionCalendar) -> list[MonthLabel]:
    labels: list[MonthLabel] = []
    last_month = -1
    for index, week in enumerate(calendar.weeks):
        if not week.days or not week.days[0].date:
            continue
        month = parse_iso(week.days[0].date).month
        if month != last_month:
            labels.append(MonthLabel(label=_MONTHS[month - 1], week_index=index))
            last_month = month
    return labels


def _github_section(report: Report, github: GitHubData, gh_user: str) -> None:
    profile = github.profile
    events = github.events
    name = profile.name or gh_user

    push_events = sort_by_relevance(events_of_type(events, "PushEvent"))
    pr_events = sort_by_relevance(
        [e for e in events if isinstance(e, PullRequestEvent)]
    )
    issue_events = events_of_type(events, "IssuesEvent", "IssueCommentEvent")
    commits = count_commits(push_events)
    active = active_repositories(events)
    stars = total_stars(github.repos)

    report.has_github = True
    report.display_name = name
    report.avatar_url = profile.avatar_url
    report.location = profile.location

    if commits > 0:
        report.github_headline = f"{name}、直近で{commits}件のコミットを記録"
    else:
        report.github_headline = f"{name}のGitHub活動レポート"

    lead = f"GitHub上の開発者 {name} の直近のアクティビティを分析した。"
    if commits > 0:
        lead += f" 計{commits}件のコミットが確認され、"
    if active:
        lead += f"{len(active)}件のリポジトリで活動が見られた。"
    lead += f" 公開リポジトリ数は{profile.public_repos}件、獲得スター数は合計{stars}個。"
    bio = clean_bio(profile.bio)
    if bio:
        lead += f" プロフィール:「{bio}」"
    report.github_lead = lead

    grouped = group_push_events_by_repo(push_events)
    for repo, group in list(grouped.items())[:MAX_COMMIT_GROUPS]:
        messages = [c.summary for c in group.commits if c.message]
        if group.commits:
            count_label = f"{len(group.commits)}件のコミット"
        else:
            count_label = f"{group.push_count}件のプッシュ"
        report.commit_groups.append(
            CommitGroupView(
                repo=repo,
                full_name=group.full_name,
                url=f"{GITHUB_URL}/{group.full_name}",
                count_label=count_label,
                date=short_date(group.latest_date) if group.latest_date else "",
                is_content=is_content_repo(repo),
                messages=messages[:MAX_COMMITS_PER_GROUP],
                more=max(0, len(messages) - MAX_COMMITS_PER_GROUP),
            )
        )

    for event in pr_events[:MAX_PULL_REQUESTS]:
        pr = event.pull_request
        repo_name = event.repo_name or ""
        repo_short = repo_name.split("/")[1] if "/" in repo_name else ""
        if pr and pr.title:
            title = pr.title
        elif pr and pr.number:
            title = f"#{pr.number}"
        else:
            title = repo_short or "PR"
        repo_url = f"{GITHUB_URL}/{repo_name}"
        report.pull_requests.append(
            PullRequestView(
                action=event.action or "",
                color=pr_color(event.action),
                title=title,
                url=(pr.html_url if pr and pr.html_url else repo_url),
                repo=repo_short,
                repo_url=repo_url,
                date=short_date(event.created_at) if event.created_at else "",
            )
        )

    report.github_stats = [
        StatRow("コミット数", str(commits)),
        StatRow("アクティブリポ", f"{len(active)}件"),
        StatRow("PR活動", f"{len(pr_events)}件"),
        StatRow("Issue活動", f"{len(issue_events)}件"),
        StatRow("公開リポ総数", f"{profile.public_repos}件"),
        StatRow("フォロワー", f"{profile.followers}人"),
        StatRow("合計スター", str(stars)),
    ]

    if github.contributions is not None:
        report.contributions = github.contributions
        report.month_labels = _month_labels(github.contributions)

    for repo in github.repos[:MAX_FEATURED_REPOS]:
        report.featured_repos.append(
            RepoCardView(
                name=repo.name,
                url=repo.html_url,
                description=truncate(repo.description or "", DESCRIPTION_LIMIT),
                language=repo.language,
                stars=repo.stargazers_count,
                forks=repo.forks_count,
            )
        )


def _zenn_section(
    report: Report, zenn: ZennData, zenn_user: str, now: datetime
) -> None:
    articles = zenn.articles
    likes = total_likes(articles)

    report.has_zenn = True
    report.zenn_headline = (
        f"Zennで{len(articles)}本の記事を公開中、合計{likes}いいね獲得"
    )
    report.zenn_lead = (
        f"技術情報共有プラットフォームZennにおける{zenn_user}の執筆活動を調査した。"
        f"直近の記事{min(len(articles), 20)}本を分析したところ、"
        f"合計{likes}件のいいねを獲得しており、コミュニティからの支持が確認された。"
    )

    liked = [a for a in articles if a.liked_count > 0]
    for article in liked[:MAX_ARTICLES]:
        report.articles.append(
            ArticleView(
                title=article.title,
                url=article.url,
                likes=article.liked_count,
                type_label="技術記事" if article.article_type == "tech" else "アイデア",
                date=format_date(article.published_at) if article.published_at else "",
                topics=[t for t in article.topics if t][:MAX_TOPICS],
            )
        )

    latest = "-"
    if articles and articles[0].published_at:
        latest = f"{days_ago(articles[0].published_at, now=now)}日前"
    report.zenn_stats = [
        StatRow("記事数", f"{len(articles)}本"),
        StatRow("合計いいね", str(likes)),
        StatRow("最新投稿", latest),
    ]


def build_report(
    github: GitHubData | None,
    zenn: ZennData | None,
    gh_user: str = "",
    zenn_user: str = "",
    ai_comment: str | None = None,
    errors: list[str] | None = None,
    now: datetime | None = None,
) -> Report:
    """Combine fetched data into the newspaper view model."""
    if now is None:
        now = datetime.now(timezone.utc)

    handles = " / ".join(
        part for part in (gh_user and f"@{gh_user}", zenn_user and f"Zenn: {zenn_user}") if part
    )
    report = Report(
        issue_date=format_date(now.isoformat()),
        handles=handles,
        gh_user=gh_user,
        zenn_user=zenn_user,
        ai_comment=ai_comment,
        errors=list(errors or []),
    )

    if github is not None:
        _github_section(report, github, gh_user or github.profile.login)
        report.languages = [
            StatRow(f"{i}. {lang}", f"{count}リポ")
            for i, (lang, count) in enumerate(
                top_languages(github.repos, MAX_LANGUAGES), 1
            )
        ]
    if zenn is not None and zenn.articles:
        _zenn_section(report, zenn, zenn_user, now)

    return report
