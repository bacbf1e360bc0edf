"""SVG profile card rendering.

One engine covers every card variant: theme, canvas width and the optional
sections are all options. The canvas height is the sum of the heights of the
sections that are present, and the renderer walks the same section list, so
the document height and the drawn content can never disagree.
"""

from __future__ import annotations

import html
from dataclasses import dataclass, field

from .aggregator import (
    count_commits,
    sort_by_relevance,
    top_languages,
    total_stars,
)
from .models import (
    ContributionCalendar,
    GitHubData,
    Repository,
    ZennStats,
)
from .report import truncate

COMPACT_WIDTH = 420
WIDE_WIDTH = 600
COMPACT_WEEKS = 26
WIDE_WEEKS = 52

PADDING_X = 20
COLUMN_GAP = 20
HEADER_HEIGHT = 60
SUMMARY_HEIGHT = 70
CELL_SIZE = 8
CELL_GAP = 2
CELL_STEP = CELL_SIZE + CELL_GAP
CONTRIBUTION_HEIGHT = 24 + 7 * CELL_STEP + 16
SECTION_TITLE_HEIGHT = 24
LANGUAGE_ROW_HEIGHT = 20
REPO_ROW_HEIGHT = 34
BLOCK_PADDING = 12
ZENN_HEIGHT = 56

MAX_CARD_LANGUAGES = 5
MAX_CARD_REPOS = 3

ERROR_WIDTH = 300
ERROR_HEIGHT = 40

FONT = "-apple-system, BlinkMacSystemFont, 'Segoe UI', Helvetica, Arial, sans-serif"

THEMES = {
    "light": {
        "bg": "#ffffff",
        "header_bg": "#f6f8fa",
        "border": "#d0d7de",
        "text": "#1f2328",
        "muted": "#656d76",
        "accent": "#0969da",
        "error": "#cf222e",
        "bar_bg": "#eaeef2",
        "fallback_language": "#6e7781",
        "levels": ["#ebedf0", "#9be9a8", "#40c463", "#30a14e", "#216e39"],
    },
    "dark": {
        "bg": "#0d1117",
        "header_bg": "#161b22",
        "border": "#30363d",
        "text": "#c9d1d9",
        "muted": "#8b949e",
        "accent": "#58a6ff",
        "error": "#f85149",
        "bar_bg": "#21262d",
        "fallback_language": "#8b949e",
        "levels": ["#161b22", "#0e4429", "#006d32", "#26a641", "#39d353"],
    },
}

LANGUAGE_COLORS = {
    "TypeScript": "#3178c6",
    "JavaScript": "#f1e05a",
    "Python": "#3572A5",
    "Go": "#00ADD8",
    "Rust": "#dea584",
    "Java": "#b07219",
    "Kotlin": "#A97BFF",
    "Swift": "#F05138",
    "Ruby": "#701516",
    "PHP": "#4F5D95",
    "C": "#555555",
    "C++": "#f34b7d",
    "C#": "#178600",
    "Dart": "#00B4AB",
    "Shell": "#89e051",
    "HTML": "#e34c26",
    "CSS": "#563d7c",
    "SCSS": "#c6538c",
    "Vue": "#41b883",
    "Svelte": "#ff3e00",
    "Scala": "#c22d40",
    "Elixir": "#6e4a7e",
    "Haskell": "#5e5086",
    "Lua": "#000080",
    "Jupyter Notebook": "#DA5B0B",
    "MDX": "#fcb32c",
}


def escape_xml(text: str) -> str:
    return html.escape(text, quote=True)


def _text(text: str, limit: int) -> str:
    return escape_xml(truncate(text, limit))


def _fmt(n: int) -> str:
    return f"{n:,}"


def language_color(language: str, theme: str = "light") -> str:
    return LANGUAGE_COLORS.get(language, THEMES[theme]["fallback_language"])


@dataclass
class CardOptions:
    theme: str = "light"
    width: int = COMPACT_WIDTH
    show_contributions: bool = True
    show_languages: bool = True
    show_zenn: bool = True

    def __post_init__(self) -> None:
        if self.theme not in THEMES:
            raise ValueError(f"Unknown theme: {self.theme!r}")
        self.width = max(COMPACT_WIDTH, self.width)

    @property
    def weeks(self) -> int:
        return WIDE_WEEKS if self.width >= WIDE_WIDTH else COMPACT_WEEKS


@dataclass
class CardData:
    gh_user: str
    display_name: str
    commits: int = 0
    pull_requests: int = 0
    stars: int = 0
    public_repos: int = 0
    followers: int = 0
    languages: list[tuple[str, int]] = field(default_factory=list)
    top_repos: list[Repository] = field(default_factory=list)
    contributions: ContributionCalendar | None = None
    zenn_user: str = ""
    zenn: ZennStats | None = None


def build_card_data(
    github: GitHubData,
    zenn_stats: ZennStats | None = None,
    gh_user: str = "",
    zenn_user: str = "",
) -> CardData:
    """Reduce fetched GitHub data to the numbers the card shows."""
    by_stars = sorted(github.repos, key=lambda r: r.stargazers_count, reverse=True)
    return CardData(
        gh_user=gh_user or github.profile.login,
        display_name=github.profile.display_name,
        commits=count_commits(github.events),
        pull_requests=sum(1 for e in github.events if e.type == "PullRequestEvent"),
        stars=total_stars(github.repos),
        public_repos=github.profile.public_repos,
        followers=github.profile.followers,
        languages=top_languages(github.repos, MAX_CARD_LANGUAGES),
        top_repos=sort_by_relevance(by_stars)[:MAX_CARD_REPOS],
        contributions=github.contributions,
        zenn_user=zenn_user,
        zenn=zenn_stats,
    )


# -- Layout --


def _has_contributions(data: CardData, options: CardOptions) -> bool:
    return (
        options.show_contributions
        and data.contributions is not None
        and data.contributions.total > 0
    )


def _columns_height(data: CardData, options: CardOptions) -> int:
    if not options.show_languages or not (data.languages or data.top_repos):
        return 0
    language_column = len(data.languages) * LANGUAGE_ROW_HEIGHT
    repo_column = len(data.top_repos) * REPO_ROW_HEIGHT
    return SECTION_TITLE_HEIGHT + max(language_column, repo_column) + BLOCK_PADDING


def _has_zenn(data: CardData, options: CardOptions) -> bool:
    return options.show_zenn and bool(data.zenn_user) and data.zenn is not None


def card_sections(data: CardData, options: CardOptions) -> list[tuple[str, int]]:
    """Ordered ``(section, height)`` pairs for the sections present."""
    sections = [("header", HEADER_HEIGHT), ("summary", SUMMARY_HEIGHT)]
    if _has_contributions(data, options):
        sections.append(("contributions", CONTRIBUTION_HEIGHT))
    columns = _columns_height(data, options)
    if columns:
        sections.append(("columns", columns))
    if _has_zenn(data, options):
        sections.append(("zenn", ZENN_HEIGHT))
    return sections


def card_height(data: CardData, options: CardOptions) -> int:
    return sum(height for _, height in card_sections(data, options))


# -- Sections --


def _header(data: CardData, options: CardOptions, colors: dict, y: int) -> list[str]:
    width = options.width
    handle = f"@{data.gh_user}"
    if data.zenn_user:
        handle += f" / Zenn: {data.zenn_user}"
    return [
        f'<rect x="0" y="{y}" width="{width}" height="{HEADER_HEIGHT}" rx="6" fill="{colors["header_bg"]}"/>',
        f'<rect x="0" y="{y + HEADER_HEIGHT - 6}" width="{width}" height="6" fill="{colors["header_bg"]}"/>',
        f'<line x1="0" y1="{y + HEADER_HEIGHT}" x2="{width}" y2="{y + HEADER_HEIGHT}" stroke="{colors["border"]}" stroke-width="1"/>',
        f'<text x="{PADDING_X}" y="{y + 28}" class="t main" font-size="16" font-weight="600">{_text(data.display_name, 32)}</text>',
        f'<text x="{PADDING_X}" y="{y + 46}" class="t sub" font-size="11">{_text(handle, 56)}</text>',
    ]


def _summary(data: CardData, options: CardOptions, colors: dict, y: int) -> list[str]:
    stats = [
        ("Commits", data.commits),
        ("PRs", data.pull_requests),
        ("Stars", data.stars),
        ("Repos", data.public_repos),
        ("Followers", data.followers),
    ]
    cell = (options.width - 2 * PADDING_X) / len(stats)
    parts = []
    for i, (label, value) in enumerate(stats):
        cx = round(PADDING_X + cell * i + cell / 2, 1)
        parts.append(
            f'<text x="{cx}" y="{y + 32}" class="t main" font-size="18" font-weight="700" text-anchor="middle">{_fmt(value)}</text>'
        )
        parts.append(
            f'<text x="{cx}" y="{y + 50}" class="t sub" font-size="10" text-anchor="middle">{label}</text>'
        )
    parts.append(
        f'<line x1="{PADDING_X}" y1="{y + SUMMARY_HEIGHT - 1}" x2="{options.width - PADDING_X}" y2="{y + SUMMARY_HEIGHT - 1}" stroke="{colors["border"]}" stroke-width="1"/>'
    )
    return parts


def _contributions(data: CardData, options: CardOptions, colors: dict, y: int) -> list[str]:
    calendar = data.contributions
    if calendar is None:
        return []
    levels = colors["levels"]
    weeks = calendar.weeks[-options.weeks:]
    grid_y = y + 24
    parts = [
        f'<text x="{PADDING_X}" y="{y + 18}" class="t main" font-size="12" font-weight="600">{_fmt(calendar.total)} contributions in the last year</text>'
    ]
    for wi, week in enumerate(weeks):
        for di, day in enumerate(week.days[:7]):
            level = min(max(day.level, 0), len(levels) - 1)
            parts.append(
                f'<rect x="{PADDING_X + wi * CELL_STEP}" y="{grid_y + di * CELL_STEP}" width="{CELL_SIZE}" height="{CELL_SIZE}" rx="1.5" fill="{levels[level]}"/>'
            )
    legend_y = grid_y + 7 * CELL_STEP + 10
    legend_x = options.width - PADDING_X - len(levels) * 12 - 28
    parts.append(
        f'<text x="{legend_x - 4}" y="{legend_y}" class="t sub" font-size="8" text-anchor="end">Less</text>'
    )
    for i, color in enumerate(levels):
        parts.append(
            f'<rect x="{legend_x + i * 12}" y="{legend_y - 7}" width="{CELL_SIZE}" height="{CELL_SIZE}" rx="1.5" fill="{color}"/>'
        )
    parts.append(
        f'<text x="{legend_x + len(levels) * 12 + 2}" y="{legend_y}" class="t sub" font-size="8">More</text>'
    )
    return parts


def _columns(data: CardData, options: CardOptions, colors: dict, y: int) -> list[str]:
    column_width = (options.width - 2 * PADDING_X - COLUMN_GAP) // 2
    left_x = PADDING_X
    right_x = PADDING_X + column_width + COLUMN_GAP
    row_y = y + SECTION_TITLE_HEIGHT
    parts = [
        f'<text x="{left_x}" y="{y + 18}" class="t accent" font-size="11" font-weight="600">Top Languages</text>',
        f'<text x="{right_x}" y="{y + 18}" class="t accent" font-size="11" font-weight="600">Top Repositories</text>',
    ]

    total = sum(count for _, count in data.languages) or 1
    bar_x = left_x + 96
    bar_width = max(column_width - 96 - 34, 10)
    for i, (language, count) in enumerate(data.languages):
        ly = row_y + i * LANGUAGE_ROW_HEIGHT + 12
        share = count / total
        filled = round(bar_width * share, 1)
        color = language_color(language, options.theme)
        parts.append(f'<circle cx="{left_x + 4}" cy="{ly - 4}" r="4" fill="{color}"/>')
        parts.append(
            f'<text x="{left_x + 14}" y="{ly}" class="t main" font-size="11">{_text(language, 12)}</text>'
        )
        parts.append(
            f'<rect x="{bar_x}" y="{ly - 8}" width="{bar_width}" height="6" rx="3" fill="{colors["bar_bg"]}"/>'
        )
        parts.append(
            f'<rect x="{bar_x}" y="{ly - 8}" width="{filled}" height="6" rx="3" fill="{color}"/>'
        )
        parts.append(
            f'<text x="{left_x + column_width}" y="{ly}" class="t sub" font-size="10" text-anchor="end">{round(share * 100)}%</text>'
        )

    for i, repo in enumerate(data.top_repos):
        ry = row_y + i * REPO_ROW_HEIGHT + 12
        meta = f"★ {_fmt(repo.stargazers_count)}"
        if repo.language:
            meta += f"  ·  {repo.language}"
        parts.append(
            f'<text x="{right_x}" y="{ry}" class="t main" font-size="11" font-weight="600">{_text(repo.name, 24)}</text>'
        )
        parts.append(
            f'<text x="{right_x}" y="{ry + 14}" class="t sub" font-size="10">{_text(meta, 30)}</text>'
        )
    return parts


def _zenn(data: CardData, options: CardOptions, colors: dict, y: int) -> list[str]:
    zenn = data.zenn
    if zenn is None:
        return []
    half = options.width // 2
    return [
        f'<text x="{PADDING_X}" y="{y + 18}" class="t accent" font-size="11" font-weight="600">Zenn</text>',
        f'<text x="{PADDING_X}" y="{y + 38}" class="t sub" font-size="12">Articles</text>',
        f'<text x="{half - PADDING_X}" y="{y + 38}" class="t main" font-size="12" font-weight="600" text-anchor="end">{_fmt(zenn.count)}</text>',
        f'<text x="{half + PADDING_X}" y="{y + 38}" class="t sub" font-size="12">Likes</text>',
        f'<text x="{options.width - PADDING_X}" y="{y + 38}" class="t main" font-size="12" font-weight="600" text-anchor="end">{_fmt(zenn.likes)}</text>',
    ]


_RENDERERS = {
    "header": _header,
    "summary": _summary,
    "contributions": _contributions,
    "columns": _columns,
    "zenn": _zenn,
}


def render_card(data: CardData, options: CardOptions | None = None) -> str:
    """Render the card as a standalone SVG document."""
    options = options or CardOptions()
    colors = THEMES[options.theme]
    width = options.width
    height = card_height(data, options)

    body: list[str] = []
    y = 0
    for name, section_height in card_sections(data, options):
        body.append(f"<!-- {name} -->")
        body.extend(_RENDERERS[name](data, options, colors, y))
        y += section_height

    head = [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" viewBox="0 0 {width} {height}" fill="none">',
        "<style>",
        f"  .t {{ font-family: {FONT}; }}",
        f'  .main {{ fill: {colors["text"]}; }}',
        f'  .sub {{ fill: {colors["muted"]}; }}',
        f'  .accent {{ fill: {colors["accent"]}; }}',
        "</style>",
        f'<rect x="0.5" y="0.5" width="{width - 1}" height="{height - 1}" rx="6" fill="{colors["bg"]}" stroke="{colors["border"]}" stroke-width="1"/>',
    ]
    return "\n".join(head + body + ["</svg>"]) + "\n"


def render_error_card(message: str, theme: str = "light") -> str:
    """Small fixed-size card carrying an error message."""
    color = THEMES.get(theme, THEMES["light"])["error"]
    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{ERROR_WIDTH}" height="{ERROR_HEIGHT}" '
        f'viewBox="0 0 {ERROR_WIDTH} {ERROR_HEIGHT}">'
        f'<text x="10" y="25" font-family="{escape_xml(FONT)}" font-size="14" fill="{color}">'
        f"{_text(message, 40)}</text></svg>\n"
    )
