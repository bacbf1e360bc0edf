"""HTML rendering of the newspaper view model."""

from __future__ import annotations

from urllib.parse import urlencode

from jinja2 import Environment, PackageLoader, select_autoescape

from .card import THEMES
from .report import Report

MODES = ("page", "embed", "export")

CELL_STEP = 12
GRAPH_OFFSET_X = 30
GRAPH_OFFSET_Y = 16

_env = Environment(
    loader=PackageLoader("dev_chronicle", "templates"),
    autoescape=select_autoescape(["html"]),
    trim_blocks=True,
    lstrip_blocks=True,
)


def _query(gh: str, zenn: str, dark: bool) -> str:
    params = {k: v for k, v in (("gh", gh), ("zenn", zenn)) if v}
    if dark:
        params["dark"] = "1"
    return urlencode(params)


def render_report_html(report: Report, mode: str = "page", dark: bool = False) -> str:
    """Render the newspaper. ``export`` produces a self-contained document."""
    if mode not in MODES:
        raise ValueError(f"Unknown mode: {mode!r}")
    template = _env.get_template(f"{mode}.html")
    return template.render(
        report=report,
        dark=dark,
        levels_light=THEMES["light"]["levels"],
        levels_dark=THEMES["dark"]["levels"],
        step=CELL_STEP,
        offset_x=GRAPH_OFFSET_X,
        offset_y=GRAPH_OFFSET_Y,
        self_query=_query(report.gh_user, report.zenn_user, dark),
        toggle_query=_query(report.gh_user, report.zenn_user, not dark),
    )


def render_index_html(errors: list[str] | None = None) -> str:
    return _env.get_template("index.html").render(
        errors=errors or [],
        dark=False,
        levels_light=THEMES["light"]["levels"],
        levels_dark=THEMES["dark"]["levels"],
    )


def export_filename(report: Report) -> str:
    handle = report.gh_user or report.zenn_user or "report"
    return f"dev-chronicle-{handle}.html"
