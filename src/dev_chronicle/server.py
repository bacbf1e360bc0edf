"""HTTP surface: newspaper pages, SVG card, JSON pass-through and AI commentary."""

from __future__ import annotations

import logging

import httpx
from fastapi import FastAPI, Request, status
from fastapi.responses import HTMLResponse, JSONResponse, Response
from pydantic import BaseModel

from .card import COMPACT_WIDTH, CardOptions, render_card, render_error_card
from .commentary import CommentaryError, build_commentary_summary, generate_comment
from .config import Settings, get_settings
from .fetcher import (
    ReportData,
    UserNotFoundError,
    collect_card_data,
    collect_report_data,
    fetch_github_data,
    fetch_zenn_data,
    github_client_from_settings,
    zenn_client_from_settings,
)
from .html import export_filename, render_index_html, render_report_html
from .report import build_report
from .usage_limit import DailyUsageLimiter

logger = logging.getLogger(__name__)

SVG_MEDIA_TYPE = "image/svg+xml; charset=utf-8"
CARD_CACHE_CONTROL = "public, max-age=300, s-maxage=300"
MISSING_HANDLES = "パラメータ gh または zenn を指定してください"
MAX_CARD_WIDTH = 1200


def parse_card_width(value: str) -> int | None:
    """Card width from the query string; None when it is not an allowed width."""
    if not value:
        return COMPACT_WIDTH
    try:
        width = int(value)
    except ValueError:
        return None
    if not COMPACT_WIDTH <= width <= MAX_CARD_WIDTH:
        return None
    return width


def quota_message(limit: int) -> str:
    return f"AI所感の生成は1日{limit}回までです。明日またお試しください。"


class CommentRequest(BaseModel):
    summary: str = ""
    provider: str | None = None
    model: str | None = None


def client_identity(request: Request) -> str:
    """Caller key for the commentary quota."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip
    if request.client is not None:
        return request.client.host
    return "unknown"


def _error_json(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def _svg(body: str, status_code: int = 200, cache: bool = False) -> Response:
    headers = {"Cache-Control": CARD_CACHE_CONTROL} if cache else None
    return Response(body, status_code=status_code, media_type=SVG_MEDIA_TYPE, headers=headers)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Weekly newspaper of GitHub and Zenn activity",
    )
    app.state.settings = settings
    app.state.limiter = DailyUsageLimiter(limit=settings.commentary_daily_limit)

    async def _commentary(request: Request, data: ReportData, gh: str, zenn: str) -> str | None:
        if data.github is None and data.zenn is None:
            return None
        limiter: DailyUsageLimiter = app.state.limiter
        decision = limiter.check_and_consume(client_identity(request))
        if not decision.allowed:
            data.errors.append(f"AI: {quota_message(limiter.limit)}")
            return None
        summary = build_commentary_summary(data.github, data.zenn, gh, zenn)
        try:
            return await generate_comment(summary, settings)
        except CommentaryError as exc:
            logger.warning("Commentary failed: %s", exc)
            data.errors.append(f"AI: {exc}")
            return None

    async def _report_page(
        request: Request, mode: str, gh: str, zenn: str, dark: bool, ai: bool = False
    ) -> HTMLResponse:
        gh, zenn = gh.strip(), zenn.strip()
        if not gh and not zenn:
            if mode == "page":
                return HTMLResponse(
                    render_index_html([MISSING_HANDLES]),
                    status_code=status.HTTP_400_BAD_REQUEST,
                )
            report = build_report(None, None, errors=[MISSING_HANDLES])
            return HTMLResponse(
                render_report_html(report, mode=mode, dark=dark),
                status_code=status.HTTP_400_BAD_REQUEST,
            )

        data = await collect_report_data(gh, zenn, settings)
        comment = await _commentary(request, data, gh, zenn) if ai else None
        report = build_report(
            data.github, data.zenn, gh, zenn, ai_comment=comment, errors=data.errors
        )
        headers = None
        if mode == "export":
            headers = {
                "Content-Disposition": f'attachment; filename="{export_filename(report)}"'
            }
        return HTMLResponse(render_report_html(report, mode=mode, dark=dark), headers=headers)

    @app.get("/", response_class=HTMLResponse, include_in_schema=False)
    async def index() -> HTMLResponse:
        return HTMLResponse(render_index_html())

    @app.get("/report", response_class=HTMLResponse)
    async def report_page(
        request: Request,
        gh: str = "",
        zenn: str = "",
        dark: str = "",
        ai: str = "",
    ) -> HTMLResponse:
        """Full newspaper page with toolbar."""
        return await _report_page(request, "page", gh, zenn, dark == "1", ai == "1")

    @app.get("/embed", response_class=HTMLResponse)
    async def embed_page(
        request: Request, gh: str = "", zenn: str = "", dark: str = ""
    ) -> HTMLResponse:
        """Newspaper without toolbar, for iframes."""
        return await _report_page(request, "embed", gh, zenn, dark == "1")

    @app.get("/export", response_class=HTMLResponse)
    async def export_page(
        request: Request, gh: str = "", zenn: str = "", dark: str = ""
    ) -> HTMLResponse:
        """Self-contained HTML download."""
        return await _report_page(request, "export", gh, zenn, dark == "1")

    @app.get("/api/github")
    async def github_data(username: str = "") -> JSONResponse:
        """Normalized GitHub profile, events, repos and contributions."""
        if not username:
            return _error_json("username is required", status.HTTP_400_BAD_REQUEST)
        try:
            async with github_client_from_settings(settings) as client:
                data = await fetch_github_data(client, username)
        except UserNotFoundError as exc:
            return _error_json(str(exc), status.HTTP_404_NOT_FOUND)
        except httpx.HTTPStatusError as exc:
            return _error_json(
                f"GitHub APIがエラーを返しました ({exc.response.status_code})",
                exc.response.status_code,
            )
        except httpx.RequestError:
            return _error_json("GitHub APIへの接続に失敗しました", status.HTTP_502_BAD_GATEWAY)
        return JSONResponse(data.to_dict())

    @app.get("/api/zenn")
    async def zenn_data(username: str = "") -> JSONResponse:
        """Normalized Zenn article list."""
        if not username:
            return _error_json("username is required", status.HTTP_400_BAD_REQUEST)
        try:
            async with zenn_client_from_settings(settings) as client:
                data = await fetch_zenn_data(client, username)
        except httpx.HTTPStatusError as exc:
            return _error_json(
                f"Zennユーザー「{username}」の取得に失敗しました",
                exc.response.status_code,
            )
        except httpx.RequestError:
            return _error_json("Zenn APIへの接続に失敗しました", status.HTTP_502_BAD_GATEWAY)
        return JSONResponse(data.to_dict())

    @app.get("/api/card")
    async def card(
        gh: str = "",
        zenn: str = "",
        dark: str = "",
        width: str = "",
    ) -> Response:
        """SVG profile card. Errors are returned as small SVG cards too."""
        theme = "dark" if dark == "1" else "light"
        if not gh:
            return _svg(
                render_error_card("Error: gh parameter is required", theme),
                status.HTTP_400_BAD_REQUEST,
            )
        card_width = parse_card_width(width)
        if card_width is None:
            return _svg(
                render_error_card(
                    f"Error: width must be {COMPACT_WIDTH}-{MAX_CARD_WIDTH}", theme
                ),
                status.HTTP_400_BAD_REQUEST,
            )
        try:
            data = await collect_card_data(gh, zenn, settings)
        except UserNotFoundError:
            return _svg(
                render_error_card(f"User not found: {gh}", theme),
                status.HTTP_404_NOT_FOUND,
            )
        except Exception:
            logger.exception("Card generation failed for %s", gh)
            return _svg(
                render_error_card("Internal error", theme),
                status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
        svg = render_card(data, CardOptions(theme=theme, width=card_width))
        return _svg(svg, cache=True)

    @app.post("/api/ai-comment")
    async def ai_comment(body: CommentRequest, request: Request) -> JSONResponse:
        """Editor's commentary for a free-text activity summary."""
        limiter: DailyUsageLimiter = app.state.limiter
        decision = limiter.check_and_consume(client_identity(request))
        if not decision.allowed:
            return JSONResponse(
                {"error": quota_message(limiter.limit)},
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                headers={"X-RateLimit-Remaining": "0"},
            )
        if not body.summary:
            return _error_json("summary is required", status.HTTP_400_BAD_REQUEST)
        try:
            comment = await generate_comment(
                body.summary, settings, provider=body.provider, model=body.model
            )
        except CommentaryError as exc:
            return _error_json(str(exc), status.HTTP_502_BAD_GATEWAY)
        return JSONResponse(
            {"comment": comment},
            headers={"X-RateLimit-Remaining": str(decision.remaining)},
        )

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy", "version": settings.app_version}

    return app
