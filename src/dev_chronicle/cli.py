"""CLI entrypoint for dev-chronicle."""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from dataclasses import asdict

import click
import httpx
from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .card import COMPACT_WIDTH, CardOptions, render_card
from .commentary import PROVIDERS, CommentaryError, build_commentary_summary, generate_comment
from .config import Settings
from .fetcher import UserNotFoundError, collect_card_data, collect_report_data
from .html import render_report_html
from .report import build_report

err_console = Console(stderr=True)


def _write_output(content: str, output_file: str | None) -> None:
    """Write content to a file (with confirmation) or stdout."""
    if output_file:
        with open(output_file, "w", encoding="utf-8") as f:
            f.write(content)
        err_console.print(f"Saved to {output_file}")
    else:
        click.echo(content, nl=False)


def _settings(token: str | None, no_cache: bool) -> Settings:
    overrides: dict[str, object] = {"no_cache": no_cache}
    if token:
        overrides["github_token"] = token
    return Settings(**overrides)


token_option = click.option(
    "--token",
    envvar="GITHUB_TOKEN",
    default=None,
    show_envvar=True,
    help="GitHub token (enables the contribution calendar)",
)
no_cache_option = click.option(
    "--no-cache", is_flag=True, default=False, help="Disable HTTP response caching"
)
output_option = click.option(
    "--output",
    "output_file",
    default=None,
    type=click.Path(),
    help="Save output to file instead of stdout",
)


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging")
@click.version_option(version=__version__)
def main(verbose: bool) -> None:
    """Turn GitHub and Zenn activity into a weekly developer newspaper."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=err_console, show_path=False)],
        )


@main.command()
@click.argument("gh_user", required=False, default="")
@click.option("--zenn", "zenn_user", default="", help="Zenn username")
@click.option("--dark", is_flag=True, default=False, help="Dark theme")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["html", "json"], case_sensitive=False),
    default="html",
    show_default=True,
    help="Output format",
)
@click.option("--ai", is_flag=True, default=False, help="Add AI editor commentary")
@click.option(
    "--provider",
    type=click.Choice(PROVIDERS, case_sensitive=False),
    default=None,
    help="Commentary provider (default from settings)",
)
@token_option
@no_cache_option
@output_option
def report(
    gh_user: str,
    zenn_user: str,
    dark: bool,
    output_format: str,
    ai: bool,
    provider: str | None,
    token: str | None,
    no_cache: bool,
    output_file: str | None,
) -> None:
    """Generate the newspaper as a self-contained HTML file.

    \b
    Examples:
      dev-chronicle report octocat --output octocat.html
      dev-chronicle report octocat --zenn catnose --dark
      dev-chronicle report --zenn catnose --format json
    """
    if not gh_user and not zenn_user:
        raise click.UsageError("Give a GitHub user, --zenn, or both.")
    settings = _settings(token, no_cache)

    with err_console.status("Collecting activity..."):
        data = asyncio.run(collect_report_data(gh_user, zenn_user, settings))

    for error in data.errors:
        err_console.print(f"[bold yellow]Warning:[/bold yellow] {error}")
    if data.github is None and data.zenn is None:
        sys.exit(1)

    comment = None
    if ai:
        summary = build_commentary_summary(data.github, data.zenn, gh_user, zenn_user)
        try:
            with err_console.status("Asking the AI editor..."):
                comment = asyncio.run(generate_comment(summary, settings, provider=provider))
        except CommentaryError as exc:
            err_console.print(f"[bold yellow]Warning:[/bold yellow] AI: {exc}")

    view = build_report(
        data.github, data.zenn, gh_user, zenn_user, ai_comment=comment, errors=data.errors
    )
    if output_format == "json":
        content = json.dumps(asdict(view), indent=2, ensure_ascii=False) + "\n"
    else:
        content = render_report_html(view, mode="export", dark=dark)
    _write_output(content, output_file)


@main.command()
@click.argument("gh_user")
@click.option("--zenn", "zenn_user", default="", help="Zenn username")
@click.option("--dark", is_flag=True, default=False, help="Dark theme")
@click.option(
    "--width",
    default=COMPACT_WIDTH,
    show_default=True,
    type=click.IntRange(min=COMPACT_WIDTH, max=1200),
    help="Canvas width; 600 and above shows a full year of contributions",
)
@token_option
@no_cache_option
@output_option
def card(
    gh_user: str,
    zenn_user: str,
    dark: bool,
    width: int,
    token: str | None,
    no_cache: bool,
    output_file: str | None,
) -> None:
    """Render the SVG profile card."""
    settings = _settings(token, no_cache)
    try:
        data = asyncio.run(collect_card_data(gh_user, zenn_user, settings))
    except UserNotFoundError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)
    except httpx.HTTPStatusError as exc:
        status = exc.response.status_code
        if status in (401, 403):
            click.echo("Error: Authentication failed. Check your --token or $GITHUB_TOKEN.", err=True)
        else:
            click.echo(f"Error: GitHub API returned {status}.", err=True)
        sys.exit(1)
    except httpx.RequestError as exc:
        click.echo(f"Error: Could not connect to GitHub API. {exc}", err=True)
        sys.exit(1)

    options = CardOptions(theme="dark" if dark else "light", width=width)
    _write_output(render_card(data, options), output_file)


@main.command()
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", default=8000, show_default=True, type=int)
@click.option("--reload", is_flag=True, default=False, help="Reload on code changes")
def serve(host: str, port: int, reload: bool) -> None:
    """Run the web server."""
    import uvicorn

    uvicorn.run(
        "dev_chronicle.server:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=True,
    )


if __name__ == "__main__":  # pragma: no cover
    main()
