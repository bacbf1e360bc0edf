"""AI editor commentary: summary digest and LLM provider calls."""

from __future__ import annotations

import logging

import httpx

from .aggregator import (
    active_repositories,
    count_commits,
    top_languages,
    total_likes,
    total_stars,
)
from .classifier import clean_bio, is_content_repo
from .config import Settings
from .models import GitHubData, ZennData

logger = logging.getLogger(__name__)

# Shared by every provider.
SYSTEM_PROMPT = (
    "あなたは週刊技術新聞のAI編集者です。以下のデータを元に開発者の活動を振り返る所感"
    "（4〜6文、日本語、新聞コラム調の温かみある文体）を書いてください。"
    "注意事項: コンテンツ/ブログ系リポジトリ(zenn-contentなど)はブログ記事のアーカイブなので"
    "プロダクト開発とは区別すること。プロフィールに記載のURLリンク先(Dribbble, Medium等)の"
    "活動内容は推測で書かないこと。実際のコード開発活動に焦点を当ててください。"
)

SUMMARY_NOTE = (
    "注意: コンテンツ/ブログ系リポジトリ(zenn-contentなど)のコミットは記事投稿であり、"
    "プロダクト開発のコミットとは区別してください。"
    "プロフィールのURL先(Dribbble, Medium等)の内容には言及しないでください。"
)

MAX_TOKENS = 1024

OPENAI_URL = "https://api.openai.com/v1/chat/completions"
ANTHROPIC_URL = "https://api.anthropic.com/v1/messages"
GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"

DEFAULT_MODELS = {
    "openai": "gpt-4.1-nano",
    "anthropic": "claude-3-5-haiku-latest",
    "gemini": "gemini-2.0-flash",
}
PROVIDERS = tuple(DEFAULT_MODELS)


class CommentaryError(Exception):
    """A provider call failed or the provider is not configured."""


def build_commentary_summary(
    github: GitHubData | None,
    zenn: ZennData | None,
    gh_user: str = "",
    zenn_user: str = "",
) -> str:
    """Plain-text digest of the activity, sent as the user message."""
    parts: list[str] = []
    if github is not None:
        events = github.events
        repos = active_repositories(events)
        code_repos = [r for r in repos if not is_content_repo(r)]
        content_repos = [r for r in repos if is_content_repo(r)]
        langs = ", ".join(lang for lang, _ in top_languages(github.repos, 3))
        prs = sum(1 for e in events if e.type == "PullRequestEvent")
        bio = clean_bio(github.profile.bio)
        line = (
            f"GitHub: {gh_user or github.profile.login}, commits: {count_commits(events)}, "
            f"code repos with activity: {len(code_repos)} ({', '.join(code_repos[:5])}), "
            f"content/blog repos: {len(content_repos)}, "
            f"public repos: {github.profile.public_repos}, "
            f"stars: {total_stars(github.repos)}, top languages: {langs}, PRs: {prs}"
        )
        if bio:
            line += f", bio: {bio}"
        parts.append(line)
        parts.append(SUMMARY_NOTE)
    if zenn is not None:
        titles = " / ".join(a.title for a in zenn.articles[:3])
        parts.append(
            f"Zenn: {zenn_user}, {len(zenn.articles)} articles, "
            f"{total_likes(zenn.articles)} total likes, recent titles: {titles}"
        )
    return "\n".join(parts)


async def _post(client: httpx.AsyncClient, provider: str, url: str, **kwargs) -> dict:
    response = await client.post(url, **kwargs)
    if response.is_error:
        raise CommentaryError(f"{provider} API error: {response.text}")
    try:
        data = response.json()
    except ValueError as exc:
        raise CommentaryError(f"{provider} API returned an invalid response") from exc
    if not isinstance(data, dict):
        raise CommentaryError(f"{provider} API returned an invalid response")
    return data


async def _call_openai(
    client: httpx.AsyncClient, api_key: str, model: str, summary: str
) -> str:
    data = await _post(
        client,
        "OpenAI",
        OPENAI_URL,
        headers={"Authorization": f"Bearer {api_key}"},
        json={
            "model": model,
            "max_tokens": MAX_TOKENS,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": summary},
            ],
        },
    )
    choices = data.get("choices") or [{}]
    return (choices[0].get("message") or {}).get("content") or ""


async def _call_anthropic(
    client: httpx.AsyncClient, api_key: str, model: str, summary: str
) -> str:
    data = await _post(
        client,
        "Anthropic",
        ANTHROPIC_URL,
        headers={"x-api-key": api_key, "anthropic-version": "2023-06-01"},
        json={
            "model": model,
            "max_tokens": MAX_TOKENS,
            "messages": [{"role": "user", "content": f"{SYSTEM_PROMPT}\n\n{summary}"}],
        },
    )
    return "".join(block.get("text") or "" for block in data.get("content") or [])


async def _call_gemini(
    client: httpx.AsyncClient, api_key: str, model: str, summary: str
) -> str:
    data = await _post(
        client,
        "Gemini",
        GEMINI_URL.format(model=model),
        params={"key": api_key},
        json={
            "contents": [{"parts": [{"text": f"{SYSTEM_PROMPT}\n\n{summary}"}]}],
            "generationConfig": {"maxOutputTokens": MAX_TOKENS},
        },
    )
    candidates = data.get("candidates") or [{}]
    parts = (candidates[0].get("content") or {}).get("parts") or []
    return "".join(p.get("text") or "" for p in parts)


_CALLS = {
    "openai": (_call_openai, "openai_api_key", "OPENAI_API_KEY"),
    "anthropic": (_call_anthropic, "anthropic_api_key", "ANTHROPIC_API_KEY"),
    "gemini": (_call_gemini, "gemini_api_key", "GEMINI_API_KEY"),
}


async def generate_comment(
    summary: str,
    settings: Settings,
    provider: str | None = None,
    model: str | None = None,
    client: httpx.AsyncClient | None = None,
) -> str:
    """Ask the selected provider for an editor's commentary on ``summary``."""
    provider = (provider or settings.commentary_provider).lower()
    if provider not in _CALLS:
        raise CommentaryError(f"Unknown provider: {provider}")
    call, key_field, env_name = _CALLS[provider]
    api_key = getattr(settings, key_field)
    if not api_key:
        raise CommentaryError(f"{env_name} が設定されていません")
    if not model:
        model = (
            settings.commentary_model
            if provider == settings.commentary_provider
            else DEFAULT_MODELS[provider]
        )

    logger.info("Requesting commentary from %s (%s)", provider, model)
    try:
        if client is not None:
            return await call(client, api_key, model, summary)
        async with httpx.AsyncClient(timeout=60.0) as own_client:
            return await call(own_client, api_key, model, summary)
    except httpx.RequestError as exc:
        raise CommentaryError(f"{provider} API request failed: {exc}") from exc
