"""Repository kind classification and bio text cleanup."""

from __future__ import annotations

import re

PRODUCT = "product"
CONTENT = "content"

_CONTENT_REPO = re.compile(r"[-_](content|blog|articles|posts|zenn)", re.IGNORECASE)

_URL = re.compile(r"https?://\S+")
# ASCII word boundaries so labels glued to Japanese text are still matched
_SOCIAL_LABEL = re.compile(
    r"\b(Qiita|Dribbble|Medium|Twitter|X|LinkedIn|Facebook|Instagram|YouTube|Note|Wantedly)"
    r"\s*:?\s*",
    re.IGNORECASE | re.ASCII,
)
_SEPARATOR = re.compile(r"[|/·・]\s*")
_WHITESPACE = re.compile(r"\s+")

_PR_COLORS = {
    "merged": "#238636",
    "opened": "#6f42c1",
    "closed": "#cf222e",
}
_PR_DEFAULT_COLOR = "#666"


def is_content_repo(name: str | None) -> bool:
    """Return True for blog/article archive repositories (``zenn-content``, ``my-blog``)."""
    if not name:
        return False
    return _CONTENT_REPO.search(name) is not None


def repo_kind(name: str | None) -> str:
    return CONTENT if is_content_repo(name) else PRODUCT


def clean_bio(bio: str | None) -> str:
    """Strip URLs, social network labels and separators from a profile bio.

    URLs and labels go first so the separators they leave behind are
    collapsed by the later passes.
    """
    if not bio:
        return ""
    text = _URL.sub("", bio)
    text = _SOCIAL_LABEL.sub("", text)
    text = _SEPARATOR.sub(" ", text)
    text = _WHITESPACE.sub(" ", text)
    return text.strip()


def pr_color(action: str | None) -> str:
    """Label color for a pull request action."""
    return _PR_COLORS.get(action or "", _PR_DEFAULT_COLOR)
