"""Date display helpers."""

from __future__ import annotations

from datetime import datetime, timezone

_WEEKDAYS = ["月", "火", "水", "木", "金", "土", "日"]
_SECONDS_PER_DAY = 86400


def parse_iso(iso: str) -> datetime:
    """Parse an ISO 8601 timestamp; a trailing ``Z`` means UTC, naive means UTC."""
    dt = datetime.fromisoformat(iso.replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def format_date(iso: str) -> str:
    """``2025-01-06T00:00:00Z`` -> ``2025年1月6日（月）``."""
    dt = parse_iso(iso)
    return f"{dt.year}年{dt.month}月{dt.day}日（{_WEEKDAYS[dt.weekday()]}）"


def short_date(iso: str) -> str:
    """``2025-01-05T00:00:00Z`` -> ``1/5``."""
    dt = parse_iso(iso)
    return f"{dt.month}/{dt.day}"


def days_ago(iso: str, now: datetime | None = None) -> int:
    """Whole days between ``iso`` and ``now``; never negative."""
    if now is None:
        now = datetime.now(timezone.utc)
    elapsed = (now - parse_iso(iso)).total_seconds()
    return max(0, int(elapsed // _SECONDS_PER_DAY))
