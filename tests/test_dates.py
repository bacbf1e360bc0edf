"""Tests for date display helpers."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from dev_chronicle.dates import days_ago, format_date, parse_iso, short_date


def test_format_date_monday():
    assert format_date("2025-01-06T00:00:00Z") == "2025年1月6日（月）"


def test_format_date_sunday():
    assert format_date("2025-01-05T00:00:00Z") == "2025年1月5日（日）"


def test_format_date_uses_timestamp_offset():
    assert format_date("2025-01-05T23:30:00+09:00") == "2025年1月5日（日）"


def test_short_date():
    assert short_date("2025-02-13T00:00:00Z") == "2/13"


def test_short_date_no_zero_padding():
    assert short_date("2025-01-05T00:00:00Z") == "1/5"


def test_parse_iso_naive_is_utc():
    assert parse_iso("2025-01-05T00:00:00").tzinfo == timezone.utc


def test_days_ago_now():
    now = datetime.now(timezone.utc)
    assert days_ago(now.isoformat()) == 0


def test_days_ago_yesterday():
    now = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)
    yesterday = (now - timedelta(days=1)).isoformat()
    assert days_ago(yesterday, now=now) == 1


def test_days_ago_floors():
    now = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)
    assert days_ago("2025-02-27T13:00:00Z", now=now) == 1


def test_days_ago_future_is_zero():
    now = datetime(2025, 3, 1, tzinfo=timezone.utc)
    future = (now + timedelta(days=10)).isoformat()
    assert days_ago(future, now=now) == 0
