"""Tests for the daily AI commentary quota."""

from __future__ import annotations

from datetime import date

from dev_chronicle.usage_limit import DailyUsageLimiter, UsageDecision


class FakeClock:
    def __init__(self, today: date) -> None:
        self.today = today

    def __call__(self) -> date:
        return self.today


def test_allows_up_to_limit():
    limiter = DailyUsageLimiter(limit=3, clock=FakeClock(date(2025, 1, 6)))
    decisions = [limiter.check_and_consume("1.2.3.4") for _ in range(4)]
    assert decisions == [
        UsageDecision(allowed=True, remaining=2),
        UsageDecision(allowed=True, remaining=1),
        UsageDecision(allowed=True, remaining=0),
        UsageDecision(allowed=False, remaining=0),
    ]


def test_callers_are_independent():
    limiter = DailyUsageLimiter(limit=1, clock=FakeClock(date(2025, 1, 6)))
    assert limiter.check_and_consume("a").allowed
    assert not limiter.check_and_consume("a").allowed
    assert limiter.check_and_consume("b").allowed


def test_denied_calls_do_not_count():
    limiter = DailyUsageLimiter(limit=1, clock=FakeClock(date(2025, 1, 6)))
    limiter.check_and_consume("a")
    limiter.check_and_consume("a")
    limiter.check_and_consume("a")
    assert len(limiter) == 1


def test_resets_on_new_day_and_prunes():
    clock = FakeClock(date(2025, 1, 6))
    limiter = DailyUsageLimiter(limit=1, clock=clock)
    limiter.check_and_consume("a")
    limiter.check_and_consume("b")
    assert len(limiter) == 2
    assert not limiter.check_and_consume("a").allowed

    clock.today = date(2025, 1, 7)
    assert limiter.check_and_consume("a").allowed
    assert len(limiter) == 1


def test_zero_limit_denies_everything():
    limiter = DailyUsageLimiter(limit=0, clock=FakeClock(date(2025, 1, 6)))
    assert limiter.check_and_consume("a") == UsageDecision(allowed=False, remaining=0)
    assert limiter.limit == 0


def test_default_clock():
    limiter = DailyUsageLimiter()
    assert limiter.limit == 3
    assert limiter.check_and_consume("a").remaining == 2
