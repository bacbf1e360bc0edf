"""Per-caller daily usage quota for the AI commentary endpoint."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime, timezone


def _utc_today() -> date:
    return datetime.now(timezone.utc).date()


@dataclass(frozen=True)
class UsageDecision:
    allowed: bool
    remaining: int


class DailyUsageLimiter:
    """In-memory counter keyed by caller and calendar day.

    Entries for earlier days are dropped on every check, so the store only
    ever holds today's callers.
    """

    def __init__(self, limit: int = 3, clock: Callable[[], date] | None = None) -> None:
        self._limit = limit
        self._clock = clock or _utc_today
        self._counts: dict[tuple[str, date], int] = {}

    @property
    def limit(self) -> int:
        return self._limit

    def __len__(self) -> int:
        return len(self._counts)

    def _prune(self, today: date) -> None:
        for key in [k for k in self._counts if k[1] != today]:
            del self._counts[key]

    def check_and_consume(self, key: str) -> UsageDecision:
        today = self._clock()
        self._prune(today)
        slot = (key, today)
        used = self._counts.get(slot, 0)
        if used >= self._limit:
            return UsageDecision(allowed=False, remaining=0)
        self._counts[slot] = used + 1
        return UsageDecision(allowed=True, remaining=self._limit - used - 1)
