"""
Drinking session and day-streak detection.
Recomputed from the full record set every time; nothing carried between calls.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Set

from bac_engine.drinks import DrinkRecord

# A drink within this window of now keeps the session open.
SESSION_WINDOW = timedelta(hours=6)


@dataclass(frozen=True)
class SessionStatus:
    is_drinking_session: bool = False
    session_start_time: Optional[datetime] = None
    drinking_streak_days: int = 0
    sober_streak_days: int = 0


def session_start(records: Iterable[DrinkRecord], now: datetime) -> Optional[datetime]:
    """Earliest drink inside the session window, or None when no session is active."""
    recent = [r.timestamp for r in records if timedelta(0) <= now - r.timestamp < SESSION_WINDOW]
    return min(recent) if recent else None


def _drinking_days(records: Iterable[DrinkRecord], today: date) -> Set[date]:
    return {r.timestamp.date() for r in records if r.timestamp.date() <= today}


def streaks(records: Iterable[DrinkRecord], today: date) -> tuple[int, int]:
    """Return (drinking_streak_days, sober_streak_days) ending today.

    Today's own status picks which streak is counted. The walk goes back one
    calendar day at a time and stops at the first day that breaks the
    pattern, or once it is past the earliest logged day.
    """
    days = _drinking_days(records, today)
    if not days:
        return 0, 0

    earliest = min(days)
    drinking_today = today in days
    count = 0
    day = today
    while day >= earliest and (day in days) == drinking_today:
        count += 1
        day -= timedelta(days=1)

    if drinking_today:
        return count, 0
    return 0, count


def evaluate(records: Iterable[DrinkRecord], now: datetime) -> SessionStatus:
    records = list(records)
    start = session_start(records, now)
    drinking, sober = streaks(records, now.date())
    return SessionStatus(
        is_drinking_session=start is not None,
        session_start_time=start,
        drinking_streak_days=drinking,
        sober_streak_days=sober,
    )
