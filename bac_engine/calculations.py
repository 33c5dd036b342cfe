"""BAC calculations using Widmark-style rise and linear elimination.

Model:
- Rise: BAC = [grams / (body_weight_g * r)] * 100
- r = 0.68 (male), 0.55 (female)
- Elimination: 0.015 BAC percentage points per hour, applied to each drink
  separately and floored at zero per drink
- Drinks 24h old or older contribute nothing
"""

from datetime import datetime, timedelta
from typing import Iterable, List, NamedTuple, Optional, Tuple

from bac_engine.drinks import DrinkRecord
from bac_engine.profile import UserProfile

# Elimination rate (% BAC per hour)
ELIMINATION_PER_HOUR = 0.015

# BAC at or below this is reported as fully sober.
SOBER_FLOOR = 0.01

# US per se driving limit (%).
LEGAL_LIMIT = 0.08

GRAMS_PER_LB = 453.592

LOOKBACK = timedelta(hours=24)


class Estimate(NamedTuple):
    bac: float
    time_until_sober: timedelta


def _body_weight_grams(weight_lb: float) -> float:
    return weight_lb * GRAMS_PER_LB


def _hours_between(earlier: datetime, later: datetime) -> float:
    return (later - earlier).total_seconds() / 3600.0


def bac_rise_from_grams(grams_alcohol: float, profile: UserProfile) -> float:
    """Immediate BAC rise (%) from a single dose of alcohol."""
    w_g = _body_weight_grams(profile.weight_lb)
    return grams_alcohol / (w_g * profile.body_water_constant) * 100.0


def recent_records(records: Iterable[DrinkRecord], as_of: datetime) -> List[DrinkRecord]:
    """Records logged at or before as_of and less than 24h old."""
    return [r for r in records if timedelta(0) <= as_of - r.timestamp < LOOKBACK]


def drink_contribution(record: DrinkRecord, profile: UserProfile, as_of: datetime) -> float:
    """What is left (%) of one drink's rise after elimination up to as_of."""
    rise = bac_rise_from_grams(record.alcohol_grams, profile)
    elapsed = _hours_between(record.timestamp, as_of)
    return max(0.0, rise - ELIMINATION_PER_HOUR * elapsed)


def bac_at_time(records: Iterable[DrinkRecord], profile: UserProfile, as_of: datetime) -> float:
    """BAC (%) at as_of from the given drink records."""
    bac = sum(drink_contribution(r, profile, as_of) for r in recent_records(records, as_of))
    return max(0.0, bac)


def time_until_sober(bac: float) -> timedelta:
    """Time for BAC to fall to the sober floor at the elimination rate."""
    if bac <= SOBER_FLOOR:
        return timedelta(0)
    return timedelta(hours=(bac - SOBER_FLOOR) / ELIMINATION_PER_HOUR)


def time_until_legal(bac: float) -> timedelta:
    """Time for BAC to fall below the legal driving limit. Zero when already under it."""
    if bac < LEGAL_LIMIT:
        return timedelta(0)
    return timedelta(hours=(bac - LEGAL_LIMIT) / ELIMINATION_PER_HOUR)


def estimate(records: Iterable[DrinkRecord], profile: UserProfile, as_of: datetime) -> Estimate:
    """Current BAC and time until sober. Pure; no side effects."""
    recent = recent_records(records, as_of)
    if not recent:
        return Estimate(0.0, timedelta(0))
    bac = bac_at_time(recent, profile, as_of)
    return Estimate(bac, time_until_sober(bac))


def bac_curve(
    records: Iterable[DrinkRecord],
    profile: UserProfile,
    start: datetime,
    max_hours: float = 12.0,
    step_hours: float = 0.25,
    end_when_sober: bool = True,
) -> List[Tuple[float, float]]:
    """Return (hours_from_start, bac_percent) pairs for graphing."""
    if step_hours <= 0:
        raise ValueError("step_hours must be > 0")
    records = list(records)

    points: List[Tuple[float, float]] = []
    t = 0.0
    while t <= max_hours:
        bac = bac_at_time(records, profile, start + timedelta(hours=t))
        points.append((round(t, 4), round(bac, 4)))
        if end_when_sober and bac == 0.0 and not _pending(records, start, t):
            break
        t += step_hours
    return points


def _pending(records: List[DrinkRecord], start: datetime, t: float) -> bool:
    at = start + timedelta(hours=t)
    return any(r.timestamp > at for r in records)


def peak_bac(
    records: Iterable[DrinkRecord],
    profile: UserProfile,
    start: datetime,
    end: datetime,
    step: Optional[timedelta] = None,
) -> float:
    """Highest sampled BAC between start and end (inclusive)."""
    step = step or timedelta(minutes=15)
    records = list(records)
    peak = 0.0
    t = start
    while t <= end:
        peak = max(peak, bac_at_time(records, profile, t))
        t += step
    # Rises are instantaneous, so drink times are the candidates for the peak.
    for r in records:
        if start <= r.timestamp <= end:
            peak = max(peak, bac_at_time(records, profile, r.timestamp))
    return peak
