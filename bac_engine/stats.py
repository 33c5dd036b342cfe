"""Per-day drink totals and display formatting."""

from datetime import date, timedelta
from typing import Iterable, Tuple

from bac_engine.drinks import DrinkKind, DrinkRecord

# Energy in pure ethanol.
CALORIES_PER_ALCOHOL_GRAM = 7

# Rough non-alcohol (mostly carb) calories per fl oz, by kind.
CARB_CALORIES_PER_OZ = {
    DrinkKind.BEER: 13,
    DrinkKind.WINE: 4,
    DrinkKind.COCKTAIL: 12,
    DrinkKind.SHOT: 2,
    DrinkKind.OTHER: 8,
}


def daily_drink_stats(records: Iterable[DrinkRecord], day: date) -> Tuple[int, float]:
    """Returns (total_drinks, standard_drinks) logged on the given calendar day."""
    day_records = [r for r in records if r.timestamp.date() == day]
    return len(day_records), sum(r.standard_drinks for r in day_records)


def drink_calories(record: DrinkRecord) -> int:
    alcohol = int(record.alcohol_grams * CALORIES_PER_ALCOHOL_GRAM)
    carbs = int(record.size_oz * CARB_CALORIES_PER_OZ[record.kind])
    return alcohol + carbs


def calories_on(records: Iterable[DrinkRecord], day: date) -> int:
    """Estimated calories from drinks logged on the given calendar day."""
    return sum(drink_calories(r) for r in records if r.timestamp.date() == day)


def format_time_until_sober(remaining: timedelta) -> str:
    total = max(0, int(remaining.total_seconds()))
    hours, minutes = total // 3600, (total % 3600) // 60
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes} minutes"


def format_time_until_legal(remaining: timedelta) -> str:
    if remaining <= timedelta(0):
        return "You are under the legal limit"
    return format_time_until_sober(remaining)
