"""Drink kinds, drink records, and alcohol content helpers.

US standard drink = 0.6 fl oz of pure ethanol.
"""

import math
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Tuple

from bac_engine.errors import InvalidInput

# Pure ethanol per US standard drink, in fl oz.
STANDARD_DRINK_OZ = 0.6

# Ethanol density (g/mL) for volume x ABV -> grams.
ETHANOL_DENSITY = 0.789

ML_PER_OZ = 29.5735


class DrinkKind(Enum):
    """Closed set of drink categories with default serving size and ABV."""

    BEER = ("Beer", 12.0, 5.0)
    WINE = ("Wine", 5.0, 12.0)
    COCKTAIL = ("Cocktail", 4.0, 15.0)
    SHOT = ("Shot", 1.5, 40.0)
    OTHER = ("Other", 8.0, 10.0)

    def __init__(self, label: str, default_oz: float, default_percent: float):
        self.label = label
        self.default_oz = default_oz
        self.default_percent = default_percent

    @classmethod
    def parse(cls, value) -> "DrinkKind":
        """Accept a DrinkKind, its name ("BEER") or its label ("Beer")."""
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        for kind in cls:
            if text.upper() == kind.name or text == kind.label:
                return kind
        raise InvalidInput(f"Unknown drink kind: {value!r}")


def grams_from_volume_percent(volume_oz: float, alcohol_percent: float) -> float:
    """Convert fluid ounces and ABV percent (0 to 100) to grams of ethanol."""
    return volume_oz * (alcohol_percent / 100.0) * ETHANOL_DENSITY * ML_PER_OZ


def validate_drink(size_oz, alcohol_percent) -> Tuple[float, float]:
    """Return (size_oz, alcohol_percent) as floats or raise InvalidInput."""
    try:
        size = float(size_oz)
        percent = float(alcohol_percent)
    except (TypeError, ValueError):
        raise InvalidInput("Size and alcohol percentage must be numbers")
    if math.isnan(size) or math.isinf(size) or size <= 0:
        raise InvalidInput("Size must be greater than 0 oz")
    if math.isnan(percent) or percent <= 0 or percent > 100:
        raise InvalidInput("Alcohol percentage must be in (0, 100]")
    return size, percent


@dataclass(frozen=True)
class DrinkRecord:
    """A single logged drink. Never mutated; edit = remove + add."""

    kind: DrinkKind
    size_oz: float
    alcohol_percent: float
    timestamp: datetime
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @property
    def standard_drinks(self) -> float:
        return (self.size_oz * self.alcohol_percent / 100.0) / STANDARD_DRINK_OZ

    @property
    def alcohol_grams(self) -> float:
        return grams_from_volume_percent(self.size_oz, self.alcohol_percent)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "kind": self.kind.name,
            "size_oz": self.size_oz,
            "alcohol_percent": self.alcohol_percent,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, raw: dict) -> "DrinkRecord":
        size, percent = validate_drink(raw.get("size_oz"), raw.get("alcohol_percent"))
        return cls(
            kind=DrinkKind.parse(raw.get("kind", "OTHER")),
            size_oz=size,
            alcohol_percent=percent,
            timestamp=datetime.fromisoformat(raw["timestamp"]),
            id=str(raw["id"]),
        )


def list_drink_kinds() -> List[dict]:
    """Kinds with their default serving, for UI pickers."""
    return [
        {
            "key": k.name,
            "name": k.label,
            "default_oz": k.default_oz,
            "default_percent": k.default_percent,
        }
        for k in DrinkKind
    ]
