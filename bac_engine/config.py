"""Engine settings read from environment variables."""

import math
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from bac_engine.scheduler import DEFAULT_RESET_HOUR, DEFAULT_TICK_SECONDS

DEFAULT_DB_PATH = str(Path("instance") / "bac.db")


def _parse_int(value: Any, default: int, min_value: int, max_value: int) -> int:
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return default
    if parsed < min_value or parsed > max_value:
        return default
    return parsed


def clamp_float(value: Any, default: float, min_value: float, max_value: float) -> float:
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        parsed = default
    if math.isnan(parsed):
        parsed = default
    return max(min_value, min(max_value, parsed))


@dataclass
class EngineConfig:
    db_path: str = DEFAULT_DB_PATH
    tick_seconds: float = DEFAULT_TICK_SECONDS
    reset_hour: int = DEFAULT_RESET_HOUR

    @classmethod
    def from_env(cls) -> "EngineConfig":
        return cls(
            db_path=os.environ.get("BAC_DB_PATH", DEFAULT_DB_PATH),
            tick_seconds=clamp_float(os.environ.get("BAC_TICK_SECONDS"), DEFAULT_TICK_SECONDS, 1.0, 3600.0),
            reset_hour=_parse_int(os.environ.get("BAC_RESET_HOUR"), DEFAULT_RESET_HOUR, 0, 23),
        )
