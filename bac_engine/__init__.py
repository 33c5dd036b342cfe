"""
BAC engine: Widmark-based BAC estimation, drink ledger, session tracking, and daily reset.
Use from project root: python -m bac_engine.main
"""

from bac_engine.drinks import (
    DrinkKind,
    DrinkRecord,
    grams_from_volume_percent,
    list_drink_kinds,
)
from bac_engine.profile import BiologicalSex, UserProfile
from bac_engine.calculations import (
    Estimate,
    bac_at_time,
    bac_curve,
    bac_rise_from_grams,
    estimate,
    time_until_sober,
)
from bac_engine.errors import BacEngineError, InvalidInput, NotFound, PersistenceFailure
from bac_engine.ledger import DrinkLedger, EngineState
from bac_engine.safety import SafetyStatus, get_drive_advice, safety_status
from bac_engine.scheduler import ResetScheduler
from bac_engine.session import SessionStatus, evaluate
from bac_engine.store import DrinkStore, SqliteStore

__all__ = [
    "DrinkKind",
    "DrinkRecord",
    "grams_from_volume_percent",
    "list_drink_kinds",
    "BiologicalSex",
    "UserProfile",
    "Estimate",
    "estimate",
    "bac_at_time",
    "bac_curve",
    "bac_rise_from_grams",
    "time_until_sober",
    "BacEngineError",
    "InvalidInput",
    "NotFound",
    "PersistenceFailure",
    "DrinkLedger",
    "EngineState",
    "SafetyStatus",
    "get_drive_advice",
    "safety_status",
    "ResetScheduler",
    "SessionStatus",
    "evaluate",
    "DrinkStore",
    "SqliteStore",
]
