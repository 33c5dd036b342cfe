"""Persistence contract for the drink ledger and its SQLite-backed default.

The ledger only relies on read-after-write consistency within one process;
the storage format is private to each implementation.
"""

from __future__ import annotations

import json
import sqlite3
from datetime import date
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from loguru import logger

from bac_engine.drinks import DrinkRecord
from bac_engine.errors import PersistenceFailure
from bac_engine.profile import UserProfile

RECORDS_KEY = "saved_drinks"
PROFILE_KEY = "user_profile"
LAST_RESET_KEY = "last_reset_date"
PEAK_KEY = "peak_bac_today"


@runtime_checkable
class DrinkStore(Protocol):
    """Key-value persistence used by :class:`bac_engine.ledger.DrinkLedger`.

    Implementations raise :class:`PersistenceFailure` when a write cannot be
    made durable. Loads return ``None`` / ``[]`` when nothing was saved yet.
    """

    def save_records(self, records: list[DrinkRecord]) -> None: ...

    def load_records(self) -> list[DrinkRecord]: ...

    def save_profile(self, profile: UserProfile) -> None: ...

    def load_profile(self) -> UserProfile | None: ...

    def save_last_reset_date(self, day: date) -> None: ...

    def load_last_reset_date(self) -> date | None: ...

    def save_peak_bac(self, peak: float) -> None: ...

    def load_peak_bac(self) -> float | None: ...


def init_db(db_path: str) -> None:
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    with sqlite3.connect(db_path) as conn:
        conn.execute("PRAGMA journal_mode=WAL")
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS kv (
                key TEXT PRIMARY KEY,
                value_json TEXT NOT NULL,
                updated_at TEXT NOT NULL DEFAULT (datetime('now'))
            )
            """
        )
        conn.commit()


class SqliteStore:
    """Single ``kv`` table holding JSON values, one row per key."""

    def __init__(self, db_path: str):
        self.db_path = db_path
        try:
            init_db(db_path)
        except (sqlite3.Error, OSError) as e:
            raise PersistenceFailure(f"Could not open {db_path}: {e}") from e

    def _put(self, key: str, value: Any) -> None:
        value_json = json.dumps(value, separators=(",", ":"), ensure_ascii=True)
        try:
            with sqlite3.connect(self.db_path) as conn:
                conn.execute(
                    """
                    INSERT INTO kv (key, value_json, updated_at)
                    VALUES (?, ?, datetime('now'))
                    ON CONFLICT(key) DO UPDATE SET value_json = excluded.value_json, updated_at = excluded.updated_at
                    """,
                    (key, value_json),
                )
                conn.commit()
        except sqlite3.Error as e:
            raise PersistenceFailure(f"Could not save {key}: {e}") from e

    def _get(self, key: str) -> Any:
        try:
            with sqlite3.connect(self.db_path) as conn:
                row = conn.execute("SELECT value_json FROM kv WHERE key = ?", (key,)).fetchone()
        except sqlite3.Error as e:
            raise PersistenceFailure(f"Could not load {key}: {e}") from e
        if row is None:
            return None
        try:
            return json.loads(row[0])
        except json.JSONDecodeError:
            logger.warning(f"Ignoring unreadable value for {key}")
            return None

    def save_records(self, records: list[DrinkRecord]) -> None:
        self._put(RECORDS_KEY, [r.to_dict() for r in records])

    def load_records(self) -> list[DrinkRecord]:
        raw = self._get(RECORDS_KEY)
        if not isinstance(raw, list):
            return []
        out: list[DrinkRecord] = []
        for item in raw:
            if not isinstance(item, dict):
                logger.warning(f"Skipping drink record that is not an object: {item!r}")
                continue
            try:
                out.append(DrinkRecord.from_dict(item))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed drink record: {e}")
        return out

    def save_profile(self, profile: UserProfile) -> None:
        self._put(PROFILE_KEY, profile.to_dict())

    def load_profile(self) -> UserProfile | None:
        raw = self._get(PROFILE_KEY)
        if not isinstance(raw, dict):
            return None
        try:
            return UserProfile.from_dict(raw)
        except ValueError as e:
            logger.warning(f"Ignoring invalid saved profile: {e}")
            return None

    def save_last_reset_date(self, day: date) -> None:
        self._put(LAST_RESET_KEY, day.isoformat())

    def load_last_reset_date(self) -> date | None:
        raw = self._get(LAST_RESET_KEY)
        if not isinstance(raw, str):
            return None
        try:
            return date.fromisoformat(raw)
        except ValueError:
            return None

    def save_peak_bac(self, peak: float) -> None:
        self._put(PEAK_KEY, peak)

    def load_peak_bac(self) -> float | None:
        raw = self._get(PEAK_KEY)
        if isinstance(raw, bool) or not isinstance(raw, (int, float)) or raw < 0:
            return None
        return float(raw)
