"""
Drink ledger: owns the record set, mediates add/remove/clear, and publishes
one immutable EngineState snapshot after every mutation or refresh.

All writes go through a single re-entrant lock. Readers take ``ledger.state``
without locking; the snapshot is replaced wholesale, never edited.
"""

import threading
from dataclasses import dataclass, field
from datetime import datetime, time, timedelta
from typing import Callable, List, Optional, Tuple

from loguru import logger

from bac_engine import calculations
from bac_engine.drinks import DrinkKind, DrinkRecord, validate_drink
from bac_engine.errors import NotFound, PersistenceFailure
from bac_engine.profile import UserProfile
from bac_engine.safety import SafetyStatus, safety_status
from bac_engine.session import evaluate as evaluate_session
from bac_engine.stats import calories_on, daily_drink_stats
from bac_engine.store import DrinkStore

Clock = Callable[[], datetime]
Observer = Callable[["EngineState"], None]


@dataclass(frozen=True)
class EngineState:
    current_bac: float = 0.0
    time_until_sober: timedelta = timedelta(0)
    peak_bac_today: float = 0.0
    is_drinking_session: bool = False
    session_start_time: Optional[datetime] = None
    drinking_streak_days: int = 0
    sober_streak_days: int = 0
    safety_status: SafetyStatus = SafetyStatus.SAFE
    drinks_today: int = 0
    standard_drinks_today: float = 0.0
    calories_today: int = 0
    time_until_legal: timedelta = timedelta(0)
    records: Tuple[DrinkRecord, ...] = ()
    profile: UserProfile = field(default_factory=UserProfile)
    as_of: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "bac_now": round(self.current_bac, 4),
            "time_until_sober_seconds": int(self.time_until_sober.total_seconds()),
            "peak_bac_today": round(self.peak_bac_today, 4),
            "is_drinking_session": self.is_drinking_session,
            "session_start_time": self.session_start_time.isoformat() if self.session_start_time else None,
            "drinking_streak_days": self.drinking_streak_days,
            "sober_streak_days": self.sober_streak_days,
            "safety_status": self.safety_status.value,
            "drinks_today": self.drinks_today,
            "standard_drinks_today": round(self.standard_drinks_today, 2),
            "calories_today": self.calories_today,
            "time_until_legal_seconds": int(self.time_until_legal.total_seconds()),
            "drink_count": len(self.records),
            "drinks": [r.to_dict() for r in self.records],
            "profile": self.profile.to_dict(),
            "as_of": self.as_of.isoformat() if self.as_of else None,
        }


class DrinkLedger:
    """The engine's single writer. Construct once and hand it to collaborators."""

    def __init__(self, store: DrinkStore, clock: Clock = datetime.now, profile: Optional[UserProfile] = None):
        self._store = store
        self._clock = clock
        self._lock = threading.RLock()
        self._observers: List[Observer] = []
        self._persist_pending = False
        self._peak_bac_today = self._load_peak()
        self._records: List[DrinkRecord] = self._load_records()
        self._profile = profile or self._load_profile() or UserProfile()
        self._state = EngineState(profile=self._profile)
        self._publish()
        logger.info(f"Drink ledger loaded with {len(self._records)} record(s)")

    def _load_records(self) -> List[DrinkRecord]:
        try:
            return list(self._store.load_records())
        except PersistenceFailure as e:
            logger.warning(f"Starting with an empty ledger: {e}")
            return []

    def _load_peak(self) -> float:
        try:
            return self._store.load_peak_bac() or 0.0
        except PersistenceFailure as e:
            logger.warning(f"Peak BAC starts at zero: {e}")
            return 0.0

    def _load_profile(self) -> Optional[UserProfile]:
        try:
            return self._store.load_profile()
        except PersistenceFailure as e:
            logger.warning(f"Using default profile: {e}")
            return None

    # ── Read side ─────────────────────────────────────────────────

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def records(self) -> Tuple[DrinkRecord, ...]:
        return self._state.records

    @property
    def profile(self) -> UserProfile:
        return self._profile

    @property
    def lock(self) -> threading.RLock:
        """Serialization point for callers that need several steps to be atomic."""
        return self._lock

    @property
    def persist_pending(self) -> bool:
        return self._persist_pending

    def now(self) -> datetime:
        return self._clock()

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Register a callback for every new snapshot. Returns an unsubscribe function."""
        with self._lock:
            self._observers.append(observer)

        def unsubscribe() -> None:
            with self._lock:
                if observer in self._observers:
                    self._observers.remove(observer)

        return unsubscribe

    # ── Mutations ─────────────────────────────────────────────────

    def add_drink(self, kind, size_oz, alcohol_percent, at: Optional[datetime] = None) -> DrinkRecord:
        kind = DrinkKind.parse(kind)
        size, percent = validate_drink(size_oz, alcohol_percent)
        with self._lock:
            record = DrinkRecord(kind=kind, size_oz=size, alcohol_percent=percent, timestamp=at or self._clock())
            self._records.append(record)
            self._persist()
            self._publish()
        logger.debug(f"Added {kind.label} {size}oz @ {percent}% ({record.id})")
        return record

    def remove_drink(self, record_id: str) -> DrinkRecord:
        with self._lock:
            for i, r in enumerate(self._records):
                if r.id == record_id:
                    removed = self._records.pop(i)
                    break
            else:
                logger.warning(f"Remove ignored, no drink with id {record_id}")
                raise NotFound(f"No drink with id {record_id}")
            self._persist()
            self._publish()
        logger.debug(f"Removed drink {record_id}")
        return removed

    def clear_drinks(self) -> None:
        with self._lock:
            self._records.clear()
            self._persist()
            self._publish()
        logger.debug("Cleared all drinks")

    def update_profile(self, profile: UserProfile) -> None:
        with self._lock:
            self._profile = profile
            try:
                self._store.save_profile(profile)
            except PersistenceFailure as e:
                logger.warning(f"Profile not saved: {e}")
            self._publish()

    def reset_peak(self) -> None:
        with self._lock:
            self._peak_bac_today = 0.0
            self._save_peak()

    def refresh(self) -> EngineState:
        """Recompute against the clock without changing the record set."""
        with self._lock:
            self._publish()
            return self._state

    def retry_persist(self) -> bool:
        """Re-save the full record set if an earlier save failed. Returns True when clean."""
        with self._lock:
            if self._persist_pending:
                self._persist()
            return not self._persist_pending

    # ── Internals (caller holds the lock) ─────────────────────────

    def _persist(self) -> None:
        try:
            self._store.save_records(list(self._records))
        except PersistenceFailure as e:
            self._persist_pending = True
            logger.warning(f"Drink records not saved, will retry: {e}")
        else:
            self._persist_pending = False

    def _save_peak(self) -> None:
        try:
            self._store.save_peak_bac(self._peak_bac_today)
        except PersistenceFailure as e:
            logger.warning(f"Peak BAC not saved: {e}")

    def _compute(self, now: datetime) -> EngineState:
        records = tuple(self._records)
        bac, until_sober = calculations.estimate(records, self._profile, now)
        day_start = datetime.combine(now.date(), time())
        peak = max(
            self._peak_bac_today,
            bac,
            calculations.peak_bac(records, self._profile, day_start, now),
        )
        if peak > self._peak_bac_today:
            self._peak_bac_today = peak
            self._save_peak()
        session = evaluate_session(records, now)
        drinks_today, standard_today = daily_drink_stats(records, now.date())
        return EngineState(
            current_bac=bac,
            time_until_sober=until_sober,
            peak_bac_today=self._peak_bac_today,
            is_drinking_session=session.is_drinking_session,
            session_start_time=session.session_start_time,
            drinking_streak_days=session.drinking_streak_days,
            sober_streak_days=session.sober_streak_days,
            safety_status=safety_status(bac),
            drinks_today=drinks_today,
            standard_drinks_today=standard_today,
            calories_today=calories_on(records, now.date()),
            time_until_legal=calculations.time_until_legal(bac),
            records=records,
            profile=self._profile,
            as_of=now,
        )

    def _publish(self) -> None:
        self._state = self._compute(self._clock())
        for observer in list(self._observers):
            try:
                observer(self._state)
            except Exception:
                logger.exception("State observer failed")
