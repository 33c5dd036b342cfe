"""Reset scheduler: periodic recompute tick plus the daily 4 AM ledger clear.

Wraps APScheduler's ``BackgroundScheduler`` with one interval job. APScheduler
is imported lazily (only in :meth:`start`) so tests can drive :meth:`tick`
directly with a controlled clock.
"""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Any

from loguru import logger

from bac_engine.errors import PersistenceFailure
from bac_engine.ledger import DrinkLedger
from bac_engine.store import DrinkStore

DEFAULT_RESET_HOUR = 4
DEFAULT_TICK_SECONDS = 60.0

JOB_ID = "bac_tick"


class SchedulerState(Enum):
    IDLE = "idle"
    TICKING = "ticking"


class ResetScheduler:
    """Drives :class:`DrinkLedger` refreshes and the daily cutover.

    Args:
        ledger: The engine to refresh and clear.
        store: Where the last-reset date marker lives.
        reset_hour: Local hour (0-23) at which yesterday's drinks are cleared.
        tick_seconds: Interval between ticks once started.
    """

    def __init__(
        self,
        ledger: DrinkLedger,
        store: DrinkStore,
        reset_hour: int = DEFAULT_RESET_HOUR,
        tick_seconds: float = DEFAULT_TICK_SECONDS,
    ):
        if not 0 <= reset_hour <= 23:
            raise ValueError("reset_hour must be between 0 and 23")
        if tick_seconds <= 0:
            raise ValueError("tick_seconds must be > 0")
        self._ledger = ledger
        self._store = store
        self.reset_hour = reset_hour
        self.tick_seconds = tick_seconds
        self.state = SchedulerState.IDLE
        self._scheduler: Any = None  # BackgroundScheduler, lazily created

    # ── Tick ───────────────────────────────────────────────────────

    def tick(self) -> bool:
        """Run one cutover check and recompute. Returns True if the ledger was cleared."""
        with self._ledger.lock:
            self.state = SchedulerState.TICKING
            try:
                cleared = self._maybe_cutover()
                self._ledger.retry_persist()
                if not cleared:
                    self._ledger.refresh()
            finally:
                self.state = SchedulerState.IDLE
        return cleared

    def _load_marker(self) -> date | None:
        try:
            return self._store.load_last_reset_date()
        except PersistenceFailure as e:
            logger.warning(f"Could not read last reset date: {e}")
            return None

    def _save_marker(self, today: date) -> None:
        try:
            self._store.save_last_reset_date(today)
        except PersistenceFailure as e:
            logger.warning(f"Could not save last reset date: {e}")

    def _maybe_cutover(self) -> bool:
        now = self._ledger.now()
        today = now.date()
        last_reset = self._load_marker()
        if last_reset is None:
            self._save_marker(today)
            logger.info(f"Initialised daily reset marker to {today}")
            return False
        if now.hour != self.reset_hour or last_reset >= today:
            return False

        logger.info(f"Daily cutover at {now:%H:%M}: clearing {len(self._ledger.records)} drink(s)")
        self._ledger.reset_peak()
        self._ledger.clear_drinks()
        self._save_marker(today)
        return True

    # ── Lifecycle ──────────────────────────────────────────────────

    def start(self) -> None:
        """Create the APScheduler instance and begin ticking in the background."""
        from apscheduler.schedulers.background import BackgroundScheduler
        from apscheduler.triggers.interval import IntervalTrigger

        if self._scheduler is not None:
            return
        self._scheduler = BackgroundScheduler()
        self._scheduler.add_job(
            self._run_tick,
            trigger=IntervalTrigger(seconds=self.tick_seconds),
            id=JOB_ID,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        self._scheduler.start()
        logger.info(f"ResetScheduler started: every {self.tick_seconds}s, reset hour {self.reset_hour}")

    def _run_tick(self) -> None:
        try:
            self.tick()
        except Exception:
            logger.exception("Scheduled tick failed")

    def shutdown(self) -> None:
        """Stop ticking. Safe to call more than once."""
        if self._scheduler is not None:
            self._scheduler.shutdown(wait=True)
            self._scheduler = None
            logger.info("ResetScheduler shut down")

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running
