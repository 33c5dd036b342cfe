"""Shared fixtures: a controllable clock and sqlite-backed ledgers."""

from datetime import datetime, timedelta

import pytest

from bac_engine.errors import PersistenceFailure
from bac_engine.ledger import DrinkLedger
from bac_engine.profile import UserProfile
from bac_engine.store import SqliteStore

T0 = datetime(2025, 4, 12, 21, 0, 0)


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now

    def set(self, now: datetime) -> datetime:
        self.now = now
        return now


class FlakyStore(SqliteStore):
    """SqliteStore whose record saves can be made to fail."""

    def __init__(self, db_path: str):
        super().__init__(db_path)
        self.fail_saves = False
        self.save_calls = 0

    def save_records(self, records):
        self.save_calls += 1
        if self.fail_saves:
            raise PersistenceFailure("disk full")
        super().save_records(records)


@pytest.fixture
def clock():
    return FakeClock(T0)


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "bac.db")


@pytest.fixture
def store(db_path):
    return FlakyStore(db_path)


@pytest.fixture
def male_160():
    return UserProfile(weight_lb=160, sex="male")


@pytest.fixture
def ledger(store, clock, male_160):
    return DrinkLedger(store, clock=clock, profile=male_160)
