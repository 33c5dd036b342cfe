"""SQLite store for drink records, profile, and reset marker."""
from datetime import date

import pytest

from bac_engine.drinks import DrinkKind, DrinkRecord
from bac_engine.errors import PersistenceFailure
from bac_engine.profile import UserProfile
from bac_engine.ledger import DrinkLedger
from bac_engine.store import PEAK_KEY, RECORDS_KEY, DrinkStore, SqliteStore
from tests.conftest import T0


def test_empty_store(db_path):
    store = SqliteStore(db_path)
    assert isinstance(store, DrinkStore)
    assert store.load_records() == []
    assert store.load_profile() is None
    assert store.load_last_reset_date() is None
    assert store.load_peak_bac() is None


def test_save_and_load(db_path):
    store = SqliteStore(db_path)
    records = [DrinkRecord(DrinkKind.WINE, 5.0, 12.0, T0), DrinkRecord(DrinkKind.SHOT, 1.5, 40.0, T0)]
    store.save_records(records)
    store.save_profile(UserProfile(weight_lb=130, sex="female"))
    store.save_last_reset_date(date(2025, 4, 12))

    fresh = SqliteStore(db_path)
    assert fresh.load_records() == records
    assert fresh.load_profile() == UserProfile(weight_lb=130, sex="female")
    assert fresh.load_last_reset_date() == date(2025, 4, 12)


def test_save_overwrites(db_path):
    store = SqliteStore(db_path)
    store.save_records([DrinkRecord(DrinkKind.BEER, 12.0, 5.0, T0)])
    store.save_records([])
    assert store.load_records() == []


def test_malformed_records_are_skipped(db_path):
    store = SqliteStore(db_path)
    good = DrinkRecord(DrinkKind.BEER, 12.0, 5.0, T0)
    store._put(RECORDS_KEY, [good.to_dict(), {"id": "x", "size_oz": -1}, {"kind": "BEER"}])
    assert store.load_records() == [good]


def test_unusable_path_raises(tmp_path):
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("")
    with pytest.raises(PersistenceFailure):
        SqliteStore(str(blocker / "bac.db"))


def test_non_object_records_are_skipped(db_path, clock):
    store = SqliteStore(db_path)
    good = DrinkRecord(DrinkKind.BEER, 12.0, 5.0, T0)
    store._put(RECORDS_KEY, [1, "x", None, good.to_dict()])
    assert store.load_records() == [good]
    ledger = DrinkLedger(store, clock=clock)
    assert ledger.records == (good,)


def test_peak_bac_roundtrip(db_path):
    store = SqliteStore(db_path)
    store.save_peak_bac(0.0912)
    assert SqliteStore(db_path).load_peak_bac() == 0.0912


@pytest.mark.parametrize("raw", ["high", -0.1, True, [0.05]])
def test_bad_peak_bac_is_ignored(db_path, raw):
    store = SqliteStore(db_path)
    store._put(PEAK_KEY, raw)
    assert store.load_peak_bac() is None
