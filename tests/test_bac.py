"""Tests for BAC calculations and drink records. Run from project root: pytest tests/ -v"""
from datetime import timedelta

import pytest

from bac_engine.calculations import (
    ELIMINATION_PER_HOUR,
    bac_at_time,
    bac_curve,
    bac_rise_from_grams,
    estimate,
    peak_bac,
    time_until_legal,
    time_until_sober,
)
from bac_engine.drinks import DrinkKind, DrinkRecord, grams_from_volume_percent, validate_drink
from bac_engine.errors import InvalidInput
from bac_engine.profile import UserProfile
from tests.conftest import T0

# 12 oz of 5% beer: 12 * 0.05 * 0.789 * 29.5735 g over 160 lb * 453.592 g/lb * 0.68
BEER_RISE_MALE_160 = (12 * 0.05 * 0.789 * 29.5735) / (160 * 453.592 * 0.68) * 100


def beer(at, size=12.0, percent=5.0):
    return DrinkRecord(DrinkKind.BEER, size, percent, at)


def shot(at):
    return DrinkRecord(DrinkKind.SHOT, 1.5, 40.0, at)


def test_standard_drinks():
    assert beer(T0).standard_drinks == pytest.approx(1.0)
    assert shot(T0).standard_drinks == pytest.approx(1.0)
    assert DrinkRecord(DrinkKind.WINE, 5.0, 12.0, T0).standard_drinks == pytest.approx(1.0)


def test_grams_from_volume():
    assert grams_from_volume_percent(12, 5) == pytest.approx(14.0, abs=0.01)
    assert beer(T0).alcohol_grams == pytest.approx(grams_from_volume_percent(12, 5))


def test_bac_rise(male_160):
    rise = bac_rise_from_grams(14, male_160)
    assert 0.01 < rise < 0.05
    female = UserProfile(weight_lb=160, sex="female")
    assert bac_rise_from_grams(14, female) > rise


def test_empty_records_is_zero(male_160):
    assert estimate([], male_160, T0) == (0.0, timedelta(0))


def test_scenario_single_beer(male_160):
    bac, until_sober = estimate([beer(T0)], male_160, T0)
    assert bac == pytest.approx(BEER_RISE_MALE_160)
    assert bac == pytest.approx(0.0284, abs=1e-4)
    expected_hours = (BEER_RISE_MALE_160 - 0.01) / 0.015
    assert until_sober.total_seconds() / 3600 == pytest.approx(expected_hours)


def test_scenario_beer_then_shot(male_160):
    drinks = [beer(T0), shot(T0 + timedelta(hours=2))]
    at_shot = T0 + timedelta(hours=2)
    beer_left = max(0.0, BEER_RISE_MALE_160 - 2 * ELIMINATION_PER_HOUR)
    shot_rise = bac_rise_from_grams(shot(at_shot).alcohol_grams, male_160)
    bac, _ = estimate(drinks, male_160, at_shot)
    assert bac == pytest.approx(beer_left + shot_rise)


def test_monotone_decay(male_160):
    drinks = [beer(T0)]
    samples = [bac_at_time(drinks, male_160, T0 + timedelta(minutes=m)) for m in range(0, 180, 10)]
    assert all(b2 <= b1 for b1, b2 in zip(samples, samples[1:]))
    gone_after = BEER_RISE_MALE_160 / ELIMINATION_PER_HOUR
    assert bac_at_time(drinks, male_160, T0 + timedelta(hours=gone_after + 0.01)) == 0.0


def test_elimination_is_per_drink(male_160):
    # An old drink that is fully eliminated does not eat into a fresh one.
    drinks = [beer(T0), beer(T0 + timedelta(hours=5))]
    bac = bac_at_time(drinks, male_160, T0 + timedelta(hours=5))
    assert bac == pytest.approx(BEER_RISE_MALE_160)


def test_24h_cutoff():
    heavy = UserProfile(weight_lb=100, sex="female")
    # Enough alcohol that its contribution would survive 24h of elimination.
    big = DrinkRecord(DrinkKind.OTHER, 100.0, 40.0, T0)
    just_inside = T0 + timedelta(hours=23, minutes=59, seconds=59)
    just_outside = T0 + timedelta(hours=24, seconds=1)
    assert estimate([big], heavy, just_inside).bac > 0
    assert estimate([big], heavy, T0 + timedelta(hours=24)).bac == 0.0
    assert estimate([big], heavy, just_outside) == (0.0, timedelta(0))


def test_future_drinks_ignored(male_160):
    assert estimate([beer(T0 + timedelta(minutes=5))], male_160, T0).bac == 0.0


def test_time_until_sober_floor():
    assert time_until_sober(0.01) == timedelta(0)
    assert time_until_sober(0.0) == timedelta(0)
    assert time_until_sober(0.025) == timedelta(hours=1)


def test_sober_invariant(male_160):
    drinks = [beer(T0), beer(T0 + timedelta(minutes=30))]
    for m in range(0, 300, 7):
        bac, until = estimate(drinks, male_160, T0 + timedelta(minutes=m))
        assert bac >= 0
        assert (until == timedelta(0)) == (bac <= 0.01)


def test_curve_ends_when_sober(male_160):
    curve = bac_curve([beer(T0)], male_160, T0, max_hours=6)
    assert curve[0] == (0.0, round(BEER_RISE_MALE_160, 4))
    assert curve[-1][1] == 0.0
    assert curve[-1][0] < 6
    with pytest.raises(ValueError):
        bac_curve([beer(T0)], male_160, T0, step_hours=0)


def test_peak_bac_catches_drink_instants(male_160):
    drinks = [beer(T0 + timedelta(minutes=7)), beer(T0 + timedelta(minutes=8))]
    peak = peak_bac(drinks, male_160, T0, T0 + timedelta(hours=1))
    assert peak == pytest.approx(bac_at_time(drinks, male_160, T0 + timedelta(minutes=8)))


@pytest.mark.parametrize("size,percent", [(0, 5), (-1, 5), (12, 0), (12, 101), ("x", 5), (float("nan"), 5)])
def test_validate_drink_rejects(size, percent):
    with pytest.raises(InvalidInput):
        validate_drink(size, percent)


def test_drink_kind_parse():
    assert DrinkKind.parse("beer") is DrinkKind.BEER
    assert DrinkKind.parse("Shot") is DrinkKind.SHOT
    assert DrinkKind.parse(DrinkKind.WINE) is DrinkKind.WINE
    with pytest.raises(InvalidInput):
        DrinkKind.parse("mead")


def test_profile_validation():
    with pytest.raises(InvalidInput):
        UserProfile(weight_lb=0)
    with pytest.raises(InvalidInput):
        UserProfile(weight_lb=150, sex="other")
    assert UserProfile(weight_lb="150").weight_lb == 150.0


def test_record_dict_roundtrip():
    r = beer(T0)
    assert DrinkRecord.from_dict(r.to_dict()) == r


def test_time_until_legal():
    assert time_until_legal(0.11).total_seconds() == pytest.approx(2 * 3600)
    assert time_until_legal(0.08) == timedelta(0)
    assert time_until_legal(0.05) == timedelta(0)
    assert time_until_legal(0.0) == timedelta(0)
