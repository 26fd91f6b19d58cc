from datetime import date, datetime

import pytest

from models import Crop, Profile, parse_date
from solver.viability import (
    MARGINAL,
    NOT_VIABLE,
    VIABLE,
    calculate_planting_date,
    filter_viable,
    is_crop_viable,
    planting_window,
    viability_status,
)

LETTUCE = Crop("lettuce", 4, -4, 2)
PROFILE = Profile(date(2024, 4, 15), date(2024, 10, 15))


def test_calculate_planting_date_shifts_by_weeks():
    assert calculate_planting_date(date(2024, 4, 15), -4) == date(2024, 3, 18)
    assert calculate_planting_date("2024-04-15", 2) == date(2024, 4, 29)


def test_window_bounds():
    assert planting_window(LETTUCE, PROFILE) == (date(2024, 3, 18), date(2024, 4, 29))


@pytest.mark.parametrize(
    "when, expected",
    [
        (date(2024, 3, 18), True),
        (date(2024, 4, 29), True),
        (date(2024, 4, 1), True),
        (date(2024, 3, 17), False),
        (date(2024, 4, 30), False),
        (date(2024, 3, 11), False),
        (date(2024, 5, 6), False),
    ],
)
def test_window_is_inclusive(when, expected):
    assert is_crop_viable(LETTUCE, PROFILE, when) is expected


def test_time_of_day_is_ignored():
    assert is_crop_viable(LETTUCE, PROFILE, datetime(2024, 4, 29, 23, 59))
    assert is_crop_viable(LETTUCE, PROFILE, "2024-03-18T06:30:00")


def test_season_extension_moves_only_the_start():
    extended = Profile(date(2024, 4, 15), date(2024, 10, 15), season_extension_weeks=1)
    assert is_crop_viable(LETTUCE, extended, date(2024, 3, 11))
    assert not is_crop_viable(LETTUCE, extended, date(2024, 5, 6))


def test_viability_status():
    assert viability_status(LETTUCE, PROFILE, date(2024, 4, 1)) == VIABLE
    assert viability_status(LETTUCE, PROFILE, date(2024, 3, 11)) == MARGINAL
    assert viability_status(LETTUCE, PROFILE, date(2024, 5, 6)) == NOT_VIABLE
    assert viability_status(LETTUCE, PROFILE, date(2024, 1, 1)) == NOT_VIABLE


def test_filter_viable_keeps_catalog_order():
    late = Crop("squash", 1, 1, 6)
    early = Crop("peas", 9, -8, -2)
    radish = Crop("radish", 16, -4, 8)
    crops = [radish, late, LETTUCE, early]
    assert [c.id for c in filter_viable(crops, PROFILE, date(2024, 4, 15))] == ["radish", "lettuce"]
    assert filter_viable({c.id: c for c in crops}, PROFILE, date(2024, 12, 25)) == []


def test_aware_datetime_uses_local_calendar_day():
    from datetime import timedelta, timezone

    aware = datetime(2024, 4, 29, 23, 30, tzinfo=timezone(timedelta(hours=-12)))
    assert parse_date(aware) == aware.astimezone().date()
    assert parse_date(datetime(2024, 4, 29, 23, 30)) == date(2024, 4, 29)
