from __future__ import annotations

from datetime import date

import pytest

from athlete_goals.core.age_ranges import (
    AGE_RANGES,
    age_range,
    calculate_age,
    excel_serial_to_date,
)
from athlete_goals.goals.models import Gender, GoalDataError
from athlete_goals.goals.players import normalize_gender, player_from_record, players_from_records


def test_every_age_maps_to_exactly_one_bucket() -> None:
    for age in range(0, 121):
        bucket = age_range(age)
        assert bucket in AGE_RANGES


@pytest.mark.parametrize(
    ("age", "bucket"),
    [
        (0, "12 or less"),
        (12, "12 or less"),
        (13, "13-14"),
        (14, "13-14"),
        (15, "15-16"),
        (16, "15-16"),
        (17, "17-18"),
        (18, "17-18"),
        (19, "18+"),
        (120, "18+"),
    ],
)
def test_age_range_edges(age: int, bucket: str) -> None:
    assert age_range(age) == bucket


def test_age_buckets_are_contiguous() -> None:
    seen = [age_range(age) for age in range(0, 40)]
    order = [AGE_RANGES.index(bucket) for bucket in seen]
    assert order == sorted(order)
    assert set(seen) == set(AGE_RANGES)


def test_negative_age_is_rejected() -> None:
    with pytest.raises(ValueError):
        age_range(-1)


def test_calculate_age_before_and_after_birthday() -> None:
    today = date(2024, 6, 15)
    assert calculate_age(date(2009, 6, 15), today=today) == 15
    assert calculate_age(date(2009, 6, 16), today=today) == 14
    assert calculate_age("2009-01-01T00:00:00.000Z", today=today) == 15


def test_excel_serial_dates() -> None:
    assert excel_serial_to_date(45292) == date(2024, 1, 1)
    assert excel_serial_to_date(36526) == date(2000, 1, 1)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("M", Gender.MALE), ("male", Gender.MALE), (" Female ", Gender.FEMALE), ("f", Gender.FEMALE)],
)
def test_normalize_gender(raw: str, expected: Gender) -> None:
    assert normalize_gender(raw) is expected


@pytest.mark.parametrize("raw", ["X", "", None, "Mal"])
def test_normalize_gender_rejects_unknown_values(raw) -> None:
    with pytest.raises(GoalDataError):
        normalize_gender(raw)


def test_player_from_api_record_derives_age_range_from_dob() -> None:
    player = player_from_record(
        {"id": 7, "name": "Riley Ortiz", "gender": "F", "dob": "2008-03-02"},
        today=date(2024, 3, 1),
    )
    assert player.id == "7"
    assert player.gender is Gender.FEMALE
    assert player.age == 15
    assert player.age_range == "15-16"


def test_player_from_spreadsheet_record_keeps_given_age_range() -> None:
    player = player_from_record({"id": "a1", "Name": "Casey", "Gender": "Male", "ageRange": "17-18"})
    assert player.gender is Gender.MALE
    assert player.age_range == "17-18"
    assert player.name == "Casey"


def test_player_from_record_with_age_and_serial_dob() -> None:
    by_age = player_from_record({"id": 1, "gender": "M", "age": "13"})
    assert by_age.age_range == "13-14"
    by_serial = player_from_record({"id": 2, "gender": "M", "dob": 36526}, today=date(2024, 6, 1))
    assert by_serial.age == 24
    assert by_serial.age_range == "18+"


@pytest.mark.parametrize(
    "record",
    [
        {"gender": "M", "age": 14},
        {"id": 1, "age": 14},
        {"id": 1, "gender": "M"},
        {"id": 1, "gender": "M", "dob": "not-a-date"},
        {"id": 1, "gender": "M", "age": -3},
        {"id": 1, "gender": "M", "age": "inf"},
    ],
)
def test_player_from_record_rejects_incomplete_records(record) -> None:
    with pytest.raises(GoalDataError):
        player_from_record(record)


def test_players_from_records() -> None:
    players = players_from_records(
        [{"id": 1, "gender": "M", "age": 12}, {"id": 2, "gender": "F", "age": 19}]
    )
    assert [p.age_range for p in players] == ["12 or less", "18+"]
