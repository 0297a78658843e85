"""Player ingestion boundary: gender normalization and age-range derivation."""

from __future__ import annotations

from datetime import date
from typing import Any, Iterable, List, Mapping, Optional

from athlete_goals.core.age_ranges import age_range, calculate_age
from athlete_goals.goals.models import Gender, GoalDataError, Player

_GENDER_ALIASES = {
    "m": Gender.MALE,
    "male": Gender.MALE,
    "f": Gender.FEMALE,
    "female": Gender.FEMALE,
}


def normalize_gender(value: Any) -> Gender:
    """Map ``"M"``/``"F"``/``"Male"``/``"Female"`` (any case) to ``Gender``."""
    if isinstance(value, Gender):
        return value
    key = str(value).strip().lower() if value is not None else ""
    try:
        return _GENDER_ALIASES[key]
    except KeyError:
        raise GoalDataError(f"Unrecognised gender {value!r}; expected M, F, Male or Female.") from None


def _lookup(record: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = record.get(key)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return None


def player_from_record(record: Mapping[str, Any], today: Optional[date] = None) -> Player:
    """Build a ``Player`` from an API or spreadsheet record.

    The age range is taken as given when present, otherwise derived from
    ``age`` or from the date of birth.
    """
    player_id = _lookup(record, "id", "player_id", "playerId")
    if player_id is None:
        raise GoalDataError(f"Player record is missing 'id': {dict(record)!r}")

    gender_raw = _lookup(record, "gender", "Gender")
    if gender_raw is None:
        raise GoalDataError(f"Player {player_id} is missing a gender.")
    gender = normalize_gender(gender_raw)

    age: Optional[int] = None
    raw_age = _lookup(record, "age", "Age")
    if raw_age is not None:
        try:
            age = int(float(raw_age))
        except (TypeError, ValueError, OverflowError) as exc:
            raise GoalDataError(f"Player {player_id} has a non-numeric age {raw_age!r}.") from exc
    else:
        dob = _lookup(record, "dob", "dateOfBirth", "DOB")
        if dob is not None:
            try:
                age = calculate_age(dob, today=today)
            except ValueError as exc:
                raise GoalDataError(f"Player {player_id} has an invalid date of birth {dob!r}.") from exc

    bucket = _lookup(record, "ageRange", "age_range", "AgeRange")
    if bucket is None:
        if age is None:
            raise GoalDataError(f"Player {player_id} has no age range, age or date of birth.")
        try:
            bucket = age_range(age)
        except ValueError as exc:
            raise GoalDataError(f"Player {player_id}: {exc}") from exc

    return Player(
        id=str(player_id),
        gender=gender,
        age_range=str(bucket),
        name=_lookup(record, "name", "Name"),
        age=age,
    )


def players_from_records(records: Iterable[Mapping[str, Any]], today: Optional[date] = None) -> List[Player]:
    return [player_from_record(record, today=today) for record in records]


__all__ = ["normalize_gender", "player_from_record", "players_from_records"]
