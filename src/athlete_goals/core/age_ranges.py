from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional, Union

AGE_RANGES: tuple[str, ...] = ("12 or less", "13-14", "15-16", "17-18", "18+")

# Spreadsheet day 1 is 1900-01-01, but the format also counts a 1900-02-29
# that never existed, hence the two-day correction.
_SPREADSHEET_EPOCH = date(1900, 1, 1)

DateLike = Union[date, datetime, str, int, float]


def age_range(age: int) -> str:
    """Bucket an age in whole years into one of ``AGE_RANGES``."""
    if age < 0:
        raise ValueError(f"age must be non-negative, got {age}.")
    if age <= 12:
        return "12 or less"
    if age <= 14:
        return "13-14"
    if age <= 16:
        return "15-16"
    if age <= 18:
        return "17-18"
    return "18+"


def excel_serial_to_date(serial: Union[int, float]) -> date:
    """Convert a spreadsheet serial day number to a calendar date."""
    return _SPREADSHEET_EPOCH + timedelta(days=int(serial) - 2)


def to_date(value: DateLike) -> date:
    """Accept a date, datetime, ISO string (time part ignored) or serial day."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Not a date: {value!r}")
    if isinstance(value, (int, float)):
        return excel_serial_to_date(value)
    text = str(value).strip()
    if not text:
        raise ValueError("Empty date string.")
    return date.fromisoformat(text.split("T")[0].split(" ")[0])


def calculate_age(dob: DateLike, today: Optional[date] = None) -> int:
    """Whole years between ``dob`` and ``today`` (defaults to the current date)."""
    birth = to_date(dob)
    ref = today or date.today()
    years = ref.year - birth.year
    if (ref.month, ref.day) < (birth.month, birth.day):
        years -= 1
    return years


__all__ = [
    "AGE_RANGES",
    "age_range",
    "calculate_age",
    "excel_serial_to_date",
    "to_date",
]
