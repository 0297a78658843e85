"""Adapters that turn goal catalog records into ``GoalDefinition`` objects.

Two record layouts are understood:

* wide records, one row per (assessment type, age range) with per-gender
  columns (``MaleGoal``, ``FemaleMinGoal``, ``LowIsGood`` ...), as kept in
  the goals spreadsheet;
* API records, one row per (assessment type, age range, gender) with
  ``score_low_end`` / ``score_high_end`` / ``score_average`` and
  ``is_range_goal`` flags.

Both end up as the same canonical definitions, so nothing past this module
needs to know where a catalog came from.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

import numpy as np
import pandas as pd

from athlete_goals.core.age_ranges import AGE_RANGES
from athlete_goals.goals.models import (
    CatalogNotFoundError,
    Gender,
    GoalDataError,
    GoalDefinition,
    GoalTargets,
)
from athlete_goals.goals.players import normalize_gender

logger = logging.getLogger(__name__)

GoalCatalog = Tuple[GoalDefinition, ...]

WIDE_TARGET_FIELDS = {
    "goal": "Goal",
    "min_goal": "MinGoal",
    "max_goal": "MaxGoal",
}

_TRUE_TOKENS = {"1", "true", "t", "yes", "y", "on"}
_FALSE_TOKENS = {"0", "false", "f", "no", "n", "off"}


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _to_float(value: Any, column: str) -> Optional[float]:
    if _is_missing(value):
        return None
    if isinstance(value, bool):
        raise GoalDataError(f"Column '{column}' must be numeric, got {value!r}.")
    try:
        number = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError, OverflowError) as exc:
        raise GoalDataError(f"Column '{column}' must be numeric, got {value!r}.") from exc
    if not np.isfinite(number):
        raise GoalDataError(f"Column '{column}' must be finite, got {value!r}.")
    return number


def _to_bool(value: Any, column: str, default: bool = False) -> bool:
    if _is_missing(value):
        return default
    if isinstance(value, (bool, np.bool_)):
        return bool(value)
    if isinstance(value, (int, float, np.integer, np.floating)):
        return float(value) != 0.0
    normalized = str(value).strip().lower()
    if normalized in _TRUE_TOKENS:
        return True
    if normalized in _FALSE_TOKENS:
        return False
    raise GoalDataError(f"Column '{column}' must be a boolean-like value, got {value!r}.")


def _to_text(value: Any) -> Optional[str]:
    if _is_missing(value):
        return None
    return str(value).strip()


def _first_present(record: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in record and not _is_missing(record[key]):
            return record[key]
    return None


def _required_text(record: Mapping[str, Any], *keys: str) -> str:
    value = _to_text(_first_present(record, *keys))
    if value is None:
        raise GoalDataError(f"Goal record is missing '{keys[0]}': {dict(record)!r}")
    return value


def _check_age_range(age_range: str, assessment_type: str) -> None:
    if age_range not in AGE_RANGES:
        logger.warning(
            "Goal '%s' uses unknown age range %r; it will never match a player.",
            assessment_type,
            age_range,
        )


def _wide_targets(record: Mapping[str, Any], prefix: str) -> GoalTargets:
    values = {
        field_name: _to_float(record.get(prefix + suffix), prefix + suffix)
        for field_name, suffix in WIDE_TARGET_FIELDS.items()
    }
    shared_low = _to_bool(record.get("LowIsGood"), "LowIsGood")
    low_is_good = _to_bool(record.get(prefix + "LowIsGood"), prefix + "LowIsGood", default=shared_low)
    return GoalTargets(low_is_good=low_is_good, **values)


def definition_from_wide_record(record: Mapping[str, Any]) -> GoalDefinition:
    """Build a definition from a spreadsheet-style row."""
    assessment_type = _required_text(record, "AssessmentType", "assessmentType")
    age_range = _required_text(record, "AgeRange", "ageRange")
    _check_age_range(age_range, assessment_type)
    return GoalDefinition(
        assessment_type=assessment_type,
        age_range=age_range,
        male=_wide_targets(record, "Male"),
        female=_wide_targets(record, "Female"),
        unit=_to_text(_first_present(record, "Unit", "unit")),
        category=_to_text(_first_present(record, "Category", "category")),
    )


def _api_targets(record: Mapping[str, Any]) -> GoalTargets:
    low_is_good = _to_bool(record.get("low_is_good"), "low_is_good")
    if _to_bool(record.get("is_range_goal"), "is_range_goal"):
        return GoalTargets(
            min_goal=_to_float(record.get("score_low_end"), "score_low_end"),
            max_goal=_to_float(record.get("score_high_end"), "score_high_end"),
            low_is_good=low_is_good,
        )
    return GoalTargets(
        goal=_to_float(record.get("score_average"), "score_average"),
        low_is_good=low_is_good,
    )


@dataclass
class _MergedGoal:
    targets: Dict[Gender, GoalTargets] = field(default_factory=dict)
    unit: Optional[str] = None
    category: Optional[str] = None


def definitions_from_api_records(records: Iterable[Mapping[str, Any]]) -> GoalCatalog:
    """Merge per-gender API rows into one definition per (type, age range)."""
    merged: Dict[Tuple[str, str], _MergedGoal] = {}
    for record in records:
        assessment_type = _required_text(record, "assessment_type", "assessmentType")
        age_range = _required_text(record, "age_range", "ageRange")
        gender_raw = _first_present(record, "gender", "Gender")
        if gender_raw is None:
            raise GoalDataError(f"Goal record is missing 'gender': {dict(record)!r}")
        gender = normalize_gender(gender_raw)

        key = (assessment_type, age_range)
        if key not in merged:
            _check_age_range(age_range, assessment_type)
            merged[key] = _MergedGoal()
        entry = merged[key]
        if gender in entry.targets:
            logger.warning(
                "Duplicate %s goal for '%s' (%s); keeping the first one.",
                gender.value,
                assessment_type,
                age_range,
            )
            continue
        entry.targets[gender] = _api_targets(record)
        entry.unit = entry.unit or _to_text(record.get("unit"))
        entry.category = entry.category or _to_text(record.get("category"))

    return tuple(
        GoalDefinition(
            assessment_type=assessment_type,
            age_range=age_range,
            male=entry.targets.get(Gender.MALE, GoalTargets()),
            female=entry.targets.get(Gender.FEMALE, GoalTargets()),
            unit=entry.unit,
            category=entry.category,
        )
        for (assessment_type, age_range), entry in merged.items()
    )


def _is_api_record(record: Mapping[str, Any]) -> bool:
    return _first_present(record, "gender", "Gender") is not None


def build_goal_catalog(records: Iterable[Mapping[str, Any]]) -> GoalCatalog:
    """Build a catalog from records in either layout, keeping input order."""
    rows = list(records)
    api_rows = [row for row in rows if _is_api_record(row)]
    api_definitions = {d.key: d for d in definitions_from_api_records(api_rows)}

    catalog: List[GoalDefinition] = []
    emitted: set[Tuple[str, str]] = set()
    for row in rows:
        if not _is_api_record(row):
            catalog.append(definition_from_wide_record(row))
            continue
        key = (
            _required_text(row, "assessment_type", "assessmentType"),
            _required_text(row, "age_range", "ageRange"),
        )
        if key not in emitted:
            emitted.add(key)
            catalog.append(api_definitions[key])
    return tuple(catalog)


def catalog_from_frame(frame: pd.DataFrame) -> GoalCatalog:
    """Build a catalog from a DataFrame in either layout (NaN cells are absent)."""
    cleaned = frame.astype(object).where(pd.notna(frame), None)
    return build_goal_catalog(cleaned.to_dict(orient="records"))


def read_json_records(path: Path, key: Optional[str] = None) -> List[Dict[str, Any]]:
    """Read a JSON list, or the list stored under ``key`` in a JSON object."""
    path = Path(path)
    if not path.exists():
        raise CatalogNotFoundError(f"File not found: {path}")
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise GoalDataError(f"{path} is not valid JSON: {exc}") from exc
    if isinstance(payload, dict) and key is not None:
        payload = payload.get(key)
    if not isinstance(payload, list) or not all(isinstance(row, dict) for row in payload):
        expected = f"a list of objects or an object with a '{key}' list" if key else "a list of objects"
        raise GoalDataError(f"{path} must contain {expected}.")
    return payload


def load_goal_catalog(path: Path) -> GoalCatalog:
    """Load a goal catalog from a JSON document."""
    records = read_json_records(path, key="goals")
    catalog = build_goal_catalog(records)
    logger.info("Loaded %d goal definitions from %s", len(catalog), path)
    return catalog


__all__ = [
    "GoalCatalog",
    "build_goal_catalog",
    "catalog_from_frame",
    "definition_from_wide_record",
    "definitions_from_api_records",
    "load_goal_catalog",
    "read_json_records",
]
