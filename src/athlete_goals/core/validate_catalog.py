# src/athlete_goals/core/validate_catalog.py
from __future__ import annotations

import sys
from pathlib import Path

import pandas as pd

from athlete_goals.goals.catalog import catalog_from_frame, read_json_records
from athlete_goals.goals.models import CatalogNotFoundError, GoalDataError
from athlete_goals.goals.players import normalize_gender

WIDE_REQUIRED = ("AssessmentType", "AgeRange")
WIDE_NUMERIC = (
    "MaleGoal",
    "MaleMinGoal",
    "MaleMaxGoal",
    "FemaleGoal",
    "FemaleMinGoal",
    "FemaleMaxGoal",
)

API_REQUIRED = ("assessment_type", "age_range", "gender")
API_NUMERIC = ("score_low_end", "score_high_end", "score_average")


def _layout(df: pd.DataFrame) -> str:
    return "api" if "gender" in df.columns or "Gender" in df.columns else "wide"


def _duplicate_api_rows(df: pd.DataFrame) -> list:
    gender = df["gender"]
    rows = df[gender.notna() & (gender.astype(str).str.strip() != "")]
    keys = pd.DataFrame(
        {
            "assessment_type": rows["assessment_type"].astype(str).str.strip(),
            "age_range": rows["age_range"].astype(str).str.strip(),
            "gender": rows["gender"].map(lambda value: normalize_gender(value).value),
        }
    )
    dupes = keys[keys.duplicated(keep=False)].drop_duplicates()
    return sorted(dupes.itertuples(index=False, name=None))


def validate_catalog(df: pd.DataFrame, verbose: bool = True) -> bool:
    """Check required columns, numeric cells and that every row converts."""
    ok = True
    layout = _layout(df)
    required = API_REQUIRED if layout == "api" else WIDE_REQUIRED
    numeric = API_NUMERIC if layout == "api" else WIDE_NUMERIC

    missing = [col for col in required if col not in df.columns]
    if missing:
        print(f"[catalog] Missing columns ({layout} layout): {missing}")
        return False

    present_numeric = [col for col in numeric if col in df.columns]
    if not present_numeric:
        print(f"[catalog] No goal columns found; expected any of {list(numeric)}")
        ok = False

    for col in present_numeric:
        raw = df[col]
        coerced = pd.to_numeric(raw, errors="coerce")
        bad = raw.notna() & (raw.astype(str).str.strip() != "") & coerced.isna()
        if bad.any():
            rows = [int(i) for i in df.index[bad]]
            print(f"[catalog] Column '{col}' has non-numeric values at rows {rows}")
            ok = False

    if ok:
        try:
            catalog = catalog_from_frame(df)
        except GoalDataError as exc:
            print(f"[catalog] {exc}")
            return False
        if layout == "api":
            duplicates = _duplicate_api_rows(df)
            if duplicates:
                print(
                    "[catalog] Duplicate (assessment type, age range, gender) rows; "
                    f"only the first is used: {duplicates}"
                )
        else:
            keys = [definition.key for definition in catalog]
            duplicates = sorted({key for key in keys if keys.count(key) > 1})
            if duplicates:
                print(f"[catalog] Duplicate (assessment type, age range) keys; only the first is used: {duplicates}")

    if ok and verbose:
        print(f"[catalog] {len(df)} rows OK ({layout} layout).")
    return ok


def validate_catalog_file(path: Path, verbose: bool = True) -> bool:
    records = read_json_records(path, key="goals")
    return validate_catalog(pd.DataFrame(records), verbose=verbose)


def main():
    import argparse
    p = argparse.ArgumentParser(description="Validate a JSON goal catalog.")
    p.add_argument("--file", required=True, help="Path to the goal catalog JSON file.")
    args = p.parse_args()

    path = Path(args.file)
    try:
        valid = validate_catalog_file(path)
    except (CatalogNotFoundError, GoalDataError) as exc:
        print(f"[catalog] {exc}")
        sys.exit(1)

    sys.exit(0 if valid else 1)


if __name__ == "__main__":
    main()
