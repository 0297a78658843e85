from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

from athlete_goals.goals.models import (
    AssessmentType,
    Gender,
    GoalDataError,
    GoalDefinition,
    GoalTargets,
    Player,
)
from athlete_goals.services import goal_report_service as grs

CATALOG = (
    GoalDefinition(
        assessment_type="60 Yard Dash",
        age_range="15-16",
        male=GoalTargets(goal=7.2, low_is_good=True),
        female=GoalTargets(goal=8.1, low_is_good=True),
        unit="sec",
        category="Speed",
    ),
    GoalDefinition(
        assessment_type="Exit Velocity",
        age_range="15-16",
        male=GoalTargets(goal=85.0),
        female=GoalTargets(goal=70.0),
        unit="mph",
        category="Hitting",
    ),
    GoalDefinition(
        assessment_type="Body Fat %",
        age_range="15-16",
        male=GoalTargets(min_goal=10.0, max_goal=20.0),
        unit="%",
    ),
)

PLAYERS = [
    Player(id="1", gender=Gender.MALE, age_range="15-16", name="Sam Rivera", age=15),
    Player(id="2", gender=Gender.FEMALE, age_range="15-16", name="Alex Chen", age=16),
    Player(id="3", gender=Gender.MALE, age_range="13-14", name="Jo Park", age=13),
]

RESULTS = {
    ("1", "60 Yard Dash"): "7.05",
    ("1", "Exit Velocity"): "80",
    ("1", "Body Fat %"): 12,
    ("2", "60 Yard Dash"): "8.4",
    ("2", "Exit Velocity"): "72.5",
    ("3", "60 Yard Dash"): "7.0",
}


@pytest.fixture(autouse=True)
def _reset_catalog_cache():
    grs.clear_catalog_cache()
    yield
    grs.clear_catalog_cache()


def _assessment_types():
    return grs.assessment_types_from_catalog(CATALOG)


def test_assessment_types_from_catalog() -> None:
    types = _assessment_types()
    assert types == [
        AssessmentType(name="60 Yard Dash", category="Speed", unit="sec"),
        AssessmentType(name="Exit Velocity", category="Hitting", unit="mph"),
        AssessmentType(name="Body Fat %", category=None, unit="%"),
    ]


def test_build_export_frame_rows() -> None:
    frame = grs.build_export_frame(PLAYERS, _assessment_types(), RESULTS, CATALOG)
    assert list(frame.columns) == grs.EXPORT_COLUMNS
    assert len(frame) == len(PLAYERS) * len(CATALOG)

    rows = {(r["Player Name"], r["Assessment Type"]): r for r in frame.to_dict(orient="records")}
    dash = rows[("Sam Rivera", "60 Yard Dash")]
    assert dash["Goal"] == "≤ 7.2"
    assert dash["Result"] == "7.05"
    assert dash["Goal Met"] == "Yes"
    assert dash["Unit"] == "sec"
    assert dash["Category"] == "Speed"
    assert dash["Gender"] == "Male"
    assert dash["Age"] == "15"

    assert rows[("Sam Rivera", "Exit Velocity")]["Goal Met"] == "No"
    assert rows[("Sam Rivera", "Body Fat %")]["Goal"] == "10-20"
    assert rows[("Sam Rivera", "Body Fat %")]["Category"] == "Other"

    # female has no body fat goal and no result
    no_goal = rows[("Alex Chen", "Body Fat %")]
    assert no_goal["Goal"] == "N/A"
    assert no_goal["Result"] == ""
    assert no_goal["Goal Met"] == ""

    # 13-14 has no goals at all, even with a result recorded
    young = rows[("Jo Park", "60 Yard Dash")]
    assert young["Goal"] == "N/A"
    assert young["Result"] == "7.0"
    assert young["Goal Met"] == ""


def test_summarize_by_category() -> None:
    summary = grs.summarize_by_category(PLAYERS, _assessment_types(), RESULTS, CATALOG)
    assert list(summary.columns) == grs.SUMMARY_COLUMNS
    by_cat = summary.set_index("category").to_dict(orient="index")

    speed = by_cat["Speed"]
    assert speed["total"] == 3
    assert speed["entered"] == 3
    assert speed["not_entered"] == 0
    assert speed["met"] == 1
    assert speed["not_met"] == 1
    assert speed["undetermined"] == 1
    assert speed["achievement_rate"] == pytest.approx(33.3)

    hitting = by_cat["Hitting"]
    assert hitting["entered"] == 2
    assert hitting["met"] == 1
    assert hitting["achievement_rate"] == pytest.approx(50.0)

    other = by_cat["Other"]
    assert other["entered"] == 1
    assert other["not_entered"] == 2
    assert other["achievement_rate"] == pytest.approx(100.0)


def test_summarize_by_category_without_entries() -> None:
    summary = grs.summarize_by_category(PLAYERS, _assessment_types(), {}, CATALOG)
    assert summary["achievement_rate"].tolist() == [0.0, 0.0, 0.0]
    empty = grs.summarize_by_category([], _assessment_types(), {}, CATALOG)
    assert empty.empty
    assert list(empty.columns) == grs.SUMMARY_COLUMNS


def test_team_overview() -> None:
    overview = grs.team_overview(PLAYERS, _assessment_types(), RESULTS, CATALOG)
    assert overview == {
        "players": 3,
        "assessment_types": 3,
        "total_assessments": 9,
        "total_entered": 6,
        "total_goals_met": 3,
        "achievement_rate": 50.0,
    }


def test_results_from_records_accepts_api_field_names() -> None:
    results = grs.results_from_records(
        [
            {"player_id": 1, "assessment_type": "60 Yard Dash", "result_value": 7.1},
            {"playerId": "2", "metric": "Exit Velocity", "value": "71"},
            {"player_id": 1, "assessment_type": "60 Yard Dash", "result_value": 6.9},
        ]
    )
    assert results == {("1", "60 Yard Dash"): 6.9, ("2", "Exit Velocity"): "71"}

    with pytest.raises(GoalDataError):
        grs.results_from_records([{"result_value": 3}])


def test_get_goal_catalog_uses_env_and_caches_by_mtime(tmp_path: Path, monkeypatch) -> None:
    path = tmp_path / "goals.json"
    rows = [{"AssessmentType": "60 Yard Dash", "AgeRange": "15-16", "MaleGoal": 7.2, "LowIsGood": 1}]
    path.write_text(json.dumps(rows), encoding="utf-8")
    monkeypatch.setenv("ATHLETE_GOALS_CATALOG_PATH", str(path))

    first = grs.get_goal_catalog()
    assert grs.get_goal_catalog() is first

    rows.append({"AssessmentType": "Exit Velocity", "AgeRange": "15-16", "MaleGoal": 85})
    path.write_text(json.dumps(rows), encoding="utf-8")
    stat = path.stat()
    os.utime(path, ns=(stat.st_atime_ns, stat.st_mtime_ns + 1_000_000_000))

    reloaded = grs.get_goal_catalog()
    assert reloaded is not first
    assert len(reloaded) == 2


def test_load_players_and_results(tmp_path: Path) -> None:
    players_path = tmp_path / "players.json"
    players_path.write_text(
        json.dumps({"players": [{"id": 1, "name": "Sam", "gender": "M", "ageRange": "15-16"}]}),
        encoding="utf-8",
    )
    results_path = tmp_path / "results.json"
    results_path.write_text(
        json.dumps([{"player_id": 1, "assessment_type": "60 Yard Dash", "result_value": "7.05"}]),
        encoding="utf-8",
    )
    players = grs.load_players(players_path)
    results = grs.load_results(results_path)
    frame = grs.build_export_frame(players, _assessment_types(), results, CATALOG)
    assert frame.loc[frame["Assessment Type"] == "60 Yard Dash", "Goal Met"].item() == "Yes"


def test_service_package_entrypoints_delegate() -> None:
    from athlete_goals import services

    assert services.team_overview(PLAYERS, _assessment_types(), RESULTS, CATALOG)["total_goals_met"] == 3
    assert len(services.build_export_frame(PLAYERS, _assessment_types(), RESULTS, CATALOG)) == 9
    assert not services.summarize_by_category(PLAYERS, _assessment_types(), RESULTS, CATALOG).empty
