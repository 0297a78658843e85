"""Service functions for goal-annotated exports and achievement summaries.

Each report walks every player x assessment type, looks up the recorded
result and evaluates it through the goal resolver. Nothing here caches
evaluation results; only the goal catalog file is cached (by path + mtime).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import pandas as pd

from athlete_goals.config import load_config
from athlete_goals.goals.catalog import GoalCatalog, load_goal_catalog, read_json_records
from athlete_goals.goals.models import AssessmentType, GoalDataError, GoalDefinition, GoalStatus, Player
from athlete_goals.goals.players import players_from_records
from athlete_goals.goals.resolver import evaluate_goal, find_goal, format_goal_text, is_blank_result

logger = logging.getLogger(__name__)

ResultKey = Tuple[str, str]
Results = Mapping[ResultKey, Any]

EXPORT_COLUMNS = [
    "Player Name",
    "Age",
    "Gender",
    "Assessment Type",
    "Category",
    "Goal",
    "Result",
    "Goal Met",
    "Unit",
]

SUMMARY_COLUMNS = [
    "category",
    "total",
    "entered",
    "not_entered",
    "met",
    "not_met",
    "undetermined",
    "achievement_rate",
]

DEFAULT_CATEGORY = "Other"

_GOAL_MET_TEXT = {
    GoalStatus.MET: "Yes",
    GoalStatus.NOT_MET: "No",
    GoalStatus.UNDETERMINED: "",
}


@dataclass
class _CatalogCache:
    path: Path
    mtime_ns: int
    catalog: GoalCatalog


_CATALOG_CACHE: Optional[_CatalogCache] = None


def get_goal_catalog(path: Optional[Path] = None) -> GoalCatalog:
    """Load the configured catalog, reusing the cached copy while the file is unchanged."""
    global _CATALOG_CACHE
    resolved = Path(path) if path is not None else load_config().catalog_path
    mtime_ns = resolved.stat().st_mtime_ns if resolved.exists() else -1
    cache = _CATALOG_CACHE
    if cache is not None and cache.path == resolved and cache.mtime_ns == mtime_ns:
        return cache.catalog
    catalog = load_goal_catalog(resolved)
    _CATALOG_CACHE = _CatalogCache(path=resolved, mtime_ns=mtime_ns, catalog=catalog)
    return catalog


def clear_catalog_cache() -> None:
    global _CATALOG_CACHE
    _CATALOG_CACHE = None


def load_players(path: Path) -> List[Player]:
    return players_from_records(read_json_records(path, key="players"))


def results_from_records(records: Iterable[Mapping[str, Any]]) -> Dict[ResultKey, Any]:
    """Index raw results by (player id, assessment type); later rows win."""
    results: Dict[ResultKey, Any] = {}
    for record in records:
        player_id = next(
            (record[k] for k in ("player_id", "playerId", "id") if record.get(k) is not None),
            None,
        )
        assessment = next(
            (record[k] for k in ("assessment_type", "assessmentType", "metric") if record.get(k)),
            None,
        )
        if player_id is None or assessment is None:
            raise GoalDataError(f"Result record needs a player id and assessment type: {dict(record)!r}")
        value = next(
            (record[k] for k in ("result_value", "value", "result") if k in record),
            None,
        )
        results[(str(player_id), str(assessment))] = value
    return results


def load_results(path: Path) -> Dict[ResultKey, Any]:
    return results_from_records(read_json_records(path, key="results"))


def assessment_types_from_catalog(catalog: Sequence[GoalDefinition]) -> List[AssessmentType]:
    """One ``AssessmentType`` per distinct catalog entry name, first-seen order."""
    seen: Dict[str, AssessmentType] = {}
    for definition in catalog:
        if definition.assessment_type not in seen:
            seen[definition.assessment_type] = AssessmentType(
                name=definition.assessment_type,
                category=definition.category,
                unit=definition.unit,
            )
    return list(seen.values())


def _result_for(results: Results, player: Player, assessment: AssessmentType) -> Any:
    return results.get((str(player.id), assessment.name))


def _iter_cells(
    players: Sequence[Player],
    assessment_types: Sequence[AssessmentType],
    results: Results,
    catalog: Sequence[GoalDefinition],
):
    for player in players:
        for assessment in assessment_types:
            result = _result_for(results, player, assessment)
            status = evaluate_goal(player, assessment, result, catalog)
            yield player, assessment, result, status


def build_export_frame(
    players: Sequence[Player],
    assessment_types: Sequence[AssessmentType],
    results: Results,
    catalog: Sequence[GoalDefinition],
) -> pd.DataFrame:
    """One row per player x assessment type, annotated with goal and status."""
    rows: List[Dict[str, Any]] = []
    for player, assessment, result, status in _iter_cells(players, assessment_types, results, catalog):
        goal_info = find_goal(player, assessment, catalog)
        unit = goal_info.unit if goal_info is not None and goal_info.unit else (assessment.unit or "")
        rows.append(
            {
                "Player Name": player.name or "",
                "Age": "" if player.age is None else str(player.age),
                "Gender": player.gender.value,
                "Assessment Type": assessment.name,
                "Category": assessment.category or DEFAULT_CATEGORY,
                "Goal": format_goal_text(goal_info),
                "Result": "" if is_blank_result(result) else str(result),
                "Goal Met": _GOAL_MET_TEXT[status],
                "Unit": unit,
            }
        )
    logger.info("Built export with %d rows for %d players", len(rows), len(players))
    return pd.DataFrame(rows, columns=EXPORT_COLUMNS)


def summarize_by_category(
    players: Sequence[Player],
    assessment_types: Sequence[AssessmentType],
    results: Results,
    catalog: Sequence[GoalDefinition],
) -> pd.DataFrame:
    """Goal achievement per category; the rate is met / entered, in percent."""
    rows: List[Dict[str, Any]] = []
    for player, assessment, result, status in _iter_cells(players, assessment_types, results, catalog):
        rows.append(
            {
                "category": assessment.category or DEFAULT_CATEGORY,
                "entered": not is_blank_result(result),
                "met": status is GoalStatus.MET,
                "not_met": status is GoalStatus.NOT_MET,
                "undetermined": status is GoalStatus.UNDETERMINED,
            }
        )
    if not rows:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)

    cells = pd.DataFrame(rows)
    grouped = cells.groupby("category", sort=False).agg(
        total=("entered", "size"),
        entered=("entered", "sum"),
        met=("met", "sum"),
        not_met=("not_met", "sum"),
        undetermined=("undetermined", "sum"),
    )
    grouped["not_entered"] = grouped["total"] - grouped["entered"]
    entered = grouped["entered"].where(grouped["entered"] > 0)
    grouped["achievement_rate"] = (grouped["met"] / entered * 100).round(1).fillna(0.0)
    summary = grouped.reset_index()
    for col in ("total", "entered", "not_entered", "met", "not_met", "undetermined"):
        summary[col] = summary[col].astype(int)
    return summary[SUMMARY_COLUMNS]


def team_overview(
    players: Sequence[Player],
    assessment_types: Sequence[AssessmentType],
    results: Results,
    catalog: Sequence[GoalDefinition],
) -> Dict[str, Any]:
    total_entered = 0
    total_met = 0
    for _, _, result, status in _iter_cells(players, assessment_types, results, catalog):
        if not is_blank_result(result):
            total_entered += 1
        if status is GoalStatus.MET:
            total_met += 1
    rate = round(total_met / total_entered * 100, 1) if total_entered else 0.0
    return {
        "players": len(players),
        "assessment_types": len(assessment_types),
        "total_assessments": len(players) * len(assessment_types),
        "total_entered": total_entered,
        "total_goals_met": total_met,
        "achievement_rate": rate,
    }


__all__ = [
    "EXPORT_COLUMNS",
    "SUMMARY_COLUMNS",
    "assessment_types_from_catalog",
    "build_export_frame",
    "clear_catalog_cache",
    "get_goal_catalog",
    "load_players",
    "load_results",
    "results_from_records",
    "summarize_by_category",
    "team_overview",
]
