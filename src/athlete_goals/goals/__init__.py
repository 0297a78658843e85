"""Goal catalog types, adapters and the goal resolver."""

from .catalog import (
    GoalCatalog,
    build_goal_catalog,
    catalog_from_frame,
    load_goal_catalog,
)
from .models import (
    AssessmentType,
    CatalogNotFoundError,
    Gender,
    GoalDataError,
    GoalDefinition,
    GoalInfo,
    GoalStatus,
    GoalTargets,
    Player,
)
from .players import normalize_gender, player_from_record, players_from_records
from .resolver import (
    evaluate_goal,
    find_goal,
    format_goal_text,
    goal_status_text,
    goal_status_variant,
    is_goal_met,
    parse_result,
)

__all__ = [
    "AssessmentType",
    "CatalogNotFoundError",
    "Gender",
    "GoalCatalog",
    "GoalDataError",
    "GoalDefinition",
    "GoalInfo",
    "GoalStatus",
    "GoalTargets",
    "Player",
    "build_goal_catalog",
    "catalog_from_frame",
    "evaluate_goal",
    "find_goal",
    "format_goal_text",
    "goal_status_text",
    "goal_status_variant",
    "is_goal_met",
    "load_goal_catalog",
    "normalize_gender",
    "parse_result",
    "player_from_record",
    "players_from_records",
]
