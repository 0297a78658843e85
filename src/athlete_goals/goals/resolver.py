"""Goal lookup and achievement evaluation.

Pure functions over an in-memory goal catalog. Nothing here performs I/O or
keeps state, so callers may evaluate from any number of threads.

Evaluation order for ``evaluate_goal``:
1. blank / missing result -> UNDETERMINED (checked before any parsing)
2. no catalog entry for (assessment type, age range) -> UNDETERMINED
3. result that does not parse to a finite number -> UNDETERMINED
4. range goal (both bounds present): min <= value <= max
5. threshold goal: value <= goal when low is good, else value >= goal
6. nothing to compare against -> UNDETERMINED
"""

from __future__ import annotations

import logging
from numbers import Real
from typing import Any, Iterable, Optional, Union

import numpy as np

from athlete_goals.goals.models import (
    AssessmentType,
    GoalDefinition,
    GoalInfo,
    GoalStatus,
    Player,
)

logger = logging.getLogger(__name__)

AssessmentRef = Union[str, AssessmentType]
StatusLike = Union[GoalStatus, Optional[bool]]

_STATUS_TEXT = {
    GoalStatus.MET: "Goal Met",
    GoalStatus.NOT_MET: "Below Goal",
    GoalStatus.UNDETERMINED: "No Goal Set",
}

_STATUS_VARIANT = {
    GoalStatus.MET: "success",
    GoalStatus.NOT_MET: "warning",
    GoalStatus.UNDETERMINED: "secondary",
}


def _assessment_name(assessment_type: AssessmentRef) -> str:
    if isinstance(assessment_type, AssessmentType):
        return assessment_type.name
    return assessment_type


def is_blank_result(result: Any) -> bool:
    """True when no result has been recorded (``None`` or a blank string)."""
    if result is None:
        return True
    return isinstance(result, str) and result.strip() == ""


def parse_result(result: Any) -> Optional[float]:
    """Coerce a recorded result to a finite float, or ``None`` if it can't be."""
    if is_blank_result(result) or isinstance(result, bool):
        return None
    try:
        if isinstance(result, Real):
            value = float(result)
        else:
            value = float(str(result).strip())
    except (ValueError, OverflowError):
        return None
    if not np.isfinite(value):
        return None
    return value


def find_goal(
    player: Player,
    assessment_type: AssessmentRef,
    goal_catalog: Iterable[GoalDefinition],
) -> Optional[GoalInfo]:
    """Return the goal that applies to ``player`` for ``assessment_type``.

    The first catalog entry whose assessment type and age range both match
    exactly wins. Returns ``None`` when the catalog has no such entry.
    """
    name = _assessment_name(assessment_type)
    for definition in goal_catalog:
        if definition.assessment_type == name and definition.age_range == player.age_range:
            targets = definition.targets_for(player.gender)
            return GoalInfo(
                goal=targets.goal,
                min_goal=targets.min_goal,
                max_goal=targets.max_goal,
                low_is_good=targets.low_is_good,
                unit=definition.unit,
            )
    return None


def compare_to_goal(value: float, goal_info: GoalInfo) -> GoalStatus:
    """Apply range-then-threshold policy to an already parsed value."""
    if not goal_info.has_target:
        return GoalStatus.UNDETERMINED
    if goal_info.is_range:
        met = goal_info.min_goal <= value <= goal_info.max_goal
    elif goal_info.low_is_good:
        met = value <= goal_info.goal
    else:
        met = value >= goal_info.goal
    return GoalStatus.from_optional_bool(met)


def evaluate_goal(
    player: Player,
    assessment_type: AssessmentRef,
    result: Any,
    goal_catalog: Iterable[GoalDefinition],
) -> GoalStatus:
    if is_blank_result(result):
        return GoalStatus.UNDETERMINED

    goal_info = find_goal(player, assessment_type, goal_catalog)
    if goal_info is None:
        return GoalStatus.UNDETERMINED

    value = parse_result(result)
    if value is None:
        logger.debug(
            "Unparseable result %r for player=%s assessment=%s",
            result,
            player.id,
            _assessment_name(assessment_type),
        )
        return GoalStatus.UNDETERMINED

    return compare_to_goal(value, goal_info)


def is_goal_met(
    player: Player,
    assessment_type: AssessmentRef,
    result: Any,
    goal_catalog: Iterable[GoalDefinition],
) -> Optional[bool]:
    """``True``/``False`` when a goal applies and a result exists, else ``None``."""
    return evaluate_goal(player, assessment_type, result, goal_catalog).to_optional_bool()


def _as_status(status: StatusLike) -> GoalStatus:
    if isinstance(status, GoalStatus):
        return status
    return GoalStatus.from_optional_bool(status)


def goal_status_text(status: StatusLike) -> str:
    return _STATUS_TEXT[_as_status(status)]


def goal_status_variant(status: StatusLike) -> str:
    return _STATUS_VARIANT[_as_status(status)]


def _format_number(value: float) -> str:
    # 7.0 -> "7", 7.25 -> "7.25"
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def format_goal_text(goal_info: Optional[GoalInfo]) -> str:
    """Human-readable target, e.g. ``"10-20"``, ``"≤ 7.2"`` or ``"N/A"``."""
    if goal_info is None:
        return "N/A"
    if goal_info.is_range:
        return f"{_format_number(goal_info.min_goal)}-{_format_number(goal_info.max_goal)}"
    if goal_info.goal is not None:
        operator = "≤" if goal_info.low_is_good else "≥"
        return f"{operator} {_format_number(goal_info.goal)}"
    return "N/A"


__all__ = [
    "compare_to_goal",
    "evaluate_goal",
    "find_goal",
    "format_goal_text",
    "goal_status_text",
    "goal_status_variant",
    "is_blank_result",
    "is_goal_met",
    "parse_result",
]
