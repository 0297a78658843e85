"""Athlete assessment goal resolution and achievement reporting."""

from .goals import (
    AssessmentType,
    Gender,
    GoalDefinition,
    GoalInfo,
    GoalStatus,
    Player,
    evaluate_goal,
    find_goal,
    is_goal_met,
)

__version__ = "0.1.0"

__all__ = [
    "AssessmentType",
    "Gender",
    "GoalDefinition",
    "GoalInfo",
    "GoalStatus",
    "Player",
    "evaluate_goal",
    "find_goal",
    "is_goal_met",
]
