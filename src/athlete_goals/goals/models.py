"""Canonical goal, player and evaluation types.

Every wire format (spreadsheet columns, API JSON) is translated into these
shapes at the loading boundary; the resolver only ever sees them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class GoalDataError(ValueError):
    """Raised when catalog or player records cannot be mapped to canonical types."""


class CatalogNotFoundError(FileNotFoundError):
    """Raised when a goal catalog (or other input document) is missing."""


class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"


class GoalStatus(str, Enum):
    """Tri-state outcome of a goal evaluation."""

    MET = "met"
    NOT_MET = "not_met"
    UNDETERMINED = "undetermined"

    def to_optional_bool(self) -> Optional[bool]:
        if self is GoalStatus.UNDETERMINED:
            return None
        return self is GoalStatus.MET

    @classmethod
    def from_optional_bool(cls, value: Optional[bool]) -> "GoalStatus":
        if value is None:
            return cls.UNDETERMINED
        return cls.MET if value else cls.NOT_MET


@dataclass(frozen=True)
class Player:
    id: str
    gender: Gender
    age_range: str
    name: Optional[str] = None
    age: Optional[int] = None


@dataclass(frozen=True)
class AssessmentType:
    name: str
    category: Optional[str] = None
    unit: Optional[str] = None


@dataclass(frozen=True)
class GoalTargets:
    """Goal fields for one gender. ``None`` means the field is not defined."""

    goal: Optional[float] = None
    min_goal: Optional[float] = None
    max_goal: Optional[float] = None
    low_is_good: bool = False

    @property
    def is_empty(self) -> bool:
        return self.goal is None and self.min_goal is None and self.max_goal is None


@dataclass(frozen=True)
class GoalDefinition:
    assessment_type: str
    age_range: str
    male: GoalTargets = field(default_factory=GoalTargets)
    female: GoalTargets = field(default_factory=GoalTargets)
    unit: Optional[str] = None
    category: Optional[str] = None

    @property
    def key(self) -> tuple[str, str]:
        return (self.assessment_type, self.age_range)

    def targets_for(self, gender: Gender) -> GoalTargets:
        return self.male if gender is Gender.MALE else self.female


@dataclass(frozen=True)
class GoalInfo:
    """Resolved goal for a single (player, assessment type) pair."""

    goal: Optional[float] = None
    min_goal: Optional[float] = None
    max_goal: Optional[float] = None
    low_is_good: bool = False
    unit: Optional[str] = None

    @property
    def is_range(self) -> bool:
        return self.min_goal is not None and self.max_goal is not None

    @property
    def has_target(self) -> bool:
        return self.is_range or self.goal is not None


__all__ = [
    "AssessmentType",
    "CatalogNotFoundError",
    "Gender",
    "GoalDataError",
    "GoalDefinition",
    "GoalInfo",
    "GoalStatus",
    "GoalTargets",
    "Player",
]
