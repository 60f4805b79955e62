"""Study plan configuration: goals, pacing and plan-shaping switches."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from src.core.errors import ConfigurationError
from src.core.providers import ensure_utc
from src.core.serialization import parse_datetime, to_jsonable
from src.core.types import SkillsBalanceStrategy, StudyIntensity


@dataclass(frozen=True)
class StudyPlanConfig:
    """
    Configuration for one study plan.

    Ratios are validated, never clamped: a weakness_focus_ratio of 1.2 is a
    caller bug and raises ConfigurationError.
    """

    # Target and timeline
    target_exam_date: datetime | None = None
    target_proficiency_level: float = 0.8
    weekly_commitment_hours: float = 8.0

    # Plan characteristics
    plan_duration_weeks: int = 12
    adaptive_scheduling: bool = True
    include_mock_exams: bool = True
    weakness_focus_ratio: float = 0.4
    review_frequency_days: int = 7

    # Intensity and pacing
    study_intensity: StudyIntensity = StudyIntensity.MODERATE
    progressive_difficulty: bool = True
    spaced_repetition: bool = True

    # Exam preparation
    mock_exam_frequency_weeks: int = 2
    exam_prep_weeks_before: int = 4
    skills_balance_strategy: SkillsBalanceStrategy = SkillsBalanceStrategy.WEAKNESS_FOCUSED

    def __post_init__(self):
        if self.target_exam_date is not None:
            object.__setattr__(self, "target_exam_date", ensure_utc(self.target_exam_date))
        if self.weekly_commitment_hours <= 0:
            raise ConfigurationError(
                f"weekly_commitment_hours must be positive, got {self.weekly_commitment_hours}"
            )
        if not 0.0 <= self.weakness_focus_ratio <= 1.0:
            raise ConfigurationError(
                f"weakness_focus_ratio must be within [0, 1], got {self.weakness_focus_ratio}"
            )
        if not 0.0 <= self.target_proficiency_level <= 1.0:
            raise ConfigurationError(
                "target_proficiency_level must be within [0, 1], "
                f"got {self.target_proficiency_level}"
            )
        if self.plan_duration_weeks <= 0:
            raise ConfigurationError(
                f"plan_duration_weeks must be positive, got {self.plan_duration_weeks}"
            )
        if self.review_frequency_days <= 0 or self.mock_exam_frequency_weeks <= 0:
            raise ConfigurationError("Review and mock exam cadences must be positive")
        if self.exam_prep_weeks_before < 0:
            raise ConfigurationError("exam_prep_weeks_before cannot be negative")

    def to_dict(self) -> dict[str, Any]:
        return to_jsonable(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StudyPlanConfig:
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        if "target_exam_date" in known:
            known["target_exam_date"] = parse_datetime(known["target_exam_date"])
        if "study_intensity" in known:
            known["study_intensity"] = StudyIntensity(known["study_intensity"])
        if "skills_balance_strategy" in known:
            known["skills_balance_strategy"] = SkillsBalanceStrategy(
                known["skills_balance_strategy"]
            )
        return cls(**known)


def create_default_study_plan_config() -> StudyPlanConfig:
    """Twelve weeks at eight hours a week, weakness-focused, with mocks."""
    return StudyPlanConfig(
        target_proficiency_level=0.8,
        weekly_commitment_hours=8,
        plan_duration_weeks=12,
        adaptive_scheduling=True,
        include_mock_exams=True,
        weakness_focus_ratio=0.4,
        review_frequency_days=7,
        study_intensity=StudyIntensity.MODERATE,
        progressive_difficulty=True,
        spaced_repetition=True,
        mock_exam_frequency_weeks=2,
        exam_prep_weeks_before=4,
        skills_balance_strategy=SkillsBalanceStrategy.WEAKNESS_FOCUSED,
    )
