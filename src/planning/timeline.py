"""
Timeline calculation: hours needed, weekly pace, completion estimate and
quarter-point milestones.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta

from loguru import logger

from src.core.availability import UserAvailability
from src.core.errors import ConfigurationError
from src.core.plan_config import StudyPlanConfig
from src.core.providers import Clock, SystemClock
from src.core.records import Milestone
from src.planning.state_analyzer import StateAnalysis

BASE_HOURS = 120  # Typical language course at full target proficiency
WEAKNESS_HOURS_FACTOR = 0.1  # +10% hours per weak component
MILESTONE_FRACTIONS = (0.25, 0.5, 0.75, 1.0)


@dataclass(frozen=True)
class Timeline:
    start: datetime
    weeks_available: int
    total_hours_needed: float
    weekly_hours: float
    estimated_weeks: int
    estimated_completion: datetime
    milestones: tuple[Milestone, ...]


class TimelineCalculator:
    """Computes the plan timeline from config, availability and learner state."""

    def __init__(self, clock: Clock | None = None, base_hours: float = BASE_HOURS):
        self.clock = clock or SystemClock()
        self.base_hours = base_hours

    def calculate(
        self,
        config: StudyPlanConfig,
        availability: UserAvailability,
        analysis: StateAnalysis,
    ) -> Timeline:
        now = self.clock.now()

        weekly_hours = min(config.weekly_commitment_hours, availability.target_hours_per_week)
        if weekly_hours <= 0:
            raise ConfigurationError(f"Weekly study hours must be positive, got {weekly_hours}")

        weeks_available = self.weeks_available(config, now)
        total_hours = self.estimate_total_hours(config, analysis)
        # Rounded first so 11.000000000000002 weeks does not become 12
        estimated_weeks = math.ceil(round(total_hours / weekly_hours, 9))

        return Timeline(
            start=now,
            weeks_available=weeks_available,
            total_hours_needed=total_hours,
            weekly_hours=weekly_hours,
            estimated_weeks=estimated_weeks,
            estimated_completion=now + timedelta(days=estimated_weeks * 7),
            milestones=self.generate_milestones(weeks_available, config, now),
        )

    def weeks_available(self, config: StudyPlanConfig, now: datetime) -> int:
        """Weeks until the exam date, or the configured plan duration."""
        if config.target_exam_date is None:
            return config.plan_duration_weeks

        weeks = math.ceil((config.target_exam_date - now) / timedelta(weeks=1))
        if weeks < 1:
            logger.warning(
                f"Target exam date {config.target_exam_date.isoformat()} is not in the "
                "future; using a one-week timeline"
            )
            return 1
        return weeks

    def estimate_total_hours(self, config: StudyPlanConfig, analysis: StateAnalysis) -> float:
        weakness_multiplier = 1 + analysis.weakness_count * WEAKNESS_HOURS_FACTOR
        return self.base_hours * config.target_proficiency_level * weakness_multiplier

    @staticmethod
    def generate_milestones(
        weeks: int, config: StudyPlanConfig, now: datetime
    ) -> tuple[Milestone, ...]:
        return tuple(
            Milestone(
                name=f"Milestone {index}",
                target_date=now + timedelta(days=math.floor(weeks * 7 * fraction)),
                target_proficiency=fraction * config.target_proficiency_level,
            )
            for index, fraction in enumerate(MILESTONE_FRACTIONS, start=1)
        )
