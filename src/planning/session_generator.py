"""
Session generation.

Expands a component distribution into dated StudySession records, week by
week. Session-type selection for non-weak components is the only random
decision; it draws from an injected random.Random so plans are reproducible.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from datetime import datetime, timedelta

from loguru import logger

from src.core.availability import UserAvailability
from src.core.plan_config import StudyPlanConfig
from src.core.providers import Clock, IdGenerator, SystemClock, UuidGenerator
from src.core.records import StudySession
from src.core.types import (
    CompletionStatus,
    CourseComponent,
    StudyDifficulty,
    StudyPriority,
    StudySessionType,
)
from src.planning import catalog
from src.planning.state_analyzer import StateAnalysis
from src.planning.timeline import Timeline

MOCK_EXAM_PROBABILITY = 0.3
SESSION_SPACING_DAYS = 2


@dataclass(frozen=True)
class PlanOwner:
    """Identity references stamped onto every generated session."""

    user_id: str
    course_id: str
    progress_id: str


class SessionGenerator:
    """Turns (timeline, distribution, analysis) into scheduled sessions."""

    def __init__(
        self,
        clock: Clock | None = None,
        id_generator: IdGenerator | None = None,
        rng: random.Random | None = None,
        mock_exam_probability: float = MOCK_EXAM_PROBABILITY,
    ):
        self.clock = clock or SystemClock()
        self.id_generator = id_generator or UuidGenerator()
        self.rng = rng or random.Random()
        self.mock_exam_probability = mock_exam_probability

    def generate(
        self,
        owner: PlanOwner,
        config: StudyPlanConfig,
        availability: UserAvailability,
        timeline: Timeline,
        analysis: StateAnalysis,
        distribution: dict[CourseComponent, float],
    ) -> list[StudySession]:
        sessions: list[StudySession] = []
        now = self.clock.now()

        for week in range(timeline.estimated_weeks):
            week_start = timeline.start + timedelta(weeks=week)
            week_sessions = self.generate_week(
                owner, config, availability, analysis, distribution, week_start, now
            )
            logger.debug(f"Week {week + 1}: {len(week_sessions)} sessions")
            sessions.extend(week_sessions)

        return sessions

    def generate_week(
        self,
        owner: PlanOwner,
        config: StudyPlanConfig,
        availability: UserAvailability,
        analysis: StateAnalysis,
        distribution: dict[CourseComponent, float],
        week_start: datetime,
        now: datetime,
    ) -> list[StudySession]:
        sessions = []
        duration = availability.preferred_session_duration

        for component, share in distribution.items():
            component_minutes = config.weekly_commitment_hours * share * 60
            session_count = self.session_count(component_minutes, duration)

            for i in range(session_count):
                sessions.append(
                    StudySession(
                        id=self.id_generator.new_id(),
                        user_id=owner.user_id,
                        course_id=owner.course_id,
                        progress_id=owner.progress_id,
                        scheduled_date=week_start + timedelta(days=i * SESSION_SPACING_DAYS),
                        scheduled_duration_minutes=duration,
                        estimated_duration_minutes=duration,
                        session_type=self.determine_session_type(component, analysis, config),
                        primary_component=component,
                        priority=self.determine_priority(component, analysis),
                        difficulty=self.determine_difficulty(analysis),
                        intensity=config.study_intensity,
                        learning_objectives=catalog.learning_objectives(component),
                        success_criteria=catalog.success_criteria(component),
                        recommended_activities=catalog.recommended_activities(component),
                        completion_status=CompletionStatus.SCHEDULED,
                        created_at=now,
                        updated_at=now,
                    )
                )

        return sessions

    @staticmethod
    def session_count(component_minutes: float, session_minutes: int) -> int:
        # Rounded first so 60.00000000000001 minutes does not become two sessions
        return math.ceil(round(component_minutes / session_minutes, 9))

    def determine_session_type(
        self,
        component: CourseComponent,
        analysis: StateAnalysis,
        config: StudyPlanConfig,
    ) -> StudySessionType:
        if analysis.is_weak(component):
            return StudySessionType.WEAKNESS_FOCUS
        if config.include_mock_exams and self.rng.random() < self.mock_exam_probability:
            return StudySessionType.MOCK_EXAM
        return StudySessionType.SKILL_PRACTICE

    @staticmethod
    def determine_priority(component: CourseComponent, analysis: StateAnalysis) -> StudyPriority:
        if analysis.is_weak(component):
            return StudyPriority.HIGH
        if analysis.is_strong(component):
            return StudyPriority.LOW
        return StudyPriority.MEDIUM

    @staticmethod
    def determine_difficulty(analysis: StateAnalysis) -> StudyDifficulty:
        return analysis.difficulty_tolerance or StudyDifficulty.MEDIUM
