"""
Study planner orchestration.

Wires the planning and analytics components together:
- Create a plan from progress, goals and availability
- Adapt a plan from observed analytics
- Analyze plan effectiveness
- Pick the next session to run
- Build spaced-repetition reviews and progress updates

The planner holds no per-user state: every call takes snapshots and returns
new values. Construct one instance and pass it to whoever needs it.
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from dataclasses import replace
from datetime import timedelta

from loguru import logger

from src.analytics.effectiveness import EffectivenessAnalyzer
from src.analytics.plan_adapter import PlanAdapter
from src.core.availability import UserAvailability
from src.core.plan_config import StudyPlanConfig
from src.core.progress import ExamSessionSummary, ProgressUpdate, UserCourseProgress
from src.core.providers import Clock, IdGenerator, SystemClock, UuidGenerator
from src.core.records import StudyPlan, StudyPlanAnalytics, StudySession, planned_hours
from src.core.types import CompletionStatus, PlanStatus
from src.planning.distributor import SessionDistributor
from src.planning.session_generator import MOCK_EXAM_PROBABILITY, PlanOwner, SessionGenerator
from src.planning.spaced_repetition import SpacedRepetitionScheduler
from src.planning.state_analyzer import StateAnalysis, StateAnalyzer
from src.planning.timeline import BASE_HOURS, TimelineCalculator

INITIAL_EFFECTIVENESS = 0.8
INITIAL_ADHERENCE = 1.0
SECONDARY_COMPONENT_WEIGHT = 0.8
RESCHEDULE_SEARCH_DAYS = 7


class StudyPlanner:
    """
    Stateless study plan engine.

    Time, identity and randomness are injected so plans can be reproduced
    exactly in tests (FixedClock, SequentialIdGenerator, seeded Random).
    """

    def __init__(
        self,
        clock: Clock | None = None,
        id_generator: IdGenerator | None = None,
        rng: random.Random | None = None,
        base_hours: float = BASE_HOURS,
        mock_exam_probability: float = MOCK_EXAM_PROBABILITY,
    ):
        self.clock = clock or SystemClock()
        self.id_generator = id_generator or UuidGenerator()

        self.state_analyzer = StateAnalyzer()
        self.timeline_calculator = TimelineCalculator(self.clock, base_hours=base_hours)
        self.distributor = SessionDistributor()
        self.session_generator = SessionGenerator(
            self.clock,
            self.id_generator,
            rng or random.Random(),
            mock_exam_probability=mock_exam_probability,
        )
        self.spaced_repetition = SpacedRepetitionScheduler(self.clock, self.id_generator)
        self.effectiveness_analyzer = EffectivenessAnalyzer(self.clock)

    # =========================================================================
    # Plan creation
    # =========================================================================

    def create_plan(
        self,
        user_id: str,
        course_id: str,
        progress_id: str,
        config: StudyPlanConfig,
        availability: UserAvailability,
        progress: UserCourseProgress,
        recent_sessions: Sequence[ExamSessionSummary] = (),
    ) -> StudyPlan:
        """
        Build a new draft plan.

        Args:
            user_id: Learner the plan belongs to
            course_id: Course being studied
            progress_id: Progress record the plan tracks
            config: Plan goals and pacing
            availability: Learner's weekly availability
            progress: Current progress snapshot
            recent_sessions: Exam sessions, oldest first

        Returns:
            StudyPlan in draft status

        Raises:
            ConfigurationError: If the weekly study budget is not positive
        """
        now = self.clock.now()

        analysis = self.state_analyzer.analyze(progress, recent_sessions)
        timeline = self.timeline_calculator.calculate(config, availability, analysis)
        distribution = self.distributor.distribute(progress, config, analysis)
        sessions = self.session_generator.generate(
            PlanOwner(user_id, course_id, progress_id),
            config,
            availability,
            timeline,
            analysis,
            distribution,
        )

        plan = StudyPlan(
            id=self.id_generator.new_id(),
            user_id=user_id,
            course_id=course_id,
            progress_id=progress_id,
            plan_name=self.plan_name(config),
            plan_description=self.plan_description(config, analysis),
            plan_config=config,
            user_availability=availability,
            start_date=now,
            target_completion_date=config.target_exam_date or timeline.estimated_completion,
            estimated_completion_date=timeline.estimated_completion,
            study_sessions=tuple(sessions),
            total_planned_hours=planned_hours(sessions),
            completed_hours=0.0,
            plan_progress=0.0,
            milestones=timeline.milestones,
            effectiveness_score=INITIAL_EFFECTIVENESS,
            adherence_rate=INITIAL_ADHERENCE,
            is_active=True,
            plan_status=PlanStatus.DRAFT,
            created_at=now,
            updated_at=now,
        )

        logger.info(
            f"Created plan {plan.id} for user {user_id}: {len(sessions)} sessions, "
            f"{plan.total_planned_hours:.1f}h over {timeline.estimated_weeks} weeks"
        )
        return plan

    @staticmethod
    def plan_name(config: StudyPlanConfig) -> str:
        return f"{config.study_intensity.display_name} Study Plan - {config.plan_duration_weeks} weeks"

    @staticmethod
    def plan_description(config: StudyPlanConfig, analysis: StateAnalysis) -> str:
        target = round(config.target_proficiency_level * 100)
        focus = ", ".join(w.component.value for w in analysis.component_weaknesses) or "none"
        return (
            f"Personalized study plan targeting {target}% proficiency with "
            f"{config.weekly_commitment_hours:g} hours per week. Focus areas: {focus}."
        )

    # =========================================================================
    # Adaptation and analytics
    # =========================================================================

    def adapt_plan(
        self,
        plan: StudyPlan,
        progress: UserCourseProgress,
        analytics: StudyPlanAnalytics,
    ) -> StudyPlan:
        def regenerate(
            config: StudyPlanConfig,
            availability: UserAvailability,
            current: UserCourseProgress,
        ) -> StudyPlan:
            return self.create_plan(
                plan.user_id,
                plan.course_id,
                plan.progress_id,
                config,
                availability,
                current,
            )

        return PlanAdapter(regenerate, self.clock).adapt(plan, progress, analytics)

    def analyze_effectiveness(
        self,
        plan: StudyPlan,
        completed_sessions: Sequence[StudySession],
        progress: UserCourseProgress,
        recent_exam_sessions: Sequence[ExamSessionSummary] = (),
    ) -> StudyPlanAnalytics:
        return self.effectiveness_analyzer.analyze(
            plan, completed_sessions, progress, recent_exam_sessions
        )

    def generate_spaced_repetition_schedule(
        self,
        plan: StudyPlan,
        completed_sessions: Sequence[StudySession],
        progress: UserCourseProgress | None = None,
    ) -> list[StudySession]:
        """Review sessions for the plan; empty when the plan disables spaced repetition."""
        if not plan.plan_config.spaced_repetition:
            return []
        return self.spaced_repetition.schedule(completed_sessions, progress)

    # =========================================================================
    # Next session
    # =========================================================================

    def schedule_next_session(
        self,
        plan: StudyPlan,
        completed_sessions: Sequence[StudySession],
    ) -> StudySession | None:
        """
        First scheduled session whose prerequisites are all completed.

        When the session falls on a day the learner is unavailable it is moved
        to the next available weekday (searching up to a week ahead).
        """
        completed_ids = {s.id for s in completed_sessions}
        session = next(
            (
                s
                for s in plan.study_sessions
                if s.completion_status == CompletionStatus.SCHEDULED
                and all(p in completed_ids for p in s.prerequisite_sessions)
            ),
            None,
        )
        if session is None:
            return None

        availability = plan.user_availability
        scheduled = session.scheduled_date
        weekday = availability.local_weekday(scheduled)

        if not availability.is_available(weekday):
            for offset in range(1, RESCHEDULE_SEARCH_DAYS + 1):
                if availability.is_available((weekday + offset) % 7):
                    scheduled = scheduled + timedelta(days=offset)
                    break

        return replace(session, scheduled_date=scheduled, updated_at=self.clock.now())

    # =========================================================================
    # Progress updates
    # =========================================================================

    def convert_session_to_progress_update(self, session: StudySession) -> ProgressUpdate:
        component_progress = {}
        if session.completion_score is not None:
            component_progress[session.primary_component] = session.completion_score
            for component in session.secondary_components:
                component_progress[component] = (
                    session.completion_score * SECONDARY_COMPONENT_WEIGHT
                )

        return ProgressUpdate(
            component_progress=component_progress,
            last_activity=session.actual_end_time or self.clock.now(),
        )
