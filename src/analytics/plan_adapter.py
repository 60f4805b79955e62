"""
Plan adaptation from observed analytics.

Two paths:
- Major revision (poor adherence, effectiveness or readiness): the plan is
  regenerated from an amended config through the planner's own factory.
  Executed sessions and reached milestones carry over with the plan status.
  Pending sessions are replaced.
- Minor adjustment: only sessions still `scheduled` are retuned in place
  (difficulty, estimated duration).

Both paths append an AdaptationRecord; the input plan is never mutated.
Completed and cancelled plans are not adapted.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace

from loguru import logger

from src.core.availability import UserAvailability
from src.core.errors import InvalidTransitionError
from src.core.plan_config import StudyPlanConfig
from src.core.progress import UserCourseProgress
from src.core.providers import Clock, SystemClock
from src.core.records import AdaptationRecord, StudyPlan, StudyPlanAnalytics, StudySession
from src.core.types import (
    CompletionStatus,
    DifficultyPreference,
    StudyDifficulty,
    StudyIntensity,
)

# Major revision triggers
MIN_ADHERENCE = 0.6
MIN_EFFECTIVENESS = 0.5
MIN_READINESS = 0.7

# Issue flags
ADHERENCE_ISSUE_BELOW = 0.8
EFFECTIVENESS_ISSUE_BELOW = 0.7
PACE_ISSUE_BELOW = 0.3

# Revision knobs
PACE_HOURS_MULTIPLIER = 1.2
REVISED_WEAKNESS_FOCUS = 0.7

# Minor adjustment knobs
HARDER_ABOVE = 0.8
EASIER_BELOW = 0.6
OVERRUN_FACTOR = 1.2
DURATION_STRETCH = 1.1

# Sessions a major revision replaces
PENDING = {CompletionStatus.SCHEDULED, CompletionStatus.RESCHEDULED}

# (config, availability, progress) -> freshly generated plan
PlanFactory = Callable[[StudyPlanConfig, UserAvailability, UserCourseProgress], StudyPlan]


@dataclass(frozen=True)
class AdaptationNeeds:
    requires_major_revision: bool
    adherence_issues: bool
    effectiveness_issues: bool
    pace_issues: bool

    @classmethod
    def from_analytics(cls, analytics: StudyPlanAnalytics) -> AdaptationNeeds:
        return cls(
            requires_major_revision=(
                analytics.schedule_adherence_rate < MIN_ADHERENCE
                or analytics.overall_effectiveness < MIN_EFFECTIVENESS
                or analytics.projected_exam_readiness < MIN_READINESS
            ),
            adherence_issues=analytics.schedule_adherence_rate < ADHERENCE_ISSUE_BELOW,
            effectiveness_issues=analytics.overall_effectiveness < EFFECTIVENESS_ISSUE_BELOW,
            pace_issues=analytics.learning_velocity < PACE_ISSUE_BELOW,
        )

    @property
    def reason(self) -> str:
        issues = []
        if self.adherence_issues:
            issues.append("low schedule adherence")
        if self.effectiveness_issues:
            issues.append("low session effectiveness")
        if self.pace_issues:
            issues.append("slow learning velocity")
        if not issues:
            issues.append("routine performance review")
        prefix = "Major revision" if self.requires_major_revision else "Minor adjustment"
        return f"{prefix}: {', '.join(issues)}"


class PlanAdapter:
    """Decides between regenerating a plan and retuning its upcoming sessions."""

    def __init__(self, plan_factory: PlanFactory, clock: Clock | None = None):
        self.plan_factory = plan_factory
        self.clock = clock or SystemClock()

    def adapt(
        self,
        plan: StudyPlan,
        progress: UserCourseProgress,
        analytics: StudyPlanAnalytics,
    ) -> StudyPlan:
        """
        Adapt a live plan to its analytics.

        Raises:
            InvalidTransitionError: If the plan is completed or cancelled
        """
        if plan.plan_status.is_terminal:
            raise InvalidTransitionError(
                f"Cannot adapt plan {plan.id}: it is {plan.plan_status.value}"
            )

        needs = AdaptationNeeds.from_analytics(analytics)

        if needs.requires_major_revision:
            adapted, changes = self.major_revision(plan, needs, progress)
            impact = "Plan regenerated from current progress"
        else:
            adapted, changes = self.minor_adjustment(plan, analytics)
            impact = "Upcoming sessions retuned" if changes else "No session changes needed"

        now = self.clock.now()
        record = AdaptationRecord(
            date=now,
            reason=needs.reason,
            changes_made=tuple(changes),
            impact_assessment=impact,
        )
        logger.info(f"Adapted plan {plan.id}: {record.reason}")

        return replace(
            adapted,
            adaptation_history=plan.adaptation_history + (record,),
            updated_at=now,
        )

    def major_revision(
        self,
        plan: StudyPlan,
        needs: AdaptationNeeds,
        progress: UserCourseProgress,
    ) -> tuple[StudyPlan, list[str]]:
        config = plan.plan_config
        availability = plan.user_availability
        changes: list[str] = []

        if needs.pace_issues:
            hours = config.weekly_commitment_hours * PACE_HOURS_MULTIPLIER
            config = replace(
                config,
                weekly_commitment_hours=hours,
                study_intensity=StudyIntensity.INTENSIVE,
            )
            changes.append(f"Weekly commitment raised to {hours:.1f} hours")
            changes.append("Intensity set to intensive")

        if needs.effectiveness_issues:
            config = replace(config, weakness_focus_ratio=REVISED_WEAKNESS_FOCUS)
            availability = replace(
                availability, difficulty_preference=DifficultyPreference.ADAPTIVE
            )
            changes.append(f"Weakness focus ratio set to {REVISED_WEAKNESS_FOCUS}")
            changes.append("Difficulty preference set to adaptive")

        changes.append("Sessions regenerated")
        revised = self.plan_factory(config, availability, progress)

        # Executed sessions and reached milestones stay with the plan
        kept = [s for s in plan.study_sessions if s.completion_status not in PENDING]
        achieved = tuple(m for m in plan.milestones if m.is_achieved)
        reached = max((m.target_proficiency for m in achieved), default=0.0)
        milestones = achieved + tuple(
            m for m in revised.milestones if m.target_proficiency > reached
        )

        revised = replace(
            revised.with_sessions([*kept, *revised.study_sessions], self.clock.now()),
            id=plan.id,
            start_date=plan.start_date,
            milestones=milestones,
            is_active=plan.is_active,
            plan_status=plan.plan_status,
            created_at=plan.created_at,
        )
        return revised, changes

    def minor_adjustment(
        self, plan: StudyPlan, analytics: StudyPlanAnalytics
    ) -> tuple[StudyPlan, list[str]]:
        now = self.clock.now()
        sessions: list[StudySession] = []
        retuned = stretched = 0

        difficulty = None
        if analytics.overall_effectiveness > HARDER_ABOVE:
            difficulty = StudyDifficulty.HARD
        elif analytics.overall_effectiveness < EASIER_BELOW:
            difficulty = StudyDifficulty.EASY

        for session in plan.study_sessions:
            if session.completion_status != CompletionStatus.SCHEDULED:
                sessions.append(session)
                continue

            updates = {}
            if difficulty is not None:
                updates["difficulty"] = difficulty
            if analytics.average_session_duration > session.scheduled_duration_minutes * OVERRUN_FACTOR:
                updates["estimated_duration_minutes"] = (
                    session.estimated_duration_minutes * DURATION_STRETCH
                )
                stretched += 1

            if updates:
                retuned += 1
                sessions.append(replace(session, updated_at=now, **updates))
            else:
                sessions.append(session)

        changes: list[str] = []
        if difficulty is not None and retuned:
            changes.append(f"Difficulty set to {difficulty.value} for upcoming sessions")
        if stretched:
            changes.append(f"Estimated duration extended on {stretched} session(s)")

        adjusted = replace(
            plan.with_sessions(sessions, now),
            effectiveness_score=analytics.overall_effectiveness,
            adherence_rate=analytics.schedule_adherence_rate,
        )
        return adjusted, changes
