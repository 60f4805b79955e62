"""
Plan, session and analytics records.

Records are frozen dataclasses: planner operations return new values built
with dataclasses.replace() instead of mutating what the caller passed in.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any

from src.core.availability import UserAvailability
from src.core.errors import InvalidRecordError
from src.core.plan_config import StudyPlanConfig
from src.core.progress import check_unit_interval
from src.core.serialization import to_jsonable
from src.core.types import (
    ActivityType,
    CompletionStatus,
    CourseComponent,
    PlanStatus,
    RiskSeverity,
    StudyDifficulty,
    StudyIntensity,
    StudyPriority,
    StudySessionType,
)


@dataclass(frozen=True)
class SuccessCriterion:
    metric: str
    target_value: float
    weight: float = 1.0


@dataclass(frozen=True)
class RecommendedActivity:
    activity_type: ActivityType
    description: str
    duration_minutes: float
    difficulty: StudyDifficulty = StudyDifficulty.MEDIUM
    resources: tuple[str, ...] = ()


@dataclass(frozen=True)
class StudySession:
    """A single dated study session owned by a plan."""

    id: str
    user_id: str
    course_id: str
    progress_id: str

    # Scheduling
    scheduled_date: datetime
    scheduled_duration_minutes: float
    estimated_duration_minutes: float

    # Content
    session_type: StudySessionType
    primary_component: CourseComponent
    priority: StudyPriority
    difficulty: StudyDifficulty
    intensity: StudyIntensity
    secondary_components: tuple[CourseComponent, ...] = ()
    learning_objectives: tuple[str, ...] = ()
    success_criteria: tuple[SuccessCriterion, ...] = ()
    recommended_activities: tuple[RecommendedActivity, ...] = ()
    prerequisite_sessions: tuple[str, ...] = ()

    # Tracking
    completion_status: CompletionStatus = CompletionStatus.SCHEDULED
    actual_start_time: datetime | None = None
    actual_end_time: datetime | None = None
    actual_duration_minutes: float | None = None

    # Results (populated after execution)
    completion_score: float | None = None
    engagement_score: float | None = None
    learning_effectiveness: float | None = None
    user_satisfaction: int | None = None  # 1-5

    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self):
        check_unit_interval("completion_score", self.completion_score)
        check_unit_interval("engagement_score", self.engagement_score)
        check_unit_interval("learning_effectiveness", self.learning_effectiveness)
        if self.user_satisfaction is not None and not 1 <= self.user_satisfaction <= 5:
            raise InvalidRecordError(
                f"user_satisfaction must be within [1, 5], got {self.user_satisfaction}"
            )

    @property
    def effective_duration_minutes(self) -> float:
        """Actual duration when the session ran, else the estimate."""
        if self.actual_duration_minutes:
            return self.actual_duration_minutes
        return self.estimated_duration_minutes

    def to_dict(self) -> dict[str, Any]:
        return to_jsonable(self)


@dataclass(frozen=True)
class Milestone:
    name: str
    target_date: datetime
    target_proficiency: float
    completion_date: datetime | None = None
    completion_score: float | None = None
    is_achieved: bool = False


@dataclass(frozen=True)
class AdaptationRecord:
    date: datetime
    reason: str
    changes_made: tuple[str, ...] = ()
    impact_assessment: str = ""


def planned_hours(sessions: tuple[StudySession, ...] | list[StudySession]) -> float:
    """Sum of estimated session durations, in hours."""
    return sum(s.estimated_duration_minutes for s in sessions) / 60


@dataclass(frozen=True)
class StudyPlan:
    """A learner's plan and the sessions it exclusively owns."""

    id: str
    user_id: str
    course_id: str
    progress_id: str

    plan_name: str
    plan_description: str
    plan_config: StudyPlanConfig
    user_availability: UserAvailability

    start_date: datetime
    target_completion_date: datetime
    estimated_completion_date: datetime

    study_sessions: tuple[StudySession, ...] = ()
    total_planned_hours: float = 0.0
    completed_hours: float = 0.0

    plan_progress: float = 0.0
    milestones: tuple[Milestone, ...] = ()

    effectiveness_score: float = 0.8
    adherence_rate: float = 1.0
    adaptation_history: tuple[AdaptationRecord, ...] = ()

    is_active: bool = True
    plan_status: PlanStatus = PlanStatus.DRAFT

    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self):
        check_unit_interval("plan_progress", self.plan_progress)
        check_unit_interval("effectiveness_score", self.effectiveness_score)
        check_unit_interval("adherence_rate", self.adherence_rate)

    def get_session(self, session_id: str) -> StudySession | None:
        return next((s for s in self.study_sessions if s.id == session_id), None)

    def sessions_with_status(self, *statuses: CompletionStatus) -> list[StudySession]:
        return [s for s in self.study_sessions if s.completion_status in statuses]

    @property
    def completed_sessions(self) -> list[StudySession]:
        return self.sessions_with_status(CompletionStatus.COMPLETED)

    def with_sessions(self, sessions: list[StudySession], updated_at: datetime) -> StudyPlan:
        """
        Copy with a new session list and recomputed totals.

        Completed hours count actual durations where recorded; plan progress
        is completed over planned hours, capped at 1.0.
        """
        total = planned_hours(sessions)
        completed = (
            sum(
                s.effective_duration_minutes
                for s in sessions
                if s.completion_status == CompletionStatus.COMPLETED
            )
            / 60
        )
        return replace(
            self,
            study_sessions=tuple(sessions),
            total_planned_hours=total,
            completed_hours=completed,
            plan_progress=min(1.0, completed / total) if total > 0 else 0.0,
            updated_at=updated_at,
        )

    def to_dict(self) -> dict[str, Any]:
        return to_jsonable(self)


@dataclass(frozen=True)
class ComponentAnalytics:
    progress: float
    time_invested_hours: float
    effectiveness: float
    projected_completion: datetime


@dataclass(frozen=True)
class PeakPerformanceTime:
    day_of_week: int  # 0 = Sunday
    hour_of_day: int
    effectiveness_score: float


@dataclass(frozen=True)
class RiskFactor:
    factor: str
    severity: RiskSeverity
    mitigation_strategy: str


@dataclass(frozen=True)
class StudyPlanAnalytics:
    """Effectiveness, time, adherence and predictive snapshot for a plan."""

    # Effectiveness metrics
    overall_effectiveness: float
    session_completion_rate: float
    learning_velocity: float
    retention_rate: float

    component_progress: dict[CourseComponent, ComponentAnalytics] = field(default_factory=dict)

    # Time analysis
    total_study_time_hours: float = 0.0
    average_session_duration: float = 0.0
    optimal_session_duration: float = 0.0
    peak_performance_times: tuple[PeakPerformanceTime, ...] = ()

    # Adherence analysis
    schedule_adherence_rate: float = 0.0
    missed_sessions_count: int = 0
    rescheduled_sessions_count: int = 0
    consistency_score: float = 1.0

    # Predictive insights
    projected_exam_readiness: float = 0.0
    recommended_adjustments: tuple[str, ...] = ()
    risk_factors: tuple[RiskFactor, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return to_jsonable(self)
