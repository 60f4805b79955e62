"""
Study plan effectiveness analytics.

Computes completion, adherence and consistency metrics, per-component time
and effectiveness, time-of-day performance and a predicted exam readiness
from the sessions a learner has executed.

Empty history is not an error: every metric degrades to a documented default
(effectiveness 0.5, velocity 0.5, retention 0.8, consistency 1.0).
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone, tzinfo

from loguru import logger

from src.core.availability import platform_weekday
from src.core.progress import ExamSessionSummary, UserCourseProgress
from src.core.providers import Clock, SystemClock
from src.core.records import (
    ComponentAnalytics,
    PeakPerformanceTime,
    RiskFactor,
    StudyPlan,
    StudyPlanAnalytics,
    StudySession,
)
from src.core.types import CompletionStatus, CourseComponent, RiskSeverity
from src.planning.state_analyzer import StateAnalyzer

# Defaults when nothing has been completed yet
DEFAULT_EFFECTIVENESS = 0.5
DEFAULT_VELOCITY = 0.5
DEFAULT_RETENTION = 0.8

DEFAULT_COMPONENT_EFFECTIVENESS = 0.7
NOMINAL_EFFECTIVENESS = 0.7  # Pace at which the plan's own estimate holds
RETENTION_FACTOR = 1.1
READINESS_FACTOR = 1.2
OPTIMAL_SESSION_EFFECTIVENESS = 0.8
PEAK_TIMES_LIMIT = 3

# Recommendation / risk thresholds
LOW_EFFECTIVENESS = 0.7
LOW_PROGRESS = 0.5
LOW_ADHERENCE = 0.8
LOW_READINESS = 0.8
LOW_CONSISTENCY = 0.7


@dataclass(frozen=True)
class EffectivenessMetrics:
    overall: float
    learning_velocity: float
    retention_rate: float


@dataclass(frozen=True)
class TimeUtilization:
    total_hours: float
    average_duration: float
    optimal_duration: float
    peak_times: tuple[PeakPerformanceTime, ...]


@dataclass(frozen=True)
class AdherenceStats:
    completion_rate: float
    adherence_rate: float
    missed_count: int
    rescheduled_count: int
    consistency: float


@dataclass(frozen=True)
class PredictiveInsights:
    exam_readiness: float
    recommendations: tuple[str, ...]
    risk_factors: tuple[RiskFactor, ...]


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values)


class EffectivenessAnalyzer:
    """Builds a StudyPlanAnalytics snapshot from a plan and its executed sessions."""

    def __init__(self, clock: Clock | None = None):
        self.clock = clock or SystemClock()

    def analyze(
        self,
        plan: StudyPlan,
        completed_sessions: Sequence[StudySession],
        progress: UserCourseProgress,
        recent_exam_sessions: Sequence[ExamSessionSummary] = (),
    ) -> StudyPlanAnalytics:
        now = self.clock.now()

        effectiveness = self.effectiveness_metrics(completed_sessions, recent_exam_sessions)
        components = self.component_progress(plan, completed_sessions, progress, now)
        time_stats = self.time_utilization(plan, completed_sessions)
        adherence = self.schedule_adherence(plan.study_sessions, completed_sessions)
        insights = self.predictive_insights(plan, effectiveness, adherence, progress, now)
        logger.debug(
            f"Plan {plan.id}: effectiveness {effectiveness.overall:.2f}, "
            f"adherence {adherence.adherence_rate:.2f}, readiness {insights.exam_readiness:.2f}"
        )

        return StudyPlanAnalytics(
            overall_effectiveness=effectiveness.overall,
            session_completion_rate=adherence.completion_rate,
            learning_velocity=effectiveness.learning_velocity,
            retention_rate=effectiveness.retention_rate,
            component_progress=components,
            total_study_time_hours=time_stats.total_hours,
            average_session_duration=time_stats.average_duration,
            optimal_session_duration=time_stats.optimal_duration,
            peak_performance_times=time_stats.peak_times,
            schedule_adherence_rate=adherence.adherence_rate,
            missed_sessions_count=adherence.missed_count,
            rescheduled_sessions_count=adherence.rescheduled_count,
            consistency_score=adherence.consistency,
            projected_exam_readiness=insights.exam_readiness,
            recommended_adjustments=insights.recommendations,
            risk_factors=insights.risk_factors,
        )

    # =========================================================================
    # Effectiveness
    # =========================================================================

    @staticmethod
    def effectiveness_metrics(
        completed_sessions: Sequence[StudySession],
        recent_exam_sessions: Sequence[ExamSessionSummary] = (),
    ) -> EffectivenessMetrics:
        if not completed_sessions:
            return EffectivenessMetrics(
                overall=DEFAULT_EFFECTIVENESS,
                learning_velocity=DEFAULT_VELOCITY,
                retention_rate=DEFAULT_RETENTION,
            )

        avg_completion = _mean([s.completion_score or 0.0 for s in completed_sessions])
        avg_engagement = _mean([s.engagement_score or 0.0 for s in completed_sessions])

        return EffectivenessMetrics(
            overall=(avg_completion + avg_engagement) / 2,
            learning_velocity=StateAnalyzer.calculate_learning_velocity(recent_exam_sessions),
            retention_rate=min(1.0, avg_completion * RETENTION_FACTOR),
        )

    # =========================================================================
    # Components
    # =========================================================================

    def component_progress(
        self,
        plan: StudyPlan,
        completed_sessions: Sequence[StudySession],
        progress: UserCourseProgress,
        now: datetime,
    ) -> dict[CourseComponent, ComponentAnalytics]:
        analysis: dict[CourseComponent, ComponentAnalytics] = {}

        for component, value in progress.component_progress.items():
            sessions = [s for s in completed_sessions if s.primary_component == component]
            time_invested = sum(s.effective_duration_minutes for s in sessions) / 60
            effectiveness = (
                _mean(
                    [
                        s.learning_effectiveness
                        if s.learning_effectiveness is not None
                        else DEFAULT_COMPONENT_EFFECTIVENESS
                        for s in sessions
                    ]
                )
                if sessions
                else DEFAULT_COMPONENT_EFFECTIVENESS
            )

            analysis[component] = ComponentAnalytics(
                progress=value,
                time_invested_hours=time_invested,
                effectiveness=effectiveness,
                projected_completion=self.project_completion(plan, value, effectiveness, now),
            )

        return analysis

    @staticmethod
    def project_completion(
        plan: StudyPlan, current: float, effectiveness: float, now: datetime
    ) -> datetime:
        """
        Project when a component reaches the plan target.

        The plan's own span is assumed to cover the full target at nominal
        effectiveness; the remaining fraction of the target is scaled by how
        far the observed effectiveness is from nominal.
        """
        target = plan.plan_config.target_proficiency_level
        remaining = target - current
        if remaining <= 0 or target <= 0:
            return now

        plan_span = plan.estimated_completion_date - plan.start_date
        pace = NOMINAL_EFFECTIVENESS / max(effectiveness, 0.1)
        return now + timedelta(seconds=plan_span.total_seconds() * (remaining / target) * pace)

    # =========================================================================
    # Time utilization
    # =========================================================================

    @staticmethod
    def time_utilization(
        plan: StudyPlan, completed_sessions: Sequence[StudySession]
    ) -> TimeUtilization:
        preferred = plan.user_availability.preferred_session_duration
        durations = [s.effective_duration_minutes for s in completed_sessions]

        effective_durations = [
            s.effective_duration_minutes
            for s in completed_sessions
            if s.learning_effectiveness is not None
            and s.learning_effectiveness >= OPTIMAL_SESSION_EFFECTIVENESS
        ]

        return TimeUtilization(
            total_hours=sum(durations) / 60,
            average_duration=_mean(durations) if durations else preferred,
            optimal_duration=_mean(effective_durations) if effective_durations else preferred,
            peak_times=EffectivenessAnalyzer.peak_performance_times(
                completed_sessions, plan.user_availability.zone
            ),
        )

    @staticmethod
    def peak_performance_times(
        completed_sessions: Sequence[StudySession],
        zone: tzinfo = timezone.utc,
    ) -> tuple[PeakPerformanceTime, ...]:
        """Best (weekday, hour) slots by mean learning effectiveness, on the learner's clock."""
        buckets: dict[tuple[int, int], list[float]] = defaultdict(list)
        for s in completed_sessions:
            if s.actual_start_time is None or s.learning_effectiveness is None:
                continue
            started = s.actual_start_time.astimezone(zone)
            buckets[(platform_weekday(started), started.hour)].append(s.learning_effectiveness)

        ranked = sorted(
            (
                PeakPerformanceTime(day_of_week=day, hour_of_day=hour, effectiveness_score=_mean(v))
                for (day, hour), v in buckets.items()
            ),
            key=lambda p: (-p.effectiveness_score, p.day_of_week, p.hour_of_day),
        )
        return tuple(ranked[:PEAK_TIMES_LIMIT])

    # =========================================================================
    # Adherence
    # =========================================================================

    @staticmethod
    def schedule_adherence(
        planned_sessions: Sequence[StudySession],
        completed_sessions: Sequence[StudySession],
    ) -> AdherenceStats:
        total_planned = len(planned_sessions)
        missed = sum(1 for s in planned_sessions if s.completion_status == CompletionStatus.SKIPPED)
        rescheduled = sum(
            1 for s in planned_sessions if s.completion_status == CompletionStatus.RESCHEDULED
        )

        if total_planned == 0:
            return AdherenceStats(
                completion_rate=0.0,
                adherence_rate=0.0,
                missed_count=0,
                rescheduled_count=0,
                consistency=1.0,
            )

        completed = len(completed_sessions)
        return AdherenceStats(
            completion_rate=min(1.0, completed / total_planned),
            adherence_rate=min(1.0, (completed + rescheduled) / total_planned),
            missed_count=missed,
            rescheduled_count=rescheduled,
            consistency=max(0.0, 1 - (missed + rescheduled * 0.5) / total_planned),
        )

    # =========================================================================
    # Predictions
    # =========================================================================

    @staticmethod
    def predictive_insights(
        plan: StudyPlan,
        effectiveness: EffectivenessMetrics,
        adherence: AdherenceStats,
        progress: UserCourseProgress,
        now: datetime,
    ) -> PredictiveInsights:
        readiness = min(1.0, progress.overall_progress * effectiveness.overall * READINESS_FACTOR)

        recommendations: list[str] = []
        if effectiveness.overall < LOW_EFFECTIVENESS:
            recommendations.append("Consider reducing session difficulty")
        if progress.overall_progress < LOW_PROGRESS:
            recommendations.append("Increase study time for weak components")
        if adherence.adherence_rate < LOW_ADHERENCE:
            recommendations.append("Review weekly availability to improve schedule adherence")

        risks: list[RiskFactor] = []
        if readiness < LOW_READINESS:
            risks.append(
                RiskFactor(
                    factor="Low exam readiness",
                    severity=RiskSeverity.HIGH,
                    mitigation_strategy="Increase study intensity and focus on weak areas",
                )
            )
        if adherence.missed_count > 0 and adherence.consistency < LOW_CONSISTENCY:
            risks.append(
                RiskFactor(
                    factor="Inconsistent study schedule",
                    severity=RiskSeverity.MEDIUM,
                    mitigation_strategy="Shorten sessions and keep fixed weekly study slots",
                )
            )

        exam_date = plan.plan_config.target_exam_date
        prep_window = timedelta(weeks=plan.plan_config.exam_prep_weeks_before)
        if exam_date is not None and now <= exam_date <= now + prep_window and readiness < LOW_READINESS:
            risks.append(
                RiskFactor(
                    factor="Exam date approaching",
                    severity=RiskSeverity.HIGH,
                    mitigation_strategy="Switch to exam preparation with weekly mock exams",
                )
            )

        return PredictiveInsights(
            exam_readiness=readiness,
            recommendations=tuple(recommendations),
            risk_factors=tuple(risks),
        )
