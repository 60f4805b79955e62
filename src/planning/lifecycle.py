"""
Plan and session lifecycle transitions.

Session: scheduled -> in_progress -> completed, scheduled/in_progress ->
skipped, scheduled/rescheduled -> rescheduled.
Plan: draft -> active (first session started) <-> paused, any non-terminal
-> completed | cancelled.

Every function returns a new StudyPlan; illegal moves raise
InvalidTransitionError.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime

from loguru import logger

from src.core.errors import InvalidTransitionError
from src.core.progress import UserCourseProgress
from src.core.providers import ensure_utc
from src.core.records import StudyPlan, StudySession
from src.core.types import CompletionStatus, PlanStatus

STARTABLE = {CompletionStatus.SCHEDULED, CompletionStatus.RESCHEDULED}
SKIPPABLE = {
    CompletionStatus.SCHEDULED,
    CompletionStatus.RESCHEDULED,
    CompletionStatus.IN_PROGRESS,
}


def _require_open(plan: StudyPlan) -> None:
    if plan.plan_status.is_terminal:
        raise InvalidTransitionError(f"Plan {plan.id} is {plan.plan_status.value}")


def _require_session(plan: StudyPlan, session_id: str) -> StudySession:
    session = plan.get_session(session_id)
    if session is None:
        raise InvalidTransitionError(f"Session {session_id} does not belong to plan {plan.id}")
    return session


def _replace_session(plan: StudyPlan, updated: StudySession, now: datetime) -> StudyPlan:
    sessions = [updated if s.id == updated.id else s for s in plan.study_sessions]
    return plan.with_sessions(sessions, now)


def start_session(plan: StudyPlan, session_id: str, now: datetime) -> StudyPlan:
    """Mark a session in progress; a draft plan becomes active."""
    _require_open(plan)
    if plan.plan_status == PlanStatus.PAUSED:
        raise InvalidTransitionError(f"Plan {plan.id} is paused")

    session = _require_session(plan, session_id)
    if session.completion_status not in STARTABLE:
        raise InvalidTransitionError(
            f"Cannot start session {session_id} from {session.completion_status.value}"
        )

    now = ensure_utc(now)
    updated = replace(
        session,
        completion_status=CompletionStatus.IN_PROGRESS,
        actual_start_time=now,
        updated_at=now,
    )
    result = _replace_session(plan, updated, now)
    if plan.plan_status == PlanStatus.DRAFT:
        logger.info(f"Plan {plan.id} activated")
        result = replace(result, plan_status=PlanStatus.ACTIVE)
    return result


def complete_session(
    plan: StudyPlan,
    session_id: str,
    now: datetime,
    *,
    completion_score: float,
    engagement_score: float | None = None,
    learning_effectiveness: float | None = None,
    user_satisfaction: int | None = None,
) -> StudyPlan:
    """
    Record the outcome of an in-progress session.

    Completed hours and plan progress are recomputed from all completed
    sessions; plan progress is capped at 1.0.
    """
    _require_open(plan)
    session = _require_session(plan, session_id)
    if session.completion_status != CompletionStatus.IN_PROGRESS:
        raise InvalidTransitionError(
            f"Cannot complete session {session_id} from {session.completion_status.value}"
        )

    now = ensure_utc(now)
    started = session.actual_start_time or now
    updated = replace(
        session,
        completion_status=CompletionStatus.COMPLETED,
        actual_end_time=now,
        actual_duration_minutes=(now - started).total_seconds() / 60,
        completion_score=completion_score,
        engagement_score=engagement_score,
        learning_effectiveness=learning_effectiveness,
        user_satisfaction=user_satisfaction,
        updated_at=now,
    )
    return _replace_session(plan, updated, now)


def skip_session(plan: StudyPlan, session_id: str, now: datetime) -> StudyPlan:
    _require_open(plan)
    session = _require_session(plan, session_id)
    if session.completion_status not in SKIPPABLE:
        raise InvalidTransitionError(
            f"Cannot skip session {session_id} from {session.completion_status.value}"
        )

    now = ensure_utc(now)
    updated = replace(session, completion_status=CompletionStatus.SKIPPED, updated_at=now)
    return _replace_session(plan, updated, now)


def reschedule_session(
    plan: StudyPlan, session_id: str, new_date: datetime, now: datetime
) -> StudyPlan:
    _require_open(plan)
    session = _require_session(plan, session_id)
    if session.completion_status not in STARTABLE:
        raise InvalidTransitionError(
            f"Cannot reschedule session {session_id} from {session.completion_status.value}"
        )

    now = ensure_utc(now)
    updated = replace(
        session,
        completion_status=CompletionStatus.RESCHEDULED,
        scheduled_date=ensure_utc(new_date),
        updated_at=now,
    )
    return _replace_session(plan, updated, now)


def pause_plan(plan: StudyPlan, now: datetime) -> StudyPlan:
    if plan.plan_status != PlanStatus.ACTIVE:
        raise InvalidTransitionError(f"Only active plans can be paused (plan is {plan.plan_status.value})")
    return replace(plan, plan_status=PlanStatus.PAUSED, is_active=False, updated_at=ensure_utc(now))


def resume_plan(plan: StudyPlan, now: datetime) -> StudyPlan:
    if plan.plan_status != PlanStatus.PAUSED:
        raise InvalidTransitionError(f"Only paused plans can be resumed (plan is {plan.plan_status.value})")
    return replace(plan, plan_status=PlanStatus.ACTIVE, is_active=True, updated_at=ensure_utc(now))


def cancel_plan(plan: StudyPlan, now: datetime) -> StudyPlan:
    _require_open(plan)
    logger.info(f"Plan {plan.id} cancelled")
    return replace(plan, plan_status=PlanStatus.CANCELLED, is_active=False, updated_at=ensure_utc(now))


def finish_plan(plan: StudyPlan, now: datetime) -> StudyPlan:
    _require_open(plan)
    logger.info(f"Plan {plan.id} completed")
    return replace(plan, plan_status=PlanStatus.COMPLETED, is_active=False, updated_at=ensure_utc(now))


def update_milestones(plan: StudyPlan, progress: UserCourseProgress, now: datetime) -> StudyPlan:
    """Mark milestones achieved once overall progress reaches their target."""
    now = ensure_utc(now)
    milestones = tuple(
        replace(
            m,
            is_achieved=True,
            completion_date=now,
            completion_score=progress.overall_progress,
        )
        if not m.is_achieved and m.target_proficiency <= progress.overall_progress
        else m
        for m in plan.milestones
    )
    if milestones == plan.milestones:
        return plan
    return replace(plan, milestones=milestones, updated_at=now)
