"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
Planner fixtures run on a FixedClock (Monday 2025-01-06 09:00 UTC), a
SequentialIdGenerator and a seeded random source so plans are reproducible.
"""
import itertools
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.core.availability import create_default_user_availability  # noqa: E402
from src.core.plan_config import create_default_study_plan_config  # noqa: E402
from src.core.progress import ExamSessionSummary, SkillArea, UserCourseProgress  # noqa: E402
from src.core.providers import FixedClock, SequentialIdGenerator, seeded_random  # noqa: E402
from src.core.records import StudyPlan, StudySession, planned_hours  # noqa: E402
from src.core.types import (  # noqa: E402
    CompletionStatus,
    CourseComponent,
    ExamSessionState,
    StudyDifficulty,
    StudyIntensity,
    StudyPriority,
    StudySessionType,
)
from src.planning.planner import StudyPlanner  # noqa: E402

NOW = datetime(2025, 1, 6, 9, 0, tzinfo=timezone.utc)  # Monday


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
def id_generator():
    return SequentialIdGenerator()


@pytest.fixture
def planner(clock, id_generator):
    """Planner with deterministic time, identity and randomness."""
    return StudyPlanner(clock=clock, id_generator=id_generator, rng=seeded_random(42))


@pytest.fixture
def availability():
    return create_default_user_availability()


@pytest.fixture
def plan_config():
    return create_default_study_plan_config()


@pytest.fixture
def sample_progress():
    """Four tracked components: reading and writing weak, speaking strong."""
    return UserCourseProgress(
        id="progress-001",
        user_id="user-001",
        course_id="course-b2",
        overall_progress=0.55,
        component_progress={
            CourseComponent.READING: 0.4,
            CourseComponent.WRITING: 0.3,
            CourseComponent.LISTENING: 0.7,
            CourseComponent.SPEAKING: 0.85,
        },
        strengths=(SkillArea(CourseComponent.SPEAKING, 0.85),),
        weaknesses=(
            SkillArea(CourseComponent.READING, 0.4),
            SkillArea(CourseComponent.WRITING, 0.3),
        ),
        readiness_score=0.5,
    )


@pytest.fixture
def make_exam_session():
    """Factory for exam session summaries."""
    counter = itertools.count(1)

    def _make(score, duration_seconds=2400, state=ExamSessionState.COMPLETED, component=CourseComponent.READING):
        return ExamSessionSummary(
            id=f"exam-{next(counter):03d}",
            component=component,
            score=score,
            duration_seconds=duration_seconds,
            state=state,
        )

    return _make


@pytest.fixture
def make_session():
    """Factory for study sessions; keyword overrides replace the defaults."""
    counter = itertools.count(1)

    def _make(**overrides):
        values = dict(
            id=f"session-{next(counter):03d}",
            user_id="user-001",
            course_id="course-b2",
            progress_id="progress-001",
            scheduled_date=NOW,
            scheduled_duration_minutes=60,
            estimated_duration_minutes=60,
            session_type=StudySessionType.SKILL_PRACTICE,
            primary_component=CourseComponent.READING,
            priority=StudyPriority.MEDIUM,
            difficulty=StudyDifficulty.MEDIUM,
            intensity=StudyIntensity.MODERATE,
            learning_objectives=("Improve reading comprehension",),
            completion_status=CompletionStatus.SCHEDULED,
            created_at=NOW,
            updated_at=NOW,
        )
        values.update(overrides)
        return StudySession(**values)

    return _make


@pytest.fixture
def make_plan(plan_config, availability):
    """Factory for a hand-built plan owning the given sessions (12-week span)."""

    def _make(sessions=(), config=None, **overrides):
        values = dict(
            id="plan-001",
            user_id="user-001",
            course_id="course-b2",
            progress_id="progress-001",
            plan_name="Moderate Study Plan - 12 weeks",
            plan_description="Test plan",
            plan_config=config or plan_config,
            user_availability=availability,
            start_date=NOW,
            target_completion_date=NOW + timedelta(weeks=12),
            estimated_completion_date=NOW + timedelta(weeks=12),
            study_sessions=tuple(sessions),
            total_planned_hours=planned_hours(list(sessions)),
            created_at=NOW,
            updated_at=NOW,
        )
        values.update(overrides)
        return StudyPlan(**values)

    return _make
