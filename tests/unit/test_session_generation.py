"""
Unit tests for component distribution and session generation.
"""

from dataclasses import replace
from datetime import timedelta

import pytest

from src.core.progress import UserCourseProgress
from src.core.providers import SequentialIdGenerator, seeded_random
from src.core.types import (
    CompletionStatus,
    CourseComponent,
    StudyDifficulty,
    StudyPriority,
    StudySessionType,
)
from src.planning.distributor import SessionDistributor
from src.planning.session_generator import PlanOwner, SessionGenerator
from src.planning.state_analyzer import StateAnalyzer
from src.planning.timeline import TimelineCalculator

OWNER = PlanOwner("user-001", "course-b2", "progress-001")


@pytest.fixture
def analysis(sample_progress):
    return StateAnalyzer().analyze(sample_progress)


@pytest.fixture
def distribution(sample_progress, plan_config, analysis):
    return SessionDistributor().distribute(sample_progress, plan_config, analysis)


@pytest.fixture
def timeline(clock, plan_config, availability, analysis):
    return TimelineCalculator(clock).calculate(plan_config, availability, analysis)


class TestSessionDistributor:
    def test_weak_components_get_more_than_equal_share(self, distribution):
        assert distribution[CourseComponent.READING] > 1 / 4
        assert distribution[CourseComponent.WRITING] > 1 / 4

    def test_shares_follow_weights(self, distribution):
        assert distribution[CourseComponent.READING] == pytest.approx(0.35)
        assert distribution[CourseComponent.LISTENING] == pytest.approx(0.25)
        # Mastered (> 0.8) components are damped
        assert distribution[CourseComponent.SPEAKING] == pytest.approx(0.175)

    def test_shares_are_not_renormalized(self, distribution):
        assert sum(distribution.values()) == pytest.approx(1.125)

    def test_snapshot_order_is_kept(self, distribution, sample_progress):
        assert list(distribution) == sample_progress.components

    def test_empty_snapshot(self, plan_config, analysis):
        progress = UserCourseProgress(id="p", user_id="u", course_id="c", overall_progress=0.0)

        assert SessionDistributor().distribute(progress, plan_config, analysis) == {}


class TestSessionGenerator:
    def test_weekly_session_counts(
        self, clock, id_generator, plan_config, availability, timeline, analysis, distribution
    ):
        generator = SessionGenerator(clock, id_generator, seeded_random(1))

        sessions = generator.generate(
            OWNER, plan_config, availability, timeline, analysis, distribution
        )

        # 3 reading + 3 writing + 2 listening + 2 speaking per week, 15 weeks
        assert len(sessions) == 10 * timeline.estimated_weeks
        per_component = {
            c: sum(1 for s in sessions if s.primary_component == c) for c in distribution
        }
        assert per_component[CourseComponent.READING] == 3 * 15
        assert per_component[CourseComponent.SPEAKING] == 2 * 15

    def test_sessions_are_spaced_two_days_apart_within_week(
        self, clock, id_generator, plan_config, availability, timeline, analysis, distribution
    ):
        generator = SessionGenerator(clock, id_generator, seeded_random(1))

        sessions = generator.generate(
            OWNER, plan_config, availability, timeline, analysis, distribution
        )

        reading_week_one = [
            s.scheduled_date
            for s in sessions[:10]
            if s.primary_component == CourseComponent.READING
        ]
        now = clock.now()
        assert reading_week_one == [now, now + timedelta(days=2), now + timedelta(days=4)]
        assert sessions[10].scheduled_date == now + timedelta(weeks=1)

    def test_weak_components_get_weakness_focus(
        self, clock, id_generator, plan_config, availability, timeline, analysis, distribution
    ):
        generator = SessionGenerator(clock, id_generator, seeded_random(1))

        sessions = generator.generate(
            OWNER, plan_config, availability, timeline, analysis, distribution
        )

        weak = [s for s in sessions if s.primary_component == CourseComponent.WRITING]
        strong = [s for s in sessions if s.primary_component == CourseComponent.SPEAKING]
        neutral = [s for s in sessions if s.primary_component == CourseComponent.LISTENING]
        assert all(s.session_type == StudySessionType.WEAKNESS_FOCUS for s in weak)
        assert all(s.priority == StudyPriority.HIGH for s in weak)
        assert all(s.priority == StudyPriority.LOW for s in strong)
        assert all(s.priority == StudyPriority.MEDIUM for s in neutral)

    def test_new_sessions_have_no_outcomes(
        self, clock, id_generator, plan_config, availability, timeline, analysis, distribution
    ):
        generator = SessionGenerator(clock, id_generator, seeded_random(1))

        sessions = generator.generate(
            OWNER, plan_config, availability, timeline, analysis, distribution
        )

        session = sessions[0]
        assert session.completion_status == CompletionStatus.SCHEDULED
        assert session.actual_start_time is None
        assert session.completion_score is None
        assert session.difficulty == StudyDifficulty.MEDIUM
        assert session.estimated_duration_minutes == availability.preferred_session_duration
        assert session.success_criteria[0].metric == "reading_accuracy"
        assert session.success_criteria[0].target_value == 0.75

    def test_mock_exams_disabled(
        self, clock, id_generator, plan_config, availability, timeline, analysis, distribution
    ):
        config = replace(plan_config, include_mock_exams=False)
        generator = SessionGenerator(clock, id_generator, seeded_random(1), mock_exam_probability=1.0)

        sessions = generator.generate(OWNER, config, availability, timeline, analysis, distribution)

        assert not any(s.session_type == StudySessionType.MOCK_EXAM for s in sessions)

    def test_mock_exams_only_for_non_weak_components(
        self, clock, id_generator, plan_config, availability, timeline, analysis, distribution
    ):
        generator = SessionGenerator(clock, id_generator, seeded_random(1), mock_exam_probability=1.0)

        sessions = generator.generate(
            OWNER, plan_config, availability, timeline, analysis, distribution
        )

        for s in sessions:
            if analysis.is_weak(s.primary_component):
                assert s.session_type == StudySessionType.WEAKNESS_FOCUS
            else:
                assert s.session_type == StudySessionType.MOCK_EXAM

    def test_same_seed_same_sessions(
        self, clock, plan_config, availability, timeline, analysis, distribution
    ):
        first = SessionGenerator(clock, SequentialIdGenerator(), seeded_random(7)).generate(
            OWNER, plan_config, availability, timeline, analysis, distribution
        )
        second = SessionGenerator(clock, SequentialIdGenerator(), seeded_random(7)).generate(
            OWNER, plan_config, availability, timeline, analysis, distribution
        )

        assert first == second

    def test_session_count_ignores_float_noise(self):
        assert SessionGenerator.session_count(60.00000000000001, 60) == 1
        assert SessionGenerator.session_count(84, 60) == 2
