"""
Unit tests for record validation and (de)serialization.
"""

from datetime import datetime, timezone

import pytest

from src.core.availability import (
    DaySchedule,
    TimeSlot,
    UserAvailability,
    create_default_user_availability,
    platform_weekday,
)
from src.core.errors import ConfigurationError, InvalidRecordError
from src.core.plan_config import StudyPlanConfig, create_default_study_plan_config
from src.core.progress import ExamSessionSummary, UserCourseProgress
from src.core.types import (
    CourseComponent,
    DifficultyPreference,
    ExamSessionState,
    StudyIntensity,
)


class TestUserAvailability:
    def test_default_availability(self):
        availability = create_default_user_availability()

        assert availability.available_days == [1, 2, 3, 4, 5, 6]
        assert not availability.is_available(0)
        assert availability.weekly_schedule[6].time_slots[0].intensity_preference == (
            StudyIntensity.INTENSIVE
        )
        assert availability.scheduled_hours_per_week == 13
        assert availability.timezone == "Europe/Madrid"
        assert availability.locale == "es-ES"

    def test_preferred_cannot_exceed_max(self):
        with pytest.raises(ConfigurationError):
            UserAvailability(preferred_session_duration=150, max_session_duration=120)

    def test_weekday_keys_validated(self):
        with pytest.raises(ConfigurationError):
            UserAvailability(weekly_schedule={7: DaySchedule(available=True)})

    @pytest.mark.parametrize("start,end", [(20, 18), (-1, 3), (22, 25)])
    def test_invalid_time_slots(self, start, end):
        with pytest.raises(ConfigurationError):
            TimeSlot(start, end)

    def test_round_trip(self):
        availability = create_default_user_availability()

        assert UserAvailability.from_dict(availability.to_dict()) == availability

    def test_unknown_timezone_rejected(self):
        with pytest.raises(ConfigurationError):
            UserAvailability(timezone="Mars/Olympus_Mons")

    def test_local_weekday_uses_timezone(self):
        late_sunday_utc = datetime(2025, 1, 5, 23, 30, tzinfo=timezone.utc)

        assert UserAvailability(timezone="UTC").local_weekday(late_sunday_utc) == 0
        assert UserAvailability(timezone="Europe/Madrid").local_weekday(late_sunday_utc) == 1

    def test_platform_weekday_starts_on_sunday(self):
        assert platform_weekday(datetime(2025, 1, 5, tzinfo=timezone.utc)) == 0
        assert platform_weekday(datetime(2025, 1, 11, tzinfo=timezone.utc)) == 6


class TestStudyPlanConfig:
    def test_defaults(self):
        config = create_default_study_plan_config()

        assert config.target_proficiency_level == 0.8
        assert config.weekly_commitment_hours == 8
        assert config.plan_duration_weeks == 12
        assert config.weakness_focus_ratio == 0.4
        assert config.mock_exam_frequency_weeks == 2
        assert config.exam_prep_weeks_before == 4

    @pytest.mark.parametrize(
        "overrides",
        [
            {"weekly_commitment_hours": 0},
            {"weakness_focus_ratio": 1.2},
            {"weakness_focus_ratio": -0.1},
            {"target_proficiency_level": 1.5},
            {"plan_duration_weeks": 0},
            {"review_frequency_days": 0},
        ],
    )
    def test_invalid_values_raise(self, overrides):
        with pytest.raises(ConfigurationError):
            StudyPlanConfig(**overrides)

    def test_naive_exam_date_is_utc(self):
        config = StudyPlanConfig(target_exam_date=datetime(2025, 6, 1))

        assert config.target_exam_date.tzinfo == timezone.utc

    def test_from_dict(self):
        config = StudyPlanConfig.from_dict(
            {
                "target_exam_date": "2025-06-01T09:00:00Z",
                "study_intensity": "exam_prep",
                "weekly_commitment_hours": 10,
                "unknown_field": True,
            }
        )

        assert config.study_intensity == StudyIntensity.EXAM_PREP
        assert config.target_exam_date == datetime(2025, 6, 1, 9, tzinfo=timezone.utc)
        assert config.weekly_commitment_hours == 10


class TestProgressRecords:
    def test_progress_from_dict(self):
        progress = UserCourseProgress.from_dict(
            {
                "id": "p-1",
                "user_id": "u-1",
                "course_id": "c-1",
                "overall_progress": 0.6,
                "component_progress": {"reading": 0.5, "listening": 0.9},
                "weaknesses": [{"component": "reading", "score": 0.5}],
                "strengths": [{"component": "listening", "score": 0.9, "confidence": 0.8}],
                "last_activity": "2025-01-05T18:30:00+00:00",
            }
        )

        assert progress.components == [CourseComponent.READING, CourseComponent.LISTENING]
        assert progress.weak_components == {CourseComponent.READING}
        assert progress.strengths[0].confidence == 0.8
        assert progress.last_activity.tzinfo is not None

    def test_progress_out_of_range(self):
        with pytest.raises(InvalidRecordError):
            UserCourseProgress(id="p", user_id="u", course_id="c", overall_progress=1.2)

    def test_exam_session_reads_current_state(self):
        session = ExamSessionSummary.from_dict(
            {"id": "e-1", "component": "writing", "score": 0.7, "current_state": "abandoned"}
        )

        assert session.state == ExamSessionState.ABANDONED
        assert not session.is_completed


class TestStudySessionRecord:
    def test_score_range_enforced(self, make_session):
        with pytest.raises(InvalidRecordError):
            make_session(engagement_score=-0.1)

    def test_satisfaction_range_enforced(self, make_session):
        with pytest.raises(InvalidRecordError):
            make_session(user_satisfaction=6)

    def test_to_dict_is_json_safe(self, make_session):
        data = make_session(completion_score=0.8).to_dict()

        assert data["primary_component"] == "reading"
        assert data["scheduled_date"] == "2025-01-06T09:00:00+00:00"
        assert data["completion_score"] == 0.8
        assert isinstance(data["learning_objectives"], list)

    def test_plan_to_dict(self, make_plan, make_session):
        data = make_plan([make_session()]).to_dict()

        assert data["plan_status"] == "draft"
        assert data["user_availability"]["difficulty_preference"] == (
            DifficultyPreference.ADAPTIVE.value
        )
        assert data["user_availability"]["weekly_schedule"][1]["available"] is True
