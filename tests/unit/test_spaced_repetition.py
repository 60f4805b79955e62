"""
Unit tests for spaced repetition review scheduling.
"""

from datetime import timedelta

from src.core.types import (
    ActivityType,
    CompletionStatus,
    CourseComponent,
    StudyDifficulty,
    StudyIntensity,
    StudyPriority,
    StudySessionType,
)
from src.planning.spaced_repetition import SpacedRepetitionScheduler


def completed(make_session, score, **overrides):
    return make_session(
        completion_status=CompletionStatus.COMPLETED,
        completion_score=score,
        actual_duration_minutes=60,
        **overrides,
    )


class TestSpacedRepetitionScheduler:
    def test_one_qualifying_session_yields_five_reviews(self, clock, id_generator, make_session):
        scheduler = SpacedRepetitionScheduler(clock, id_generator)

        reviews = scheduler.schedule([completed(make_session, 0.8)])

        now = clock.now()
        assert len(reviews) == 5
        assert [r.scheduled_date for r in reviews] == [
            now + timedelta(days=d) for d in (1, 3, 7, 14, 30)
        ]
        assert all(r.estimated_duration_minutes == 18 for r in reviews)

    def test_review_shape(self, clock, id_generator, make_session):
        scheduler = SpacedRepetitionScheduler(clock, id_generator)

        first = scheduler.schedule([completed(make_session, 0.8)])[0]

        assert first.session_type == StudySessionType.REVIEW
        assert first.difficulty == StudyDifficulty.EASY
        assert first.intensity == StudyIntensity.LIGHT
        assert first.primary_component == CourseComponent.READING
        assert first.learning_objectives == (
            "Review Improve reading comprehension",
            "Reinforce understanding",
        )
        assert first.success_criteria[0].metric == "retention_accuracy"
        assert first.success_criteria[0].target_value == 0.85
        activity = first.recommended_activities[0]
        assert activity.activity_type == ActivityType.QUIZ
        assert activity.duration_minutes == 12

    def test_priorities_decay_with_interval(self, clock, id_generator, make_session):
        scheduler = SpacedRepetitionScheduler(clock, id_generator)

        reviews = scheduler.schedule([completed(make_session, 0.9)])

        assert [r.priority for r in reviews] == [
            StudyPriority.HIGH,
            StudyPriority.MEDIUM,
            StudyPriority.LOW,
            StudyPriority.LOW,
            StudyPriority.LOW,
        ]

    def test_short_sessions_get_minimum_durations(self, clock, id_generator, make_session):
        scheduler = SpacedRepetitionScheduler(clock, id_generator)
        short = make_session(completion_score=0.9, actual_duration_minutes=20)

        review = scheduler.schedule([short])[0]

        assert review.estimated_duration_minutes == 15
        assert review.recommended_activities[0].duration_minutes == 10

    def test_low_scores_do_not_qualify(self, clock, id_generator, make_session):
        scheduler = SpacedRepetitionScheduler(clock, id_generator)
        sessions = [completed(make_session, 0.7), make_session()]

        assert scheduler.schedule(sessions) == []

    def test_only_ten_most_recent_sources(self, clock, id_generator, make_session):
        scheduler = SpacedRepetitionScheduler(clock, id_generator)
        sessions = [completed(make_session, 0.9) for _ in range(12)]

        reviews = scheduler.schedule(sessions)

        assert len(reviews) == 50

    def test_sorted_by_date_with_stable_ties(self, clock, id_generator, make_session):
        scheduler = SpacedRepetitionScheduler(clock, id_generator)
        reading = completed(make_session, 0.9)
        writing = completed(make_session, 0.9, primary_component=CourseComponent.WRITING)

        reviews = scheduler.schedule([reading, writing])

        dates = [r.scheduled_date for r in reviews]
        assert dates == sorted(dates)
        assert [r.primary_component for r in reviews[:2]] == [
            CourseComponent.READING,
            CourseComponent.WRITING,
        ]

    def test_topic_falls_back_to_general_review(self, clock, id_generator, make_session):
        scheduler = SpacedRepetitionScheduler(clock, id_generator)
        session = completed(make_session, 0.9, learning_objectives=())

        review = scheduler.schedule([session])[0]

        assert review.learning_objectives[0] == "Review General review"
