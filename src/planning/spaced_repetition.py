"""
Spaced repetition scheduling for successfully completed sessions.

Each qualifying session expands into review sessions at fixed offsets
(1, 3, 7, 14 and 30 days from now), shorter and easier than the original.
Deterministic: no random draws.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import timedelta

from src.core.providers import Clock, IdGenerator, SystemClock, UuidGenerator
from src.core.progress import UserCourseProgress
from src.core.records import RecommendedActivity, StudySession, SuccessCriterion
from src.core.types import (
    ActivityType,
    CompletionStatus,
    CourseComponent,
    StudyDifficulty,
    StudyIntensity,
    StudyPriority,
    StudySessionType,
)

REVIEW_INTERVALS_DAYS = (1, 3, 7, 14, 30)
REVIEW_SCORE_THRESHOLD = 0.7
MAX_REVIEW_SOURCES = 10

REVIEW_DURATION_RATIO = 0.3
MIN_REVIEW_MINUTES = 15
QUIZ_DURATION_RATIO = 0.2
MIN_QUIZ_MINUTES = 10
RETENTION_TARGET = 0.85


@dataclass(frozen=True)
class ReviewContent:
    """What a successful session left behind that is worth reviewing."""

    user_id: str
    course_id: str
    progress_id: str
    component: CourseComponent
    topic: str
    original_duration: float


class SpacedRepetitionScheduler:
    def __init__(self, clock: Clock | None = None, id_generator: IdGenerator | None = None):
        self.clock = clock or SystemClock()
        self.id_generator = id_generator or UuidGenerator()

    def schedule(
        self,
        completed_sessions: Sequence[StudySession],
        progress: UserCourseProgress | None = None,
    ) -> list[StudySession]:
        """
        Build review sessions for the given completion history.

        Args:
            completed_sessions: Executed sessions, oldest first
            progress: Current progress snapshot (carried for callers; reviews
                depend only on session outcomes)

        Returns:
            Review sessions sorted by scheduled date
        """
        now = self.clock.now()
        reviews: list[StudySession] = []

        for content in self.identify_content_for_review(completed_sessions):
            review_minutes = max(MIN_REVIEW_MINUTES, content.original_duration * REVIEW_DURATION_RATIO)
            quiz_minutes = max(MIN_QUIZ_MINUTES, content.original_duration * QUIZ_DURATION_RATIO)

            for index, days in enumerate(REVIEW_INTERVALS_DAYS):
                reviews.append(
                    StudySession(
                        id=self.id_generator.new_id(),
                        user_id=content.user_id,
                        course_id=content.course_id,
                        progress_id=content.progress_id,
                        scheduled_date=now + timedelta(days=days),
                        scheduled_duration_minutes=review_minutes,
                        estimated_duration_minutes=review_minutes,
                        session_type=StudySessionType.REVIEW,
                        primary_component=content.component,
                        priority=self.review_priority(index),
                        difficulty=StudyDifficulty.EASY,
                        intensity=StudyIntensity.LIGHT,
                        learning_objectives=(f"Review {content.topic}", "Reinforce understanding"),
                        success_criteria=(
                            SuccessCriterion(
                                metric="retention_accuracy",
                                target_value=RETENTION_TARGET,
                                weight=1.0,
                            ),
                        ),
                        recommended_activities=(
                            RecommendedActivity(
                                activity_type=ActivityType.QUIZ,
                                description=f"Quick review quiz: {content.topic}",
                                duration_minutes=quiz_minutes,
                                difficulty=StudyDifficulty.EASY,
                            ),
                        ),
                        completion_status=CompletionStatus.SCHEDULED,
                        created_at=now,
                        updated_at=now,
                    )
                )

        # sorted() is stable: same-day reviews keep source order
        return sorted(reviews, key=lambda s: s.scheduled_date)

    @staticmethod
    def identify_content_for_review(sessions: Sequence[StudySession]) -> list[ReviewContent]:
        qualifying = [
            s
            for s in sessions
            if s.completion_score is not None and s.completion_score > REVIEW_SCORE_THRESHOLD
        ]
        return [
            ReviewContent(
                user_id=s.user_id,
                course_id=s.course_id,
                progress_id=s.progress_id,
                component=s.primary_component,
                topic=s.learning_objectives[0] if s.learning_objectives else "General review",
                original_duration=s.effective_duration_minutes,
            )
            for s in qualifying[-MAX_REVIEW_SOURCES:]
        ]

    @staticmethod
    def review_priority(interval_index: int) -> StudyPriority:
        if interval_index == 0:
            return StudyPriority.HIGH
        if interval_index == 1:
            return StudyPriority.MEDIUM
        return StudyPriority.LOW
