"""Fixed per-component catalog of objectives, success criteria and activities."""

from __future__ import annotations

from src.core.records import RecommendedActivity, SuccessCriterion
from src.core.types import ActivityType, CourseComponent, StudyDifficulty

DEFAULT_CRITERION_TARGET = 0.75

LEARNING_OBJECTIVES: dict[CourseComponent, tuple[str, ...]] = {
    CourseComponent.READING: ("Improve reading comprehension", "Increase vocabulary"),
    CourseComponent.WRITING: ("Enhance written expression", "Improve grammar accuracy"),
    CourseComponent.LISTENING: ("Better audio comprehension", "Recognize speech patterns"),
    CourseComponent.SPEAKING: ("Improve fluency", "Enhance pronunciation"),
    CourseComponent.GRAMMAR: ("Master grammar rules", "Apply structures correctly"),
    CourseComponent.VOCABULARY: ("Expand vocabulary range", "Improve word usage"),
    CourseComponent.PRONUNCIATION: ("Correct sound production", "Improve intonation"),
    CourseComponent.COMPREHENSION: ("Better overall understanding", "Integrate skills"),
}

# (activity type, description, minutes)
_ACTIVITIES: dict[CourseComponent, tuple[ActivityType, str, int]] = {
    CourseComponent.READING: (ActivityType.READING, "Reading comprehension practice", 30),
    CourseComponent.WRITING: (ActivityType.WRITING, "Writing exercise", 45),
    CourseComponent.LISTENING: (ActivityType.LISTENING, "Audio comprehension", 25),
    CourseComponent.SPEAKING: (ActivityType.SPEAKING, "Speaking practice", 20),
    CourseComponent.GRAMMAR: (ActivityType.QUIZ, "Grammar exercises", 30),
    CourseComponent.VOCABULARY: (ActivityType.QUIZ, "Vocabulary building", 20),
    CourseComponent.PRONUNCIATION: (ActivityType.SPEAKING, "Pronunciation drills", 15),
    CourseComponent.COMPREHENSION: (ActivityType.EXERCISE, "Mixed skills practice", 40),
}


def learning_objectives(component: CourseComponent) -> tuple[str, ...]:
    return LEARNING_OBJECTIVES.get(component, ("General skill improvement",))


def success_criteria(component: CourseComponent) -> tuple[SuccessCriterion, ...]:
    return (
        SuccessCriterion(
            metric=f"{component.value}_accuracy",
            target_value=DEFAULT_CRITERION_TARGET,
            weight=1.0,
        ),
    )


def recommended_activities(component: CourseComponent) -> tuple[RecommendedActivity, ...]:
    activity_type, description, minutes = _ACTIVITIES.get(
        component, (ActivityType.EXERCISE, "General practice", 30)
    )
    return (
        RecommendedActivity(
            activity_type=activity_type,
            description=description,
            duration_minutes=minutes,
            difficulty=StudyDifficulty.MEDIUM,
        ),
    )
