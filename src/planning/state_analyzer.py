"""
Learner state analysis.

Summarizes a progress snapshot and recent exam history into the signals the
scheduler needs: weak/strong components, learning velocity, engagement
pattern and difficulty tolerance. Pure: same inputs, same StateAnalysis.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from src.core.progress import ExamSessionSummary, SkillArea, UserCourseProgress
from src.core.types import CourseComponent, EngagementPattern, StudyDifficulty

VELOCITY_WINDOW = 5
BASELINE_VELOCITY = 0.5
MIN_VELOCITY = 0.1
MAX_VELOCITY = 1.0

HIGH_ENGAGEMENT_SECONDS = 3600
MEDIUM_ENGAGEMENT_SECONDS = 1800


@dataclass(frozen=True)
class StateAnalysis:
    """Current-state summary consumed by the timeline and session generator."""

    overall_proficiency: float
    component_strengths: tuple[SkillArea, ...] = ()
    component_weaknesses: tuple[SkillArea, ...] = ()
    learning_velocity: float = BASELINE_VELOCITY
    engagement_pattern: EngagementPattern = EngagementPattern.MEDIUM
    difficulty_tolerance: StudyDifficulty = StudyDifficulty.MEDIUM
    weak_components: frozenset[CourseComponent] = field(default_factory=frozenset)
    strong_components: frozenset[CourseComponent] = field(default_factory=frozenset)

    @property
    def weakness_count(self) -> int:
        return len(self.component_weaknesses)

    def is_weak(self, component: CourseComponent) -> bool:
        return component in self.weak_components

    def is_strong(self, component: CourseComponent) -> bool:
        return component in self.strong_components


class StateAnalyzer:
    """Builds a StateAnalysis from progress + exam history (chronological order)."""

    def analyze(
        self,
        progress: UserCourseProgress,
        recent_sessions: Sequence[ExamSessionSummary] = (),
    ) -> StateAnalysis:
        return StateAnalysis(
            overall_proficiency=progress.overall_progress,
            component_strengths=tuple(progress.strengths),
            component_weaknesses=tuple(progress.weaknesses),
            learning_velocity=self.calculate_learning_velocity(recent_sessions),
            engagement_pattern=self.analyze_engagement_pattern(recent_sessions),
            difficulty_tolerance=self.assess_difficulty_tolerance(recent_sessions),
            weak_components=frozenset(progress.weak_components),
            strong_components=frozenset(progress.strong_components),
        )

    @staticmethod
    def calculate_learning_velocity(sessions: Sequence[ExamSessionSummary]) -> float:
        """
        Average score change across the last five sessions, around 0.5.

        Returns the 0.5 baseline when fewer than two sessions exist.
        """
        if len(sessions) < 2:
            return BASELINE_VELOCITY

        scores = [s.score for s in sessions[-VELOCITY_WINDOW:]]
        delta_sum = sum(curr - prev for prev, curr in zip(scores, scores[1:]))
        velocity = BASELINE_VELOCITY + delta_sum / (len(scores) - 1)
        return max(MIN_VELOCITY, min(MAX_VELOCITY, velocity))

    @staticmethod
    def analyze_engagement_pattern(sessions: Sequence[ExamSessionSummary]) -> EngagementPattern:
        if not sessions:
            return EngagementPattern.MEDIUM

        avg_duration = sum(s.duration_seconds for s in sessions) / len(sessions)
        avg_score = sum(s.score for s in sessions) / len(sessions)

        if avg_duration > HIGH_ENGAGEMENT_SECONDS and avg_score > 0.7:
            return EngagementPattern.HIGH
        if avg_duration > MEDIUM_ENGAGEMENT_SECONDS and avg_score > 0.5:
            return EngagementPattern.MEDIUM
        return EngagementPattern.LOW

    @staticmethod
    def assess_difficulty_tolerance(sessions: Sequence[ExamSessionSummary]) -> StudyDifficulty:
        if not sessions:
            return StudyDifficulty.MEDIUM

        avg_score = sum(s.score for s in sessions) / len(sessions)
        completion_rate = sum(1 for s in sessions if s.is_completed) / len(sessions)

        if avg_score > 0.8 and completion_rate > 0.9:
            return StudyDifficulty.HARD
        if avg_score > 0.6 and completion_rate > 0.8:
            return StudyDifficulty.MEDIUM
        return StudyDifficulty.EASY
