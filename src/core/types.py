"""
Categorical vocabulary shared by every planner module.

All enums are str-valued so records serialize to plain JSON strings.
"""

from __future__ import annotations

from enum import Enum


class CourseComponent(str, Enum):
    """Skill component tracked by the progress service."""

    READING = "reading"
    WRITING = "writing"
    LISTENING = "listening"
    SPEAKING = "speaking"
    GRAMMAR = "grammar"
    VOCABULARY = "vocabulary"
    PRONUNCIATION = "pronunciation"
    COMPREHENSION = "comprehension"


class StudySessionType(str, Enum):
    CONCEPT_LEARNING = "concept_learning"  # New concept introduction
    SKILL_PRACTICE = "skill_practice"  # Targeted skill improvement
    REVIEW = "review"  # Revision of learned material
    MOCK_EXAM = "mock_exam"  # Full exam simulation
    WEAKNESS_FOCUS = "weakness_focus"  # Targeted weakness improvement
    MAINTENANCE = "maintenance"  # Retention practice


class StudyPriority(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class StudyDifficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    ADAPTIVE = "adaptive"


class StudyIntensity(str, Enum):
    LIGHT = "light"
    MODERATE = "moderate"
    INTENSIVE = "intensive"
    EXAM_PREP = "exam_prep"

    @property
    def display_name(self) -> str:
        """Human-readable name."""
        return self.value.replace("_", " ").title()


class CompletionStatus(str, Enum):
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    SKIPPED = "skipped"
    RESCHEDULED = "rescheduled"


class PlanStatus(str, Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (PlanStatus.COMPLETED, PlanStatus.CANCELLED)


class LearningStyle(str, Enum):
    VISUAL = "visual"
    AUDITORY = "auditory"
    KINESTHETIC = "kinesthetic"
    MIXED = "mixed"


class DifficultyPreference(str, Enum):
    CHALLENGING = "challenging"
    GRADUAL = "gradual"
    ADAPTIVE = "adaptive"


class FeedbackFrequency(str, Enum):
    IMMEDIATE = "immediate"
    END_OF_SESSION = "end_of_session"
    DAILY = "daily"


class SkillsBalanceStrategy(str, Enum):
    BALANCED = "balanced"
    WEAKNESS_FOCUSED = "weakness_focused"
    STRENGTH_BASED = "strength_based"


class ActivityType(str, Enum):
    READING = "reading"
    LISTENING = "listening"
    WRITING = "writing"
    SPEAKING = "speaking"
    QUIZ = "quiz"
    EXERCISE = "exercise"


class EngagementPattern(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ExamSessionState(str, Enum):
    STARTED = "started"
    IN_PROGRESS = "in_progress"
    PAUSED = "paused"  # Can resume within 24h
    COMPLETED = "completed"
    ABANDONED = "abandoned"


class RiskSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
