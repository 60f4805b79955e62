"""
Core Module - Shared records, vocabulary and injected capabilities.

Components:
- types: str-valued enums (components, session types, statuses, ...)
- availability: UserAvailability and the weekday convention (0 = Sunday)
- plan_config: StudyPlanConfig
- progress: inbound progress / exam session records, outbound ProgressUpdate
- records: StudySession, StudyPlan, StudyPlanAnalytics
- providers: Clock, IdGenerator and random source injection
- errors: PlannerError hierarchy

Design Principle:
Planning and analytics modules (src/planning/, src/analytics/) import their
records from src/core/ rather than defining their own.
"""

from src.core.availability import (
    DaySchedule,
    TimeSlot,
    UserAvailability,
    create_default_user_availability,
)
from src.core.errors import (
    CollaboratorUnavailable,
    ConfigurationError,
    InvalidRecordError,
    InvalidTransitionError,
    PlannerError,
)
from src.core.plan_config import StudyPlanConfig, create_default_study_plan_config
from src.core.progress import (
    ExamSessionSummary,
    ProgressUpdate,
    SkillArea,
    UserCourseProgress,
)
from src.core.providers import (
    FixedClock,
    SequentialIdGenerator,
    SystemClock,
    UuidGenerator,
)
from src.core.records import (
    Milestone,
    StudyPlan,
    StudyPlanAnalytics,
    StudySession,
)

__all__ = [
    # Availability & config
    "DaySchedule",
    "TimeSlot",
    "UserAvailability",
    "create_default_user_availability",
    "StudyPlanConfig",
    "create_default_study_plan_config",
    # Progress
    "ExamSessionSummary",
    "ProgressUpdate",
    "SkillArea",
    "UserCourseProgress",
    # Records
    "Milestone",
    "StudyPlan",
    "StudyPlanAnalytics",
    "StudySession",
    # Providers
    "FixedClock",
    "SequentialIdGenerator",
    "SystemClock",
    "UuidGenerator",
    # Errors
    "CollaboratorUnavailable",
    "ConfigurationError",
    "InvalidRecordError",
    "InvalidTransitionError",
    "PlannerError",
]
