"""
Learner availability model.

Weekly time budget and session-length preferences. Weekdays follow the
platform convention: 0 = Sunday ... 6 = Saturday, evaluated in the
learner's own timezone.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from src.core.errors import ConfigurationError
from src.core.serialization import to_jsonable
from src.core.types import (
    DifficultyPreference,
    FeedbackFrequency,
    LearningStyle,
    StudyIntensity,
)

WEEKDAYS = range(7)


def platform_weekday(moment: datetime) -> int:
    """Weekday of a datetime with Sunday as 0 (datetime.weekday() has Monday as 0)."""
    return (moment.weekday() + 1) % 7


@dataclass(frozen=True)
class TimeSlot:
    """A recurring study window on one weekday."""

    start_hour: int  # 0-23
    end_hour: int  # 1-24
    intensity_preference: StudyIntensity = StudyIntensity.MODERATE

    def __post_init__(self):
        if not 0 <= self.start_hour <= 23:
            raise ConfigurationError(f"start_hour must be within 0-23, got {self.start_hour}")
        if not 1 <= self.end_hour <= 24:
            raise ConfigurationError(f"end_hour must be within 1-24, got {self.end_hour}")
        if self.start_hour >= self.end_hour:
            raise ConfigurationError(
                f"Time slot must end after it starts ({self.start_hour}-{self.end_hour})"
            )

    @property
    def hours(self) -> int:
        return self.end_hour - self.start_hour

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TimeSlot:
        return cls(
            start_hour=int(data["start_hour"]),
            end_hour=int(data["end_hour"]),
            intensity_preference=StudyIntensity(
                data.get("intensity_preference", StudyIntensity.MODERATE.value)
            ),
        )


@dataclass(frozen=True)
class DaySchedule:
    available: bool = False
    time_slots: tuple[TimeSlot, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DaySchedule:
        return cls(
            available=bool(data.get("available", False)),
            time_slots=tuple(TimeSlot.from_dict(s) for s in data.get("time_slots", [])),
        )


@dataclass(frozen=True)
class UserAvailability:
    """Weekly schedule plus session preferences of a learner."""

    weekly_schedule: dict[int, DaySchedule] = field(default_factory=dict)
    target_hours_per_week: float = 8.0

    # Session preferences (minutes)
    preferred_session_duration: int = 60
    max_session_duration: int = 120
    min_break_duration: int = 15

    learning_style: LearningStyle = LearningStyle.MIXED
    difficulty_preference: DifficultyPreference = DifficultyPreference.ADAPTIVE
    feedback_frequency: FeedbackFrequency = FeedbackFrequency.IMMEDIATE

    timezone: str = "UTC"
    locale: str = "en-US"

    def __post_init__(self):
        for day in self.weekly_schedule:
            if day not in WEEKDAYS:
                raise ConfigurationError(f"Weekday keys must be within 0-6, got {day}")
        if self.target_hours_per_week <= 0:
            raise ConfigurationError(
                f"target_hours_per_week must be positive, got {self.target_hours_per_week}"
            )
        if self.preferred_session_duration <= 0 or self.max_session_duration <= 0:
            raise ConfigurationError("Session durations must be positive")
        if self.preferred_session_duration > self.max_session_duration:
            raise ConfigurationError(
                f"preferred_session_duration ({self.preferred_session_duration}) "
                f"exceeds max_session_duration ({self.max_session_duration})"
            )
        if self.min_break_duration < 0:
            raise ConfigurationError("min_break_duration cannot be negative")
        try:
            ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ConfigurationError(f"Unknown timezone {self.timezone!r}") from e

    def is_available(self, weekday: int) -> bool:
        day = self.weekly_schedule.get(weekday)
        return bool(day and day.available)

    @property
    def zone(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    def local_weekday(self, moment: datetime) -> int:
        """Platform weekday of an instant on the learner's local calendar."""
        return platform_weekday(moment.astimezone(self.zone))

    @property
    def available_days(self) -> list[int]:
        return [d for d in WEEKDAYS if self.is_available(d)]

    @property
    def scheduled_hours_per_week(self) -> int:
        """Hours covered by the time slots of available days."""
        return sum(
            slot.hours
            for day, schedule in self.weekly_schedule.items()
            if schedule.available
            for slot in schedule.time_slots
        )

    def to_dict(self) -> dict[str, Any]:
        return to_jsonable(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UserAvailability:
        schedule = {
            int(day): DaySchedule.from_dict(value)
            for day, value in data.get("weekly_schedule", {}).items()
        }
        defaults = cls.__dataclass_fields__
        return cls(
            weekly_schedule=schedule,
            target_hours_per_week=float(
                data.get("target_hours_per_week", defaults["target_hours_per_week"].default)
            ),
            preferred_session_duration=int(
                data.get(
                    "preferred_session_duration",
                    defaults["preferred_session_duration"].default,
                )
            ),
            max_session_duration=int(
                data.get("max_session_duration", defaults["max_session_duration"].default)
            ),
            min_break_duration=int(
                data.get("min_break_duration", defaults["min_break_duration"].default)
            ),
            learning_style=LearningStyle(data.get("learning_style", LearningStyle.MIXED.value)),
            difficulty_preference=DifficultyPreference(
                data.get("difficulty_preference", DifficultyPreference.ADAPTIVE.value)
            ),
            feedback_frequency=FeedbackFrequency(
                data.get("feedback_frequency", FeedbackFrequency.IMMEDIATE.value)
            ),
            timezone=data.get("timezone", "UTC"),
            locale=data.get("locale", "en-US"),
        )


def create_default_user_availability(
    timezone: str = "Europe/Madrid", locale: str = "es-ES"
) -> UserAvailability:
    """Weekday evenings plus a Saturday morning block, Sunday off."""
    evening = DaySchedule(
        available=True,
        time_slots=(TimeSlot(18, 20, StudyIntensity.MODERATE),),
    )
    return UserAvailability(
        weekly_schedule={
            0: DaySchedule(available=False),  # Sunday
            1: evening,
            2: evening,
            3: evening,
            4: evening,
            5: evening,
            6: DaySchedule(
                available=True,
                time_slots=(TimeSlot(9, 12, StudyIntensity.INTENSIVE),),
            ),
        },
        target_hours_per_week=8,
        preferred_session_duration=60,
        max_session_duration=120,
        min_break_duration=15,
        learning_style=LearningStyle.MIXED,
        difficulty_preference=DifficultyPreference.ADAPTIVE,
        feedback_frequency=FeedbackFrequency.IMMEDIATE,
        timezone=timezone,
        locale=locale,
    )
