"""
Records exchanged with the progress-tracking collaborator.

Inbound: UserCourseProgress snapshots and ExamSessionSummary history.
Outbound: ProgressUpdate patches built from executed study sessions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from src.core.errors import InvalidRecordError
from src.core.serialization import parse_datetime, to_jsonable
from src.core.types import CourseComponent, ExamSessionState


def check_unit_interval(name: str, value: float | None) -> None:
    """Raise InvalidRecordError unless value is None or within [0, 1]."""
    if value is not None and not 0.0 <= value <= 1.0:
        raise InvalidRecordError(f"{name} must be within [0, 1], got {value}")


@dataclass(frozen=True)
class SkillArea:
    """A component flagged as a strength or weakness."""

    component: CourseComponent
    score: float
    confidence: float = 1.0
    last_assessed: datetime | None = None

    def __post_init__(self):
        check_unit_interval("score", self.score)
        check_unit_interval("confidence", self.confidence)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SkillArea:
        return cls(
            component=CourseComponent(data["component"]),
            score=float(data.get("score", 0.0)),
            confidence=float(data.get("confidence", 1.0)),
            last_assessed=parse_datetime(data.get("last_assessed")),
        )


@dataclass(frozen=True)
class UserCourseProgress:
    """Snapshot of a learner's progress through one course."""

    id: str
    user_id: str
    course_id: str
    overall_progress: float
    component_progress: dict[CourseComponent, float] = field(default_factory=dict)
    strengths: tuple[SkillArea, ...] = ()
    weaknesses: tuple[SkillArea, ...] = ()
    readiness_score: float = 0.0
    last_activity: datetime | None = None
    target_exam_date: datetime | None = None

    def __post_init__(self):
        check_unit_interval("overall_progress", self.overall_progress)
        check_unit_interval("readiness_score", self.readiness_score)
        for component, value in self.component_progress.items():
            check_unit_interval(f"component_progress[{component.value}]", value)

    @property
    def components(self) -> list[CourseComponent]:
        """Tracked components, in snapshot order."""
        return list(self.component_progress)

    @property
    def weak_components(self) -> set[CourseComponent]:
        return {w.component for w in self.weaknesses}

    @property
    def strong_components(self) -> set[CourseComponent]:
        return {s.component for s in self.strengths}

    def to_dict(self) -> dict[str, Any]:
        return to_jsonable(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UserCourseProgress:
        return cls(
            id=str(data.get("id", "")),
            user_id=str(data.get("user_id", "")),
            course_id=str(data.get("course_id", "")),
            overall_progress=float(data.get("overall_progress", 0.0)),
            component_progress={
                CourseComponent(k): float(v)
                for k, v in data.get("component_progress", {}).items()
            },
            strengths=tuple(SkillArea.from_dict(s) for s in data.get("strengths", [])),
            weaknesses=tuple(SkillArea.from_dict(w) for w in data.get("weaknesses", [])),
            readiness_score=float(data.get("readiness_score", 0.0)),
            last_activity=parse_datetime(data.get("last_activity")),
            target_exam_date=parse_datetime(data.get("target_exam_date")),
        )


@dataclass(frozen=True)
class ExamSessionSummary:
    """Summary of a historical exam/practice session."""

    id: str
    component: CourseComponent
    score: float
    duration_seconds: int
    state: ExamSessionState = ExamSessionState.COMPLETED
    started_at: datetime | None = None
    completed_at: datetime | None = None

    def __post_init__(self):
        check_unit_interval("score", self.score)
        if self.duration_seconds < 0:
            raise InvalidRecordError(
                f"duration_seconds cannot be negative, got {self.duration_seconds}"
            )

    @property
    def is_completed(self) -> bool:
        return self.state == ExamSessionState.COMPLETED

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ExamSessionSummary:
        return cls(
            id=str(data.get("id", "")),
            component=CourseComponent(data["component"]),
            score=float(data.get("score", 0.0)),
            duration_seconds=int(data.get("duration_seconds", 0)),
            state=ExamSessionState(data.get("current_state", data.get("state", "completed"))),
            started_at=parse_datetime(data.get("started_at")),
            completed_at=parse_datetime(data.get("completed_at")),
        )


@dataclass(frozen=True)
class ProgressUpdate:
    """Patch for the progress collaborator built from one study session."""

    component_progress: dict[CourseComponent, float]
    last_activity: datetime

    def to_dict(self) -> dict[str, Any]:
        return to_jsonable(self)
