"""
Progress service payload schemas.

Validate what the progress-tracking service sends back before it reaches the
planner, and shape the PATCH body we send. Conversion to the planner's own
records happens in to_record().
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from src.core.progress import (
    ExamSessionSummary,
    ProgressUpdate,
    SkillArea,
    UserCourseProgress,
)
from src.core.serialization import parse_datetime
from src.core.types import CourseComponent, ExamSessionState


# ========================================
# Response Models
# ========================================


class SkillAreaPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    component: CourseComponent
    score: float = Field(ge=0.0, le=1.0)
    confidence: float = Field(default=1.0, ge=0.0, le=1.0)
    last_assessed: Optional[datetime] = None

    def to_record(self) -> SkillArea:
        return SkillArea(
            component=self.component,
            score=self.score,
            confidence=self.confidence,
            last_assessed=parse_datetime(self.last_assessed),
        )


class UserProgressPayload(BaseModel):
    """Progress snapshot as returned by GET /api/v1/progress/{user}/{course}."""

    model_config = ConfigDict(extra="ignore")

    id: str
    user_id: str
    course_id: str
    overall_progress: float = Field(ge=0.0, le=1.0)
    component_progress: Dict[CourseComponent, float] = Field(default_factory=dict)
    strengths: List[SkillAreaPayload] = Field(default_factory=list)
    weaknesses: List[SkillAreaPayload] = Field(default_factory=list)
    readiness_score: float = Field(default=0.0, ge=0.0, le=1.0)
    last_activity: Optional[datetime] = None
    target_exam_date: Optional[datetime] = None

    def to_record(self) -> UserCourseProgress:
        return UserCourseProgress(
            id=self.id,
            user_id=self.user_id,
            course_id=self.course_id,
            overall_progress=self.overall_progress,
            component_progress=dict(self.component_progress),
            strengths=tuple(s.to_record() for s in self.strengths),
            weaknesses=tuple(w.to_record() for w in self.weaknesses),
            readiness_score=self.readiness_score,
            last_activity=parse_datetime(self.last_activity),
            target_exam_date=parse_datetime(self.target_exam_date),
        )


class ExamSessionPayload(BaseModel):
    """One entry of GET /api/v1/progress/{user}/{course}/exam-sessions."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str
    component: CourseComponent
    score: float = Field(ge=0.0, le=1.0)
    duration_seconds: int = Field(default=0, ge=0)
    state: ExamSessionState = Field(default=ExamSessionState.COMPLETED, alias="current_state")
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    def to_record(self) -> ExamSessionSummary:
        return ExamSessionSummary(
            id=self.id,
            component=self.component,
            score=self.score,
            duration_seconds=self.duration_seconds,
            state=self.state,
            started_at=parse_datetime(self.started_at),
            completed_at=parse_datetime(self.completed_at),
        )


class ExamSessionListPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    sessions: List[ExamSessionPayload] = Field(default_factory=list)


# ========================================
# Request Models
# ========================================


class ProgressUpdateRequest(BaseModel):
    """PATCH body for /api/v1/progress/{user}/{course}."""

    component_progress: Dict[CourseComponent, float]
    last_activity: datetime
    operator_user_id: str

    @classmethod
    def from_update(cls, update: ProgressUpdate, operator_user_id: str) -> ProgressUpdateRequest:
        return cls(
            component_progress=dict(update.component_progress),
            last_activity=update.last_activity,
            operator_user_id=operator_user_id,
        )
