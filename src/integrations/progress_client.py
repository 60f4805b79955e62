"""
Progress-tracking service client.

The planner reads learner progress and exam history from the platform's
progress service and pushes session outcomes back to it. ProgressTracker is
the interface the planner depends on; HttpProgressClient implements it over
the service's REST API.

Failures (transport, HTTP status, malformed payloads) surface as
CollaboratorUnavailable with the original error chained. No retries here:
callers decide.
"""

from __future__ import annotations

from typing import Any, Protocol

import httpx
from loguru import logger
from pydantic import ValidationError

from src.core.errors import CollaboratorUnavailable, InvalidRecordError
from src.core.progress import ExamSessionSummary, ProgressUpdate, UserCourseProgress
from src.integrations.schemas import (
    ExamSessionListPayload,
    ProgressUpdateRequest,
    UserProgressPayload,
)

API_PREFIX = "/api/v1/progress"
DEFAULT_EXAM_SESSION_LIMIT = 10


class ProgressTracker(Protocol):
    async def get_user_progress(self, user_id: str, course_id: str) -> UserCourseProgress: ...

    async def get_recent_exam_sessions(
        self, user_id: str, course_id: str, limit: int = DEFAULT_EXAM_SESSION_LIMIT
    ) -> list[ExamSessionSummary]: ...

    async def update_user_progress(
        self,
        user_id: str,
        course_id: str,
        update: ProgressUpdate,
        operator_user_id: str,
    ) -> UserCourseProgress: ...


class HttpProgressClient:
    """HTTP client for the progress-tracking service."""

    def __init__(
        self,
        api_url: str,
        api_key: str | None = None,
        timeout_seconds: float = 10.0,
    ):
        """
        Initialize progress client.

        Args:
            api_url: Base URL of the progress service
            api_key: Optional key sent as X-API-Key
            timeout_seconds: Request timeout
        """
        self.api_url = api_url.rstrip("/")
        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["X-API-Key"] = api_key
        self.client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout_seconds),
            headers=headers,
            follow_redirects=True,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()

    async def __aenter__(self) -> HttpProgressClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    def _progress_url(self, user_id: str, course_id: str) -> str:
        return f"{self.api_url}{API_PREFIX}/{user_id}/{course_id}"

    async def _send(self, operation: str, method: str, url: str, **kwargs: Any) -> Any:
        try:
            response = await self.client.request(method, url, **kwargs)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"Progress service returned {e.response.status_code} for {operation}")
            raise CollaboratorUnavailable(
                f"Progress service returned {e.response.status_code}", operation=operation
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Progress service unreachable during {operation}: {e}")
            raise CollaboratorUnavailable(
                f"Progress service unreachable: {e}", operation=operation
            ) from e
        except ValueError as e:
            logger.error(f"Progress service sent invalid JSON for {operation}")
            raise CollaboratorUnavailable(
                "Progress service sent invalid JSON", operation=operation
            ) from e

    def _progress_record(self, data: Any, operation: str) -> UserCourseProgress:
        try:
            return UserProgressPayload.model_validate(data).to_record()
        except (ValidationError, InvalidRecordError) as e:
            logger.error(f"Malformed progress payload from {operation}")
            raise CollaboratorUnavailable(
                "Malformed progress payload", operation=operation
            ) from e

    async def get_user_progress(self, user_id: str, course_id: str) -> UserCourseProgress:
        """
        Fetch the learner's current progress snapshot.

        Raises:
            CollaboratorUnavailable: On transport, status or payload errors
        """
        data = await self._send(
            "get_user_progress", "GET", self._progress_url(user_id, course_id)
        )
        return self._progress_record(data, "get_user_progress")

    async def get_recent_exam_sessions(
        self, user_id: str, course_id: str, limit: int = DEFAULT_EXAM_SESSION_LIMIT
    ) -> list[ExamSessionSummary]:
        """Recent exam sessions, oldest first."""
        data = await self._send(
            "get_recent_exam_sessions",
            "GET",
            f"{self._progress_url(user_id, course_id)}/exam-sessions",
            params={"limit": limit},
        )
        if isinstance(data, list):
            data = {"sessions": data}
        try:
            # Service order is chronological; velocity depends on it
            return [
                s.to_record() for s in ExamSessionListPayload.model_validate(data).sessions
            ]
        except (ValidationError, InvalidRecordError) as e:
            logger.error("Malformed exam session payload")
            raise CollaboratorUnavailable(
                "Malformed exam session payload", operation="get_recent_exam_sessions"
            ) from e

    async def update_user_progress(
        self,
        user_id: str,
        course_id: str,
        update: ProgressUpdate,
        operator_user_id: str,
    ) -> UserCourseProgress:
        """Apply a session's progress patch and return the updated snapshot."""
        body = ProgressUpdateRequest.from_update(update, operator_user_id)
        data = await self._send(
            "update_user_progress",
            "PATCH",
            self._progress_url(user_id, course_id),
            json=body.model_dump(mode="json"),
        )
        return self._progress_record(data, "update_user_progress")
