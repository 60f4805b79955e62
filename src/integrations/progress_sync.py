"""
Progress service synchronization.

Pulls progress and exam history from the progress tracker to build plans,
and pushes executed session outcomes back as progress updates.
"""

from __future__ import annotations

from loguru import logger

from src.core.availability import UserAvailability
from src.core.plan_config import StudyPlanConfig
from src.core.progress import UserCourseProgress
from src.core.records import StudyPlan, StudySession
from src.integrations.plan_cache import PlanCache
from src.integrations.progress_client import DEFAULT_EXAM_SESSION_LIMIT, ProgressTracker
from src.planning.planner import StudyPlanner


class ProgressSync:
    """Glue between a ProgressTracker and the StudyPlanner."""

    def __init__(
        self,
        tracker: ProgressTracker,
        planner: StudyPlanner,
        cache: PlanCache | None = None,
        exam_session_limit: int = DEFAULT_EXAM_SESSION_LIMIT,
    ):
        self.tracker = tracker
        self.planner = planner
        self.cache = cache
        self.exam_session_limit = exam_session_limit

    async def fetch_progress(self, user_id: str, course_id: str) -> UserCourseProgress:
        return await self.tracker.get_user_progress(user_id, course_id)

    async def build_plan(
        self,
        user_id: str,
        course_id: str,
        config: StudyPlanConfig,
        availability: UserAvailability,
        *,
        refresh: bool = False,
    ) -> StudyPlan:
        """
        Create a plan from the learner's live progress.

        A cached plan for (user, course) is returned unless refresh is set.

        Raises:
            CollaboratorUnavailable: If the progress service cannot be reached
        """
        if self.cache is not None and not refresh:
            cached = self.cache.get(user_id, course_id)
            if cached is not None:
                logger.debug(f"Using cached plan {cached.id} for {user_id}/{course_id}")
                return cached

        progress = await self.fetch_progress(user_id, course_id)
        exam_sessions = await self.tracker.get_recent_exam_sessions(
            user_id, course_id, self.exam_session_limit
        )

        plan = self.planner.create_plan(
            user_id,
            course_id,
            progress.id,
            config,
            availability,
            progress,
            exam_sessions,
        )
        if self.cache is not None:
            self.cache.put(plan)
        return plan

    async def push_session_outcome(
        self, session: StudySession, operator_user_id: str
    ) -> UserCourseProgress:
        """Send a finished session's scores to the progress service."""
        update = self.planner.convert_session_to_progress_update(session)
        if not update.component_progress:
            logger.warning(f"Session {session.id} has no completion score; sending activity only")

        progress = await self.tracker.update_user_progress(
            session.user_id, session.course_id, update, operator_user_id
        )
        if self.cache is not None:
            self.cache.invalidate(session.user_id, session.course_id)
        logger.info(f"Pushed outcome of session {session.id} for user {session.user_id}")
        return progress
