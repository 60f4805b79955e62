"""
Weekly time share per skill component.

Shares start equal, are boosted for weak components and damped for mastered
ones. They are intentionally NOT renormalized: the total may land above or
below 1.0, and the session generator turns each share into minutes as-is.
"""

from __future__ import annotations

from src.core.plan_config import StudyPlanConfig
from src.core.progress import UserCourseProgress
from src.core.types import CourseComponent
from src.planning.state_analyzer import StateAnalysis

MASTERED_THRESHOLD = 0.8
MASTERED_DAMPING = 0.7


class SessionDistributor:
    def distribute(
        self,
        progress: UserCourseProgress,
        config: StudyPlanConfig,
        analysis: StateAnalysis,
    ) -> dict[CourseComponent, float]:
        components = progress.components
        if not components:
            return {}

        base_share = 1.0 / len(components)
        distribution: dict[CourseComponent, float] = {}

        for component in components:
            share = base_share
            if analysis.is_weak(component):
                share *= 1 + config.weakness_focus_ratio
            if progress.component_progress.get(component, 0.0) > MASTERED_THRESHOLD:
                share *= MASTERED_DAMPING
            distribution[component] = share

        return distribution
