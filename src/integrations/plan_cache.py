"""
In-memory plan cache keyed by (user_id, course_id).

Owned by the caller (a web handler, the CLI, a sync job), never global.
Entries expire after a fixed TTL measured on the injected clock.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from loguru import logger

from src.core.providers import Clock, SystemClock
from src.core.records import StudyPlan

DEFAULT_TTL_SECONDS = 900


@dataclass(frozen=True)
class _Entry:
    plan: StudyPlan
    expires_at: datetime


class PlanCache:
    def __init__(self, ttl_seconds: float = DEFAULT_TTL_SECONDS, clock: Clock | None = None):
        self.ttl = timedelta(seconds=ttl_seconds)
        self.clock = clock or SystemClock()
        self._entries: dict[tuple[str, str], _Entry] = {}

    def get(self, user_id: str, course_id: str) -> StudyPlan | None:
        key = (user_id, course_id)
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self.clock.now() >= entry.expires_at:
            logger.debug(f"Plan cache entry expired for {key}")
            del self._entries[key]
            return None
        return entry.plan

    def put(self, plan: StudyPlan) -> None:
        self._entries[(plan.user_id, plan.course_id)] = _Entry(
            plan=plan, expires_at=self.clock.now() + self.ttl
        )

    def invalidate(self, user_id: str, course_id: str) -> None:
        self._entries.pop((user_id, course_id), None)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
