"""
External integrations for the study planner.

Modules:
- progress_client: ProgressTracker interface and its HTTP client
- schemas: pydantic payloads for the progress service
- progress_sync: plan building and outcome pushing against the tracker
- plan_cache: TTL cache of plans per (user, course)
"""
from src.integrations.plan_cache import PlanCache
from src.integrations.progress_client import HttpProgressClient, ProgressTracker
from src.integrations.progress_sync import ProgressSync

__all__ = ["HttpProgressClient", "PlanCache", "ProgressSync", "ProgressTracker"]
