"""
Planner error taxonomy.

Everything raised on purpose by the planning core derives from PlannerError,
so callers at the web/API layer can catch one type.
"""

from __future__ import annotations


class PlannerError(Exception):
    """Base class for study planner errors."""


class ConfigurationError(PlannerError):
    """Invalid plan configuration or availability (never silently clamped)."""


class CollaboratorUnavailable(PlannerError):
    """The progress-tracking collaborator could not serve the request."""

    def __init__(self, message: str, *, operation: str | None = None):
        super().__init__(message)
        self.operation = operation


class InvalidRecordError(PlannerError, ValueError):
    """A record violates a range invariant (scores in [0, 1], satisfaction in [1, 5])."""


class InvalidTransitionError(PlannerError):
    """A plan or session lifecycle transition is not allowed from the current state."""
