"""
Injected capabilities: time, identity and randomness.

The planning core never calls datetime.now(), uuid4() or the module-level
random functions directly. Production code gets the system implementations;
tests pass FixedClock / SequentialIdGenerator / a seeded random.Random so
generated plans are reproducible.
"""

from __future__ import annotations

import random
from datetime import datetime, timezone
from typing import Protocol
from uuid import UUID, uuid4


class Clock(Protocol):
    def now(self) -> datetime: ...


class IdGenerator(Protocol):
    def new_id(self) -> str: ...


class SystemClock:
    """Wall clock in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """Clock frozen at a given instant (can be moved explicitly)."""

    def __init__(self, instant: datetime):
        self._instant = ensure_utc(instant)

    def now(self) -> datetime:
        return self._instant

    def set(self, instant: datetime) -> None:
        self._instant = ensure_utc(instant)


class UuidGenerator:
    """Random UUID4 identifiers."""

    def new_id(self) -> str:
        return str(uuid4())


class SequentialIdGenerator:
    """
    Deterministic UUID-shaped identifiers: 00000000-...-000000000001, ...

    Used in tests so plan and session identity is predictable.
    """

    def __init__(self, start: int = 1):
        self._next = start

    def new_id(self) -> str:
        value = UUID(int=self._next)
        self._next += 1
        return str(value)


def seeded_random(seed: int | None = None) -> random.Random:
    """Create an isolated random source (seeded when a seed is given)."""
    return random.Random(seed)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so aware/naive values never get compared."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
