from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol


class Clock(Protocol):
    """Source of wall-clock instants for history entries."""

    def now(self) -> datetime: ...


class SystemClock:
    def now(self) -> datetime:
        return datetime.now(tz=UTC)


@dataclass
class FixedClock:
    """Deterministic clock for tests; advances by `step` on every read."""

    current: datetime = field(default_factory=lambda: datetime(2025, 1, 1, tzinfo=UTC))
    step: timedelta = timedelta(0)

    def now(self) -> datetime:
        value = self.current
        self.current = self.current + self.step
        return value
