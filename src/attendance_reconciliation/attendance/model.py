from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import DailyStatusCode, EventType


@dataclass(frozen=True)
class AttendanceEvent:
    """Domain entity: one clock-in or clock-out punch.

    Append-only: events are never updated, corrections arrive as new events.
    ``timestamp`` is a naive datetime in the organizational timezone when it comes
    from the database; raw feeds may carry anything, the engine copes with that.
    """

    event_id: int
    user_id: int
    timestamp: datetime
    event_type: EventType
    latitude: Optional[float] = None
    longitude: Optional[float] = None


@dataclass(frozen=True)
class DailyStatus:
    """Read-model: derived status of one user on one day (computed on read, never stored)."""

    user_id: int
    work_date: date
    code: DailyStatusCode
    check_in: Optional[datetime] = None
    check_out: Optional[datetime] = None
    worked_minutes: Optional[int] = None

    @property
    def has_duration(self) -> bool:
        return self.worked_minutes is not None
