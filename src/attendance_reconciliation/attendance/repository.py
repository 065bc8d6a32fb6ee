from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import EventType
from .model import AttendanceEvent


class AttendanceEventRepository(Protocol):
    def list_events(
        self,
        *,
        start: datetime,
        end: datetime,
        user_ids: Optional[Sequence[int]] = None,
    ) -> Sequence[AttendanceEvent]:
        """All punches with start <= timestamp <= end, one batched query."""

        raise NotImplementedError

    def append(
        self,
        *,
        user_id: int,
        timestamp: datetime,
        event_type: EventType,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
    ) -> int:
        raise NotImplementedError
