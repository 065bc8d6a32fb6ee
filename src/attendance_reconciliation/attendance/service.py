from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..common.datetime_utils import day_bounds, now_local
from ..core.enums import EventType
from ..core.exceptions import NotFoundError, ValidationError
from ..users.repository import UserRepository
from .repository import AttendanceEventRepository


class AttendanceService:
    """Records punches. Events are appended, never edited."""

    def __init__(self, events: AttendanceEventRepository, users: UserRepository):
        self._events = events
        self._users = users

    def _session_open(self, user_id: int, now: datetime) -> bool:
        start, end = day_bounds(now.date(), now.date())
        todays = [
            e for e in self._events.list_events(start=start, end=end, user_ids=[user_id])
            if e.timestamp <= now
        ]
        if not todays:
            return False
        latest = max(todays, key=lambda e: (e.timestamp, e.event_id))
        return latest.event_type == EventType.CHECK_IN

    def check_in(
        self,
        user_id: int,
        *,
        now: Optional[datetime] = None,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
    ) -> int:
        now = now or now_local()
        if not self._users.get_by_id(user_id):
            raise NotFoundError("Employee does not exist")
        if self._session_open(user_id, now):
            raise ValidationError("You are already checked in")

        return self._events.append(
            user_id=user_id,
            timestamp=now,
            event_type=EventType.CHECK_IN,
            latitude=latitude,
            longitude=longitude,
        )

    def check_out(
        self,
        user_id: int,
        *,
        now: Optional[datetime] = None,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
    ) -> int:
        now = now or now_local()
        if not self._users.get_by_id(user_id):
            raise NotFoundError("Employee does not exist")
        if not self._session_open(user_id, now):
            raise ValidationError("You have not checked in today")

        return self._events.append(
            user_id=user_id,
            timestamp=now,
            event_type=EventType.CHECK_OUT,
            latitude=latitude,
            longitude=longitude,
        )
