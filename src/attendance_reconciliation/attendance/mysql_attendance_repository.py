from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import parse_timestamp
from ..core.enums import EventType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import AttendanceEvent
from .repository import AttendanceEventRepository

logger = logging.getLogger(__name__)


def _to_event(r: dict) -> Optional[AttendanceEvent]:
    timestamp = parse_timestamp(r.get("event_time"))
    if timestamp is None:
        logger.warning("Skipping attendance event %s: bad timestamp %r", r.get("event_id"), r.get("event_time"))
        return None
    try:
        event_type = EventType(r["event_type"])
    except ValueError:
        logger.warning("Skipping attendance event %s: bad type %r", r.get("event_id"), r.get("event_type"))
        return None
    lat = r.get("latitude")
    lng = r.get("longitude")
    return AttendanceEvent(
        event_id=int(r["event_id"]),
        user_id=int(r["user_id"]),
        timestamp=timestamp,
        event_type=event_type,
        latitude=float(lat) if lat is not None else None,
        longitude=float(lng) if lng is not None else None,
    )


class MySQLAttendanceRepository(AttendanceEventRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_events(
        self,
        *,
        start: datetime,
        end: datetime,
        user_ids: Optional[Sequence[int]] = None,
    ) -> Sequence[AttendanceEvent]:
        clauses = ["event_time BETWEEN %s AND %s"]
        params: list[object] = [start, end]
        if user_ids is not None:
            if not user_ids:
                return []
            clauses.append("user_id IN (" + ",".join(["%s"] * len(user_ids)) + ")")
            params.extend(int(u) for u in user_ids)

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT event_id, user_id, event_time, event_type, latitude, longitude
                FROM attendance_events
                WHERE {where}
                ORDER BY event_time, event_id
                """,
                tuple(params),
            )
            rows = fetchall(cur)

        events = [_to_event(r) for r in rows]
        return [e for e in events if e is not None]

    def append(
        self,
        *,
        user_id: int,
        timestamp: datetime,
        event_type: EventType,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_events(user_id, event_time, event_type, latitude, longitude)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(user_id), timestamp, event_type.value, latitude, longitude),
            )
            return int(cur.lastrowid)
