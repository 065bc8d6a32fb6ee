from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import coerce_date
from ..core.enums import CompOffStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, optional_relation
from .model import CompOffLog
from .repository import CompOffRepository

logger = logging.getLogger(__name__)

RELATION = "comp_off_logs"


def _to_log(r: dict) -> Optional[CompOffLog]:
    try:
        date_earned = coerce_date(r["date_earned"])
        status = CompOffStatus(r["status"])
    except ValueError:
        logger.warning("Skipping comp-off log %s: bad date or status %r", r.get("log_id"), r.get("status"))
        return None
    return CompOffLog(
        log_id=int(r["log_id"]),
        user_id=int(r["user_id"]),
        user_name=r.get("user_name"),
        date_earned=date_earned,
        reason=r.get("reason") or "",
        status=status,
        leave_request_id=r.get("leave_request_id"),
        granted_by_id=r.get("granted_by_id"),
        granted_by_name=r.get("granted_by_name"),
    )


class MySQLCompOffRepository(CompOffRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_logs(self, *, user_ids: Optional[Sequence[int]] = None) -> Sequence[CompOffLog]:
        where = "1=1"
        params: list[object] = []
        if user_ids is not None:
            if not user_ids:
                return []
            where = "user_id IN (" + ",".join(["%s"] * len(user_ids)) + ")"
            params.extend(int(u) for u in user_ids)

        with optional_relation(RELATION), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT log_id, user_id, user_name, date_earned, reason, status,
                       leave_request_id, granted_by_id, granted_by_name
                FROM comp_off_logs
                WHERE {where}
                ORDER BY date_earned DESC, log_id DESC
                """,
                tuple(params),
            )
            rows = fetchall(cur)

        logs = [_to_log(r) for r in rows]
        return [log for log in logs if log is not None]

    def add_log(
        self,
        *,
        user_id: int,
        user_name: Optional[str],
        date_earned: date,
        reason: str,
        granted_by_id: Optional[int],
        granted_by_name: Optional[str],
    ) -> int:
        with optional_relation(RELATION), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO comp_off_logs(user_id, user_name, date_earned, reason, status, granted_by_id, granted_by_name)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(user_id),
                    user_name,
                    date_earned,
                    reason,
                    CompOffStatus.EARNED.value,
                    granted_by_id,
                    granted_by_name,
                ),
            )
            return int(cur.lastrowid)

    def consume_earned(self, *, user_id: int, leave_request_id: int) -> Optional[int]:
        with optional_relation(RELATION), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT log_id FROM comp_off_logs
                WHERE user_id=%s AND status=%s
                ORDER BY date_earned, log_id
                LIMIT 1
                FOR UPDATE
                """,
                (int(user_id), CompOffStatus.EARNED.value),
            )
            r = fetchone(cur)
            if not r:
                return None
            cur.execute(
                "UPDATE comp_off_logs SET status=%s, leave_request_id=%s WHERE log_id=%s",
                (CompOffStatus.USED.value, int(leave_request_id), int(r["log_id"])),
            )
            return int(r["log_id"])
