from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import coerce_date, parse_timestamp
from ..core.enums import DayOption, Decision, LeaveStatus, LeaveType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, load_json_column
from .model import ApprovalRecord, LeaveFilter, LeaveRequest
from .repository import LeaveRepository

logger = logging.getLogger(__name__)

_COLUMNS = """
    request_id, user_id, user_name, leave_type, start_date, end_date, day_option,
    reason, status, created_at, current_approver_id, approval_history, attachment
"""


def _history_to_json(history: Sequence[ApprovalRecord]) -> str:
    return json.dumps(
        [
            {
                "approver_id": h.approver_id,
                "approver_name": h.approver_name,
                "status": h.decision.value,
                "timestamp": h.timestamp.isoformat(),
                "comments": h.comments,
            }
            for h in history
        ]
    )


def _history_from_json(value) -> tuple[ApprovalRecord, ...]:
    items = load_json_column(value, [])
    return tuple(
        ApprovalRecord(
            approver_id=int(h["approver_id"]),
            approver_name=h.get("approver_name") or "",
            decision=Decision(h["status"]),
            timestamp=parse_timestamp(h.get("timestamp")) or datetime.min,
            comments=h.get("comments"),
        )
        for h in items
    )


def _to_request(r: dict) -> Optional[LeaveRequest]:
    approver = r.get("current_approver_id")
    try:
        leave_type = LeaveType(r["leave_type"])
        status = LeaveStatus(r["status"])
        day_option = DayOption(r.get("day_option") or DayOption.FULL.value)
        start_date, end_date = coerce_date(r["start_date"]), coerce_date(r["end_date"])
        history = _history_from_json(r.get("approval_history"))
    except (ValueError, KeyError) as e:
        logger.warning("Skipping leave request %s: malformed row (%s)", r.get("request_id"), e)
        return None
    return LeaveRequest(
        request_id=int(r["request_id"]),
        user_id=int(r["user_id"]),
        user_name=r.get("user_name") or "",
        leave_type=leave_type,
        start_date=start_date,
        end_date=end_date,
        day_option=day_option,
        reason=r.get("reason") or "",
        status=status,
        created_at=r["created_at"],
        current_approver_id=int(approver) if approver is not None else None,
        approval_history=history,
        attachment=r.get("attachment"),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, request: LeaveRequest) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(
                    user_id, user_name, leave_type, start_date, end_date, day_option,
                    reason, status, created_at, current_approver_id, approval_history, attachment
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    request.user_id,
                    request.user_name,
                    request.leave_type.value,
                    request.start_date,
                    request.end_date,
                    request.day_option.value,
                    request.reason,
                    request.status.value,
                    request.created_at,
                    request.current_approver_id,
                    _history_to_json(request.approval_history),
                    request.attachment,
                ),
            )
            return int(cur.lastrowid)

    def get(self, request_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM leave_requests WHERE request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return _to_request(r) if r else None

    def list_requests(self, leave_filter: LeaveFilter, *, limit: Optional[int] = None) -> Sequence[LeaveRequest]:
        clauses = ["1=1"]
        params: list[object] = []

        if leave_filter.user_id is not None:
            clauses.append("user_id=%s")
            params.append(int(leave_filter.user_id))
        if leave_filter.user_ids is not None:
            if not leave_filter.user_ids:
                return []
            clauses.append("user_id IN (" + ",".join(["%s"] * len(leave_filter.user_ids)) + ")")
            params.extend(int(u) for u in leave_filter.user_ids)
        if leave_filter.status is not None:
            clauses.append("status=%s")
            params.append(leave_filter.status.value)
        if leave_filter.approver_id is not None:
            clauses.append("current_approver_id=%s")
            params.append(int(leave_filter.approver_id))
        if leave_filter.start_date is not None:
            clauses.append("end_date >= %s")
            params.append(leave_filter.start_date)
        if leave_filter.end_date is not None:
            clauses.append("start_date <= %s")
            params.append(leave_filter.end_date)

        sql = f"SELECT {_COLUMNS} FROM leave_requests WHERE {' AND '.join(clauses)} ORDER BY created_at DESC, request_id DESC"
        if limit is not None:
            sql += " LIMIT %s"
            params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            requests = [_to_request(r) for r in fetchall(cur)]
        return [req for req in requests if req is not None]

    def save_transition(
        self,
        *,
        request_id: int,
        expected_status: LeaveStatus,
        status: LeaveStatus,
        current_approver_id: Optional[int],
        approval_history: Sequence[ApprovalRecord],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, current_approver_id=%s, approval_history=%s
                WHERE request_id=%s AND status=%s
                """,
                (
                    status.value,
                    current_approver_id,
                    _history_to_json(approval_history),
                    int(request_id),
                    expected_status.value,
                ),
            )
            return cur.rowcount == 1
