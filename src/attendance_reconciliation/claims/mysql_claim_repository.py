from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import coerce_date
from ..core.enums import ClaimStatus, ClaimType, WorkType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import ExtraWorkClaim
from .repository import ExtraWorkClaimRepository

logger = logging.getLogger(__name__)

_COLUMNS = """
    claim_id, user_id, user_name, work_date, work_type, claim_type, hours_worked, reason,
    status, created_at, approver_id, approver_name, decided_at, rejection_reason
"""


def _to_claim(r: dict) -> Optional[ExtraWorkClaim]:
    try:
        work_date = coerce_date(r["work_date"])
        work_type = WorkType(r["work_type"])
        claim_type = ClaimType(r["claim_type"])
        status = ClaimStatus(r["status"])
    except ValueError as e:
        logger.warning("Skipping extra-work claim %s: malformed row (%s)", r.get("claim_id"), e)
        return None
    hours = r.get("hours_worked")
    approver = r.get("approver_id")
    return ExtraWorkClaim(
        claim_id=int(r["claim_id"]),
        user_id=int(r["user_id"]),
        user_name=r.get("user_name") or "",
        work_date=work_date,
        work_type=work_type,
        claim_type=claim_type,
        reason=r.get("reason") or "",
        status=status,
        created_at=r["created_at"],
        hours_worked=float(hours) if hours is not None else None,
        approver_id=int(approver) if approver is not None else None,
        approver_name=r.get("approver_name"),
        decided_at=r.get("decided_at"),
        rejection_reason=r.get("rejection_reason"),
    )


class MySQLExtraWorkClaimRepository(ExtraWorkClaimRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, claim: ExtraWorkClaim) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO extra_work_logs(
                    user_id, user_name, work_date, work_type, claim_type, hours_worked, reason, status, created_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    claim.user_id,
                    claim.user_name,
                    claim.work_date,
                    claim.work_type.value,
                    claim.claim_type.value,
                    claim.hours_worked,
                    claim.reason,
                    claim.status.value,
                    claim.created_at,
                ),
            )
            return int(cur.lastrowid)

    def get(self, claim_id: int) -> Optional[ExtraWorkClaim]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM extra_work_logs WHERE claim_id=%s", (int(claim_id),))
            r = fetchone(cur)
            return _to_claim(r) if r else None

    def list_claims(
        self,
        *,
        user_id: Optional[int] = None,
        status: Optional[ClaimStatus] = None,
        limit: Optional[int] = None,
    ) -> Sequence[ExtraWorkClaim]:
        clauses = ["1=1"]
        params: list[object] = []
        if user_id is not None:
            clauses.append("user_id=%s")
            params.append(int(user_id))
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)

        sql = f"SELECT {_COLUMNS} FROM extra_work_logs WHERE {' AND '.join(clauses)} ORDER BY work_date DESC, claim_id DESC"
        if limit is not None:
            sql += " LIMIT %s"
            params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            claims = [_to_claim(r) for r in fetchall(cur)]
        return [c for c in claims if c is not None]

    def save_decision(
        self,
        *,
        claim_id: int,
        status: ClaimStatus,
        approver_id: int,
        approver_name: str,
        decided_at: datetime,
        rejection_reason: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE extra_work_logs
                SET status=%s, approver_id=%s, approver_name=%s, decided_at=%s, rejection_reason=%s
                WHERE claim_id=%s AND status=%s
                """,
                (
                    status.value,
                    int(approver_id),
                    approver_name,
                    decided_at,
                    rejection_reason,
                    int(claim_id),
                    ClaimStatus.PENDING.value,
                ),
            )
            return cur.rowcount == 1
