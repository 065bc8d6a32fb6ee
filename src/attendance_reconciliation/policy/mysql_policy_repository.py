from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.datetime_utils import coerce_date
from ..core.enums import StaffType
from ..core.exceptions import NotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, load_json_column
from .model import AttendancePolicy, Holiday, PolicySet
from .repository import PolicyRepository

logger = logging.getLogger(__name__)


def policy_from_settings(staff_type: StaffType, raw: dict) -> AttendancePolicy:
    """Build a policy from the ``attendance_settings`` JSON (camelCase keys)."""

    return AttendancePolicy(
        staff_type=staff_type,
        minimum_hours_full_day=float(raw.get("minimumHoursFullDay", 0)),
        minimum_hours_half_day=float(raw.get("minimumHoursHalfDay", 0)),
        sick_leave_certificate_threshold_days=int(raw.get("sickLeaveCertificateThreshold", 0)),
        annual_earned_leaves=float(raw.get("annualEarnedLeaves", 0) or 0),
        annual_sick_leaves=float(raw.get("annualSickLeaves", 0) or 0),
        monthly_floating_leaves=float(raw.get("monthlyFloatingLeaves", 0) or 0),
    )


def _to_holiday(r: dict) -> Optional[Holiday]:
    try:
        return Holiday(
            date=coerce_date(r["holiday_date"]),
            staff_type=StaffType(r["staff_type"]),
            name=r.get("name"),
        )
    except ValueError:
        logger.warning(
            "Skipping holiday %r: bad date or staff type %r", r.get("holiday_date"), r.get("staff_type")
        )
        return None


class MySQLPolicyRepository(PolicyRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_attendance_policy(self) -> PolicySet:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT attendance_settings FROM settings WHERE id='singleton'")
            r = fetchone(cur)
        settings = load_json_column(r.get("attendance_settings") if r else None, {})
        if not settings.get("office") or not settings.get("field"):
            raise NotFoundError("Attendance settings are not configured")
        return PolicySet(
            office=policy_from_settings(StaffType.OFFICE, settings["office"]),
            field=policy_from_settings(StaffType.FIELD, settings["field"]),
        )

    def get_holidays(self) -> Sequence[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT holiday_date, staff_type, name FROM holidays ORDER BY holiday_date")
            rows = fetchall(cur)
        holidays = [_to_holiday(r) for r in rows]
        return [h for h in holidays if h is not None]
