"""Report shapes computed from one shared evaluation pass.

Every public function here is pure given its inputs: the four shapes differ only in
how they fold the same DailyStatus stream, never in how a status is decided.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date
from typing import Optional

from ..attendance.engine import StatusDerivationEngine
from ..attendance.model import AttendanceEvent, DailyStatus
from ..common.datetime_utils import iter_days, parse_timestamp
from ..core.constants import UNKNOWN_USER_NAME
from ..core.enums import CompOffStatus, DailyStatusCode
from ..leaves.model import LeaveSpan
from .inputs import ReconciliationInputs
from .labels import ATTENDED_CODES, MUSTER_CODES, ON_LEAVE_CODES, STATUS_LABELS, format_duration
from .model import (
    BasicReportRow,
    CompOffPanel,
    DashboardSummary,
    EventLogRow,
    MusterGrid,
    MusterRow,
    ProductivityPoint,
    TrendPoint,
)

logger = logging.getLogger(__name__)

_default_engine = StatusDerivationEngine()


def _group_events(events) -> dict[tuple[int, date], list[AttendanceEvent]]:
    grouped: dict[tuple[int, date], list[AttendanceEvent]] = defaultdict(list)
    for e in events:
        ts = parse_timestamp(e.timestamp)
        if ts is None:
            logger.warning("Ignoring attendance event %s of user %s: unparseable timestamp %r", e.event_id, e.user_id, e.timestamp)
            continue
        grouped[(e.user_id, ts.date())].append(e)
    return grouped


def evaluate(
    inputs: ReconciliationInputs,
    start: date,
    end: date,
    today: date,
    *,
    engine: Optional[StatusDerivationEngine] = None,
) -> list[DailyStatus]:
    """One DailyStatus per (user, day), users in input order, days ascending."""

    engine = engine or _default_engine
    events = _group_events(inputs.events)
    spans: dict[int, list[LeaveSpan]] = defaultdict(list)
    for span in inputs.leave_spans:
        spans[span.user_id].append(span)

    out: list[DailyStatus] = []
    for user in inputs.users:
        user_spans = spans.get(user.user_id, [])
        for day in iter_days(start, end):
            out.append(
                engine.derive(
                    user,
                    day,
                    events.get((user.user_id, day), []),
                    user_spans,
                    inputs.holidays,
                    inputs.policies,
                    today,
                )
            )
    return out


def _comp_off_panel(inputs: ReconciliationInputs) -> CompOffPanel:
    if not inputs.comp_off.available or inputs.comp_off_logs is None:
        return CompOffPanel(availability=inputs.comp_off)
    logs = inputs.comp_off_logs
    return CompOffPanel(
        availability=inputs.comp_off,
        earned=sum(1 for log in logs if log.status == CompOffStatus.EARNED),
        used=sum(1 for log in logs if log.status == CompOffStatus.USED),
    )


def compute_dashboard(
    inputs: ReconciliationInputs,
    start: date,
    end: date,
    today: date,
    *,
    engine: Optional[StatusDerivationEngine] = None,
) -> DashboardSummary:
    by_day: dict[date, list[DailyStatus]] = defaultdict(list)
    for s in evaluate(inputs, start, end, today, engine=engine):
        by_day[s.work_date].append(s)

    trend: list[TrendPoint] = []
    productivity: list[ProductivityPoint] = []
    for day in iter_days(start, end):
        statuses = by_day.get(day, [])
        trend.append(
            TrendPoint(
                day=day,
                present=sum(1 for s in statuses if s.code in ATTENDED_CODES),
                absent=sum(1 for s in statuses if s.code == DailyStatusCode.ABSENT),
            )
        )
        worked = [s.worked_minutes for s in statuses if s.has_duration]
        average = round(sum(worked) / len(worked), 2) if worked else 0.0
        productivity.append(ProductivityPoint(day=day, average_minutes=average))

    snapshot = by_day.get(end, [])
    return DashboardSummary(
        total_employees=len(inputs.users),
        present_on_end_date=sum(1 for s in snapshot if s.code in ATTENDED_CODES),
        absent_on_end_date=sum(1 for s in snapshot if s.code == DailyStatusCode.ABSENT),
        on_leave_on_end_date=sum(1 for s in snapshot if s.code in ON_LEAVE_CODES),
        trend=tuple(trend),
        productivity_trend=tuple(productivity),
        comp_off=_comp_off_panel(inputs),
    )


def compute_basic_report(
    inputs: ReconciliationInputs,
    start: date,
    end: date,
    today: date,
    *,
    engine: Optional[StatusDerivationEngine] = None,
) -> list[BasicReportRow]:
    names = {u.user_id: u.name for u in inputs.users}
    rows: list[BasicReportRow] = []
    for s in evaluate(inputs, start, end, today, engine=engine):
        rows.append(
            BasicReportRow(
                work_date=s.work_date,
                user_id=s.user_id,
                user_name=names[s.user_id],
                status=STATUS_LABELS[s.code],
                code=s.code,
                check_in=s.check_in.strftime("%H:%M") if s.check_in else None,
                check_out=s.check_out.strftime("%H:%M") if s.check_out else None,
                duration=format_duration(s.worked_minutes) if s.has_duration else None,
                worked_minutes=s.worked_minutes,
            )
        )
    return rows


def compute_muster(
    inputs: ReconciliationInputs,
    start: date,
    end: date,
    today: date,
    *,
    engine: Optional[StatusDerivationEngine] = None,
) -> MusterGrid:
    days = tuple(iter_days(start, end))
    codes_by_user: dict[int, list[str]] = defaultdict(list)
    for s in evaluate(inputs, start, end, today, engine=engine):
        codes_by_user[s.user_id].append(MUSTER_CODES[s.code])

    rows: list[MusterRow] = []
    for user in inputs.users:
        codes = tuple(codes_by_user.get(user.user_id, []))
        totals = {short: codes.count(short) for short in MUSTER_CODES.values()}
        rows.append(MusterRow(user_id=user.user_id, user_name=user.name, codes=codes, totals=totals))
    return MusterGrid(days=days, rows=tuple(rows))


def collect_event_log(inputs: ReconciliationInputs, start: date, end: date) -> list[EventLogRow]:
    """Raw punches joined with names; an audit trail, no status derivation."""

    names = {u.user_id: u.name for u in inputs.users}
    rows: list[EventLogRow] = []
    for e in inputs.events:
        ts = parse_timestamp(e.timestamp)
        if ts is None:
            logger.warning("Event %s left out of the log: unparseable timestamp %r", e.event_id, e.timestamp)
            continue
        if not (start <= ts.date() <= end):
            continue
        rows.append(
            EventLogRow(
                event_id=e.event_id,
                user_id=e.user_id,
                user_name=names.get(e.user_id, UNKNOWN_USER_NAME),
                timestamp=ts,
                event_type=e.event_type,
                latitude=e.latitude,
                longitude=e.longitude,
            )
        )
    rows.sort(key=lambda r: (r.timestamp, r.event_id))
    return rows
