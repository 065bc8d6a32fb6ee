from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ...common.datetime_utils import parse_timestamp
from ...core.enums import DailyStatusCode, EventType
from .base import DayContext, StatusDecision, StatusRule

logger = logging.getLogger(__name__)


class WorkedDayRule(StatusRule):
    """Terminal rule: decide from the day's punches against the policy thresholds.

    - earliest check-in and latest check-out win (duplicate punches are harmless)
    - a check-out without any check-in counts as no events
    - an open session is Incomplete on today, Absent on any earlier day
    """

    def decide(self, ctx: DayContext) -> Optional[StatusDecision]:
        first_in: Optional[datetime] = None
        last_out: Optional[datetime] = None

        for event in ctx.events:
            ts = parse_timestamp(event.timestamp)
            if ts is None:
                logger.warning(
                    "Ignoring attendance event %s of user %s: unparseable timestamp %r",
                    event.event_id, event.user_id, event.timestamp,
                )
                continue
            if event.user_id != ctx.user.user_id or ts.date() != ctx.work_date:
                continue
            try:
                event_type = EventType(event.event_type)
            except ValueError:
                logger.warning("Ignoring attendance event %s: unknown type %r", event.event_id, event.event_type)
                continue

            if event_type == EventType.CHECK_IN:
                if first_in is None or ts < first_in:
                    first_in = ts
            elif last_out is None or ts > last_out:
                last_out = ts

        if first_in is None:
            return StatusDecision(code=DailyStatusCode.ABSENT)

        if last_out is None:
            if ctx.work_date < ctx.today:
                return StatusDecision(code=DailyStatusCode.ABSENT, check_in=first_in)
            return StatusDecision(code=DailyStatusCode.INCOMPLETE, check_in=first_in)

        minutes = max(int((last_out - first_in).total_seconds() // 60), 0)
        if minutes >= ctx.policy.full_day_minutes:
            code = DailyStatusCode.PRESENT
        elif minutes >= ctx.policy.half_day_minutes:
            code = DailyStatusCode.HALF_DAY
        else:
            code = DailyStatusCode.SHORT_HOURS
        return StatusDecision(code=code, check_in=first_in, check_out=last_out, worked_minutes=minutes)
