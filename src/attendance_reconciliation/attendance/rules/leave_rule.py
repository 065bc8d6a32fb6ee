from __future__ import annotations

from typing import Optional

from ...core.enums import DailyStatusCode, DayOption
from .base import DayContext, StatusDecision, StatusRule


class LeaveRule(StatusRule):
    """Approved leave wins over holidays and weekends."""

    def decide(self, ctx: DayContext) -> Optional[StatusDecision]:
        for span in ctx.leave_spans:
            if span.user_id == ctx.user.user_id and span.covers(ctx.work_date):
                if span.day_option == DayOption.HALF:
                    return StatusDecision(code=DailyStatusCode.ON_LEAVE_HALF)
                return StatusDecision(code=DailyStatusCode.ON_LEAVE_FULL)
        return None
