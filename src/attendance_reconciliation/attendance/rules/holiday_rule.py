from __future__ import annotations

from typing import Optional

from ...core.enums import DailyStatusCode
from .base import DayContext, StatusDecision, StatusRule


class HolidayRule(StatusRule):
    """Holiday from the calendar matching the user's staff type, punches notwithstanding."""

    def decide(self, ctx: DayContext) -> Optional[StatusDecision]:
        if ctx.holidays.is_holiday(ctx.work_date, ctx.user.staff_type):
            return StatusDecision(code=DailyStatusCode.HOLIDAY)
        return None
