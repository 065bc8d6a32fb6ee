from __future__ import annotations

from typing import Optional

from ...core.constants import WEEKEND_DAYS
from ...core.enums import DailyStatusCode
from .base import DayContext, StatusDecision, StatusRule


class WeekOffRule(StatusRule):
    def decide(self, ctx: DayContext) -> Optional[StatusDecision]:
        if ctx.work_date.weekday() in WEEKEND_DAYS:
            return StatusDecision(code=DailyStatusCode.WEEK_OFF)
        return None
