from __future__ import annotations

from dataclasses import dataclass

from .rules.base import StatusRule
from .rules.holiday_rule import HolidayRule
from .rules.leave_rule import LeaveRule
from .rules.week_off_rule import WeekOffRule
from .rules.worked_day_rule import WorkedDayRule


@dataclass
class StatusRuleFactory:
    """Factory Pattern: assemble the precedence chain.

    The order is the business rule: leave, then holiday, then week off, then worked day.
    """

    def default_chain(self) -> tuple[StatusRule, ...]:
        return (LeaveRule(), HolidayRule(), WeekOffRule(), WorkedDayRule())
