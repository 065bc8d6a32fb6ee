from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import DailyStatusCode
from ..leaves.model import LeaveSpan
from ..policy.model import HolidayCalendar, PolicySet
from ..users.model import User
from .factory import StatusRuleFactory
from .model import AttendanceEvent, DailyStatus
from .rules.base import DayContext, StatusRule


class StatusDerivationEngine:
    """Pure mapping (user, day, events, leave spans, holidays, policy, today) -> DailyStatus.

    No I/O and no shared mutable state: safe to call in parallel over disjoint pairs.
    """

    def __init__(self, rules: Optional[Sequence[StatusRule]] = None):
        self._rules = tuple(rules) if rules is not None else StatusRuleFactory().default_chain()

    def derive(
        self,
        user: User,
        work_date: date,
        events: Sequence[AttendanceEvent],
        leave_spans: Sequence[LeaveSpan],
        holidays: HolidayCalendar,
        policies: PolicySet,
        today: date,
    ) -> DailyStatus:
        ctx = DayContext(
            user=user,
            work_date=work_date,
            events=events,
            leave_spans=leave_spans,
            holidays=holidays,
            policy=policies.for_staff_type(user.staff_type),
            today=today,
        )
        for rule in self._rules:
            decision = rule.decide(ctx)
            if decision is not None:
                return DailyStatus(
                    user_id=user.user_id,
                    work_date=work_date,
                    code=decision.code,
                    check_in=decision.check_in,
                    check_out=decision.check_out,
                    worked_minutes=decision.worked_minutes,
                )
        return DailyStatus(user_id=user.user_id, work_date=work_date, code=DailyStatusCode.ABSENT)


_default_engine = StatusDerivationEngine()


def derive_daily_status(
    user: User,
    work_date: date,
    events: Sequence[AttendanceEvent],
    leave_spans: Sequence[LeaveSpan],
    holidays: HolidayCalendar,
    policies: PolicySet,
    today: date,
) -> DailyStatus:
    return _default_engine.derive(user, work_date, events, leave_spans, holidays, policies, today)
