from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Sequence

from ...core.enums import DailyStatusCode
from ...leaves.model import LeaveSpan
from ...policy.model import AttendancePolicy, HolidayCalendar
from ...users.model import User
from ..model import AttendanceEvent


@dataclass(frozen=True)
class DayContext:
    """Everything needed to decide one (user, day) pair."""

    user: User
    work_date: date
    events: Sequence[AttendanceEvent]
    leave_spans: Sequence[LeaveSpan]
    holidays: HolidayCalendar
    policy: AttendancePolicy
    today: date


@dataclass(frozen=True)
class StatusDecision:
    code: DailyStatusCode
    check_in: Optional[datetime] = None
    check_out: Optional[datetime] = None
    worked_minutes: Optional[int] = None


class StatusRule(ABC):
    """Strategy Pattern: one step of the precedence chain.

    ``decide`` returns None when the rule does not apply so the next rule runs.
    """

    @abstractmethod
    def decide(self, ctx: DayContext) -> Optional[StatusDecision]:
        raise NotImplementedError
