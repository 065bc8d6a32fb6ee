from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Mapping, Optional

from ..core.availability import FeatureAvailability
from ..core.constants import HALF_DAY_LEAVE_AMOUNT
from ..core.enums import Decision, DayOption, LeaveStatus, LeaveType


@dataclass(frozen=True)
class ApprovalRecord:
    approver_id: int
    approver_name: str
    decision: Decision
    timestamp: datetime
    comments: Optional[str] = None


@dataclass(frozen=True)
class LeaveSpan:
    """Inclusive date range of an approved leave, as consumed by the status engine."""

    user_id: int
    start_date: date
    end_date: date
    day_option: DayOption = DayOption.FULL

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


@dataclass(frozen=True)
class LeaveRequest:
    request_id: int
    user_id: int
    user_name: str
    leave_type: LeaveType
    start_date: date
    end_date: date
    day_option: DayOption
    reason: str
    status: LeaveStatus
    created_at: datetime
    current_approver_id: Optional[int] = None
    approval_history: tuple[ApprovalRecord, ...] = ()
    attachment: Optional[str] = None

    @property
    def day_count(self) -> int:
        return (self.end_date - self.start_date).days + 1

    @property
    def leave_amount(self) -> float:
        """Days charged against the balance once approved."""
        if self.day_option == DayOption.HALF:
            return HALF_DAY_LEAVE_AMOUNT
        return float(self.day_count)

    def to_span(self) -> LeaveSpan:
        return LeaveSpan(
            user_id=self.user_id,
            start_date=self.start_date,
            end_date=self.end_date,
            day_option=self.day_option,
        )


@dataclass(frozen=True)
class LeaveFilter:
    """Query filter; start_date/end_date select requests overlapping that window."""

    user_id: Optional[int] = None
    user_ids: Optional[tuple[int, ...]] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: Optional[LeaveStatus] = None
    approver_id: Optional[int] = None


@dataclass(frozen=True)
class LeaveBalanceEntry:
    total: float
    used: float

    @property
    def remaining(self) -> float:
        return self.total - self.used


@dataclass(frozen=True)
class LeaveBalance:
    user_id: int
    entries: Mapping[LeaveType, LeaveBalanceEntry] = field(default_factory=dict)
    comp_off: FeatureAvailability = field(default_factory=FeatureAvailability.enabled)

    def entry(self, leave_type: LeaveType) -> Optional[LeaveBalanceEntry]:
        return self.entries.get(leave_type)
