from __future__ import annotations

from enum import Enum


class StaffType(str, Enum):
    """Selects the holiday calendar and hour thresholds that apply to a user."""

    OFFICE = "office"
    FIELD = "field"


class EventType(str, Enum):
    CHECK_IN = "check-in"
    CHECK_OUT = "check-out"


class DailyStatusCode(str, Enum):
    """Derived status of one user on one calendar day (never stored)."""

    PRESENT = "Present"
    HALF_DAY = "HalfDay"
    SHORT_HOURS = "ShortHours"
    ABSENT = "Absent"
    INCOMPLETE = "Incomplete"
    ON_LEAVE_FULL = "OnLeaveFull"
    ON_LEAVE_HALF = "OnLeaveHalf"
    HOLIDAY = "Holiday"
    WEEK_OFF = "WeekOff"


class LeaveType(str, Enum):
    EARNED = "Earned"
    SICK = "Sick"
    FLOATING = "Floating"
    COMP_OFF = "Comp Off"


class DayOption(str, Enum):
    FULL = "full"
    HALF = "half"


class LeaveStatus(str, Enum):
    """Leave approval lifecycle. APPROVED and REJECTED are terminal."""

    SUBMITTED = "submitted"
    PENDING_MANAGER_APPROVAL = "pending_manager_approval"
    PENDING_HR_CONFIRMATION = "pending_hr_confirmation"
    APPROVED = "approved"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        return self in {LeaveStatus.APPROVED, LeaveStatus.REJECTED}


class Decision(str, Enum):
    APPROVED = "approved"
    REJECTED = "rejected"


class CompOffStatus(str, Enum):
    EARNED = "earned"
    USED = "used"
    EXPIRED = "expired"


class WorkType(str, Enum):
    HOLIDAY = "Holiday"
    WEEK_OFF = "Week Off"
    NIGHT_SHIFT = "Night Shift"


class ClaimType(str, Enum):
    """How extra work is compensated: paid overtime hours or one earned comp-off day."""

    OT = "OT"
    COMP_OFF = "Comp Off"


class ClaimStatus(str, Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"
