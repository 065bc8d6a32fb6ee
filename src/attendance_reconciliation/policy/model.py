from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional

from ..core.enums import StaffType


@dataclass(frozen=True)
class AttendancePolicy:
    """Per-staff-type attendance rules (one record per staff type)."""

    staff_type: StaffType
    minimum_hours_full_day: float
    minimum_hours_half_day: float
    sick_leave_certificate_threshold_days: int
    annual_earned_leaves: float = 0
    annual_sick_leaves: float = 0
    monthly_floating_leaves: float = 0

    @property
    def full_day_minutes(self) -> float:
        return float(self.minimum_hours_full_day) * 60

    @property
    def half_day_minutes(self) -> float:
        return float(self.minimum_hours_half_day) * 60


@dataclass(frozen=True)
class PolicySet:
    office: AttendancePolicy
    field: AttendancePolicy

    def for_staff_type(self, staff_type: StaffType) -> AttendancePolicy:
        return self.office if staff_type == StaffType.OFFICE else self.field


@dataclass(frozen=True)
class Holiday:
    date: date
    staff_type: StaffType
    name: Optional[str] = None


@dataclass(frozen=True)
class HolidayCalendar:
    """The two independent holiday calendars, indexed by date for O(1) lookups."""

    office: frozenset = field(default_factory=frozenset)
    field: frozenset = field(default_factory=frozenset)

    @classmethod
    def from_holidays(cls, holidays: Iterable[Holiday]) -> "HolidayCalendar":
        office: set[date] = set()
        field_days: set[date] = set()
        for h in holidays:
            (office if h.staff_type == StaffType.OFFICE else field_days).add(h.date)
        return cls(office=frozenset(office), field=frozenset(field_days))

    def dates_for(self, staff_type: StaffType) -> frozenset:
        return self.office if staff_type == StaffType.OFFICE else self.field

    def is_holiday(self, day: date, staff_type: StaffType) -> bool:
        return day in self.dates_for(staff_type)
