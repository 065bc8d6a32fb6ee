from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Mapping, Optional

from ..core.availability import FeatureAvailability
from ..core.enums import DailyStatusCode, EventType


@dataclass(frozen=True)
class TrendPoint:
    day: date
    present: int
    absent: int


@dataclass(frozen=True)
class ProductivityPoint:
    day: date
    average_minutes: float

    @property
    def average_hours(self) -> float:
        return round(self.average_minutes / 60, 2)


@dataclass(frozen=True)
class CompOffPanel:
    availability: FeatureAvailability
    earned: int = 0
    used: int = 0


@dataclass(frozen=True)
class DashboardSummary:
    """Counters are a snapshot of the range's end date, trends cover every day."""

    total_employees: int
    present_on_end_date: int
    absent_on_end_date: int
    on_leave_on_end_date: int
    trend: tuple[TrendPoint, ...]
    productivity_trend: tuple[ProductivityPoint, ...]
    comp_off: CompOffPanel


@dataclass(frozen=True)
class BasicReportRow:
    """Read-model for the Basic Daily Report export."""

    work_date: date
    user_id: int
    user_name: str
    status: str
    code: DailyStatusCode
    check_in: Optional[str]
    check_out: Optional[str]
    duration: Optional[str]
    worked_minutes: Optional[int]


@dataclass(frozen=True)
class MusterRow:
    user_id: int
    user_name: str
    codes: tuple[str, ...]
    totals: Mapping[str, int]


@dataclass(frozen=True)
class MusterGrid:
    days: tuple[date, ...]
    rows: tuple[MusterRow, ...]


@dataclass(frozen=True)
class EventLogRow:
    event_id: int
    user_id: int
    user_name: str
    timestamp: datetime
    event_type: EventType
    latitude: Optional[float] = None
    longitude: Optional[float] = None
