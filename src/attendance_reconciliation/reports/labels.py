from __future__ import annotations

from ..core.enums import DailyStatusCode

STATUS_LABELS: dict[DailyStatusCode, str] = {
    DailyStatusCode.PRESENT: "Present",
    DailyStatusCode.HALF_DAY: "Half Day",
    DailyStatusCode.SHORT_HOURS: "Short Hours",
    DailyStatusCode.ABSENT: "Absent",
    DailyStatusCode.INCOMPLETE: "Incomplete",
    DailyStatusCode.ON_LEAVE_FULL: "On Leave (Full)",
    DailyStatusCode.ON_LEAVE_HALF: "On Leave (Half)",
    DailyStatusCode.HOLIDAY: "Holiday",
    DailyStatusCode.WEEK_OFF: "Weekend",
}

MUSTER_CODES: dict[DailyStatusCode, str] = {
    DailyStatusCode.PRESENT: "P",
    DailyStatusCode.ABSENT: "A",
    DailyStatusCode.ON_LEAVE_FULL: "L",
    DailyStatusCode.ON_LEAVE_HALF: "HL",
    DailyStatusCode.HALF_DAY: "HD",
    DailyStatusCode.SHORT_HOURS: "SH",
    DailyStatusCode.HOLIDAY: "H",
    DailyStatusCode.WEEK_OFF: "WO",
    DailyStatusCode.INCOMPLETE: "-",
}

_BY_LABEL = {label: code for code, label in STATUS_LABELS.items()}
_BY_MUSTER = {short: code for code, short in MUSTER_CODES.items()}

# Days the employee clocked in; an open session today counts provisionally.
ATTENDED_CODES = frozenset(
    {
        DailyStatusCode.PRESENT,
        DailyStatusCode.HALF_DAY,
        DailyStatusCode.SHORT_HOURS,
        DailyStatusCode.INCOMPLETE,
    }
)
ON_LEAVE_CODES = frozenset({DailyStatusCode.ON_LEAVE_FULL, DailyStatusCode.ON_LEAVE_HALF})


def code_from_label(label: str) -> DailyStatusCode:
    return _BY_LABEL[label]


def code_from_muster(short: str) -> DailyStatusCode:
    return _BY_MUSTER[short]


def format_duration(minutes: int) -> str:
    return f"{minutes // 60}h {minutes % 60}m"
