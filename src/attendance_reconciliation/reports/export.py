"""CSV and Excel renderings of the report shapes.

CSV is written with a BOM so spreadsheet apps pick up UTF-8 names.
"""

from __future__ import annotations

import csv
import io
from typing import Iterable, Sequence

import pandas as pd

from .model import BasicReportRow, EventLogRow, MusterGrid

BASIC_REPORT_FIELDS = ["date", "user_id", "employee", "status", "check_in", "check_out", "duration"]
EVENT_LOG_FIELDS = ["timestamp", "user_id", "employee", "event", "latitude", "longitude"]

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def basic_report_records(rows: Iterable[BasicReportRow]) -> list[dict]:
    return [
        {
            "date": r.work_date.strftime("%Y-%m-%d"),
            "user_id": r.user_id,
            "employee": r.user_name,
            "status": r.status,
            "check_in": r.check_in or "",
            "check_out": r.check_out or "",
            "duration": r.duration or "",
        }
        for r in rows
    ]


def event_log_records(rows: Iterable[EventLogRow]) -> list[dict]:
    return [
        {
            "timestamp": r.timestamp.strftime("%Y-%m-%d %H:%M:%S"),
            "user_id": r.user_id,
            "employee": r.user_name,
            "event": r.event_type.value,
            "latitude": "" if r.latitude is None else r.latitude,
            "longitude": "" if r.longitude is None else r.longitude,
        }
        for r in rows
    ]


def muster_frame(grid: MusterGrid) -> pd.DataFrame:
    """One row per employee, one column per day, then one column per code total."""

    day_columns = [d.strftime("%Y-%m-%d") for d in grid.days]
    records = []
    for row in grid.rows:
        record = {"user_id": row.user_id, "employee": row.user_name}
        record.update(zip(day_columns, row.codes))
        record.update({f"total_{short}": count for short, count in row.totals.items()})
        records.append(record)
    if records:
        return pd.DataFrame(records)
    return pd.DataFrame(columns=["user_id", "employee", *day_columns])


def _to_csv(records: Sequence[dict], fieldnames: Sequence[str]) -> bytes:
    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=list(fieldnames))
    writer.writeheader()
    for record in records:
        writer.writerow(record)
    return out.getvalue().encode("utf-8-sig")


def _to_excel(df: pd.DataFrame, sheet_name: str) -> bytes:
    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=sheet_name)
    return output.getvalue()


def basic_report_csv(rows: Sequence[BasicReportRow]) -> bytes:
    return _to_csv(basic_report_records(rows), BASIC_REPORT_FIELDS)


def basic_report_xlsx(rows: Sequence[BasicReportRow]) -> bytes:
    return _to_excel(pd.DataFrame(basic_report_records(rows), columns=BASIC_REPORT_FIELDS), "Daily Report")


def muster_csv(grid: MusterGrid) -> bytes:
    df = muster_frame(grid)
    return _to_csv(df.to_dict(orient="records"), list(df.columns))


def muster_xlsx(grid: MusterGrid) -> bytes:
    return _to_excel(muster_frame(grid), "Muster Roll")


def event_log_csv(rows: Sequence[EventLogRow]) -> bytes:
    return _to_csv(event_log_records(rows), EVENT_LOG_FIELDS)


def event_log_xlsx(rows: Sequence[EventLogRow]) -> bytes:
    return _to_excel(pd.DataFrame(event_log_records(rows), columns=EVENT_LOG_FIELDS), "Event Log")
