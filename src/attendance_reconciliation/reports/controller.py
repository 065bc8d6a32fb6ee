from __future__ import annotations

from flask import Flask, jsonify

from ..common.datetime_utils import now_local
from ..common.web import login_required, parse_date_arg, parse_user_ids_arg
from ..container import Container
from . import export
from .model import DashboardSummary, MusterGrid


def _dashboard_json(summary: DashboardSummary) -> dict:
    return {
        "total_employees": summary.total_employees,
        "present": summary.present_on_end_date,
        "absent": summary.absent_on_end_date,
        "on_leave": summary.on_leave_on_end_date,
        "trend": [
            {"date": p.day.isoformat(), "present": p.present, "absent": p.absent} for p in summary.trend
        ],
        "productivity": [
            {"date": p.day.isoformat(), "average_hours": p.average_hours} for p in summary.productivity_trend
        ],
        "comp_off": {
            "available": summary.comp_off.availability.available,
            "reason": summary.comp_off.availability.reason,
            "earned": summary.comp_off.earned,
            "used": summary.comp_off.used,
        },
    }


def _muster_json(grid: MusterGrid) -> dict:
    return {
        "days": [d.isoformat() for d in grid.days],
        "rows": [
            {"user_id": r.user_id, "employee": r.user_name, "codes": list(r.codes), "totals": dict(r.totals)}
            for r in grid.rows
        ],
    }


def register(app: Flask, container: Container) -> None:
    def _window():
        today = parse_date_arg("today", now_local().date())
        start = parse_date_arg("start")
        end = parse_date_arg("end")
        return start, end, today

    def _attachment(payload: bytes, *, mimetype: str, filename: str):
        return app.response_class(
            payload,
            mimetype=mimetype,
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    def _filename(prefix: str, start, end, ext: str) -> str:
        return f"{prefix}_{start.strftime('%Y%m%d')}_{end.strftime('%Y%m%d')}.{ext}"

    @app.route("/reports/dashboard", methods=["GET"], endpoint="reports_dashboard")
    @login_required
    def dashboard():
        start, end, today = _window()
        summary = container.report_service.dashboard(
            start=start, end=end, today=today, user_ids=parse_user_ids_arg()
        )
        return jsonify(_dashboard_json(summary))

    def _basic_rows():
        start, end, today = _window()
        rows = container.report_service.basic_report(
            start=start, end=end, today=today, user_ids=parse_user_ids_arg()
        )
        return start, end, rows

    @app.route("/reports/basic", methods=["GET"], endpoint="reports_basic")
    @login_required
    def basic_report():
        _, _, rows = _basic_rows()
        return jsonify({"rows": export.basic_report_records(rows)})

    @app.route("/reports/basic.csv", methods=["GET"], endpoint="reports_basic_csv")
    @login_required
    def basic_report_csv():
        start, end, rows = _basic_rows()
        return _attachment(
            export.basic_report_csv(rows),
            mimetype="text/csv",
            filename=_filename("daily_report", start, end, "csv"),
        )

    @app.route("/reports/basic.xlsx", methods=["GET"], endpoint="reports_basic_xlsx")
    @login_required
    def basic_report_xlsx():
        start, end, rows = _basic_rows()
        return _attachment(
            export.basic_report_xlsx(rows),
            mimetype=export.XLSX_MIMETYPE,
            filename=_filename("daily_report", start, end, "xlsx"),
        )

    def _muster():
        start, end, today = _window()
        grid = container.report_service.muster(start=start, end=end, today=today, user_ids=parse_user_ids_arg())
        return start, end, grid

    @app.route("/reports/muster", methods=["GET"], endpoint="reports_muster")
    @login_required
    def muster():
        _, _, grid = _muster()
        return jsonify(_muster_json(grid))

    @app.route("/reports/muster.csv", methods=["GET"], endpoint="reports_muster_csv")
    @login_required
    def muster_csv():
        start, end, grid = _muster()
        return _attachment(
            export.muster_csv(grid),
            mimetype="text/csv",
            filename=_filename("muster_roll", start, end, "csv"),
        )

    @app.route("/reports/muster.xlsx", methods=["GET"], endpoint="reports_muster_xlsx")
    @login_required
    def muster_xlsx():
        start, end, grid = _muster()
        return _attachment(
            export.muster_xlsx(grid),
            mimetype=export.XLSX_MIMETYPE,
            filename=_filename("muster_roll", start, end, "xlsx"),
        )

    def _log_rows():
        start = parse_date_arg("start")
        end = parse_date_arg("end")
        rows = container.report_service.event_log(start=start, end=end, user_ids=parse_user_ids_arg())
        return start, end, rows

    @app.route("/reports/log", methods=["GET"], endpoint="reports_log")
    @login_required
    def event_log():
        _, _, rows = _log_rows()
        return jsonify({"rows": export.event_log_records(rows)})

    @app.route("/reports/log.csv", methods=["GET"], endpoint="reports_log_csv")
    @login_required
    def event_log_csv():
        start, end, rows = _log_rows()
        return _attachment(
            export.event_log_csv(rows),
            mimetype="text/csv",
            filename=_filename("event_log", start, end, "csv"),
        )

    @app.route("/reports/log.xlsx", methods=["GET"], endpoint="reports_log_xlsx")
    @login_required
    def event_log_xlsx():
        start, end, rows = _log_rows()
        return _attachment(
            export.event_log_xlsx(rows),
            mimetype=export.XLSX_MIMETYPE,
            filename=_filename("event_log", start, end, "xlsx"),
        )
