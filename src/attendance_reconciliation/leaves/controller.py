from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.web import current_user_id, login_required
from ..compoff.model import CompOffLog
from ..container import Container
from ..core.enums import DayOption, LeaveType
from ..core.exceptions import ValidationError
from .model import LeaveBalance, LeaveRequest
from .service import NewLeaveRequest


def leave_json(req: LeaveRequest) -> dict:
    return {
        "id": req.request_id,
        "user_id": req.user_id,
        "user_name": req.user_name,
        "leave_type": req.leave_type.value,
        "start_date": req.start_date.isoformat(),
        "end_date": req.end_date.isoformat(),
        "day_option": req.day_option.value,
        "reason": req.reason,
        "status": req.status.value,
        "current_approver_id": req.current_approver_id,
        "attachment": req.attachment,
        "created_at": req.created_at.isoformat(sep=" ", timespec="seconds"),
        "approval_history": [
            {
                "approver_id": r.approver_id,
                "approver_name": r.approver_name,
                "decision": r.decision.value,
                "timestamp": r.timestamp.isoformat(sep=" ", timespec="seconds"),
                "comments": r.comments,
            }
            for r in req.approval_history
        ],
    }


def balance_json(balance: LeaveBalance) -> dict:
    return {
        "user_id": balance.user_id,
        "balances": {
            leave_type.value: {"total": entry.total, "used": entry.used, "remaining": entry.remaining}
            for leave_type, entry in balance.entries.items()
        },
        "comp_off": {"available": balance.comp_off.available, "reason": balance.comp_off.reason},
    }


def comp_off_json(log: CompOffLog) -> dict:
    return {
        "id": log.log_id,
        "user_id": log.user_id,
        "date_earned": log.date_earned.isoformat(),
        "reason": log.reason,
        "status": log.status.value,
        "leave_request_id": log.leave_request_id,
        "granted_by": log.granted_by_name,
    }


def _parse_new_request(payload: dict) -> NewLeaveRequest:
    try:
        leave_type = LeaveType(payload.get("leave_type"))
    except ValueError as e:
        raise ValidationError("Unknown leave type") from e
    try:
        day_option = DayOption(payload.get("day_option") or DayOption.FULL.value)
    except ValueError as e:
        raise ValidationError("Day option must be 'full' or 'half'") from e
    try:
        start = parse_iso_date(str(payload.get("start_date") or ""))
        end = parse_iso_date(str(payload.get("end_date") or ""))
    except ValueError as e:
        raise ValidationError("Start and end dates must be YYYY-MM-DD") from e

    return NewLeaveRequest(
        leave_type=leave_type,
        start_date=start,
        end_date=end,
        reason=str(payload.get("reason") or ""),
        day_option=day_option,
        attachment=payload.get("attachment"),
    )


def _decision(payload: dict) -> tuple[bool, str]:
    decision = str(payload.get("decision") or "").strip().lower()
    if decision not in {"approve", "reject"}:
        raise ValidationError("Decision must be 'approve' or 'reject'")
    return decision == "approve", str(payload.get("comments") or "")


def register(app: Flask, container: Container) -> None:
    @app.route("/leaves", methods=["POST"], endpoint="leaves_submit")
    @login_required
    def submit_leave():
        data = _parse_new_request(request.get_json(silent=True) or {})
        req = container.leave_service.submit(user_id=current_user_id(), data=data)
        return jsonify({"success": True, "request": leave_json(req)}), 201

    @app.route("/leaves/mine", methods=["GET"], endpoint="leaves_mine")
    @login_required
    def my_leaves():
        rows = container.leave_service.list_my_requests(user_id=current_user_id())
        return jsonify({"requests": [leave_json(r) for r in rows]})

    @app.route("/leaves/pending", methods=["GET"], endpoint="leaves_pending")
    @login_required
    def pending_leaves():
        rows = container.leave_service.list_pending_for(approver_id=current_user_id())
        return jsonify({"requests": [leave_json(r) for r in rows]})

    @app.route("/leaves/balance", methods=["GET"], endpoint="leaves_balance")
    @login_required
    def leave_balance():
        balance = container.leave_service.get_leave_balance(user_id=current_user_id())
        return jsonify(balance_json(balance))

    @app.route("/leaves/<int:request_id>/manager-decision", methods=["POST"], endpoint="leaves_manager_decision")
    @login_required
    def manager_decision(request_id: int):
        approve, comments = _decision(request.get_json(silent=True) or {})
        req = container.leave_service.decide_as_manager(
            approver_id=current_user_id(), request_id=request_id, approve=approve, comments=comments
        )
        return jsonify({"success": True, "request": leave_json(req)})

    @app.route("/leaves/<int:request_id>/hr-decision", methods=["POST"], endpoint="leaves_hr_decision")
    @login_required
    def hr_decision(request_id: int):
        approve, comments = _decision(request.get_json(silent=True) or {})
        req = container.leave_service.decide_as_final(
            approver_id=current_user_id(), request_id=request_id, approve=approve, comments=comments
        )
        return jsonify({"success": True, "request": leave_json(req)})

    @app.route("/comp-off/mine", methods=["GET"], endpoint="comp_off_mine")
    @login_required
    def my_comp_off():
        availability, logs = container.comp_off_service.list_for_user(current_user_id())
        return jsonify(
            {
                "available": availability.available,
                "reason": availability.reason,
                "logs": [comp_off_json(log) for log in logs],
            }
        )

    @app.route("/comp-off", methods=["POST"], endpoint="comp_off_grant")
    @login_required
    def grant_comp_off():
        payload = request.get_json(silent=True) or {}
        try:
            user_id = int(payload.get("user_id"))
            date_earned = parse_iso_date(str(payload.get("date_earned") or ""))
        except (TypeError, ValueError) as e:
            raise ValidationError("user_id and date_earned (YYYY-MM-DD) are required") from e

        log_id = container.comp_off_service.grant(
            granted_by_id=current_user_id(),
            user_id=user_id,
            date_earned=date_earned,
            reason=str(payload.get("reason") or ""),
        )
        return jsonify({"success": True, "id": log_id}), 201
