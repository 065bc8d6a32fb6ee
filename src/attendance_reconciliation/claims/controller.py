from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.web import current_user_id, login_required
from ..container import Container
from ..core.enums import ClaimType, WorkType
from ..core.exceptions import ValidationError
from .model import ExtraWorkClaim
from .service import NewExtraWorkClaim


def claim_json(claim: ExtraWorkClaim) -> dict:
    return {
        "id": claim.claim_id,
        "user_id": claim.user_id,
        "user_name": claim.user_name,
        "work_date": claim.work_date.isoformat(),
        "work_type": claim.work_type.value,
        "claim_type": claim.claim_type.value,
        "hours_worked": claim.hours_worked,
        "reason": claim.reason,
        "status": claim.status.value,
        "approver_name": claim.approver_name,
        "decided_at": claim.decided_at.isoformat(sep=" ", timespec="seconds") if claim.decided_at else None,
        "rejection_reason": claim.rejection_reason,
        "created_at": claim.created_at.isoformat(sep=" ", timespec="seconds"),
    }


def _parse_new_claim(payload: dict) -> NewExtraWorkClaim:
    try:
        work_type = WorkType(payload.get("work_type"))
    except ValueError as e:
        raise ValidationError("Work type must be 'Holiday', 'Week Off' or 'Night Shift'") from e
    try:
        claim_type = ClaimType(payload.get("claim_type"))
    except ValueError as e:
        raise ValidationError("Claim type must be 'OT' or 'Comp Off'") from e
    try:
        work_date = parse_iso_date(str(payload.get("work_date") or ""))
    except ValueError as e:
        raise ValidationError("Date of work must be YYYY-MM-DD") from e

    hours = payload.get("hours_worked")
    if hours in (None, ""):
        hours = None
    else:
        try:
            hours = float(hours)
        except (TypeError, ValueError) as e:
            raise ValidationError("Hours worked must be a number") from e

    return NewExtraWorkClaim(
        work_date=work_date,
        work_type=work_type,
        claim_type=claim_type,
        reason=str(payload.get("reason") or ""),
        hours_worked=hours,
    )


def register(app: Flask, container: Container) -> None:
    @app.route("/claims", methods=["POST"], endpoint="claims_submit")
    @login_required
    def submit_claim():
        data = _parse_new_claim(request.get_json(silent=True) or {})
        claim = container.claim_service.submit(user_id=current_user_id(), data=data)
        return jsonify({"success": True, "claim": claim_json(claim)}), 201

    @app.route("/claims/mine", methods=["GET"], endpoint="claims_mine")
    @login_required
    def my_claims():
        rows = container.claim_service.list_mine(user_id=current_user_id())
        return jsonify({"claims": [claim_json(c) for c in rows]})

    @app.route("/claims/pending", methods=["GET"], endpoint="claims_pending")
    @login_required
    def pending_claims():
        rows = container.claim_service.list_pending(approver_id=current_user_id())
        return jsonify({"claims": [claim_json(c) for c in rows]})

    @app.route("/claims/<int:claim_id>/decision", methods=["POST"], endpoint="claims_decision")
    @login_required
    def decide_claim(claim_id: int):
        payload = request.get_json(silent=True) or {}
        decision = str(payload.get("decision") or "").strip().lower()
        if decision == "approve":
            claim = container.claim_service.approve(approver_id=current_user_id(), claim_id=claim_id)
        elif decision == "reject":
            claim = container.claim_service.reject(
                approver_id=current_user_id(), claim_id=claim_id, reason=str(payload.get("reason") or "")
            )
        else:
            raise ValidationError("Decision must be 'approve' or 'reject'")
        return jsonify({"success": True, "claim": claim_json(claim)})
