from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .attendance.engine import StatusDerivationEngine
from .attendance.factory import StatusRuleFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .claims.mysql_claim_repository import MySQLExtraWorkClaimRepository
from .claims.service import ExtraWorkClaimService
from .compoff.mysql_compoff_repository import MySQLCompOffRepository
from .compoff.service import CompOffService
from .core.constants import (
    DEFAULT_CLAIM_APPROVER_ROLES,
    DEFAULT_FETCH_WORKERS,
    DEFAULT_FINAL_CONFIRMATION_ROLE,
    DEFAULT_MAX_REPORT_DAYS,
)
from .database.connection import DBConfig, DatabaseConnection
from .leaves.mysql_leave_repository import MySQLLeaveRepository
from .leaves.service import LeaveService
from .policy.mysql_policy_repository import MySQLPolicyRepository
from .reports.loader import ReportInputLoader
from .reports.service import ReportService
from .users.mysql_user_repository import MySQLUserRepository


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    users_repo: MySQLUserRepository
    attendance_repo: MySQLAttendanceRepository
    leaves_repo: MySQLLeaveRepository
    policy_repo: MySQLPolicyRepository
    comp_off_repo: MySQLCompOffRepository
    claims_repo: MySQLExtraWorkClaimRepository

    attendance_service: AttendanceService
    leave_service: LeaveService
    comp_off_service: CompOffService
    claim_service: ExtraWorkClaimService
    report_service: ReportService


def build_container(
    *,
    db_config: dict,
    final_confirmation_role: str = DEFAULT_FINAL_CONFIRMATION_ROLE,
    claim_approver_roles: Iterable[str] = DEFAULT_CLAIM_APPROVER_ROLES,
    fetch_workers: int = DEFAULT_FETCH_WORKERS,
    max_report_days: int = DEFAULT_MAX_REPORT_DAYS,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    users_repo = MySQLUserRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    leaves_repo = MySQLLeaveRepository(conn)
    policy_repo = MySQLPolicyRepository(conn)
    comp_off_repo = MySQLCompOffRepository(conn)
    claims_repo = MySQLExtraWorkClaimRepository(conn)

    attendance_service = AttendanceService(attendance_repo, users_repo)
    leave_service = LeaveService(
        leaves_repo,
        users_repo,
        policy_repo,
        comp_off_repo,
        final_confirmation_role=final_confirmation_role,
    )
    comp_off_service = CompOffService(comp_off_repo, users_repo, granting_role=final_confirmation_role)
    claim_service = ExtraWorkClaimService(claims_repo, users_repo, comp_off_repo, approver_roles=claim_approver_roles)
    loader = ReportInputLoader(
        users_repo,
        attendance_repo,
        leaves_repo,
        policy_repo,
        comp_off_repo,
        max_workers=fetch_workers,
    )
    report_service = ReportService(
        loader,
        engine=StatusDerivationEngine(StatusRuleFactory().default_chain()),
        max_report_days=max_report_days,
    )

    return Container(
        conn=conn,
        users_repo=users_repo,
        attendance_repo=attendance_repo,
        leaves_repo=leaves_repo,
        policy_repo=policy_repo,
        comp_off_repo=comp_off_repo,
        claims_repo=claims_repo,
        attendance_service=attendance_service,
        leave_service=leave_service,
        comp_off_service=comp_off_service,
        claim_service=claim_service,
        report_service=report_service,
    )
