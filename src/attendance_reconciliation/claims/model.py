from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import ClaimStatus, ClaimType, WorkType


@dataclass(frozen=True)
class ExtraWorkClaim:
    """Work done on a holiday, week off or night shift, claimed as OT hours or a comp-off day."""

    claim_id: int
    user_id: int
    user_name: str
    work_date: date
    work_type: WorkType
    claim_type: ClaimType
    reason: str
    status: ClaimStatus
    created_at: datetime
    hours_worked: Optional[float] = None
    approver_id: Optional[int] = None
    approver_name: Optional[str] = None
    decided_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
