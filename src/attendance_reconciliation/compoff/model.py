from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import CompOffStatus


@dataclass(frozen=True)
class CompOffLog:
    """One compensatory day off earned for working a holiday or week off."""

    log_id: int
    user_id: int
    date_earned: date
    reason: str
    status: CompOffStatus
    user_name: Optional[str] = None
    leave_request_id: Optional[int] = None
    granted_by_id: Optional[int] = None
    granted_by_name: Optional[str] = None
