from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import ClaimStatus
from .model import ExtraWorkClaim


class ExtraWorkClaimRepository(Protocol):
    def create(self, claim: ExtraWorkClaim) -> int:
        raise NotImplementedError

    def get(self, claim_id: int) -> Optional[ExtraWorkClaim]:
        raise NotImplementedError

    def list_claims(
        self,
        *,
        user_id: Optional[int] = None,
        status: Optional[ClaimStatus] = None,
        limit: Optional[int] = None,
    ) -> Sequence[ExtraWorkClaim]:
        """Newest work date first."""

        raise NotImplementedError

    def save_decision(
        self,
        *,
        claim_id: int,
        status: ClaimStatus,
        approver_id: int,
        approver_name: str,
        decided_at: datetime,
        rejection_reason: Optional[str] = None,
    ) -> bool:
        """Decide a pending claim; False when it was no longer pending."""

        raise NotImplementedError
