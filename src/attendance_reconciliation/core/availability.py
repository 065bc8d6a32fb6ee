from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class FeatureAvailability:
    """Typed outcome for an optional data source (e.g. comp-off history).

    The UI renders an "unavailable" panel when ``available`` is False instead of
    treating it as an error.
    """

    available: bool
    reason: Optional[str] = None

    @classmethod
    def enabled(cls) -> "FeatureAvailability":
        return cls(available=True)

    @classmethod
    def disabled(cls, reason: str) -> "FeatureAvailability":
        return cls(available=False, reason=reason)
