"""
Domain: Authenticated HR identity.

An HRIdentity is issued by the access gateway after verifying a signed session
token. HR-only lifecycle operations take it as an explicit argument instead of
consulting any ambient login state.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from .time import require_utc_timestamp


@dataclass(frozen=True, slots=True)
class HRIdentity:
    email: str
    expires_at: datetime

    def __post_init__(self) -> None:
        require_utc_timestamp("expires_at", self.expires_at)

    def is_expired(self, now: datetime) -> bool:
        require_utc_timestamp("now", now)
        return now >= self.expires_at
