from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field


class Session(BaseModel):
    """Authenticated session as seen by the invoker (read-only)."""

    access_token: str = Field(..., min_length=1, description="Bearer token")
    expires_at: Optional[datetime] = Field(None, description="Token expiry (UTC)")

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if self.expires_at is None:
            return False
        now = now or datetime.now(timezone.utc)
        expires_at = self.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        return expires_at <= now
