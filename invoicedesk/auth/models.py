import time
from dataclasses import dataclass
from typing import Any, Literal

SessionEvent = Literal["SIGNED_IN", "SIGNED_OUT", "TOKEN_REFRESHED"]

SIGNED_IN: SessionEvent = "SIGNED_IN"
SIGNED_OUT: SessionEvent = "SIGNED_OUT"
TOKEN_REFRESHED: SessionEvent = "TOKEN_REFRESHED"


@dataclass(frozen=True)
class AuthSession:
    """The signed-in user, detached from the Supabase client types."""

    access_token: str
    refresh_token: str
    user_id: str
    email: str
    expires_at: float

    @classmethod
    def from_supabase(cls, session: Any, now: float | None = None) -> "AuthSession":
        """Convert a ``supabase`` auth Session."""
        expires_at = session.expires_at
        if expires_at is None:
            issued = now if now is not None else time.time()
            expires_at = issued + float(session.expires_in or 3600)
        user = session.user
        return cls(
            access_token=session.access_token,
            refresh_token=session.refresh_token or "",
            user_id=str(user.id) if user is not None else "",
            email=str(user.email or "") if user is not None else "",
            expires_at=float(expires_at),
        )
