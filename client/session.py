from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional


def _parse_iso(value: str) -> datetime:
    dt = datetime.fromisoformat(value)
    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class AdminSession:
    """A logged-in admin. Valid until ``expires_at``; never stored globally."""

    username: str
    token: str
    issued_at: datetime
    expires_at: datetime

    def is_active(self, now: Optional[datetime] = None) -> bool:
        now = now or datetime.now(timezone.utc)
        return now < self.expires_at

    @classmethod
    def from_login_response(cls, username: str, body: dict) -> "AdminSession":
        return cls(
            username=username,
            token=body["token"],
            issued_at=datetime.now(timezone.utc),
            expires_at=_parse_iso(body["expiresAt"]),
        )


class AuthContext:
    """Holds at most one admin session; injected into the views that need it."""

    def __init__(self, session: Optional[AdminSession] = None):
        self._session = session

    @property
    def session(self) -> Optional[AdminSession]:
        if self._session is not None and not self._session.is_active():
            self._session = None
        return self._session

    @property
    def is_logged_in(self) -> bool:
        return self.session is not None

    async def login(self, api, username: str, password: str) -> AdminSession:
        """Raises ``ApiError`` (401) on bad credentials."""
        body = await api.admin_login(username, password)
        self._session = AdminSession.from_login_response(username, body)
        return self._session

    def logout(self) -> None:
        self._session = None
