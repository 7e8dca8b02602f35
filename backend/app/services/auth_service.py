"""Admin sessions.

The dashboard used to gate its pages on a username kept in browser storage.
Here a login yields a bearer token bound to an explicit AdminSession that
request handlers receive through dependency injection.
"""

import hmac
import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta

from app.clock import utcnow
from app.config import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdminSession:
    """An authenticated admin."""

    token: str
    username: str
    issued_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime | None = None) -> bool:
        return (now or utcnow()) >= self.expires_at


class AdminSessionStore:
    """In-process token store. Sessions do not survive a restart."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self._sessions: dict[str, AdminSession] = {}

    def check_credentials(self, username: str, password: str) -> bool:
        if not self.settings.admin_password:
            logger.warning("Admin login attempted but ADMIN_PASSWORD is not configured")
            return False
        user_ok = hmac.compare_digest(username.encode(), self.settings.admin_username.encode())
        password_ok = hmac.compare_digest(password.encode(), self.settings.admin_password.encode())
        return user_ok and password_ok

    def login(self, username: str, password: str) -> AdminSession | None:
        """Open a session for valid credentials, None otherwise."""
        if not self.check_credentials(username, password):
            logger.info("Rejected admin login for %r", username)
            return None

        now = utcnow()
        session = AdminSession(
            token=secrets.token_urlsafe(32),
            username=username,
            issued_at=now,
            expires_at=now + timedelta(minutes=self.settings.admin_session_ttl_minutes),
        )
        self._sessions[session.token] = session
        logger.info("Admin %s logged in", username)
        return session

    def get(self, token: str) -> AdminSession | None:
        session = self._sessions.get(token)
        if session is None:
            return None
        if session.is_expired():
            self._sessions.pop(token, None)
            return None
        return session

    def logout(self, token: str) -> bool:
        return self._sessions.pop(token, None) is not None
