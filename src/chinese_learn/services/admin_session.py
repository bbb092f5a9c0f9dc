"""Admin session - explicit authorization context for the admin screens."""

import hmac
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, Optional

from chinese_learn.services.settings_manager import SettingsManager

SESSION_LIFETIME = timedelta(days=1)

logger = logging.getLogger(__name__)


class AuthenticationError(ValueError):
    """Raised when admin credentials are rejected."""


@dataclass(frozen=True)
class AdminSession:
    """Proof of a successful admin login, valid until ``expires_at``.

    ``clock`` is the time source of the AuthService that issued it, so
    every validity check reads the same clock.
    """

    username: str
    issued_at: datetime
    expires_at: datetime
    clock: Callable[[], datetime] = field(default=datetime.now, compare=False, repr=False)

    def is_valid(self, now: Optional[datetime] = None) -> bool:
        return (now or self.clock()) < self.expires_at


class AuthService:
    """Checks admin credentials and holds the current session.

    Credentials come from configuration. This is a client-side gate only;
    the backend does not enforce it.
    """

    def __init__(
        self,
        settings: SettingsManager,
        clock: Callable[[], datetime] = datetime.now,
        lifetime: timedelta = SESSION_LIFETIME,
    ):
        self._settings = settings
        self._clock = clock
        self._lifetime = lifetime
        self._session: Optional[AdminSession] = None

    def login(self, username: str, password: str) -> AdminSession:
        """Validate credentials and start a session.

        Raises:
            AuthenticationError: If credentials are missing, not configured,
                or do not match.
        """
        expected = self._settings.get_admin_credentials()
        if expected is None:
            raise AuthenticationError("Admin credentials are not configured")

        expected_user, expected_password = expected
        user_ok = hmac.compare_digest((username or "").encode(), expected_user.encode())
        password_ok = hmac.compare_digest((password or "").encode(), expected_password.encode())
        if not (user_ok and password_ok):
            logger.info("Rejected admin login for %r", username)
            raise AuthenticationError("Invalid username or password")

        now = self._clock()
        self._session = AdminSession(
            username=username,
            issued_at=now,
            expires_at=now + self._lifetime,
            clock=self._clock,
        )
        logger.info("Admin %s logged in until %s", username, self._session.expires_at.isoformat())
        return self._session

    def logout(self) -> None:
        self._session = None

    def current_session(self) -> Optional[AdminSession]:
        """Return the live session, dropping it once expired."""
        if self._session is not None and not self._session.is_valid(self._clock()):
            logger.info("Admin session expired")
            self._session = None
        return self._session
