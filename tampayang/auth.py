"""Login throttling, account lockout and token claims."""

from __future__ import annotations

import secrets
import threading
import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable

from .errors import TampayangError

INVALID_CREDENTIALS = "auth006"
RATE_LIMITED = "auth010"
ACCOUNT_LOCKED = "auth011"


class LoginError(TampayangError):
    """A login attempt was refused; ``code`` is the message code to show."""

    def __init__(self, code: str) -> None:
        super().__init__(code)
        self.code = code


@dataclass(frozen=True)
class LoginUser:
    """The user identity that goes into an access token."""

    user_id: str
    user_name: str
    user_email: str
    user_role: str


class LoginGuard:
    """Per-IP rate limiting and per-user lockout after repeated failures.

    Durations are in seconds; ``clock`` returns the current time in seconds.
    """

    def __init__(
        self,
        max_login_attempts: int = 5,
        lockout_duration: float = 15 * 60,
        rate_limit_window: float = 60,
        max_requests_per_window: int = 10,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_login_attempts = max_login_attempts
        self.lockout_duration = lockout_duration
        self.rate_limit_window = rate_limit_window
        self.max_requests_per_window = max_requests_per_window
        self._clock = clock
        self._requests: dict[str, list[float]] = {}
        self._failed: dict[str, int] = {}
        self._locked: dict[str, float] = {}
        self._rate_lock = threading.Lock()
        self._account_lock = threading.Lock()

    def is_rate_limited(self, ip: str) -> bool:
        """Record a request from ``ip`` and report whether it exceeds the limit."""
        with self._rate_lock:
            now = self._clock()
            previous = self._requests.get(ip)
            if previous is None:
                self._requests[ip] = [now]
                return False
            recent = [t for t in previous if now - t < self.rate_limit_window]
            recent.append(now)
            self._requests[ip] = recent
            return len(recent) > self.max_requests_per_window

    def record_failed_attempt(self, user_id: str) -> None:
        """Count a failed attempt and lock the account once the maximum is reached."""
        with self._account_lock:
            count = self._failed.get(user_id, 0) + 1
            self._failed[user_id] = count
            if count >= self.max_login_attempts:
                self._locked[user_id] = self._clock()

    def is_account_locked(self, user_id: str) -> bool:
        """Report whether the account is locked, clearing an expired lock."""
        with self._account_lock:
            locked_at = self._locked.get(user_id)
            if locked_at is None:
                return False
            if self._clock() - locked_at > self.lockout_duration:
                self._locked.pop(user_id, None)
                self._failed.pop(user_id, None)
                return False
            return True

    def reset(self, user_id: str) -> None:
        """Forget failed attempts and any lock for the user."""
        with self._account_lock:
            self._failed.pop(user_id, None)
            self._locked.pop(user_id, None)

    def evaluate_login(self, ip: str, user_id: str | None, password_valid: bool) -> None:
        """Apply the login checks in order, raising LoginError on refusal.

        ``user_id`` is None when no user matched the e-mail address.
        """
        if self.is_rate_limited(ip):
            raise LoginError(RATE_LIMITED)
        if user_id is None:
            raise LoginError(INVALID_CREDENTIALS)
        if not password_valid:
            self.record_failed_attempt(user_id)
            raise LoginError(INVALID_CREDENTIALS)
        if self.is_account_locked(user_id):
            raise LoginError(ACCOUNT_LOCKED)
        self.reset(user_id)


def generate_jti() -> str:
    """Return a random 128-bit token identifier as 32 hex characters."""
    return secrets.token_hex(16)


def build_claims(
    user: LoginUser, expire_minutes: int, now: datetime | None = None
) -> dict[str, Any]:
    """Build the access-token claims for ``user``."""
    if now is None:
        now = datetime.now(timezone.utc)
    return {
        "user_id": user.user_id,
        "user_name": user.user_name,
        "user_email": user.user_email,
        "user_role": user.user_role,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=expire_minutes)).timestamp()),
        "jti": generate_jti(),
    }