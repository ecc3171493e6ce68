"""Rate limiter instance for SlowAPI.

Shared so both main (app.state.limiter) and route modules can use the same
instance without circular imports. Limit strings live here only.
"""

import time
from collections import defaultdict
from threading import Lock

from fastapi import HTTPException
from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)

LOGIN_LIMIT = "10/minute"
WRITE_ENDPOINT_LIMIT = "120/minute"
SMS_SEND_LIMIT = "30/minute"
LOGIN_PER_EMAIL_LIMIT = 5  # attempts per window per email
LOGIN_PER_EMAIL_WINDOW_SEC = 60

limit_auth = limiter.limit(LOGIN_LIMIT)
limit_writes = limiter.limit(WRITE_ENDPOINT_LIMIT)
limit_sms_send = limiter.limit(SMS_SEND_LIMIT)

# In-memory sliding window of login attempts per email (any source address).
_login_attempts: defaultdict[str, list[float]] = defaultdict(list)
_login_attempts_lock = Lock()


def check_login_rate_per_email(email: str) -> None:
    """Raise 429 if this email had too many login attempts in the window."""
    if not email:
        return
    now = time.monotonic()
    cutoff = now - LOGIN_PER_EMAIL_WINDOW_SEC
    key = email.strip().lower()
    with _login_attempts_lock:
        _login_attempts[key] = [t for t in _login_attempts[key] if t > cutoff]
        if len(_login_attempts[key]) >= LOGIN_PER_EMAIL_LIMIT:
            raise HTTPException(
                status_code=429,
                detail="Too many login attempts; try again later",
            )
        _login_attempts[key].append(now)


def reset_login_attempts() -> None:
    """Clear the per-email window (tests)."""
    with _login_attempts_lock:
        _login_attempts.clear()
