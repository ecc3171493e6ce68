"""JWT access tokens for staff sessions.

The subject (sub) is the user id. Secret, algorithm and lifetime come from
app.core.config.
"""

from datetime import timedelta
from typing import Any, cast

from jose import JWTError, jwt

from app.core.config import get_settings
from app.domain.exceptions import AuthenticationException
from app.shared.utils.datetime import utc_now


def create_access_token(
    user_id: str,
    extra_claims: dict[str, Any] | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed access token for user_id.

    Args:
        user_id: Stored as the sub claim.
        extra_claims: Additional claims (e.g. email, role). Cannot override sub or exp.
        expires_delta: Optional TTL; else settings.access_token_expire_minutes.
    """
    settings = get_settings()
    ttl = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    now = utc_now()
    claims = dict(extra_claims or {})
    claims.update({"sub": user_id, "iat": now, "exp": now + ttl})
    encoded = jwt.encode(
        claims,
        settings.secret_key.get_secret_value(),
        algorithm=settings.algorithm,
    )
    return cast(str, encoded)


def decode_access_token(token: str) -> dict[str, Any]:
    """Verify signature and expiry; return the claims.

    Raises:
        AuthenticationException: Invalid, expired, or missing sub/exp.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.secret_key.get_secret_value(),
            algorithms=[settings.algorithm],
            options={"require_exp": True, "require_sub": True},
        )
    except JWTError as e:
        raise AuthenticationException(f"Invalid token: {e!s}") from e
    if not payload.get("sub"):
        raise AuthenticationException("Token missing required claim: sub")
    return payload
