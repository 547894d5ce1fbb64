"""Session token utilities.

A session is a signed JWT whose ``sub`` claim is the user id. It travels in
an HTTP-only cookie; there is no password step.
"""

from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from trek.config import config

SESSION_COOKIE = "session_token"


def create_access_token(
    data: dict[str, str], expires_delta: timedelta | None = None
) -> str:
    """Create JWT access token."""
    to_encode: dict[str, object] = {**data}
    lifetime = expires_delta or timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode["exp"] = datetime.now(UTC) + lifetime
    encoded_jwt: str = jwt.encode(
        to_encode, config.SECRET_KEY, algorithm=config.ALGORITHM
    )
    return encoded_jwt


def create_session_token(user_id: int) -> str:
    return create_access_token({"sub": str(user_id)})


def decode_access_token(token: str) -> int | None:
    """Return the user id carried by ``token``, or None if it is unusable."""
    try:
        payload = jwt.decode(token, config.SECRET_KEY, algorithms=[config.ALGORITHM])
    except JWTError:
        return None
    subject = payload.get("sub")
    if subject is None:
        return None
    try:
        return int(subject)
    except (TypeError, ValueError):
        return None


def session_cookie_options() -> dict[str, Any]:
    """Flags shared by setting and deleting the session cookie."""
    return {
        "key": SESSION_COOKIE,
        "httponly": True,
        "secure": config.SESSION_COOKIE_SECURE,
        "samesite": config.COOKIE_SAMESITE,
    }
