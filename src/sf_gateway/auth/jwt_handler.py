"""JWT access-token verification.

Tokens are issued by the storefront's auth service; this service only
verifies them. HS256 with the shared JWT_SECRET.

Claims:
  sub        customer id or admin user id
  type       always "access"
  user_type  "customer" | "admin"
  role       admins only: ADMIN | MANAGER | OPERATOR | VIEWER
"""

from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from config.settings import settings
from src.sf_common.errors import InvalidCredentialsError

_ALGORITHM = settings.JWT_ALGORITHM  # "HS256"
_ACCESS_EXPIRE = timedelta(minutes=settings.JWT_EXPIRE_MINUTES)


def create_access_token(subject: str, user_type: str, role: str | None = None) -> str:
    """Issue an access token. Used by tests and local tooling."""
    now = datetime.now(UTC)
    payload: dict[str, Any] = {
        "sub": subject,
        "type": "access",
        "user_type": user_type,
        "iat": now,
        "exp": now + _ACCESS_EXPIRE,
    }
    if role is not None:
        payload["role"] = role
    return str(jwt.encode(payload, settings.JWT_SECRET, algorithm=_ALGORITHM))


def decode_token(token: str) -> dict[str, Any]:
    """Decode and validate an access token.

    Raises:
        InvalidCredentialsError: signature/expiry invalid or not an access token.
    """
    try:
        payload: dict[str, Any] = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[_ALGORITHM],  # Explicit list prevents algorithm confusion
        )
    except JWTError:
        raise InvalidCredentialsError() from None

    if payload.get("type") != "access":
        raise InvalidCredentialsError()
    return payload
