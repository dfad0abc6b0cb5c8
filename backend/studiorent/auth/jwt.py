"""JWT creation and verification for the admin back office."""

from datetime import datetime, timedelta, timezone

from jose import jwt

from studiorent.config import settings

ADMIN_SUBJECT = "admin"


def create_admin_token(expires_delta: timedelta | None = None) -> str:
    """Create an access token for the single admin account.

    Args:
        expires_delta: Custom expiration duration. Defaults to
            ``settings.jwt_admin_token_expire_hours`` hours.

    Returns:
        Encoded JWT string.
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(hours=settings.jwt_admin_token_expire_hours))
    to_encode = {"sub": ADMIN_SUBJECT, "admin": True, "exp": expire, "iat": now, "type": "access"}
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> dict:
    """Decode and verify a JWT token.

    Raises:
        jose.JWTError: If the token is invalid, expired, or malformed.
    """
    return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
