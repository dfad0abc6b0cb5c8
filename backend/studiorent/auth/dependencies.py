"""FastAPI dependency protecting the admin routes."""

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError

from studiorent.auth.jwt import ADMIN_SUBJECT, decode_token
from studiorent.config import settings

# Optional bearer; the session cookie is the fallback
_bearer_scheme_optional = HTTPBearer(auto_error=False)


async def get_current_admin(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme_optional),
) -> dict:
    """Validate the admin token from the Authorization header or the session cookie.

    Returns:
        The decoded token payload.

    Raises:
        HTTPException 401: If no token is present, or it is invalid, expired,
            of the wrong type or not an admin token.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    token = credentials.credentials if credentials is not None else request.cookies.get(settings.admin_cookie_name)
    if not token:
        raise credentials_exception

    try:
        payload = decode_token(token)
    except JWTError:
        raise credentials_exception from None

    if payload.get("type") != "access":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token type",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if payload.get("sub") != ADMIN_SUBJECT or payload.get("admin") is not True:
        raise credentials_exception

    return payload
