"""Admin password hashing and verification using bcrypt directly."""

import bcrypt


def hash_password(password: str) -> str:
    """Hash a plain-text password using bcrypt.

    The result is what goes into ``ADMIN_PASSWORD_HASH``.
    """
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain-text password against a bcrypt hash.

    Returns False for an empty or malformed hash rather than raising.
    """
    if not hashed_password:
        return False
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"),
            hashed_password.encode("utf-8"),
        )
    except ValueError:
        return False
