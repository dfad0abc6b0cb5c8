"""Shared API dependencies, a single import point for all routers::

    from studiorent.api.deps import get_db, get_current_admin, get_booking_policy
"""

from studiorent.auth.dependencies import get_current_admin
from studiorent.config import settings
from studiorent.database import get_db
from studiorent.engine import BookingPolicy


def get_booking_policy() -> BookingPolicy:
    """Engine policy built from the current settings."""
    return settings.booking_policy()


__all__ = [
    "get_db",
    "get_current_admin",
    "get_booking_policy",
]
