"""SQLAlchemy models for Studio Rent.

All models are imported here so that ``Base.metadata`` knows every table
before ``create_all`` runs. If you add a new model, import it in this file.
"""

from studiorent.models.availability_block import AvailabilityBlock
from studiorent.models.booking import Booking
from studiorent.models.guest import Guest
from studiorent.models.room import Room

__all__ = [
    "AvailabilityBlock",
    "Booking",
    "Guest",
    "Room",
]
