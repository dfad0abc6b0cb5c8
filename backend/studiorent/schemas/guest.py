"""Pydantic v2 response schema for guests (admin views only)."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict


class GuestResponse(BaseModel):
    """Guest details shown in the admin booking detail view."""

    id: uuid.UUID
    full_name: str
    email: str | None = None
    phone: str | None = None
    id_type: str
    id_number: str | None = None
    nationality: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
