"""Pydantic v2 request/response schemas for room endpoints."""

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class RoomCreate(BaseModel):
    """Schema for creating a new room."""

    slug: str = Field(..., min_length=1, max_length=120, pattern="^[a-z0-9-]+$")
    name: str = Field(..., min_length=1, max_length=255)
    name_ar: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    description_ar: str | None = None
    monthly_rate: Decimal = Field(..., gt=0)
    yearly_rate: Decimal = Field(..., gt=0)
    capacity: int = Field(1, ge=1)
    size_sqm: int | None = Field(None, ge=1)
    amenities: list[str] | None = None
    featured: bool = False


class RoomUpdate(BaseModel):
    """Schema for partially updating a room. All fields optional."""

    name: str | None = Field(None, min_length=1, max_length=255)
    name_ar: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    description_ar: str | None = None
    monthly_rate: Decimal | None = Field(None, gt=0)
    yearly_rate: Decimal | None = Field(None, gt=0)
    capacity: int | None = Field(None, ge=1)
    size_sqm: int | None = Field(None, ge=1)
    amenities: list[str] | None = None
    featured: bool | None = None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class RoomResponse(BaseModel):
    """Public room information returned from the API."""

    id: uuid.UUID
    slug: str
    name: str
    name_ar: str
    description: str | None = None
    description_ar: str | None = None
    monthly_rate: Decimal
    yearly_rate: Decimal
    capacity: int
    size_sqm: int | None = None
    amenities: list | None = None
    featured: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RoomListResponse(BaseModel):
    items: list[RoomResponse]
    total: int
