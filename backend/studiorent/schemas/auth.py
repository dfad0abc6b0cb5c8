"""Pydantic v2 request/response schemas for admin authentication."""

from pydantic import BaseModel, Field


class AdminLoginRequest(BaseModel):
    password: str = Field(..., min_length=1, max_length=128)


class TokenResponse(BaseModel):
    """JWT returned on successful admin login; also set as a cookie."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int


class MessageResponse(BaseModel):
    """Generic message response."""

    message: str
