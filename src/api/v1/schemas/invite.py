"""Pydantic schemas for guest invitation management."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CreateGuestInviteRequest(BaseModel):
    """Schema for inviting a guest to a data room."""

    email: str = Field(..., min_length=3, max_length=255)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        """Basic email validation."""
        v = v.strip().lower()
        if "@" not in v or "." not in v.split("@")[-1]:
            raise ValueError("Invalid email address")
        return v


class GuestInviteResponse(BaseModel):
    """Schema for GuestInvite response."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "data_room_id": "456e4567-e89b-12d3-a456-426614174000",
                "email": "guest@example.com",
                "status": "pending",
                "access_id": "q3Jx9mWcT0r1V2aYbZkLdE4fGhPnS5uv",
                "invited_by": "789e4567-e89b-12d3-a456-426614174000",
                "created_at": "2026-02-01T10:00:00",
                "expires_at": "2026-03-03T10:00:00",
            }
        },
    )

    id: UUID
    data_room_id: UUID
    email: str
    status: str
    access_id: str
    invited_by: UUID | None = None
    nda_signed_at: datetime | None = None
    created_at: datetime
    expires_at: datetime


class GuestInviteCreatedResponse(BaseModel):
    """Schema for invitation creation response."""

    data: GuestInviteResponse
    resent: bool = Field(
        False,
        description="True when an existing pending invitation was refreshed",
    )
