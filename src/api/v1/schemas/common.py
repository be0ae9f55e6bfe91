"""Common Pydantic schemas shared across the API."""

from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class ErrorResponse(BaseModel):
    """Standardized error response."""

    error: str
    error_code: str
    message: str
    details: Any | None = None


class CamelModel(BaseModel):
    """Schema exchanged with the data room web client in camelCase.

    Snake_case field names are accepted on input as well.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(CamelModel):
    """Simple message response."""

    message: str


class GuestCredentials(CamelModel):
    """Email and access password every guest request carries.

    The password may also be sent as ``token``.
    """

    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1, max_length=128)
    data_room_id: UUID | None = None

    @model_validator(mode="before")
    @classmethod
    def accept_token_alias(cls, data: Any) -> Any:
        if isinstance(data, dict) and "password" not in data and "token" in data:
            data = {**data, "password": data["token"]}
        return data

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        """Basic email validation."""
        v = v.strip().lower()
        if "@" not in v or "." not in v.split("@")[-1]:
            raise ValueError("Invalid email address")
        return v


class FileRequest(GuestCredentials):
    """Guest request addressing one file version."""

    file_id: UUID
