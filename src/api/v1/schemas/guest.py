"""Pydantic schemas for the guest data room API."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import Field, field_validator

from api.v1.schemas.common import CamelModel, GuestCredentials


class ContentRequest(GuestCredentials):
    folder_id: UUID | None = None


class DataRoomResponse(CamelModel):
    id: UUID
    organization_id: UUID
    name: str
    description: str | None = None
    nda_required: bool = False


class FolderResponse(CamelModel):
    id: UUID
    name: str
    parent_id: UUID | None = None
    created_at: datetime


class FileResponse(CamelModel):
    """One file version. Listings add the chain root and the guest's access."""

    id: UUID
    data_room_id: UUID
    name: str
    file_path: str
    file_size: int
    mime_type: str | None = None
    folder_id: UUID | None = None
    is_restricted: bool
    parent_file_id: UUID | None = None
    version: int
    status: str
    uploaded_by: UUID | None = None
    assigned_to: UUID | None = None
    assigned_guest_id: UUID | None = None
    created_at: datetime
    updated_at: datetime
    root_file_id: UUID | None = None
    permission_level: str | None = None


class BreadcrumbResponse(CamelModel):
    id: UUID
    name: str


class ContentResponse(CamelModel):
    """Folder listing for a guest."""

    data_room: DataRoomResponse
    guest_name: str
    current_folder_id: UUID | None = None
    folders: list[FolderResponse]
    files: list[FileResponse]
    breadcrumbs: list[BreadcrumbResponse]
    profile_map: dict[str, str] = Field(default_factory=dict)


class ActivityResponse(CamelModel):
    id: UUID
    action: str
    user_name: str
    user_email: str
    is_guest: bool
    details: dict[str, Any]
    created_at: datetime


class ActivityListResponse(CamelModel):
    data: list[ActivityResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class SendMessageRequest(GuestCredentials):
    message: str = Field(..., min_length=1, max_length=5000)

    @field_validator("message")
    @classmethod
    def strip_message(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Message cannot be empty")
        return v


class ChatMessageResponse(CamelModel):
    id: UUID
    data_room_id: UUID
    sender_name: str
    sender_email: str
    message: str
    is_guest: bool
    created_at: datetime


# --- Invitations ---


class InviteLookupRequest(CamelModel):
    """Invitation link token plus the invited email."""

    token: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255)


class SignNdaRequest(InviteLookupRequest):
    name: str = Field(..., min_length=1, max_length=255)


class InviteDetailsResponse(CamelModel):
    email: str
    status: str
    expires_at: datetime
    data_room_id: UUID
    data_room_name: str
    nda_required: bool
    nda_content: str | None = None
    nda_signed: bool


class AcceptInviteResponse(CamelModel):
    """Accepted invitation. ``password`` is shown only once."""

    data_room_id: UUID
    data_room_name: str = ""
    email: str
    password: str
    expires_at: datetime
    message: str = "Invitation accepted successfully"


class SignNdaResponse(CamelModel):
    message: str
    signed_at: datetime | None = None


def build_file_response(
    file: Any,
    root_file_id: UUID | None = None,
    permission_level: str | None = None,
) -> FileResponse:
    """Build a FileResponse from a DataRoomFile, with optional listing fields."""
    response = FileResponse.model_validate(file)
    response.root_file_id = root_file_id
    response.permission_level = permission_level
    return response
