"""Pydantic schemas for guest file operations."""

from datetime import datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import Field, model_validator

from api.v1.schemas.common import CamelModel, FileRequest
from api.v1.schemas.guest import FileResponse


class AddCommentRequest(FileRequest):
    comment: str = Field(..., min_length=1, max_length=5000)


class CommentResponse(CamelModel):
    id: UUID
    file_id: UUID
    commenter_name: str
    commenter_email: str
    comment: str
    is_guest: bool
    created_at: datetime


class CommentListResponse(CamelModel):
    data: list[CommentResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class UpdateStatusRequest(FileRequest):
    status: str = Field(..., min_length=1, max_length=50)


class DownloadRequest(FileRequest):
    mode: Literal["download", "preview"] = "download"


class DownloadResponse(CamelModel):
    url: str
    file_name: str
    mime_type: str | None = None
    expires_in: int


class GrantSchema(CamelModel):
    """Who a restricted file is shared with. ``type`` is ``team`` or ``guest``."""

    id: UUID
    type: Literal["team", "guest"]
    permission_level: Literal["view", "edit"] = "view"


class PermissionsRequest(FileRequest):
    action: Literal["get", "set"] = "get"
    is_restricted: bool | None = None
    permissions: list[GrantSchema] = Field(default_factory=list)

    @model_validator(mode="after")
    def require_flag_for_set(self) -> "PermissionsRequest":
        if self.action == "set" and self.is_restricted is None:
            raise ValueError("isRestricted is required when action is 'set'")
        return self


class TeamMemberSchema(CamelModel):
    id: UUID
    name: str
    is_creator: bool = False


class GuestSchema(CamelModel):
    id: UUID
    email: str
    name: str


class GrantResponse(CamelModel):
    id: UUID
    guest_invite_id: UUID | None = None
    user_id: UUID | None = None
    permission_level: str


class PermissionsResponse(CamelModel):
    file_id: UUID
    is_restricted: bool
    team_members: list[TeamMemberSchema] = Field(default_factory=list)
    guests: list[GuestSchema] = Field(default_factory=list)
    permissions: list[GrantResponse] = Field(default_factory=list)


class UploadResponse(CamelModel):
    data: FileResponse
    message: str = "File uploaded successfully"
