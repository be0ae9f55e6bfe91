"""Pydantic schemas for file version history."""

from uuid import UUID

from pydantic import Field

from api.v1.schemas.common import CamelModel, GuestCredentials
from api.v1.schemas.guest import FileResponse


class RestoreVersionRequest(GuestCredentials):
    version_id: UUID


class VersionListResponse(CamelModel):
    root_file_id: UUID
    versions: list[FileResponse]
    profile_map: dict[str, str] = Field(default_factory=dict)


class RestoreVersionResponse(CamelModel):
    data: FileResponse
    restored_version: int
    new_version: int
