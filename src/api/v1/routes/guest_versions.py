"""Guest file version history API routes."""

from fastapi import APIRouter, Depends, Request

from api.v1.dependencies import get_version_service
from api.v1.schemas.common import FileRequest
from api.v1.schemas.guest import build_file_response
from api.v1.schemas.versions import (
    RestoreVersionRequest,
    RestoreVersionResponse,
    VersionListResponse,
)
from core.rate_limit import GUEST_READ_LIMIT, GUEST_WRITE_LIMIT, limiter
from domain.services.version_service import VersionService

router = APIRouter(prefix="/guest/files/versions", tags=["guest-versions"])


@router.post(
    "",
    response_model=VersionListResponse,
    summary="List file versions",
    responses={
        200: {"description": "Versions of the file, newest first"},
        401: {"description": "Invalid credentials or access expired"},
        403: {"description": "File is restricted or in another data room"},
        404: {"description": "File not found"},
    },
)
@limiter.limit(GUEST_READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_versions(
    request: Request,
    body: FileRequest,
    service: VersionService = Depends(get_version_service),
) -> VersionListResponse:
    history = await service.list_versions(
        body.email, body.password, body.file_id, data_room_id=body.data_room_id
    )
    return VersionListResponse(
        root_file_id=history.root_file_id,
        versions=[build_file_response(v, root_file_id=history.root_file_id) for v in history.versions],
        profile_map={str(k): v for k, v in history.profile_map.items()},
    )


@router.post(
    "/restore",
    response_model=RestoreVersionResponse,
    summary="Restore a file version",
    responses={
        200: {"description": "Old version copied to a new latest version"},
        401: {"description": "Invalid credentials or access expired"},
        403: {"description": "Edit access required"},
        404: {"description": "Version not found"},
    },
)
@limiter.limit(GUEST_WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def restore_version(
    request: Request,
    body: RestoreVersionRequest,
    service: VersionService = Depends(get_version_service),
) -> RestoreVersionResponse:
    """Restore an old version by appending a copy of it as the newest version."""
    restored = await service.restore_version(
        body.email, body.password, body.version_id, data_room_id=body.data_room_id
    )
    return RestoreVersionResponse(
        data=build_file_response(restored.file, root_file_id=restored.file.root_id),
        restored_version=restored.restored_version,
        new_version=restored.new_version,
    )
