"""Guest file API routes: comments, review status, downloads, uploads and restrictions."""

from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile

from api.v1.dependencies import get_guest_file_service
from api.v1.schemas.common import FileRequest
from api.v1.schemas.files import (
    AddCommentRequest,
    CommentListResponse,
    CommentResponse,
    DownloadRequest,
    DownloadResponse,
    GrantResponse,
    GuestSchema,
    PermissionsRequest,
    PermissionsResponse,
    TeamMemberSchema,
    UpdateStatusRequest,
    UploadResponse,
)
from api.v1.schemas.guest import FileResponse, build_file_response
from core.exceptions import ValidationError
from core.rate_limit import GUEST_READ_LIMIT, GUEST_WRITE_LIMIT, limiter
from domain.entities.permission import PermissionLevel
from domain.services.guest_file_service import (
    FilePermissionsView,
    GrantRequest,
    GuestFileService,
)

router = APIRouter(prefix="/guest/files", tags=["guest-files"])


@router.post(
    "/comments",
    response_model=CommentResponse,
    summary="Comment on a file",
    responses={
        200: {"description": "Comment added"},
        401: {"description": "Invalid credentials or access expired"},
        403: {"description": "File is restricted or in another data room"},
        404: {"description": "File not found"},
    },
)
@limiter.limit(GUEST_WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def add_comment(
    request: Request,
    body: AddCommentRequest,
    service: GuestFileService = Depends(get_guest_file_service),
) -> CommentResponse:
    """Add a comment to a file the guest can view."""
    comment = await service.add_comment(
        body.email, body.password, body.file_id, body.comment, data_room_id=body.data_room_id
    )
    return CommentResponse.model_validate(comment)


@router.post(
    "/comments/list",
    response_model=CommentListResponse,
    summary="List file comments",
    responses={
        200: {"description": "Comments, oldest first"},
        401: {"description": "Invalid credentials or access expired"},
        403: {"description": "File is restricted or in another data room"},
        404: {"description": "File not found"},
    },
)
@limiter.limit(GUEST_READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_comments(
    request: Request,
    body: FileRequest,
    service: GuestFileService = Depends(get_guest_file_service),
) -> CommentListResponse:
    """List the comments on a file the guest can view."""
    comments = await service.list_comments(
        body.email, body.password, body.file_id, data_room_id=body.data_room_id
    )
    data = [CommentResponse.model_validate(c) for c in comments]
    return CommentListResponse(data=data, meta={"total": len(data)})


@router.post(
    "/status",
    response_model=FileResponse,
    summary="Update file review status",
    responses={
        200: {"description": "Status updated"},
        400: {"description": "Status outside the review vocabulary"},
        401: {"description": "Invalid credentials or access expired"},
        403: {"description": "File is restricted or in another data room"},
        404: {"description": "File not found"},
    },
)
@limiter.limit(GUEST_WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_status(
    request: Request,
    body: UpdateStatusRequest,
    service: GuestFileService = Depends(get_guest_file_service),
) -> FileResponse:
    """Set the review status of a file version."""
    file = await service.update_status(
        body.email, body.password, body.file_id, body.status, data_room_id=body.data_room_id
    )
    return build_file_response(file)


@router.post(
    "/download",
    response_model=DownloadResponse,
    summary="Get a signed file URL",
    responses={
        200: {"description": "Time-limited URL"},
        401: {"description": "Invalid credentials or access expired"},
        403: {"description": "File is restricted or in another data room"},
        404: {"description": "File not found"},
        500: {"description": "Storage failure"},
    },
)
@limiter.limit(GUEST_READ_LIMIT)  # type: ignore[untyped-decorator]
async def create_download_url(
    request: Request,
    body: DownloadRequest,
    service: GuestFileService = Depends(get_guest_file_service),
) -> DownloadResponse:
    """Create a signed URL for downloading or previewing a file."""
    link = await service.create_download_url(
        body.email,
        body.password,
        body.file_id,
        mode=body.mode,
        data_room_id=body.data_room_id,
    )
    return DownloadResponse(
        url=link.url,
        file_name=link.file_name,
        mime_type=link.mime_type,
        expires_in=link.expires_in,
    )


@router.post(
    "/upload",
    response_model=UploadResponse,
    summary="Upload a file",
    responses={
        200: {"description": "File stored and recorded"},
        400: {"description": "Unsupported type or file too large"},
        401: {"description": "Invalid credentials or access expired"},
        404: {"description": "Folder not found"},
        500: {"description": "Storage failure"},
    },
)
@limiter.limit(GUEST_WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def upload_file(
    request: Request,
    email: str = Form(...),
    password: str | None = Form(None),
    token: str | None = Form(None),
    folder_id: UUID | None = Form(None, alias="folderId"),
    data_room_id: UUID | None = Form(None, alias="dataRoomId"),
    file: UploadFile = File(...),
    service: GuestFileService = Depends(get_guest_file_service),
) -> UploadResponse:
    """Upload a file into the guest's data room (multipart form)."""
    secret = password or token
    if not secret:
        raise ValidationError("password is required", details={"field": "password"})

    data = await file.read()
    created = await service.upload_file(
        email=email,
        password=secret,
        file_name=file.filename or "upload",
        content_type=file.content_type or "application/octet-stream",
        data=data,
        folder_id=folder_id,
        data_room_id=data_room_id,
    )
    return UploadResponse(data=build_file_response(created))


@router.post(
    "/permissions",
    response_model=PermissionsResponse,
    summary="Get or set file restrictions",
    responses={
        200: {"description": "Current restriction state"},
        400: {"description": "Malformed request"},
        401: {"description": "Invalid credentials or access expired"},
        403: {"description": "Not allowed to manage this file's restrictions"},
        404: {"description": "File not found"},
    },
)
@limiter.limit(GUEST_WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def file_permissions(
    request: Request,
    body: PermissionsRequest,
    service: GuestFileService = Depends(get_guest_file_service),
) -> PermissionsResponse:
    """Read (``action=get``) or replace (``action=set``) a file's restriction and grants."""
    if body.action == "set":
        view = await service.set_permissions(
            body.email,
            body.password,
            body.file_id,
            is_restricted=bool(body.is_restricted),
            grants=[
                GrantRequest(
                    reference_id=g.id,
                    grantee_type=g.type,
                    permission_level=PermissionLevel(g.permission_level),
                )
                for g in body.permissions
            ],
            data_room_id=body.data_room_id,
        )
    else:
        view = await service.get_permissions(
            body.email, body.password, body.file_id, data_room_id=body.data_room_id
        )
    return _build_permissions_response(view)


def _build_permissions_response(view: FilePermissionsView) -> PermissionsResponse:
    return PermissionsResponse(
        file_id=view.file.id,
        is_restricted=view.file.is_restricted,
        team_members=[TeamMemberSchema(**member) for member in view.team],
        guests=[
            GuestSchema(id=g.id, email=g.email, name=g.display_name) for g in view.guests
        ],
        permissions=[
            GrantResponse(
                id=p.id,
                guest_invite_id=p.guest_invite_id,
                user_id=p.user_id,
                permission_level=p.permission_level.value,
            )
            for p in view.grants
        ],
    )
