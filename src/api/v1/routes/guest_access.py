"""Guest data room API routes: folder listing, activity feed and chat."""

from fastapi import APIRouter, Depends, Request

from api.v1.dependencies import get_data_room_service
from api.v1.schemas.common import GuestCredentials
from api.v1.schemas.guest import (
    ActivityListResponse,
    ActivityResponse,
    BreadcrumbResponse,
    ChatMessageResponse,
    ContentRequest,
    ContentResponse,
    DataRoomResponse,
    FolderResponse,
    SendMessageRequest,
    build_file_response,
)
from core.rate_limit import GUEST_READ_LIMIT, GUEST_WRITE_LIMIT, limiter
from domain.services.data_room_service import DataRoomService

router = APIRouter(prefix="/guest", tags=["guest"])


@router.post(
    "/content",
    response_model=ContentResponse,
    summary="List data room folder contents",
    responses={
        200: {"description": "Folders, files and breadcrumbs visible to the guest"},
        401: {"description": "Invalid credentials or access expired"},
        403: {"description": "NDA updated since signing"},
        404: {"description": "Folder not found"},
    },
)
@limiter.limit(GUEST_READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_content(
    request: Request,
    body: ContentRequest,
    service: DataRoomService = Depends(get_data_room_service),
) -> ContentResponse:
    """List one folder of the guest's data room. Restricted files without a grant are hidden."""
    contents = await service.get_content(
        email=body.email,
        password=body.password,
        folder_id=body.folder_id,
        data_room_id=body.data_room_id,
    )
    return ContentResponse(
        data_room=DataRoomResponse.model_validate(contents.data_room),
        guest_name=contents.invite.display_name,
        current_folder_id=contents.current_folder_id,
        folders=[FolderResponse.model_validate(f) for f in contents.folders],
        files=[
            build_file_response(
                listing.file,
                root_file_id=listing.root_file_id,
                permission_level=listing.permission_level.value,
            )
            for listing in contents.files
        ],
        breadcrumbs=[BreadcrumbResponse(id=b.id, name=b.name) for b in contents.breadcrumbs],
        profile_map={str(k): v for k, v in contents.profile_map.items()},
    )


@router.post(
    "/activity",
    response_model=ActivityListResponse,
    summary="Get data room activity feed",
    responses={
        200: {"description": "Latest activity, newest first"},
        401: {"description": "Invalid credentials or access expired"},
    },
)
@limiter.limit(GUEST_READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_activity(
    request: Request,
    body: GuestCredentials,
    service: DataRoomService = Depends(get_data_room_service),
) -> ActivityListResponse:
    """Latest activity in the guest's data room."""
    activities = await service.get_activity(body.email, body.password, body.data_room_id)
    data = [
        ActivityResponse(
            id=a.id,
            action=a.action.value,
            user_name=a.user_name,
            user_email=a.user_email,
            is_guest=a.is_guest,
            details=a.details.to_dict(),
            created_at=a.created_at,
        )
        for a in activities
    ]
    return ActivityListResponse(data=data, meta={"total": len(data)})


@router.post(
    "/messages",
    response_model=ChatMessageResponse,
    summary="Send a chat message",
    responses={
        200: {"description": "Message posted"},
        400: {"description": "Empty message"},
        401: {"description": "Invalid credentials or access expired"},
    },
)
@limiter.limit(GUEST_WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def send_message(
    request: Request,
    body: SendMessageRequest,
    service: DataRoomService = Depends(get_data_room_service),
) -> ChatMessageResponse:
    """Post a message to the data room chat as the guest."""
    message = await service.send_message(
        body.email, body.password, body.message, body.data_room_id
    )
    return ChatMessageResponse.model_validate(message)
