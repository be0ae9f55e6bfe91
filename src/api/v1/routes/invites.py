"""Admin API routes for inviting guests to data rooms."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_guest_invite_service
from api.v1.schemas.invite import (
    CreateGuestInviteRequest,
    GuestInviteCreatedResponse,
    GuestInviteResponse,
)
from core.rate_limit import limiter
from domain.services.guest_invite_service import GuestInviteService

router = APIRouter(prefix="/data-rooms/{data_room_id}/invites", tags=["invites"])


@router.post(
    "",
    response_model=GuestInviteCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Invite a guest to a data room",
    responses={
        201: {"description": "Invitation created or refreshed"},
        403: {"description": "Insufficient permissions (admin or moderator only)"},
        404: {"description": "Data room not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def create_invite(
    request: Request,
    data_room_id: UUID,
    body: CreateGuestInviteRequest,
    user: CurrentUser,
    service: GuestInviteService = Depends(get_guest_invite_service),
) -> GuestInviteCreatedResponse:
    """Invite a guest by email. Re-inviting a pending guest extends the invitation."""
    invite, resent = await service.create_invite(
        data_room_id=data_room_id,
        email=body.email,
        invited_by=user.id,
    )
    return GuestInviteCreatedResponse(
        data=GuestInviteResponse.model_validate(invite),
        resent=resent,
    )
