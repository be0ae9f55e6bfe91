"""Guest invitation API routes: details, NDA signing and acceptance."""

from fastapi import APIRouter, Depends, Request

from api.v1.dependencies import get_guest_invite_service
from api.v1.schemas.guest import (
    AcceptInviteResponse,
    InviteDetailsResponse,
    InviteLookupRequest,
    SignNdaRequest,
    SignNdaResponse,
)
from core.rate_limit import GUEST_READ_LIMIT, GUEST_WRITE_LIMIT, limiter
from domain.services.guest_invite_service import GuestInviteService

router = APIRouter(prefix="/guest/invites", tags=["guest-invites"])


@router.post(
    "/details",
    response_model=InviteDetailsResponse,
    summary="Get invitation details",
    responses={
        200: {"description": "Invitation and data room summary"},
        400: {"description": "Invitation expired or revoked"},
        403: {"description": "Email does not match the invitation"},
        404: {"description": "Invitation not found"},
    },
)
@limiter.limit(GUEST_READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_invite_details(
    request: Request,
    body: InviteLookupRequest,
    service: GuestInviteService = Depends(get_guest_invite_service),
) -> InviteDetailsResponse:
    """Look up an invitation from its link token, including the NDA text."""
    details = await service.get_invite_details(body.token, body.email)
    return InviteDetailsResponse(
        email=details.invite.email,
        status=details.invite.status.value,
        expires_at=details.invite.expires_at,
        data_room_id=details.data_room.id,
        data_room_name=details.data_room.name,
        nda_required=details.data_room.nda_required,
        nda_content=details.data_room.nda_content,
        nda_signed=details.invite.nda_signed_at is not None,
    )


@router.post(
    "/sign-nda",
    response_model=SignNdaResponse,
    summary="Sign the data room NDA",
    responses={
        200: {"description": "NDA signed, or already signed"},
        400: {"description": "Invitation revoked"},
        403: {"description": "Email does not match the invitation"},
        404: {"description": "Invitation not found"},
    },
)
@limiter.limit(GUEST_WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def sign_nda(
    request: Request,
    body: SignNdaRequest,
    service: GuestInviteService = Depends(get_guest_invite_service),
) -> SignNdaResponse:
    """Record the guest's NDA signature. Signing twice succeeds without a new record."""
    result = await service.sign_nda(
        access_id=body.token,
        signer_email=body.email,
        signer_name=body.name,
        ip_address=request.client.host if request.client else None,
    )
    message = "NDA already signed" if result.already_signed else "NDA signed successfully"
    return SignNdaResponse(message=message, signed_at=result.invite.nda_signed_at)


@router.post(
    "/accept",
    response_model=AcceptInviteResponse,
    summary="Accept an invitation",
    responses={
        200: {"description": "Invitation accepted; access password returned once"},
        400: {"description": "Invitation expired, revoked, or NDA not signed"},
        403: {"description": "Email does not match the invitation"},
        404: {"description": "Invitation not found"},
    },
)
@limiter.limit(GUEST_WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def accept_invite(
    request: Request,
    body: InviteLookupRequest,
    service: GuestInviteService = Depends(get_guest_invite_service),
) -> AcceptInviteResponse:
    """Accept an invitation and receive the data room access password."""
    accepted = await service.accept_invite(body.token, body.email)
    return AcceptInviteResponse(
        data_room_id=accepted.invite.data_room_id,
        email=accepted.invite.email,
        password=accepted.password,
        expires_at=accepted.invite.expires_at,
    )
