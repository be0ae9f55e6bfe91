"""Guest invitation lifecycle: invite, inspect, sign NDA, accept."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID

import structlog

from core.exceptions import (
    DataRoomNotFoundError,
    InsufficientPermissionsError,
    InviteEmailMismatchError,
    InviteExpiredError,
    InviteNotFoundError,
    InviteNotValidError,
    NdaRequiredError,
)
from domain.entities.activity import InviteAccepted, InviteSent, NdaSigned
from domain.entities.data_room import DataRoom, NdaSignature
from domain.entities.guest_invite import INVITE_EXPIRY_DAYS, GuestInvite, InviteStatus
from domain.entities.profile import MANAGER_ROLES
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.activity_service import ActivityService
from domain.services.guest_auth_service import (
    generate_access_password,
    hash_access_password,
    normalize_email,
)

logger = structlog.get_logger()


@dataclass
class InviteDetails:
    invite: GuestInvite
    data_room: DataRoom


@dataclass
class AcceptedInvite:
    """An accepted invitation and its one-time plaintext password."""

    invite: GuestInvite
    password: str


@dataclass
class NdaSignResult:
    invite: GuestInvite
    already_signed: bool = False


class GuestInviteService:
    """Service layer for guest invitations."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        activity_service: Optional[ActivityService] = None,
        expiry_days: int = INVITE_EXPIRY_DAYS,
    ) -> None:
        self._uow_factory = uow_factory
        self._activity = activity_service
        self._expiry_days = expiry_days

    async def create_invite(
        self, data_room_id: UUID, email: str, invited_by: UUID
    ) -> tuple[GuestInvite, bool]:
        """Invite a guest to a data room. Admins and moderators only.

        If the email already has a pending invitation to the room, its
        expiry is pushed out instead of creating a duplicate.

        Returns:
            The invitation and whether an existing one was refreshed.
        """
        normalized = normalize_email(email)
        async with self._uow_factory() as uow:
            room = await uow.data_rooms.get(data_room_id)
            if not room:
                raise DataRoomNotFoundError(str(data_room_id))

            role = await uow.organizations.get_role(room.organization_id, invited_by)
            if role not in MANAGER_ROLES:
                raise InsufficientPermissionsError("admin or moderator")

            expires_at = datetime.utcnow() + timedelta(days=self._expiry_days)
            existing = await uow.guest_invites.get_pending_for_room_email(room.id, normalized)
            if existing:
                existing.expires_at = expires_at
                existing.invited_by = invited_by
                invite = await uow.guest_invites.update(existing)
            else:
                invite = await uow.guest_invites.create(
                    GuestInvite(
                        data_room_id=room.id,
                        organization_id=room.organization_id,
                        email=normalized,
                        invited_by=invited_by,
                        expires_at=expires_at,
                    )
                )

            inviter = await uow.organizations.get_profile(invited_by)
            await uow.commit()

        resent = existing is not None
        logger.info("invite_sent", invite_id=str(invite.id), data_room_id=str(room.id), resent=resent)
        if self._activity:
            await self._activity.record(
                data_room_id=room.id,
                organization_id=room.organization_id,
                actor_name=inviter.display_name if inviter else "Admin",
                actor_email=inviter.email if inviter else "",
                is_guest=False,
                details=InviteSent(email=normalized, resent=resent),
            )
        return invite, resent

    async def get_invite_details(
        self, access_id: str, email: str, now: datetime | None = None
    ) -> InviteDetails:
        """Look up an invitation from its link token, for the NDA and accept pages."""
        async with self._uow_factory() as uow:
            invite = await self._load_for_email(uow, access_id, email)
            if invite.status == InviteStatus.REVOKED:
                raise InviteNotValidError()
            if invite.is_expired(now):
                raise InviteExpiredError()

            room = await uow.data_rooms.get(invite.data_room_id)
            if not room:
                raise DataRoomNotFoundError(str(invite.data_room_id))
            return InviteDetails(invite=invite, data_room=room)

    async def sign_nda(
        self,
        access_id: str,
        signer_email: str,
        signer_name: str,
        ip_address: str | None = None,
    ) -> NdaSignResult:
        """Record the guest's NDA signature. Signing twice is a no-op."""
        async with self._uow_factory() as uow:
            invite = await self._load_for_email(uow, access_id, signer_email)
            if invite.status not in (InviteStatus.PENDING, InviteStatus.ACCEPTED):
                raise InviteNotValidError()
            if invite.nda_signed_at:
                return NdaSignResult(invite=invite, already_signed=True)

            room = await uow.data_rooms.get(invite.data_room_id)
            await uow.data_rooms.add_nda_signature(
                NdaSignature(
                    data_room_id=invite.data_room_id,
                    signer_name=signer_name.strip(),
                    signer_email=normalize_email(signer_email),
                    ip_address=ip_address,
                    nda_content_hash=room.nda_content_hash if room else None,
                )
            )
            invite.nda_signed_at = datetime.utcnow()
            invite.guest_name = signer_name.strip()
            invite = await uow.guest_invites.update(invite)
            await uow.commit()

        if self._activity:
            await self._activity.record_for_guest(invite, NdaSigned(ip_address=ip_address))
        return NdaSignResult(invite=invite)

    async def accept_invite(
        self, access_id: str, email: str, now: datetime | None = None
    ) -> AcceptedInvite:
        """Accept an invitation and issue the guest's access password.

        The plaintext password is returned once and only its hash is stored.
        Accepting again issues a fresh password.
        """
        async with self._uow_factory() as uow:
            invite = await self._load_for_email(uow, access_id, email)
            if invite.status == InviteStatus.REVOKED:
                raise InviteNotValidError()
            if invite.is_expired(now):
                raise InviteExpiredError()

            room = await uow.data_rooms.get(invite.data_room_id)
            if not room:
                raise DataRoomNotFoundError(str(invite.data_room_id))
            if room.nda_required and not invite.nda_signed_at:
                raise NdaRequiredError()

            password = generate_access_password()
            invite.accept(hash_access_password(password))
            invite = await uow.guest_invites.update(invite)
            await uow.commit()

        logger.info("invite_accepted", invite_id=str(invite.id), data_room_id=str(invite.data_room_id))
        if self._activity:
            await self._activity.record_for_guest(invite, InviteAccepted())
        return AcceptedInvite(invite=invite, password=password)

    async def _load_for_email(
        self, uow: IUnitOfWork, access_id: str, email: str
    ) -> GuestInvite:
        invite = await uow.guest_invites.get_by_access_id(access_id)
        if not invite:
            raise InviteNotFoundError()
        if normalize_email(invite.email) != normalize_email(email):
            raise InviteEmailMismatchError()
        return invite
