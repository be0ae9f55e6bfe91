"""Guest invitation repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.guest_invite import GuestInvite


class IGuestInviteRepository(Protocol):
    """Repository interface for GuestInvite entities."""

    async def create(self, invite: GuestInvite) -> GuestInvite:
        """Create a new invitation."""
        ...

    async def get(self, id: UUID) -> GuestInvite | None:
        """Get an invitation by its primary key."""
        ...

    async def get_by_access_id(self, access_id: str) -> GuestInvite | None:
        """Get an invitation by the opaque token used in invite links."""
        ...

    async def get_latest_accepted(
        self, email: str, data_room_id: UUID | None = None
    ) -> GuestInvite | None:
        """Get the accepted invitation for an email with the latest expiry."""
        ...

    async def get_pending_for_room_email(
        self, data_room_id: UUID, email: str
    ) -> GuestInvite | None:
        """Get a pending invitation for a data room and email."""
        ...

    async def get_many(self, ids: list[UUID]) -> list[GuestInvite]:
        """Get invitations by ID."""
        ...

    async def list_nda_signed(self, data_room_id: UUID) -> list[GuestInvite]:
        """List accepted invitations in a room whose guest has signed the NDA."""
        ...

    async def update(self, invite: GuestInvite) -> GuestInvite:
        """Persist changes to an invitation."""
        ...
