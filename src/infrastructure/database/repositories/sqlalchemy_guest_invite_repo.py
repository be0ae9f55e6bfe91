"""SQLAlchemy implementation of GuestInvite repository."""

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.guest_invite import GuestInvite, InviteStatus
from infrastructure.database.models import GuestInviteModel


class SQLAlchemyGuestInviteRepository:
    """SQLAlchemy implementation of IGuestInviteRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, invite: GuestInvite) -> GuestInvite:
        """Create a new invitation."""
        model = self._to_model(invite)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def get(self, id: UUID) -> GuestInvite | None:
        """Get an invitation by its primary key."""
        model = await self._session.get(GuestInviteModel, id)
        return self._to_entity(model) if model else None

    async def get_by_access_id(self, access_id: str) -> GuestInvite | None:
        """Get an invitation by its link token."""
        stmt = select(GuestInviteModel).where(GuestInviteModel.access_id == access_id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_latest_accepted(
        self, email: str, data_room_id: UUID | None = None
    ) -> GuestInvite | None:
        """Get the accepted invitation for an email with the latest expiry."""
        stmt = select(GuestInviteModel).where(
            func.lower(GuestInviteModel.email) == email.lower(),
            GuestInviteModel.status == InviteStatus.ACCEPTED.value,
        )
        if data_room_id is not None:
            stmt = stmt.where(GuestInviteModel.data_room_id == data_room_id)
        stmt = stmt.order_by(GuestInviteModel.expires_at.desc()).limit(1)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_pending_for_room_email(
        self, data_room_id: UUID, email: str
    ) -> GuestInvite | None:
        """Get a pending invitation for a data room and email."""
        stmt = (
            select(GuestInviteModel)
            .where(
                GuestInviteModel.data_room_id == data_room_id,
                func.lower(GuestInviteModel.email) == email.lower(),
                GuestInviteModel.status == InviteStatus.PENDING.value,
            )
            .order_by(GuestInviteModel.expires_at.desc())
            .limit(1)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_many(self, ids: list[UUID]) -> list[GuestInvite]:
        """Get invitations by ID."""
        if not ids:
            return []
        stmt = select(GuestInviteModel).where(GuestInviteModel.id.in_(ids))
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def list_nda_signed(self, data_room_id: UUID) -> list[GuestInvite]:
        """List accepted invitations whose guest has signed the NDA."""
        stmt = (
            select(GuestInviteModel)
            .where(
                GuestInviteModel.data_room_id == data_room_id,
                GuestInviteModel.status == InviteStatus.ACCEPTED.value,
                GuestInviteModel.nda_signed_at.is_not(None),
            )
            .order_by(GuestInviteModel.email)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def update(self, invite: GuestInvite) -> GuestInvite:
        """Persist changes to an invitation."""
        model = await self._session.get(GuestInviteModel, invite.id)
        if not model:
            raise ValueError(f"Invite {invite.id} not found")

        model.status = invite.status.value
        model.access_password = invite.access_password
        model.guest_name = invite.guest_name
        model.nda_signed_at = invite.nda_signed_at
        model.expires_at = invite.expires_at
        model.invited_by = invite.invited_by

        await self._session.flush()
        return self._to_entity(model)

    def _to_entity(self, model: GuestInviteModel) -> GuestInvite:
        """Convert ORM model to domain entity."""
        return GuestInvite(
            id=model.id,
            data_room_id=model.data_room_id,
            organization_id=model.organization_id,
            email=model.email,
            access_password=model.access_password,
            access_id=model.access_id,
            status=InviteStatus(model.status),
            guest_name=model.guest_name,
            nda_signed_at=model.nda_signed_at,
            invited_by=model.invited_by,
            created_at=model.created_at,
            expires_at=model.expires_at,
        )

    def _to_model(self, entity: GuestInvite) -> GuestInviteModel:
        """Convert domain entity to ORM model."""
        return GuestInviteModel(
            id=entity.id,
            data_room_id=entity.data_room_id,
            organization_id=entity.organization_id,
            email=entity.email,
            access_password=entity.access_password,
            access_id=entity.access_id,
            status=entity.status.value,
            guest_name=entity.guest_name,
            nda_signed_at=entity.nda_signed_at,
            invited_by=entity.invited_by,
            created_at=entity.created_at,
            expires_at=entity.expires_at,
        )
