"""SQLAlchemy implementation of Organization repository."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.profile import OrganizationRole, Profile
from infrastructure.database.models import ProfileModel, UserRoleModel


class SQLAlchemyOrganizationRepository:
    """SQLAlchemy implementation of IOrganizationRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_role(self, organization_id: UUID, user_id: UUID) -> OrganizationRole | None:
        """Get a user's role in an organization."""
        stmt = select(UserRoleModel.role).where(
            UserRoleModel.organization_id == organization_id,
            UserRoleModel.user_id == user_id,
        )
        result = await self._session.execute(stmt)
        role = result.scalar_one_or_none()
        return OrganizationRole(role) if role else None

    async def get_profile(self, user_id: UUID) -> Profile | None:
        """Get a profile by user ID."""
        model = await self._session.get(ProfileModel, user_id)
        if not model:
            return None
        return Profile(
            id=model.id,
            email=model.email,
            full_name=model.full_name,
            created_at=model.created_at,
        )

    async def get_profile_names(self, user_ids: list[UUID]) -> dict[UUID, str]:
        """Map user IDs to display names."""
        if not user_ids:
            return {}
        stmt = select(ProfileModel).where(ProfileModel.id.in_(user_ids))
        result = await self._session.execute(stmt)
        return {model.id: model.full_name or model.email for model in result.scalars()}
