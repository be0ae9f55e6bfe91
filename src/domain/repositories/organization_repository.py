"""Organization membership and profile repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.profile import OrganizationRole, Profile


class IOrganizationRepository(Protocol):
    """Repository interface for roles and profile lookups."""

    async def get_role(self, organization_id: UUID, user_id: UUID) -> OrganizationRole | None:
        """Get a user's role in an organization."""
        ...

    async def get_profile(self, user_id: UUID) -> Profile | None:
        """Get a profile by user ID."""
        ...

    async def get_profile_names(self, user_ids: list[UUID]) -> dict[UUID, str]:
        """Map user IDs to display names."""
        ...
