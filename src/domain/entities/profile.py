"""Profile and organization membership entities."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import UUID, uuid4


class OrganizationRole(StrEnum):
    """Role a user holds inside an organization."""

    ADMIN = "admin"
    MODERATOR = "moderator"
    MEMBER = "member"


# Roles allowed to invite guests and merge or revert tasks
MANAGER_ROLES = frozenset({OrganizationRole.ADMIN, OrganizationRole.MODERATOR})


@dataclass
class Profile:
    """Domain entity for a platform user profile (synced from Supabase)."""

    id: UUID = field(default_factory=uuid4)
    email: str = ""
    full_name: str | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def display_name(self) -> str:
        return self.full_name or self.email
