"""File permission grant entity and access levels."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import UUID, uuid4


class PermissionLevel(StrEnum):
    """Level stored on an explicit grant row."""

    VIEW = "view"
    EDIT = "edit"


class AccessLevel(StrEnum):
    """Effective access a guest has to a file."""

    NONE = "none"
    VIEW = "view"
    EDIT = "edit"

    @property
    def rank(self) -> int:
        return _ACCESS_RANK[self]

    def allows(self, required: "AccessLevel") -> bool:
        """Check whether this level covers the required one."""
        return self.rank >= required.rank


_ACCESS_RANK = {
    AccessLevel.NONE: 0,
    AccessLevel.VIEW: 1,
    AccessLevel.EDIT: 2,
}


@dataclass
class FilePermission:
    """Explicit allow-list entry for a restricted root file.

    Exactly one of ``guest_invite_id`` (external guest) or ``user_id``
    (organization member) is set.
    """

    file_id: UUID
    id: UUID = field(default_factory=uuid4)
    guest_invite_id: UUID | None = None
    user_id: UUID | None = None
    permission_level: PermissionLevel = PermissionLevel.VIEW
    created_at: datetime = field(default_factory=datetime.utcnow)
