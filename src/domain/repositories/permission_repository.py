"""File permission repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.permission import FilePermission


class IFilePermissionRepository(Protocol):
    """Repository interface for explicit file permission grants."""

    async def get_for_guest(
        self, file_id: UUID, guest_invite_id: UUID
    ) -> FilePermission | None:
        """Get the grant for a (root file, invitation) pair."""
        ...

    async def list_for_guest(
        self, guest_invite_id: UUID, file_ids: list[UUID]
    ) -> list[FilePermission]:
        """List a guest's grants on the given root files."""
        ...

    async def list_for_file(self, file_id: UUID) -> list[FilePermission]:
        """List all grants on a root file."""
        ...

    async def replace_for_file(
        self, file_id: UUID, permissions: list[FilePermission]
    ) -> list[FilePermission]:
        """Replace every grant on a root file with the given set."""
        ...
