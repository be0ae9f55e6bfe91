"""Task merge log repository protocol."""

from datetime import date
from typing import Protocol
from uuid import UUID

from domain.entities.merge import MergeLog


class IMergeLogRepository(Protocol):
    """Repository interface for MergeLog entities."""

    async def create(self, merge_log: MergeLog) -> MergeLog:
        """Create a merge log entry."""
        ...

    async def get(self, id: UUID, for_update: bool = False) -> MergeLog | None:
        """Get a merge log entry, optionally locking it."""
        ...

    async def update(self, merge_log: MergeLog) -> MergeLog:
        """Persist status changes to a merge log entry."""
        ...

    async def list_for_organization(self, organization_id: UUID) -> list[MergeLog]:
        """List merge log entries of an organization, newest first."""
        ...

    async def list_due_for_revert(self, today: date) -> list[MergeLog]:
        """List pending temporary merges whose end date is on or before ``today``."""
        ...
