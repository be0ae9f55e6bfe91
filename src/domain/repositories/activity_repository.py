"""Activity repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.activity import DataRoomActivity


class IActivityRepository(Protocol):
    """Repository interface for DataRoomActivity entries (append-only)."""

    async def create(self, activity: DataRoomActivity) -> DataRoomActivity:
        """Append a new activity entry."""
        ...

    async def get_for_data_room(
        self,
        data_room_id: UUID,
        limit: int = 100,
    ) -> list[DataRoomActivity]:
        """Get activity entries for a data room, newest first."""
        ...
