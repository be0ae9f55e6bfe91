"""Data room repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.data_room import DataRoom, DataRoomFolder, DataRoomMessage, NdaSignature


class IDataRoomRepository(Protocol):
    """Repository interface for data rooms and their folders, messages and NDAs."""

    async def get(self, id: UUID) -> DataRoom | None:
        """Get a data room by ID."""
        ...

    async def create(self, data_room: DataRoom) -> DataRoom:
        """Create a new data room."""
        ...

    async def get_folder(self, data_room_id: UUID, folder_id: UUID) -> DataRoomFolder | None:
        """Get a non-deleted folder inside a data room."""
        ...

    async def list_folders(
        self, data_room_id: UUID, parent_id: UUID | None
    ) -> list[DataRoomFolder]:
        """List non-deleted folders directly under ``parent_id`` (None = top level)."""
        ...

    async def create_folder(self, folder: DataRoomFolder) -> DataRoomFolder:
        """Create a folder."""
        ...

    async def add_message(self, message: DataRoomMessage) -> DataRoomMessage:
        """Append a chat message to a data room."""
        ...

    async def add_nda_signature(self, signature: NdaSignature) -> NdaSignature:
        """Record an NDA signature."""
        ...

    async def get_latest_nda_signature(
        self, data_room_id: UUID, email: str
    ) -> NdaSignature | None:
        """Get the most recent NDA signature by an email in a data room."""
        ...
