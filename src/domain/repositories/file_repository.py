"""Data room file, document and comment repository protocols."""

from typing import Protocol
from uuid import UUID

from domain.entities.file import DataRoomFile, DocumentContent, FileComment


class IFileRepository(Protocol):
    """Repository interface for DataRoomFile entities.

    Soft-deleted rows are invisible to every method.
    """

    async def get(self, id: UUID) -> DataRoomFile | None:
        """Get a non-deleted file by ID."""
        ...

    async def create(self, file: DataRoomFile) -> DataRoomFile:
        """Create a new file row."""
        ...

    async def update(self, file: DataRoomFile) -> DataRoomFile:
        """Persist changes to a file row."""
        ...

    async def list_chain(self, data_room_id: UUID, root_id: UUID) -> list[DataRoomFile]:
        """List every version of a chain, newest version first."""
        ...

    async def lock_chain(self, root_id: UUID) -> None:
        """Lock a chain's root row for the rest of the transaction."""
        ...

    async def get_max_version(self, data_room_id: UUID, root_id: UUID) -> int:
        """Highest version number in a chain (0 when the chain is empty)."""
        ...

    async def list_for_room(self, data_room_id: UUID) -> list[DataRoomFile]:
        """List every non-deleted file row in a data room."""
        ...


class IDocumentRepository(Protocol):
    """Repository interface for per-version rich-text content."""

    async def get(self, id: UUID) -> DocumentContent | None:
        """Get a content row by ID."""
        ...

    async def get_for_file(self, file_id: UUID) -> DocumentContent | None:
        """Get the content row attached to a file version."""
        ...

    async def create(self, content: DocumentContent) -> DocumentContent:
        """Create a content row."""
        ...

    async def update(self, content: DocumentContent) -> DocumentContent:
        """Persist changes to a content row."""
        ...


class ICommentRepository(Protocol):
    """Repository interface for file comments."""

    async def create(self, comment: FileComment) -> FileComment:
        """Create a comment."""
        ...

    async def list_for_file(self, file_id: UUID) -> list[FileComment]:
        """List comments on a file, oldest first."""
        ...
