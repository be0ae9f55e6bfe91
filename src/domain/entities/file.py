"""Data room file, document content, and comment entities."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import UUID, uuid4


class FileStatus(StrEnum):
    """Review status of a data room file."""

    NOT_OPENED = "not_opened"
    IN_REVIEW = "in_review"
    REVIEW_FAILED = "review_failed"
    BEING_AMENDED = "being_amended"
    COMPLETED = "completed"


@dataclass
class DataRoomFile:
    """Domain entity for one version of a data room file.

    A logical file is a chain: the root row (``parent_file_id`` is None,
    version 1) plus every row whose ``parent_file_id`` points at the root.
    """

    data_room_id: UUID
    organization_id: UUID
    name: str
    file_path: str
    id: UUID = field(default_factory=uuid4)
    folder_id: UUID | None = None
    file_size: int = 0
    mime_type: str | None = None
    is_restricted: bool = False
    parent_file_id: UUID | None = None
    version: int = 1
    status: FileStatus = FileStatus.NOT_OPENED
    uploaded_by: UUID | None = None
    assigned_to: UUID | None = None
    assigned_guest_id: UUID | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)
    deleted_at: datetime | None = None

    @property
    def root_id(self) -> UUID:
        """Id of the chain's root version."""
        return self.parent_file_id or self.id

    @property
    def is_root(self) -> bool:
        return self.parent_file_id is None


@dataclass
class DocumentContent:
    """Rich-text body attached to a single file version."""

    file_id: UUID
    data_room_id: UUID
    organization_id: UUID
    content: str
    id: UUID = field(default_factory=uuid4)
    content_type: str = "rich_text"
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class FileComment:
    """Domain entity for a comment left on a file."""

    file_id: UUID
    data_room_id: UUID
    organization_id: UUID
    commenter_name: str
    commenter_email: str
    comment: str
    id: UUID = field(default_factory=uuid4)
    is_guest: bool = True
    created_at: datetime = field(default_factory=datetime.utcnow)
