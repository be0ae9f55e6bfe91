"""Data room domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4


@dataclass
class DataRoom:
    """Domain entity for a data room shared with external guests."""

    organization_id: UUID
    name: str
    id: UUID = field(default_factory=uuid4)
    description: str | None = None
    created_by: UUID | None = None
    nda_required: bool = False
    nda_content: str | None = None
    nda_content_hash: str | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class DataRoomFolder:
    """Domain entity for a folder inside a data room."""

    data_room_id: UUID
    name: str
    id: UUID = field(default_factory=uuid4)
    parent_id: UUID | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    deleted_at: datetime | None = None


@dataclass
class DataRoomMessage:
    """Domain entity for a chat message posted in a data room."""

    data_room_id: UUID
    organization_id: UUID
    sender_name: str
    sender_email: str
    message: str
    id: UUID = field(default_factory=uuid4)
    sender_id: UUID | None = None
    is_guest: bool = True
    created_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class NdaSignature:
    """Domain entity for a recorded NDA signature."""

    data_room_id: UUID
    signer_name: str
    signer_email: str
    id: UUID = field(default_factory=uuid4)
    ip_address: str | None = None
    nda_content_hash: str | None = None
    signed_at: datetime = field(default_factory=datetime.utcnow)
