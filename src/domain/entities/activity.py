"""Data room activity event entity and per-action detail payloads.

Each action code has exactly one payload type. ``ACTIVITY_DETAIL_TYPES``
is the registry used to rebuild payloads from stored JSON, so adding an
action without a payload class fails loudly at import time.
"""

from dataclasses import asdict, dataclass, field, fields
from datetime import datetime
from enum import StrEnum
from typing import Any, ClassVar, Union
from uuid import UUID, uuid4


class ActivityAction(StrEnum):
    """Closed set of audit action codes."""

    DATA_ROOM_ACCESSED = "data_room_accessed"
    FOLDER_VIEWED = "folder_viewed"
    FILE_UPLOADED = "file_uploaded"
    FILE_DOWNLOADED = "file_downloaded"
    FILE_STATUS_CHANGED = "file_status_changed"
    COMMENT_ADDED = "comment_added"
    MESSAGE_SENT = "message_sent"
    DOCUMENT_EDITED = "document_edited"
    DOCUMENT_VERSION_SAVED = "document_version_saved"
    VERSION_RESTORED = "version_restored"
    PERMISSIONS_CHANGED = "permissions_changed"
    INVITE_SENT = "invite_sent"
    INVITE_ACCEPTED = "invite_accepted"
    NDA_SIGNED = "nda_signed"


@dataclass(frozen=True)
class _Details:
    action: ClassVar[ActivityAction]

    def to_dict(self) -> dict[str, Any]:
        return {key: _jsonable(value) for key, value in asdict(self).items()}

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "_Details":
        data = data or {}
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})


def _jsonable(value: Any) -> Any:
    if isinstance(value, (UUID, datetime)):
        return str(value)
    return value


@dataclass(frozen=True)
class DataRoomAccessed(_Details):
    action = ActivityAction.DATA_ROOM_ACCESSED


@dataclass(frozen=True)
class FolderViewed(_Details):
    action = ActivityAction.FOLDER_VIEWED
    folder_id: str = ""


@dataclass(frozen=True)
class FileUploaded(_Details):
    action = ActivityAction.FILE_UPLOADED
    file_id: str = ""
    file_name: str = ""
    file_size: int = 0
    mime_type: str | None = None


@dataclass(frozen=True)
class FileDownloaded(_Details):
    action = ActivityAction.FILE_DOWNLOADED
    file_id: str = ""
    file_name: str = ""


@dataclass(frozen=True)
class FileStatusChanged(_Details):
    action = ActivityAction.FILE_STATUS_CHANGED
    file_id: str = ""
    new_status: str = ""


@dataclass(frozen=True)
class CommentAdded(_Details):
    action = ActivityAction.COMMENT_ADDED
    file_id: str = ""
    file_name: str = ""


@dataclass(frozen=True)
class MessageSent(_Details):
    action = ActivityAction.MESSAGE_SENT


@dataclass(frozen=True)
class DocumentEdited(_Details):
    action = ActivityAction.DOCUMENT_EDITED
    file_id: str = ""
    file_name: str = ""


@dataclass(frozen=True)
class DocumentVersionSaved(_Details):
    action = ActivityAction.DOCUMENT_VERSION_SAVED
    file_id: str = ""
    file_name: str = ""
    new_version: int = 0


@dataclass(frozen=True)
class VersionRestored(_Details):
    action = ActivityAction.VERSION_RESTORED
    file_name: str = ""
    restored_version: int = 0
    new_version: int = 0


@dataclass(frozen=True)
class PermissionsChanged(_Details):
    action = ActivityAction.PERMISSIONS_CHANGED
    file_id: str = ""
    file_name: str = ""
    is_restricted: bool = False
    granted_to_count: int = 0


@dataclass(frozen=True)
class InviteSent(_Details):
    action = ActivityAction.INVITE_SENT
    email: str = ""
    resent: bool = False


@dataclass(frozen=True)
class InviteAccepted(_Details):
    action = ActivityAction.INVITE_ACCEPTED


@dataclass(frozen=True)
class NdaSigned(_Details):
    action = ActivityAction.NDA_SIGNED
    ip_address: str | None = None


ActivityDetails = Union[
    DataRoomAccessed,
    FolderViewed,
    FileUploaded,
    FileDownloaded,
    FileStatusChanged,
    CommentAdded,
    MessageSent,
    DocumentEdited,
    DocumentVersionSaved,
    VersionRestored,
    PermissionsChanged,
    InviteSent,
    InviteAccepted,
    NdaSigned,
]

ACTIVITY_DETAIL_TYPES: dict[ActivityAction, type[_Details]] = {
    cls.action: cls for cls in ActivityDetails.__args__  # type: ignore[attr-defined]
}

_missing = set(ActivityAction) - set(ACTIVITY_DETAIL_TYPES)
if _missing:
    raise RuntimeError(f"Activity actions without a details type: {sorted(_missing)}")


def details_from_dict(action: ActivityAction, data: dict[str, Any] | None) -> ActivityDetails:
    """Rebuild the typed payload for a stored activity row."""
    return ACTIVITY_DETAIL_TYPES[action].from_dict(data)  # type: ignore[return-value]


@dataclass
class DataRoomActivity:
    """Append-only audit record for a guest-observable action."""

    data_room_id: UUID
    organization_id: UUID
    user_name: str
    user_email: str
    details: ActivityDetails
    id: UUID = field(default_factory=uuid4)
    is_guest: bool = True
    created_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def action(self) -> ActivityAction:
        return self.details.action
