"""Notification entity and type constants."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4


class NotificationTypes:
    """Notification type constants."""

    TASK_MERGE = "task_merge"
    MERGE_AUTO_REVERTED = "merge_auto_reverted"
    MERGE_REVERTED = "merge_reverted"
    TASK_REQUEST_REMINDER = "task_request_reminder"


@dataclass
class Notification:
    """In-app notification delivered to one user."""

    user_id: UUID
    type: str
    title: str
    message: str
    id: UUID = field(default_factory=uuid4)
    organization_id: UUID | None = None
    reference_id: UUID | None = None
    reference_type: str | None = None
    is_read: bool = False
    created_at: datetime = field(default_factory=datetime.utcnow)
