"""Task merge log entity."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import StrEnum
from typing import Any
from uuid import UUID, uuid4


class MergeType(StrEnum):
    """Whether a merge is reverted automatically."""

    PERMANENT = "permanent"
    TEMPORARY = "temporary"


class MergeStatus(StrEnum):
    """Merge log state.

    ``completed`` and ``pending_revert`` can move to ``reverted``;
    ``reverted`` is terminal.
    """

    COMPLETED = "completed"
    PENDING_REVERT = "pending_revert"
    REVERTED = "reverted"


@dataclass(frozen=True)
class TaskSnapshot:
    """Display fields of a task captured at merge time."""

    id: UUID
    title: str
    due_date: date | None = None
    priority: str | None = None
    project_title: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "title": self.title,
            "due_date": self.due_date.isoformat() if self.due_date else None,
            "priority": self.priority,
            "project_title": self.project_title,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TaskSnapshot":
        due = data.get("due_date")
        return cls(
            id=UUID(str(data["id"])),
            title=data.get("title") or "",
            due_date=date.fromisoformat(due[:10]) if due else None,
            priority=data.get("priority"),
            project_title=data.get("project_title"),
        )


@dataclass
class MergeLog:
    """Record of a bulk task reassignment from one user to another."""

    organization_id: UUID
    performed_by: UUID
    source_user_id: UUID
    target_user_id: UUID
    merge_type: MergeType
    id: UUID = field(default_factory=uuid4)
    temporary_start_date: date | None = None
    temporary_end_date: date | None = None
    tasks_transferred: list[TaskSnapshot] = field(default_factory=list)
    status: MergeStatus = MergeStatus.COMPLETED
    created_at: datetime = field(default_factory=datetime.utcnow)
    completed_at: datetime | None = None
    reverted_at: datetime | None = None

    @property
    def task_count(self) -> int:
        return len(self.tasks_transferred)

    @property
    def is_revertible(self) -> bool:
        return self.status in (MergeStatus.COMPLETED, MergeStatus.PENDING_REVERT)

    def is_due_for_revert(self, today: date) -> bool:
        """Temporary merges revert on or after their end date."""
        return (
            self.merge_type == MergeType.TEMPORARY
            and self.status == MergeStatus.PENDING_REVERT
            and self.temporary_end_date is not None
            and self.temporary_end_date <= today
        )

    def mark_reverted(self, at: datetime | None = None) -> None:
        self.status = MergeStatus.REVERTED
        self.reverted_at = at or datetime.utcnow()
