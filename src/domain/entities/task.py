"""Task and task assignment entities."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import StrEnum
from uuid import UUID, uuid4


class AssignmentStatus(StrEnum):
    """Whether the assignee has taken on the task."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"


@dataclass
class Task:
    """Domain entity for an organization task."""

    organization_id: UUID
    title: str
    id: UUID = field(default_factory=uuid4)
    priority: str = "medium"
    due_date: date | None = None
    project_title: str | None = None
    assigned_user_id: UUID | None = None
    assignment_status: AssignmentStatus | None = None
    created_by_user_id: UUID | None = None
    last_reminder_sent_at: datetime | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class TaskAssignment:
    """Row linking a user to a task; unique per (task, user)."""

    task_id: UUID
    user_id: UUID
    id: UUID = field(default_factory=uuid4)
    assigned_by: UUID | None = None
    status: AssignmentStatus = AssignmentStatus.ACCEPTED
    created_at: datetime = field(default_factory=datetime.utcnow)
