"""Task repository protocol."""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from domain.entities.task import Task, TaskAssignment


class ITaskRepository(Protocol):
    """Repository interface for tasks and their assignment rows."""

    async def get(self, id: UUID) -> Task | None:
        """Get a task by ID."""
        ...

    async def create(self, task: Task) -> Task:
        """Create a task."""
        ...

    async def get_many_for_update(
        self, organization_id: UUID, task_ids: list[UUID]
    ) -> list[Task]:
        """Get tasks of an organization and lock them for the transaction."""
        ...

    async def get_assignment(self, task_id: UUID, user_id: UUID) -> TaskAssignment | None:
        """Get the assignment row for a (task, user) pair."""
        ...

    async def list_assignments(self, task_id: UUID) -> list[TaskAssignment]:
        """List assignment rows of a task."""
        ...

    async def add_assignment(self, assignment: TaskAssignment) -> TaskAssignment:
        """Insert an assignment row."""
        ...

    async def delete_assignment(self, task_id: UUID, user_id: UUID) -> bool:
        """Delete the assignment row for a (task, user) pair if present."""
        ...

    async def reassign_primary_assignee(self, task_id: UUID, user_id: UUID) -> Task:
        """Set a task's primary assignee regardless of who owns it.

        Cross-user write reserved for the task merge engine.
        """
        ...

    async def list_pending_assignment_before(self, updated_before: datetime) -> list[Task]:
        """List pending-assignment tasks with a creator and assignee not touched since."""
        ...

    async def claim_reminder(self, task_id: UUID, sent_at: datetime, due_before: datetime) -> bool:
        """Stamp a reminder unless one was already sent after ``due_before``.

        Returns True when this call made the stamp.
        """
        ...
