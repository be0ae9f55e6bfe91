"""SQLAlchemy implementation of Task repository."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import delete, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.task import AssignmentStatus, Task, TaskAssignment
from infrastructure.database.models import TaskAssignmentModel, TaskModel


class SQLAlchemyTaskRepository:
    """SQLAlchemy implementation of ITaskRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Task | None:
        """Get a task by ID."""
        model = await self._session.get(TaskModel, id)
        return self._to_entity(model) if model else None

    async def create(self, task: Task) -> Task:
        """Create a task."""
        model = TaskModel(
            id=task.id,
            organization_id=task.organization_id,
            title=task.title,
            priority=task.priority,
            due_date=task.due_date,
            project_title=task.project_title,
            assigned_user_id=task.assigned_user_id,
            assignment_status=task.assignment_status.value if task.assignment_status else None,
            created_by_user_id=task.created_by_user_id,
            last_reminder_sent_at=task.last_reminder_sent_at,
            created_at=task.created_at,
            updated_at=task.updated_at,
        )
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)

    async def get_many_for_update(
        self, organization_id: UUID, task_ids: list[UUID]
    ) -> list[Task]:
        """Get tasks of an organization and lock their rows.

        Rows are locked in id order so concurrent merges cannot deadlock.
        """
        if not task_ids:
            return []
        stmt = (
            select(TaskModel)
            .where(
                TaskModel.organization_id == organization_id,
                TaskModel.id.in_(task_ids),
            )
            .order_by(TaskModel.id)
            .with_for_update()
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def get_assignment(self, task_id: UUID, user_id: UUID) -> TaskAssignment | None:
        """Get the assignment row for a (task, user) pair."""
        stmt = select(TaskAssignmentModel).where(
            TaskAssignmentModel.task_id == task_id,
            TaskAssignmentModel.user_id == user_id,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._assignment_to_entity(model) if model else None

    async def list_assignments(self, task_id: UUID) -> list[TaskAssignment]:
        """List assignment rows of a task."""
        stmt = (
            select(TaskAssignmentModel)
            .where(TaskAssignmentModel.task_id == task_id)
            .order_by(TaskAssignmentModel.created_at)
        )
        result = await self._session.execute(stmt)
        return [self._assignment_to_entity(model) for model in result.scalars()]

    async def add_assignment(self, assignment: TaskAssignment) -> TaskAssignment:
        """Insert an assignment row."""
        model = TaskAssignmentModel(
            id=assignment.id,
            task_id=assignment.task_id,
            user_id=assignment.user_id,
            assigned_by=assignment.assigned_by,
            status=assignment.status.value,
            created_at=assignment.created_at,
        )
        self._session.add(model)
        await self._session.flush()
        return assignment

    async def delete_assignment(self, task_id: UUID, user_id: UUID) -> bool:
        """Delete the assignment row for a (task, user) pair if present."""
        stmt = delete(TaskAssignmentModel).where(
            TaskAssignmentModel.task_id == task_id,
            TaskAssignmentModel.user_id == user_id,
        )
        result = await self._session.execute(stmt)
        await self._session.flush()
        return bool(result.rowcount)  # type: ignore[attr-defined]

    async def reassign_primary_assignee(self, task_id: UUID, user_id: UUID) -> Task:
        """Set a task's primary assignee and clear pending-assignment state."""
        model = await self._session.get(TaskModel, task_id)
        if not model:
            raise ValueError(f"Task {task_id} not found")

        model.assigned_user_id = user_id
        model.assignment_status = AssignmentStatus.ACCEPTED.value
        model.last_reminder_sent_at = None
        model.updated_at = datetime.utcnow()

        await self._session.flush()
        return self._to_entity(model)

    async def list_pending_assignment_before(self, updated_before: datetime) -> list[Task]:
        """List pending-assignment tasks with a creator and assignee not touched since."""
        stmt = (
            select(TaskModel)
            .where(
                TaskModel.assignment_status == AssignmentStatus.PENDING.value,
                TaskModel.created_by_user_id.is_not(None),
                TaskModel.assigned_user_id.is_not(None),
                TaskModel.updated_at < updated_before,
            )
            .order_by(TaskModel.updated_at)
            .with_for_update(skip_locked=True)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def claim_reminder(self, task_id: UUID, sent_at: datetime, due_before: datetime) -> bool:
        """Stamp a reminder unless one was already sent after ``due_before``.

        The check and the stamp are one statement, so of two overlapping
        sweeps only one claims the task. ``updated_at`` is left alone so the
        task keeps its place in the pending queue.
        """
        stmt = (
            update(TaskModel)
            .where(
                TaskModel.id == task_id,
                or_(
                    TaskModel.last_reminder_sent_at.is_(None),
                    TaskModel.last_reminder_sent_at <= due_before,
                ),
            )
            .values(last_reminder_sent_at=sent_at, updated_at=TaskModel.updated_at)
        )
        result = await self._session.execute(stmt)
        await self._session.flush()
        return result.rowcount > 0  # type: ignore[attr-defined, no-any-return]

    def _to_entity(self, model: TaskModel) -> Task:
        """Convert ORM model to domain entity."""
        return Task(
            id=model.id,
            organization_id=model.organization_id,
            title=model.title,
            priority=model.priority,
            due_date=model.due_date,
            project_title=model.project_title,
            assigned_user_id=model.assigned_user_id,
            assignment_status=(
                AssignmentStatus(model.assignment_status) if model.assignment_status else None
            ),
            created_by_user_id=model.created_by_user_id,
            last_reminder_sent_at=model.last_reminder_sent_at,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _assignment_to_entity(self, model: TaskAssignmentModel) -> TaskAssignment:
        return TaskAssignment(
            id=model.id,
            task_id=model.task_id,
            user_id=model.user_id,
            assigned_by=model.assigned_by,
            status=AssignmentStatus(model.status),
            created_at=model.created_at,
        )
