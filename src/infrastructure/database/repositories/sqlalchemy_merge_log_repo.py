"""SQLAlchemy implementation of MergeLog repository."""

from datetime import date
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.merge import MergeLog, MergeStatus, MergeType, TaskSnapshot
from infrastructure.database.models import MergeLogModel


class SQLAlchemyMergeLogRepository:
    """SQLAlchemy implementation of IMergeLogRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, merge_log: MergeLog) -> MergeLog:
        """Create a merge log entry."""
        model = MergeLogModel(
            id=merge_log.id,
            organization_id=merge_log.organization_id,
            performed_by=merge_log.performed_by,
            source_user_id=merge_log.source_user_id,
            target_user_id=merge_log.target_user_id,
            merge_type=merge_log.merge_type.value,
            temporary_start_date=merge_log.temporary_start_date,
            temporary_end_date=merge_log.temporary_end_date,
            tasks_transferred=[s.to_dict() for s in merge_log.tasks_transferred],
            task_count=merge_log.task_count,
            status=merge_log.status.value,
            created_at=merge_log.created_at,
            completed_at=merge_log.completed_at,
            reverted_at=merge_log.reverted_at,
        )
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)

    async def get(self, id: UUID, for_update: bool = False) -> MergeLog | None:
        """Get a merge log entry, optionally locking it."""
        stmt = select(MergeLogModel).where(MergeLogModel.id == id)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def update(self, merge_log: MergeLog) -> MergeLog:
        """Persist status changes to a merge log entry.

        The task snapshot is historical and never rewritten.
        """
        model = await self._session.get(MergeLogModel, merge_log.id)
        if not model:
            raise ValueError(f"Merge log {merge_log.id} not found")

        model.status = merge_log.status.value
        model.completed_at = merge_log.completed_at
        model.reverted_at = merge_log.reverted_at

        await self._session.flush()
        return self._to_entity(model)

    async def list_for_organization(self, organization_id: UUID) -> list[MergeLog]:
        """List merge log entries of an organization, newest first."""
        stmt = (
            select(MergeLogModel)
            .where(MergeLogModel.organization_id == organization_id)
            .order_by(MergeLogModel.created_at.desc())
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def list_due_for_revert(self, today: date) -> list[MergeLog]:
        """List pending temporary merges whose end date is on or before ``today``."""
        stmt = (
            select(MergeLogModel)
            .where(
                MergeLogModel.status == MergeStatus.PENDING_REVERT.value,
                MergeLogModel.merge_type == MergeType.TEMPORARY.value,
                MergeLogModel.temporary_end_date <= today,
            )
            .order_by(MergeLogModel.temporary_end_date, MergeLogModel.created_at)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    def _to_entity(self, model: MergeLogModel) -> MergeLog:
        """Convert ORM model to domain entity."""
        return MergeLog(
            id=model.id,
            organization_id=model.organization_id,
            performed_by=model.performed_by,
            source_user_id=model.source_user_id,
            target_user_id=model.target_user_id,
            merge_type=MergeType(model.merge_type),
            temporary_start_date=model.temporary_start_date,
            temporary_end_date=model.temporary_end_date,
            tasks_transferred=[TaskSnapshot.from_dict(t) for t in model.tasks_transferred or []],
            status=MergeStatus(model.status),
            created_at=model.created_at,
            completed_at=model.completed_at,
            reverted_at=model.reverted_at,
        )
