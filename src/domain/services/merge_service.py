"""Task merge and revert engine.

A merge moves a set of tasks from a source user to a target user and
records a merge log holding a snapshot of the tasks. Reverting replays the
move in the other direction. Temporary merges are reverted automatically
once their end date has passed.
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional
from uuid import UUID

import structlog

from core.exceptions import (
    InsufficientPermissionsError,
    InvalidMergeError,
    MergeLogNotFoundError,
    MergeNotRevertibleError,
    TaskNotFoundError,
)
from domain.entities.merge import MergeLog, MergeStatus, MergeType, TaskSnapshot
from domain.entities.notification import NotificationTypes
from domain.entities.profile import MANAGER_ROLES
from domain.entities.task import AssignmentStatus, TaskAssignment
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.notification_service import NotificationService

logger = structlog.get_logger()


@dataclass
class SweepResult:
    """Outcome of one automatic revert pass."""

    checked: int = 0
    reverted: int = 0
    failed: int = 0


class MergeService:
    """Service layer for task merges."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        notification_service: Optional[NotificationService] = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._notification = notification_service

    async def perform_merge(
        self,
        organization_id: UUID,
        performed_by: UUID,
        source_user_id: UUID,
        target_user_id: UUID,
        task_ids: list[UUID],
        merge_type: MergeType,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> MergeLog:
        """Move tasks from the source user to the target user.

        The whole merge runs in one transaction with the task rows locked.
        Temporary merges are logged as ``pending_revert``.
        """
        unique_ids = list(dict.fromkeys(task_ids))
        if source_user_id == target_user_id:
            raise InvalidMergeError("Source and target users must be different")
        if not unique_ids:
            raise InvalidMergeError("Select at least one task to transfer")
        if merge_type == MergeType.TEMPORARY:
            if not start_date or not end_date:
                raise InvalidMergeError("Temporary merges need a start and end date")
            if start_date >= end_date:
                raise InvalidMergeError("Start date must be before end date")
        else:
            start_date = end_date = None

        async with self._uow_factory() as uow:
            await self._require_manager(uow, organization_id, performed_by)

            tasks = await uow.tasks.get_many_for_update(organization_id, unique_ids)
            found = {t.id for t in tasks}
            for task_id in unique_ids:
                if task_id not in found:
                    raise TaskNotFoundError(str(task_id))

            # Snapshot before any mutation; it is never refreshed afterwards.
            snapshots = [
                TaskSnapshot(
                    id=t.id,
                    title=t.title,
                    due_date=t.due_date,
                    priority=t.priority,
                    project_title=t.project_title,
                )
                for t in tasks
            ]

            for task in tasks:
                await self._move_task(uow, task.id, source_user_id, target_user_id, performed_by)

            now = datetime.utcnow()
            merge_log = await uow.merge_logs.create(
                MergeLog(
                    organization_id=organization_id,
                    performed_by=performed_by,
                    source_user_id=source_user_id,
                    target_user_id=target_user_id,
                    merge_type=merge_type,
                    temporary_start_date=start_date,
                    temporary_end_date=end_date,
                    tasks_transferred=snapshots,
                    status=(
                        MergeStatus.PENDING_REVERT
                        if merge_type == MergeType.TEMPORARY
                        else MergeStatus.COMPLETED
                    ),
                    created_at=now,
                    completed_at=now,
                )
            )

            if self._notification:
                await self._notify_merge(uow, merge_log)

            await uow.commit()

        logger.info(
            "merge_performed",
            merge_id=str(merge_log.id),
            merge_type=merge_type.value,
            task_count=merge_log.task_count,
        )
        return merge_log

    async def revert_merge(self, merge_id: UUID, acting_user_id: UUID) -> MergeLog:
        """Return a merge's tasks to the source user.

        Any failure rolls back the whole revert and propagates.
        """
        async with self._uow_factory() as uow:
            merge_log = await uow.merge_logs.get(merge_id, for_update=True)
            if not merge_log:
                raise MergeLogNotFoundError(str(merge_id))
            await self._require_manager(uow, merge_log.organization_id, acting_user_id)

            reverted = await self._revert(uow, merge_log, acting_user_id)

            if self._notification:
                await self._notification.notify(
                    uow,
                    user_id=merge_log.source_user_id,
                    type_name=NotificationTypes.MERGE_REVERTED,
                    title="Tasks Returned",
                    message=f"{merge_log.task_count} task(s) have been returned to you.",
                    organization_id=merge_log.organization_id,
                    reference_id=merge_log.id,
                    reference_type="task_merge_log",
                )

            await uow.commit()
            return reverted

    async def revert_expired_merges(self, today: date | None = None) -> SweepResult:
        """Revert every temporary merge whose end date is on or before ``today``.

        Each merge is reverted in its own transaction; a failing entry is
        logged and skipped.
        """
        today = today or datetime.utcnow().date()
        async with self._uow_factory() as uow:
            due = await uow.merge_logs.list_due_for_revert(today)

        result = SweepResult(checked=len(due))
        for entry in due:
            try:
                if await self._auto_revert(entry.id, today):
                    result.reverted += 1
            except Exception:
                result.failed += 1
                logger.exception("merge_auto_revert_failed", merge_id=str(entry.id))

        logger.info(
            "merge_revert_sweep_finished",
            checked=result.checked,
            reverted=result.reverted,
            failed=result.failed,
        )
        return result

    async def list_merge_logs(self, organization_id: UUID, user_id: UUID) -> list[MergeLog]:
        """Merge history of an organization, newest first. Admins and moderators only."""
        async with self._uow_factory() as uow:
            await self._require_manager(uow, organization_id, user_id)
            return await uow.merge_logs.list_for_organization(organization_id)

    # --- Helpers ---

    async def _auto_revert(self, merge_id: UUID, today: date) -> bool:
        async with self._uow_factory() as uow:
            merge_log = await uow.merge_logs.get(merge_id, for_update=True)
            # Reverted by someone else since the sweep listed it.
            if not merge_log or not merge_log.is_due_for_revert(today):
                return False

            await self._revert(uow, merge_log, merge_log.performed_by)

            if self._notification:
                await self._notification.notify(
                    uow,
                    user_id=merge_log.performed_by,
                    type_name=NotificationTypes.MERGE_AUTO_REVERTED,
                    title="Temporary Merge Expired",
                    message=(
                        f"A temporary merge of {merge_log.task_count} task(s) has "
                        "automatically reverted. Tasks have been returned to their "
                        "original owner."
                    ),
                    organization_id=merge_log.organization_id,
                    reference_id=merge_log.id,
                    reference_type="task_merge_log",
                )

            await uow.commit()
            return True

    async def _revert(self, uow: IUnitOfWork, merge_log: MergeLog, acting_user_id: UUID) -> MergeLog:
        if not merge_log.is_revertible:
            raise MergeNotRevertibleError(str(merge_log.id), merge_log.status.value)

        task_ids = [s.id for s in merge_log.tasks_transferred]
        tasks = {
            t.id: t
            for t in await uow.tasks.get_many_for_update(merge_log.organization_id, task_ids)
        }

        for snapshot in merge_log.tasks_transferred:
            task = tasks.get(snapshot.id)
            if not task:
                logger.warning(
                    "merge_task_missing", merge_id=str(merge_log.id), task_id=str(snapshot.id)
                )
                continue
            if task.assigned_user_id != merge_log.target_user_id:
                logger.warning(
                    "merge_revert_conflict",
                    merge_id=str(merge_log.id),
                    task_id=str(task.id),
                    expected_user_id=str(merge_log.target_user_id),
                    current_user_id=str(task.assigned_user_id),
                )

            await self._move_task(
                uow,
                task.id,
                merge_log.target_user_id,
                merge_log.source_user_id,
                acting_user_id,
            )
            logger.info("merge_task_reverted", merge_id=str(merge_log.id), task_id=str(task.id))

        merge_log.mark_reverted()
        return await uow.merge_logs.update(merge_log)

    async def _move_task(
        self,
        uow: IUnitOfWork,
        task_id: UUID,
        from_user_id: UUID,
        to_user_id: UUID,
        assigned_by: UUID,
    ) -> None:
        await uow.tasks.delete_assignment(task_id, from_user_id)
        if not await uow.tasks.get_assignment(task_id, to_user_id):
            await uow.tasks.add_assignment(
                TaskAssignment(
                    task_id=task_id,
                    user_id=to_user_id,
                    assigned_by=assigned_by,
                    status=AssignmentStatus.ACCEPTED,
                )
            )
        await uow.tasks.reassign_primary_assignee(task_id, to_user_id)

    async def _require_manager(
        self, uow: IUnitOfWork, organization_id: UUID, user_id: UUID
    ) -> None:
        role = await uow.organizations.get_role(organization_id, user_id)
        if role not in MANAGER_ROLES:
            raise InsufficientPermissionsError("admin or moderator")

    async def _notify_merge(self, uow: IUnitOfWork, merge_log: MergeLog) -> None:
        assert self._notification is not None
        names = await uow.organizations.get_profile_names(
            [merge_log.source_user_id, merge_log.target_user_id]
        )
        source_name = names.get(merge_log.source_user_id) or "A team member"
        target_name = names.get(merge_log.target_user_id) or "A team member"
        label = (
            "temporarily transferred"
            if merge_log.merge_type == MergeType.TEMPORARY
            else "permanently transferred"
        )
        count = merge_log.task_count

        await self._notification.notify(
            uow,
            user_id=merge_log.source_user_id,
            type_name=NotificationTypes.TASK_MERGE,
            title="Tasks Transferred",
            message=f"{count} task(s) have been {label} to {target_name}.",
            organization_id=merge_log.organization_id,
            reference_id=merge_log.id,
            reference_type="task_merge_log",
        )
        await self._notification.notify(
            uow,
            user_id=merge_log.target_user_id,
            type_name=NotificationTypes.TASK_MERGE,
            title="Tasks Received",
            message=f"{count} task(s) have been {label} to you from {source_name}.",
            organization_id=merge_log.organization_id,
            reference_id=merge_log.id,
            reference_type="task_merge_log",
        )
