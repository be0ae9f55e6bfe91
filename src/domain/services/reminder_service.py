"""Reminders for task requests the assignee has not answered."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

import structlog

from domain.entities.notification import NotificationTypes
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.notification_service import NotificationService

logger = structlog.get_logger()


@dataclass
class ReminderResult:
    checked: int = 0
    sent: int = 0


class ReminderService:
    """Nudges task creators about pending task requests.

    A task gets at most one reminder per window, however often the sweep runs.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        notification_service: Optional[NotificationService] = None,
        window_minutes: int = 60,
    ) -> None:
        self._uow_factory = uow_factory
        self._notification = notification_service
        self._window = timedelta(minutes=window_minutes)

    async def send_pending_reminders(self, now: datetime | None = None) -> ReminderResult:
        now = now or datetime.utcnow()
        cutoff = now - self._window

        async with self._uow_factory() as uow:
            tasks = await uow.tasks.list_pending_assignment_before(cutoff)
            due = [
                t
                for t in tasks
                if t.last_reminder_sent_at is None or t.last_reminder_sent_at <= cutoff
            ]
            names = await uow.organizations.get_profile_names(
                list({t.assigned_user_id for t in due if t.assigned_user_id})
            )

            sent = 0
            for task in due:
                assert task.created_by_user_id and task.assigned_user_id
                # Another sweep may have stamped the task since it was read.
                if not await uow.tasks.claim_reminder(task.id, now, cutoff):
                    continue

                assignee_name = names.get(task.assigned_user_id) or "Your assignee"
                if self._notification:
                    await self._notification.notify(
                        uow,
                        user_id=task.created_by_user_id,
                        type_name=NotificationTypes.TASK_REQUEST_REMINDER,
                        title="Task Request Pending",
                        message=(
                            f"{assignee_name} has not responded to your task request yet: "
                            f"{task.title}"
                        ),
                        organization_id=task.organization_id,
                        reference_id=task.id,
                        reference_type="task",
                    )
                sent += 1
                logger.info("reminder_sent", task_id=str(task.id))

            await uow.commit()

        return ReminderResult(checked=len(tasks), sent=sent)
