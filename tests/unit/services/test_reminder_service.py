"""Unit tests for ReminderService."""

from datetime import datetime, timedelta
from uuid import UUID, uuid4

import pytest

from domain.entities.notification import NotificationTypes
from domain.entities.task import AssignmentStatus, Task
from domain.services.notification_service import NotificationService
from domain.services.reminder_service import ReminderService
from tests.unit.conftest import FakeUnitOfWork

NOW = datetime(2026, 10, 19, 12, 0)


@pytest.fixture
def service(uow: FakeUnitOfWork) -> ReminderService:
    return ReminderService(
        lambda: uow, notification_service=NotificationService(lambda: uow), window_minutes=60
    )


def _pending_task(organization_id: UUID, **overrides) -> Task:
    defaults = dict(
        organization_id=organization_id,
        title="Prepare board deck",
        assigned_user_id=uuid4(),
        assignment_status=AssignmentStatus.PENDING,
        created_by_user_id=uuid4(),
        updated_at=NOW - timedelta(hours=3),
    )
    defaults.update(overrides)
    return Task(**defaults)


class TestSendPendingReminders:
    @pytest.mark.asyncio
    async def test_notifies_creator(
        self, service: ReminderService, uow: FakeUnitOfWork, organization_id: UUID
    ):
        task = _pending_task(organization_id)
        uow.tasks.list_pending_assignment_before.return_value = [task]
        uow.organizations.get_profile_names.return_value = {task.assigned_user_id: "Tia Target"}

        result = await service.send_pending_reminders(now=NOW)

        assert (result.checked, result.sent) == (1, 1)
        uow.tasks.list_pending_assignment_before.assert_awaited_once_with(
            NOW - timedelta(minutes=60)
        )
        note = uow.notifications.create.call_args[0][0]
        assert note.user_id == task.created_by_user_id
        assert note.type == NotificationTypes.TASK_REQUEST_REMINDER
        assert note.title == "Task Request Pending"
        assert note.message == (
            "Tia Target has not responded to your task request yet: Prepare board deck"
        )
        assert note.reference_id == task.id
        assert note.reference_type == "task"
        uow.tasks.claim_reminder.assert_awaited_once_with(task.id, NOW, NOW - timedelta(minutes=60))
        assert uow.committed

    @pytest.mark.asyncio
    async def test_unknown_assignee_name(
        self, service: ReminderService, uow: FakeUnitOfWork, organization_id: UUID
    ):
        uow.tasks.list_pending_assignment_before.return_value = [_pending_task(organization_id)]

        await service.send_pending_reminders(now=NOW)

        note = uow.notifications.create.call_args[0][0]
        assert note.message.startswith("Your assignee has not responded")

    @pytest.mark.asyncio
    async def test_recently_reminded_task_skipped(
        self, service: ReminderService, uow: FakeUnitOfWork, organization_id: UUID
    ):
        task = _pending_task(organization_id, last_reminder_sent_at=NOW - timedelta(minutes=20))
        uow.tasks.list_pending_assignment_before.return_value = [task]

        result = await service.send_pending_reminders(now=NOW)

        assert (result.checked, result.sent) == (1, 0)
        uow.notifications.create.assert_not_called()
        uow.tasks.claim_reminder.assert_not_called()

    @pytest.mark.asyncio
    async def test_reminded_again_after_window(
        self, service: ReminderService, uow: FakeUnitOfWork, organization_id: UUID
    ):
        task = _pending_task(organization_id, last_reminder_sent_at=NOW - timedelta(minutes=61))
        uow.tasks.list_pending_assignment_before.return_value = [task]

        result = await service.send_pending_reminders(now=NOW)

        assert result.sent == 1

    @pytest.mark.asyncio
    async def test_second_run_in_window_sends_nothing(
        self, service: ReminderService, uow: FakeUnitOfWork, organization_id: UUID
    ):
        task = _pending_task(organization_id)
        uow.tasks.list_pending_assignment_before.return_value = [task]

        async def claim(task_id, sent_at, due_before):
            task.last_reminder_sent_at = sent_at
            return True

        uow.tasks.claim_reminder.side_effect = claim

        first = await service.send_pending_reminders(now=NOW)
        second = await service.send_pending_reminders(now=NOW + timedelta(minutes=30))

        assert first.sent == 1
        assert second.sent == 0
        assert uow.notifications.create.await_count == 1

    @pytest.mark.asyncio
    async def test_task_claimed_by_overlapping_run_is_skipped(
        self, service: ReminderService, uow: FakeUnitOfWork, organization_id: UUID
    ):
        first, second = _pending_task(organization_id), _pending_task(organization_id)
        uow.tasks.list_pending_assignment_before.return_value = [first, second]
        uow.tasks.claim_reminder.side_effect = lambda task_id, *a: task_id == second.id

        result = await service.send_pending_reminders(now=NOW)

        assert (result.checked, result.sent) == (2, 1)
        assert uow.notifications.create.await_count == 1
        assert uow.notifications.create.call_args[0][0].reference_id == second.id
