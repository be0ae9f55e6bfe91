"""Notification service layer."""

from collections.abc import Callable
from uuid import UUID

from domain.entities.notification import Notification
from domain.repositories.unit_of_work import IUnitOfWork


class NotificationService:
    """Service layer for in-app notifications."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def notify(
        self,
        uow: IUnitOfWork,
        user_id: UUID,
        type_name: str,
        title: str,
        message: str,
        organization_id: UUID | None = None,
        reference_id: UUID | None = None,
        reference_type: str | None = None,
    ) -> Notification:
        """Create a notification within an existing UoW transaction.

        Args:
            uow: The active Unit of Work (caller manages commit).
            user_id: Recipient.
            type_name: The notification type (use NotificationTypes constants).
            title: Short heading.
            message: Body text.
            organization_id: Organization the event happened in.
            reference_id: Entity the notification points at.
            reference_type: Kind of entity ``reference_id`` refers to.
        """
        notification = Notification(
            user_id=user_id,
            type=type_name,
            title=title,
            message=message,
            organization_id=organization_id,
            reference_id=reference_id,
            reference_type=reference_type,
        )
        return await uow.notifications.create(notification)

    async def get_notifications(
        self, user_id: UUID, limit: int = 50
    ) -> tuple[list[Notification], int]:
        """Get a user's notifications, newest first.

        Returns:
            Tuple of (notification_list, unread_count). The count covers all
            of the user's notifications, not just the returned page.
        """
        async with self._uow_factory() as uow:
            notifications = await uow.notifications.list_for_user(user_id, limit=limit)
            unread_count = await uow.notifications.get_unread_count(user_id)
            return notifications, unread_count
