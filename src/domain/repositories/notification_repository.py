"""Notification repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.notification import Notification


class INotificationRepository(Protocol):
    """Repository interface for Notification entities."""

    async def create(self, notification: Notification) -> Notification:
        """Create a notification."""
        ...

    async def list_for_user(self, user_id: UUID, limit: int = 50) -> list[Notification]:
        """List a user's notifications, newest first."""
        ...

    async def get_unread_count(self, user_id: UUID) -> int:
        """Count a user's unread notifications."""
        ...
