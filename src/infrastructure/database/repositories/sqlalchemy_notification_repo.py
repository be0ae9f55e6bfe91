"""SQLAlchemy implementation of Notification repository."""

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.notification import Notification
from infrastructure.database.models import NotificationModel


class SQLAlchemyNotificationRepository:
    """SQLAlchemy implementation of INotificationRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, notification: Notification) -> Notification:
        """Create a notification."""
        model = NotificationModel(
            id=notification.id,
            user_id=notification.user_id,
            organization_id=notification.organization_id,
            type=notification.type,
            title=notification.title,
            message=notification.message,
            reference_id=notification.reference_id,
            reference_type=notification.reference_type,
            is_read=notification.is_read,
            created_at=notification.created_at,
        )
        self._session.add(model)
        await self._session.flush()
        return notification

    async def list_for_user(self, user_id: UUID, limit: int = 50) -> list[Notification]:
        """List a user's notifications, newest first."""
        stmt = (
            select(NotificationModel)
            .where(NotificationModel.user_id == user_id)
            .order_by(NotificationModel.created_at.desc())
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [
            Notification(
                id=model.id,
                user_id=model.user_id,
                organization_id=model.organization_id,
                type=model.type,
                title=model.title,
                message=model.message,
                reference_id=model.reference_id,
                reference_type=model.reference_type,
                is_read=bool(model.is_read),
                created_at=model.created_at,
            )
            for model in result.scalars()
        ]

    async def get_unread_count(self, user_id: UUID) -> int:
        """Count a user's unread notifications."""
        stmt = select(func.count(NotificationModel.id)).where(
            NotificationModel.user_id == user_id,
            NotificationModel.is_read.is_(False),
        )
        result = await self._session.execute(stmt)
        return result.scalar_one()
