"""Dependency injection factories for API v1."""

from functools import lru_cache
from typing import Annotated, Callable

from fastapi import Header

from core.config import settings
from core.exceptions import AuthenticationError, ErrorCode
from domain.services.activity_service import ActivityService
from domain.services.data_room_service import DataRoomService
from domain.services.document_service import DocumentService
from domain.services.guest_file_service import GuestFileService
from domain.services.guest_invite_service import GuestInviteService
from domain.services.merge_service import MergeService
from domain.services.notification_service import NotificationService
from domain.services.reminder_service import ReminderService
from domain.services.version_service import VersionService
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
from infrastructure.storage.provider import IObjectStorage
from infrastructure.storage.supabase_storage import SupabaseStorageClient


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory)

    return factory


@lru_cache
def get_object_storage() -> IObjectStorage:
    """Get the object storage client for data room files."""
    return SupabaseStorageClient()


@lru_cache
def get_activity_service() -> ActivityService:
    """Get Activity service instance."""
    return ActivityService(get_uow_factory())


@lru_cache
def get_notification_service() -> NotificationService:
    """Get Notification service instance."""
    return NotificationService(get_uow_factory())


@lru_cache
def get_data_room_service() -> DataRoomService:
    """Get DataRoom service instance."""
    return DataRoomService(get_uow_factory(), activity_service=get_activity_service())


@lru_cache
def get_guest_file_service() -> GuestFileService:
    """Get GuestFile service instance."""
    return GuestFileService(
        get_uow_factory(),
        storage=get_object_storage(),
        activity_service=get_activity_service(),
        signed_url_ttl_seconds=settings.signed_url_ttl_seconds,
        max_upload_bytes=settings.max_upload_bytes,
    )


@lru_cache
def get_document_service() -> DocumentService:
    """Get Document service instance."""
    return DocumentService(get_uow_factory(), activity_service=get_activity_service())


@lru_cache
def get_version_service() -> VersionService:
    """Get Version service instance."""
    return VersionService(get_uow_factory(), activity_service=get_activity_service())


@lru_cache
def get_guest_invite_service() -> GuestInviteService:
    """Get GuestInvite service instance."""
    return GuestInviteService(
        get_uow_factory(),
        activity_service=get_activity_service(),
        expiry_days=settings.invite_expiry_days,
    )


@lru_cache
def get_merge_service() -> MergeService:
    """Get Merge service instance."""
    return MergeService(
        get_uow_factory(),
        notification_service=get_notification_service(),
    )


@lru_cache
def get_reminder_service() -> ReminderService:
    """Get Reminder service instance."""
    return ReminderService(
        get_uow_factory(),
        notification_service=get_notification_service(),
        window_minutes=settings.reminder_window_minutes,
    )


async def verify_cron_secret(
    x_cron_secret: Annotated[str | None, Header()] = None,
) -> None:
    """Guard job endpoints with the shared X-Cron-Secret header."""
    if not settings.cron_secret or x_cron_secret != settings.cron_secret:
        raise AuthenticationError(
            message="Invalid cron secret",
            error_code=ErrorCode.UNAUTHORIZED,
        )
