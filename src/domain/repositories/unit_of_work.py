"""Unit of Work protocol."""

from typing import Protocol

from domain.repositories.activity_repository import IActivityRepository
from domain.repositories.data_room_repository import IDataRoomRepository
from domain.repositories.file_repository import (
    ICommentRepository,
    IDocumentRepository,
    IFileRepository,
)
from domain.repositories.guest_invite_repository import IGuestInviteRepository
from domain.repositories.merge_log_repository import IMergeLogRepository
from domain.repositories.notification_repository import INotificationRepository
from domain.repositories.organization_repository import IOrganizationRepository
from domain.repositories.permission_repository import IFilePermissionRepository
from domain.repositories.task_repository import ITaskRepository


class IUnitOfWork(Protocol):
    """Unit of Work interface for managing transactions."""

    data_rooms: IDataRoomRepository
    guest_invites: IGuestInviteRepository
    files: IFileRepository
    documents: IDocumentRepository
    comments: ICommentRepository
    file_permissions: IFilePermissionRepository
    activities: IActivityRepository
    tasks: ITaskRepository
    merge_logs: IMergeLogRepository
    notifications: INotificationRepository
    organizations: IOrganizationRepository

    async def commit(self) -> None:
        """Commit the current transaction."""
        ...

    async def rollback(self) -> None:
        """Rollback the current transaction."""
        ...

    async def __aenter__(self) -> "IUnitOfWork":
        """Enter the context manager."""
        ...

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # type: ignore
        """Exit the context manager."""
        ...
