"""SQLAlchemy Unit of Work implementation."""

from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from infrastructure.database.repositories.sqlalchemy_activity_repo import SQLAlchemyActivityRepository
from infrastructure.database.repositories.sqlalchemy_data_room_repo import SQLAlchemyDataRoomRepository
from infrastructure.database.repositories.sqlalchemy_file_repo import (
    SQLAlchemyCommentRepository,
    SQLAlchemyDocumentRepository,
    SQLAlchemyFileRepository,
)
from infrastructure.database.repositories.sqlalchemy_guest_invite_repo import SQLAlchemyGuestInviteRepository
from infrastructure.database.repositories.sqlalchemy_merge_log_repo import SQLAlchemyMergeLogRepository
from infrastructure.database.repositories.sqlalchemy_notification_repo import SQLAlchemyNotificationRepository
from infrastructure.database.repositories.sqlalchemy_organization_repo import SQLAlchemyOrganizationRepository
from infrastructure.database.repositories.sqlalchemy_permission_repo import SQLAlchemyFilePermissionRepository
from infrastructure.database.repositories.sqlalchemy_task_repo import SQLAlchemyTaskRepository


class SQLAlchemyUnitOfWork:
    """Unit of Work implementation using SQLAlchemy.

    Repositories share one session, so everything done through a single
    ``async with`` block commits or rolls back together.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._session: Optional[AsyncSession] = None

    def _require_session(self) -> AsyncSession:
        if not self._session:
            raise RuntimeError("UnitOfWork not initialized. Use as context manager.")
        return self._session

    @property
    def data_rooms(self) -> SQLAlchemyDataRoomRepository:
        """Get data room repository."""
        return SQLAlchemyDataRoomRepository(self._require_session())

    @property
    def guest_invites(self) -> SQLAlchemyGuestInviteRepository:
        """Get guest invitation repository."""
        return SQLAlchemyGuestInviteRepository(self._require_session())

    @property
    def files(self) -> SQLAlchemyFileRepository:
        """Get data room file repository."""
        return SQLAlchemyFileRepository(self._require_session())

    @property
    def documents(self) -> SQLAlchemyDocumentRepository:
        """Get document content repository."""
        return SQLAlchemyDocumentRepository(self._require_session())

    @property
    def comments(self) -> SQLAlchemyCommentRepository:
        """Get file comment repository."""
        return SQLAlchemyCommentRepository(self._require_session())

    @property
    def file_permissions(self) -> SQLAlchemyFilePermissionRepository:
        """Get file permission repository."""
        return SQLAlchemyFilePermissionRepository(self._require_session())

    @property
    def activities(self) -> SQLAlchemyActivityRepository:
        """Get activity log repository."""
        return SQLAlchemyActivityRepository(self._require_session())

    @property
    def tasks(self) -> SQLAlchemyTaskRepository:
        """Get task repository."""
        return SQLAlchemyTaskRepository(self._require_session())

    @property
    def merge_logs(self) -> SQLAlchemyMergeLogRepository:
        """Get task merge log repository."""
        return SQLAlchemyMergeLogRepository(self._require_session())

    @property
    def notifications(self) -> SQLAlchemyNotificationRepository:
        """Get notification repository."""
        return SQLAlchemyNotificationRepository(self._require_session())

    @property
    def organizations(self) -> SQLAlchemyOrganizationRepository:
        """Get organization membership repository."""
        return SQLAlchemyOrganizationRepository(self._require_session())

    async def commit(self) -> None:
        """Commit the current transaction."""
        if self._session:
            await self._session.commit()

    async def rollback(self) -> None:
        """Rollback the current transaction."""
        if self._session:
            await self._session.rollback()

    async def __aenter__(self) -> "SQLAlchemyUnitOfWork":
        """Enter the context manager and create session."""
        self._session = self._session_factory()
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[Exception],
        exc_tb: Any,
    ) -> None:
        """Exit the context manager and cleanup."""
        if self._session:
            if exc_type:
                await self.rollback()
            await self._session.close()
            self._session = None
