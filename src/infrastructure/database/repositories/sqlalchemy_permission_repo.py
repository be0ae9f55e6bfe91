"""SQLAlchemy implementation of FilePermission repository."""

from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.permission import FilePermission, PermissionLevel
from infrastructure.database.models import FilePermissionModel


class SQLAlchemyFilePermissionRepository:
    """SQLAlchemy implementation of IFilePermissionRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_for_guest(
        self, file_id: UUID, guest_invite_id: UUID
    ) -> FilePermission | None:
        """Get the grant for a (root file, invitation) pair."""
        stmt = select(FilePermissionModel).where(
            FilePermissionModel.file_id == file_id,
            FilePermissionModel.guest_invite_id == guest_invite_id,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def list_for_guest(
        self, guest_invite_id: UUID, file_ids: list[UUID]
    ) -> list[FilePermission]:
        """List a guest's grants on the given root files."""
        if not file_ids:
            return []
        stmt = select(FilePermissionModel).where(
            FilePermissionModel.guest_invite_id == guest_invite_id,
            FilePermissionModel.file_id.in_(file_ids),
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def list_for_file(self, file_id: UUID) -> list[FilePermission]:
        """List all grants on a root file."""
        stmt = select(FilePermissionModel).where(FilePermissionModel.file_id == file_id)
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def replace_for_file(
        self, file_id: UUID, permissions: list[FilePermission]
    ) -> list[FilePermission]:
        """Replace every grant on a root file with the given set."""
        await self._session.execute(
            delete(FilePermissionModel).where(FilePermissionModel.file_id == file_id)
        )
        for permission in permissions:
            self._session.add(
                FilePermissionModel(
                    id=permission.id,
                    file_id=file_id,
                    guest_invite_id=permission.guest_invite_id,
                    user_id=permission.user_id,
                    permission_level=permission.permission_level.value,
                    created_at=permission.created_at,
                )
            )
        await self._session.flush()
        return await self.list_for_file(file_id)

    def _to_entity(self, model: FilePermissionModel) -> FilePermission:
        """Convert ORM model to domain entity."""
        return FilePermission(
            id=model.id,
            file_id=model.file_id,
            guest_invite_id=model.guest_invite_id,
            user_id=model.user_id,
            permission_level=PermissionLevel(model.permission_level),
            created_at=model.created_at,
        )
