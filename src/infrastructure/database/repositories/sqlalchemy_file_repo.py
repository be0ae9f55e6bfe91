"""SQLAlchemy implementations of file, document and comment repositories."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.file import DataRoomFile, DocumentContent, FileComment, FileStatus
from infrastructure.database.models import (
    DataRoomFileModel,
    DocumentContentModel,
    FileCommentModel,
)


class SQLAlchemyFileRepository:
    """SQLAlchemy implementation of IFileRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> DataRoomFile | None:
        """Get a non-deleted file by ID."""
        stmt = select(DataRoomFileModel).where(
            DataRoomFileModel.id == id,
            DataRoomFileModel.deleted_at.is_(None),
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def create(self, file: DataRoomFile) -> DataRoomFile:
        """Create a new file row."""
        model = self._to_model(file)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, file: DataRoomFile) -> DataRoomFile:
        """Persist changes to a file row."""
        model = await self._session.get(DataRoomFileModel, file.id)
        if not model:
            raise ValueError(f"File {file.id} not found")

        model.name = file.name
        model.status = file.status.value
        model.is_restricted = file.is_restricted
        model.folder_id = file.folder_id
        model.assigned_to = file.assigned_to
        model.assigned_guest_id = file.assigned_guest_id
        model.deleted_at = file.deleted_at
        model.updated_at = datetime.utcnow()

        await self._session.flush()
        return self._to_entity(model)

    async def list_chain(self, data_room_id: UUID, root_id: UUID) -> list[DataRoomFile]:
        """List every version of a chain, newest version first."""
        stmt = (
            select(DataRoomFileModel)
            .where(
                DataRoomFileModel.data_room_id == data_room_id,
                DataRoomFileModel.deleted_at.is_(None),
                or_(
                    DataRoomFileModel.id == root_id,
                    DataRoomFileModel.parent_file_id == root_id,
                ),
            )
            .order_by(DataRoomFileModel.version.desc())
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def lock_chain(self, root_id: UUID) -> None:
        """Lock a chain's root row until the transaction ends.

        Appending a version takes this lock first, so concurrent appends to
        one chain get distinct version numbers.
        """
        stmt = (
            select(DataRoomFileModel.id)
            .where(DataRoomFileModel.id == root_id)
            .with_for_update()
        )
        await self._session.execute(stmt)

    async def get_max_version(self, data_room_id: UUID, root_id: UUID) -> int:
        """Highest version number in a chain.

        Soft-deleted rows still count so a number is never handed out twice.
        """
        stmt = select(func.max(DataRoomFileModel.version)).where(
            DataRoomFileModel.data_room_id == data_room_id,
            or_(
                DataRoomFileModel.id == root_id,
                DataRoomFileModel.parent_file_id == root_id,
            ),
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none() or 0

    async def list_for_room(self, data_room_id: UUID) -> list[DataRoomFile]:
        """List every non-deleted file row in a data room."""
        stmt = (
            select(DataRoomFileModel)
            .where(
                DataRoomFileModel.data_room_id == data_room_id,
                DataRoomFileModel.deleted_at.is_(None),
            )
            .order_by(DataRoomFileModel.version.desc())
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    def _to_entity(self, model: DataRoomFileModel) -> DataRoomFile:
        """Convert ORM model to domain entity."""
        return DataRoomFile(
            id=model.id,
            data_room_id=model.data_room_id,
            organization_id=model.organization_id,
            folder_id=model.folder_id,
            name=model.name,
            file_path=model.file_path,
            file_size=model.file_size or 0,
            mime_type=model.mime_type,
            is_restricted=bool(model.is_restricted),
            parent_file_id=model.parent_file_id,
            version=model.version,
            status=FileStatus(model.status),
            uploaded_by=model.uploaded_by,
            assigned_to=model.assigned_to,
            assigned_guest_id=model.assigned_guest_id,
            created_at=model.created_at,
            updated_at=model.updated_at,
            deleted_at=model.deleted_at,
        )

    def _to_model(self, entity: DataRoomFile) -> DataRoomFileModel:
        """Convert domain entity to ORM model."""
        return DataRoomFileModel(
            id=entity.id,
            data_room_id=entity.data_room_id,
            organization_id=entity.organization_id,
            folder_id=entity.folder_id,
            name=entity.name,
            file_path=entity.file_path,
            file_size=entity.file_size,
            mime_type=entity.mime_type,
            is_restricted=entity.is_restricted,
            parent_file_id=entity.parent_file_id,
            version=entity.version,
            status=entity.status.value,
            uploaded_by=entity.uploaded_by,
            assigned_to=entity.assigned_to,
            assigned_guest_id=entity.assigned_guest_id,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
            deleted_at=entity.deleted_at,
        )


class SQLAlchemyDocumentRepository:
    """SQLAlchemy implementation of IDocumentRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> DocumentContent | None:
        """Get a content row by ID."""
        model = await self._session.get(DocumentContentModel, id)
        return self._to_entity(model) if model else None

    async def get_for_file(self, file_id: UUID) -> DocumentContent | None:
        """Get the content row attached to a file version."""
        stmt = select(DocumentContentModel).where(DocumentContentModel.file_id == file_id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def create(self, content: DocumentContent) -> DocumentContent:
        """Create a content row."""
        model = DocumentContentModel(
            id=content.id,
            file_id=content.file_id,
            data_room_id=content.data_room_id,
            organization_id=content.organization_id,
            content=content.content,
            content_type=content.content_type,
            created_at=content.created_at,
            updated_at=content.updated_at,
        )
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)

    async def update(self, content: DocumentContent) -> DocumentContent:
        """Persist changes to a content row."""
        model = await self._session.get(DocumentContentModel, content.id)
        if not model:
            raise ValueError(f"Document {content.id} not found")

        model.content = content.content
        model.updated_at = datetime.utcnow()

        await self._session.flush()
        return self._to_entity(model)

    def _to_entity(self, model: DocumentContentModel) -> DocumentContent:
        """Convert ORM model to domain entity."""
        return DocumentContent(
            id=model.id,
            file_id=model.file_id,
            data_room_id=model.data_room_id,
            organization_id=model.organization_id,
            content=model.content,
            content_type=model.content_type,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )


class SQLAlchemyCommentRepository:
    """SQLAlchemy implementation of ICommentRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, comment: FileComment) -> FileComment:
        """Create a comment."""
        model = FileCommentModel(
            id=comment.id,
            file_id=comment.file_id,
            data_room_id=comment.data_room_id,
            organization_id=comment.organization_id,
            commenter_name=comment.commenter_name,
            commenter_email=comment.commenter_email,
            comment=comment.comment,
            is_guest=comment.is_guest,
            created_at=comment.created_at,
        )
        self._session.add(model)
        await self._session.flush()
        return comment

    async def list_for_file(self, file_id: UUID) -> list[FileComment]:
        """List comments on a file, oldest first."""
        stmt = (
            select(FileCommentModel)
            .where(FileCommentModel.file_id == file_id)
            .order_by(FileCommentModel.created_at.asc())
        )
        result = await self._session.execute(stmt)
        return [
            FileComment(
                id=model.id,
                file_id=model.file_id,
                data_room_id=model.data_room_id,
                organization_id=model.organization_id,
                commenter_name=model.commenter_name,
                commenter_email=model.commenter_email,
                comment=model.comment,
                is_guest=bool(model.is_guest),
                created_at=model.created_at,
            )
            for model in result.scalars()
        ]
