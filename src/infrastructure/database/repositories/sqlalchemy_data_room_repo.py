"""SQLAlchemy implementation of DataRoom repository."""

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.data_room import DataRoom, DataRoomFolder, DataRoomMessage, NdaSignature
from infrastructure.database.models import (
    DataRoomFolderModel,
    DataRoomMessageModel,
    DataRoomModel,
    NdaSignatureModel,
)


class SQLAlchemyDataRoomRepository:
    """SQLAlchemy implementation of IDataRoomRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> DataRoom | None:
        """Get a data room by ID."""
        model = await self._session.get(DataRoomModel, id)
        return self._to_entity(model) if model else None

    async def create(self, data_room: DataRoom) -> DataRoom:
        """Create a new data room."""
        model = DataRoomModel(
            id=data_room.id,
            organization_id=data_room.organization_id,
            name=data_room.name,
            description=data_room.description,
            created_by=data_room.created_by,
            nda_required=data_room.nda_required,
            nda_content=data_room.nda_content,
            nda_content_hash=data_room.nda_content_hash,
            created_at=data_room.created_at,
        )
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)

    async def get_folder(self, data_room_id: UUID, folder_id: UUID) -> DataRoomFolder | None:
        """Get a non-deleted folder inside a data room."""
        stmt = select(DataRoomFolderModel).where(
            DataRoomFolderModel.id == folder_id,
            DataRoomFolderModel.data_room_id == data_room_id,
            DataRoomFolderModel.deleted_at.is_(None),
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._folder_to_entity(model) if model else None

    async def list_folders(
        self, data_room_id: UUID, parent_id: UUID | None
    ) -> list[DataRoomFolder]:
        """List non-deleted folders directly under ``parent_id``."""
        stmt = select(DataRoomFolderModel).where(
            DataRoomFolderModel.data_room_id == data_room_id,
            DataRoomFolderModel.deleted_at.is_(None),
        )
        if parent_id is None:
            stmt = stmt.where(DataRoomFolderModel.parent_id.is_(None))
        else:
            stmt = stmt.where(DataRoomFolderModel.parent_id == parent_id)
        result = await self._session.execute(stmt.order_by(DataRoomFolderModel.name))
        return [self._folder_to_entity(model) for model in result.scalars()]

    async def create_folder(self, folder: DataRoomFolder) -> DataRoomFolder:
        """Create a folder."""
        model = DataRoomFolderModel(
            id=folder.id,
            data_room_id=folder.data_room_id,
            parent_id=folder.parent_id,
            name=folder.name,
            created_at=folder.created_at,
            deleted_at=folder.deleted_at,
        )
        self._session.add(model)
        await self._session.flush()
        return self._folder_to_entity(model)

    async def add_message(self, message: DataRoomMessage) -> DataRoomMessage:
        """Append a chat message to a data room."""
        model = DataRoomMessageModel(
            id=message.id,
            data_room_id=message.data_room_id,
            organization_id=message.organization_id,
            sender_id=message.sender_id,
            sender_name=message.sender_name,
            sender_email=message.sender_email,
            message=message.message,
            is_guest=message.is_guest,
            created_at=message.created_at,
        )
        self._session.add(model)
        await self._session.flush()
        return message

    async def add_nda_signature(self, signature: NdaSignature) -> NdaSignature:
        """Record an NDA signature."""
        model = NdaSignatureModel(
            id=signature.id,
            data_room_id=signature.data_room_id,
            signer_name=signature.signer_name,
            signer_email=signature.signer_email,
            ip_address=signature.ip_address,
            nda_content_hash=signature.nda_content_hash,
            signed_at=signature.signed_at,
        )
        self._session.add(model)
        await self._session.flush()
        return signature

    async def get_latest_nda_signature(
        self, data_room_id: UUID, email: str
    ) -> NdaSignature | None:
        """Get the most recent NDA signature by an email in a data room."""
        stmt = (
            select(NdaSignatureModel)
            .where(
                NdaSignatureModel.data_room_id == data_room_id,
                func.lower(NdaSignatureModel.signer_email) == email.lower(),
            )
            .order_by(NdaSignatureModel.signed_at.desc())
            .limit(1)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        if not model:
            return None
        return NdaSignature(
            id=model.id,
            data_room_id=model.data_room_id,
            signer_name=model.signer_name,
            signer_email=model.signer_email,
            ip_address=model.ip_address,
            nda_content_hash=model.nda_content_hash,
            signed_at=model.signed_at,
        )

    def _to_entity(self, model: DataRoomModel) -> DataRoom:
        """Convert ORM model to domain entity."""
        return DataRoom(
            id=model.id,
            organization_id=model.organization_id,
            name=model.name,
            description=model.description,
            created_by=model.created_by,
            nda_required=bool(model.nda_required),
            nda_content=model.nda_content,
            nda_content_hash=model.nda_content_hash,
            created_at=model.created_at,
        )

    def _folder_to_entity(self, model: DataRoomFolderModel) -> DataRoomFolder:
        return DataRoomFolder(
            id=model.id,
            data_room_id=model.data_room_id,
            parent_id=model.parent_id,
            name=model.name,
            created_at=model.created_at,
            deleted_at=model.deleted_at,
        )
