"""SQLAlchemy implementation of Activity repository."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.activity import ActivityAction, DataRoomActivity, details_from_dict
from infrastructure.database.models import DataRoomActivityModel


class SQLAlchemyActivityRepository:
    """SQLAlchemy implementation of IActivityRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, activity: DataRoomActivity) -> DataRoomActivity:
        """Append a new activity entry."""
        payload = activity.details.to_dict()
        model = DataRoomActivityModel(
            id=activity.id,
            data_room_id=activity.data_room_id,
            organization_id=activity.organization_id,
            user_name=activity.user_name,
            user_email=activity.user_email,
            is_guest=activity.is_guest,
            action=activity.action.value,
            details=payload or None,
            created_at=activity.created_at,
        )
        self._session.add(model)
        await self._session.flush()
        return activity

    async def get_for_data_room(
        self,
        data_room_id: UUID,
        limit: int = 100,
    ) -> list[DataRoomActivity]:
        """Get activity entries for a data room, newest first."""
        stmt = (
            select(DataRoomActivityModel)
            .where(DataRoomActivityModel.data_room_id == data_room_id)
            .order_by(DataRoomActivityModel.created_at.desc())
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    def _to_entity(self, model: DataRoomActivityModel) -> DataRoomActivity:
        """Convert ORM model to domain entity."""
        return DataRoomActivity(
            id=model.id,
            data_room_id=model.data_room_id,
            organization_id=model.organization_id,
            user_name=model.user_name,
            user_email=model.user_email,
            is_guest=bool(model.is_guest),
            details=details_from_dict(ActivityAction(model.action), model.details),
            created_at=model.created_at,
        )
