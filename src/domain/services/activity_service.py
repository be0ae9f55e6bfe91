"""Data room audit trail."""

from collections.abc import Callable
from uuid import UUID

import structlog

from domain.entities.activity import ActivityDetails, DataRoomActivity
from domain.entities.guest_invite import GuestInvite
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()


class ActivityService:
    """Appends activity events after the operation they describe has committed."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def record(
        self,
        data_room_id: UUID,
        organization_id: UUID,
        actor_name: str,
        actor_email: str,
        is_guest: bool,
        details: ActivityDetails,
    ) -> DataRoomActivity | None:
        """Append one activity event in its own transaction.

        The action code is carried by the payload type. Failures are logged
        and swallowed so auditing never fails a request that already
        succeeded.

        Returns:
            The stored event, or None if it could not be written.
        """
        activity = DataRoomActivity(
            data_room_id=data_room_id,
            organization_id=organization_id,
            user_name=actor_name,
            user_email=actor_email,
            is_guest=is_guest,
            details=details,
        )
        try:
            async with self._uow_factory() as uow:
                created = await uow.activities.create(activity)
                await uow.commit()
                return created
        except Exception:
            logger.exception(
                "activity_record_failed",
                action=activity.action.value,
                data_room_id=str(data_room_id),
            )
            return None

    async def record_for_guest(
        self, invite: GuestInvite, details: ActivityDetails
    ) -> DataRoomActivity | None:
        """Record an event performed by a guest."""
        return await self.record(
            data_room_id=invite.data_room_id,
            organization_id=invite.organization_id,
            actor_name=invite.display_name,
            actor_email=invite.email,
            is_guest=True,
            details=details,
        )
