"""Effective file access for guests."""

from uuid import UUID

from core.exceptions import AuthorizationError, DataRoomFileNotFoundError
from domain.entities.file import DataRoomFile
from domain.entities.guest_invite import GuestInvite
from domain.entities.permission import AccessLevel, PermissionLevel
from domain.repositories.unit_of_work import IUnitOfWork


class PermissionResolver:
    """Resolves what a guest may do with a file.

    Only the chain root's ``is_restricted`` flag counts; later versions
    inherit it whatever their own flag says. Results are never cached.
    """

    async def load_file(
        self, uow: IUnitOfWork, invite: GuestInvite, file_id: UUID
    ) -> DataRoomFile:
        """Fetch a live file and check it belongs to the guest's data room."""
        file = await uow.files.get(file_id)
        if not file:
            raise DataRoomFileNotFoundError(str(file_id))
        if file.data_room_id != invite.data_room_id:
            raise AuthorizationError("You do not have access to this file")
        return file

    async def get_root(self, uow: IUnitOfWork, file: DataRoomFile) -> DataRoomFile:
        if file.is_root:
            return file
        root = await uow.files.get(file.root_id)
        if not root:
            raise DataRoomFileNotFoundError(str(file.root_id))
        return root

    async def resolve(
        self, uow: IUnitOfWork, invite: GuestInvite, file: DataRoomFile
    ) -> AccessLevel:
        root = await self.get_root(uow, file)
        if not root.is_restricted:
            return AccessLevel.EDIT

        grant = await uow.file_permissions.get_for_guest(root.id, invite.id)
        if not grant:
            return AccessLevel.NONE
        if grant.permission_level == PermissionLevel.EDIT:
            return AccessLevel.EDIT
        return AccessLevel.VIEW

    async def require(
        self,
        uow: IUnitOfWork,
        invite: GuestInvite,
        file: DataRoomFile,
        needed: AccessLevel,
    ) -> AccessLevel:
        """Resolve access and raise unless it covers ``needed``."""
        level = await self.resolve(uow, invite, file)
        if not level.allows(needed):
            if needed == AccessLevel.EDIT and level == AccessLevel.VIEW:
                message = "You do not have edit access to this restricted file"
            else:
                message = "You do not have access to this restricted file"
            raise AuthorizationError(
                message,
                details={"file_id": str(file.id), "required": needed.value, "granted": level.value},
            )
        return level
