"""Guest view of a data room: content listing, activity feed, chat."""

from collections.abc import Callable
from dataclasses import dataclass, field, replace
from typing import Optional
from uuid import UUID

from core.exceptions import DataRoomNotFoundError, FolderNotFoundError, NdaUpdatedError
from domain.entities.activity import (
    DataRoomAccessed,
    DataRoomActivity,
    FolderViewed,
    MessageSent,
)
from domain.entities.data_room import DataRoom, DataRoomFolder, DataRoomMessage
from domain.entities.file import DataRoomFile
from domain.entities.guest_invite import GuestInvite
from domain.entities.permission import PermissionLevel
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.activity_service import ActivityService
from domain.services.guest_auth_service import GuestAuthService

ACTIVITY_FEED_LIMIT = 100


@dataclass
class FileListing:
    """Latest version of a logical file as shown in a folder.

    Folder and assignment come from the chain root, which owns them for
    the whole chain.
    """

    file: DataRoomFile
    root_file_id: UUID
    permission_level: PermissionLevel


@dataclass
class Breadcrumb:
    id: UUID
    name: str


@dataclass
class DataRoomContents:
    data_room: DataRoom
    invite: GuestInvite
    current_folder_id: UUID | None
    folders: list[DataRoomFolder] = field(default_factory=list)
    files: list[FileListing] = field(default_factory=list)
    breadcrumbs: list[Breadcrumb] = field(default_factory=list)
    profile_map: dict[UUID, str] = field(default_factory=dict)


def latest_versions(files: list[DataRoomFile]) -> list[tuple[DataRoomFile, DataRoomFile]]:
    """Group live files by chain and pair each chain's newest version with its root.

    Deleting a root deletes the file, so chains whose root row is gone are
    left out even when later versions survive.
    """
    chains: dict[UUID, list[DataRoomFile]] = {}
    for f in files:
        chains.setdefault(f.root_id, []).append(f)

    pairs = []
    for versions in chains.values():
        root = next((v for v in versions if v.is_root), None)
        if root is None:
            continue
        versions.sort(key=lambda v: v.version, reverse=True)
        pairs.append((versions[0], root))
    return pairs


class DataRoomService:
    """Read-mostly guest operations scoped to the guest's data room."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        activity_service: Optional[ActivityService] = None,
        auth: GuestAuthService | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._activity = activity_service
        self._auth = auth or GuestAuthService()

    async def get_content(
        self,
        email: str,
        password: str,
        folder_id: UUID | None = None,
        data_room_id: UUID | None = None,
    ) -> DataRoomContents:
        """List the folders and files a guest can see in one folder.

        Raises:
            NdaUpdatedError: The room's NDA changed since the guest signed it.
        """
        async with self._uow_factory() as uow:
            invite = await self._auth.verify(uow, email, password, data_room_id)
            room = await uow.data_rooms.get(invite.data_room_id)
            if not room:
                raise DataRoomNotFoundError(str(invite.data_room_id))

            await self._check_nda_current(uow, room, invite)

            if folder_id and not await uow.data_rooms.get_folder(room.id, folder_id):
                raise FolderNotFoundError(str(folder_id))

            folders = await uow.data_rooms.list_folders(room.id, folder_id)
            all_files = await uow.files.list_for_room(room.id)

            in_folder = [
                (latest, root)
                for latest, root in latest_versions(all_files)
                if root.folder_id == folder_id
            ]
            grants = await uow.file_permissions.list_for_guest(
                invite.id, [root.id for _, root in in_folder]
            )
            grant_levels = {g.file_id: g.permission_level for g in grants}

            listings = []
            for latest, root in in_folder:
                if not root.is_restricted:
                    level = PermissionLevel.EDIT
                elif root.id in grant_levels:
                    level = grant_levels[root.id]
                else:
                    continue
                shown = replace(
                    latest,
                    folder_id=root.folder_id,
                    assigned_to=root.assigned_to,
                    assigned_guest_id=root.assigned_guest_id,
                )
                listings.append(
                    FileListing(file=shown, root_file_id=root.id, permission_level=level)
                )

            profile_map = await self._profile_map(uow, listings)
            breadcrumbs = await self._breadcrumbs(uow, room.id, folder_id)

        if self._activity:
            details = (
                FolderViewed(folder_id=str(folder_id)) if folder_id else DataRoomAccessed()
            )
            await self._activity.record_for_guest(invite, details)

        return DataRoomContents(
            data_room=room,
            invite=invite,
            current_folder_id=folder_id,
            folders=folders,
            files=listings,
            breadcrumbs=breadcrumbs,
            profile_map=profile_map,
        )

    async def get_activity(
        self, email: str, password: str, data_room_id: UUID | None = None
    ) -> list[DataRoomActivity]:
        """Latest activity in the guest's data room, newest first."""
        async with self._uow_factory() as uow:
            invite = await self._auth.verify(uow, email, password, data_room_id)
            return await uow.activities.get_for_data_room(
                invite.data_room_id, limit=ACTIVITY_FEED_LIMIT
            )

    async def send_message(
        self, email: str, password: str, message: str, data_room_id: UUID | None = None
    ) -> DataRoomMessage:
        async with self._uow_factory() as uow:
            invite = await self._auth.verify(uow, email, password, data_room_id)
            created = await uow.data_rooms.add_message(
                DataRoomMessage(
                    data_room_id=invite.data_room_id,
                    organization_id=invite.organization_id,
                    sender_name=invite.display_name,
                    sender_email=invite.email,
                    message=message.strip(),
                )
            )
            await uow.commit()

        if self._activity:
            await self._activity.record_for_guest(invite, MessageSent())
        return created

    async def _check_nda_current(
        self, uow: IUnitOfWork, room: DataRoom, invite: GuestInvite
    ) -> None:
        if not (room.nda_required and invite.nda_signed_at and room.nda_content_hash):
            return
        signature = await uow.data_rooms.get_latest_nda_signature(room.id, invite.email)
        if signature and signature.nda_content_hash != room.nda_content_hash:
            raise NdaUpdatedError()

    async def _profile_map(
        self, uow: IUnitOfWork, listings: list[FileListing]
    ) -> dict[UUID, str]:
        user_ids = {
            uid
            for listing in listings
            for uid in (listing.file.uploaded_by, listing.file.assigned_to)
            if uid
        }
        profile_map = dict(await uow.organizations.get_profile_names(list(user_ids)))

        guest_ids = {
            listing.file.assigned_guest_id
            for listing in listings
            if listing.file.assigned_guest_id
        }
        if guest_ids:
            for guest in await uow.guest_invites.get_many(list(guest_ids)):
                profile_map[guest.id] = guest.guest_name or guest.email
        return profile_map

    async def _breadcrumbs(
        self, uow: IUnitOfWork, data_room_id: UUID, folder_id: UUID | None
    ) -> list[Breadcrumb]:
        crumbs: list[Breadcrumb] = []
        seen: set[UUID] = set()
        current = folder_id
        while current and current not in seen:
            seen.add(current)
            folder = await uow.data_rooms.get_folder(data_room_id, current)
            if not folder:
                break
            crumbs.insert(0, Breadcrumb(id=folder.id, name=folder.name))
            current = folder.parent_id
        return crumbs
