"""Guest operations on data room files: comments, status, transfer, restrictions."""

import re
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from uuid import UUID

import structlog

from core.exceptions import (
    AuthorizationError,
    DataRoomNotFoundError,
    DependencyError,
    FileTooLargeError,
    FolderNotFoundError,
    InvalidFileStatusError,
    UnsupportedFileTypeError,
)
from domain.entities.activity import (
    CommentAdded,
    FileDownloaded,
    FileStatusChanged,
    FileUploaded,
    PermissionsChanged,
)
from domain.entities.file import DataRoomFile, FileComment, FileStatus
from domain.entities.guest_invite import GuestInvite
from domain.entities.permission import AccessLevel, FilePermission, PermissionLevel
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.activity_service import ActivityService
from domain.services.guest_auth_service import GuestAuthService
from domain.services.permission_service import PermissionResolver
from infrastructure.storage.provider import IObjectStorage

logger = structlog.get_logger()

SUPPORTED_MIME_TYPES = frozenset(
    {
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "application/vnd.ms-excel",
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        "image/jpeg",
        "image/jpg",
        "image/png",
        "video/mp4",
        "audio/mpeg",
        "audio/mp3",
    }
)

_UNSAFE_NAME_CHARS = re.compile(r"[^a-zA-Z0-9._-]")


def sanitize_file_name(name: str) -> str:
    return _UNSAFE_NAME_CHARS.sub("_", name)


def parse_file_status(value: str) -> FileStatus:
    """Map a raw status string onto the review vocabulary."""
    try:
        return FileStatus(value)
    except ValueError:
        raise InvalidFileStatusError(value, [s.value for s in FileStatus]) from None


@dataclass
class DownloadLink:
    url: str
    file_name: str
    mime_type: str | None
    expires_in: int


@dataclass
class GrantRequest:
    """One entry of a restriction update: a team member or a guest."""

    reference_id: UUID
    grantee_type: str
    permission_level: PermissionLevel = PermissionLevel.VIEW


@dataclass
class FilePermissionsView:
    """Restriction state of a file and who it can be shared with."""

    file: DataRoomFile
    team: list[dict] = field(default_factory=list)
    guests: list[GuestInvite] = field(default_factory=list)
    grants: list[FilePermission] = field(default_factory=list)


class GuestFileService:
    """File-level guest operations.

    Every operation re-verifies the guest's credentials and access level.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        storage: IObjectStorage,
        activity_service: Optional[ActivityService] = None,
        auth: GuestAuthService | None = None,
        permissions: PermissionResolver | None = None,
        signed_url_ttl_seconds: int = 3600,
        max_upload_bytes: int = 50 * 1024 * 1024,
    ) -> None:
        self._uow_factory = uow_factory
        self._storage = storage
        self._activity = activity_service
        self._auth = auth or GuestAuthService()
        self._permissions = permissions or PermissionResolver()
        self._signed_url_ttl = signed_url_ttl_seconds
        self._max_upload_bytes = max_upload_bytes

    # --- Comments ---

    async def add_comment(
        self,
        email: str,
        password: str,
        file_id: UUID,
        comment: str,
        data_room_id: UUID | None = None,
    ) -> FileComment:
        async with self._uow_factory() as uow:
            invite = await self._auth.verify(uow, email, password, data_room_id)
            file = await self._permissions.load_file(uow, invite, file_id)
            await self._permissions.require(uow, invite, file, AccessLevel.VIEW)

            created = await uow.comments.create(
                FileComment(
                    file_id=file.id,
                    data_room_id=file.data_room_id,
                    organization_id=file.organization_id,
                    commenter_name=invite.display_name,
                    commenter_email=invite.email,
                    comment=comment.strip(),
                )
            )
            await uow.commit()

        if self._activity:
            await self._activity.record_for_guest(
                invite, CommentAdded(file_id=str(file.id), file_name=file.name)
            )
        return created

    async def list_comments(
        self, email: str, password: str, file_id: UUID, data_room_id: UUID | None = None
    ) -> list[FileComment]:
        """List comments on a file, oldest first."""
        async with self._uow_factory() as uow:
            invite = await self._auth.verify(uow, email, password, data_room_id)
            file = await self._permissions.load_file(uow, invite, file_id)
            await self._permissions.require(uow, invite, file, AccessLevel.VIEW)
            return await uow.comments.list_for_file(file.id)

    # --- Review status ---

    async def update_status(
        self,
        email: str,
        password: str,
        file_id: UUID,
        status: str,
        data_room_id: UUID | None = None,
    ) -> DataRoomFile:
        new_status = parse_file_status(status)

        async with self._uow_factory() as uow:
            invite = await self._auth.verify(uow, email, password, data_room_id)
            file = await self._permissions.load_file(uow, invite, file_id)
            await self._permissions.require(uow, invite, file, AccessLevel.VIEW)

            file.status = new_status
            file.updated_at = datetime.utcnow()
            updated = await uow.files.update(file)
            await uow.commit()

        if self._activity:
            await self._activity.record_for_guest(
                invite, FileStatusChanged(file_id=str(file.id), new_status=new_status.value)
            )
        return updated

    # --- Transfer ---

    async def create_download_url(
        self,
        email: str,
        password: str,
        file_id: UUID,
        mode: str = "download",
        data_room_id: UUID | None = None,
    ) -> DownloadLink:
        """Sign a short-lived URL for a file body.

        ``download`` forces an attachment and is audited; ``preview`` is not.
        """
        async with self._uow_factory() as uow:
            invite = await self._auth.verify(uow, email, password, data_room_id)
            file = await self._permissions.load_file(uow, invite, file_id)
            await self._permissions.require(uow, invite, file, AccessLevel.VIEW)

        is_download = mode == "download"
        url = await self._storage.create_signed_url(
            file.file_path,
            self._signed_url_ttl,
            download_name=file.name if is_download else None,
        )

        if is_download and self._activity:
            await self._activity.record_for_guest(
                invite, FileDownloaded(file_id=str(file.id), file_name=file.name)
            )
        return DownloadLink(
            url=url,
            file_name=file.name,
            mime_type=file.mime_type,
            expires_in=self._signed_url_ttl,
        )

    async def upload_file(
        self,
        email: str,
        password: str,
        file_name: str,
        content_type: str,
        data: bytes,
        folder_id: UUID | None = None,
        data_room_id: UUID | None = None,
    ) -> DataRoomFile:
        """Store a new root file (version 1) uploaded by a guest.

        The stored object is removed again if the database insert fails.
        """
        if content_type not in SUPPORTED_MIME_TYPES:
            raise UnsupportedFileTypeError(content_type)
        if len(data) > self._max_upload_bytes:
            raise FileTooLargeError(len(data), self._max_upload_bytes)

        async with self._uow_factory() as uow:
            invite = await self._auth.verify(uow, email, password, data_room_id)
            room = await uow.data_rooms.get(invite.data_room_id)
            if not room:
                raise DataRoomNotFoundError(str(invite.data_room_id))
            if folder_id and not await uow.data_rooms.get_folder(room.id, folder_id):
                raise FolderNotFoundError(str(folder_id))

            path = (
                f"{invite.organization_id}/{invite.data_room_id}/"
                f"{int(time.time() * 1000)}-{sanitize_file_name(file_name)}"
            )
            await self._storage.upload(path, data, content_type)

            try:
                created = await uow.files.create(
                    DataRoomFile(
                        data_room_id=invite.data_room_id,
                        organization_id=invite.organization_id,
                        folder_id=folder_id,
                        name=file_name,
                        file_path=path,
                        file_size=len(data),
                        mime_type=content_type,
                        uploaded_by=room.created_by,
                        assigned_guest_id=invite.id,
                    )
                )
                await uow.commit()
            except Exception:
                logger.warning("upload_insert_failed", path=path)
                await self._remove_orphan(path)
                raise

        if self._activity:
            await self._activity.record_for_guest(
                invite,
                FileUploaded(
                    file_id=str(created.id),
                    file_name=created.name,
                    file_size=created.file_size,
                    mime_type=created.mime_type,
                ),
            )
        return created

    async def _remove_orphan(self, path: str) -> None:
        try:
            await self._storage.remove([path])
        except DependencyError:
            logger.exception("upload_cleanup_failed", path=path)

    # --- Restrictions ---

    async def get_permissions(
        self, email: str, password: str, file_id: UUID, data_room_id: UUID | None = None
    ) -> FilePermissionsView:
        """Return a root file's restriction flag, its grants and possible grantees.

        Only guests who can view the file may see who it is shared with.
        """
        async with self._uow_factory() as uow:
            invite = await self._auth.verify(uow, email, password, data_room_id)
            file = await self._permissions.load_file(uow, invite, file_id)
            await self._permissions.require(uow, invite, file, AccessLevel.VIEW)
            root = await self._permissions.get_root(uow, file)
            return await self._build_view(uow, invite, root)

    async def set_permissions(
        self,
        email: str,
        password: str,
        file_id: UUID,
        is_restricted: bool,
        grants: list[GrantRequest],
        data_room_id: UUID | None = None,
    ) -> FilePermissionsView:
        """Replace a root file's restriction flag and grant list.

        Allowed when the file is currently unrestricted or the guest holds
        an ``edit`` grant on it. A grantee listed more than once keeps its
        last entry.
        """
        async with self._uow_factory() as uow:
            invite = await self._auth.verify(uow, email, password, data_room_id)
            file = await self._permissions.load_file(uow, invite, file_id)
            level = await self._permissions.resolve(uow, invite, file)
            if level != AccessLevel.EDIT:
                raise AuthorizationError(
                    "You don't have permission to manage this file's restrictions"
                )

            root = await self._permissions.get_root(uow, file)
            root.is_restricted = is_restricted
            root.updated_at = datetime.utcnow()
            root = await uow.files.update(root)

            rows = []
            if is_restricted:
                unique = {(g.grantee_type, g.reference_id): g for g in grants}
                rows = [
                    FilePermission(
                        file_id=root.id,
                        guest_invite_id=g.reference_id if g.grantee_type == "guest" else None,
                        user_id=g.reference_id if g.grantee_type == "team" else None,
                        permission_level=g.permission_level,
                    )
                    for g in unique.values()
                ]
            await uow.file_permissions.replace_for_file(root.id, rows)
            view = await self._build_view(uow, invite, root)
            await uow.commit()

        logger.info(
            "file_permissions_changed",
            file_id=str(root.id),
            is_restricted=is_restricted,
            grant_count=len(rows),
        )
        if self._activity:
            await self._activity.record_for_guest(
                invite,
                PermissionsChanged(
                    file_id=str(root.id),
                    file_name=root.name,
                    is_restricted=is_restricted,
                    granted_to_count=len(rows),
                ),
            )
        return view

    async def _build_view(
        self, uow: IUnitOfWork, invite: GuestInvite, root: DataRoomFile
    ) -> FilePermissionsView:
        team: list[dict] = []
        room = await uow.data_rooms.get(invite.data_room_id)
        if room and room.created_by:
            creator = await uow.organizations.get_profile(room.created_by)
            if creator:
                team.append(
                    {
                        "id": creator.id,
                        "name": creator.full_name or "Data Room Owner",
                        "is_creator": True,
                    }
                )

        signed = await uow.guest_invites.list_nda_signed(invite.data_room_id)
        guests = [g for g in signed if g.id != invite.id]
        grants = await uow.file_permissions.list_for_file(root.id)
        return FilePermissionsView(file=root, team=team, guests=guests, grants=grants)
