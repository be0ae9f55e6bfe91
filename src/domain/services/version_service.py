"""Version history of data room files."""

from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

import structlog

from domain.entities.activity import VersionRestored
from domain.entities.file import DataRoomFile, DocumentContent, FileStatus
from domain.entities.permission import AccessLevel
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.activity_service import ActivityService
from domain.services.guest_auth_service import GuestAuthService
from domain.services.permission_service import PermissionResolver

logger = structlog.get_logger()


@dataclass
class VersionHistory:
    """All live versions of one logical file, newest first."""

    root_file_id: UUID
    versions: list[DataRoomFile]
    profile_map: dict[UUID, str] = field(default_factory=dict)


@dataclass
class RestoredVersion:
    file: DataRoomFile
    restored_version: int

    @property
    def new_version(self) -> int:
        return self.file.version


def clone_as_next_version(
    source: DataRoomFile, root_id: UUID, version: int, **changes: object
) -> DataRoomFile:
    """Copy a version into a new row appended to its chain.

    Review status starts over; identity and timestamps are fresh.
    """
    now = datetime.utcnow()
    return replace(
        source,
        id=uuid4(),
        parent_file_id=root_id,
        version=version,
        status=FileStatus.NOT_OPENED,
        created_at=now,
        updated_at=now,
        deleted_at=None,
        **changes,  # type: ignore[arg-type]
    )


class VersionService:
    """Lists and restores file versions for guests.

    History is append-only: restoring clones the chosen version as a new
    highest version and leaves every existing row untouched.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        activity_service: Optional[ActivityService] = None,
        auth: GuestAuthService | None = None,
        permissions: PermissionResolver | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._activity = activity_service
        self._auth = auth or GuestAuthService()
        self._permissions = permissions or PermissionResolver()

    async def list_versions(
        self, email: str, password: str, file_id: UUID, data_room_id: UUID | None = None
    ) -> VersionHistory:
        """List every live version in the chain of ``file_id``."""
        async with self._uow_factory() as uow:
            invite = await self._auth.verify(uow, email, password, data_room_id)
            file = await self._permissions.load_file(uow, invite, file_id)
            await self._permissions.require(uow, invite, file, AccessLevel.VIEW)

            root_id = file.root_id
            versions = await uow.files.list_chain(file.data_room_id, root_id)
            uploader_ids = list({v.uploaded_by for v in versions if v.uploaded_by})
            profile_map = await uow.organizations.get_profile_names(uploader_ids)

            return VersionHistory(
                root_file_id=root_id,
                versions=versions,
                profile_map=profile_map,
            )

    async def restore_version(
        self, email: str, password: str, version_id: UUID, data_room_id: UUID | None = None
    ) -> RestoredVersion:
        """Clone ``version_id`` as the newest version of its chain.

        Document content attached to the restored version is copied to the
        new row as well.
        """
        async with self._uow_factory() as uow:
            invite = await self._auth.verify(uow, email, password, data_room_id)
            source = await self._permissions.load_file(uow, invite, version_id)
            await self._permissions.require(uow, invite, source, AccessLevel.EDIT)

            root_id = source.root_id
            await uow.files.lock_chain(root_id)
            next_version = await uow.files.get_max_version(source.data_room_id, root_id) + 1
            restored = await uow.files.create(
                clone_as_next_version(source, root_id, next_version)
            )

            content = await uow.documents.get_for_file(source.id)
            if content:
                await uow.documents.create(
                    DocumentContent(
                        file_id=restored.id,
                        data_room_id=content.data_room_id,
                        organization_id=content.organization_id,
                        content=content.content,
                        content_type=content.content_type,
                    )
                )

            await uow.commit()

        logger.info(
            "version_restored",
            root_file_id=str(root_id),
            restored_version=source.version,
            new_version=restored.version,
        )
        if self._activity:
            await self._activity.record_for_guest(
                invite,
                VersionRestored(
                    file_name=source.name,
                    restored_version=source.version,
                    new_version=restored.version,
                ),
            )
        return RestoredVersion(file=restored, restored_version=source.version)
