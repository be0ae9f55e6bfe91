"""Rich-text document content for data room files."""

import re
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from core.exceptions import DocumentNotFoundError
from domain.entities.activity import DocumentEdited, DocumentVersionSaved
from domain.entities.file import DataRoomFile, DocumentContent
from domain.entities.permission import AccessLevel
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.activity_service import ActivityService
from domain.services.guest_auth_service import GuestAuthService
from domain.services.permission_service import PermissionResolver
from domain.services.version_service import clone_as_next_version

DEFAULT_DOCUMENT_CONTENT = "<p>Start editing this document...</p>"

_EXTENSION = re.compile(r"\.[^/.]+$")


def version_file_path(file: DataRoomFile, version: int, timestamp_ms: int) -> str:
    """Storage path for a saved document version: ``{org}/{room}/{ts}-{base}_v{n}.{ext}``."""
    base = _EXTENSION.sub("", file.name)
    extension = file.name.rsplit(".", 1)[-1] if "." in file.name else "docx"
    return (
        f"{file.organization_id}/{file.data_room_id}/"
        f"{timestamp_ms}-{base}_v{version}.{extension}"
    )


@dataclass
class SavedDocument:
    document: DocumentContent
    file: DataRoomFile
    created_version: bool = False


class DocumentService:
    """Reads and saves document content on behalf of guests."""

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

    async def get_content(
        self, email: str, password: str, file_id: UUID, data_room_id: UUID | None = None
    ) -> DocumentContent:
        """Get the content of a file version, creating an empty document on first open."""
        async with self._uow_factory() as uow:
            invite = await self._auth.verify(uow, email, password, data_room_id)
            file = await self._permissions.load_file(uow, invite, file_id)
            await self._permissions.require(uow, invite, file, AccessLevel.VIEW)

            document = await uow.documents.get_for_file(file.id)
            if document:
                return document

            document = await uow.documents.create(
                DocumentContent(
                    file_id=file.id,
                    data_room_id=file.data_room_id,
                    organization_id=file.organization_id,
                    content=DEFAULT_DOCUMENT_CONTENT,
                )
            )
            await uow.commit()
            return document

    async def save_content(
        self,
        email: str,
        password: str,
        file_id: UUID,
        document_id: UUID,
        content: str,
        create_version: bool = False,
        data_room_id: UUID | None = None,
    ) -> SavedDocument:
        """Save document content.

        Without ``create_version`` the document is updated in place. With it,
        the edit is appended to the chain as a new file version carrying its
        own content row, and the current version is left as it was.
        """
        async with self._uow_factory() as uow:
            invite = await self._auth.verify(uow, email, password, data_room_id)
            file = await self._permissions.load_file(uow, invite, file_id)
            await self._permissions.require(uow, invite, file, AccessLevel.EDIT)

            document = await uow.documents.get(document_id)
            if not document or document.file_id != file.id:
                raise DocumentNotFoundError(str(document_id))

            if not create_version:
                document.content = content
                saved = SavedDocument(document=await uow.documents.update(document), file=file)
            else:
                root_id = file.root_id
                await uow.files.lock_chain(root_id)
                version = await uow.files.get_max_version(file.data_room_id, root_id) + 1
                timestamp_ms = int(time.time() * 1000)
                new_file = await uow.files.create(
                    clone_as_next_version(
                        file,
                        root_id,
                        version,
                        file_path=version_file_path(file, version, timestamp_ms),
                        file_size=len(content.encode("utf-8")),
                    )
                )
                new_document = await uow.documents.create(
                    DocumentContent(
                        file_id=new_file.id,
                        data_room_id=file.data_room_id,
                        organization_id=file.organization_id,
                        content=content,
                        content_type=document.content_type,
                    )
                )
                saved = SavedDocument(document=new_document, file=new_file, created_version=True)

            await uow.commit()

        if self._activity:
            details = (
                DocumentVersionSaved(
                    file_id=str(file.id), file_name=file.name, new_version=saved.file.version
                )
                if saved.created_version
                else DocumentEdited(file_id=str(file.id), file_name=file.name)
            )
            await self._activity.record_for_guest(invite, details)
        return saved
