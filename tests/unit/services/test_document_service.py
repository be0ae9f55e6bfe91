"""Unit tests for DocumentService."""

from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from core.exceptions import AuthorizationError, DocumentNotFoundError
from domain.entities.activity import DocumentEdited, DocumentVersionSaved
from domain.entities.file import DataRoomFile, DocumentContent
from domain.entities.guest_invite import GuestInvite
from domain.entities.permission import FilePermission, PermissionLevel
from domain.services.document_service import (
    DEFAULT_DOCUMENT_CONTENT,
    DocumentService,
    version_file_path,
)
from tests.unit.conftest import GUEST_EMAIL, GUEST_PASSWORD, FakeUnitOfWork, guest_uow


@pytest.fixture
def activity() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def service(uow: FakeUnitOfWork, invite: GuestInvite, activity: AsyncMock) -> DocumentService:
    guest_uow(uow, invite)
    return DocumentService(lambda: uow, activity_service=activity)


@pytest.fixture
def document(root_file: DataRoomFile) -> DocumentContent:
    return DocumentContent(
        file_id=root_file.id,
        data_room_id=root_file.data_room_id,
        organization_id=root_file.organization_id,
        content="<p>old</p>",
    )


class TestVersionFilePath:
    def test_inserts_version_before_extension(self, root_file: DataRoomFile):
        path = version_file_path(root_file, 3, 1700000000000)
        assert path == (
            f"{root_file.organization_id}/{root_file.data_room_id}/"
            "1700000000000-Report_v3.docx"
        )


class TestGetContent:
    @pytest.mark.asyncio
    async def test_returns_existing(
        self,
        service: DocumentService,
        uow: FakeUnitOfWork,
        root_file: DataRoomFile,
        document: DocumentContent,
    ):
        uow.files.get.return_value = root_file
        uow.documents.get_for_file.return_value = document

        result = await service.get_content(GUEST_EMAIL, GUEST_PASSWORD, root_file.id)

        assert result is document
        uow.documents.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_creates_default_on_first_open(
        self, service: DocumentService, uow: FakeUnitOfWork, root_file: DataRoomFile
    ):
        uow.files.get.return_value = root_file

        result = await service.get_content(GUEST_EMAIL, GUEST_PASSWORD, root_file.id)

        assert result.content == DEFAULT_DOCUMENT_CONTENT
        assert result.file_id == root_file.id
        assert uow.committed


class TestSaveContent:
    @pytest.mark.asyncio
    async def test_in_place_update(
        self,
        service: DocumentService,
        uow: FakeUnitOfWork,
        root_file: DataRoomFile,
        document: DocumentContent,
        activity: AsyncMock,
    ):
        uow.files.get.return_value = root_file
        uow.documents.get.return_value = document

        saved = await service.save_content(
            GUEST_EMAIL, GUEST_PASSWORD, root_file.id, document.id, "<p>new</p>"
        )

        assert not saved.created_version
        uow.files.lock_chain.assert_not_called()
        assert saved.document.content == "<p>new</p>"
        assert saved.file is root_file
        uow.files.create.assert_not_called()
        details = activity.record_for_guest.call_args[0][1]
        assert isinstance(details, DocumentEdited)

    @pytest.mark.asyncio
    async def test_create_version_leaves_current_untouched(
        self,
        service: DocumentService,
        uow: FakeUnitOfWork,
        root_file: DataRoomFile,
        document: DocumentContent,
        activity: AsyncMock,
    ):
        uow.files.get.return_value = root_file
        uow.documents.get.return_value = document
        uow.files.get_max_version.return_value = 2

        saved = await service.save_content(
            GUEST_EMAIL,
            GUEST_PASSWORD,
            root_file.id,
            document.id,
            "<p>héllo</p>",
            create_version=True,
        )

        assert saved.created_version
        assert saved.file.version == 3
        assert saved.file.parent_file_id == root_file.id
        assert saved.file.file_size == len("<p>héllo</p>".encode("utf-8"))
        assert saved.file.file_path.endswith("-Report_v3.docx")
        assert saved.document.file_id == saved.file.id
        assert saved.document.content == "<p>héllo</p>"
        assert document.content == "<p>old</p>"
        uow.documents.update.assert_not_called()
        uow.files.lock_chain.assert_awaited_once_with(root_file.id)
        calls = [name for name, _, _ in uow.files.mock_calls]
        assert calls.index("lock_chain") < calls.index("get_max_version")
        details = activity.record_for_guest.call_args[0][1]
        assert details == DocumentVersionSaved(
            file_id=str(root_file.id), file_name=root_file.name, new_version=3
        )

    @pytest.mark.asyncio
    async def test_view_grant_cannot_save(
        self,
        service: DocumentService,
        uow: FakeUnitOfWork,
        root_file: DataRoomFile,
        invite: GuestInvite,
        document: DocumentContent,
    ):
        root_file.is_restricted = True
        uow.files.get.return_value = root_file
        uow.documents.get.return_value = document
        uow.file_permissions.get_for_guest.return_value = FilePermission(
            file_id=root_file.id, guest_invite_id=invite.id, permission_level=PermissionLevel.VIEW
        )

        with pytest.raises(AuthorizationError):
            await service.save_content(
                GUEST_EMAIL, GUEST_PASSWORD, root_file.id, document.id, "<p>x</p>"
            )
        uow.documents.update.assert_not_called()

    @pytest.mark.asyncio
    async def test_document_of_other_file(
        self,
        service: DocumentService,
        uow: FakeUnitOfWork,
        root_file: DataRoomFile,
        document: DocumentContent,
    ):
        document.file_id = uuid4()
        uow.files.get.return_value = root_file
        uow.documents.get.return_value = document

        with pytest.raises(DocumentNotFoundError):
            await service.save_content(
                GUEST_EMAIL, GUEST_PASSWORD, root_file.id, document.id, "<p>x</p>"
            )
