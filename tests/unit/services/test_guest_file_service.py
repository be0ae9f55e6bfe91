"""Unit tests for GuestFileService."""

from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from core.exceptions import (
    AuthorizationError,
    DependencyError,
    FileTooLargeError,
    FolderNotFoundError,
    InvalidFileStatusError,
    UnsupportedFileTypeError,
)
from domain.entities.activity import FileDownloaded, FileUploaded, PermissionsChanged
from domain.entities.data_room import DataRoom
from domain.entities.file import DataRoomFile, FileStatus
from domain.entities.guest_invite import GuestInvite
from domain.entities.permission import FilePermission, PermissionLevel
from domain.services.guest_file_service import (
    GrantRequest,
    GuestFileService,
    parse_file_status,
    sanitize_file_name,
)
from tests.unit.conftest import GUEST_EMAIL, GUEST_PASSWORD, FakeUnitOfWork, guest_uow


@pytest.fixture
def storage() -> AsyncMock:
    storage = AsyncMock()
    storage.create_signed_url.return_value = "https://storage.test/signed"
    return storage


@pytest.fixture
def activity() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def service(
    uow: FakeUnitOfWork, invite: GuestInvite, storage: AsyncMock, activity: AsyncMock
) -> GuestFileService:
    guest_uow(uow, invite)
    return GuestFileService(
        lambda: uow,
        storage=storage,
        activity_service=activity,
        signed_url_ttl_seconds=600,
        max_upload_bytes=1024,
    )


class TestHelpers:
    def test_sanitize_file_name(self):
        assert sanitize_file_name("Q3 report (final).pdf") == "Q3_report__final_.pdf"

    def test_parse_valid_status(self):
        assert parse_file_status("in_review") == FileStatus.IN_REVIEW

    def test_parse_invalid_status(self):
        with pytest.raises(InvalidFileStatusError) as exc_info:
            parse_file_status("archived")
        assert exc_info.value.status_code == 400
        assert "not_opened" in exc_info.value.details["allowed"]


class TestComments:
    @pytest.mark.asyncio
    async def test_add_comment_as_guest(
        self,
        service: GuestFileService,
        uow: FakeUnitOfWork,
        root_file: DataRoomFile,
        activity: AsyncMock,
    ):
        uow.files.get.return_value = root_file

        comment = await service.add_comment(GUEST_EMAIL, GUEST_PASSWORD, root_file.id, "  Looks good ")

        assert comment.comment == "Looks good"
        assert comment.commenter_name == "Grace Guest"
        assert comment.is_guest
        assert uow.committed
        activity.record_for_guest.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_restricted_file_hidden_from_comments(
        self, service: GuestFileService, uow: FakeUnitOfWork, root_file: DataRoomFile
    ):
        root_file.is_restricted = True
        uow.files.get.return_value = root_file

        with pytest.raises(AuthorizationError):
            await service.list_comments(GUEST_EMAIL, GUEST_PASSWORD, root_file.id)

    @pytest.mark.asyncio
    async def test_lists_in_requested_data_room(
        self, service: GuestFileService, uow: FakeUnitOfWork, root_file: DataRoomFile
    ):
        uow.files.get.return_value = root_file
        uow.comments.list_for_file.return_value = []

        await service.list_comments(
            GUEST_EMAIL, GUEST_PASSWORD, root_file.id, data_room_id=root_file.data_room_id
        )

        uow.guest_invites.get_latest_accepted.assert_awaited_once_with(
            GUEST_EMAIL, root_file.data_room_id
        )


class TestUpdateStatus:
    @pytest.mark.asyncio
    async def test_sets_status(
        self, service: GuestFileService, uow: FakeUnitOfWork, root_file: DataRoomFile
    ):
        uow.files.get.return_value = root_file

        updated = await service.update_status(
            GUEST_EMAIL, GUEST_PASSWORD, root_file.id, "review_failed"
        )

        assert updated.status == FileStatus.REVIEW_FAILED
        assert uow.committed

    @pytest.mark.asyncio
    async def test_invalid_status_checked_before_credentials(
        self, service: GuestFileService, uow: FakeUnitOfWork
    ):
        with pytest.raises(InvalidFileStatusError):
            await service.update_status(GUEST_EMAIL, "wrong", uuid4(), "bogus")
        uow.guest_invites.get_latest_accepted.assert_not_called()


class TestDownload:
    @pytest.mark.asyncio
    async def test_download_is_audited(
        self,
        service: GuestFileService,
        uow: FakeUnitOfWork,
        root_file: DataRoomFile,
        storage: AsyncMock,
        activity: AsyncMock,
    ):
        uow.files.get.return_value = root_file

        link = await service.create_download_url(GUEST_EMAIL, GUEST_PASSWORD, root_file.id)

        assert link.url == "https://storage.test/signed"
        assert link.expires_in == 600
        storage.create_signed_url.assert_awaited_once_with(
            root_file.file_path, 600, download_name=root_file.name
        )
        details = activity.record_for_guest.call_args[0][1]
        assert details == FileDownloaded(file_id=str(root_file.id), file_name=root_file.name)

    @pytest.mark.asyncio
    async def test_preview_is_not_audited(
        self,
        service: GuestFileService,
        uow: FakeUnitOfWork,
        root_file: DataRoomFile,
        storage: AsyncMock,
        activity: AsyncMock,
    ):
        uow.files.get.return_value = root_file

        await service.create_download_url(GUEST_EMAIL, GUEST_PASSWORD, root_file.id, mode="preview")

        storage.create_signed_url.assert_awaited_once_with(
            root_file.file_path, 600, download_name=None
        )
        activity.record_for_guest.assert_not_called()


class TestUpload:
    @pytest.mark.asyncio
    async def test_stores_and_records_root_file(
        self,
        service: GuestFileService,
        uow: FakeUnitOfWork,
        data_room: DataRoom,
        invite: GuestInvite,
        storage: AsyncMock,
        activity: AsyncMock,
    ):
        uow.data_rooms.get.return_value = data_room

        created = await service.upload_file(
            GUEST_EMAIL, GUEST_PASSWORD, "Term sheet.pdf", "application/pdf", b"%PDF-1.7"
        )

        path = storage.upload.call_args[0][0]
        assert path.startswith(f"{data_room.organization_id}/{data_room.id}/")
        assert path.endswith("-Term_sheet.pdf")
        assert created.version == 1
        assert created.parent_file_id is None
        assert created.file_size == 8
        assert created.uploaded_by == data_room.created_by
        assert created.assigned_guest_id == invite.id
        assert uow.committed
        assert isinstance(activity.record_for_guest.call_args[0][1], FileUploaded)

    @pytest.mark.asyncio
    async def test_rejects_unsupported_type(self, service: GuestFileService, storage: AsyncMock):
        with pytest.raises(UnsupportedFileTypeError):
            await service.upload_file(
                GUEST_EMAIL, GUEST_PASSWORD, "run.exe", "application/x-msdownload", b"MZ"
            )
        storage.upload.assert_not_called()

    @pytest.mark.asyncio
    async def test_rejects_oversized(self, service: GuestFileService, storage: AsyncMock):
        with pytest.raises(FileTooLargeError):
            await service.upload_file(
                GUEST_EMAIL, GUEST_PASSWORD, "big.pdf", "application/pdf", b"x" * 1025
            )
        storage.upload.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_folder(
        self, service: GuestFileService, uow: FakeUnitOfWork, data_room: DataRoom
    ):
        uow.data_rooms.get.return_value = data_room
        uow.data_rooms.get_folder.return_value = None

        with pytest.raises(FolderNotFoundError):
            await service.upload_file(
                GUEST_EMAIL, GUEST_PASSWORD, "a.pdf", "application/pdf", b"1", folder_id=uuid4()
            )

    @pytest.mark.asyncio
    async def test_insert_failure_removes_object(
        self,
        service: GuestFileService,
        uow: FakeUnitOfWork,
        data_room: DataRoom,
        storage: AsyncMock,
    ):
        uow.data_rooms.get.return_value = data_room
        uow.files.create.side_effect = RuntimeError("insert failed")

        with pytest.raises(RuntimeError):
            await service.upload_file(GUEST_EMAIL, GUEST_PASSWORD, "a.pdf", "application/pdf", b"1")

        path = storage.upload.call_args[0][0]
        storage.remove.assert_awaited_once_with([path])

    @pytest.mark.asyncio
    async def test_cleanup_failure_keeps_original_error(
        self,
        service: GuestFileService,
        uow: FakeUnitOfWork,
        data_room: DataRoom,
        storage: AsyncMock,
    ):
        uow.data_rooms.get.return_value = data_room
        uow.files.create.side_effect = RuntimeError("insert failed")
        storage.remove.side_effect = DependencyError("remove failed")

        with pytest.raises(RuntimeError, match="insert failed"):
            await service.upload_file(GUEST_EMAIL, GUEST_PASSWORD, "a.pdf", "application/pdf", b"1")


class TestPermissions:
    @pytest.mark.asyncio
    async def test_set_restriction_with_grants(
        self,
        service: GuestFileService,
        uow: FakeUnitOfWork,
        root_file: DataRoomFile,
        activity: AsyncMock,
    ):
        uow.files.get.return_value = root_file
        other_guest, member = uuid4(), uuid4()

        result = await service.set_permissions(
            GUEST_EMAIL,
            GUEST_PASSWORD,
            root_file.id,
            is_restricted=True,
            grants=[
                GrantRequest(other_guest, "guest", PermissionLevel.EDIT),
                GrantRequest(member, "team"),
            ],
        )

        assert result.file.is_restricted
        file_id, rows = uow.file_permissions.replace_for_file.call_args[0]
        assert file_id == root_file.id
        assert [(r.guest_invite_id, r.user_id, r.permission_level) for r in rows] == [
            (other_guest, None, PermissionLevel.EDIT),
            (None, member, PermissionLevel.VIEW),
        ]
        details = activity.record_for_guest.call_args[0][1]
        assert details == PermissionsChanged(
            file_id=str(root_file.id), file_name=root_file.name, is_restricted=True, granted_to_count=2
        )

    @pytest.mark.asyncio
    async def test_unrestrict_clears_grants(
        self, service: GuestFileService, uow: FakeUnitOfWork, root_file: DataRoomFile
    ):
        uow.files.get.return_value = root_file

        await service.set_permissions(
            GUEST_EMAIL, GUEST_PASSWORD, root_file.id, is_restricted=False, grants=[]
        )

        assert uow.file_permissions.replace_for_file.call_args[0][1] == []

    @pytest.mark.asyncio
    async def test_view_grant_cannot_manage(
        self,
        service: GuestFileService,
        uow: FakeUnitOfWork,
        root_file: DataRoomFile,
        invite: GuestInvite,
    ):
        root_file.is_restricted = True
        uow.files.get.return_value = root_file
        uow.file_permissions.get_for_guest.return_value = FilePermission(
            file_id=root_file.id, guest_invite_id=invite.id, permission_level=PermissionLevel.VIEW
        )

        with pytest.raises(AuthorizationError, match="manage this file's restrictions"):
            await service.set_permissions(
                GUEST_EMAIL, GUEST_PASSWORD, root_file.id, is_restricted=False, grants=[]
            )
        uow.file_permissions.replace_for_file.assert_not_called()

    @pytest.mark.asyncio
    async def test_get_lists_other_signed_guests(
        self,
        service: GuestFileService,
        uow: FakeUnitOfWork,
        root_file: DataRoomFile,
        invite: GuestInvite,
        data_room: DataRoom,
    ):
        other = GuestInvite(
            data_room_id=invite.data_room_id,
            organization_id=invite.organization_id,
            email="other@example.com",
        )
        uow.files.get.return_value = root_file
        uow.data_rooms.get.return_value = data_room
        uow.guest_invites.list_nda_signed.return_value = [invite, other]

        view = await service.get_permissions(GUEST_EMAIL, GUEST_PASSWORD, root_file.id)

        assert view.file is root_file
        assert view.guests == [other]
        assert view.team == []

    @pytest.mark.asyncio
    async def test_get_on_restricted_file_without_grant(
        self, service: GuestFileService, uow: FakeUnitOfWork, root_file: DataRoomFile
    ):
        root_file.is_restricted = True
        uow.files.get.return_value = root_file

        with pytest.raises(AuthorizationError):
            await service.get_permissions(GUEST_EMAIL, GUEST_PASSWORD, root_file.id)
        uow.file_permissions.list_for_file.assert_not_called()
        uow.guest_invites.list_nda_signed.assert_not_called()

    @pytest.mark.asyncio
    async def test_duplicate_grantee_keeps_last_entry(
        self,
        service: GuestFileService,
        uow: FakeUnitOfWork,
        root_file: DataRoomFile,
        activity: AsyncMock,
    ):
        uow.files.get.return_value = root_file
        other_guest = uuid4()

        await service.set_permissions(
            GUEST_EMAIL,
            GUEST_PASSWORD,
            root_file.id,
            is_restricted=True,
            grants=[
                GrantRequest(other_guest, "guest", PermissionLevel.VIEW),
                GrantRequest(other_guest, "guest", PermissionLevel.EDIT),
            ],
        )

        rows = uow.file_permissions.replace_for_file.call_args[0][1]
        assert [(r.guest_invite_id, r.permission_level) for r in rows] == [
            (other_guest, PermissionLevel.EDIT)
        ]
        assert activity.record_for_guest.call_args[0][1].granted_to_count == 1

    @pytest.mark.asyncio
    async def test_set_returns_view_after_giving_up_own_access(
        self,
        service: GuestFileService,
        uow: FakeUnitOfWork,
        root_file: DataRoomFile,
        invite: GuestInvite,
    ):
        other = GuestInvite(
            data_room_id=invite.data_room_id,
            organization_id=invite.organization_id,
            email="other@example.com",
        )
        uow.files.get.return_value = root_file
        uow.guest_invites.list_nda_signed.return_value = [invite, other]

        view = await service.set_permissions(
            GUEST_EMAIL,
            GUEST_PASSWORD,
            root_file.id,
            is_restricted=True,
            grants=[GrantRequest(other.id, "guest", PermissionLevel.EDIT)],
        )

        assert view.file.is_restricted
        assert view.guests == [other]
        assert uow.committed
