"""Shared fixtures for unit tests."""

from datetime import datetime, timedelta
from typing import Any
from unittest.mock import AsyncMock
from uuid import UUID, uuid4

import pytest

from domain.entities.data_room import DataRoom
from domain.entities.file import DataRoomFile
from domain.entities.guest_invite import GuestInvite, InviteStatus
from domain.services.guest_auth_service import hash_access_password

GUEST_EMAIL = "guest@example.com"
GUEST_PASSWORD = "ABCD2345EFGH6789"


class FakeUnitOfWork:
    """Fake Unit of Work with every repository mocked for unit testing."""

    def __init__(self) -> None:
        self.data_rooms = AsyncMock()
        self.guest_invites = AsyncMock()
        self.files = AsyncMock()
        self.documents = AsyncMock()
        self.comments = AsyncMock()
        self.file_permissions = AsyncMock()
        self.activities = AsyncMock()
        self.tasks = AsyncMock()
        self.merge_logs = AsyncMock()
        self.notifications = AsyncMock()
        self.organizations = AsyncMock()
        self.committed = False
        self.rolled_back = False

        # Writes echo their argument back, like the SQLAlchemy repositories
        for repo, methods in (
            (self.files, ("create", "update")),
            (self.documents, ("create", "update")),
            (self.comments, ("create",)),
            (self.guest_invites, ("create", "update")),
            (self.merge_logs, ("create", "update")),
            (self.notifications, ("create",)),
            (self.activities, ("create",)),
            (self.tasks, ("add_assignment",)),
            (self.data_rooms, ("add_message", "add_nda_signature")),
        ):
            for name in methods:
                getattr(repo, name).side_effect = lambda entity, *a, **kw: entity

        self.file_permissions.get_for_guest.return_value = None
        self.file_permissions.list_for_guest.return_value = []
        self.file_permissions.list_for_file.return_value = []
        self.guest_invites.get_pending_for_room_email.return_value = None
        self.guest_invites.list_nda_signed.return_value = []
        self.documents.get_for_file.return_value = None
        self.data_rooms.get_latest_nda_signature.return_value = None
        self.data_rooms.list_folders.return_value = []
        self.activities.get_for_data_room.return_value = []
        self.organizations.get_profile.return_value = None
        self.organizations.get_profile_names.return_value = {}
        self.tasks.get_assignment.return_value = None
        self.tasks.claim_reminder.return_value = True
        self.notifications.get_unread_count.return_value = 0

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True

    async def __aenter__(self) -> "FakeUnitOfWork":
        return self

    async def __aexit__(self, exc_type: Any, *args: Any) -> None:
        if exc_type is not None:
            self.rolled_back = True


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Create a fresh FakeUnitOfWork."""
    return FakeUnitOfWork()


@pytest.fixture
def organization_id() -> UUID:
    return uuid4()


@pytest.fixture
def data_room(organization_id: UUID) -> DataRoom:
    return DataRoom(organization_id=organization_id, name="Deal Room", created_by=uuid4())


@pytest.fixture
def invite(data_room: DataRoom) -> GuestInvite:
    """An accepted invitation with a known password, valid for a week."""
    return GuestInvite(
        data_room_id=data_room.id,
        organization_id=data_room.organization_id,
        email=GUEST_EMAIL,
        status=InviteStatus.ACCEPTED,
        access_password=hash_access_password(GUEST_PASSWORD),
        guest_name="Grace Guest",
        expires_at=datetime.utcnow() + timedelta(days=7),
    )


@pytest.fixture
def root_file(data_room: DataRoom) -> DataRoomFile:
    return DataRoomFile(
        data_room_id=data_room.id,
        organization_id=data_room.organization_id,
        name="Report.docx",
        file_path=f"{data_room.organization_id}/{data_room.id}/1-Report.docx",
        file_size=100,
        mime_type="application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    )


def guest_uow(uow: FakeUnitOfWork, invite: GuestInvite) -> FakeUnitOfWork:
    """Make the fake resolve ``invite`` as the guest's latest accepted invitation."""
    uow.guest_invites.get_latest_accepted.return_value = invite
    return uow
