"""Pytest configuration and fixtures."""

import os
import sys
from collections.abc import AsyncGenerator
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Callable
from uuid import UUID, uuid4

# Disable rate limiting and in-process sweeps in tests
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["BACKGROUND_JOBS_ENABLED"] = "false"
os.environ["CRON_SECRET"] = "test-cron-secret"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.pool import StaticPool

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from domain.services.guest_auth_service import hash_access_password
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import TokenUser
from infrastructure.database.models import (
    Base,
    DataRoomFileModel,
    DataRoomModel,
    GuestInviteModel,
    OrganizationModel,
    ProfileModel,
    TaskAssignmentModel,
    TaskModel,
    UserRoleModel,
)
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork


# Compile JSONB as JSON for SQLite (used in tests)
@compiles(JSONB, "sqlite")
def _compile_jsonb_sqlite(type_: Any, compiler: Any, **kw: Any) -> str:
    return "JSON"


# Test database URL (SQLite in memory)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Fixed admin user ID for consistency
TEST_USER_ID = uuid4()

GUEST_EMAIL = "guest@example.com"
GUEST_PASSWORD = "ABCD2345EFGH6789"
OTHER_GUEST_EMAIL = "other@example.com"
OTHER_GUEST_PASSWORD = "WXYZ2345WXYZ6789"
CRON_SECRET = "test-cron-secret"


class FakeObjectStorage:
    """In-memory IObjectStorage that records every call."""

    def __init__(self) -> None:
        self.objects: dict[str, bytes] = {}
        self.removed: list[str] = []
        self.signed: list[tuple[str, int, str | None]] = []
        self.fail_uploads = False

    async def create_signed_url(
        self, path: str, expires_in: int, download_name: str | None = None
    ) -> str:
        self.signed.append((path, expires_in, download_name))
        return f"https://storage.test/signed/{path}?expires={expires_in}"

    async def upload(self, path: str, data: bytes, content_type: str) -> None:
        from core.exceptions import DependencyError

        if self.fail_uploads:
            raise DependencyError("Failed to upload file")
        self.objects[path] = data

    async def remove(self, paths: list[str]) -> None:
        for path in paths:
            self.removed.append(path)
            self.objects.pop(path, None)


@dataclass
class SeedData:
    """Ids of the rows every API test starts from."""

    organization_id: UUID
    admin_id: UUID
    source_user_id: UUID
    target_user_id: UUID
    data_room_id: UUID
    invite_id: UUID
    invite_access_id: str
    other_invite_id: UUID
    file_id: UUID
    restricted_file_id: UUID
    task_ids: list[UUID] = field(default_factory=list)

    @property
    def guest(self) -> dict[str, str]:
        return {"email": GUEST_EMAIL, "password": GUEST_PASSWORD}

    @property
    def other_guest(self) -> dict[str, str]:
        return {"email": OTHER_GUEST_EMAIL, "password": OTHER_GUEST_PASSWORD}


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create session factory."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
def uow_factory(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[[], SQLAlchemyUnitOfWork]:
    """UoW factory bound to the test database."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)

    return factory


@pytest.fixture
def storage() -> FakeObjectStorage:
    return FakeObjectStorage()


@pytest.fixture
async def seed(session_factory: async_sessionmaker[AsyncSession]) -> SeedData:
    """Seed one organization, a data room with two accepted guests and some tasks."""
    now = datetime.utcnow()
    org_id = uuid4()
    source_id, target_id = uuid4(), uuid4()
    room_id = uuid4()
    invite_id, other_invite_id = uuid4(), uuid4()
    file_id, restricted_id = uuid4(), uuid4()
    task_ids = [uuid4(), uuid4()]

    async with session_factory() as session:
        session.add(OrganizationModel(id=org_id, name="Acme"))
        session.add_all(
            [
                ProfileModel(id=TEST_USER_ID, email="admin@example.com", full_name="Ada Admin"),
                ProfileModel(id=source_id, email="sam@example.com", full_name="Sam Source"),
                ProfileModel(id=target_id, email="tia@example.com", full_name="Tia Target"),
            ]
        )
        session.add_all(
            [
                UserRoleModel(user_id=TEST_USER_ID, organization_id=org_id, role="admin"),
                UserRoleModel(user_id=source_id, organization_id=org_id, role="member"),
                UserRoleModel(user_id=target_id, organization_id=org_id, role="member"),
            ]
        )
        session.add(
            DataRoomModel(
                id=room_id,
                organization_id=org_id,
                name="Deal Room",
                created_by=TEST_USER_ID,
            )
        )
        session.add_all(
            [
                GuestInviteModel(
                    id=invite_id,
                    data_room_id=room_id,
                    organization_id=org_id,
                    email=GUEST_EMAIL,
                    access_password=hash_access_password(GUEST_PASSWORD),
                    access_id="guest-access-token",
                    status="accepted",
                    guest_name="Grace Guest",
                    nda_signed_at=now,
                    invited_by=TEST_USER_ID,
                    expires_at=now + timedelta(days=30),
                ),
                GuestInviteModel(
                    id=other_invite_id,
                    data_room_id=room_id,
                    organization_id=org_id,
                    email=OTHER_GUEST_EMAIL,
                    access_password=hash_access_password(OTHER_GUEST_PASSWORD),
                    access_id="other-access-token",
                    status="accepted",
                    guest_name="Oscar Other",
                    nda_signed_at=now,
                    invited_by=TEST_USER_ID,
                    expires_at=now + timedelta(days=30),
                ),
            ]
        )
        session.add_all(
            [
                DataRoomFileModel(
                    id=file_id,
                    data_room_id=room_id,
                    organization_id=org_id,
                    name="Report.docx",
                    file_path=f"{org_id}/{room_id}/1-Report.docx",
                    file_size=100,
                    mime_type="application/vnd.openxmlformats-officedocument.wordprocessingml.document",
                    version=1,
                    status="not_opened",
                    uploaded_by=TEST_USER_ID,
                ),
                DataRoomFileModel(
                    id=restricted_id,
                    data_room_id=room_id,
                    organization_id=org_id,
                    name="Secret.pdf",
                    file_path=f"{org_id}/{room_id}/2-Secret.pdf",
                    file_size=200,
                    mime_type="application/pdf",
                    is_restricted=True,
                    version=1,
                    status="not_opened",
                    uploaded_by=TEST_USER_ID,
                ),
            ]
        )
        for i, task_id in enumerate(task_ids):
            session.add(
                TaskModel(
                    id=task_id,
                    organization_id=org_id,
                    title=f"Task {i + 1}",
                    priority="high",
                    project_title="Launch",
                    assigned_user_id=source_id,
                    assignment_status="accepted",
                    created_by_user_id=TEST_USER_ID,
                )
            )
            session.add(
                TaskAssignmentModel(
                    task_id=task_id,
                    user_id=source_id,
                    assigned_by=TEST_USER_ID,
                    status="accepted",
                )
            )
        await session.commit()

    return SeedData(
        organization_id=org_id,
        admin_id=TEST_USER_ID,
        source_user_id=source_id,
        target_user_id=target_id,
        data_room_id=room_id,
        invite_id=invite_id,
        invite_access_id="guest-access-token",
        other_invite_id=other_invite_id,
        file_id=file_id,
        restricted_file_id=restricted_id,
        task_ids=task_ids,
    )


@pytest.fixture
def test_user() -> TokenUser:
    """Create a test user with fixed ID."""
    return TokenUser(
        id=TEST_USER_ID,
        email="admin@example.com",
        display_name="Ada Admin",
    )


@pytest.fixture
def auth_provider() -> JWTAuthProvider:
    """Create auth provider for testing."""
    return JWTAuthProvider(
        secret_key="test-secret-key",
        algorithm="HS256",
        expire_minutes=30,
    )


@pytest.fixture
def auth_token(auth_provider: JWTAuthProvider, test_user: TokenUser) -> str:
    """Create auth token for test user."""
    return str(auth_provider.create_token(test_user))


@pytest.fixture
def auth_headers(auth_token: str) -> dict[str, str]:
    """Create authorization headers."""
    return {"Authorization": f"Bearer {auth_token}"}


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create async test client (no database overrides)."""
    from main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def api_client(
    uow_factory: Callable[[], SQLAlchemyUnitOfWork],
    storage: FakeObjectStorage,
    auth_provider: JWTAuthProvider,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client wired to the in-memory database.

    This client:
    - Builds every service on a UoW factory bound to the test engine
    - Uses the in-memory object storage
    - Validates admin JWTs with the test auth provider
    """
    from api.dependencies.auth import get_auth_provider
    from api.v1 import dependencies as deps
    from domain.services.activity_service import ActivityService
    from domain.services.data_room_service import DataRoomService
    from domain.services.document_service import DocumentService
    from domain.services.guest_file_service import GuestFileService
    from domain.services.guest_invite_service import GuestInviteService
    from domain.services.merge_service import MergeService
    from domain.services.notification_service import NotificationService
    from domain.services.reminder_service import ReminderService
    from domain.services.version_service import VersionService
    from main import create_app

    app = create_app()

    activity = ActivityService(uow_factory)
    notifications = NotificationService(uow_factory)
    overrides: dict[Callable[..., Any], Callable[..., Any]] = {
        get_auth_provider: lambda: auth_provider,
        deps.get_activity_service: lambda: activity,
        deps.get_notification_service: lambda: notifications,
        deps.get_data_room_service: lambda: DataRoomService(uow_factory, activity_service=activity),
        deps.get_guest_file_service: lambda: GuestFileService(
            uow_factory, storage=storage, activity_service=activity
        ),
        deps.get_document_service: lambda: DocumentService(uow_factory, activity_service=activity),
        deps.get_version_service: lambda: VersionService(uow_factory, activity_service=activity),
        deps.get_guest_invite_service: lambda: GuestInviteService(
            uow_factory, activity_service=activity
        ),
        deps.get_merge_service: lambda: MergeService(
            uow_factory, notification_service=notifications
        ),
        deps.get_reminder_service: lambda: ReminderService(
            uow_factory, notification_service=notifications
        ),
    }
    app.dependency_overrides.update(overrides)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()
