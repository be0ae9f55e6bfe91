"""Integration tests for guest data room access: content, activity, chat."""

from datetime import datetime, timedelta
from uuid import uuid4

import pytest
from httpx import AsyncClient
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from infrastructure.database.models import (
    DataRoomFileModel,
    DataRoomFolderModel,
    DataRoomModel,
    GuestInviteModel,
    NdaSignatureModel,
)
from tests.conftest import GUEST_EMAIL, SeedData

CONTENT = "/api/v1/guest/content"


class TestGuestContent:
    @pytest.mark.asyncio
    async def test_lists_visible_files(self, api_client: AsyncClient, seed: SeedData):
        response = await api_client.post(CONTENT, json=seed.guest)

        assert response.status_code == 200
        body = response.json()
        assert body["dataRoom"]["name"] == "Deal Room"
        assert body["guestName"] == "Grace Guest"
        assert [f["name"] for f in body["files"]] == ["Report.docx"]
        listing = body["files"][0]
        assert listing["rootFileId"] == str(seed.file_id)
        assert listing["permissionLevel"] == "edit"
        assert body["profileMap"][str(seed.admin_id)] == "Ada Admin"
        assert body["breadcrumbs"] == []

    @pytest.mark.asyncio
    async def test_password_accepted_as_token(self, api_client: AsyncClient, seed: SeedData):
        response = await api_client.post(
            CONTENT, json={"email": GUEST_EMAIL.upper(), "token": seed.guest["password"].lower()}
        )

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_wrong_password(self, api_client: AsyncClient, seed: SeedData):
        response = await api_client.post(
            CONTENT, json={"email": GUEST_EMAIL, "password": "WRONGWRONGWRONG1"}
        )

        assert response.status_code == 401
        assert response.json()["error_code"] == "INVALID_PASSWORD"

    @pytest.mark.asyncio
    async def test_unknown_guest(self, api_client: AsyncClient, seed: SeedData):
        response = await api_client.post(
            CONTENT, json={"email": "nobody@example.com", "password": "X"}
        )

        assert response.status_code == 401
        assert response.json()["error_code"] == "INVALID_CREDENTIALS"

    @pytest.mark.asyncio
    async def test_expired_access(
        self,
        api_client: AsyncClient,
        seed: SeedData,
        session_factory: async_sessionmaker[AsyncSession],
    ):
        async with session_factory() as session:
            await session.execute(
                update(GuestInviteModel)
                .where(GuestInviteModel.id == seed.invite_id)
                .values(expires_at=datetime.utcnow() - timedelta(seconds=1))
            )
            await session.commit()

        response = await api_client.post(CONTENT, json=seed.guest)

        assert response.status_code == 401
        assert response.json()["error_code"] == "ACCESS_EXPIRED"

    @pytest.mark.asyncio
    async def test_missing_password_is_bad_request(self, api_client: AsyncClient, seed: SeedData):
        response = await api_client.post(CONTENT, json={"email": GUEST_EMAIL})

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_folder_listing_with_breadcrumbs(
        self,
        api_client: AsyncClient,
        seed: SeedData,
        session_factory: async_sessionmaker[AsyncSession],
    ):
        legal, contracts = uuid4(), uuid4()
        async with session_factory() as session:
            session.add(DataRoomFolderModel(id=legal, data_room_id=seed.data_room_id, name="Legal"))
            session.add(
                DataRoomFolderModel(
                    id=contracts,
                    data_room_id=seed.data_room_id,
                    name="Contracts",
                    parent_id=legal,
                )
            )
            await session.execute(
                update(DataRoomFileModel)
                .where(DataRoomFileModel.id == seed.file_id)
                .values(folder_id=contracts)
            )
            await session.commit()

        root = await api_client.post(CONTENT, json=seed.guest)
        nested = await api_client.post(CONTENT, json={**seed.guest, "folderId": str(contracts)})

        assert [f["name"] for f in root.json()["folders"]] == ["Legal"]
        assert root.json()["files"] == []
        body = nested.json()
        assert [b["name"] for b in body["breadcrumbs"]] == ["Legal", "Contracts"]
        assert [f["name"] for f in body["files"]] == ["Report.docx"]

    @pytest.mark.asyncio
    async def test_unknown_folder(self, api_client: AsyncClient, seed: SeedData):
        response = await api_client.post(CONTENT, json={**seed.guest, "folderId": str(uuid4())})

        assert response.status_code == 404
        assert response.json()["error_code"] == "FOLDER_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_updated_nda_blocks_content(
        self,
        api_client: AsyncClient,
        seed: SeedData,
        session_factory: async_sessionmaker[AsyncSession],
    ):
        async with session_factory() as session:
            await session.execute(
                update(DataRoomModel)
                .where(DataRoomModel.id == seed.data_room_id)
                .values(nda_required=True, nda_content="v2", nda_content_hash="hash-v2")
            )
            session.add(
                NdaSignatureModel(
                    data_room_id=seed.data_room_id,
                    signer_name="Grace Guest",
                    signer_email=GUEST_EMAIL,
                    nda_content_hash="hash-v1",
                )
            )
            await session.commit()

        response = await api_client.post(CONTENT, json=seed.guest)

        assert response.status_code == 403
        assert response.json()["error_code"] == "NDA_UPDATED"


class TestActivityAndChat:
    @pytest.mark.asyncio
    async def test_access_appears_in_feed(self, api_client: AsyncClient, seed: SeedData):
        await api_client.post(CONTENT, json=seed.guest)

        response = await api_client.post("/api/v1/guest/activity", json=seed.other_guest)

        assert response.status_code == 200
        body = response.json()
        assert body["meta"]["total"] == 1
        event = body["data"][0]
        assert event["action"] == "data_room_accessed"
        assert event["userName"] == "Grace Guest"
        assert event["isGuest"] is True

    @pytest.mark.asyncio
    async def test_send_message(self, api_client: AsyncClient, seed: SeedData):
        response = await api_client.post(
            "/api/v1/guest/messages", json={**seed.guest, "message": "  Hello team  "}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Hello team"
        assert body["senderName"] == "Grace Guest"
        assert body["dataRoomId"] == str(seed.data_room_id)

        feed = await api_client.post("/api/v1/guest/activity", json=seed.guest)
        assert feed.json()["data"][0]["action"] == "message_sent"

    @pytest.mark.asyncio
    async def test_blank_message_rejected(self, api_client: AsyncClient, seed: SeedData):
        response = await api_client.post(
            "/api/v1/guest/messages", json={**seed.guest, "message": "   "}
        )

        assert response.status_code == 400
