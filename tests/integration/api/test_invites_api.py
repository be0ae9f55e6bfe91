"""Integration tests for the guest invitation lifecycle."""

from uuid import uuid4

import pytest
from httpx import AsyncClient
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import TokenUser
from infrastructure.database.models import DataRoomModel
from tests.conftest import SeedData

NEW_GUEST = "new.guest@example.com"


async def _invite(api_client: AsyncClient, seed: SeedData, headers: dict) -> dict:
    response = await api_client.post(
        f"/api/v1/data-rooms/{seed.data_room_id}/invites",
        json={"email": NEW_GUEST},
        headers=headers,
    )
    assert response.status_code == 201
    return response.json()


class TestCreateInvite:
    @pytest.mark.asyncio
    async def test_admin_invites_guest(
        self, api_client: AsyncClient, seed: SeedData, auth_headers: dict
    ):
        body = await _invite(api_client, seed, auth_headers)

        assert body["resent"] is False
        assert body["data"]["email"] == NEW_GUEST
        assert body["data"]["status"] == "pending"
        assert body["data"]["invited_by"] == str(seed.admin_id)
        assert body["data"]["access_id"]

    @pytest.mark.asyncio
    async def test_reinvite_refreshes_pending(
        self, api_client: AsyncClient, seed: SeedData, auth_headers: dict
    ):
        first = await _invite(api_client, seed, auth_headers)
        second = await _invite(api_client, seed, auth_headers)

        assert second["resent"] is True
        assert second["data"]["id"] == first["data"]["id"]
        assert second["data"]["expires_at"] >= first["data"]["expires_at"]

    @pytest.mark.asyncio
    async def test_requires_authentication(self, api_client: AsyncClient, seed: SeedData):
        response = await api_client.post(
            f"/api/v1/data-rooms/{seed.data_room_id}/invites", json={"email": NEW_GUEST}
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_members_cannot_invite(
        self, api_client: AsyncClient, seed: SeedData, auth_provider: JWTAuthProvider
    ):
        token = auth_provider.create_token(
            TokenUser(id=seed.source_user_id, email="sam@example.com")
        )

        response = await api_client.post(
            f"/api/v1/data-rooms/{seed.data_room_id}/invites",
            json={"email": NEW_GUEST},
            headers={"Authorization": f"Bearer {token}"},
        )

        assert response.status_code == 403
        assert response.json()["error_code"] == "INSUFFICIENT_PERMISSIONS"

    @pytest.mark.asyncio
    async def test_unknown_room(self, api_client: AsyncClient, seed: SeedData, auth_headers: dict):
        response = await api_client.post(
            f"/api/v1/data-rooms/{uuid4()}/invites",
            json={"email": NEW_GUEST},
            headers=auth_headers,
        )

        assert response.status_code == 404


class TestAcceptFlow:
    @pytest.mark.asyncio
    async def test_accept_then_access(
        self, api_client: AsyncClient, seed: SeedData, auth_headers: dict
    ):
        invite = await _invite(api_client, seed, auth_headers)
        lookup = {"token": invite["data"]["access_id"], "email": NEW_GUEST}

        details = await api_client.post("/api/v1/guest/invites/details", json=lookup)
        accepted = await api_client.post("/api/v1/guest/invites/accept", json=lookup)

        assert details.status_code == 200
        assert details.json()["dataRoomName"] == "Deal Room"
        assert details.json()["ndaRequired"] is False
        assert accepted.status_code == 200
        password = accepted.json()["password"]
        assert len(password) == 16

        content = await api_client.post(
            "/api/v1/guest/content", json={"email": NEW_GUEST, "password": password}
        )
        assert content.status_code == 200
        assert content.json()["guestName"] == "new.guest"

    @pytest.mark.asyncio
    async def test_accepting_again_rotates_password(
        self, api_client: AsyncClient, seed: SeedData, auth_headers: dict
    ):
        invite = await _invite(api_client, seed, auth_headers)
        lookup = {"token": invite["data"]["access_id"], "email": NEW_GUEST}

        first = (await api_client.post("/api/v1/guest/invites/accept", json=lookup)).json()
        second = (await api_client.post("/api/v1/guest/invites/accept", json=lookup)).json()

        stale = await api_client.post(
            "/api/v1/guest/content", json={"email": NEW_GUEST, "password": first["password"]}
        )
        fresh = await api_client.post(
            "/api/v1/guest/content", json={"email": NEW_GUEST, "password": second["password"]}
        )
        assert stale.status_code == 401
        assert fresh.status_code == 200

    @pytest.mark.asyncio
    async def test_nda_must_be_signed_first(
        self,
        api_client: AsyncClient,
        seed: SeedData,
        auth_headers: dict,
        session_factory: async_sessionmaker[AsyncSession],
    ):
        async with session_factory() as session:
            await session.execute(
                update(DataRoomModel)
                .where(DataRoomModel.id == seed.data_room_id)
                .values(nda_required=True, nda_content="Keep it secret", nda_content_hash="h1")
            )
            await session.commit()
        invite = await _invite(api_client, seed, auth_headers)
        lookup = {"token": invite["data"]["access_id"], "email": NEW_GUEST}

        blocked = await api_client.post("/api/v1/guest/invites/accept", json=lookup)
        details = await api_client.post("/api/v1/guest/invites/details", json=lookup)
        signed = await api_client.post(
            "/api/v1/guest/invites/sign-nda", json={**lookup, "name": "Nia New"}
        )
        again = await api_client.post(
            "/api/v1/guest/invites/sign-nda", json={**lookup, "name": "Nia New"}
        )
        accepted = await api_client.post("/api/v1/guest/invites/accept", json=lookup)

        assert blocked.status_code == 400
        assert blocked.json()["error_code"] == "NDA_REQUIRED"
        assert details.json()["ndaContent"] == "Keep it secret"
        assert details.json()["ndaSigned"] is False
        assert signed.json()["message"] == "NDA signed successfully"
        assert again.json()["message"] == "NDA already signed"
        assert accepted.status_code == 200

    @pytest.mark.asyncio
    async def test_email_mismatch(
        self, api_client: AsyncClient, seed: SeedData, auth_headers: dict
    ):
        invite = await _invite(api_client, seed, auth_headers)

        response = await api_client.post(
            "/api/v1/guest/invites/accept",
            json={"token": invite["data"]["access_id"], "email": "intruder@example.com"},
        )

        assert response.status_code == 403
        assert response.json()["error_code"] == "INVITE_EMAIL_MISMATCH"

    @pytest.mark.asyncio
    async def test_unknown_token(self, api_client: AsyncClient, seed: SeedData):
        response = await api_client.post(
            "/api/v1/guest/invites/details", json={"token": "nope", "email": NEW_GUEST}
        )

        assert response.status_code == 404
        assert response.json()["error_code"] == "INVITE_NOT_FOUND"
