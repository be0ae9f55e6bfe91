"""Supabase Storage client over its REST API.

Calls authenticate with the service-role key, so every caller must have
already performed its own authorization checks.
"""

from urllib.parse import quote

import httpx
import structlog

from core.config import settings
from core.exceptions import DependencyError

logger = structlog.get_logger()


class SupabaseStorageClient:
    """IObjectStorage implementation backed by a Supabase bucket."""

    def __init__(
        self,
        base_url: str = settings.supabase_storage_url,
        service_key: str = settings.supabase_service_role_key,
        bucket: str = settings.storage_bucket,
        timeout: float = 30.0,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._service_key = service_key
        self._bucket = bucket
        self._timeout = timeout

    @property
    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._service_key}",
            "apikey": self._service_key,
        }

    def _object_url(self, kind: str, path: str) -> str:
        return f"{self._base_url}/object/{kind}{self._bucket}/{quote(path)}"

    async def create_signed_url(
        self,
        path: str,
        expires_in: int,
        download_name: str | None = None,
    ) -> str:
        url = self._object_url("sign/", path)
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(
                    url,
                    headers=self._headers,
                    json={"expiresIn": expires_in},
                )
                response.raise_for_status()
                signed_path = response.json()["signedURL"]
        except (httpx.HTTPError, KeyError, ValueError) as exc:
            logger.error("storage_sign_failed", path=path, error=str(exc))
            raise DependencyError("Failed to generate download URL") from exc

        signed_url = f"{self._base_url}{signed_path}"
        if download_name is not None:
            signed_url += f"&download={quote(download_name)}"
        return signed_url

    async def upload(self, path: str, data: bytes, content_type: str) -> None:
        url = self._object_url("", path)
        headers = {**self._headers, "Content-Type": content_type, "x-upsert": "false"}
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(url, headers=headers, content=data)
                response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error("storage_upload_failed", path=path, error=str(exc))
            raise DependencyError("Failed to upload file") from exc

    async def remove(self, paths: list[str]) -> None:
        if not paths:
            return
        url = f"{self._base_url}/object/{self._bucket}"
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.request(
                    "DELETE",
                    url,
                    headers=self._headers,
                    json={"prefixes": paths},
                )
                response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error("storage_remove_failed", paths=paths, error=str(exc))
            raise DependencyError("Failed to remove file") from exc
