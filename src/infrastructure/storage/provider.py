"""Object storage provider protocol."""

from typing import Protocol


class IObjectStorage(Protocol):
    """Protocol for the bucket holding data room file bodies."""

    async def create_signed_url(
        self,
        path: str,
        expires_in: int,
        download_name: str | None = None,
    ) -> str:
        """
        Create a time-limited URL for an object.

        Args:
            path: Object path inside the bucket
            expires_in: Lifetime of the URL in seconds
            download_name: When set, the URL forces a download with this name

        Returns:
            The signed URL
        """
        ...

    async def upload(self, path: str, data: bytes, content_type: str) -> None:
        """Store an object at ``path``. Fails if the path already exists."""
        ...

    async def remove(self, paths: list[str]) -> None:
        """Delete objects."""
        ...
