"""Bearer-token authentication for organization members."""

from dataclasses import dataclass
from typing import Optional, Protocol
from uuid import UUID


@dataclass
class TokenUser:
    """An organization member identified by an access token.

    Guests never get one of these; they authenticate per request with
    their invitation email and access password.
    """

    id: UUID
    email: str
    display_name: Optional[str] = None
    role: Optional[str] = None


class IAuthProvider(Protocol):
    """Validates (and, for tests, mints) member access tokens."""

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """Return the token's member, or None when the token is unusable."""
        ...

    def create_token(self, user: TokenUser) -> str: ...
