"""Guest credential verification against data room invitations."""

import hashlib
import secrets
from datetime import datetime
from uuid import UUID

import structlog

from core.exceptions import AuthenticationError, ErrorCode, GuestAccessExpiredError
from domain.entities.guest_invite import GuestInvite
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()

# No 0/O or 1/I
PASSWORD_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
PASSWORD_LENGTH = 16


def normalize_email(email: str) -> str:
    return email.strip().lower()


def hash_access_password(password: str) -> str:
    """Hash a guest access password.

    Passwords are case-insensitive: the value is upper-cased before hashing
    on both the write path (invite acceptance) and the read path.
    """
    return hashlib.sha256(password.upper().encode("utf-8")).hexdigest()


def generate_access_password(length: int = PASSWORD_LENGTH) -> str:
    """Generate a one-time access password for an accepted invitation."""
    return "".join(secrets.choice(PASSWORD_ALPHABET) for _ in range(length))


class GuestAuthService:
    """Verifies a guest's (email, password) pair.

    Guests are anonymous to the platform; every request carries the
    credentials, so verification runs inside the caller's unit of work and
    has no side effects.
    """

    async def verify(
        self,
        uow: IUnitOfWork,
        email: str,
        password: str,
        data_room_id: UUID | None = None,
        now: datetime | None = None,
    ) -> GuestInvite:
        """Return the authoritative accepted invitation for the credentials.

        When the email holds several accepted invitations the one with the
        latest expiry wins.

        Raises:
            AuthenticationError: No accepted invitation, or wrong password.
            GuestAccessExpiredError: The invitation has expired.
        """
        normalized = normalize_email(email)
        invite = await uow.guest_invites.get_latest_accepted(normalized, data_room_id)
        if not invite:
            logger.info("guest_access_denied", reason="no_invite", data_room_id=str(data_room_id))
            raise AuthenticationError("Invalid credentials", ErrorCode.INVALID_CREDENTIALS)

        stored = invite.access_password
        if not stored or not secrets.compare_digest(stored, hash_access_password(password)):
            logger.info("guest_access_denied", reason="bad_password", invite_id=str(invite.id))
            raise AuthenticationError("Invalid password", ErrorCode.INVALID_PASSWORD)

        if invite.is_expired(now):
            logger.info("guest_access_denied", reason="expired", invite_id=str(invite.id))
            raise GuestAccessExpiredError()

        return invite
