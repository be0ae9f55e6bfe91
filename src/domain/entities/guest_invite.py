"""Guest invitation domain entity."""

import secrets
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import StrEnum
from uuid import UUID, uuid4


class InviteStatus(StrEnum):
    """Status of a guest data-room invitation."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    REVOKED = "revoked"


# Default invitation lifetime: 30 days
INVITE_EXPIRY_DAYS = 30


@dataclass
class GuestInvite:
    """Domain entity for one guest's right to access one data room."""

    data_room_id: UUID
    organization_id: UUID
    email: str
    id: UUID = field(default_factory=uuid4)
    invited_by: UUID | None = None
    status: InviteStatus = InviteStatus.PENDING
    access_password: str | None = None
    access_id: str = field(default_factory=lambda: secrets.token_urlsafe(24))
    guest_name: str | None = None
    nda_signed_at: datetime | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    expires_at: datetime = field(
        default_factory=lambda: datetime.utcnow() + timedelta(days=INVITE_EXPIRY_DAYS)
    )

    def is_expired(self, now: datetime | None = None) -> bool:
        """Access ends at the expiry instant itself."""
        return (now or datetime.utcnow()) >= self.expires_at

    @property
    def display_name(self) -> str:
        """Name shown in activity feeds and comments."""
        return self.guest_name or self.email.split("@")[0]

    def accept(self, password_hash: str) -> None:
        """Mark the invitation as accepted with a freshly issued password."""
        self.status = InviteStatus.ACCEPTED
        self.access_password = password_hash
