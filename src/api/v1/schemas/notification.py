"""Pydantic schemas for Notification API."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class NotificationResponse(BaseModel):
    """Single notification in the feed."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    type: str  # e.g. "task_merge", "merge_auto_reverted"
    title: str
    message: str
    organization_id: UUID | None = None
    reference_id: UUID | None = None
    reference_type: str | None = None
    is_read: bool
    created_at: datetime


class NotificationListResponse(BaseModel):
    data: list[NotificationResponse]
    meta: dict[str, Any] = Field(default_factory=dict)
