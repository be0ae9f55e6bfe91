"""Pydantic schemas for the task merge API."""

from datetime import date, datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class PerformMergeRequest(BaseModel):
    """Schema for moving tasks from one member to another."""

    source_user_id: UUID
    target_user_id: UUID
    task_ids: list[UUID] = Field(..., min_length=1, max_length=500)
    merge_type: Literal["permanent", "temporary"] = "permanent"
    start_date: date | None = None
    end_date: date | None = None


class TaskSnapshotResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    due_date: date | None = None
    priority: str | None = None
    project_title: str | None = None


class MergeLogResponse(BaseModel):
    """Schema for MergeLog response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    organization_id: UUID
    performed_by: UUID
    source_user_id: UUID
    target_user_id: UUID
    merge_type: str
    status: str
    temporary_start_date: date | None = None
    temporary_end_date: date | None = None
    tasks_transferred: list[TaskSnapshotResponse]
    task_count: int
    created_at: datetime
    completed_at: datetime | None = None
    reverted_at: datetime | None = None


class MergeLogListResponse(BaseModel):
    data: list[MergeLogResponse]
    meta: dict[str, Any] = Field(default_factory=dict)
