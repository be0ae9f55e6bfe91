"""Pydantic schemas for guest document editing."""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from api.v1.schemas.common import CamelModel, FileRequest
from api.v1.schemas.guest import FileResponse


class SaveDocumentRequest(FileRequest):
    document_id: UUID
    content: str = Field(..., max_length=5_000_000)
    create_version: bool = False


class DocumentResponse(CamelModel):
    id: UUID
    file_id: UUID
    content: str
    content_type: str
    updated_at: datetime


class SaveDocumentResponse(CamelModel):
    """Saved document. ``file`` is the new version when one was created."""

    document: DocumentResponse
    file: FileResponse
    created_version: bool
