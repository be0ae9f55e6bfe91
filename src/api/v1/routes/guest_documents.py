"""Guest document API routes."""

from fastapi import APIRouter, Depends, Request

from api.v1.dependencies import get_document_service
from api.v1.schemas.common import FileRequest
from api.v1.schemas.documents import (
    DocumentResponse,
    SaveDocumentRequest,
    SaveDocumentResponse,
)
from api.v1.schemas.guest import build_file_response
from core.rate_limit import GUEST_READ_LIMIT, GUEST_WRITE_LIMIT, limiter
from domain.services.document_service import DocumentService

router = APIRouter(prefix="/guest/documents", tags=["guest-documents"])


@router.post(
    "/content",
    response_model=DocumentResponse,
    summary="Get document content",
    responses={
        200: {"description": "Document body (created empty on first open)"},
        401: {"description": "Invalid credentials or access expired"},
        403: {"description": "File is restricted or in another data room"},
        404: {"description": "File not found"},
    },
)
@limiter.limit(GUEST_READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_document(
    request: Request,
    body: FileRequest,
    service: DocumentService = Depends(get_document_service),
) -> DocumentResponse:
    document = await service.get_content(
        body.email, body.password, body.file_id, data_room_id=body.data_room_id
    )
    return DocumentResponse.model_validate(document)


@router.post(
    "/content/save",
    response_model=SaveDocumentResponse,
    summary="Save document content",
    responses={
        200: {"description": "Saved in place, or as a new version"},
        401: {"description": "Invalid credentials or access expired"},
        403: {"description": "Edit access required"},
        404: {"description": "File or document not found"},
    },
)
@limiter.limit(GUEST_WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def save_document(
    request: Request,
    body: SaveDocumentRequest,
    service: DocumentService = Depends(get_document_service),
) -> SaveDocumentResponse:
    """Save a document. With ``createVersion`` the edit lands on a new file version."""
    saved = await service.save_content(
        body.email,
        body.password,
        body.file_id,
        body.document_id,
        body.content,
        create_version=body.create_version,
        data_room_id=body.data_room_id,
    )
    return SaveDocumentResponse(
        document=DocumentResponse.model_validate(saved.document),
        file=build_file_response(saved.file),
        created_version=saved.created_version,
    )
