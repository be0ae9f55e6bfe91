"""Task merge API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_merge_service
from api.v1.schemas.merge import (
    MergeLogListResponse,
    MergeLogResponse,
    PerformMergeRequest,
    TaskSnapshotResponse,
)
from core.rate_limit import limiter
from domain.entities.merge import MergeLog, MergeType
from domain.services.merge_service import MergeService

# Organization-scoped merge routes
organization_merges_router = APIRouter(
    prefix="/organizations/{organization_id}/merges",
    tags=["merges"],
)

# Merge-log-scoped routes
merges_router = APIRouter(prefix="/merges", tags=["merges"])


@organization_merges_router.post(
    "",
    response_model=MergeLogResponse,
    summary="Transfer tasks between members",
    responses={
        200: {"description": "Tasks transferred and merge logged"},
        400: {"description": "Invalid merge request"},
        403: {"description": "Insufficient permissions (admin or moderator only)"},
        404: {"description": "Task not found in organization"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def perform_merge(
    request: Request,
    organization_id: UUID,
    body: PerformMergeRequest,
    user: CurrentUser,
    service: MergeService = Depends(get_merge_service),
) -> MergeLogResponse:
    """Move tasks from the source member to the target member.

    Temporary merges are reverted automatically after ``end_date``.
    """
    merge_log = await service.perform_merge(
        organization_id=organization_id,
        performed_by=user.id,
        source_user_id=body.source_user_id,
        target_user_id=body.target_user_id,
        task_ids=body.task_ids,
        merge_type=MergeType(body.merge_type),
        start_date=body.start_date,
        end_date=body.end_date,
    )
    return _build_merge_response(merge_log)


@organization_merges_router.get(
    "",
    response_model=MergeLogListResponse,
    summary="List merge history",
    responses={
        200: {"description": "Merge log, newest first"},
        403: {"description": "Insufficient permissions (admin or moderator only)"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_merges(
    request: Request,
    organization_id: UUID,
    user: CurrentUser,
    service: MergeService = Depends(get_merge_service),
) -> MergeLogListResponse:
    logs = await service.list_merge_logs(organization_id, user.id)
    data = [_build_merge_response(m) for m in logs]
    return MergeLogListResponse(data=data, meta={"total": len(data)})


@merges_router.post(
    "/{merge_id}/revert",
    response_model=MergeLogResponse,
    summary="Revert a merge",
    responses={
        200: {"description": "Tasks returned to the source member"},
        400: {"description": "Merge already reverted"},
        403: {"description": "Insufficient permissions (admin or moderator only)"},
        404: {"description": "Merge not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def revert_merge(
    request: Request,
    merge_id: UUID,
    user: CurrentUser,
    service: MergeService = Depends(get_merge_service),
) -> MergeLogResponse:
    merge_log = await service.revert_merge(merge_id, user.id)
    return _build_merge_response(merge_log)


def _build_merge_response(merge_log: MergeLog) -> MergeLogResponse:
    return MergeLogResponse(
        id=merge_log.id,
        organization_id=merge_log.organization_id,
        performed_by=merge_log.performed_by,
        source_user_id=merge_log.source_user_id,
        target_user_id=merge_log.target_user_id,
        merge_type=merge_log.merge_type.value,
        status=merge_log.status.value,
        temporary_start_date=merge_log.temporary_start_date,
        temporary_end_date=merge_log.temporary_end_date,
        tasks_transferred=[
            TaskSnapshotResponse.model_validate(s) for s in merge_log.tasks_transferred
        ],
        task_count=merge_log.task_count,
        created_at=merge_log.created_at,
        completed_at=merge_log.completed_at,
        reverted_at=merge_log.reverted_at,
    )
