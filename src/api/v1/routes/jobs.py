"""Scheduled job routes for an external cron.

The same sweeps also run as in-process loops when background jobs are
enabled.
"""

from fastapi import APIRouter, Depends, Request

from api.v1.dependencies import get_merge_service, get_reminder_service, verify_cron_secret
from api.v1.schemas.jobs import MergeSweepResponse, ReminderSweepResponse
from core.rate_limit import limiter
from domain.services.merge_service import MergeService
from domain.services.reminder_service import ReminderService

router = APIRouter(
    prefix="/jobs",
    tags=["jobs"],
    dependencies=[Depends(verify_cron_secret)],
)


@router.post(
    "/revert-expired-merges",
    response_model=MergeSweepResponse,
    summary="Revert expired temporary merges",
    responses={401: {"description": "Missing or wrong X-Cron-Secret"}},
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def revert_expired_merges(
    request: Request,
    service: MergeService = Depends(get_merge_service),
) -> MergeSweepResponse:
    result = await service.revert_expired_merges()
    return MergeSweepResponse(
        checked=result.checked, reverted=result.reverted, failed=result.failed
    )


@router.post(
    "/pending-task-reminders",
    response_model=ReminderSweepResponse,
    summary="Remind creators about unanswered task requests",
    responses={401: {"description": "Missing or wrong X-Cron-Secret"}},
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def send_pending_task_reminders(
    request: Request,
    service: ReminderService = Depends(get_reminder_service),
) -> ReminderSweepResponse:
    result = await service.send_pending_reminders()
    return ReminderSweepResponse(checked=result.checked, sent=result.sent)
