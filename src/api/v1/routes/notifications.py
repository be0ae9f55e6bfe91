"""Notification API routes."""

from fastapi import APIRouter, Depends, Query, Request

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_notification_service
from api.v1.schemas.notification import NotificationListResponse, NotificationResponse
from core.rate_limit import limiter
from domain.services.notification_service import NotificationService

router = APIRouter(prefix="/users/me", tags=["notifications"])


@router.get(
    "/notifications",
    response_model=NotificationListResponse,
    summary="List my notifications",
    responses={
        200: {"description": "Latest notifications, newest first"},
        401: {"description": "Not authenticated"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_notifications(
    request: Request,
    user: CurrentUser,
    limit: int = Query(50, ge=1, le=100, description="Page size"),
    service: NotificationService = Depends(get_notification_service),
) -> NotificationListResponse:
    """List the current user's notifications (merge and reminder events)."""
    notifications, unread_count = await service.get_notifications(user.id, limit=limit)
    data = [NotificationResponse.model_validate(n) for n in notifications]
    return NotificationListResponse(
        data=data,
        meta={"unread_count": unread_count},
    )
