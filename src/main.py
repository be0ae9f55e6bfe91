"""Main FastAPI application entry point."""

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from api.exception_handlers import setup_exception_handlers
from api.middleware.logging import RequestLoggingMiddleware
from api.middleware.request_id import RequestIDMiddleware
from api.middleware.security import SecurityHeadersMiddleware
from api.routes.health import router as health_router
from api.v1 import router as v1_router
from api.v1.dependencies import get_merge_service, get_reminder_service
from core.config import settings
from core.logging import setup_logging
from core.rate_limit import limiter, rate_limit_exceeded_handler

logger = structlog.get_logger()

# Initialize structured logging
setup_logging()


async def _run_periodically(
    name: str, interval_seconds: int, job: Callable[[], Awaitable[object]]
) -> None:
    """Run ``job`` every ``interval_seconds`` until cancelled. Failures are logged."""
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            await job()
        except Exception:
            logger.exception("background_job_failed", job=name)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager for startup/shutdown tasks.

    Starts the temporary-merge revert sweep and the pending task reminder
    sweep. Deployments driving ``/api/v1/jobs/*`` from an external cron set
    ``BACKGROUND_JOBS_ENABLED=false``.
    """
    tasks: list[asyncio.Task[None]] = []
    if settings.background_jobs_enabled:
        tasks.append(
            asyncio.create_task(
                _run_periodically(
                    "revert_expired_merges",
                    settings.merge_revert_interval_seconds,
                    lambda: get_merge_service().revert_expired_merges(),
                )
            )
        )
        tasks.append(
            asyncio.create_task(
                _run_periodically(
                    "pending_task_reminders",
                    settings.reminder_interval_seconds,
                    lambda: get_reminder_service().send_pending_reminders(),
                )
            )
        )
        logger.info("background_jobs_started", count=len(tasks))
    yield
    for task in tasks:
        task.cancel()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
        title=settings.app_name,
        description=(
            "## Data Room Guest Access & Task Merge API\n\n"
            "External guests browse, comment on, version and edit the files of "
            "the data rooms they were invited to. Organization admins invite "
            "guests and transfer tasks between members.\n\n"
            "### Authentication\n"
            "Guest endpoints (`/guest/*`) take the invited `email` and access "
            "`password` in the request body. Admin endpoints require a JWT:\n"
            "```\nAuthorization: Bearer <your_token>\n```\n"
            "Job endpoints (`/jobs/*`) require the `X-Cron-Secret` header.\n\n"
            "### Rate Limits\n"
            "- Guest reads: 20 requests/minute, guest writes: 10 requests/minute\n"
            "- Admin GET endpoints: 30 requests/minute\n"
            "- Admin POST endpoints: 10 requests/minute"
        ),
        version="1.0.0",
        debug=settings.debug,
        openapi_tags=[
            {"name": "health", "description": "Health check endpoints"},
            {"name": "guest", "description": "Guest data room browsing and chat"},
            {"name": "guest-invites", "description": "Invitation acceptance and NDA signing"},
            {"name": "guest-files", "description": "Comments, status, downloads, uploads and restrictions"},
            {"name": "guest-documents", "description": "Rich-text document editing"},
            {"name": "guest-versions", "description": "File version history"},
            {"name": "invites", "description": "Guest invitation management"},
            {"name": "merges", "description": "Task merge and revert"},
            {"name": "notifications", "description": "User notifications"},
            {"name": "jobs", "description": "Scheduled sweeps for an external cron"},
        ],
    )

    # Rate limiting
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # Security & tracking middleware (LIFO order - last added = outermost)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # GZip compression for responses > 1KB
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=settings.cors_allow_headers_list,
    )

    # Setup exception handlers
    setup_exception_handlers(app)

    # Include routers
    app.include_router(health_router)
    app.include_router(v1_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=not settings.is_production,
    )
