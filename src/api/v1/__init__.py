"""API v1 router configuration."""

from fastapi import APIRouter

from api.v1.routes.guest_access import router as guest_access_router
from api.v1.routes.guest_documents import router as guest_documents_router
from api.v1.routes.guest_files import router as guest_files_router
from api.v1.routes.guest_invites import router as guest_invites_router
from api.v1.routes.guest_versions import router as guest_versions_router
from api.v1.routes.invites import router as invites_router
from api.v1.routes.jobs import router as jobs_router
from api.v1.routes.merges import merges_router, organization_merges_router
from api.v1.routes.notifications import router as notifications_router

router = APIRouter()
router.include_router(guest_access_router)
router.include_router(guest_invites_router)
router.include_router(guest_versions_router)
router.include_router(guest_files_router)
router.include_router(guest_documents_router)
router.include_router(invites_router)
router.include_router(organization_merges_router)
router.include_router(merges_router)
router.include_router(notifications_router)
router.include_router(jobs_router)
