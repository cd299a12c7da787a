"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags.
"""

from fastapi import APIRouter

from kinext.api.v1.endpoints import admin, auth, careers, cms, crm, health

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
api_router.include_router(cms.pages_router, prefix="/pages", tags=["cms"])
api_router.include_router(
    cms.content_blocks_router, prefix="/content-blocks", tags=["cms"]
)
api_router.include_router(crm.contacts_router, prefix="/contacts", tags=["crm"])
api_router.include_router(
    crm.interactions_router, prefix="/interactions", tags=["crm"]
)
api_router.include_router(careers.companies_router, prefix="/companies", tags=["careers"])
api_router.include_router(careers.jobs_router, prefix="/jobs", tags=["careers"])
api_router.include_router(
    careers.applications_router, prefix="/applications", tags=["careers"]
)
