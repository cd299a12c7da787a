"""Careers API: companies, job postings and applications."""

from kinext.api.v1.endpoints._records import build_record_router
from kinext.infrastructure.firestore.record_definitions import (
    APPLICATIONS,
    COMPANIES,
    JOBS,
)
from kinext.schemas.careers import (
    ApplicationCreate,
    ApplicationResponse,
    ApplicationUpdate,
    CompanyCreate,
    CompanyResponse,
    CompanyUpdate,
    JobCreate,
    JobResponse,
    JobUpdate,
)

companies_router = build_record_router(
    COMPANIES, CompanyCreate, CompanyUpdate, CompanyResponse
)
jobs_router = build_record_router(JOBS, JobCreate, JobUpdate, JobResponse)
applications_router = build_record_router(
    APPLICATIONS, ApplicationCreate, ApplicationUpdate, ApplicationResponse
)
