"""Careers schemas: companies, jobs, applications."""

from datetime import datetime

from pydantic import BaseModel, Field

from kinext.domain.enums import ApplicationStatus, JobType
from kinext.schemas.partial import PartialUpdate

_DOC_ID = r"^[A-Za-z0-9_-]{1,128}$"


class CompanyCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    industry: str | None = Field(default=None, max_length=255)
    website: str | None = Field(default=None, max_length=2048)
    logo_url: str | None = Field(default=None, max_length=2048)


class CompanyUpdate(PartialUpdate):
    not_nullable = ("name",)

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    industry: str | None = Field(default=None, max_length=255)
    website: str | None = Field(default=None, max_length=2048)
    logo_url: str | None = Field(default=None, max_length=2048)


class CompanyResponse(BaseModel):
    id: str
    name: str
    description: str | None = None
    industry: str | None = None
    website: str | None = None
    logo_url: str | None = None


class JobCreate(BaseModel):
    """A job posting. company_id must name a company in the same tenant."""

    title: str = Field(..., min_length=1, max_length=255)
    company_id: str = Field(..., pattern=_DOC_ID)
    description: str = ""
    location: str | None = None
    salary_range: str | None = None
    type: JobType = JobType.FULL_TIME
    closing_date: datetime | None = None
    is_active: bool = True
    requirements: list[str] = Field(default_factory=list)


class JobUpdate(PartialUpdate):
    not_nullable = ("title", "company_id", "description", "type", "is_active", "requirements")

    title: str | None = Field(default=None, min_length=1, max_length=255)
    company_id: str | None = Field(default=None, pattern=_DOC_ID)
    description: str | None = None
    location: str | None = None
    salary_range: str | None = None
    type: JobType | None = None
    closing_date: datetime | None = None
    is_active: bool | None = None
    requirements: list[str] | None = None


class JobResponse(BaseModel):
    id: str
    title: str
    company_id: str
    description: str = ""
    location: str | None = None
    salary_range: str | None = None
    type: JobType = JobType.FULL_TIME
    posted_date: datetime | None = None
    closing_date: datetime | None = None
    is_active: bool = True
    requirements: list[str] = Field(default_factory=list)


class ApplicationCreate(BaseModel):
    """An application links a job and a contact of the same tenant."""

    job_id: str = Field(..., pattern=_DOC_ID)
    contact_id: str = Field(..., pattern=_DOC_ID)
    cover_letter: str | None = None
    resume_url: str | None = Field(default=None, max_length=2048)
    status: ApplicationStatus = ApplicationStatus.APPLIED


class ApplicationUpdate(PartialUpdate):
    not_nullable = ("status",)

    cover_letter: str | None = None
    resume_url: str | None = Field(default=None, max_length=2048)
    status: ApplicationStatus | None = None


class ApplicationResponse(BaseModel):
    id: str
    job_id: str
    contact_id: str
    cover_letter: str | None = None
    resume_url: str | None = None
    status: ApplicationStatus = ApplicationStatus.APPLIED
    submitted_date: datetime | None = None
