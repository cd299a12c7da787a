"""CRM schemas: contacts and interactions."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from kinext.domain.enums import ContactStatus, InteractionType
from kinext.schemas.partial import PartialUpdate

_DOC_ID = r"^[A-Za-z0-9_-]{1,128}$"


class ContactCreate(BaseModel):
    """Request body for a contact. Email is unique per tenant."""

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: str | None = Field(default=None, max_length=32)
    company: str | None = Field(default=None, max_length=255)
    job_title: str | None = Field(default=None, max_length=255)
    status: ContactStatus = ContactStatus.LEAD
    notes: str | None = None


class ContactUpdate(PartialUpdate):
    not_nullable = ("first_name", "last_name", "email", "status")

    first_name: str | None = Field(default=None, min_length=1, max_length=100)
    last_name: str | None = Field(default=None, min_length=1, max_length=100)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=32)
    company: str | None = Field(default=None, max_length=255)
    job_title: str | None = Field(default=None, max_length=255)
    status: ContactStatus | None = None
    notes: str | None = None


class ContactResponse(BaseModel):
    id: str
    first_name: str
    last_name: str
    email: str
    phone: str | None = None
    company: str | None = None
    job_title: str | None = None
    status: ContactStatus = ContactStatus.LEAD
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class InteractionCreate(BaseModel):
    """An interaction with a contact in the same tenant. `date` defaults to now."""

    contact_id: str = Field(..., pattern=_DOC_ID)
    type: InteractionType = InteractionType.EMAIL
    notes: str = ""
    date: datetime | None = None


class InteractionUpdate(PartialUpdate):
    not_nullable = ("contact_id", "type", "notes")

    contact_id: str | None = Field(default=None, pattern=_DOC_ID)
    type: InteractionType | None = None
    notes: str | None = None
    date: datetime | None = None


class InteractionResponse(BaseModel):
    id: str
    contact_id: str
    type: InteractionType
    notes: str = ""
    date: datetime | None = None
