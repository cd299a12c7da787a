"""CRM API: contacts and their interactions."""

from kinext.api.v1.endpoints._records import build_record_router
from kinext.infrastructure.firestore.record_definitions import CONTACTS, INTERACTIONS
from kinext.schemas.crm import (
    ContactCreate,
    ContactResponse,
    ContactUpdate,
    InteractionCreate,
    InteractionResponse,
    InteractionUpdate,
)

contacts_router = build_record_router(
    CONTACTS, ContactCreate, ContactUpdate, ContactResponse
)
interactions_router = build_record_router(
    INTERACTIONS, InteractionCreate, InteractionUpdate, InteractionResponse
)
