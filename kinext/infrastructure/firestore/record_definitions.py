"""Record definitions for the tenant domain collections.

Binds each collection to its reference and uniqueness rules and to the
timestamp fields stamped on write. Shared by the API routers and the seed
script.
"""

from kinext.application.services.tenant_records import RecordDefinition
from kinext.infrastructure.firestore.collections import (
    COLLECTION_APPLICATIONS,
    COLLECTION_COMPANIES,
    COLLECTION_CONTACTS,
    COLLECTION_CONTENT_BLOCKS,
    COLLECTION_INTERACTIONS,
    COLLECTION_JOBS,
    COLLECTION_PAGES,
)

PAGES = RecordDefinition(
    resource_type="page",
    collection=COLLECTION_PAGES,
    unique_fields=("slug",),
    created_field="created_at",
    updated_field="updated_at",
)

CONTENT_BLOCKS = RecordDefinition(
    resource_type="content_block",
    collection=COLLECTION_CONTENT_BLOCKS,
    references={"page_id": COLLECTION_PAGES},
)

CONTACTS = RecordDefinition(
    resource_type="contact",
    collection=COLLECTION_CONTACTS,
    unique_fields=("email",),
    created_field="created_at",
    updated_field="updated_at",
)

# `date` is the interaction time; callers may backdate it.
INTERACTIONS = RecordDefinition(
    resource_type="interaction",
    collection=COLLECTION_INTERACTIONS,
    references={"contact_id": COLLECTION_CONTACTS},
    created_field="date",
)

COMPANIES = RecordDefinition(resource_type="company", collection=COLLECTION_COMPANIES)

JOBS = RecordDefinition(
    resource_type="job",
    collection=COLLECTION_JOBS,
    references={"company_id": COLLECTION_COMPANIES},
    created_field="posted_date",
)

APPLICATIONS = RecordDefinition(
    resource_type="application",
    collection=COLLECTION_APPLICATIONS,
    references={"job_id": COLLECTION_JOBS, "contact_id": COLLECTION_CONTACTS},
    created_field="submitted_date",
)
