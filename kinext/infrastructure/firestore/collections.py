"""Firestore collection names (schema-in-code).

Firestore has no DDL or migrations. Collections are created automatically
when you first write a document. Use these constants so collection names
stay consistent and act as the single source of truth for the "schema".

Admin database: users, instances (tenant registry) and the uniqueness
claim collections. Tenant databases: users (duplicated identity) plus the
domain collections.
"""

# Admin and tenant
COLLECTION_USERS = "users"

# Admin only
COLLECTION_INSTANCES = "instances"
COLLECTION_USER_EMAILS = "user_emails"
COLLECTION_USER_PHONES = "user_phones"

# Tenant domain collections (CMS, CRM, careers)
COLLECTION_PAGES = "pages"
COLLECTION_CONTENT_BLOCKS = "content_blocks"
COLLECTION_CONTACTS = "contacts"
COLLECTION_INTERACTIONS = "interactions"
COLLECTION_COMPANIES = "companies"
COLLECTION_JOBS = "jobs"
COLLECTION_APPLICATIONS = "applications"
