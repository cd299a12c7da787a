"""Seed a development tenant with sample CMS, CRM and careers data.

Provisions a sample user (or reuses the one registered under the same
email, finishing its provisioning if needed) and inserts sample pages,
content blocks, companies, contacts, jobs, interactions and applications
into that user's tenant database.

Usage:
    python -m scripts.seed_dev_data [--email dev@example.com] [--count 5]

Requires: SECRET_KEY and Firestore credentials (FIREBASE_SERVICE_ACCOUNT_KEY
or FIREBASE_SERVICE_ACCOUNT_PATH) in the environment or .env.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from datetime import timedelta
from pathlib import Path

from dotenv import load_dotenv

from kinext.application.dtos.user import RegistrationData
from kinext.application.services.tenant_records import TenantRecordService
from kinext.core.config import get_settings
from kinext.domain.enums import (
    ApplicationStatus,
    ContactStatus,
    InteractionType,
    JobType,
)
from kinext.infrastructure.composition import build_provisioning_service
from kinext.infrastructure.firestore.client import FirestoreConnectionManager
from kinext.infrastructure.firestore.record_definitions import (
    APPLICATIONS,
    COMPANIES,
    CONTACTS,
    CONTENT_BLOCKS,
    INTERACTIONS,
    JOBS,
    PAGES,
)
from kinext.infrastructure.firestore.repositories import (
    FirestoreDocumentRepository,
    FirestoreUserRepository,
)
from kinext.shared.logging import setup_logging
from kinext.shared.utils.datetime import utc_now

logger = logging.getLogger("scripts.seed_dev_data")

SAMPLE_PASSWORD = "dev-password-123"

_BLOCK_SAMPLES = [
    ("text", {"text": "Welcome to our site.", "format": "plain"}),
    ("hero", {"heading": "Build with us", "subheading": "Tenant-isolated content"}),
    ("image", {"url": "https://picsum.photos/800/400", "alt": "Sample image"}),
    ("callout", {"text": "Applications are open.", "tone": "info"}),
    ("video", {"url": "https://www.youtube.com/watch?v=aqz-KE-bpKQ", "provider": "youtube"}),
]
_CONTACT_STATUSES = list(ContactStatus)
_INTERACTION_TYPES = list(InteractionType)
_JOB_TYPES = list(JobType)
_APPLICATION_STATUSES = list(ApplicationStatus)


def _project_root() -> Path:
    return Path(__file__).resolve().parent.parent


def _load_env() -> None:
    """Load .env from project root so get_settings() sees credentials when run as script."""
    load_dotenv(_project_root() / ".env", override=True)


async def _ensure_tenant(manager: FirestoreConnectionManager, email: str) -> str:
    """Return the sample user's tenant database name, provisioning it if needed."""
    service = build_provisioning_service(manager)
    existing = await FirestoreUserRepository(manager.admin).get_by_email(email)
    if existing is not None:
        result = await service.reconcile(existing.id)
        logger.info("Reusing user %s (%s)", existing.id, result.db_name)
        return result.db_name
    result = await service.provision(
        RegistrationData(
            name="Dev User",
            email=email,
            password=SAMPLE_PASSWORD,
            terms_accepted=True,
        )
    )
    logger.info("Provisioned user %s (%s), password %r", result.user_id, result.db_name, SAMPLE_PASSWORD)
    return result.db_name


async def seed(manager: FirestoreConnectionManager, email: str, count: int) -> dict[str, int]:
    """Insert `count` records of each kind into the sample user's tenant database."""
    db_name = await _ensure_tenant(manager, email)
    database = manager.database(db_name)

    def service(definition) -> TenantRecordService:
        return TenantRecordService(database, definition, FirestoreDocumentRepository)

    pages, blocks, companies, contacts, jobs, interactions, applications = (
        service(PAGES),
        service(CONTENT_BLOCKS),
        service(COMPANIES),
        service(CONTACTS),
        service(INTERACTIONS),
        service(JOBS),
        service(APPLICATIONS),
    )
    # Suffix keeps slugs and contact emails unique across repeated runs.
    run = utc_now().strftime("%Y%m%d%H%M%S")
    created = dict.fromkeys(
        ("pages", "content_blocks", "companies", "contacts", "jobs", "interactions", "applications"),
        0,
    )

    for i in range(count):
        page = await pages.create({
            "title": f"Sample Page {i + 1}",
            "slug": f"sample-page-{run}-{i + 1}",
            "content": f"<p>This is sample page {i + 1}.</p>",
            "published": i % 2 == 0,
        })
        block_type, data = _BLOCK_SAMPLES[i % len(_BLOCK_SAMPLES)]
        await blocks.create({"page_id": page["id"], "type": block_type, "data": data, "order": 0})
        company = await companies.create({
            "name": f"Company {i + 1}",
            "description": f"Sample company {i + 1}",
            "industry": "Technology",
            "website": f"https://company{i + 1}.example.com",
        })
        contact = await contacts.create({
            "first_name": "Contact",
            "last_name": str(i + 1),
            "email": f"contact{i + 1}.{run}@example.com",
            "company": company["name"],
            "status": _CONTACT_STATUSES[i % len(_CONTACT_STATUSES)],
        })
        job = await jobs.create({
            "title": f"Software Engineer {i + 1}",
            "company_id": company["id"],
            "description": "Build and run tenant-isolated services.",
            "location": "Remote",
            "type": _JOB_TYPES[i % len(_JOB_TYPES)],
            "closing_date": utc_now() + timedelta(days=30),
            "is_active": True,
            "requirements": ["Python", "FastAPI"],
        })
        await interactions.create({
            "contact_id": contact["id"],
            "type": _INTERACTION_TYPES[i % len(_INTERACTION_TYPES)],
            "notes": f"Sample interaction {i + 1}",
        })
        await applications.create({
            "job_id": job["id"],
            "contact_id": contact["id"],
            "cover_letter": "I am interested in this role.",
            "status": _APPLICATION_STATUSES[i % len(_APPLICATION_STATUSES)],
        })
        for key in created:
            created[key] += 1

    logger.info("Seeded %s: %s", db_name, created)
    return created


async def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--email", default="dev@example.com")
    parser.add_argument("--count", type=int, default=5)
    args = parser.parse_args()

    _load_env()
    get_settings.cache_clear()
    setup_logging()
    manager = FirestoreConnectionManager(get_settings())
    try:
        await seed(manager, args.email.strip().lower(), args.count)
    finally:
        await manager.aclose()


if __name__ == "__main__":
    asyncio.run(main())
