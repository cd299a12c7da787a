"""CMS API: pages and content blocks of the caller's tenant."""

from typing import Annotated

from fastapi import Body

from kinext.api.v1.endpoints._records import build_record_router
from kinext.infrastructure.firestore.record_definitions import CONTENT_BLOCKS, PAGES
from kinext.schemas.cms import (
    ContentBlock,
    ContentBlockUpdate,
    ContentBlockVariants,
    PageCreate,
    PageResponse,
    PageUpdate,
)

pages_router = build_record_router(PAGES, PageCreate, PageUpdate, PageResponse)

content_blocks_router = build_record_router(
    CONTENT_BLOCKS,
    Annotated[ContentBlockVariants, Body(discriminator="type")],
    ContentBlockUpdate,
    ContentBlock,
)
