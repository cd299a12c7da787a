"""CMS schemas: pages and content blocks.

Content blocks are a discriminated union on `type`; each variant carries
its own typed `data` payload.
"""

from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from kinext.schemas.partial import PartialUpdate

_DOC_ID = r"^[A-Za-z0-9_-]{1,128}$"
_SLUG = r"^[a-z0-9]+(-[a-z0-9]+)*$"


class PageCreate(BaseModel):
    """Request body for creating a page. Slugs are unique per tenant."""

    title: str = Field(..., min_length=1, max_length=255)
    slug: str = Field(..., min_length=1, max_length=200, pattern=_SLUG)
    content: str = ""
    published: bool = False


class PageUpdate(PartialUpdate):
    not_nullable = ("title", "slug", "content", "published")

    title: str | None = Field(default=None, min_length=1, max_length=255)
    slug: str | None = Field(default=None, min_length=1, max_length=200, pattern=_SLUG)
    content: str | None = None
    published: bool | None = None


class PageResponse(BaseModel):
    id: str
    title: str
    slug: str
    content: str = ""
    published: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None


# --- content block payloads ---


class TextData(BaseModel):
    model_config = ConfigDict(extra="forbid")

    text: str
    format: Literal["plain", "markdown", "html"] = "plain"


class ImageData(BaseModel):
    model_config = ConfigDict(extra="forbid")

    url: str = Field(..., min_length=1, max_length=2048)
    alt: str = ""
    caption: str | None = None


class VideoData(BaseModel):
    model_config = ConfigDict(extra="forbid")

    url: str = Field(..., min_length=1, max_length=2048)
    provider: Literal["youtube", "vimeo", "file"] = "file"
    autoplay: bool = False


class HeroData(BaseModel):
    model_config = ConfigDict(extra="forbid")

    heading: str = Field(..., min_length=1)
    subheading: str | None = None
    background_image_url: str | None = None
    cta_label: str | None = None
    cta_url: str | None = None


class CalloutData(BaseModel):
    model_config = ConfigDict(extra="forbid")

    text: str
    tone: Literal["info", "success", "warning", "danger"] = "info"


class _BlockBase(BaseModel):
    """Fields shared by every block variant. `id` is set only on responses."""

    id: str | None = None
    page_id: str = Field(..., pattern=_DOC_ID)
    order: int = Field(default=0, ge=0)


class TextBlock(_BlockBase):
    type: Literal["text"]
    data: TextData


class ImageBlock(_BlockBase):
    type: Literal["image"]
    data: ImageData


class VideoBlock(_BlockBase):
    type: Literal["video"]
    data: VideoData


class HeroBlock(_BlockBase):
    type: Literal["hero"]
    data: HeroData


class CalloutBlock(_BlockBase):
    type: Literal["callout"]
    data: CalloutData


ContentBlockVariants = Union[TextBlock, ImageBlock, VideoBlock, HeroBlock, CalloutBlock]
ContentBlock = Annotated[ContentBlockVariants, Field(discriminator="type")]

content_block_adapter: TypeAdapter[ContentBlockVariants] = TypeAdapter(ContentBlock)


class ContentBlockUpdate(PartialUpdate):
    """Move a block or reorder it. Changing type or data means replacing the block."""

    not_nullable = ("page_id", "order")

    page_id: str | None = Field(default=None, pattern=_DOC_ID)
    order: int | None = Field(default=None, ge=0)
