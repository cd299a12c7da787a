"""Tests for the content block discriminated union."""

import pytest
from pydantic import ValidationError

from kinext.domain.enums import ContentBlockType
from kinext.schemas.cms import (
    CalloutBlock,
    ContentBlockUpdate,
    HeroBlock,
    ImageBlock,
    TextBlock,
    VideoBlock,
    content_block_adapter,
)


class TestDiscriminator:
    @pytest.mark.parametrize(
        ("payload", "model"),
        [
            ({"type": "text", "data": {"text": "Hello"}}, TextBlock),
            ({"type": "image", "data": {"url": "https://img.example.com/a.png"}}, ImageBlock),
            ({"type": "video", "data": {"url": "https://youtu.be/x", "provider": "youtube"}}, VideoBlock),
            ({"type": "hero", "data": {"heading": "Welcome"}}, HeroBlock),
            ({"type": "callout", "data": {"text": "Note", "tone": "warning"}}, CalloutBlock),
        ],
    )
    def test_type_selects_variant(self, payload: dict, model: type) -> None:
        block = content_block_adapter.validate_python({"page_id": "p1", "order": 0, **payload})
        assert isinstance(block, model)

    def test_every_block_type_has_a_variant(self) -> None:
        literals = {
            model.model_fields["type"].annotation.__args__[0]
            for model in (TextBlock, ImageBlock, VideoBlock, HeroBlock, CalloutBlock)
        }
        assert literals == set(ContentBlockType.values())

    def test_unknown_type_rejected(self) -> None:
        with pytest.raises(ValidationError):
            content_block_adapter.validate_python(
                {"page_id": "p1", "type": "carousel", "data": {}}
            )

    def test_data_must_match_type(self) -> None:
        with pytest.raises(ValidationError):
            content_block_adapter.validate_python(
                {"page_id": "p1", "type": "image", "data": {"text": "not an image"}}
            )

    def test_defaults(self) -> None:
        block = content_block_adapter.validate_python(
            {"page_id": "p1", "type": "text", "data": {"text": "Hi"}}
        )
        assert block.order == 0
        assert block.data.format == "plain"
        assert block.id is None

    def test_negative_order_rejected(self) -> None:
        with pytest.raises(ValidationError):
            content_block_adapter.validate_python(
                {"page_id": "p1", "type": "text", "order": -1, "data": {"text": "Hi"}}
            )


class TestBlockUpdate:
    def test_omitted_fields_are_unset(self) -> None:
        update = ContentBlockUpdate(order=3)
        assert update.model_dump(exclude_unset=True) == {"order": 3}

    @pytest.mark.parametrize("field", ["page_id", "order"])
    def test_null_is_rejected(self, field: str) -> None:
        with pytest.raises(ValidationError, match="cannot be null"):
            ContentBlockUpdate.model_validate({field: None})
