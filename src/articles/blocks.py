"""Persistence of ordered content blocks belonging to an article."""

import json
import logging
from typing import Any, List

from django.db import transaction
from django.utils import timezone

from core.exceptions import NotFound, ValidationFailed, storage_boundary

from .aggregate import BlockRecord
from .models import Article, ContentBlock

logger = logging.getLogger(__name__)

BLOCK_TYPE_MAX_LENGTH = ContentBlock._meta.get_field("block_type").max_length
# Upper bound of a positive integer column on every supported backend.
POSITION_MAX = 2**31 - 1


def _validate_block(block_type: Any, payload: Any, position: Any) -> None:
    errors: dict[str, str] = {}
    if not isinstance(block_type, str) or not block_type.strip():
        errors["block_type"] = "This field is required."
    elif len(block_type) > BLOCK_TYPE_MAX_LENGTH:
        errors["block_type"] = f"Ensure this field has no more than {BLOCK_TYPE_MAX_LENGTH} characters."
    # bool is an int subclass; True is not a position.
    if isinstance(position, bool) or not isinstance(position, int):
        errors["position"] = "A valid integer is required."
    elif position < 0:
        errors["position"] = "Ensure this value is greater than or equal to 0."
    elif position > POSITION_MAX:
        errors["position"] = f"Ensure this value is less than or equal to {POSITION_MAX}."
    try:
        json.dumps(payload)
    except (TypeError, ValueError):
        errors["content"] = "Content must be JSON-serializable."
    if errors:
        raise ValidationFailed(errors)


def _to_record(block: ContentBlock) -> BlockRecord:
    return BlockRecord(
        id=block.id, block_type=block.block_type, content=block.content, position=block.position
    )


class BlockStore:
    """Append and list blocks.

    Block types are not checked against a catalog; unknown tags are stored
    as-is so new block kinds need no schema change.
    """

    @storage_boundary("block append")
    def append(self, article_id: int, block_type: str, payload: Any, position: int) -> int:
        _validate_block(block_type, payload, position)
        with transaction.atomic():
            # Touching updated_at doubles as the existence check for the article.
            touched = Article.objects.filter(pk=article_id).update(updated_at=timezone.now())
            if not touched:
                raise NotFound("Article not found")
            block = ContentBlock.objects.create(
                article_id=article_id,
                block_type=block_type,
                content={} if payload is None else payload,
                position=position,
            )
        logger.info(
            "Appended %s block %s to article %s at position %s",
            block_type,
            block.id,
            article_id,
            position,
        )
        return block.id

    @storage_boundary("block listing")
    def list_for_article(self, article_id: int) -> List[BlockRecord]:
        blocks = ContentBlock.objects.filter(article_id=article_id).order_by("position", "id")
        return [_to_record(block) for block in blocks]

    @storage_boundary("block lookup")
    def get(self, block_id: int) -> BlockRecord:
        block = ContentBlock.objects.filter(pk=block_id).first()
        if block is None:
            raise NotFound("Block not found")
        return _to_record(block)


__all__ = ["BlockStore"]
