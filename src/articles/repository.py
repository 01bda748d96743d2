"""Article repository: creation, listings, aggregate reads, and deletion."""

import datetime
import logging
from typing import Any, List, Optional

from django.db import transaction
from django.db.models import F, TextField
from django.db.models.functions import Cast

from core.exceptions import NotFound, ValidationFailed, storage_boundary

from .aggregate import ARTICLE_COLUMNS, BLOCK_COLUMNS, ArticleAggregate, build_article
from .blocks import BlockStore
from .models import Article, ArticleStatus, Author, ContentBlock
from .state_machine import PublishingStateMachine, parse_status

logger = logging.getLogger(__name__)

TITLE_MAX_LENGTH = Article._meta.get_field("title").max_length


class ArticleRepository:
    """Entry point for article operations.

    Collaborators are injected so tests can swap the block store or state
    machine; the defaults read their configuration from settings.
    """

    def __init__(
        self,
        blocks: Optional[BlockStore] = None,
        states: Optional[PublishingStateMachine] = None,
    ):
        self.blocks = blocks or BlockStore()
        self.states = states or PublishingStateMachine()

    @staticmethod
    def _validate_create(title: Any, author_id: Any, status: Any) -> str:
        errors: dict[str, str] = {}
        if not isinstance(title, str) or not title.strip():
            errors["title"] = "This field is required."
        elif len(title) > TITLE_MAX_LENGTH:
            errors["title"] = f"Ensure this field has no more than {TITLE_MAX_LENGTH} characters."
        try:
            status = parse_status(ArticleStatus.DRAFT if status is None else status)
        except ValidationFailed as exc:
            errors.update(exc.fields)
        if author_id is not None and not Author.objects.filter(pk=author_id).exists():
            errors["author"] = "Author does not exist."
        if errors:
            raise ValidationFailed(errors)
        return status

    @storage_boundary("article creation")
    def create(
        self,
        title: str,
        author_id: Optional[int] = None,
        date: Optional[datetime.date] = None,
        status: Optional[str] = None,
        cover_ref: Optional[str] = None,
        pdf_ref: Optional[str] = None,
    ) -> dict[str, Any]:
        """Insert an article and echo the input back with its new id."""
        status = self._validate_create(title, author_id, status)
        article = Article.objects.create(
            title=title,
            author_id=author_id,
            date=date,
            status=status,
            cover_image=cover_ref,
            pdf_file=pdf_ref,
        )
        logger.info("Created article %s with status %s", article.id, status)
        return {
            "id": article.id,
            "title": title,
            "author": author_id,
            "date": date,
            "status": status,
            "coverImage": cover_ref,
            "pdf": pdf_ref,
        }

    @storage_boundary("published listing")
    def list_published(self) -> List[dict[str, Any]]:
        return list(
            Article.objects.filter(status=ArticleStatus.PUBLISHED)
            .order_by("-created_at", "-id")
            .values(*ARTICLE_COLUMNS, author_name=F("author__name"))
        )

    @storage_boundary("editorial listing")
    def list_all(self) -> List[dict[str, Any]]:
        return list(
            Article.objects.order_by("-created_at", "-id").values("id", "title", "status", "created_at")
        )

    def joined_rows(self, article_id: int) -> List[dict[str, Any]]:
        """One row per block (or a single NULL-block row), in render order.

        The payload is read back as JSON text so that one corrupt value only
        affects its own block when the aggregate is built.
        """
        return list(
            Article.objects.filter(pk=article_id)
            .annotate(
                block_id=F("blocks__id"),
                block_type=F("blocks__block_type"),
                block_content=Cast("blocks__content", output_field=TextField()),
                block_position=F("blocks__position"),
            )
            .order_by("block_position", "block_id")
            .values(*ARTICLE_COLUMNS, *BLOCK_COLUMNS)
        )

    @storage_boundary("article read")
    def get_by_id(self, article_id: int) -> ArticleAggregate:
        return build_article(self.joined_rows(article_id))

    @storage_boundary("article deletion")
    def delete(self, article_id: int) -> None:
        """Delete an article and its blocks in one transaction."""
        with transaction.atomic():
            if not Article.objects.filter(pk=article_id).exists():
                raise NotFound("Article not found")
            removed_blocks, _ = ContentBlock.objects.filter(article_id=article_id).delete()
            Article.objects.filter(pk=article_id).delete()
        logger.info("Deleted article %s with %s blocks", article_id, removed_blocks)

    def append_block(self, article_id: int, block_type: str, payload: Any, position: int) -> int:
        return self.blocks.append(article_id, block_type, payload, position)

    def set_status(self, article_id: int, status: str) -> str:
        return self.states.set_status(article_id, status)

    @storage_boundary("author listing")
    def list_authors(self) -> List[dict[str, Any]]:
        return list(Author.objects.order_by("name", "id").values("id", "name"))


__all__ = ["ArticleRepository"]
