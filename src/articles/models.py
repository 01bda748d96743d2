"""Articles, their ordered content blocks, and authors."""

from django.db import models


class ArticleStatus(models.TextChoices):
    DRAFT = "draft", "Draft"
    REVIEW = "review", "Review"
    PUBLISHED = "published", "Published"


class Author(models.Model):
    """Display name shown next to published articles."""

    name = models.CharField(max_length=255)

    class Meta:
        db_table = "authors"
        ordering = ["name"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.name


class Article(models.Model):
    """Article header; the body lives in ``ContentBlock`` rows.

    ``author`` is a weak reference: deleting an author nulls the link and
    keeps the article.
    """

    title = models.CharField(max_length=255)
    author = models.ForeignKey(
        Author, null=True, blank=True, on_delete=models.SET_NULL, related_name="articles"
    )
    date = models.DateField(null=True, blank=True)
    status = models.CharField(max_length=16, choices=ArticleStatus.choices, default=ArticleStatus.DRAFT)
    cover_image = models.CharField(max_length=255, null=True, blank=True)
    pdf_file = models.CharField(max_length=255, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "articles"
        ordering = ["-created_at", "-id"]
        indexes = [models.Index(fields=["status", "-created_at"], name="articles_status_created_idx")]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.title


class ContentBlock(models.Model):
    """One typed unit of article content.

    ``block_type`` is an open tag and ``content`` any JSON value. Render order
    is ``position`` then ``id``; positions may repeat or skip numbers.
    """

    article = models.ForeignKey(Article, on_delete=models.CASCADE, related_name="blocks")
    block_type = models.CharField(max_length=64)
    content = models.JSONField(default=dict)
    position = models.PositiveIntegerField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "article_blocks"
        ordering = ["position", "id"]
        indexes = [models.Index(fields=["article", "position"], name="blocks_article_position_idx")]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.block_type}@{self.position}"


__all__ = ["ArticleStatus", "Author", "Article", "ContentBlock"]
