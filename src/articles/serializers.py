"""Serializers for article input validation and aggregate output."""

from rest_framework import serializers

from .blocks import BLOCK_TYPE_MAX_LENGTH, POSITION_MAX
from .models import ArticleStatus


class ArticleCreateSerializer(serializers.Serializer):
    """Create payload; cover/pdf are references from the blob collaborator."""

    title = serializers.CharField(max_length=255)
    author = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    date = serializers.DateField(required=False, allow_null=True)
    status = serializers.ChoiceField(choices=ArticleStatus.choices, default=ArticleStatus.DRAFT)
    coverImage = serializers.CharField(required=False, allow_null=True, allow_blank=True, max_length=255)
    pdf = serializers.CharField(required=False, allow_null=True, allow_blank=True, max_length=255)


class BlockCreateSerializer(serializers.Serializer):
    block_type = serializers.CharField(max_length=BLOCK_TYPE_MAX_LENGTH)
    content = serializers.JSONField(required=False, allow_null=True)
    position = serializers.IntegerField(min_value=0, max_value=POSITION_MAX)


class StatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=ArticleStatus.choices)


class ContentBlockSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    block_type = serializers.CharField(read_only=True)
    content = serializers.JSONField(read_only=True)
    position = serializers.IntegerField(read_only=True)


class ArticleDetailSerializer(serializers.Serializer):
    """Article aggregate: header fields plus blocks in render order."""

    id = serializers.IntegerField(read_only=True)
    title = serializers.CharField(read_only=True)
    author_id = serializers.IntegerField(read_only=True, allow_null=True)
    status = serializers.CharField(read_only=True)
    date = serializers.DateField(read_only=True, allow_null=True)
    cover_image = serializers.CharField(read_only=True, allow_null=True)
    pdf_file = serializers.CharField(read_only=True, allow_null=True)
    created_at = serializers.DateTimeField(read_only=True)
    updated_at = serializers.DateTimeField(read_only=True)
    blocks = ContentBlockSerializer(many=True, read_only=True)


class PublishedArticleSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    title = serializers.CharField(read_only=True)
    author_id = serializers.IntegerField(read_only=True, allow_null=True)
    author_name = serializers.CharField(read_only=True, allow_null=True)
    status = serializers.CharField(read_only=True)
    date = serializers.DateField(read_only=True, allow_null=True)
    cover_image = serializers.CharField(read_only=True, allow_null=True)
    pdf_file = serializers.CharField(read_only=True, allow_null=True)
    created_at = serializers.DateTimeField(read_only=True)
    updated_at = serializers.DateTimeField(read_only=True)


class EditorArticleSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    title = serializers.CharField(read_only=True)
    status = serializers.CharField(read_only=True)
    created_at = serializers.DateTimeField(read_only=True)


class AuthorSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    name = serializers.CharField(read_only=True)


__all__ = [
    "ArticleCreateSerializer",
    "BlockCreateSerializer",
    "StatusUpdateSerializer",
    "ContentBlockSerializer",
    "ArticleDetailSerializer",
    "PublishedArticleSerializer",
    "EditorArticleSerializer",
    "AuthorSerializer",
]
