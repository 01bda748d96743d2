"""Article, block, status, and author endpoints guarded by EditorialPermission."""

from collections.abc import Mapping

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser

from access_control.permissions import EditorialPermission
from core.exceptions import ValidationFailed
from core.response import BaseAPIView, api_response

from .repository import ArticleRepository
from .serializers import (
    ArticleCreateSerializer,
    ArticleDetailSerializer,
    AuthorSerializer,
    BlockCreateSerializer,
    EditorArticleSerializer,
    PublishedArticleSerializer,
    StatusUpdateSerializer,
)
from .uploads import discard_uploads, store_upload

# Multipart file fields on create and the storage folder for each.
UPLOAD_FIELDS = {"coverImage": "covers", "pdf": "pdfs"}


class ArticleViewBase(BaseAPIView):
    permission_classes = [EditorialPermission]
    repository = ArticleRepository()


class ArticleListView(ArticleViewBase):
    public_read = True
    parser_classes = [JSONParser, MultiPartParser, FormParser]

    @extend_schema(responses=PublishedArticleSerializer(many=True))
    def get(self, request):
        """Published articles, newest first."""
        return api_response(self.repository.list_published())

    @extend_schema(request=ArticleCreateSerializer, responses={201: ArticleCreateSerializer})
    def post(self, request):
        """Create an article; cover and PDF may be uploaded files or references.

        Files are written only after the other fields validate, and are
        removed again if the insert itself is rejected.
        """
        if not isinstance(request.data, Mapping):
            raise ValidationFailed(detail="Expected a JSON object.")
        data = {key: value for key, value in request.data.items() if key not in request.FILES}
        serializer = ArticleCreateSerializer(data=data)
        serializer.is_valid(raise_exception=True)
        validated = dict(serializer.validated_data)

        stored = []
        for field, folder in UPLOAD_FIELDS.items():
            upload = request.FILES.get(field)
            if upload is not None:
                validated[field] = store_upload(upload, folder)
                stored.append(validated[field])

        try:
            created = self.repository.create(
                title=validated["title"],
                author_id=validated.get("author"),
                date=validated.get("date"),
                status=validated["status"],
                cover_ref=validated.get("coverImage") or None,
                pdf_ref=validated.get("pdf") or None,
            )
        except Exception:
            discard_uploads(stored)
            raise
        return api_response(created, status=status.HTTP_201_CREATED)


class ArticleDetailView(ArticleViewBase):
    public_read = True

    @extend_schema(responses=ArticleDetailSerializer)
    def get(self, request, pk: int):
        """One article with its blocks in render order."""
        article = self.repository.get_by_id(pk)
        return api_response(ArticleDetailSerializer(article).data)

    @extend_schema(responses={200: None})
    def delete(self, request, pk: int):
        """Delete the article together with its blocks."""
        self.repository.delete(pk)
        return api_response({"message": "Article deleted"})


class ArticleBlockView(ArticleViewBase):
    public_read = False

    @extend_schema(request=BlockCreateSerializer, responses={201: None})
    def post(self, request, pk: int):
        """Append a block to the article."""
        serializer = BlockCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        validated = serializer.validated_data
        block_id = self.repository.append_block(
            pk, validated["block_type"], validated.get("content"), validated["position"]
        )
        return api_response({"id": block_id}, status=status.HTTP_201_CREATED)


class ArticleStatusView(ArticleViewBase):
    public_read = False

    @extend_schema(request=StatusUpdateSerializer, responses=StatusUpdateSerializer)
    def put(self, request, pk: int):
        """Move the article to another publishing status."""
        serializer = StatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        new_status = self.repository.set_status(pk, serializer.validated_data["status"])
        return api_response({"message": "Status updated", "status": new_status})


class EditorArticleListView(ArticleViewBase):
    """Every article regardless of status; editorial roles only."""

    public_read = False

    @extend_schema(responses=EditorArticleSerializer(many=True))
    def get(self, request):
        return api_response(self.repository.list_all())


class AuthorListView(ArticleViewBase):
    public_read = True

    @extend_schema(responses=AuthorSerializer(many=True))
    def get(self, request):
        return api_response(self.repository.list_authors())


__all__ = [
    "ArticleListView",
    "ArticleDetailView",
    "ArticleBlockView",
    "ArticleStatusView",
    "EditorArticleListView",
    "AuthorListView",
]
