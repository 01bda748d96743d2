"""Routing for article, block, status, and author endpoints."""

from django.urls import path

from .views import (
    ArticleBlockView,
    ArticleDetailView,
    ArticleListView,
    ArticleStatusView,
    AuthorListView,
    EditorArticleListView,
)

urlpatterns = [
    path("articles/", ArticleListView.as_view(), name="article-list"),
    path("articles/<int:pk>/", ArticleDetailView.as_view(), name="article-detail"),
    path("articles/<int:pk>/blocks/", ArticleBlockView.as_view(), name="article-blocks"),
    path("articles/<int:pk>/status/", ArticleStatusView.as_view(), name="article-status"),
    path("editor-articles/", EditorArticleListView.as_view(), name="editor-article-list"),
    path("authors/", AuthorListView.as_view(), name="author-list"),
]
