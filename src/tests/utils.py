"""Shared helpers for tests (user creation, tokens, authenticated clients)."""

from __future__ import annotations

from typing import Any, Iterable

from rest_framework.test import APIClient

from articles.blocks import BlockStore
from articles.models import Article, ArticleStatus, Author
from authentication.managers import UserManager
from authentication.models import User
from authentication.services import Principal, TokenService
from scripts.management.commands.seed_content import create_seed_authors


def seed_authors() -> dict[str, Author]:
    """Create the seed authors used by the ``seed_content`` command."""

    return create_seed_authors()


def create_user(email: str, password: str, role: str = User.Role.STUDENT, **extra) -> User:
    """Create a user with a bcrypt-hashed password for tests."""

    return User.objects.create(
        email=email,
        password_hash=UserManager.hash_password(password),
        role=role,
        **extra,
    )


def principal_for(user: User) -> Principal:
    return Principal(id=str(user.id), email=user.email, role=user.role)


def token_for(user: User) -> str:
    return TokenService.issue_token(principal_for(user))


def auth_client(user: User) -> APIClient:
    """Return an APIClient carrying a fresh bearer token for ``user``."""

    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {token_for(user)}")
    return client


def create_article(
    title: str = "Article",
    status: str = ArticleStatus.DRAFT,
    author: Author | None = None,
    blocks: Iterable[tuple[str, Any, int]] = (),
) -> Article:
    """Create an article directly and append ``(type, content, position)`` blocks."""

    article = Article.objects.create(title=title, status=status, author=author)
    store = BlockStore()
    for block_type, content, position in blocks:
        store.append(article.id, block_type, content, position)
    return article


def error_categories(response) -> list[str]:
    return [error["category"] for error in response.json()["errors"]]
