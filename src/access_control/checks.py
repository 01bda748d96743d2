"""System checks for access-control and publishing configuration."""

from django.conf import settings
from django.core.checks import Error, register

from access_control.permissions import EditorialPermission


@register()
def jwt_signing_key_configured(app_configs, **kwargs):
    """Tokens must never be signed with a built-in fallback key."""
    if getattr(settings, "JWT_SECRET_KEY", None):
        return []
    return [
        Error(
            "JWT_SECRET_KEY is not configured.",
            hint="Set the JWT_SECRET environment variable.",
            id="access_control.E001",
        )
    ]


@register()
def editorial_roles_are_known(app_configs, **kwargs):
    """Every configured editorial role must exist on the User model."""
    from authentication.models import User

    known = set(User.Role.values)
    configured = list(getattr(settings, "EDITORIAL_ROLES", []))
    errors: list[Error] = []
    if not configured:
        errors.append(
            Error("EDITORIAL_ROLES is empty; nobody could edit content.", id="access_control.E002")
        )
    for role in configured:
        if role not in known:
            errors.append(
                Error(
                    f"EDITORIAL_ROLES contains unknown role {role!r}.",
                    hint=f"Known roles: {', '.join(sorted(known))}.",
                    id="access_control.E003",
                )
            )
    return errors


@register()
def editorial_views_declare_public_read(app_configs, **kwargs):
    """Ensure views guarded by EditorialPermission state their read policy.

    Only the known content views are inspected. New editorial views should be
    added here.
    """
    errors: list[Error] = []

    # Import here to avoid circular imports at module load time.
    from articles.views import (
        ArticleBlockView,
        ArticleDetailView,
        ArticleListView,
        ArticleStatusView,
        AuthorListView,
        EditorArticleListView,
    )
    from episodes.views import EpisodeDetailView, EpisodeListView

    editorial_views = [
        ArticleListView,
        ArticleDetailView,
        ArticleBlockView,
        ArticleStatusView,
        EditorArticleListView,
        AuthorListView,
        EpisodeListView,
        EpisodeDetailView,
    ]

    for view_cls in editorial_views:
        permission_classes = getattr(view_cls, "permission_classes", [])
        if EditorialPermission in permission_classes and not hasattr(view_cls, "public_read"):
            errors.append(
                Error(
                    f"{view_cls.__name__} uses EditorialPermission but does not "
                    f"define public_read.",
                    obj=view_cls,
                    id="access_control.E004",
                )
            )

    return errors


@register()
def status_transition_table_exists(app_configs, **kwargs):
    from articles.state_machine import TRANSITION_TABLES

    name = getattr(settings, "ARTICLE_STATUS_TRANSITIONS", "permissive")
    if name in TRANSITION_TABLES:
        return []
    return [
        Error(
            f"Unknown ARTICLE_STATUS_TRANSITIONS {name!r}.",
            hint=f"Choose one of: {', '.join(sorted(TRANSITION_TABLES))}.",
            id="access_control.E005",
        )
    ]
