"""
Article publishing state machine.

States:
    draft, review, published

Transitions are looked up in an explicit table of ``(from, to) -> allowed``.
Two tables are provided:

    permissive  every change is allowed, including published -> draft
    editorial   draft -> review -> published, with review -> draft and
                published -> draft to pull content back

``settings.ARTICLE_STATUS_TRANSITIONS`` selects the active table; tightening
the workflow is a data change here, not new logic.

Usage:
    machine = PublishingStateMachine()
    machine.set_status(article_id, "published")
"""

import logging
from typing import Dict, Iterable, Optional, Tuple

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.db import transaction
from django.utils import timezone

from core.exceptions import NotFound, TransitionNotAllowed, ValidationFailed, storage_boundary

from .models import Article, ArticleStatus

logger = logging.getLogger(__name__)

TransitionTable = Dict[Tuple[str, str], bool]


def build_transition_table(allowed: Iterable[Tuple[str, str]]) -> TransitionTable:
    """Expand a set of allowed pairs into a full from x to table."""
    allowed = {(str(source), str(target)) for source, target in allowed}
    return {
        (source, target): (source, target) in allowed
        for source in ArticleStatus.values
        for target in ArticleStatus.values
        if source != target
    }


PERMISSIVE_TRANSITIONS = build_transition_table(
    (source, target)
    for source in ArticleStatus.values
    for target in ArticleStatus.values
)

EDITORIAL_TRANSITIONS = build_transition_table(
    [
        (ArticleStatus.DRAFT, ArticleStatus.REVIEW),
        (ArticleStatus.REVIEW, ArticleStatus.DRAFT),
        (ArticleStatus.REVIEW, ArticleStatus.PUBLISHED),
        (ArticleStatus.PUBLISHED, ArticleStatus.DRAFT),
    ]
)

TRANSITION_TABLES: Dict[str, TransitionTable] = {
    "permissive": PERMISSIVE_TRANSITIONS,
    "editorial": EDITORIAL_TRANSITIONS,
}


def configured_transition_table() -> TransitionTable:
    name = getattr(settings, "ARTICLE_STATUS_TRANSITIONS", "permissive")
    try:
        return TRANSITION_TABLES[name]
    except KeyError as exc:
        raise ImproperlyConfigured(f"Unknown ARTICLE_STATUS_TRANSITIONS {name!r}") from exc


def parse_status(value) -> str:
    """Return the status string or raise ``ValidationFailed`` naming the field."""
    if value not in ArticleStatus.values:
        raise ValidationFailed(
            {"status": f"Must be one of: {', '.join(ArticleStatus.values)}."}
        )
    return str(value)


class PublishingStateMachine:
    """Validate and apply article status changes."""

    def __init__(self, transitions: Optional[TransitionTable] = None):
        self._transitions = transitions

    @property
    def transitions(self) -> TransitionTable:
        # Resolved lazily so settings overrides apply to default instances.
        if self._transitions is not None:
            return self._transitions
        return configured_transition_table()

    def can_transition(self, current: str, target: str) -> bool:
        if current == target:
            return True
        return self.transitions.get((current, target), False)

    def allowed_targets(self, current: str) -> set[str]:
        return {target for (source, target), ok in self.transitions.items() if ok and source == current}

    @storage_boundary("status change")
    def set_status(self, article_id: int, status: str) -> str:
        """Move an article to ``status``; repeating the current status is a no-op.

        Raises:
            ValidationFailed: unknown status value.
            NotFound: no article with ``article_id`` (nothing is created).
            TransitionNotAllowed: the active table forbids the change.
        """
        target = parse_status(status)
        with transaction.atomic():
            current = (
                Article.objects.select_for_update()
                .filter(pk=article_id)
                .values_list("status", flat=True)
                .first()
            )
            if current is None:
                raise NotFound("Article not found")
            if current == target:
                return target
            if not self.can_transition(current, target):
                raise TransitionNotAllowed(f"Cannot move article from {current} to {target}.")
            Article.objects.filter(pk=article_id).update(status=target, updated_at=timezone.now())

        logger.info("Article %s status %s -> %s", article_id, current, target)
        return target


__all__ = [
    "TransitionTable",
    "build_transition_table",
    "PERMISSIVE_TRANSITIONS",
    "EDITORIAL_TRANSITIONS",
    "TRANSITION_TABLES",
    "configured_transition_table",
    "parse_status",
    "PublishingStateMachine",
]
