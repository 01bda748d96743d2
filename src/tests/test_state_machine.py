"""Tests for the publishing state machine and its transition tables."""

from __future__ import annotations

from django.test import TestCase, override_settings

from articles.models import Article, ArticleStatus
from articles.state_machine import (
    EDITORIAL_TRANSITIONS,
    PERMISSIVE_TRANSITIONS,
    PublishingStateMachine,
)
from core.exceptions import NotFound, TransitionNotAllowed, ValidationFailed
from tests.utils import create_article


class TransitionTableTests(TestCase):
    """The tables cover every ordered pair of distinct statuses."""

    def test_tables_are_complete(self):
        statuses = ArticleStatus.values
        expected = {(a, b) for a in statuses for b in statuses if a != b}

        self.assertEqual(set(PERMISSIVE_TRANSITIONS), expected)
        self.assertEqual(set(EDITORIAL_TRANSITIONS), expected)

    def test_permissive_allows_everything(self):
        self.assertTrue(all(PERMISSIVE_TRANSITIONS.values()))

    def test_editorial_table(self):
        machine = PublishingStateMachine(EDITORIAL_TRANSITIONS)

        self.assertTrue(machine.can_transition("draft", "review"))
        self.assertTrue(machine.can_transition("review", "published"))
        self.assertTrue(machine.can_transition("published", "draft"))
        self.assertFalse(machine.can_transition("draft", "published"))
        self.assertFalse(machine.can_transition("published", "review"))
        self.assertEqual(machine.allowed_targets("draft"), {"review"})

    def test_same_status_is_always_allowed(self):
        machine = PublishingStateMachine(EDITORIAL_TRANSITIONS)
        self.assertTrue(machine.can_transition("published", "published"))


class SetStatusTests(TestCase):
    """Applying transitions against stored articles."""

    def setUp(self):
        self.article = create_article("Status", status=ArticleStatus.DRAFT)

    def _status(self) -> str:
        return Article.objects.values_list("status", flat=True).get(pk=self.article.pk)

    def test_permissive_default_allows_unpublishing(self):
        """published -> draft is allowed under the default permissive table."""
        machine = PublishingStateMachine()

        self.assertEqual(machine.set_status(self.article.pk, "published"), "published")
        self.assertEqual(machine.set_status(self.article.pk, "draft"), "draft")
        self.assertEqual(self._status(), "draft")

    def test_setting_same_status_twice_is_noop(self):
        machine = PublishingStateMachine()
        machine.set_status(self.article.pk, "review")
        before = Article.objects.get(pk=self.article.pk).updated_at

        self.assertEqual(machine.set_status(self.article.pk, "review"), "review")
        self.assertEqual(Article.objects.get(pk=self.article.pk).updated_at, before)

    def test_missing_article_raises_not_found_and_creates_nothing(self):
        count = Article.objects.count()

        with self.assertRaises(NotFound):
            PublishingStateMachine().set_status(999999, "published")
        self.assertEqual(Article.objects.count(), count)

    def test_unknown_status_is_validation_error(self):
        with self.assertRaises(ValidationFailed) as ctx:
            PublishingStateMachine().set_status(self.article.pk, "archived")

        self.assertIn("status", ctx.exception.fields)
        self.assertEqual(self._status(), "draft")

    def test_editorial_table_rejects_skipping_review(self):
        machine = PublishingStateMachine(EDITORIAL_TRANSITIONS)

        with self.assertRaises(TransitionNotAllowed):
            machine.set_status(self.article.pk, "published")
        self.assertEqual(self._status(), "draft")

        machine.set_status(self.article.pk, "review")
        machine.set_status(self.article.pk, "published")
        self.assertEqual(self._status(), "published")

    @override_settings(ARTICLE_STATUS_TRANSITIONS="editorial")
    def test_setting_selects_transition_table(self):
        """Default machines read the table from settings at call time."""
        with self.assertRaises(TransitionNotAllowed):
            PublishingStateMachine().set_status(self.article.pk, "published")
