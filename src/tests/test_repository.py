"""Tests for the article repository (aggregate reads, listings, deletion)."""

from __future__ import annotations

import datetime
from unittest import mock

from django.db import DatabaseError
from django.test import TestCase

from articles.blocks import BlockStore
from articles.models import Article, ArticleStatus, Author, ContentBlock
from articles.repository import ArticleRepository
from core.exceptions import NotFound, StorageFailure, ValidationFailed
from tests.utils import create_article, seed_authors


class CreateArticleTests(TestCase):
    def setUp(self):
        self.repository = ArticleRepository()
        self.authors = seed_authors()

    def test_create_echoes_input_with_new_id(self):
        author = self.authors["Ada Lovelace"]

        created = self.repository.create(
            title="Launch",
            author_id=author.id,
            date=datetime.date(2024, 3, 1),
            cover_ref="covers/launch.png",
        )

        self.assertEqual(
            created,
            {
                "id": created["id"],
                "title": "Launch",
                "author": author.id,
                "date": datetime.date(2024, 3, 1),
                "status": "draft",
                "coverImage": "covers/launch.png",
                "pdf": None,
            },
        )
        article = Article.objects.get(pk=created["id"])
        self.assertEqual(article.cover_image, "covers/launch.png")
        self.assertEqual(article.status, ArticleStatus.DRAFT)

    def test_create_rejects_blank_title_unknown_status_and_author(self):
        with self.assertRaises(ValidationFailed) as ctx:
            self.repository.create(title="  ", author_id=999999, status="archived")

        self.assertEqual(set(ctx.exception.fields), {"title", "status", "author"})
        self.assertEqual(Article.objects.count(), 0)

    def test_create_without_author(self):
        created = self.repository.create(title="Anonymous", status="published")

        self.assertIsNone(created["author"])
        self.assertEqual(created["status"], "published")


class GetByIdTests(TestCase):
    def setUp(self):
        self.repository = ArticleRepository()

    def test_article_with_blocks_in_position_order(self):
        """Blocks are appended out of order and read back sorted."""
        article = Article.objects.create(title="A", status=ArticleStatus.DRAFT)
        self.repository.append_block(article.id, "text", {"body": "hi"}, 0)
        self.repository.append_block(article.id, "image", {"url": "x.png"}, 1)

        aggregate = self.repository.get_by_id(article.id)

        self.assertEqual(aggregate.title, "A")
        self.assertEqual(aggregate.status, "draft")
        self.assertEqual(
            [(block.block_type, block.content, block.position) for block in aggregate.blocks],
            [("text", {"body": "hi"}, 0), ("image", {"url": "x.png"}, 1)],
        )

    def test_article_without_blocks_has_empty_list(self):
        article = create_article("Empty")

        self.assertEqual(self.repository.get_by_id(article.id).blocks, [])

    def test_positions_are_sorted_on_read(self):
        article = create_article(
            "Shuffled",
            blocks=[("text", {"n": 3}, 3), ("text", {"n": 1}, 1), ("text", {"n": 2}, 2)],
        )

        positions = [block.position for block in self.repository.get_by_id(article.id).blocks]

        self.assertEqual(positions, [1, 2, 3])

    def test_missing_article_raises_not_found(self):
        with self.assertRaises(NotFound):
            self.repository.get_by_id(999999)

    def test_storage_errors_become_storage_failure(self):
        """Driver errors never leak; callers see a generic storage failure."""
        with mock.patch.object(
            ArticleRepository, "joined_rows", side_effect=DatabaseError("relation does not exist")
        ):
            with self.assertLogs("core.exceptions", level="ERROR"):
                with self.assertRaises(StorageFailure) as ctx:
                    self.repository.get_by_id(1)

        self.assertNotIn("relation", str(ctx.exception.detail))


class ListingTests(TestCase):
    def setUp(self):
        self.repository = ArticleRepository()
        self.authors = seed_authors()

    def test_list_published_filters_and_orders_newest_first(self):
        author = self.authors["Grace Hopper"]
        older = create_article("Older", status=ArticleStatus.PUBLISHED, author=author)
        create_article("Draft", status=ArticleStatus.DRAFT)
        create_article("Review", status=ArticleStatus.REVIEW)
        newer = create_article("Newer", status=ArticleStatus.PUBLISHED)

        rows = self.repository.list_published()

        self.assertEqual([row["id"] for row in rows], [newer.id, older.id])
        self.assertEqual(rows[1]["author_name"], "Grace Hopper")
        self.assertIsNone(rows[0]["author_name"])

    def test_list_all_includes_every_status(self):
        for status in ArticleStatus.values:
            create_article(status, status=status)

        rows = self.repository.list_all()

        self.assertEqual({row["status"] for row in rows}, set(ArticleStatus.values))
        self.assertEqual(set(rows[0]), {"id", "title", "status", "created_at"})

    def test_list_authors_sorted_by_name(self):
        Author.objects.create(name="Alan Turing")

        names = [row["name"] for row in self.repository.list_authors()]

        self.assertEqual(names, ["Ada Lovelace", "Alan Turing", "Grace Hopper"])

    def test_deleting_author_keeps_articles(self):
        author = self.authors["Ada Lovelace"]
        article = create_article("Orphaned", author=author)

        author.delete()

        self.assertIsNone(self.repository.get_by_id(article.id).author_id)


class DeleteTests(TestCase):
    def setUp(self):
        self.repository = ArticleRepository()

    def test_delete_removes_article_and_blocks(self):
        article = create_article("Doomed", blocks=[("text", {}, 0), ("image", {}, 1)])
        block_ids = [block.id for block in self.repository.get_by_id(article.id).blocks]

        self.repository.delete(article.id)

        self.assertFalse(Article.objects.filter(pk=article.id).exists())
        self.assertFalse(ContentBlock.objects.filter(article_id=article.id).exists())
        with self.assertRaises(NotFound):
            self.repository.get_by_id(article.id)
        store = BlockStore()
        for block_id in block_ids:
            with self.assertRaises(NotFound):
                store.get(block_id)

    def test_second_delete_raises_not_found(self):
        article = create_article("Once")
        self.repository.delete(article.id)

        with self.assertRaises(NotFound):
            self.repository.delete(article.id)

    def test_delete_leaves_other_articles_alone(self):
        keep = create_article("Keep", blocks=[("text", {}, 0)])
        drop = create_article("Drop", blocks=[("text", {}, 0)])

        self.repository.delete(drop.id)

        self.assertEqual(len(self.repository.get_by_id(keep.id).blocks), 1)
