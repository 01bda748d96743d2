"""Unit tests for rebuilding an article tree from flattened join rows."""

from __future__ import annotations

import json
from datetime import datetime, timezone

from django.test import SimpleTestCase

from articles.aggregate import BlockKind, build_article, decode_payload
from core.exceptions import NotFound

CREATED = datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)
UPDATED = datetime(2024, 5, 2, 10, 0, tzinfo=timezone.utc)


def row(block_id=None, block_type=None, content=None, position=None, **overrides):
    """One joined row: article scalars plus at most one block."""
    base = {
        "id": 1,
        "title": "A",
        "author_id": 4,
        "status": "draft",
        "date": None,
        "cover_image": None,
        "pdf_file": None,
        "created_at": CREATED,
        "updated_at": UPDATED,
        "block_id": block_id,
        "block_type": block_type,
        "block_content": content,
        "block_position": position,
    }
    base.update(overrides)
    return base


class BuildArticleTests(SimpleTestCase):
    """Grouping rows by article, dropping sentinels, decoding payloads."""

    def test_empty_rows_raise_not_found(self):
        """No rows means the article does not exist."""
        with self.assertRaises(NotFound):
            build_article([])

    def test_sentinel_row_yields_no_blocks(self):
        """A childless article's single NULL-block row is not turned into a block."""
        article = build_article([row()])

        self.assertEqual(article.blocks, [])
        self.assertEqual(article.id, 1)
        self.assertEqual(article.title, "A")
        self.assertEqual(article.author_id, 4)
        self.assertEqual(article.created_at, CREATED)
        self.assertEqual(article.updated_at, UPDATED)

    def test_blocks_keep_row_order_and_decode_content(self):
        """Rows arrive sorted by position; the builder must not reorder them."""
        rows = [
            row(10, "text", json.dumps({"body": "hi"}), 0),
            row(11, "image", json.dumps({"url": "x.png"}), 1),
            row(9, "embed", json.dumps({"html": "<iframe>"}), 5),
        ]

        article = build_article(rows)

        self.assertEqual([block.id for block in article.blocks], [10, 11, 9])
        self.assertEqual(article.blocks[0].content, {"body": "hi"})
        self.assertEqual(article.blocks[1].block_type, "image")
        self.assertEqual(article.blocks[2].position, 5)

    def test_scalars_come_from_first_row(self):
        """Article fields are read once from the head row."""
        rows = [
            row(1, "text", "{}", 0, title="First"),
            row(2, "text", "{}", 1, title="Ignored"),
        ]

        self.assertEqual(build_article(rows).title, "First")

    def test_nested_payload_survives_decoding(self):
        """Payloads are arbitrary-depth JSON values."""
        payload = {"items": [{"caption": "a", "meta": {"w": 10, "tags": ["x", None]}}], "n": 1.5}

        article = build_article([row(1, "gallery", json.dumps(payload), 0)])

        self.assertEqual(article.blocks[0].content, payload)

    def test_null_content_decodes_to_empty_object(self):
        article = build_article([row(1, "text", None, 0), row(2, "text", "", 1)])

        self.assertEqual([block.content for block in article.blocks], [{}, {}])

    def test_malformed_block_is_skipped_with_warning(self):
        """One corrupt payload drops that block only and is logged by id."""
        rows = [
            row(1, "text", '{"body": "ok"}', 0),
            row(2, "text", "{not json", 1),
            row(3, "text", '{"body": "still ok"}', 2),
        ]

        with self.assertLogs("articles.aggregate", level="WARNING") as logs:
            article = build_article(rows)

        self.assertEqual([block.id for block in article.blocks], [1, 3])
        self.assertIn("Skipping block 2 of article 1", logs.output[0])

    def test_as_dict_includes_blocks(self):
        data = build_article([row(1, "text", '{"body": "hi"}', 0)]).as_dict()

        self.assertEqual(
            data["blocks"],
            [{"id": 1, "block_type": "text", "content": {"body": "hi"}, "position": 0}],
        )


class DecodePayloadTests(SimpleTestCase):
    def test_structured_values_pass_through(self):
        """Drivers that already decode JSON columns hand us Python values."""
        self.assertEqual(decode_payload({"a": 1}), {"a": 1})
        self.assertEqual(decode_payload([1, 2]), [1, 2])

    def test_bytes_are_decoded(self):
        self.assertEqual(decode_payload(b'{"a": 1}'), {"a": 1})

    def test_scalar_json_is_allowed(self):
        self.assertEqual(decode_payload('"plain"'), "plain")


class BlockKindTests(SimpleTestCase):
    def test_known_tags_map_to_kinds(self):
        self.assertIs(BlockKind.of("text"), BlockKind.TEXT)
        self.assertIs(BlockKind.of("image"), BlockKind.IMAGE)
        self.assertIs(BlockKind.of("embed"), BlockKind.EMBED)

    def test_unknown_tags_fall_back_to_opaque(self):
        """Unseen tags are accepted as opaque instead of rejected."""
        self.assertIs(BlockKind.of("poll"), BlockKind.OPAQUE)
        self.assertIs(BlockKind.of(None), BlockKind.OPAQUE)

    def test_block_record_exposes_kind_and_keeps_tag(self):
        block = build_article([row(1, "quiz", "{}", 0)]).blocks[0]

        self.assertIs(block.kind, BlockKind.OPAQUE)
        self.assertEqual(block.block_type, "quiz")
