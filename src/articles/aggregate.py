"""Rebuild an article tree from the rows of an article/blocks LEFT JOIN.

An article with N blocks arrives as N rows; an article without blocks arrives
as a single row whose ``block_*`` columns are all NULL. The rows are already
ordered by ``block_position, block_id``.

Usage:
    rows = [
        {"id": 1, "title": "A", ..., "block_id": 7, "block_type": "text",
         "block_content": '{"body": "hi"}', "block_position": 0},
    ]
    article = build_article(rows)
"""

import datetime
import json
import logging
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, List, Mapping, Optional, Sequence

from core.exceptions import NotFound

logger = logging.getLogger(__name__)

# Scalar columns taken from the first row of the join.
ARTICLE_COLUMNS = (
    "id",
    "title",
    "author_id",
    "status",
    "date",
    "cover_image",
    "pdf_file",
    "created_at",
    "updated_at",
)
BLOCK_COLUMNS = ("block_id", "block_type", "block_content", "block_position")


class BlockKind(Enum):
    """Block types with known renderers; anything else is ``OPAQUE``.

    Storage accepts every tag, so an unseen type never fails a read. The raw
    tag stays on the block.
    """

    TEXT = "text"
    IMAGE = "image"
    EMBED = "embed"
    OPAQUE = "opaque"

    @classmethod
    def of(cls, tag: Optional[str]) -> "BlockKind":
        for kind in cls:
            if kind is not cls.OPAQUE and kind.value == tag:
                return kind
        return cls.OPAQUE


@dataclass
class BlockRecord:
    id: int
    block_type: str
    content: Any
    position: int

    @property
    def kind(self) -> BlockKind:
        return BlockKind.of(self.block_type)


@dataclass
class ArticleAggregate:
    """An article together with its blocks in render order."""

    id: int
    title: str
    author_id: Optional[int]
    status: str
    created_at: Optional[datetime.datetime]
    updated_at: Optional[datetime.datetime]
    date: Optional[datetime.date] = None
    cover_image: Optional[str] = None
    pdf_file: Optional[str] = None
    blocks: List[BlockRecord] = field(default_factory=list)

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


def decode_payload(raw: Any) -> Any:
    """Decode a stored block payload.

    NULL and empty text decode to ``{}``; values the driver already decoded
    (dicts, lists, numbers) pass through unchanged.
    """
    if raw is None:
        return {}
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8")
    if isinstance(raw, str):
        return json.loads(raw) if raw.strip() else {}
    return raw


def build_blocks(rows: Sequence[Mapping[str, Any]], article_id: Any = None) -> List[BlockRecord]:
    """Map joined rows to blocks, dropping sentinel rows and undecodable payloads."""
    blocks: List[BlockRecord] = []
    for row in rows:
        block_id = row.get("block_id")
        if block_id is None:
            continue
        try:
            content = decode_payload(row.get("block_content"))
        except (ValueError, UnicodeDecodeError):
            logger.warning(
                "Skipping block %s of article %s: content payload is not valid JSON",
                block_id,
                article_id,
            )
            continue
        blocks.append(
            BlockRecord(
                id=block_id,
                block_type=row.get("block_type"),
                content=content,
                position=row.get("block_position"),
            )
        )
    return blocks


def build_article(rows: Sequence[Mapping[str, Any]]) -> ArticleAggregate:
    """Fold the join rows of one article into an ``ArticleAggregate``.

    Raises:
        NotFound: if ``rows`` is empty (no such article).
    """
    if not rows:
        raise NotFound("Article not found")

    head = rows[0]
    scalars = {column: head.get(column) for column in ARTICLE_COLUMNS}
    return ArticleAggregate(**scalars, blocks=build_blocks(rows, article_id=scalars["id"]))


__all__ = [
    "ARTICLE_COLUMNS",
    "BLOCK_COLUMNS",
    "BlockKind",
    "BlockRecord",
    "ArticleAggregate",
    "decode_payload",
    "build_blocks",
    "build_article",
]
