"""Blob storage for article covers and PDFs.

Articles only keep the returned storage name; where the bytes live is up to
Django's configured default storage.
"""

import logging
from typing import Iterable

from django.core.files.storage import default_storage
from django.utils.text import get_valid_filename

logger = logging.getLogger(__name__)


def store_upload(upload, folder: str) -> str:
    """Save an uploaded file under ``folder`` and return its reference."""
    name = default_storage.save(f"{folder}/{get_valid_filename(upload.name)}", upload)
    logger.info("Stored upload %s (%s bytes)", name, upload.size)
    return name


def discard_uploads(names: Iterable[str]) -> None:
    """Remove files saved for a create that did not go through."""
    for name in names:
        default_storage.delete(name)
        logger.info("Discarded upload %s", name)


__all__ = ["store_upload", "discard_uploads"]
