"""Repository for Spotify episode links."""

import datetime
import logging
from typing import Any, Iterable, List, Optional

from core.exceptions import NotFound, storage_boundary

from .models import SpotifyLink

logger = logging.getLogger(__name__)


class EpisodeRepository:
    @storage_boundary("episode creation")
    def create(
        self,
        title: str,
        url: str,
        description: str = "",
        duration: str = "",
        episode_date: Optional[datetime.date] = None,
        video_link: Optional[str] = None,
        cover_image: Optional[str] = None,
        guests: Iterable[str] = (),
    ) -> SpotifyLink:
        episode = SpotifyLink.objects.create(
            title=title,
            url=url,
            description=description or "",
            duration=duration or "",
            episode_date=episode_date,
            video_link=video_link or None,
            cover_image=cover_image or None,
            guests=list(guests),
        )
        logger.info("Created Spotify episode %s", episode.id)
        return episode

    @storage_boundary("episode listing")
    def list(self) -> List[SpotifyLink]:
        """Newest first."""
        return list(SpotifyLink.objects.order_by("-created_at", "-id"))

    @storage_boundary("episode deletion")
    def delete(self, episode_id: int) -> None:
        deleted, _ = SpotifyLink.objects.filter(pk=episode_id).delete()
        if not deleted:
            raise NotFound("Spotify episode not found")
        logger.info("Deleted Spotify episode %s", episode_id)


__all__ = ["EpisodeRepository"]
