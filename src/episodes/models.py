"""Spotify podcast episode links shown alongside articles."""

from django.db import models


class SpotifyLink(models.Model):
    """A single podcast episode; flat record with no blocks."""

    title = models.CharField(max_length=255)
    url = models.URLField(max_length=500)
    description = models.TextField(blank=True, default="")
    duration = models.CharField(max_length=32, blank=True, default="")
    episode_date = models.DateField(null=True, blank=True)
    video_link = models.URLField(max_length=500, null=True, blank=True)
    cover_image = models.CharField(max_length=255, null=True, blank=True)
    guests = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "spotify_links"
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.title


__all__ = ["SpotifyLink"]
