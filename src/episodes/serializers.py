"""Serializers for Spotify episode links."""

from rest_framework import serializers

from .models import SpotifyLink


class EpisodeCreateSerializer(serializers.Serializer):
    """Input uses the short field names the editor front end sends."""

    title = serializers.CharField(max_length=255)
    url = serializers.URLField(max_length=500)
    desc = serializers.CharField(required=False, allow_blank=True, default="")
    duration = serializers.CharField(required=False, allow_blank=True, max_length=32, default="")
    date = serializers.DateField(required=False, allow_null=True)
    videoLink = serializers.URLField(required=False, allow_null=True, allow_blank=True, max_length=500)
    coverImage = serializers.CharField(required=False, allow_null=True, allow_blank=True, max_length=255)
    guests = serializers.ListField(child=serializers.CharField(max_length=255), required=False, default=list)


class EpisodeSerializer(serializers.ModelSerializer):
    class Meta:
        """All stored fields are read-only on output."""
        model = SpotifyLink
        fields = [
            "id",
            "title",
            "url",
            "description",
            "duration",
            "episode_date",
            "video_link",
            "cover_image",
            "guests",
            "created_at",
        ]
        read_only_fields = fields


__all__ = ["EpisodeCreateSerializer", "EpisodeSerializer"]
