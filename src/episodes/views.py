"""Spotify episode endpoints guarded by EditorialPermission."""

from drf_spectacular.utils import extend_schema
from rest_framework import status

from access_control.permissions import EditorialPermission
from core.response import BaseAPIView, api_response

from .serializers import EpisodeCreateSerializer, EpisodeSerializer
from .services import EpisodeRepository


class EpisodeViewBase(BaseAPIView):
    permission_classes = [EditorialPermission]
    repository = EpisodeRepository()


class EpisodeListView(EpisodeViewBase):
    public_read = True

    @extend_schema(responses=EpisodeSerializer(many=True))
    def get(self, request):
        """Episodes, newest first."""
        return api_response(EpisodeSerializer(self.repository.list(), many=True).data)

    @extend_schema(request=EpisodeCreateSerializer, responses={201: EpisodeSerializer})
    def post(self, request):
        serializer = EpisodeCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        validated = serializer.validated_data
        episode = self.repository.create(
            title=validated["title"],
            url=validated["url"],
            description=validated["desc"],
            duration=validated["duration"],
            episode_date=validated.get("date"),
            video_link=validated.get("videoLink"),
            cover_image=validated.get("coverImage"),
            guests=validated["guests"],
        )
        return api_response(EpisodeSerializer(episode).data, status=status.HTTP_201_CREATED)


class EpisodeDetailView(EpisodeViewBase):
    public_read = False

    @extend_schema(responses={200: None})
    def delete(self, request, pk: int):
        self.repository.delete(pk)
        return api_response({"message": "Spotify episode deleted"})


__all__ = ["EpisodeListView", "EpisodeDetailView"]
