"""Routing for Spotify episode endpoints."""

from django.urls import path

from .views import EpisodeDetailView, EpisodeListView

urlpatterns = [
    path("spotify/", EpisodeListView.as_view(), name="episode-list"),
    path("spotify/<int:pk>/", EpisodeDetailView.as_view(), name="episode-detail"),
]
