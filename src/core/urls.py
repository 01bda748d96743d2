"""Root URL configuration for the publication CMS API."""
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView

urlpatterns = [
    path("api/auth/", include("authentication.urls")),
    path("api/", include("articles.urls")),
    path("api/", include("episodes.urls")),
    path("api/schema/", SpectacularAPIView.as_view(), name="api-schema"),
]
