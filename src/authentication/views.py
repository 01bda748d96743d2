"""Authentication endpoints: register, login, and profile."""

from typing import Any

from drf_spectacular.utils import extend_schema
from rest_framework import status

from access_control.permissions import AuthenticatedPrincipal
from core.response import BaseAPIView, api_response

from .serializers import (
    LoginResponseSerializer,
    LoginSerializer,
    PrincipalSerializer,
    RegisterSerializer,
)
from .services import CredentialStore


class RegisterView(BaseAPIView):
    permission_classes: list[Any] = []
    credentials = CredentialStore()

    @extend_schema(request=RegisterSerializer, responses={201: None})
    def post(self, request):
        """Register a new student account."""
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.credentials.register(
            serializer.validated_data["email"], serializer.validated_data["password"]
        )
        return api_response({"message": "Signup successful"}, status=status.HTTP_201_CREATED)


class LoginView(BaseAPIView):
    permission_classes: list[Any] = []
    credentials = CredentialStore()

    @extend_schema(request=LoginSerializer, responses=LoginResponseSerializer)
    def post(self, request):
        """Verify credentials and issue a signed access token."""
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        principal = self.credentials.verify(
            serializer.validated_data["email"], serializer.validated_data["password"]
        )
        token = self.credentials.issue_token(principal)
        return api_response({"token": token, "principal": principal.as_dict()})


class MeView(BaseAPIView):
    permission_classes = [AuthenticatedPrincipal]
    credentials = CredentialStore()

    @extend_schema(responses=PrincipalSerializer)
    def get(self, request):
        """Return the current user's identity and role."""
        return api_response(self.credentials.current_user(request.user))
