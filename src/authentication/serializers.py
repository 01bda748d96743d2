"""Serializers for authentication flows (register, login, profile)."""

from rest_framework import serializers

from .services import MIN_PASSWORD_LENGTH


class RegisterSerializer(serializers.Serializer):
    """Validate signup input; uniqueness is checked by the credential store."""

    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=MIN_PASSWORD_LENGTH, trim_whitespace=False)


class LoginSerializer(serializers.Serializer):
    """Require both fields; whether they match is decided by the credential store."""

    email = serializers.CharField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)


class PrincipalSerializer(serializers.Serializer):
    """Identity fields shared by login responses and /auth/me."""

    id = serializers.CharField(read_only=True)
    email = serializers.EmailField(read_only=True)
    role = serializers.CharField(read_only=True)


class LoginResponseSerializer(serializers.Serializer):
    token = serializers.CharField(read_only=True)
    principal = PrincipalSerializer(read_only=True)


__all__ = [
    "RegisterSerializer",
    "LoginSerializer",
    "PrincipalSerializer",
    "LoginResponseSerializer",
]
