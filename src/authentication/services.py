"""Credential verification, registration, and JWT issuance/decoding."""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
import jwt
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_email
from django.db import IntegrityError, transaction

from core.exceptions import (
    DuplicateEmail,
    Forbidden,
    InvalidCredentials,
    NotFound,
    ValidationFailed,
    storage_boundary,
)

from .managers import UserManager
from .models import User

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


@dataclass(frozen=True)
class Principal:
    """Authenticated identity carried by a verified token."""

    id: str
    email: str
    role: str

    # DRF and Django treat request.user as authenticated through these flags.
    is_authenticated = True
    is_anonymous = False

    def as_dict(self) -> dict[str, str]:
        return {"id": self.id, "email": self.email, "role": self.role}


class TokenService:
    """Handle JWT issuance and decoding."""

    ALGORITHM = "HS256"
    TOKEN_TYPE = "access"
    REQUIRED_CLAIMS = ("sub", "email", "role", "exp")

    @staticmethod
    def _signing_key() -> str:
        key = getattr(settings, "JWT_SECRET_KEY", None)
        if not key:
            raise ImproperlyConfigured("JWT_SECRET_KEY must be configured (env JWT_SECRET)")
        return key

    @classmethod
    def ttl(cls) -> timedelta:
        return timedelta(seconds=getattr(settings, "JWT_ACCESS_TTL_SECONDS", 3600))

    @classmethod
    def issue_token(cls, principal: Principal) -> str:
        """Sign a time-limited token embedding the principal."""

        now = datetime.now(timezone.utc)
        payload = cls._build_payload(principal, now, cls.ttl())
        return jwt.encode(payload, cls._signing_key(), algorithm=cls.ALGORITHM)

    @classmethod
    def _build_payload(cls, principal: Principal, issued_at: datetime, ttl: timedelta) -> dict[str, Any]:
        exp = issued_at + ttl
        return {
            "sub": principal.id,
            "email": principal.email,
            "role": principal.role,
            "jti": str(uuid.uuid4()),
            "exp": int(exp.timestamp()),
            "iat": int(issued_at.timestamp()),
            "type": cls.TOKEN_TYPE,
        }

    @classmethod
    def decode_token(cls, token: str) -> dict[str, Any]:
        """Verify signature, expiry and token type; return the claims."""

        try:
            payload = jwt.decode(
                token,
                cls._signing_key(),
                algorithms=[cls.ALGORITHM],
                options={"require": list(cls.REQUIRED_CLAIMS)},
            )
        except jwt.ExpiredSignatureError as exc:
            raise Forbidden("Token has expired") from exc
        except jwt.InvalidTokenError as exc:
            raise Forbidden("Invalid token") from exc

        if payload.get("type") != cls.TOKEN_TYPE:
            raise Forbidden("Invalid token type")

        return payload

    @classmethod
    def principal_from_token(cls, token: str) -> Principal:
        payload = cls.decode_token(token)
        return Principal(id=str(payload["sub"]), email=payload["email"], role=payload["role"])


class CredentialStore:
    """Verify email/password pairs and register new users."""

    DEFAULT_ROLE = User.Role.STUDENT
    _dummy_hash: bytes | None = None

    def __init__(self, tokens: type[TokenService] = TokenService):
        self.tokens = tokens

    @classmethod
    def _burn_hash_check(cls, raw_password: str) -> None:
        """Spend a bcrypt comparison so unknown emails cost the same as bad passwords."""
        if cls._dummy_hash is None:
            cls._dummy_hash = bcrypt.hashpw(b"unused-password", bcrypt.gensalt(
                rounds=getattr(settings, "BCRYPT_ROUNDS", 12)
            ))
        bcrypt.checkpw(raw_password.encode(), cls._dummy_hash)

    @storage_boundary("credential verification")
    def verify(self, email: str, password: str) -> Principal:
        if not email or not password:
            raise InvalidCredentials()
        try:
            user = User.objects.get_by_email(email)
        except User.DoesNotExist:
            self._burn_hash_check(password)
            raise InvalidCredentials()

        if not UserManager.verify_password(user, password) or not user.is_active:
            raise InvalidCredentials()

        logger.info("User %s authenticated", user.id)
        return Principal(id=str(user.id), email=user.email, role=user.role)

    @staticmethod
    def _validate(email: str, password: str) -> None:
        errors: dict[str, str] = {}
        if not email:
            errors["email"] = "This field is required."
        else:
            try:
                validate_email(email)
            except DjangoValidationError:
                errors["email"] = "Enter a valid email address."
        if not password:
            errors["password"] = "This field is required."
        elif len(password) < MIN_PASSWORD_LENGTH:
            errors["password"] = f"Ensure this field has at least {MIN_PASSWORD_LENGTH} characters."
        if errors:
            raise ValidationFailed(errors)

    @storage_boundary("registration")
    def register(self, email: str, password: str) -> uuid.UUID:
        email = (email or "").strip()
        self._validate(email, password)

        if User.objects.filter(email__iexact=email).exists():
            raise DuplicateEmail()

        try:
            with transaction.atomic():
                user = User.objects.create_user(email, password, role=self.DEFAULT_ROLE)
        except IntegrityError as exc:
            # Lost a race with a concurrent signup for the same address.
            raise DuplicateEmail() from exc

        logger.info("Registered user %s with role %s", user.id, user.role)
        return user.id

    def issue_token(self, principal: Principal) -> str:
        return self.tokens.issue_token(principal)

    @storage_boundary("profile lookup")
    def current_user(self, principal: Principal) -> dict[str, str]:
        """Fresh profile for the principal; the user may have been removed since login."""
        try:
            user_id = uuid.UUID(principal.id)
        except ValueError as exc:
            raise NotFound("User not found") from exc
        user = User.objects.filter(pk=user_id).values("id", "email", "role").first()
        if user is None:
            raise NotFound("User not found")
        return {"id": str(user["id"]), "email": user["email"], "role": user["role"]}


__all__ = ["Principal", "TokenService", "CredentialStore"]
