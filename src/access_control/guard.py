"""Access guard: turn a raw bearer token into a principal and check roles."""

import logging
from typing import Iterable

from django.conf import settings

from authentication.services import Principal, TokenService
from core.exceptions import Forbidden, Unauthenticated

logger = logging.getLogger(__name__)


def editorial_roles() -> tuple[str, ...]:
    """Roles allowed to mutate articles, blocks, and episodes."""
    return tuple(getattr(settings, "EDITORIAL_ROLES", ("editor", "admin")))


class AccessGuard:
    """Validate identity tokens without touching storage.

    The token service is injectable so tests can substitute a fake signer.
    """

    def __init__(self, tokens: type[TokenService] = TokenService):
        self.tokens = tokens

    def authenticate(self, raw_token: str | None) -> Principal:
        if not raw_token:
            raise Unauthenticated()
        try:
            return self.tokens.principal_from_token(raw_token)
        except Forbidden:
            logger.warning("Rejected bearer token")
            raise

    @staticmethod
    def require_principal(principal: Principal | None) -> Principal:
        """Reject anonymous callers; DRF hands us AnonymousUser when no token was sent."""
        if principal is None or not getattr(principal, "is_authenticated", False):
            raise Unauthenticated()
        return principal

    def require_role(self, principal: Principal | None, roles: Iterable[str]) -> Principal:
        principal = self.require_principal(principal)
        if principal.role not in tuple(roles):
            raise Forbidden("Insufficient role for this operation.")
        return principal

    def require_editor(self, principal: Principal | None) -> Principal:
        return self.require_role(principal, editorial_roles())


def bearer_token(authorization_header: str) -> str | None:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if authorization_header.startswith("Bearer "):
        return authorization_header.split(" ", 1)[1].strip()
    return None


__all__ = ["AccessGuard", "bearer_token", "editorial_roles"]
