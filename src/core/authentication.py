"""Authentication helpers that bridge JWT middleware into DRF.

DRF's ``Request.user`` normally relies on its own authentication classes.
Since this project verifies bearer tokens in ``JWTAuthMiddleware``, this
module provides a lightweight authenticator that simply surfaces the
principal already attached to the underlying Django request.
"""

from typing import Any, Optional, Tuple

from rest_framework.authentication import BaseAuthentication


class MiddlewareUserAuthentication(BaseAuthentication):
    """Expose ``request._request.principal`` (set by middleware) to DRF.

    This authenticator does *not* decode tokens. If no principal was attached,
    authentication is skipped and DRF falls back to ``AnonymousUser``.
    """

    def authenticate(self, request) -> Optional[Tuple[Any, None]]:
        # DRF's Request wraps the original Django HttpRequest as ``._request``.
        django_request = getattr(request, "_request", None)
        if django_request is None:
            return None

        principal = getattr(django_request, "principal", None)
        if principal is None:
            return None

        return principal, None

    def authenticate_header(self, request) -> str:
        # Lets DRF answer missing credentials with 401 rather than 403.
        return 'Bearer realm="api"'


__all__ = ["MiddlewareUserAuthentication"]
