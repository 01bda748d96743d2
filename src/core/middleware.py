"""Middleware to authenticate requests via a bearer JWT."""

from django.urls import reverse
from django.utils.deprecation import MiddlewareMixin

from access_control.guard import AccessGuard, bearer_token
from core.exceptions import Forbidden, Unauthenticated
from core.response import error_json_response

# Routes that obtain credentials; a stale token must not block them.
TOKEN_EXEMPT_ROUTES = ("auth-login", "auth-register")


class JWTAuthMiddleware(MiddlewareMixin):
    """Verify the bearer token, if any, and attach ``request.principal``.

    Requests without a token continue anonymously; whether that is acceptable
    is decided per view. A token that fails verification is rejected here,
    before any view or storage access runs, except on login and register.
    """

    guard = AccessGuard()

    @staticmethod
    def _token_exempt(path: str) -> bool:
        return path in {reverse(name) for name in TOKEN_EXEMPT_ROUTES}

    def process_request(self, request):  # type: ignore[override]
        """Authenticate request using Bearer access token if present."""
        request.principal = None
        if self._token_exempt(request.path):
            return None
        token = bearer_token(request.META.get("HTTP_AUTHORIZATION", ""))
        if not token:
            return None

        try:
            request.principal = self.guard.authenticate(token)
        except Unauthenticated:
            return None
        except Forbidden as exc:
            return error_json_response(Forbidden.category, str(exc.detail), status=Forbidden.status_code)
        return None


__all__ = ["JWTAuthMiddleware"]
