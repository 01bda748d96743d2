"""DRF permission classes backed by the access guard."""

from rest_framework import permissions

from .guard import AccessGuard

guard = AccessGuard()


class AuthenticatedPrincipal(permissions.BasePermission):
    """Any verified principal, regardless of role."""

    def has_permission(self, request, view) -> bool:
        guard.require_principal(getattr(request, "user", None))
        return True


class EditorialPermission(permissions.BasePermission):
    """Gate writes behind an editorial role; reads follow ``view.public_read``.

    Views must state ``public_read`` explicitly (see ``access_control.checks``).
    Failures raise so the envelope carries ``unauthenticated`` vs ``forbidden``
    instead of DRF's generic denial.
    """

    def has_permission(self, request, view) -> bool:
        if request.method in permissions.SAFE_METHODS and getattr(view, "public_read", False):
            return True
        guard.require_editor(getattr(request, "user", None))
        return True


__all__ = ["AuthenticatedPrincipal", "EditorialPermission"]
