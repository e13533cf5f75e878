"""
DRF permission classes for marketplace roles.

Role claims in the session token can be stale (an admin may have approved or
rejected the seller since the token was issued), so each request re-reads the
user row once and memoises the resulting capabilities on the user object.
"""

from typing import FrozenSet, Iterable

from rest_framework.permissions import BasePermission

CAPABILITY_CACHE_ATTR = "_cached_role_set"


def capabilities(user) -> FrozenSet[str]:
    """Role name plus derived capabilities ("admin", "approved_seller")."""
    cached = getattr(user, CAPABILITY_CACHE_ATTR, None)
    if cached is not None:
        return cached
    if not getattr(user, "is_authenticated", False):
        return frozenset()

    current = type(user).objects.select_related("seller_application").filter(pk=user.pk).first()
    if current is None:
        return frozenset()

    granted = {current.role}
    if current.is_superuser or current.role == "admin":
        granted.add("admin")
    if current.is_seller():
        granted.add("approved_seller")

    result = frozenset(granted)
    setattr(user, CAPABILITY_CACHE_ATTR, result)
    return result


class RoleRequired(BasePermission):
    """Authenticated, and holding at least one of `required_roles` (none means any)."""

    required_roles: Iterable[str] = ()
    message = "You do not have permission to perform this action"

    def has_permission(self, request, view) -> bool:
        user = getattr(request, "user", None)
        if not getattr(user, "is_authenticated", False):
            return False
        wanted = set(self.required_roles)
        return not wanted or bool(wanted & capabilities(user))

    def has_object_permission(self, request, view, obj) -> bool:
        # Ownership is decided by the services.
        return self.has_permission(request, view)


class ApprovedSellerRequired(RoleRequired):
    required_roles = ("approved_seller", "admin")
    message = "Seller account not approved"


class SellerOrAdminRequired(RoleRequired):
    required_roles = ("seller", "admin")


class AdminRequired(RoleRequired):
    required_roles = ("admin",)
    message = "Admin access required"
