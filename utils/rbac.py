"""
Role checks shared by services and views.

The session token carries role claims, but approval can change after the token
was issued, so the seller check reads the user's application from the database.
"""

from django.contrib.auth import get_user_model

ROLE_SELLER = "seller"
ROLE_ADMIN = "admin"


def is_admin(user) -> bool:
    if not getattr(user, "is_authenticated", False):
        return False
    return bool(getattr(user, "is_superuser", False) or getattr(user, "role", None) == ROLE_ADMIN)


def is_seller(user) -> bool:
    """Approved seller (admins count as sellers)."""
    if is_admin(user):
        return True
    if not getattr(user, "is_authenticated", False):
        return False

    fresh = get_user_model().objects.select_related("seller_application").filter(pk=user.pk).first()
    return fresh is not None and fresh.role == ROLE_SELLER and fresh.seller_status == "approved"


def is_owner_or_admin(user, owner_id) -> bool:
    return getattr(user, "pk", None) == owner_id or is_admin(user)
