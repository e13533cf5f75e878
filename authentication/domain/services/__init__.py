"""
Business logic services for authentication.

Services encapsulate business rules and coordinate between
infrastructure and domain models.
"""

from .auth_service import AuthService
from .results import LoginResult, RegisterResult, Result
from .seller_service import SellerService


__all__ = [
    "AuthService",
    "SellerService",
    "LoginResult",
    "RegisterResult",
    "Result",
]
