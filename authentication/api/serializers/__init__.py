from .auth_serializers import (
    ChangePasswordSerializer,
    LoginUserSerializer,
    ProfileUpdateSerializer,
    PublicSellerSerializer,
    SellerApplicationSerializer,
    SellerApplySerializer,
    UserRegistrationSerializer,
    UserSerializer,
)
from .jwt_serializers import SessionToken


__all__ = [
    "UserSerializer",
    "PublicSellerSerializer",
    "LoginUserSerializer",
    "UserRegistrationSerializer",
    "ProfileUpdateSerializer",
    "ChangePasswordSerializer",
    "SellerApplySerializer",
    "SellerApplicationSerializer",
    "SessionToken",
]
