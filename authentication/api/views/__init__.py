from .auth_views import (
    ChangePasswordAPIView,
    LoginAPIView,
    LogoutAPIView,
    MeAPIView,
    ProfileUpdateAPIView,
    RegisterAPIView,
)
from .seller_views import SellerApplicationCreateView, SellerApplicationStatusView


__all__ = [
    "LoginAPIView",
    "LogoutAPIView",
    "RegisterAPIView",
    "MeAPIView",
    "ProfileUpdateAPIView",
    "ChangePasswordAPIView",
    "SellerApplicationCreateView",
    "SellerApplicationStatusView",
]
