from django.urls import path

from authentication.api.views import (
    ChangePasswordAPIView,
    LoginAPIView,
    LogoutAPIView,
    MeAPIView,
    ProfileUpdateAPIView,
    RegisterAPIView,
    SellerApplicationCreateView,
    SellerApplicationStatusView,
)


urlpatterns = [
    # Auth
    path("register", RegisterAPIView.as_view(), name="register"),
    path("login", LoginAPIView.as_view(), name="login"),
    path("logout", LogoutAPIView.as_view(), name="logout"),
    path("me", MeAPIView.as_view(), name="me"),
    # Profile
    path("profile", ProfileUpdateAPIView.as_view(), name="profile"),
    path("password", ChangePasswordAPIView.as_view(), name="change_password"),
    # Seller
    path("seller/apply", SellerApplicationCreateView.as_view(), name="seller_apply"),
    path("seller/application/status", SellerApplicationStatusView.as_view(), name="seller_application_status"),
]
