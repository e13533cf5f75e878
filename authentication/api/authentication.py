from django.conf import settings
from rest_framework_simplejwt.authentication import JWTAuthentication


class CookieJWTAuthentication(JWTAuthentication):
    """
    JWT authentication that accepts the session token from the http-only
    cookie, falling back to the ``Authorization: Bearer`` header.
    """

    def authenticate(self, request):
        header = self.get_header(request)
        if header is not None:
            raw_token = self.get_raw_token(header)
        else:
            raw_token = request.COOKIES.get(getattr(settings, "AUTH_COOKIE_NAME", "token"))

        if not raw_token:
            return None

        validated_token = self.get_validated_token(raw_token)
        user = self.get_user(validated_token)

        if getattr(user, "is_banned", False):
            return None

        return user, validated_token


def set_auth_cookie(response, token: str):
    """Attach the session token as an http-only cookie."""
    response.set_cookie(
        getattr(settings, "AUTH_COOKIE_NAME", "token"),
        token,
        max_age=getattr(settings, "AUTH_COOKIE_MAX_AGE", 7 * 24 * 60 * 60),
        httponly=True,
        secure=getattr(settings, "AUTH_COOKIE_SECURE", False),
        samesite=getattr(settings, "AUTH_COOKIE_SAMESITE", "Lax"),
    )
    return response


def clear_auth_cookie(response):
    response.delete_cookie(
        getattr(settings, "AUTH_COOKIE_NAME", "token"),
        samesite=getattr(settings, "AUTH_COOKIE_SAMESITE", "Lax"),
    )
    return response
