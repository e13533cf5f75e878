from rest_framework_simplejwt.tokens import AccessToken


class SessionToken(AccessToken):
    """Session token that carries the user's role claims"""

    @classmethod
    def for_user(cls, user):
        """Create a session token with custom claims"""
        token = super().for_user(user)
        token["role"] = user.role
        token["is_seller"] = user.is_seller()
        token["is_admin"] = user.is_admin()
        token["name"] = user.name

        return token
