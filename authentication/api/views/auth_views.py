from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import permissions, status
from rest_framework.views import APIView

from authentication.api.authentication import clear_auth_cookie, set_auth_cookie
from authentication.api.serializers import (
    ChangePasswordSerializer,
    LoginUserSerializer,
    ProfileUpdateSerializer,
    UserRegistrationSerializer,
    UserSerializer,
)
from infrastructure.container import container
from utils.responses import error_response, success_response, validation_error_response


def get_auth_service():
    return container.auth_service()


class RegisterAPIView(APIView):
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    @extend_schema(
        operation_id="auth_register",
        summary="Register a campus account",
        description="""
        Create an account and start a session.

        A student id marks the account as a verified student.
        The session token is returned in the body and set as the `token` http-only cookie.
        """,
        request=UserRegistrationSerializer,
        responses={
            201: OpenApiResponse(description="Registration successful"),
            400: OpenApiResponse(description="Validation failed or email already registered"),
        },
        tags=["Authentication"],
    )
    def post(self, request):
        serializer = UserRegistrationSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        result = get_auth_service().register(**serializer.validated_data)
        if not result.success:
            return error_response(result.error, status=status.HTTP_400_BAD_REQUEST)

        response = success_response(
            {"user": UserSerializer(result.user).data, "token": result.token},
            message=result.message,
            status=status.HTTP_201_CREATED,
        )
        return set_auth_cookie(response, result.token)


class LoginAPIView(APIView):
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    @extend_schema(
        operation_id="auth_login",
        summary="Login with email and password",
        request=LoginUserSerializer,
        responses={
            200: OpenApiResponse(description="Login successful"),
            400: OpenApiResponse(description="Invalid credentials, banned or deactivated account"),
        },
        tags=["Authentication"],
    )
    def post(self, request):
        serializer = LoginUserSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        result = get_auth_service().login(**serializer.validated_data)
        if not result.success:
            return error_response(result.error, status=status.HTTP_400_BAD_REQUEST)

        response = success_response(
            {"user": UserSerializer(result.user).data, "token": result.token},
            message=result.message,
        )
        return set_auth_cookie(response, result.token)


class LogoutAPIView(APIView):
    permission_classes = [permissions.AllowAny]

    @extend_schema(operation_id="auth_logout", summary="Clear the session cookie", tags=["Authentication"])
    def post(self, request):
        return clear_auth_cookie(success_response(message="Logged out"))


class MeAPIView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(operation_id="auth_me", summary="Current user", tags=["Authentication"])
    def get(self, request):
        return success_response({"user": UserSerializer(request.user).data})


class ProfileUpdateAPIView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        operation_id="auth_update_profile",
        summary="Update name, phone, college, address",
        request=ProfileUpdateSerializer,
        tags=["Authentication"],
    )
    def put(self, request):
        serializer = ProfileUpdateSerializer(data=request.data, partial=True)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        result = get_auth_service().update_profile(request.user, serializer.validated_data)
        if not result.success:
            return error_response("Something went wrong.", status=result.status_code)

        return success_response({"user": UserSerializer(result.data["user"]).data}, message=result.message)


class ChangePasswordAPIView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        operation_id="auth_change_password",
        summary="Change password (re-issues the session cookie)",
        request=ChangePasswordSerializer,
        tags=["Authentication"],
    )
    def put(self, request):
        serializer = ChangePasswordSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        result = get_auth_service().change_password(
            request.user,
            serializer.validated_data["current_password"],
            serializer.validated_data["new_password"],
        )
        if not result.success:
            return error_response(result.message, status=result.status_code)

        token = result.data["token"]
        response = success_response(
            {"user": UserSerializer(result.data["user"]).data, "token": token},
            message=result.message,
        )
        return set_auth_cookie(response, token)
