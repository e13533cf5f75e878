"""
AuthService - Core Authentication Business Logic.

Keeps registration, login, profile and password logic out of the views so the
rules (duplicate email, banned accounts, session token issuance) are testable
on their own.
"""

import logging
from typing import Any, Dict, Optional

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction

from authentication.api.serializers.jwt_serializers import SessionToken
from authentication.infra.observability.metrics import (
    jwt_generation_total,
    login_duration,
    login_failed,
    login_total,
    password_changes_total,
    registration_failed,
    registration_total,
)
from utils.logging_utils import mask_value

from .results import LoginResult, RegisterResult, Result


User = get_user_model()
logger = logging.getLogger(__name__)


class AuthService:
    """
    Authentication service encapsulating all auth business logic.

    Handles registration, email/password login, profile updates and
    password changes. Every successful credential event issues a fresh
    session token.
    """

    PROFILE_FIELDS = ("name", "phone", "college", "address", "avatar")

    def issue_token(self, user, reason: str = "login") -> str:
        """Create a signed session token for the user."""
        jwt_generation_total.labels(reason=reason).inc()
        return str(SessionToken.for_user(user))

    def register(
        self,
        name: str,
        email: str,
        password: str,
        student_id: Optional[str] = None,
        college: Optional[str] = None,
    ) -> RegisterResult:
        """
        Register a new campus user.

        Business Logic:
        1. Reject duplicate email addresses (first account is left untouched)
        2. Create the user with a hashed password
        3. Mark the user as a verified student when a student id is given
        4. Issue a session token

        Args:
            name: Display name
            email: Email address (login identifier)
            password: Raw password
            student_id: Optional student id
            college: Optional college name

        Returns:
            RegisterResult with the created user and token
        """
        email = (email or "").strip().lower()

        if User.objects.filter(email__iexact=email).exists():
            registration_total.labels(status="failed").inc()
            registration_failed.labels(reason="email_exists").inc()
            logger.info(f"Registration rejected, email already registered: {mask_value(email)}")
            return RegisterResult(success=False, error="Email already registered")

        try:
            with transaction.atomic():
                user = User.objects.create_user(
                    email=email,
                    password=password,
                    name=name,
                    student_id=student_id or "",
                    college=college or "",
                    is_verified_student=bool(student_id),
                )
        except IntegrityError:
            # Lost a race with a concurrent registration for the same email
            registration_total.labels(status="failed").inc()
            registration_failed.labels(reason="email_exists").inc()
            return RegisterResult(success=False, error="Email already registered")

        registration_total.labels(status="success").inc()
        logger.info(f"User registered: {user.id} ({mask_value(email)})")

        return RegisterResult(
            success=True,
            user=user,
            token=self.issue_token(user, reason="register"),
            message="Registration successful",
        )

    def login(self, email: str, password: str) -> LoginResult:
        """
        Authenticate user with email/password.

        Banned and deactivated accounts are refused even with a correct
        password.

        Args:
            email: User email address
            password: User password

        Returns:
            LoginResult with authentication status and token
        """
        with login_duration.time():
            if not email or not password:
                return LoginResult(success=False, error="Email and password are required.")

            user = User.objects.filter(email__iexact=email.strip()).first()

            if user is None or not user.check_password(password):
                login_total.labels(status="failed").inc()
                login_failed.labels(reason="invalid_credentials").inc()
                return LoginResult(success=False, error="Invalid email or password")

            if user.is_banned:
                login_total.labels(status="failed").inc()
                login_failed.labels(reason="banned").inc()
                logger.warning(f"Login refused for banned user {user.id}")
                reason = f": {user.ban_reason}" if user.ban_reason else ""
                return LoginResult(success=False, error=f"Your account has been banned{reason}")

            if not user.is_active:
                login_total.labels(status="failed").inc()
                login_failed.labels(reason="inactive").inc()
                return LoginResult(success=False, error="Your account has been deactivated")

            login_total.labels(status="success").inc()
            logger.info(f"User logged in: {user.id}")

            return LoginResult(
                success=True,
                user=user,
                token=self.issue_token(user, reason="login"),
                message="Login successful",
            )

    def update_profile(self, user, changes: Dict[str, Any]) -> Result:
        """
        Apply a partial profile update.

        Only name, phone, college, address and avatar are writable.
        """
        try:
            updated = []
            for field in self.PROFILE_FIELDS:
                if field in changes and changes[field] is not None:
                    setattr(user, field, changes[field])
                    updated.append(field)

            if updated:
                user.save(update_fields=updated + ["updated_at"])

            logger.info(f"Profile updated for user {user.id}: {updated}")
            return Result(success=True, message="Profile updated", data={"user": user})

        except Exception as e:
            logger.exception(f"Profile update failed for user {user.id}: {e}")
            return Result(success=False, message="Failed to update profile", error=str(e), status_code=500)

    def change_password(self, user, current_password: str, new_password: str) -> Result:
        """
        Change the password after verifying the current one.

        A new session token is issued on success.
        """
        if not user.check_password(current_password):
            password_changes_total.labels(status="failed").inc()
            return Result(success=False, message="Current password is incorrect", error="wrong_password")

        user.set_password(new_password)
        user.save(update_fields=["password", "updated_at"])
        password_changes_total.labels(status="success").inc()
        logger.info(f"Password changed for user {user.id}")

        return Result(
            success=True,
            message="Password updated",
            data={"user": user, "token": self.issue_token(user, reason="password_change")},
        )
