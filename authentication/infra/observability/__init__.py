from .metrics import (
    jwt_generation_total,
    login_duration,
    login_failed,
    login_total,
    password_changes_total,
    registration_failed,
    registration_total,
    seller_applications_pending,
    seller_applications_total,
)

__all__ = [
    "login_total",
    "login_failed",
    "login_duration",
    "jwt_generation_total",
    "registration_total",
    "registration_failed",
    "password_changes_total",
    "seller_applications_total",
    "seller_applications_pending",
]
