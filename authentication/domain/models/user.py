import uuid

from django.contrib.auth.models import AbstractUser, UserManager
from django.db import models


class CustomUserManager(UserManager):
    """Email-first manager; the username is derived from the email when omitted."""

    def _create_user(self, username, email, password, **extra_fields):
        if not email:
            raise ValueError("The email must be set")
        email = self.normalize_email(email).lower()
        username = username or email
        return super()._create_user(username, email, password, **extra_fields)

    def create_user(self, email=None, password=None, username=None, **extra_fields):
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        return self._create_user(username, email, password, **extra_fields)

    def create_superuser(self, email=None, password=None, username=None, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("role", "admin")
        return self._create_user(username, email, password, **extra_fields)


class CustomUser(AbstractUser):
    ROLE_STUDENT = "student"
    ROLE_SELLER = "seller"
    ROLE_ADMIN = "admin"

    ROLE_CHOICES = [
        (ROLE_STUDENT, "Student"),
        (ROLE_SELLER, "Seller"),
        (ROLE_ADMIN, "Admin"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True)
    name = models.CharField(max_length=50)
    first_name = models.CharField(max_length=30, blank=True)
    last_name = models.CharField(max_length=30, blank=True)
    date_joined = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    avatar = models.URLField(max_length=500, blank=True)
    phone = models.CharField(max_length=30, blank=True)
    address = models.JSONField(default=dict, blank=True)

    # Role system - simple field
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_STUDENT)

    # Campus verification
    student_id = models.CharField(max_length=50, blank=True)
    college = models.CharField(max_length=150, blank=True)
    is_verified_student = models.BooleanField(default=False)

    # Moderation
    is_banned = models.BooleanField(default=False)
    ban_reason = models.CharField(max_length=255, blank=True)

    seller_rating = models.DecimalField(max_digits=2, decimal_places=1, default=0)

    objects = CustomUserManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["username"]

    class Meta:
        app_label = "authentication"
        ordering = ["-date_joined"]

    @property
    def seller_status(self) -> str:
        """Status of the seller application ("none" when the user never applied)."""
        application = getattr(self, "seller_application", None)
        return application.status if application else "none"

    def is_seller(self):
        """Check if user is an approved seller"""
        return (self.role == self.ROLE_SELLER and self.seller_status == "approved") or self.is_admin()

    def is_admin(self):
        """Check if user is an admin"""
        return self.role == self.ROLE_ADMIN or self.is_superuser

    def can_sell_products(self):
        """Check if user can create and sell products"""
        return self.is_seller()

    def __str__(self):
        return self.email
