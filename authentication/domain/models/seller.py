from django.conf import settings
from django.db import models
from django.utils import timezone


class SellerApplication(models.Model):
    """Seller application sub-record for the approval workflow"""

    STATUS_NONE = "none"
    STATUS_PENDING = "pending"
    STATUS_APPROVED = "approved"
    STATUS_REJECTED = "rejected"

    STATUS_CHOICES = [
        (STATUS_NONE, "None"),
        (STATUS_PENDING, "Pending Review"),
        (STATUS_APPROVED, "Approved"),
        (STATUS_REJECTED, "Rejected"),
    ]

    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="seller_application")

    business_name = models.CharField(max_length=100)
    description = models.TextField(max_length=500, help_text="What the applicant plans to sell")

    # Application status
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)
    rejection_reason = models.TextField(blank=True, help_text="Reason for rejection")

    # Timestamps and review tracking
    applied_at = models.DateTimeField(default=timezone.now)
    reviewed_at = models.DateTimeField(null=True, blank=True)
    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="reviewed_seller_applications",
        help_text="Admin who reviewed this application",
    )

    class Meta:
        app_label = "authentication"
        verbose_name = "Seller Application"
        verbose_name_plural = "Seller Applications"
        ordering = ["-applied_at"]

    def __str__(self):
        return f"Seller Application by {self.user.email}"
