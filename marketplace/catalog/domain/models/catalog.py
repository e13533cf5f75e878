import time
import uuid

from django.conf import settings
from django.core.validators import MaxValueValidator, MinLengthValidator, MinValueValidator
from django.db import models
from django.utils import timezone
from django.utils.text import slugify


def base36(number: int) -> str:
    digits = "0123456789abcdefghijklmnopqrstuvwxyz"
    if number == 0:
        return "0"
    encoded = ""
    while number:
        number, remainder = divmod(number, 36)
        encoded = digits[remainder] + encoded
    return encoded


def build_slug(title: str) -> str:
    """slugify(title) + "-" + base36(now in ms)."""
    return f"{slugify(title)}-{base36(int(time.time() * 1000))}"


def build_short_description(description: str) -> str:
    if len(description) > 200:
        return description[:197] + "..."
    return description


class Product(models.Model):
    CATEGORY_CHOICES = [
        ("electronics", "Electronics"),
        ("study-materials", "Study Materials"),
        ("event-passes", "Event Passes"),
        ("subscriptions", "Subscriptions"),
    ]

    TYPE_PHYSICAL = "physical"
    TYPE_DIGITAL = "digital"
    PRODUCT_TYPE_CHOICES = [
        (TYPE_PHYSICAL, "Physical"),
        (TYPE_DIGITAL, "Digital"),
    ]

    CONDITION_CHOICES = [
        ("new", "New"),
        ("like-new", "Like New"),
        ("good", "Good"),
        ("fair", "Fair"),
        ("poor", "Poor"),
    ]

    STATUS_DRAFT = "draft"
    STATUS_PENDING = "pending"
    STATUS_ACTIVE = "active"
    STATUS_INACTIVE = "inactive"
    STATUS_SOLD = "sold"
    STATUS_FLAGGED = "flagged"
    STATUS_REMOVED = "removed"
    STATUS_CHOICES = [
        (STATUS_DRAFT, "Draft"),
        (STATUS_PENDING, "Pending"),
        (STATUS_ACTIVE, "Active"),
        (STATUS_INACTIVE, "Inactive"),
        (STATUS_SOLD, "Sold"),
        (STATUS_FLAGGED, "Flagged"),
        (STATUS_REMOVED, "Removed"),
    ]

    # Basic Information
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=100, validators=[MinLengthValidator(3)])
    slug = models.SlugField(max_length=130, unique=True, blank=True)
    description = models.TextField(validators=[MinLengthValidator(10)])
    short_description = models.CharField(max_length=200, blank=True)

    # Seller
    seller = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="products")

    # Pricing and Inventory
    price = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    stock = models.PositiveIntegerField(default=1)

    # Classification
    category = models.CharField(max_length=30, choices=CATEGORY_CHOICES)
    product_type = models.CharField(max_length=10, choices=PRODUCT_TYPE_CHOICES, default=TYPE_PHYSICAL)
    condition = models.CharField(max_length=20, choices=CONDITION_CHOICES, default="new")
    tags = models.JSONField(default=list, blank=True)

    # Media and type-specific details
    images = models.JSONField(default=list, blank=True, help_text="[{url, alt, is_primary}]")
    digital_details = models.JSONField(null=True, blank=True)
    physical_details = models.JSONField(null=True, blank=True)

    # Status and Visibility
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)
    status_history = models.JSONField(default=list, blank=True)
    is_published = models.BooleanField(default=True)
    is_featured = models.BooleanField(default=False)

    # Ratings (recomputed from reviews)
    rating_average = models.DecimalField(
        max_digits=2, decimal_places=1, default=0, validators=[MinValueValidator(0), MaxValueValidator(5)]
    )
    rating_count = models.PositiveIntegerField(default=0)
    rating_distribution = models.JSONField(default=dict, blank=True)

    # Trust analysis
    is_flagged = models.BooleanField(default=False)
    flag_reason = models.TextField(blank=True)
    suspicion_score = models.PositiveSmallIntegerField(default=0, validators=[MaxValueValidator(100)])
    ai_analysis = models.JSONField(default=dict, blank=True)
    last_analyzed_at = models.DateTimeField(null=True, blank=True)

    # Metrics
    view_count = models.PositiveIntegerField(default=0)
    sales_count = models.PositiveIntegerField(default=0)
    wishlist_count = models.PositiveIntegerField(default=0)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        app_label = "marketplace"
        indexes = [
            models.Index(fields=["status", "is_published", "-created_at"]),  # Most common query pattern
            models.Index(fields=["category", "status"]),
            models.Index(fields=["seller", "-created_at"]),
            models.Index(fields=["price"]),
            models.Index(fields=["-rating_average"]),
            models.Index(fields=["is_flagged"]),
        ]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._loaded_title = self.title

    def save(self, *args, **kwargs):
        if not self.slug or self.title != self._loaded_title:
            self.slug = build_slug(self.title)
            update_fields = kwargs.get("update_fields")
            if update_fields is not None and "slug" not in update_fields:
                kwargs["update_fields"] = list(update_fields) + ["slug"]

        if not self.short_description and self.description:
            self.short_description = build_short_description(self.description)

        # Only the detail block matching the product type is kept
        if self.product_type == self.TYPE_DIGITAL:
            self.physical_details = None
        else:
            self.digital_details = None

        if not self.rating_distribution:
            self.rating_distribution = {str(star): 0 for star in range(1, 6)}

        super().save(*args, **kwargs)
        self._loaded_title = self.title

    @property
    def is_digital(self) -> bool:
        return self.product_type == self.TYPE_DIGITAL

    @property
    def primary_image(self):
        for image in self.images or []:
            if image.get("is_primary"):
                return image.get("url")
        return self.images[0].get("url") if self.images else None

    @property
    def download_limit(self) -> int:
        return (self.digital_details or {}).get("download_limit", -1)

    def has_stock_for(self, quantity: int) -> bool:
        """Digital products have unlimited stock."""
        return self.is_digital or self.stock >= quantity

    def record_status(self, status: str, changed_by=None, reason: str = ""):
        """Set the status and append it to status_history."""
        self.status = status
        self.status_history = list(self.status_history or []) + [
            {
                "status": status,
                "changed_at": timezone.now().isoformat(),
                "changed_by": str(changed_by.pk) if changed_by is not None else None,
                "reason": reason,
            }
        ]

    def __str__(self):
        return self.title
