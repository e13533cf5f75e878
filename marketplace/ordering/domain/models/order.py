import secrets
import string
import uuid

from django.conf import settings
from django.db import models
from django.utils import timezone

from marketplace.catalog.domain.models.catalog import Product


ORDER_NUMBER_ALPHABET = string.ascii_uppercase + string.digits


def generate_order_number(now=None) -> str:
    """ORD-YYMM-XXXXXX with six random uppercase alphanumerics."""
    now = now or timezone.now()
    suffix = "".join(secrets.choice(ORDER_NUMBER_ALPHABET) for _ in range(6))
    return f"ORD-{now:%y%m}-{suffix}"


class Order(models.Model):
    STATUS_PENDING = "pending"
    STATUS_CONFIRMED = "confirmed"
    STATUS_PROCESSING = "processing"
    STATUS_SHIPPED = "shipped"
    STATUS_OUT_FOR_DELIVERY = "out-for-delivery"
    STATUS_DELIVERED = "delivered"
    STATUS_COMPLETED = "completed"
    STATUS_CANCELLED = "cancelled"
    STATUS_REFUNDED = "refunded"
    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_CONFIRMED, "Confirmed"),
        (STATUS_PROCESSING, "Processing"),
        (STATUS_SHIPPED, "Shipped"),
        (STATUS_OUT_FOR_DELIVERY, "Out for Delivery"),
        (STATUS_DELIVERED, "Delivered"),
        (STATUS_COMPLETED, "Completed"),
        (STATUS_CANCELLED, "Cancelled"),
        (STATUS_REFUNDED, "Refunded"),
    ]
    STATUSES = [value for value, _ in STATUS_CHOICES]

    PAYMENT_METHOD_CHOICES = [
        ("card", "Card"),
        ("paypal", "PayPal"),
        ("campus-credits", "Campus Credits"),
        ("cash-on-delivery", "Cash on Delivery"),
    ]

    PAYMENT_STATUS_CHOICES = [
        ("pending", "Pending"),
        ("completed", "Completed"),
        ("failed", "Failed"),
        ("refunded", "Refunded"),
    ]

    TYPE_CHOICES = [
        ("physical", "Physical"),
        ("digital", "Digital"),
        ("mixed", "Mixed"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order_number = models.CharField(max_length=20, unique=True, editable=False)
    customer = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="orders")

    # Order Details
    order_type = models.CharField(max_length=10, choices=TYPE_CHOICES)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)

    # Pricing
    subtotal = models.DecimalField(max_digits=10, decimal_places=2)
    shipping = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    tax = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    discount = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    total = models.DecimalField(max_digits=10, decimal_places=2)

    # Payment
    payment_method = models.CharField(max_length=20, choices=PAYMENT_METHOD_CHOICES)
    payment_status = models.CharField(max_length=10, choices=PAYMENT_STATUS_CHOICES, default="pending")
    paid_at = models.DateTimeField(null=True, blank=True)

    # Shipping Information
    shipping_address = models.JSONField(null=True, blank=True)
    tracking_number = models.CharField(max_length=100, blank=True)

    customer_notes = models.TextField(blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        app_label = "marketplace"
        indexes = [
            models.Index(fields=["customer", "-created_at"]),
            models.Index(fields=["status"]),
        ]

    def save(self, *args, **kwargs):
        if not self.order_number:
            self.order_number = generate_order_number()
        super().save(*args, **kwargs)

    @property
    def has_physical_items(self) -> bool:
        return any(item.product_type == Product.TYPE_PHYSICAL for item in self.items.all())

    def add_timeline_event(self, status, title, description="", updated_by=None):
        return OrderTimelineEvent.objects.create(
            order=self, status=status, title=title, description=description or "", updated_by=updated_by
        )

    def __str__(self):
        return f"Order {self.order_number}"


class OrderItem(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="items")
    product = models.ForeignKey(Product, on_delete=models.SET_NULL, null=True, blank=True, related_name="order_items")

    # Product snapshot at time of purchase
    title = models.CharField(max_length=100)
    image = models.URLField(max_length=2000, blank=True)
    product_type = models.CharField(max_length=10, choices=Product.PRODUCT_TYPE_CHOICES)
    seller = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name="sold_items"
    )

    quantity = models.PositiveIntegerField(default=1)
    price = models.DecimalField(max_digits=10, decimal_places=2)

    # Digital access
    is_unlocked = models.BooleanField(default=False)
    unlocked_at = models.DateTimeField(null=True, blank=True)
    download_count = models.PositiveIntegerField(default=0)
    download_limit = models.IntegerField(default=-1, help_text="-1 means unlimited")

    class Meta:
        app_label = "marketplace"

    @property
    def line_total(self):
        return self.price * self.quantity

    @property
    def is_digital(self) -> bool:
        return self.product_type == Product.TYPE_DIGITAL

    def __str__(self):
        return f"{self.quantity}x {self.title} in order {self.order_id}"


class OrderTimelineEvent(models.Model):
    """Append-only delivery timeline entry."""

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="timeline")
    status = models.CharField(max_length=20)
    title = models.CharField(max_length=100)
    description = models.TextField(blank=True)
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name="+"
    )
    timestamp = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["timestamp", "id"]
        app_label = "marketplace"

    def __str__(self):
        return f"{self.order_id}: {self.status}"
