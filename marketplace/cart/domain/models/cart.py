from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import DecimalField, ExpressionWrapper, F, Sum

from marketplace.catalog.domain.models.catalog import Product


class CartManager(models.Manager):
    def for_user(self, user) -> "Cart":
        """Each user owns exactly one cart, created on first touch."""
        cart, _ = self.get_or_create(user=user)
        return cart


class Cart(models.Model):
    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="cart")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = CartManager()

    class Meta:
        app_label = "marketplace"
        verbose_name = "cart"

    def _totals(self):
        line = ExpressionWrapper(F("price") * F("quantity"), output_field=DecimalField(max_digits=12, decimal_places=2))
        return self.items.aggregate(amount=Sum(line), units=Sum("quantity"))

    @property
    def subtotal(self) -> Decimal:
        return self._totals()["amount"] or Decimal("0.00")

    @property
    def item_count(self) -> int:
        return self._totals()["units"] or 0

    def __str__(self):
        return f"cart:{self.user_id}"


class CartItem(models.Model):
    """A product line in a cart. `price` is the unit price when the line was last written."""

    cart = models.ForeignKey(Cart, on_delete=models.CASCADE, related_name="items")
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name="cart_items")
    quantity = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    price = models.DecimalField(max_digits=10, decimal_places=2)
    added_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        app_label = "marketplace"
        ordering = ["added_at"]
        constraints = [models.UniqueConstraint(fields=["cart", "product"], name="unique_cart_line")]

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity

    def __str__(self):
        return f"{self.product_id} x{self.quantity}"


class SavedItem(models.Model):
    """Saved-for-later entry; carries no quantity or price."""

    cart = models.ForeignKey(Cart, on_delete=models.CASCADE, related_name="saved_items")
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name="saved_by")
    saved_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        app_label = "marketplace"
        ordering = ["-saved_at"]
        constraints = [models.UniqueConstraint(fields=["cart", "product"], name="unique_saved_product")]

    def __str__(self):
        return f"saved:{self.product_id}"
