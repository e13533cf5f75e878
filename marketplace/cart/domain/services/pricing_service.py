"""
PricingService - Price Calculations

Cart and checkout arithmetic. All calculations use Decimal and round half up
to cents, so totals never drift by a floating point cent.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, Optional

from django.conf import settings

from marketplace.catalog.domain.models.catalog import Product
from marketplace.services.base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok


logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


def round2(amount: Decimal) -> Decimal:
    return Decimal(amount).quantize(CENTS, rounding=ROUND_HALF_UP)


class PricingService(BaseService):
    """
    Service for cart and order totals.

    Responsibilities:
    - Cart totals (subtotal, item count)
    - Order totals (flat shipping when any line is physical, tax on subtotal)
    - Order type (physical, digital or mixed)

    A line is any mapping with `price`, `quantity` and `product_type`.
    All methods are stateless for easy testing.
    """

    def __init__(self, tax_rate: Optional[Decimal] = None, shipping_flat_rate: Optional[Decimal] = None):
        super().__init__()
        self.tax_rate = Decimal(str(tax_rate if tax_rate is not None else getattr(settings, "TAX_RATE", "0.07")))
        self.shipping_flat_rate = Decimal(
            str(shipping_flat_rate if shipping_flat_rate is not None else getattr(settings, "SHIPPING_FLAT_RATE", "5.00"))
        )

    def calculate_cart_totals(self, lines: Iterable[Dict]) -> Dict:
        """
        Derived cart totals.

        Returns:
            {"subtotal": Σ price×qty, "item_count": Σ qty}
        """
        subtotal = Decimal("0")
        item_count = 0
        for line in lines:
            subtotal += Decimal(str(line["price"])) * line["quantity"]
            item_count += line["quantity"]
        return {"subtotal": round2(subtotal), "item_count": item_count}

    def calculate_shipping(self, lines: Iterable[Dict]) -> Decimal:
        if any(line["product_type"] == Product.TYPE_PHYSICAL for line in lines):
            return round2(self.shipping_flat_rate)
        return Decimal("0.00")

    def calculate_tax(self, subtotal: Decimal) -> Decimal:
        return round2(Decimal(subtotal) * self.tax_rate)

    def determine_order_type(self, lines: Iterable[Dict]) -> str:
        types = {line["product_type"] for line in lines}
        if types == {Product.TYPE_DIGITAL}:
            return "digital"
        if types == {Product.TYPE_PHYSICAL}:
            return "physical"
        return "mixed"

    @BaseService.log_performance
    def calculate_order_total(self, lines) -> ServiceResult[Dict[str, Decimal]]:
        """
        Calculate totals for a checkout.

        Args:
            lines: List of dicts with 'price', 'quantity' and 'product_type'

        Returns:
            ServiceResult with subtotal, shipping, tax, discount, total, order_type

        Example:
            >>> result = pricing_service.calculate_order_total([
            ...     {"price": Decimal("20.00"), "quantity": 1, "product_type": "physical"},
            ...     {"price": Decimal("10.00"), "quantity": 1, "product_type": "digital"},
            ... ])
            >>> result.value["total"]
            Decimal('37.10')
        """
        lines = list(lines)
        if not lines:
            return service_err(ErrorCodes.CART_EMPTY, "Cart is empty")

        for line in lines:
            if line["quantity"] <= 0:
                return service_err(ErrorCodes.INVALID_QUANTITY, f"Invalid quantity: {line['quantity']}")

        subtotal = self.calculate_cart_totals(lines)["subtotal"]
        shipping = self.calculate_shipping(lines)
        tax = self.calculate_tax(subtotal)
        discount = Decimal("0.00")
        total = round2(subtotal + shipping + tax - discount)

        self.logger.info(f"Order total calculated: lines={len(lines)}, shipping=${shipping}, total=${total}")

        return service_ok(
            {
                "subtotal": subtotal,
                "shipping": shipping,
                "tax": tax,
                "discount": discount,
                "total": total,
                "order_type": self.determine_order_type(lines),
            }
        )
