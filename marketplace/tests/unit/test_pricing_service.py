from decimal import Decimal

import pytest

from marketplace.cart.domain.services.pricing_service import PricingService, round2
from marketplace.services.base import ErrorCodes


@pytest.mark.unit
class TestPricingServiceUnit:
    def setup_method(self):
        self.service = PricingService(tax_rate=Decimal("0.07"), shipping_flat_rate=Decimal("5.00"))

        self.physical = {"price": Decimal("20.00"), "quantity": 1, "product_type": "physical"}
        self.digital = {"price": Decimal("10.00"), "quantity": 1, "product_type": "digital"}

    def test_round2_half_up(self):
        assert round2(Decimal("2.105")) == Decimal("2.11")
        assert round2(Decimal("2.104")) == Decimal("2.10")

    def test_cart_totals_empty(self):
        totals = self.service.calculate_cart_totals([])
        assert totals["subtotal"] == Decimal("0.00")
        assert totals["item_count"] == 0

    def test_cart_totals_sums_quantities(self):
        lines = [{"price": Decimal("10.00"), "quantity": 3}, {"price": Decimal("2.50"), "quantity": 2}]
        totals = self.service.calculate_cart_totals(lines)
        assert totals["subtotal"] == Decimal("35.00")
        assert totals["item_count"] == 5

    def test_mixed_order_total(self):
        # 30 subtotal, 5 shipping, 2.10 tax
        result = self.service.calculate_order_total([self.physical, self.digital])

        assert result.ok
        assert result.value["subtotal"] == Decimal("30.00")
        assert result.value["shipping"] == Decimal("5.00")
        assert result.value["tax"] == Decimal("2.10")
        assert result.value["total"] == Decimal("37.10")
        assert result.value["order_type"] == "mixed"

    def test_digital_only_order_has_no_shipping(self):
        result = self.service.calculate_order_total([self.digital])

        assert result.ok
        assert result.value["shipping"] == Decimal("0.00")
        assert result.value["tax"] == Decimal("0.70")
        assert result.value["total"] == Decimal("10.70")
        assert result.value["order_type"] == "digital"

    def test_physical_only_order_type(self):
        assert self.service.determine_order_type([self.physical]) == "physical"

    def test_empty_order_is_rejected(self):
        result = self.service.calculate_order_total([])
        assert not result.ok
        assert result.error == ErrorCodes.CART_EMPTY

    def test_non_positive_quantity_is_rejected(self):
        result = self.service.calculate_order_total([{**self.physical, "quantity": 0}])
        assert not result.ok
        assert result.error == ErrorCodes.INVALID_QUANTITY
