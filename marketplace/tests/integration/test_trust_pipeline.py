from decimal import Decimal

from django.test import TestCase

from infrastructure.ai import AIFactory
from marketplace.catalog.domain.models import Product
from marketplace.catalog.domain.services.trust_service import ScoringUnavailable, TrustService
from marketplace.tests.factories import ProductFactory, SellerFactory

LISTING_TEXT = "Apple MacBook Air 2020 M1 chip 8GB RAM 256GB SSD with original charger and box"


class TrustPipelineWithoutAITest(TestCase):
    """Duplicate and price signals keep working when no AI provider answers"""

    def setUp(self):
        self.service = TrustService(ai_client=AIFactory.create_unavailable())
        self.seller = SellerFactory()
        for _ in range(3):
            ProductFactory(
                seller=self.seller, category="electronics", price=Decimal("100.00"), description=LISTING_TEXT
            )

    def test_copied_underpriced_listing_is_flagged(self):
        listing = ProductFactory(
            category="electronics",
            price=Decimal("5.00"),
            description=LISTING_TEXT,
            status=Product.STATUS_PENDING,
        )

        result = self.service.verify_product(listing)

        self.assertIsInstance(result, ScoringUnavailable)
        self.assertEqual(result.reason, "ai_unavailable")
        self.assertEqual(result.analysis["suspicion_score"], 70)
        self.assertTrue(result.analysis["is_flagged"])
        self.assertTrue(result.analysis["description_analysis"]["is_duplicate"])
        self.assertTrue(result.analysis["price_analysis"]["is_abnormal"])

        self.service.apply_result(listing, result)
        listing.refresh_from_db()
        self.assertEqual(listing.status, Product.STATUS_FLAGGED)
        self.assertTrue(listing.is_flagged)
        self.assertEqual(listing.suspicion_score, 70)
        self.assertTrue(listing.ai_analysis["degraded"])

    def test_price_signal_alone_flags(self):
        listing = ProductFactory(
            category="electronics",
            price=Decimal("5.00"),
            description="Wireless mouse, barely used",
            status=Product.STATUS_PENDING,
        )

        result = self.service.verify_product(listing)

        self.assertEqual(result.analysis["suspicion_score"], 60)
        self.assertTrue(result.analysis["is_flagged"])
        self.assertFalse(result.analysis["description_analysis"]["is_duplicate"])

    def test_ordinary_listing_goes_active(self):
        listing = ProductFactory(
            category="electronics",
            price=Decimal("95.00"),
            description="Wireless mouse, barely used",
            status=Product.STATUS_PENDING,
        )

        result = self.service.verify_product(listing)
        self.service.apply_result(listing, result)

        listing.refresh_from_db()
        self.assertEqual(listing.status, Product.STATUS_ACTIVE)
        self.assertFalse(listing.is_flagged)
        self.assertEqual(listing.ai_analysis["unavailable_reason"], "ai_unavailable")
