import uuid

from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from authentication.domain.models import SellerApplication
from infrastructure.ai import AIFactory
from infrastructure.container import container
from marketplace.catalog.domain.models import Product
from marketplace.tests.factories import AdminFactory, ProductFactory, SellerFactory, UserFactory


class AdminViewIntegrationTest(TestCase):
    """Moderation endpoints: analytics, seller review, flags and re-verification"""

    def setUp(self):
        container.configure_for_testing()
        self.client = APIClient()
        self.admin = AdminFactory()
        self.seller = SellerFactory()
        self.applicant = UserFactory(name="Priya Shah", college="North Campus")
        self.application = SellerApplication.objects.create(
            user=self.applicant, business_name="Priya's Notes", description="Lecture notes for first years"
        )
        self.product = ProductFactory(seller=self.seller)
        self.client.force_authenticate(user=self.admin)

    def test_non_admin_is_forbidden(self):
        self.client.force_authenticate(user=self.seller)

        response = self.client.get("/api/admin/analytics")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["message"], "Admin access required")

    def test_anonymous_is_unauthorized(self):
        self.client.force_authenticate(user=None)

        response = self.client.get("/api/admin/sellers/pending")

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_analytics_counts(self):
        ProductFactory(seller=self.seller, status=Product.STATUS_FLAGGED, is_flagged=True)

        response = self.client.get("/api/admin/analytics")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        analytics = response.data["data"]["analytics"]
        self.assertEqual(analytics["total_users"], 3)
        self.assertEqual(analytics["total_sellers"], 1)
        self.assertEqual(analytics["active_products"], 1)
        self.assertEqual(analytics["flagged_products"], 1)

    def test_pending_sellers(self):
        response = self.client.get("/api/admin/sellers/pending")

        sellers = response.data["data"]["sellers"]
        self.assertEqual(len(sellers), 1)
        self.assertEqual(sellers[0]["user_id"], str(self.applicant.id))
        self.assertEqual(sellers[0]["college"], "North Campus")
        self.assertEqual(sellers[0]["business_name"], "Priya's Notes")

    def test_approve_seller_grants_role(self):
        response = self.client.post(
            "/api/admin/sellers/review", {"seller_id": str(self.applicant.id), "action": "approve"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["message"], "Seller approved")
        self.assertEqual(response.data["data"]["user"]["role"], "seller")
        self.assertEqual(response.data["data"]["user"]["seller_status"], "approved")

        self.application.refresh_from_db()
        self.assertEqual(self.application.reviewed_by, self.admin)

        pending = self.client.get("/api/admin/sellers/pending")
        self.assertEqual(pending.data["data"]["sellers"], [])

    def test_reject_seller_keeps_role_and_records_reason(self):
        response = self.client.post(
            "/api/admin/sellers/review",
            {"seller_id": str(self.applicant.id), "action": "reject", "reason": "Incomplete description"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["message"], "Seller application rejected")
        self.applicant.refresh_from_db()
        self.assertEqual(self.applicant.role, "student")
        self.application.refresh_from_db()
        self.assertEqual(self.application.status, SellerApplication.STATUS_REJECTED)
        self.assertEqual(self.application.rejection_reason, "Incomplete description")

    def test_review_unknown_seller_returns_404(self):
        response = self.client.post(
            "/api/admin/sellers/review", {"seller_id": str(uuid.uuid4()), "action": "approve"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["message"], "Seller not found")

    def test_review_with_unknown_action_is_validation_error(self):
        response = self.client.post(
            "/api/admin/sellers/review", {"seller_id": str(self.applicant.id), "action": "ban"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["errors"][0]["field"], "action")

    def test_flag_product(self):
        response = self.client.post(
            "/api/admin/products/flag",
            {"product_id": str(self.product.id), "reason": "Counterfeit item"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.product.refresh_from_db()
        self.assertTrue(self.product.is_flagged)
        self.assertEqual(self.product.status, Product.STATUS_FLAGGED)
        self.assertEqual(self.product.flag_reason, "Counterfeit item")
        self.assertEqual(self.product.status_history[-1]["changed_by"], str(self.admin.id))

        flagged = self.client.get("/api/admin/products/flagged")
        self.assertEqual([p["id"] for p in flagged.data["data"]["products"]], [str(self.product.id)])

    def test_flag_unknown_product_returns_404(self):
        response = self.client.post(
            "/api/admin/products/flag", {"product_id": str(uuid.uuid4()), "reason": "Spam"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["message"], "Product not found")

    def test_reverify_is_degraded_without_ai(self):
        response = self.client.post(f"/api/admin/products/{self.product.id}/reverify")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data["data"]["degraded"])
        self.assertEqual(response.data["data"]["product"]["status"], Product.STATUS_ACTIVE)
        self.assertEqual(response.data["data"]["product"]["ai_analysis"]["unavailable_reason"], "ai_unavailable")

    def test_reverify_with_ai_stores_score(self):
        container.configure_for_testing(ai=AIFactory.create_mock())

        response = self.client.post(f"/api/admin/products/{self.product.id}/reverify")

        self.assertFalse(response.data["data"]["degraded"])
        self.product.refresh_from_db()
        self.assertEqual(self.product.suspicion_score, 15)
        self.assertEqual(self.product.status, Product.STATUS_ACTIVE)
        self.assertIsNotNone(self.product.last_analyzed_at)

    def test_flag_product_updates_stored_analysis(self):
        self.product.ai_analysis = {"suspicion_score": 10, "is_flagged": False, "flag_reason": None}
        self.product.save(update_fields=["ai_analysis"])

        self.client.post(
            "/api/admin/products/flag",
            {"product_id": str(self.product.id), "reason": "Counterfeit item"},
            format="json",
        )

        self.product.refresh_from_db()
        self.assertTrue(self.product.ai_analysis["is_flagged"])
        self.assertEqual(self.product.ai_analysis["flag_reason"], "Counterfeit item")
        self.assertEqual(self.product.ai_analysis["suspicion_score"], 10)

    def test_reverify_without_ai_keeps_manual_flag(self):
        self.client.post(
            "/api/admin/products/flag",
            {"product_id": str(self.product.id), "reason": "Counterfeit item"},
            format="json",
        )

        response = self.client.post(f"/api/admin/products/{self.product.id}/reverify")

        self.assertTrue(response.data["data"]["degraded"])
        self.product.refresh_from_db()
        self.assertEqual(self.product.status, Product.STATUS_FLAGGED)
        self.assertTrue(self.product.is_flagged)
        self.assertEqual(self.product.flag_reason, "Counterfeit item")

        flagged = self.client.get("/api/admin/products/flagged")
        self.assertEqual([p["id"] for p in flagged.data["data"]["products"]], [str(self.product.id)])

    def test_reverify_with_ai_releases_clean_flagged_product(self):
        self.client.post(
            "/api/admin/products/flag",
            {"product_id": str(self.product.id), "reason": "Looks off"},
            format="json",
        )
        container.configure_for_testing(ai=AIFactory.create_mock())

        response = self.client.post(f"/api/admin/products/{self.product.id}/reverify")

        self.assertFalse(response.data["data"]["degraded"])
        self.product.refresh_from_db()
        self.assertEqual(self.product.status, Product.STATUS_ACTIVE)
        self.assertFalse(self.product.is_flagged)
        self.assertEqual(self.product.status_history[-1]["status"], Product.STATUS_ACTIVE)

        flagged = self.client.get("/api/admin/products/flagged")
        self.assertEqual(flagged.data["data"]["products"], [])
