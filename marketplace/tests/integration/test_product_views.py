from decimal import Decimal

from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from authentication.domain.models import SellerApplication
from infrastructure.container import container
from marketplace.catalog.domain.models import Product
from marketplace.tests.factories import (
    AdminFactory,
    DigitalProductFactory,
    ProductFactory,
    ReviewFactory,
    SellerFactory,
    UserFactory,
)


class ProductViewIntegrationTest(TestCase):
    """Listing, product page, seller CRUD and compare over HTTP"""

    def setUp(self):
        container.configure_for_testing()
        self.client = APIClient()
        self.seller = SellerFactory()
        self.other_seller = SellerFactory()
        self.buyer = UserFactory()

        self.lamp = ProductFactory(seller=self.seller, title="Desk Lamp", price=Decimal("15.00"))
        self.calculator = ProductFactory(
            seller=self.seller, title="Graphing Calculator", price=Decimal("60.00"), category="electronics"
        )
        self.notes = DigitalProductFactory(seller=self.other_seller, title="Calculus Notes", price=Decimal("5.00"))

    def test_list_shows_only_active_published_products(self):
        ProductFactory(seller=self.seller, status=Product.STATUS_PENDING)
        ProductFactory(seller=self.seller, is_published=False)

        response = self.client.get("/api/products")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data["success"])
        self.assertEqual(response.data["data"]["total"], 3)
        self.assertEqual(response.data["data"]["page"], 1)
        self.assertEqual(response.data["data"]["limit"], 10)

    def test_list_filters_by_price_range_and_sorts(self):
        response = self.client.get("/api/products", {"min_price": "10", "sort": "price_desc"})

        titles = [p["title"] for p in response.data["data"]["products"]]
        self.assertEqual(titles, ["Graphing Calculator", "Desk Lamp"])

    def test_list_search_matches_title(self):
        response = self.client.get("/api/products", {"search": "calculus"})

        self.assertEqual(response.data["data"]["total"], 1)
        self.assertEqual(response.data["data"]["products"][0]["title"], "Calculus Notes")

    def test_list_limit_is_clamped(self):
        response = self.client.get("/api/products", {"limit": "500"})

        self.assertEqual(response.data["data"]["limit"], 50)

    def test_product_page_by_slug_counts_view_and_hides_file_url(self):
        ReviewFactory(product=self.notes, reviewer=self.buyer, rating=5)

        response = self.client.get(f"/api/products/{self.notes.slug}")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        product = response.data["data"]["product"]
        self.assertEqual(product["id"], str(self.notes.id))
        self.assertNotIn("file_url", product["digital_details"])
        self.assertEqual(len(response.data["data"]["reviews"]), 1)

        self.notes.refresh_from_db()
        self.assertEqual(self.notes.view_count, 1)

    def test_owner_sees_trust_analysis_on_product_page(self):
        self.client.force_authenticate(user=self.seller)

        response = self.client.get(f"/api/products/{self.lamp.slug}")

        self.assertIn("suspicion_score", response.data["data"]["product"])

    def test_unknown_slug_returns_404(self):
        response = self.client.get("/api/products/no-such-product")

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["message"], "Product not found")

    def test_create_requires_approved_seller(self):
        SellerApplication.objects.create(user=self.buyer, business_name="Pending Shop", description="Soon")
        self.client.force_authenticate(user=self.buyer)

        response = self.client.post("/api/products", {"title": "Anything"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["message"], "Seller account not approved")

    def test_create_goes_active_when_scoring_is_unavailable(self):
        self.client.force_authenticate(user=self.seller)

        response = self.client.post(
            "/api/products",
            {
                "title": "Mini Fridge",
                "description": "Compact fridge, perfect for a dorm room.",
                "price": "50.00",
                "stock": 1,
                "category": "electronics",
                "product_type": "physical",
                "tags": ["Dorm", " fridge "],
            },
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        product = response.data["data"]["product"]
        self.assertEqual(product["status"], Product.STATUS_ACTIVE)
        self.assertEqual(product["tags"], ["dorm", "fridge"])
        self.assertTrue(product["ai_analysis"]["degraded"])
        self.assertEqual(product["status_history"][0]["status"], Product.STATUS_PENDING)

    def test_create_validation_error(self):
        self.client.force_authenticate(user=self.seller)

        response = self.client.post(
            "/api/products",
            {"title": "ab", "description": "short", "price": "-1", "category": "x", "product_type": "physical"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["message"], "Validation failed")
        fields = {error["field"] for error in response.data["errors"]}
        self.assertTrue({"title", "description", "price", "category"}.issubset(fields))

    def test_create_with_digital_file_forces_digital_type(self):
        self.client.force_authenticate(user=self.seller)
        upload = SimpleUploadedFile("notes.pdf", b"%PDF-1.4 lecture notes", content_type="application/pdf")

        response = self.client.post(
            "/api/products",
            {
                "title": "Organic Chemistry Notes",
                "description": "Full semester of handwritten notes, scanned.",
                "price": "7.50",
                "category": "study-materials",
                "product_type": "physical",
                "digital_file": upload,
            },
            format="multipart",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        product = response.data["data"]["product"]
        self.assertEqual(product["product_type"], Product.TYPE_DIGITAL)
        self.assertEqual(product["digital_details"]["file_type"], "application/pdf")
        self.assertEqual(product["digital_details"]["download_limit"], -1)

    def test_create_rejects_unsupported_image_type(self):
        self.client.force_authenticate(user=self.seller)
        upload = SimpleUploadedFile("script.exe", b"MZ", content_type="application/octet-stream")

        response = self.client.post(
            "/api/products",
            {
                "title": "Desk Chair",
                "description": "Ergonomic chair, barely used.",
                "price": "40.00",
                "category": "electronics",
                "product_type": "physical",
                "images": [upload],
            },
            format="multipart",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("Unsupported file type", response.data["message"])

    def test_my_products_lists_every_status(self):
        ProductFactory(seller=self.seller, status=Product.STATUS_REMOVED)
        self.client.force_authenticate(user=self.seller)

        response = self.client.get("/api/products/mine")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["data"]["total"], 3)
        self.assertEqual(response.data["data"]["limit"], 20)

        response = self.client.get("/api/products/mine", {"status": Product.STATUS_REMOVED})
        self.assertEqual(response.data["data"]["total"], 1)

    def test_owner_updates_product_and_status_is_recorded(self):
        self.client.force_authenticate(user=self.seller)

        response = self.client.put(
            f"/api/products/{self.lamp.id}",
            {"price": "12.00", "status": Product.STATUS_INACTIVE},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["message"], "Product updated")
        self.lamp.refresh_from_db()
        self.assertEqual(self.lamp.price, Decimal("12.00"))
        self.assertEqual(self.lamp.status, Product.STATUS_INACTIVE)
        self.assertEqual(self.lamp.status_history[-1]["status"], Product.STATUS_INACTIVE)

    def test_other_seller_cannot_update(self):
        self.client.force_authenticate(user=self.other_seller)

        response = self.client.put(f"/api/products/{self.lamp.id}", {"price": "1.00"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.lamp.refresh_from_db()
        self.assertEqual(self.lamp.price, Decimal("15.00"))

    def test_admin_can_update_any_product(self):
        self.client.force_authenticate(user=AdminFactory())

        response = self.client.put(f"/api/products/{self.lamp.id}", {"stock": 3}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.lamp.refresh_from_db()
        self.assertEqual(self.lamp.stock, 3)

    def test_update_with_non_uuid_key_returns_404(self):
        self.client.force_authenticate(user=self.seller)

        response = self.client.put("/api/products/desk-lamp", {"price": "1.00"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["message"], "Product not found")

    def test_delete_is_soft(self):
        self.client.force_authenticate(user=self.seller)

        response = self.client.delete(f"/api/products/{self.lamp.id}")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.lamp.refresh_from_db()
        self.assertEqual(self.lamp.status, Product.STATUS_REMOVED)

        listing = self.client.get("/api/products")
        ids = [p["id"] for p in listing.data["data"]["products"]]
        self.assertNotIn(str(self.lamp.id), ids)

    def test_compare_needs_two_products(self):
        response = self.client.post("/api/products/compare", {"ids": [str(self.lamp.id)]}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data["data"]["products"]), 1)
        self.assertIsNone(response.data["data"]["comparison"]["winner"])

    def test_compare_falls_back_when_ai_is_unavailable(self):
        response = self.client.post(
            "/api/products/compare",
            {"ids": [str(self.lamp.id), str(self.calculator.id)]},
            format="json",
        )

        self.assertEqual(len(response.data["data"]["products"]), 2)
        self.assertEqual(response.data["data"]["comparison"]["comparison"], "Unable to generate comparison.")
