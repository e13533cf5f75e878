from decimal import Decimal

from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from infrastructure.ai import AIFactory
from infrastructure.container import container
from marketplace.catalog.domain.models import Review
from marketplace.tests.factories import (
    AdminFactory,
    OrderFactory,
    OrderItemFactory,
    ProductFactory,
    ReviewFactory,
    SellerFactory,
    UserFactory,
)


class ReviewViewIntegrationTest(TestCase):
    """Reviews, rating aggregate and helpful votes over HTTP"""

    def setUp(self):
        container.configure_for_testing()
        self.client = APIClient()
        self.seller = SellerFactory()
        self.buyer = UserFactory()
        self.other_user = UserFactory()
        self.product = ProductFactory(seller=self.seller, title="Noise Cancelling Headphones")

    def _review_url(self):
        return f"/api/products/{self.product.id}/reviews"

    def _post_review(self, rating=5, content="Great sound and the battery lasts all week."):
        return self.client.post(self._review_url(), {"rating": rating, "content": content}, format="json")

    def test_create_review_requires_login(self):
        response = self._post_review()

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_create_review_updates_rating_aggregate(self):
        ReviewFactory(product=self.product, reviewer=self.other_user, rating=3)
        self.client.force_authenticate(user=self.buyer)

        response = self._post_review(rating=5)

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["message"], "Review created")
        review = response.data["data"]["review"]
        self.assertFalse(review["is_verified_purchase"])
        self.assertEqual(review["ai_analysis"]["sentiment"], "neutral")

        self.product.refresh_from_db()
        self.assertEqual(self.product.rating_count, 2)
        self.assertEqual(self.product.rating_average, Decimal("4.0"))
        self.assertEqual(self.product.rating_distribution["5"], 1)
        self.assertEqual(self.product.rating_distribution["3"], 1)

    def test_buyer_review_is_verified_purchase(self):
        order = OrderFactory(customer=self.buyer)
        OrderItemFactory(order=order, product=self.product)
        self.client.force_authenticate(user=self.buyer)

        response = self._post_review()

        self.assertTrue(response.data["data"]["review"]["is_verified_purchase"])
        self.assertEqual(Review.objects.get(reviewer=self.buyer).order_id, order.id)

    def test_duplicate_review_rejected(self):
        self.client.force_authenticate(user=self.buyer)
        self._post_review()

        response = self._post_review(rating=1, content="Changed my mind about these completely.")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["message"], "You have already reviewed this product")
        self.assertEqual(Review.objects.filter(reviewer=self.buyer).count(), 1)

    def test_rating_out_of_range_is_validation_error(self):
        self.client.force_authenticate(user=self.buyer)

        response = self._post_review(rating=6)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["errors"][0]["field"], "rating")

    def test_review_for_unknown_product_returns_404(self):
        self.client.force_authenticate(user=self.buyer)

        response = self.client.post(
            "/api/products/00000000-0000-0000-0000-000000000000/reviews",
            {"rating": 4, "content": "Does this product even exist?"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_list_reviews_with_ai_summary(self):
        container.configure_for_testing(ai=AIFactory.create_mock())
        ReviewFactory(product=self.product, reviewer=self.buyer, rating=4)
        ReviewFactory(product=self.product, reviewer=self.other_user, rating=5, status=Review.STATUS_PENDING)

        response = self.client.get(self._review_url())

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data["data"]["reviews"]), 1)
        self.assertEqual(response.data["data"]["summary"]["overall_sentiment"], "positive")
        self.assertEqual(response.data["data"]["summary"]["recommendation_rate"], 85)

    def test_list_reviews_without_reviews_has_empty_summary(self):
        response = self.client.get(self._review_url())

        self.assertEqual(response.data["data"]["reviews"], [])
        self.assertEqual(response.data["data"]["summary"]["summary"], "No reviews available yet.")

    def test_reviewer_updates_review_and_rating_is_recomputed(self):
        review = ReviewFactory(product=self.product, reviewer=self.buyer, rating=2)
        self.client.force_authenticate(user=self.buyer)

        response = self.client.put(f"/api/reviews/{review.id}", {"rating": 4}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["data"]["review"]["rating"], 4)
        self.product.refresh_from_db()
        self.assertEqual(self.product.rating_average, Decimal("4.0"))

    def test_only_reviewer_can_update(self):
        review = ReviewFactory(product=self.product, reviewer=self.buyer, rating=2)
        self.client.force_authenticate(user=AdminFactory())

        response = self.client.put(f"/api/reviews/{review.id}", {"rating": 5}, format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_admin_can_delete_any_review(self):
        review = ReviewFactory(product=self.product, reviewer=self.buyer, rating=1)
        self.client.force_authenticate(user=AdminFactory())

        response = self.client.delete(f"/api/reviews/{review.id}")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Review.objects.filter(pk=review.id).exists())
        self.product.refresh_from_db()
        self.assertEqual(self.product.rating_count, 0)
        self.assertEqual(self.product.rating_average, Decimal("0"))

    def test_other_user_cannot_delete(self):
        review = ReviewFactory(product=self.product, reviewer=self.buyer)
        self.client.force_authenticate(user=self.other_user)

        response = self.client.delete(f"/api/reviews/{review.id}")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertTrue(Review.objects.filter(pk=review.id).exists())

    def test_helpful_vote_is_counted_once_and_can_move(self):
        review = ReviewFactory(product=self.product, reviewer=self.buyer)
        self.client.force_authenticate(user=self.other_user)
        url = f"/api/reviews/{review.id}/helpful"

        self.client.post(url, {"is_helpful": True}, format="json")
        response = self.client.post(url, {"is_helpful": True}, format="json")
        self.assertEqual(response.data["data"], {"helpful_count": 1, "not_helpful_count": 0})

        response = self.client.post(url, {"is_helpful": False}, format="json")
        self.assertEqual(response.data["data"], {"helpful_count": 0, "not_helpful_count": 1})

    def test_helpful_vote_on_unknown_review_returns_404(self):
        self.client.force_authenticate(user=self.other_user)

        response = self.client.post(
            "/api/reviews/00000000-0000-0000-0000-000000000000/helpful", {"is_helpful": True}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["message"], "Review not found")
