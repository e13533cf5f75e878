"""
ReviewService - Product Review Management

Handles create, update, delete, listing and helpful voting for product
reviews. Every write recomputes the product's rating aggregate inside the same
transaction, and review text goes through AI sentiment analysis that degrades
to a neutral default.
"""

import logging
from typing import Dict, List, Optional

from django.db import IntegrityError, transaction

from marketplace.catalog.domain.models import Product, Review, ReviewHelpfulVote
from marketplace.infra.observability.metrics import reviews_created_total
from marketplace.ordering.domain.models import Order
from marketplace.services.base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok
from utils.rbac import is_admin

from .review_analyzer import ReviewAnalyzer
from .review_metrics_service import ReviewMetricsService


logger = logging.getLogger(__name__)


class ReviewService(BaseService):
    """
    Service for managing product reviews.

    Responsibilities:
    - Create review (one per product and reviewer, verified purchase flag)
    - Update review (reviewer only, re-analysed when the content changes)
    - Delete review (reviewer or admin)
    - List approved reviews with an AI summary
    - Helpful votes (one per user, switching moves the count)

    Dependencies:
    - ReviewMetricsService: rating aggregate after every write
    - ReviewAnalyzer: sentiment and summaries
    """

    UPDATABLE_FIELDS = ("rating", "title", "content", "pros", "cons")

    def __init__(self, review_metrics_service: ReviewMetricsService, review_analyzer: ReviewAnalyzer):
        super().__init__()
        self.review_metrics_service = review_metrics_service
        self.review_analyzer = review_analyzer

    def _find_purchase(self, user, product) -> Optional[Order]:
        return Order.objects.filter(customer=user, items__product=product).order_by("-created_at").first()

    @BaseService.log_performance
    def create_review(
        self,
        user,
        product_id,
        rating: int,
        content: str,
        title: str = "",
        pros: Optional[List[str]] = None,
        cons: Optional[List[str]] = None,
    ) -> ServiceResult[Review]:
        """
        Create a review for a product.

        Args:
            user: Reviewer
            product_id: Product UUID
            rating: 1-5
            content: Review text
            title: Optional headline
            pros: Optional list of positives
            cons: Optional list of negatives

        Returns:
            ServiceResult with the created Review
        """
        try:
            product = Product.objects.filter(pk=product_id).first()
            if product is None:
                return service_err(ErrorCodes.PRODUCT_NOT_FOUND, "Product not found")

            if Review.objects.filter(product=product, reviewer=user).exists():
                return service_err(ErrorCodes.DUPLICATE_REVIEW, "You have already reviewed this product")

            purchase = self._find_purchase(user, product)
            analysis = self.review_analyzer.analyze_sentiment(content)

            try:
                with transaction.atomic():
                    review = Review.objects.create(
                        product=product,
                        reviewer=user,
                        order=purchase,
                        rating=rating,
                        title=title or "",
                        content=content,
                        pros=pros or [],
                        cons=cons or [],
                        is_verified_purchase=purchase is not None,
                        ai_analysis=analysis,
                    )
                    self.review_metrics_service.update_metrics(product.pk)
            except IntegrityError:
                # Concurrent create for the same pair
                return service_err(ErrorCodes.DUPLICATE_REVIEW, "You have already reviewed this product")

            reviews_created_total.labels(sentiment=analysis["sentiment"]).inc()
            self.logger.info(f"Created review {review.id} for product {product.pk} by user {user.pk}")
            return service_ok(review)

        except Exception as e:
            return self.internal_error("create_review", e)

    @BaseService.log_performance
    def update_review(self, user, review_id, changes: Dict) -> ServiceResult[Review]:
        """Apply a partial update. Only the reviewer may edit."""
        try:
            review = Review.objects.filter(pk=review_id).first()
            if review is None:
                return service_err(ErrorCodes.REVIEW_NOT_FOUND, "Review not found")

            if review.reviewer_id != user.pk:
                return service_err(ErrorCodes.PERMISSION_DENIED, "Not authorized")

            content_changed = "content" in changes and changes["content"] != review.content
            for field in self.UPDATABLE_FIELDS:
                if field in changes and changes[field] is not None:
                    setattr(review, field, changes[field])

            if content_changed:
                review.ai_analysis = self.review_analyzer.analyze_sentiment(review.content)

            with transaction.atomic():
                review.save()
                self.review_metrics_service.update_metrics(review.product_id)

            self.logger.info(f"Updated review {review.id}")
            return service_ok(review)

        except Exception as e:
            return self.internal_error("update_review", e)

    @BaseService.log_performance
    def delete_review(self, user, review_id) -> ServiceResult[bool]:
        """Hard delete. The reviewer or an admin may delete."""
        try:
            review = Review.objects.filter(pk=review_id).first()
            if review is None:
                return service_err(ErrorCodes.REVIEW_NOT_FOUND, "Review not found")

            if review.reviewer_id != user.pk and not is_admin(user):
                return service_err(ErrorCodes.PERMISSION_DENIED, "Not authorized")

            product_id = review.product_id
            with transaction.atomic():
                review.delete()
                self.review_metrics_service.update_metrics(product_id)

            self.logger.info(f"Deleted review {review_id}")
            return service_ok(True)

        except Exception as e:
            return self.internal_error("delete_review", e)

    def approved_reviews(self, product_id):
        return Review.objects.filter(product_id=product_id, status=Review.STATUS_APPROVED).select_related(
            "reviewer"
        ).order_by("-created_at")

    @BaseService.log_performance
    def list_product_reviews(self, product_id) -> ServiceResult[Dict]:
        """
        Approved reviews, newest first, plus an AI summary.

        Returns:
            ServiceResult with {"reviews": [Review], "summary": dict}
        """
        try:
            if not Product.objects.filter(pk=product_id).exists():
                return service_err(ErrorCodes.PRODUCT_NOT_FOUND, "Product not found")

            reviews = list(self.approved_reviews(product_id))
            return service_ok({"reviews": reviews, "summary": self.review_analyzer.summarize(reviews)})

        except Exception as e:
            return self.internal_error("list_product_reviews", e)

    @BaseService.log_performance
    def vote_helpful(self, user, review_id, is_helpful: bool = True) -> ServiceResult[Review]:
        """
        Record a helpful or not-helpful vote.

        One vote per user; changing a vote moves the count from the old bucket
        to the new one. Repeating the same vote changes nothing.
        """
        try:
            with transaction.atomic():
                review = Review.objects.select_for_update().filter(pk=review_id).first()
                if review is None:
                    return service_err(ErrorCodes.REVIEW_NOT_FOUND, "Review not found")

                vote = ReviewHelpfulVote.objects.filter(review=review, user=user).first()
                if vote is None:
                    ReviewHelpfulVote.objects.create(review=review, user=user, is_helpful=is_helpful)
                    self._bump(review, is_helpful, 1)
                elif vote.is_helpful != is_helpful:
                    self._bump(review, vote.is_helpful, -1)
                    self._bump(review, is_helpful, 1)
                    vote.is_helpful = is_helpful
                    vote.save(update_fields=["is_helpful"])

                review.save(update_fields=["helpful_count", "not_helpful_count"])

            self.logger.info(f"User {user.pk} voted {'helpful' if is_helpful else 'not helpful'} on review {review.id}")
            return service_ok(review)

        except Exception as e:
            return self.internal_error("vote_helpful", e)

    @staticmethod
    def _bump(review: Review, is_helpful: bool, delta: int):
        if is_helpful:
            review.helpful_count = max(0, review.helpful_count + delta)
        else:
            review.not_helpful_count = max(0, review.not_helpful_count + delta)
