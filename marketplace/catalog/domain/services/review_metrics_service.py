"""
ReviewMetricsService - Product Rating Aggregates

Recomputes a product's rating average, count and star distribution from all
of its reviews. Called inside the transaction of every review write, so the
cached fields on Product never drift from the review rows.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict

from django.db.models import Count

from marketplace.catalog.domain.models import Product, Review
from marketplace.services.base import BaseService, ServiceResult, service_ok


logger = logging.getLogger(__name__)


def empty_distribution() -> Dict[str, int]:
    return {str(star): 0 for star in range(1, 6)}


class ReviewMetricsService(BaseService):
    """
    Service for product review aggregates.

    Responsibilities:
    - Rating distribution (star breakdown)
    - Average rating rounded to one decimal
    - Persisting the aggregate on the product
    """

    def get_rating_distribution(self, product_id) -> Dict[str, int]:
        """Count per star level over every review of the product."""
        distribution = empty_distribution()
        rating_counts = (
            Review.objects.filter(product_id=product_id).values("rating").annotate(count=Count("id")).order_by()
        )
        for item in rating_counts:
            distribution[str(item["rating"])] = item["count"]
        return distribution

    @staticmethod
    def average_from_distribution(distribution: Dict[str, int]) -> Decimal:
        count = sum(distribution.values())
        if not count:
            return Decimal("0.0")
        total = sum(int(star) * hits for star, hits in distribution.items())
        return (Decimal(total) / Decimal(count)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)

    @BaseService.log_performance
    def update_metrics(self, product_id) -> ServiceResult[Dict]:
        """
        Recompute and store the rating aggregate for a product.

        Must run inside the caller's transaction. Exceptions propagate so the
        review write rolls back with it.

        Returns:
            ServiceResult with {average, count, distribution}
        """
        distribution = self.get_rating_distribution(product_id)
        count = sum(distribution.values())
        average = self.average_from_distribution(distribution)

        Product.objects.filter(pk=product_id).update(
            rating_average=average, rating_count=count, rating_distribution=distribution
        )

        self.logger.info(f"Rating for product {product_id}: {average} over {count} reviews")
        return service_ok({"average": average, "count": count, "distribution": distribution})
