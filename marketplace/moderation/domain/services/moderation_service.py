"""
ModerationService - Admin Moderation

Platform counts, seller application review and listing flags. Seller review is
delegated to the authentication SellerService; re-verification re-runs the
trust pipeline.
"""

import logging
from typing import Any, Dict, Optional

from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone

from authentication.domain.services import SellerService
from marketplace.catalog.domain.models import Product
from marketplace.catalog.domain.services.trust_service import TrustService
from marketplace.services.base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok


User = get_user_model()
logger = logging.getLogger(__name__)


class ModerationService(BaseService):
    """
    Dependencies:
    - SellerService: seller application workflow
    - TrustService: listing re-verification
    """

    def __init__(self, seller_service: SellerService, trust_service: TrustService):
        super().__init__()
        self.seller_service = seller_service
        self.trust_service = trust_service

    @BaseService.log_performance
    def analytics(self) -> ServiceResult[Dict[str, int]]:
        try:
            return service_ok(
                {
                    "total_users": User.objects.count(),
                    "total_sellers": User.objects.filter(role=User.ROLE_SELLER).count(),
                    "active_products": Product.objects.filter(status=Product.STATUS_ACTIVE).count(),
                    "flagged_products": Product.objects.filter(is_flagged=True).count(),
                }
            )
        except Exception as e:
            return self.internal_error("analytics", e)

    def pending_sellers(self):
        """Pending seller applications, oldest first."""
        return self.seller_service.pending_applications()

    def flagged_products(self):
        return Product.objects.filter(is_flagged=True).select_related("seller").order_by("-last_analyzed_at")

    @BaseService.log_performance
    def review_seller(self, admin_user, seller_id, action: str, reason: Optional[str] = None) -> ServiceResult:
        """Approve or reject a seller application."""
        result = self.seller_service.review_application(seller_id, action, admin_user, reason)
        if result.success:
            return service_ok(result.data["seller"])
        if result.status_code == 404:
            return service_err(ErrorCodes.SELLER_NOT_FOUND, result.message)
        if not result.is_server_error:
            return service_err(ErrorCodes.VALIDATION_ERROR, result.message)
        return service_err(ErrorCodes.INTERNAL_ERROR, "Something went wrong.")

    @BaseService.log_performance
    def flag_product(self, admin_user, product_id, reason: str) -> ServiceResult[Product]:
        """Manually flag a listing: status flagged, is_flagged set, reason recorded."""
        try:
            with transaction.atomic():
                product = Product.objects.select_for_update().filter(pk=product_id).first()
                if product is None:
                    return service_err(ErrorCodes.PRODUCT_NOT_FOUND, "Product not found")

                flagged_at = timezone.now()
                product.is_flagged = True
                product.flag_reason = reason
                product.last_analyzed_at = flagged_at
                # The stored analysis must agree with the flag columns
                product.ai_analysis = {
                    **(product.ai_analysis or {}),
                    "is_flagged": True,
                    "flag_reason": reason,
                    "last_analyzed_at": flagged_at.isoformat(),
                }
                product.record_status(Product.STATUS_FLAGGED, changed_by=admin_user, reason=reason)
                product.save(
                    update_fields=[
                        "is_flagged",
                        "flag_reason",
                        "ai_analysis",
                        "last_analyzed_at",
                        "status",
                        "status_history",
                        "updated_at",
                    ]
                )

            self.logger.info(f"Product {product.pk} flagged by admin {admin_user.pk}")
            return service_ok(product)

        except Exception as e:
            return self.internal_error("flag_product", e)

    @BaseService.log_performance
    def reverify_product(self, product_id) -> ServiceResult[Dict[str, Any]]:
        """
        Re-run trust scoring on an existing listing.

        The stored analysis is replaced. An active listing that comes back
        flagged is flagged; a flagged listing that comes back clean from a
        full (non-degraded) pass is released.
        """
        try:
            product = Product.objects.filter(pk=product_id).first()
            if product is None:
                return service_err(ErrorCodes.PRODUCT_NOT_FOUND, "Product not found")

            result = self.trust_service.verify_product(product)
            self.trust_service.apply_result(product, result, set_status=False)
            return service_ok({"product": product, "degraded": result.degraded})

        except Exception as e:
            return self.internal_error("reverify_product", e)
