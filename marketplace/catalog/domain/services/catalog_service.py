"""
CatalogService - Product CRUD & Listing

Handles product browsing, seller listings and CRUD operations. New listings
go through media upload and trust scoring before they are returned.
"""

import logging
from typing import Any, Dict, List, Optional

from django.core.paginator import Paginator
from django.db import transaction
from django.db.models import F

from infrastructure.tracing import get_tracer
from marketplace.catalog.domain.models import Product, Review
from marketplace.filters import ProductFilter
from marketplace.services.base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok
from utils.rbac import is_owner_or_admin

from .review_analyzer import ReviewAnalyzer
from .trust_service import TrustService
from .upload_service import UploadService


logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)

MAX_PAGE_SIZE = 50
DEFAULT_PAGE_SIZE = 10
MY_PRODUCTS_PAGE_SIZE = 20

CREATE_FIELDS = (
    "title",
    "description",
    "price",
    "stock",
    "category",
    "product_type",
    "condition",
    "tags",
    "physical_details",
    "digital_details",
    "is_published",
)
UPDATE_FIELDS = ("title", "description", "price", "stock", "status", "category", "product_type", "condition")


def clamp_page(page, limit, default_limit=DEFAULT_PAGE_SIZE):
    try:
        page = max(1, int(page or 1))
    except (TypeError, ValueError):
        page = 1
    try:
        limit = int(limit or default_limit)
    except (TypeError, ValueError):
        limit = default_limit
    return page, min(max(1, limit), MAX_PAGE_SIZE)


class CatalogService(BaseService):
    """
    Service for managing product catalog operations.

    Responsibilities:
    - List active, published products with filtering and pagination
    - List a seller's own products
    - Get product details by slug (counts a view)
    - Create products (upload, then trust scoring)
    - Update and soft delete products (owner or admin)
    - Compare products by their reviews

    Dependencies:
    - UploadService: listing images and digital files
    - TrustService: fraud scoring of new listings
    - ReviewAnalyzer: review comparison
    """

    def __init__(self, upload_service: UploadService, trust_service: TrustService, review_analyzer: ReviewAnalyzer):
        super().__init__()
        self.upload_service = upload_service
        self.trust_service = trust_service
        self.review_analyzer = review_analyzer

    @staticmethod
    def _paginate(queryset, page: int, limit: int) -> Dict[str, Any]:
        paginator = Paginator(queryset, limit)
        page_obj = paginator.get_page(page)
        return {
            "products": list(page_obj.object_list) if page <= paginator.num_pages else [],
            "total": paginator.count,
            "page": page,
            "limit": limit,
        }

    @BaseService.log_performance
    def list_products(self, params: Optional[Dict[str, Any]] = None) -> ServiceResult[Dict[str, Any]]:
        """
        List active, published products.

        Args:
            params: query parameters (page, limit, category, min_price,
                max_price, search, sort, featured)

        Returns:
            ServiceResult with {"products", "total", "page", "limit"}
        """
        with tracer.start_as_current_span("catalog_list_products") as span:
            params = params or {}
            page, limit = clamp_page(params.get("page"), params.get("limit"))
            span.set_attribute("page", page)

            try:
                queryset = Product.objects.filter(status=Product.STATUS_ACTIVE, is_published=True).select_related(
                    "seller"
                )
                filterset = ProductFilter(params, queryset=queryset)
                if not filterset.is_valid():
                    return service_err(ErrorCodes.VALIDATION_ERROR, "Invalid filter parameters")

                result = self._paginate(filterset.qs, page, limit)
                span.set_attribute("result.count", result["total"])
                return service_ok(result)

            except Exception as e:
                span.record_exception(e)
                return self.internal_error("list_products", e)

    @BaseService.log_performance
    def list_my_products(self, user, status: Optional[str] = None, page=1, limit=None) -> ServiceResult[Dict]:
        """The seller's own listings in every status, newest first."""
        try:
            page, limit = clamp_page(page, limit, MY_PRODUCTS_PAGE_SIZE)
            queryset = Product.objects.filter(seller=user)
            if status:
                queryset = queryset.filter(status=status)
            return service_ok(self._paginate(queryset.order_by("-created_at"), page, limit))
        except Exception as e:
            return self.internal_error("list_my_products", e)

    @BaseService.log_performance
    def get_product(self, slug: str, track_view: bool = True) -> ServiceResult[Dict[str, Any]]:
        """
        Product by slug with its approved reviews.

        Returns:
            ServiceResult with {"product": Product, "reviews": [Review]}
        """
        try:
            product = Product.objects.select_related("seller").filter(slug=slug).first()
            if product is None:
                return service_err(ErrorCodes.PRODUCT_NOT_FOUND, "Product not found")

            if track_view:
                Product.objects.filter(pk=product.pk).update(view_count=F("view_count") + 1)
                product.view_count += 1

            reviews = list(
                Review.objects.filter(product=product, status=Review.STATUS_APPROVED)
                .select_related("reviewer")
                .order_by("-created_at")
            )
            return service_ok({"product": product, "reviews": reviews})

        except Exception as e:
            return self.internal_error("get_product", e)

    @BaseService.log_performance
    def create_product(
        self, user, data: Dict[str, Any], images: Optional[List] = None, digital_file=None
    ) -> ServiceResult[Product]:
        """
        Create a listing for the calling seller.

        Steps:
        1. Upload images (first is primary) and the digital file
        2. A digital file forces product_type=digital and fills digital_details
        3. Save the product
        4. Run trust scoring and persist the analysis and resulting status

        Args:
            user: Approved seller
            data: validated product fields
            images: uploaded image files
            digital_file: uploaded downloadable file

        Returns:
            ServiceResult with the created Product
        """
        with tracer.start_as_current_span("catalog_create_product") as span:
            try:
                fields = {name: data[name] for name in CREATE_FIELDS if name in data and data[name] is not None}

                if images:
                    uploaded = self.upload_service.upload_images(images, title=fields.get("title", ""))
                    if not uploaded.ok:
                        return uploaded
                    fields["images"] = uploaded.value

                if digital_file is not None:
                    uploaded = self.upload_service.upload_digital_file(digital_file)
                    if not uploaded.ok:
                        return uploaded
                    fields["product_type"] = Product.TYPE_DIGITAL
                    fields["digital_details"] = {**(fields.get("digital_details") or {}), **uploaded.value}

                with transaction.atomic():
                    product = Product(seller=user, **fields)
                    product.record_status(Product.STATUS_PENDING, changed_by=user, reason="Listing created")
                    product.save()

                span.set_attribute("product.id", str(product.pk))
                result = self.trust_service.verify_product(product)
                self.trust_service.apply_result(product, result)

                self.logger.info(f"Created product {product.pk} ({product.status}) for seller {user.pk}")
                return service_ok(product)

            except Exception as e:
                span.record_exception(e)
                return self.internal_error("create_product", e)

    @staticmethod
    def can_manage(user, product: Product) -> bool:
        return is_owner_or_admin(user, product.seller_id)

    @BaseService.log_performance
    def update_product(self, user, product_id, data: Dict[str, Any], images: Optional[List] = None):
        """
        Update a listing (owner or admin).

        Only title, description, price, stock, status, category, product_type
        and condition are writable. New images are appended. A status change
        is recorded in status_history.
        """
        try:
            with transaction.atomic():
                product = Product.objects.select_for_update().filter(pk=product_id).first()
                if product is None:
                    return service_err(ErrorCodes.PRODUCT_NOT_FOUND, "Product not found")

                if not self.can_manage(user, product):
                    return service_err(ErrorCodes.PERMISSION_DENIED, "Not authorized")

                for name in UPDATE_FIELDS:
                    if name == "status" or name not in data or data[name] is None:
                        continue
                    setattr(product, name, data[name])

                new_status = data.get("status")
                if new_status and new_status != product.status:
                    product.record_status(new_status, changed_by=user, reason="Updated by seller")

                if images:
                    uploaded = self.upload_service.upload_images(images, title=product.title)
                    if not uploaded.ok:
                        return uploaded
                    for image in uploaded.value:
                        image["is_primary"] = False
                    product.images = list(product.images or []) + uploaded.value

                product.save()

            self.logger.info(f"Updated product {product.pk} by user {user.pk}")
            return service_ok(product)

        except Exception as e:
            return self.internal_error("update_product", e)

    @BaseService.log_performance
    def delete_product(self, user, product_id) -> ServiceResult[Product]:
        """Soft delete: status becomes removed, the row stays."""
        try:
            with transaction.atomic():
                product = Product.objects.select_for_update().filter(pk=product_id).first()
                if product is None:
                    return service_err(ErrorCodes.PRODUCT_NOT_FOUND, "Product not found")

                if not self.can_manage(user, product):
                    return service_err(ErrorCodes.PERMISSION_DENIED, "Not authorized")

                product.record_status(Product.STATUS_REMOVED, changed_by=user, reason="Removed by owner")
                product.save(update_fields=["status", "status_history", "updated_at"])

            self.logger.info(f"Soft deleted product {product.pk}")
            return service_ok(product)

        except Exception as e:
            return self.internal_error("delete_product", e)

    @BaseService.log_performance
    def compare_products(self, product_ids: List) -> ServiceResult[Dict[str, Any]]:
        """
        Light projection of the requested products plus an AI comparison of
        their reviews.
        """
        try:
            products = list(Product.objects.filter(pk__in=product_ids))
            reviews_by_product = {product.pk: [] for product in products}
            for review in Review.objects.filter(product__in=products).order_by("-created_at"):
                reviews_by_product[review.product_id].append(review)

            comparison = self.review_analyzer.compare(
                [{"product_name": product.title, "reviews": reviews_by_product[product.pk]} for product in products]
            )
            return service_ok({"products": products, "comparison": comparison})

        except Exception as e:
            return self.internal_error("compare_products", e)
