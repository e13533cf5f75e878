from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .cart.api.views import CartViewSet
from .catalog.api.views import (
    MyProductsView,
    ProductCompareView,
    ProductDetailView,
    ProductListCreateView,
    ProductReviewsView,
    ReviewDetailView,
    ReviewHelpfulView,
)
from .moderation.api.views import (
    AnalyticsView,
    FlaggedProductsView,
    FlagProductView,
    PendingSellersView,
    ReverifyProductView,
    ReviewSellerView,
)
from .ordering.api.views import OrderViewSet

router = DefaultRouter(trailing_slash=False)
router.include_root_view = False
router.register(r"cart", CartViewSet, basename="cart")
router.register(r"orders", OrderViewSet, basename="order")

app_name = "marketplace"

urlpatterns = [
    # Products (fixed paths before the slug/id route)
    path("products", ProductListCreateView.as_view(), name="product-list"),
    path("products/mine", MyProductsView.as_view(), name="product-mine"),
    path("products/compare", ProductCompareView.as_view(), name="product-compare"),
    path("products/<uuid:product_id>/reviews", ProductReviewsView.as_view(), name="product-reviews"),
    path("products/<str:key>", ProductDetailView.as_view(), name="product-detail"),
    # Reviews
    path("reviews/<uuid:review_id>", ReviewDetailView.as_view(), name="review-detail"),
    path("reviews/<uuid:review_id>/helpful", ReviewHelpfulView.as_view(), name="review-helpful"),
    # Admin moderation
    path("admin/analytics", AnalyticsView.as_view(), name="admin-analytics"),
    path("admin/sellers/pending", PendingSellersView.as_view(), name="admin-pending-sellers"),
    path("admin/sellers/review", ReviewSellerView.as_view(), name="admin-review-seller"),
    path("admin/products/flagged", FlaggedProductsView.as_view(), name="admin-flagged-products"),
    path("admin/products/flag", FlagProductView.as_view(), name="admin-flag-product"),
    path("admin/products/<uuid:product_id>/reverify", ReverifyProductView.as_view(), name="admin-reverify-product"),
    # Cart and orders
    path("", include(router.urls)),
]
