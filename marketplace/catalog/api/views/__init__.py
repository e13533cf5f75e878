from .product_views import MyProductsView, ProductCompareView, ProductDetailView, ProductListCreateView
from .review_views import ProductReviewsView, ReviewDetailView, ReviewHelpfulView

__all__ = [
    "MyProductsView",
    "ProductCompareView",
    "ProductDetailView",
    "ProductListCreateView",
    "ProductReviewsView",
    "ReviewDetailView",
    "ReviewHelpfulView",
]
