from .product_serializers import (
    FlaggedProductSerializer,
    ProductCompareItemSerializer,
    ProductCompareSerializer,
    ProductCreateSerializer,
    ProductDetailSerializer,
    ProductListQuerySerializer,
    ProductListSerializer,
    ProductUpdateSerializer,
    SellerProductSerializer,
)
from .review_serializers import HelpfulVoteSerializer, ReviewCreateSerializer, ReviewSerializer, ReviewUpdateSerializer
from .user_serializers import ReviewerSerializer, SellerSummarySerializer

__all__ = [
    "FlaggedProductSerializer",
    "HelpfulVoteSerializer",
    "ProductCompareItemSerializer",
    "ProductCompareSerializer",
    "ProductCreateSerializer",
    "ProductDetailSerializer",
    "ProductListQuerySerializer",
    "ProductListSerializer",
    "ProductUpdateSerializer",
    "ReviewCreateSerializer",
    "ReviewSerializer",
    "ReviewUpdateSerializer",
    "ReviewerSerializer",
    "SellerProductSerializer",
    "SellerSummarySerializer",
]
