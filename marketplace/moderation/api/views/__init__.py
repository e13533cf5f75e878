from .moderation_views import (
    AnalyticsView,
    FlaggedProductsView,
    FlagProductView,
    PendingSellersView,
    ReverifyProductView,
    ReviewSellerView,
)

__all__ = [
    "AnalyticsView",
    "FlaggedProductsView",
    "FlagProductView",
    "PendingSellersView",
    "ReverifyProductView",
    "ReviewSellerView",
]
