from .moderation_serializers import FlagProductSerializer, PendingSellerSerializer, ReviewSellerSerializer

__all__ = ["FlagProductSerializer", "PendingSellerSerializer", "ReviewSellerSerializer"]
