from authentication.domain.models import CustomUser, SellerApplication

__all__ = ["CustomUser", "SellerApplication"]
