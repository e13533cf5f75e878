from .seller import SellerApplication
from .user import CustomUser

__all__ = [
    "CustomUser",
    "SellerApplication",
]
