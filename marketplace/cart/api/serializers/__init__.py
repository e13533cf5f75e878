from .cart_serializers import (
    AddToCartSerializer,
    CartOutputSerializer,
    CartProductSerializer,
    UpdateCartSerializer,
)

__all__ = ["AddToCartSerializer", "CartOutputSerializer", "CartProductSerializer", "UpdateCartSerializer"]
